"""CLI package for openshelf"""
from .main import cli

__all__ = ['cli']
