# core/sa/__init__.py
from .database import Database
from .models import (
    Base, Work, Edition, Author, Subject, Language,
    WorkSubject, AuthorBook, EditionLanguage,
    User, UserBook, Review, Status
)

__all__ = [
    'Database',
    'Base',
    'Work',
    'Edition',
    'Author',
    'Subject',
    'Language',
    'WorkSubject',
    'AuthorBook',
    'EditionLanguage',
    'User',
    'UserBook',
    'Review',
    'Status'
]
