# core/openlibrary/__init__.py
from .client import OpenLibraryClient
from .edition import EditionFetcher
from .work import WorkFetcher
from .author import AuthorFetcher
from .search import SearchFetcher
from .languages import LanguagesFetcher

__all__ = [
    'OpenLibraryClient',
    'EditionFetcher',
    'WorkFetcher',
    'AuthorFetcher',
    'SearchFetcher',
    'LanguagesFetcher'
]
