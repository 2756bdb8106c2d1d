# core/sa/repositories/__init__.py
from .base import InsertResult, insert_or_ignore, insert_or_get
from .work import WorkRepository
from .edition import EditionRepository
from .author import AuthorRepository
from .subject import SubjectRepository, LanguageRepository
from .user import UserRepository, StatusRepository
from .library import LibraryRepository

__all__ = [
    'InsertResult',
    'insert_or_ignore',
    'insert_or_get',
    'WorkRepository',
    'EditionRepository',
    'AuthorRepository',
    'SubjectRepository',
    'LanguageRepository',
    'UserRepository',
    'StatusRepository',
    'LibraryRepository'
]
