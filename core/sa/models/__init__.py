# core/sa/models/__init__.py
from .base import Base, TimestampMixin, LastSyncedMixin
from .author import Author
from .subject import Subject, Language
from .work import Work, WorkSubject
from .edition import Edition, AuthorBook, EditionLanguage
from .user import User, UserBook, Review, Status

__all__ = [
    'Base',
    'TimestampMixin',
    'LastSyncedMixin',
    'Work',
    'WorkSubject',
    'Edition',
    'AuthorBook',
    'EditionLanguage',
    'Author',
    'Subject',
    'Language',
    'User',
    'UserBook',
    'Review',
    'Status'
]
