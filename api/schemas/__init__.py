# api/schemas/__init__.py
from .book import (
    LanguageSchema, AuthorSchema, EditionBase, EditionSchema,
    WorkScoreSchema, WorkSchema, SearchDoc, SearchResult
)
from .user import (
    UserCreate, LoginRequest, User, AddBookRequest, AddBookResponse,
    StatusUpdate, ReviewRequest, Review, StarRating, UserBook, UserBookList
)
