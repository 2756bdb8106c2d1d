# api/schemas/user.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from .book import AuthorSchema, LanguageSchema, WorkScoreSchema

class UserCreate(BaseModel):
    username: str
    email: str
    password: str

class LoginRequest(BaseModel):
    username: str
    password: str

class User(BaseModel):
    id: int
    username: str
    email: str
    status: str
    image: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class AddBookRequest(BaseModel):
    edition_olid: str
    status_id: int = 1

class AddBookResponse(BaseModel):
    edition_olid: str
    result: str

class StatusUpdate(BaseModel):
    status_id: int

class ReviewRequest(BaseModel):
    score: int = Field(ge=1, le=5)
    review: Optional[str] = None

class Review(BaseModel):
    user_book_id: int
    edition_olid: str
    score: int
    review: Optional[str] = None

class StarRating(BaseModel):
    filled: int
    unfilled: int
    not_reviewed: bool

    model_config = ConfigDict(from_attributes=True)

class UserBook(BaseModel):
    user_book_id: int
    edition_olid: str
    work_olid: str
    title: str
    work_title: Optional[str] = None
    publish_date: Optional[str] = None
    publishers: Optional[str] = None
    isbn: Optional[str] = None
    cover_url: Optional[str] = None
    status_id: int
    status: str
    score: Optional[int] = None
    review: Optional[str] = None
    added_at: Optional[datetime] = None
    authors: List[AuthorSchema] = []
    languages: List[LanguageSchema] = []
    stars: StarRating
    work_score: WorkScoreSchema

    model_config = ConfigDict(from_attributes=True)

class UserBookList(BaseModel):
    items: List[UserBook]
    total: int
