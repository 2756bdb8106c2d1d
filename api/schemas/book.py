# api/schemas/book.py
from typing import Optional, List, Union
from pydantic import BaseModel, ConfigDict

class LanguageSchema(BaseModel):
    id: Optional[int] = None
    language: str
    key: str

    model_config = ConfigDict(from_attributes=True)

class AuthorSchema(BaseModel):
    author_olid: str
    name: Optional[str] = None
    bio: Optional[str] = None
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    pic_url: Optional[str] = None
    is_cached: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)

class EditionBase(BaseModel):
    edition_olid: str
    work_olid: Optional[str] = None
    title: Optional[str] = None
    publish_date: Optional[str] = None
    # Stored as a joined string, returned by Open Library as a list
    publishers: Optional[Union[str, List[str]]] = None
    isbn: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class EditionSchema(EditionBase):
    authors: List[AuthorSchema] = []
    languages: List[LanguageSchema] = []
    is_cached: bool

class WorkScoreSchema(BaseModel):
    average: Optional[float] = None
    rounded: Optional[int] = None
    review_count: int

    model_config = ConfigDict(from_attributes=True)

class WorkSchema(BaseModel):
    work_olid: str
    title: Optional[str] = None
    first_publication_date: Optional[str] = None
    description: Optional[str] = None
    subjects: List[str] = []
    author_olids: List[str] = []
    editions: List[EditionBase] = []
    score: Optional[WorkScoreSchema] = None
    is_cached: bool

    model_config = ConfigDict(from_attributes=True)

class SearchDoc(BaseModel):
    work_olid: str
    title: Optional[str] = None
    author_names: List[str] = []
    author_olids: List[str] = []
    first_publish_year: Optional[int] = None
    cover_edition_olid: Optional[str] = None
    cover_id: Optional[int] = None
    edition_count: Optional[int] = None
    languages: List[str] = []

class SearchResult(BaseModel):
    num_found: int
    page: Optional[int] = None
    docs: List[SearchDoc]
