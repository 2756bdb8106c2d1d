# core/sa/repositories/edition.py
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from ..models import Edition, AuthorBook, EditionLanguage, Author, Language
from .base import InsertResult, insert_or_ignore

EDITION_COLUMNS = (
    'edition_olid', 'work_olid', 'title', 'publish_date',
    'publishers', 'isbn', 'description', 'cover_url'
)

class EditionRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_olid(self, edition_olid: str) -> Optional[Edition]:
        """Get a cached edition by its OLID"""
        return self.session.query(Edition).filter(Edition.edition_olid == edition_olid).first()

    def exists(self, edition_olid: str) -> bool:
        return (
            self.session.query(Edition.edition_olid)
            .filter(Edition.edition_olid == edition_olid)
            .first()
        ) is not None

    def list_olids(self) -> List[str]:
        """Get every cached edition OLID"""
        return list(self.session.execute(select(Edition.edition_olid)).scalars())

    def get_by_work(self, work_olid: str) -> List[Edition]:
        """Get the cached editions of a work"""
        return (
            self.session.query(Edition)
            .filter(Edition.work_olid == work_olid)
            .order_by(Edition.edition_olid)
            .all()
        )

    def create(self, edition_data: Dict[str, Any]) -> InsertResult:
        """Insert an edition row from a normalized Open Library record.

        The parent work must already be cached.

        Args:
            edition_data: Dictionary with edition_olid, work_olid and title; extra keys are ignored

        Returns:
            InsertResult.ALREADY_EXISTED when the OLID is already cached
        """
        values = {column: edition_data.get(column) for column in EDITION_COLUMNS}
        values['title'] = values['title'] or ''
        publishers = values['publishers']
        if isinstance(publishers, (list, tuple)):
            values['publishers'] = ', '.join(str(p) for p in publishers) or None
        return insert_or_ignore(self.session, Edition, values, ['edition_olid'])

    def add_author(self, edition_olid: str, author_olid: str) -> InsertResult:
        return insert_or_ignore(
            self.session,
            AuthorBook,
            {'author_olid': author_olid, 'edition_olid': edition_olid},
            ['author_olid', 'edition_olid']
        )

    def add_language(self, edition_olid: str, language_id: int) -> InsertResult:
        return insert_or_ignore(
            self.session,
            EditionLanguage,
            {'edition_olid': edition_olid, 'language_id': language_id},
            ['edition_olid', 'language_id']
        )

    def get_authors(self, edition_olid: str) -> List[Author]:
        """Get the authors linked to an edition"""
        return (
            self.session.query(Author)
            .join(AuthorBook, AuthorBook.author_olid == Author.author_olid)
            .filter(AuthorBook.edition_olid == edition_olid)
            .order_by(Author.name)
            .all()
        )

    def get_languages(self, edition_olid: str) -> List[Language]:
        """Get the languages linked to an edition"""
        return (
            self.session.query(Language)
            .join(EditionLanguage, EditionLanguage.language_id == Language.id)
            .filter(EditionLanguage.edition_olid == edition_olid)
            .order_by(Language.id)
            .all()
        )
