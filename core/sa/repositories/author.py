# core/sa/repositories/author.py
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from ..models import Author
from .base import InsertResult, insert_or_ignore

AUTHOR_COLUMNS = ('author_olid', 'name', 'bio', 'birth_date', 'death_date', 'pic_url')

class AuthorRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_olid(self, author_olid: str) -> Optional[Author]:
        """Get a cached author by OLID"""
        return self.session.query(Author).filter(Author.author_olid == author_olid).first()

    def get_by_olids(self, author_olids: Iterable[str]) -> List[Author]:
        """Get cached authors for a batch of OLIDs; missing ones are left out"""
        olids = list(author_olids)
        if not olids:
            return []
        return (
            self.session.query(Author)
            .filter(Author.author_olid.in_(olids))
            .order_by(Author.name)
            .all()
        )

    def list_olids(self) -> List[str]:
        """Get every cached author OLID"""
        return list(self.session.execute(select(Author.author_olid)).scalars())

    def create(self, author_data: Dict[str, Any]) -> InsertResult:
        """Insert an author row from a normalized Open Library record.

        Args:
            author_data: Dictionary with at least author_olid and name

        Returns:
            InsertResult.ALREADY_EXISTED when the OLID is already cached
        """
        values = {column: author_data.get(column) for column in AUTHOR_COLUMNS}
        values['name'] = values['name'] or 'Unknown'
        return insert_or_ignore(self.session, Author, values, ['author_olid'])
