# core/services/library_service.py
import logging
from typing import Any, Dict, List, Optional

from core.errors import InvalidFormat
from core.resolvers.resolver import Resolver
from core.sa.repositories import InsertResult
from core.scoring import WorkScore, aggregate_scores, score_to_stars, validate_score
from core.services.cache_store import CacheStore
from core.services.reference_cache import ReferenceSnapshot
from core.utils.olid import validate_olid

logger = logging.getLogger(__name__)


class LibraryService:
    def __init__(self, store: CacheStore, resolver: Resolver, snapshot: ReferenceSnapshot):
        self.store = store
        self.resolver = resolver
        self.snapshot = snapshot

    def _check_edition_olid(self, edition_olid: str) -> None:
        if validate_olid(edition_olid) != 'edition':
            raise InvalidFormat(f"OLID '{edition_olid}' is not an edition")

    def _check_status(self, status_id: int) -> None:
        if self.snapshot.status_name(status_id) is None:
            raise InvalidFormat(f"Unknown status id {status_id}")

    def add_book(self, user_id: int, edition_olid: str, status_id: int = 1) -> InsertResult:
        """Add an edition to a user's collection, caching it first if needed"""
        self._check_status(status_id)
        return self.resolver.add_to_collection(user_id, edition_olid, status_id)

    def get_books(self, user_id: int) -> Optional[List[Dict[str, Any]]]:
        """A user's collection with star ratings and work scores; None when empty"""
        return self._with_scores(self.store.get_user_books(user_id))

    def get_reviews(self, user_id: int) -> Optional[List[Dict[str, Any]]]:
        return self._with_scores(self.store.get_user_reviews(user_id))

    def _with_scores(self, books: Optional[List[Dict[str, Any]]]) -> Optional[List[Dict[str, Any]]]:
        if books is None:
            return None
        work_scores = self.store.get_work_scores({book['work_olid'] for book in books})
        for book in books:
            book['stars'] = score_to_stars(book['score'])
            book['work_score'] = aggregate_scores(work_scores.get(book['work_olid'], []))
        return books

    def set_status(self, user_id: int, edition_olid: str, status_id: int) -> bool:
        """Change a book's reading status; False when it is not in the collection"""
        self._check_edition_olid(edition_olid)
        self._check_status(status_id)
        return self.store.set_user_book_status(user_id, edition_olid, status_id)

    def review(
        self,
        user_id: int,
        edition_olid: str,
        score: int,
        review: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Create or replace a review; None when the book is not in the collection"""
        self._check_edition_olid(edition_olid)
        validate_score(score)
        saved = self.store.set_user_review(user_id, edition_olid, score, review)
        if saved is not None:
            logger.info(f"User {user_id} scored {edition_olid} {score}/5")
        return saved

    def remove_book(self, user_id: int, edition_olid: str) -> bool:
        self._check_edition_olid(edition_olid)
        return self.store.delete_user_book(user_id, edition_olid)

    def work_score(self, work_olid: str) -> WorkScore:
        """Average score across all cached editions of a work"""
        return aggregate_scores(self.store.get_work_scores([work_olid])[work_olid])

    def edition_reviews(self, edition_olid: str) -> List[Dict[str, Any]]:
        self._check_edition_olid(edition_olid)
        return self.store.get_edition_reviews(edition_olid)
