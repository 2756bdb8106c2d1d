# core/sa/repositories/library.py
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session
from core.sa.models import UserBook, Review, Edition, Work, Status
from .base import InsertResult, insert_or_ignore

class LibraryRepository:
    """Repository for a user's collection (users_books) and reviews (book_review)."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_user_book(self, user_id: int, edition_olid: str) -> Optional[UserBook]:
        """Get a collection entry.

        Args:
            user_id: The ID of the user
            edition_olid: The edition OLID

        Returns:
            The UserBook object if found, None otherwise
        """
        return (
            self.session.query(UserBook)
            .filter(
                UserBook.user_id == user_id,
                UserBook.edition_olid == edition_olid
            )
            .first()
        )

    def add_user_book(self, user_id: int, edition_olid: str, status_id: int = 1) -> InsertResult:
        """Add an edition to a user's collection.

        Args:
            user_id: The ID of the user
            edition_olid: The edition OLID; the edition must already be cached
            status_id: Reading status, "want to read" by default

        Returns:
            InsertResult.ALREADY_EXISTED when the pair is already in the collection
        """
        return insert_or_ignore(
            self.session,
            UserBook,
            {'user_id': user_id, 'edition_olid': edition_olid, 'status_id': status_id},
            ['user_id', 'edition_olid']
        )

    def update_status(self, user_id: int, edition_olid: str, status_id: int) -> Optional[UserBook]:
        """Change the reading status of a collection entry.

        Returns:
            The updated UserBook object if found, None otherwise
        """
        user_book = self.get_user_book(user_id, edition_olid)
        if not user_book:
            return None
        user_book.status_id = status_id
        self.session.flush()
        return user_book

    def remove_user_book(self, user_id: int, edition_olid: str) -> bool:
        """Remove an edition (and its review) from a user's collection.

        Returns:
            True if the entry was deleted, False if not found
        """
        user_book = self.get_user_book(user_id, edition_olid)
        if not user_book:
            return False
        self.session.query(Review).filter(Review.user_book_id == user_book.id).delete()
        self.session.delete(user_book)
        self.session.flush()
        return True

    def get_collection(self, user_id: int, reviewed_only: bool = False) -> List[Tuple[UserBook, Edition, Work, Status, Optional[Review]]]:
        """Get a user's collection joined with edition, work, status and review.

        Args:
            user_id: The ID of the user
            reviewed_only: Only include entries that carry a review

        Returns:
            List of (UserBook, Edition, Work, Status, Review or None) rows,
            most recently added first
        """
        query = (
            self.session.query(UserBook, Edition, Work, Status, Review)
            .join(Edition, Edition.edition_olid == UserBook.edition_olid)
            .join(Work, Work.work_olid == Edition.work_olid)
            .join(Status, Status.id == UserBook.status_id)
        )
        if reviewed_only:
            query = query.join(Review, Review.user_book_id == UserBook.id)
        else:
            query = query.outerjoin(Review, Review.user_book_id == UserBook.id)
        return (
            query.filter(UserBook.user_id == user_id)
            .order_by(UserBook.created_at.desc(), UserBook.id.desc())
            .all()
        )

    def set_review(self, user_book_id: int, score: int, review: Optional[str] = None) -> Review:
        """Create or replace the review attached to a collection entry.

        Args:
            user_book_id: The ID of the users_books row
            score: Integer score 1..5
            review: Optional review text

        Returns:
            The created or updated Review object
        """
        existing = self.session.query(Review).filter(Review.user_book_id == user_book_id).first()
        if existing:
            existing.score = score
            existing.review = review
            self.session.flush()
            return existing

        created = Review(user_book_id=user_book_id, score=score, review=review)
        self.session.add(created)
        self.session.flush()
        return created

    def get_edition_reviews(self, edition_olid: str) -> List[Tuple[Review, UserBook]]:
        """Get every review left on an edition, newest first"""
        return (
            self.session.query(Review, UserBook)
            .join(UserBook, UserBook.id == Review.user_book_id)
            .filter(UserBook.edition_olid == edition_olid)
            .order_by(Review.created_at.desc())
            .all()
        )

    def get_work_scores(self, work_olids: Iterable[str]) -> Dict[str, List[int]]:
        """Collect review scores across all cached editions of each work.

        Args:
            work_olids: Work OLIDs to aggregate

        Returns:
            Mapping of work OLID to its list of scores; works without reviews map to []
        """
        olids = list(work_olids)
        scores: Dict[str, List[int]] = {olid: [] for olid in olids}
        if not olids:
            return scores
        rows = (
            self.session.query(Edition.work_olid, Review.score)
            .join(UserBook, UserBook.edition_olid == Edition.edition_olid)
            .join(Review, Review.user_book_id == UserBook.id)
            .filter(Edition.work_olid.in_(olids))
            .all()
        )
        for work_olid, score in rows:
            scores[work_olid].append(score)
        return scores
