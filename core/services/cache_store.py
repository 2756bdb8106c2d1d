# core/services/cache_store.py
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import settings
from core.errors import StorageError
from core.sa.database import Database
from core.sa.models import Work, Edition, Author, Subject, Language, Status, User
from core.sa.repositories import (
    InsertResult, WorkRepository, EditionRepository, AuthorRepository,
    SubjectRepository, LanguageRepository, UserRepository, StatusRepository,
    LibraryRepository
)

logger = logging.getLogger(__name__)


def work_record(work: Work) -> Dict[str, Any]:
    return {
        'work_olid': work.work_olid,
        'title': work.title,
        'first_publication_date': work.first_publication_date,
        'description': work.description,
    }


def edition_record(edition: Edition) -> Dict[str, Any]:
    return {
        'edition_olid': edition.edition_olid,
        'work_olid': edition.work_olid,
        'title': edition.title,
        'publish_date': edition.publish_date,
        'publishers': edition.publishers,
        'isbn': edition.isbn,
        'description': edition.description,
        'cover_url': edition.cover_url,
    }


def author_record(author: Author) -> Dict[str, Any]:
    return {
        'author_olid': author.author_olid,
        'name': author.name,
        'bio': author.bio,
        'birth_date': author.birth_date,
        'death_date': author.death_date,
        'pic_url': author.pic_url,
    }


def subject_record(subject: Subject) -> Dict[str, Any]:
    return {'id': subject.id, 'name': subject.name, 'type': subject.type}


def language_record(language: Language) -> Dict[str, Any]:
    return {'id': language.id, 'language': language.language, 'key': language.key}


def status_record(status: Status) -> Dict[str, Any]:
    return {'id': status.id, 'name': status.name}


def user_record(user: User, include_hash: bool = False) -> Dict[str, Any]:
    record = {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'status': user.status,
        'image': user.image,
        'created_at': user.created_at,
    }
    if include_hash:
        record['password_hash'] = user.password_hash
    return record


class CacheStore:
    """Local cache of Open Library data plus user state, returning plain records.

    Every operation runs in its own session. Reads return None or [] when
    nothing matches, inserts return an InsertResult, and any other database
    failure is raised as StorageError.
    """

    def __init__(self, database: Database, enrich_workers: Optional[int] = None):
        self.database = database
        self.enrich_workers = enrich_workers or settings.enrich_workers

    @contextmanager
    def _session(self, entity: str, identifier: Any) -> Iterator[Session]:
        try:
            with self.database.get_db() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Storage failure on {entity} '{identifier}': {e}")
            raise StorageError(entity, identifier, e) from e

    # Bibliographic reads

    def get_work(self, work_olid: str) -> Optional[Dict[str, Any]]:
        with self._session('work', work_olid) as session:
            work = WorkRepository(session).get_by_olid(work_olid)
            return work_record(work) if work else None

    def get_edition(self, edition_olid: str) -> Optional[Dict[str, Any]]:
        with self._session('edition', edition_olid) as session:
            edition = EditionRepository(session).get_by_olid(edition_olid)
            return edition_record(edition) if edition else None

    def get_work_editions(self, work_olid: str) -> List[Dict[str, Any]]:
        with self._session('work', work_olid) as session:
            return [edition_record(e) for e in EditionRepository(session).get_by_work(work_olid)]

    def get_edition_authors(self, edition_olid: str) -> List[Dict[str, Any]]:
        with self._session('edition', edition_olid) as session:
            return [author_record(a) for a in EditionRepository(session).get_authors(edition_olid)]

    def get_edition_languages(self, edition_olid: str) -> List[Dict[str, Any]]:
        with self._session('edition', edition_olid) as session:
            return [language_record(l) for l in EditionRepository(session).get_languages(edition_olid)]

    def get_work_subjects(self, work_olid: str) -> List[Dict[str, Any]]:
        with self._session('work', work_olid) as session:
            return [subject_record(s) for s in WorkRepository(session).get_subjects(work_olid)]

    def get_author(self, author_olid: str) -> Optional[Dict[str, Any]]:
        with self._session('author', author_olid) as session:
            author = AuthorRepository(session).get_by_olid(author_olid)
            return author_record(author) if author else None

    def get_authors(self, author_olids: Iterable[str]) -> List[Dict[str, Any]]:
        olids = list(author_olids)
        with self._session('author', ','.join(olids)) as session:
            return [author_record(a) for a in AuthorRepository(session).get_by_olids(olids)]

    # Bibliographic inserts

    def put_ol_work(self, work_data: Dict[str, Any]) -> InsertResult:
        work_olid = work_data.get('work_olid')
        with self._session('work', work_olid) as session:
            result = WorkRepository(session).create(work_data)
        logger.debug(f"put work {work_olid}: {result.value}")
        return result

    def put_ol_edition(self, edition_data: Dict[str, Any]) -> InsertResult:
        edition_olid = edition_data.get('edition_olid')
        with self._session('edition', edition_olid) as session:
            result = EditionRepository(session).create(edition_data)
        logger.debug(f"put edition {edition_olid}: {result.value}")
        return result

    def put_ol_edition_graph(
        self,
        edition_data: Dict[str, Any],
        author_olids: Iterable[str],
        language_ids: Iterable[int]
    ) -> InsertResult:
        """Insert an edition together with its author and language links.

        Everything is written in one transaction, so a failure leaves no
        edition row behind. Authors and languages must already be stored.

        Returns:
            The InsertResult of the edition row itself
        """
        edition_olid = edition_data.get('edition_olid')
        with self._session('edition', edition_olid) as session:
            repo = EditionRepository(session)
            result = repo.create(edition_data)
            for author_olid in author_olids:
                repo.add_author(edition_olid, author_olid)
            for language_id in language_ids:
                repo.add_language(edition_olid, language_id)
        logger.debug(f"put edition graph {edition_olid}: {result.value}")
        return result

    def put_ol_work_graph(self, work_data: Dict[str, Any], subjects: Iterable[str]) -> InsertResult:
        """Insert a work and its subjects in one transaction"""
        work_olid = work_data.get('work_olid')
        with self._session('work', work_olid) as session:
            work_repo = WorkRepository(session)
            subject_repo = SubjectRepository(session)
            result = work_repo.create(work_data)
            for name in subjects:
                _, subject_id = subject_repo.get_or_create(name, 'subject')
                work_repo.add_subject(work_olid, subject_id)
        logger.debug(f"put work graph {work_olid}: {result.value}")
        return result

    def put_ol_author(self, author_data: Dict[str, Any]) -> InsertResult:
        author_olid = author_data.get('author_olid')
        with self._session('author', author_olid) as session:
            result = AuthorRepository(session).create(author_data)
        logger.debug(f"put author {author_olid}: {result.value}")
        return result

    def put_ol_subject(self, name: str, subject_type: Optional[str] = None) -> Tuple[InsertResult, int]:
        with self._session('subject', name) as session:
            return SubjectRepository(session).get_or_create(name, subject_type)

    def put_ol_language(self, language: str, key: str) -> Tuple[InsertResult, int]:
        with self._session('language', key) as session:
            return LanguageRepository(session).get_or_create(language, key)

    def put_works_subject(self, work_olid: str, subject_id: int) -> InsertResult:
        with self._session('works_subjects', f"{work_olid}/{subject_id}") as session:
            return WorkRepository(session).add_subject(work_olid, subject_id)

    def put_author_book(self, author_olid: str, edition_olid: str) -> InsertResult:
        with self._session('authors_books', f"{author_olid}/{edition_olid}") as session:
            return EditionRepository(session).add_author(edition_olid, author_olid)

    def put_edition_language(self, edition_olid: str, language_id: int) -> InsertResult:
        with self._session('editions_languages', f"{edition_olid}/{language_id}") as session:
            return EditionRepository(session).add_language(edition_olid, language_id)

    # Reference data

    def seed_statuses(self) -> int:
        with self._session('status', 'defaults') as session:
            return StatusRepository(session).seed_defaults()

    def list_statuses(self) -> List[Dict[str, Any]]:
        with self._session('status', '*') as session:
            return [status_record(s) for s in StatusRepository(session).list_all()]

    def list_subjects(self) -> List[Dict[str, Any]]:
        with self._session('subject', '*') as session:
            return [subject_record(s) for s in SubjectRepository(session).list_all()]

    def list_languages(self) -> List[Dict[str, Any]]:
        with self._session('language', '*') as session:
            return [language_record(l) for l in LanguageRepository(session).list_all()]

    def list_known_olids(self) -> Dict[str, List[str]]:
        """All cached OLIDs, grouped by entity type"""
        with self._session('olid', '*') as session:
            return {
                'work': WorkRepository(session).list_olids(),
                'edition': EditionRepository(session).list_olids(),
                'author': AuthorRepository(session).list_olids(),
            }

    # Users

    def create_user(self, username: str, email: str, password_hash: str) -> Dict[str, Any]:
        with self._session('user', username) as session:
            user = UserRepository(session).create_user(username, email, password_hash)
            return user_record(user)

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._session('user', user_id) as session:
            user = UserRepository(session).get_by_id(user_id)
            return user_record(user) if user else None

    def get_user_credentials(self, username: str) -> Optional[Dict[str, Any]]:
        """User record including the password hash, for login checks only"""
        with self._session('user', username) as session:
            user = UserRepository(session).get_by_username(username)
            return user_record(user, include_hash=True) if user else None

    def username_taken(self, username: str) -> bool:
        with self._session('user', username) as session:
            return UserRepository(session).get_by_username(username) is not None

    def email_taken(self, email: str) -> bool:
        with self._session('user', email) as session:
            return UserRepository(session).get_by_email(email) is not None

    # Collection and reviews

    def check_user_book(self, user_id: int, edition_olid: str) -> Optional[Dict[str, Any]]:
        """Return the collection entry for (user, edition), or None"""
        with self._session('users_books', f"{user_id}/{edition_olid}") as session:
            user_book = LibraryRepository(session).get_user_book(user_id, edition_olid)
            if not user_book:
                return None
            return {
                'id': user_book.id,
                'user_id': user_book.user_id,
                'edition_olid': user_book.edition_olid,
                'status_id': user_book.status_id,
            }

    def put_user_edition(self, user_id: int, edition_olid: str, status_id: int = 1) -> InsertResult:
        with self._session('users_books', f"{user_id}/{edition_olid}") as session:
            return LibraryRepository(session).add_user_book(user_id, edition_olid, status_id)

    def set_user_book_status(self, user_id: int, edition_olid: str, status_id: int) -> bool:
        with self._session('users_books', f"{user_id}/{edition_olid}") as session:
            return LibraryRepository(session).update_status(user_id, edition_olid, status_id) is not None

    def delete_user_book(self, user_id: int, edition_olid: str) -> bool:
        with self._session('users_books', f"{user_id}/{edition_olid}") as session:
            return LibraryRepository(session).remove_user_book(user_id, edition_olid)

    def set_user_review(
        self,
        user_id: int,
        edition_olid: str,
        score: int,
        review: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Create or replace a review; None when the edition is not in the user's collection"""
        with self._session('book_review', f"{user_id}/{edition_olid}") as session:
            repo = LibraryRepository(session)
            user_book = repo.get_user_book(user_id, edition_olid)
            if not user_book:
                return None
            saved = repo.set_review(user_book.id, score, review)
            return {
                'user_book_id': user_book.id,
                'edition_olid': edition_olid,
                'score': saved.score,
                'review': saved.review,
            }

    def get_edition_reviews(self, edition_olid: str) -> List[Dict[str, Any]]:
        with self._session('book_review', edition_olid) as session:
            return [
                {
                    'user_id': user_book.user_id,
                    'username': user_book.user.username,
                    'score': review.score,
                    'review': review.review,
                    'created_at': review.created_at,
                }
                for review, user_book in LibraryRepository(session).get_edition_reviews(edition_olid)
            ]

    def get_work_scores(self, work_olids: Iterable[str]) -> Dict[str, List[int]]:
        olids = list(work_olids)
        with self._session('book_review', ','.join(olids)) as session:
            return LibraryRepository(session).get_work_scores(olids)

    def get_user_books(self, user_id: int) -> Optional[List[Dict[str, Any]]]:
        """Denormalized view of a user's collection.

        Args:
            user_id: The ID of the user

        Returns:
            None when the user has no books, otherwise one record per book
            with its authors and languages attached
        """
        return self._collection(user_id, reviewed_only=False)

    def get_user_reviews(self, user_id: int) -> Optional[List[Dict[str, Any]]]:
        """Same as get_user_books, limited to reviewed books"""
        return self._collection(user_id, reviewed_only=True)

    def _collection(self, user_id: int, reviewed_only: bool) -> Optional[List[Dict[str, Any]]]:
        with self._session('users_books', user_id) as session:
            rows = LibraryRepository(session).get_collection(user_id, reviewed_only=reviewed_only)
            books = [
                {
                    'user_book_id': user_book.id,
                    'edition_olid': edition.edition_olid,
                    'work_olid': work.work_olid,
                    'title': edition.title,
                    'work_title': work.title,
                    'publish_date': edition.publish_date,
                    'publishers': edition.publishers,
                    'isbn': edition.isbn,
                    'cover_url': edition.cover_url,
                    'status_id': status.id,
                    'status': status.name,
                    'score': review.score if review else None,
                    'review': review.review if review else None,
                    'added_at': user_book.created_at,
                }
                for user_book, edition, work, status, review in rows
            ]

        if not books:
            return None

        # One session per book; result() re-raises the first failure
        with ThreadPoolExecutor(max_workers=self.enrich_workers) as executor:
            futures = [executor.submit(self._enrich, book['edition_olid']) for book in books]
            for book, future in zip(books, futures):
                book['authors'], book['languages'] = future.result()
        return books

    def _enrich(self, edition_olid: str) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        return self.get_edition_authors(edition_olid), self.get_edition_languages(edition_olid)
