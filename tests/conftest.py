# tests/conftest.py
import copy
import os
import sys
import pytest
from pathlib import Path
from unittest.mock import MagicMock
from sqlalchemy.sql import text

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from core.errors import NotFound
from core.openlibrary import OpenLibraryClient
from core.sa.database import Database
from core.sa.models import Base
from core.services.cache_store import CacheStore
from core.services.reference_cache import init_db_and_cache

# Delete order respects foreign keys
TABLES = [
    'book_review',
    'users_books',
    'editions_languages',
    'authors_books',
    'works_subjects',
    'book_editions',
    'book_works',
    'authors',
    'subjects',
    'languages',
    'users',
    'statuses',
]

LANGUAGES = [
    {'language': 'English', 'key': 'eng'},
    {'language': 'French', 'key': 'fre'},
]

WORKS = {
    'OL27448W': {
        'work_olid': 'OL27448W',
        'title': 'The Lord of the Rings',
        'first_publication_date': '1954',
        'subjects': ['Fantasy', 'Middle Earth (Imaginary place)'],
        'description': 'An epic in three volumes.',
        'authors': ['OL26320A'],
        'cover_edition': None,
    },
    'OL262758W': {
        'work_olid': 'OL262758W',
        'title': 'The Hobbit',
        'first_publication_date': '1937',
        'subjects': ['Fantasy', 'Dragons'],
        'description': None,
        'authors': ['OL26320A'],
        'cover_edition': None,
    },
}

EDITIONS = {
    'OL7353617M': {
        'edition_olid': 'OL7353617M',
        'work_olid': 'OL27448W',
        'title': 'The Fellowship of the Ring',
        'publish_date': '1986',
        'publishers': ['Ballantine Books'],
        'isbn': '9780345339706',
        'description': None,
        'cover_url': 'https://covers.openlibrary.org/b/olid/OL7353617M-M.jpg',
        'languages': ['eng'],
        'authors': ['OL26320A'],
    },
    'OL21136029M': {
        'edition_olid': 'OL21136029M',
        'work_olid': 'OL262758W',
        'title': 'The Hobbit',
        'publish_date': '2002',
        'publishers': ['Houghton Mifflin'],
        'isbn': '9780618260300',
        'description': 'Bilbo goes there and back again.',
        'cover_url': 'https://covers.openlibrary.org/b/olid/OL21136029M-M.jpg',
        'languages': ['eng', 'fre'],
        'authors': ['OL26320A', 'OL2A'],
    },
}

AUTHORS = {
    'OL26320A': {
        'author_olid': 'OL26320A',
        'name': 'J.R.R. Tolkien',
        'bio': 'English writer and philologist.',
        'birth_date': '3 January 1892',
        'death_date': '2 September 1973',
        'pic_url': 'https://covers.openlibrary.org/a/id/6155606-M.jpg',
    },
    'OL2A': {
        'author_olid': 'OL2A',
        'name': 'Christopher Tolkien',
        'bio': None,
        'birth_date': '21 November 1924',
        'death_date': '16 January 2020',
        'pic_url': None,
    },
}


def fake_fetch(kind, criteria=None, page=1):
    """Stand-in for OpenLibraryClient.fetch backed by the sample records above"""
    if kind == 'languages':
        return copy.deepcopy(LANGUAGES)
    records = {'works': WORKS, 'edition': EDITIONS, 'author': AUTHORS}.get(kind, {})
    if criteria not in records:
        raise NotFound(kind, criteria)
    return copy.deepcopy(records[criteria])


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_openshelf.db")

@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a file-backed SQLite database for the test session"""
    db = Database(f"sqlite:///{test_db_path}")

    # Drop all tables and recreate schema
    Base.metadata.drop_all(db.engine)
    Base.metadata.create_all(db.engine)

    yield db

    db.dispose()
    try:
        os.remove(test_db_path)
    except OSError:
        pass

@pytest.fixture(autouse=True)
def cleanup_db(database):
    """Empty every table before each test"""
    with database.engine.begin() as conn:
        for table in TABLES:
            conn.execute(text(f"DELETE FROM {table}"))
    yield

@pytest.fixture
def db_session(database):
    """Create a new database session for a test"""
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def store(database):
    return CacheStore(database, enrich_workers=4)

@pytest.fixture
def mock_client():
    """OpenLibraryClient mock serving the sample records"""
    client = MagicMock(spec=OpenLibraryClient)
    client.fetch.side_effect = fake_fetch
    return client

@pytest.fixture
def snapshot(database, mock_client, store):
    """Reference snapshot built through the real startup path"""
    return init_db_and_cache(database, mock_client, store)
