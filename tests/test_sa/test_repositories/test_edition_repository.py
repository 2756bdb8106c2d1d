# tests/test_sa/test_repositories/test_edition_repository.py
import pytest
from core.sa.repositories import (
    AuthorRepository, EditionRepository, InsertResult, LanguageRepository, WorkRepository
)

@pytest.fixture
def edition_repo(db_session):
    """Fixture to create an EditionRepository instance"""
    return EditionRepository(db_session)

@pytest.fixture
def cached_work(db_session):
    WorkRepository(db_session).create({'work_olid': 'OL27448W', 'title': 'The Lord of the Rings'})
    db_session.commit()
    return 'OL27448W'

def test_create_and_get(edition_repo, db_session, cached_work):
    result = edition_repo.create({
        'edition_olid': 'OL7353617M',
        'work_olid': cached_work,
        'title': 'The Fellowship of the Ring',
        'publishers': ['Ballantine Books', 'Del Rey'],
        'isbn': '9780345339706',
        'languages': ['eng'],
    })
    db_session.commit()

    assert result == InsertResult.INSERTED
    edition = edition_repo.get_by_olid('OL7353617M')
    assert edition.work_olid == cached_work
    # Publisher lists are stored joined
    assert edition.publishers == 'Ballantine Books, Del Rey'
    assert edition_repo.exists('OL7353617M')
    assert edition_repo.list_olids() == ['OL7353617M']

def test_get_nonexistent(edition_repo):
    assert edition_repo.get_by_olid('OL404M') is None
    assert not edition_repo.exists('OL404M')
    assert edition_repo.get_authors('OL404M') == []
    assert edition_repo.get_languages('OL404M') == []

def test_associations(edition_repo, db_session, cached_work):
    edition_repo.create({'edition_olid': 'OL1M', 'work_olid': cached_work, 'title': 'Book'})
    authors = AuthorRepository(db_session)
    authors.create({'author_olid': 'OL1A', 'name': 'Zed'})
    authors.create({'author_olid': 'OL2A', 'name': 'Amy'})
    _, eng = LanguageRepository(db_session).get_or_create('English', 'eng')

    edition_repo.add_author('OL1M', 'OL1A')
    edition_repo.add_author('OL1M', 'OL2A')
    assert edition_repo.add_author('OL1M', 'OL2A') == InsertResult.ALREADY_EXISTED
    edition_repo.add_language('OL1M', eng)
    db_session.commit()

    assert [a.name for a in edition_repo.get_authors('OL1M')] == ['Amy', 'Zed']
    assert [l.key for l in edition_repo.get_languages('OL1M')] == ['eng']
    assert [e.edition_olid for e in edition_repo.get_by_work(cached_work)] == ['OL1M']
