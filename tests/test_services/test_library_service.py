# tests/test_services/test_library_service.py
import pytest

from core.errors import InvalidFormat
from core.resolvers.resolver import Resolver
from core.sa.repositories import InsertResult
from core.scoring import StarRating, WorkScore
from core.services.library_service import LibraryService

@pytest.fixture
def library(store, mock_client, snapshot):
    resolver = Resolver(store, mock_client, snapshot, max_workers=2)
    return LibraryService(store, resolver, snapshot)

@pytest.fixture
def users(store):
    return [
        store.create_user('frodo', 'frodo@shire.org', 'hash')['id'],
        store.create_user('samwise', 'sam@shire.org', 'hash')['id'],
    ]

def test_add_book_caches_then_adds(library, store, users):
    assert library.add_book(users[0], 'OL7353617M') == InsertResult.INSERTED
    assert store.get_edition('OL7353617M') is not None
    assert library.add_book(users[0], 'OL7353617M') == InsertResult.ALREADY_EXISTED

def test_add_book_rejects_unknown_status(library, users, mock_client):
    with pytest.raises(InvalidFormat):
        library.add_book(users[0], 'OL7353617M', status_id=9)
    assert mock_client.fetch.call_count == 1  # startup language refresh only

def test_empty_collection_is_none(library, users):
    assert library.get_books(users[0]) is None
    assert library.get_reviews(users[0]) is None

def test_books_carry_stars_and_work_score(library, users):
    frodo, sam = users
    library.add_book(frodo, 'OL7353617M')
    library.add_book(frodo, 'OL21136029M')
    library.add_book(sam, 'OL7353617M')
    library.review(frodo, 'OL7353617M', 5, 'Best book ever')
    library.review(sam, 'OL7353617M', 4)

    books = {book['edition_olid']: book for book in library.get_books(frodo)}
    fellowship = books['OL7353617M']
    assert fellowship['stars'] == StarRating(filled=5, unfilled=0, not_reviewed=False)
    assert fellowship['work_score'] == WorkScore(average=4.5, rounded=5, review_count=2)

    hobbit = books['OL21136029M']
    assert hobbit['stars'].render() == '☆☆☆☆☆ (Not reviewed)'
    assert hobbit['work_score'] == WorkScore(average=None, rounded=None, review_count=0)

    reviews = library.get_reviews(frodo)
    assert [r['edition_olid'] for r in reviews] == ['OL7353617M']

def test_review_validation(library, users):
    library.add_book(users[0], 'OL7353617M')
    for bad in (0, 6, 3.5, '4', None):
        with pytest.raises(InvalidFormat):
            library.review(users[0], 'OL7353617M', bad)
    with pytest.raises(InvalidFormat):
        library.review(users[0], 'OL27448W', 4)

def test_review_outside_collection(library, users):
    assert library.review(users[0], 'OL7353617M', 4) is None

def test_review_replaces_previous(library, users):
    library.add_book(users[0], 'OL7353617M')
    library.review(users[0], 'OL7353617M', 2, 'Slow start')
    saved = library.review(users[0], 'OL7353617M', 4, 'Grew on me')
    assert saved['score'] == 4
    assert library.work_score('OL27448W') == WorkScore(average=4.0, rounded=4, review_count=1)
    assert [r['review'] for r in library.edition_reviews('OL7353617M')] == ['Grew on me']

def test_set_status_and_remove(library, users):
    library.add_book(users[0], 'OL7353617M')
    assert library.set_status(users[0], 'OL7353617M', 3)
    assert library.get_books(users[0])[0]['status'] == 'finished'
    with pytest.raises(InvalidFormat):
        library.set_status(users[0], 'OL7353617M', 42)

    assert library.remove_book(users[0], 'OL7353617M')
    assert not library.remove_book(users[0], 'OL7353617M')
    assert not library.set_status(users[0], 'OL7353617M', 2)
