# tests/test_openlibrary/test_client.py
from unittest.mock import Mock

import pytest
import requests

from core.errors import InvalidFormat, MissingIdentifier, NotFound, RemoteUnavailable
from core.openlibrary import OpenLibraryClient

BASE_URL = "https://openlibrary.test"

def _response(payload=None, status_code=200, json_error=False):
    response = Mock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response

@pytest.fixture
def session():
    return Mock(spec=requests.Session)

@pytest.fixture
def client(session):
    return OpenLibraryClient(base_url=BASE_URL, timeout=5, session=session)

def test_edition_is_normalized(client, session):
    session.get.return_value = _response({
        'title': 'The Fellowship of the Ring',
        'publishers': ['Ballantine Books'],
        'publish_date': '1986',
        'description': {'type': '/type/text', 'value': 'Book one.'},
        'isbn_10': ['0345339703'],
        'isbn_13': ['9780345339706'],
        'works': [{'key': '/works/OL27448W'}],
        'languages': [{'key': '/languages/eng'}],
        'authors': [{'key': '/authors/OL26320A'}],
        'covers': [12345],
    })

    edition = client.fetch('edition', 'OL7353617M')

    session.get.assert_called_once_with(f"{BASE_URL}/books/OL7353617M.json", timeout=5)
    assert edition == {
        'edition_olid': 'OL7353617M',
        'work_olid': 'OL27448W',
        'title': 'The Fellowship of the Ring',
        'publish_date': '1986',
        'publishers': ['Ballantine Books'],
        'isbn': '9780345339706',
        'description': 'Book one.',
        'cover_url': 'https://covers.openlibrary.org/b/olid/OL7353617M-M.jpg',
        'languages': ['eng'],
        'authors': ['OL26320A'],
    }

def test_edition_falls_back_to_isbn_10(client, session):
    session.get.return_value = _response({
        'title': 'Old print',
        'isbn_10': ['0345339703'],
        'works': [{'key': '/works/OL1W'}],
    })
    edition = client.fetch('edition', 'OL1M')
    assert edition['isbn'] == '0345339703'
    assert edition['description'] is None
    assert edition['authors'] == []

def test_work_skips_malformed_authors(client, session):
    session.get.return_value = _response({
        'title': 'The Lord of the Rings',
        'first_publish_date': '1954',
        'subjects': ['Fantasy', 'Quests'],
        'description': 'An epic.',
        'authors': [
            {'author': {'key': '/authors/OL26320A'}, 'type': {'key': '/type/author_role'}},
            {'type': {'key': '/type/author_role'}},
        ],
    })

    work = client.fetch('works', 'OL27448W')

    session.get.assert_called_once_with(f"{BASE_URL}/works/OL27448W.json", timeout=5)
    assert work['work_olid'] == 'OL27448W'
    assert work['first_publication_date'] == '1954'
    assert work['subjects'] == ['Fantasy', 'Quests']
    assert work['authors'] == ['OL26320A']

def test_author_is_normalized(client, session):
    session.get.return_value = _response({
        'name': 'J.R.R. TOLKIEN',
        'bio': {'type': '/type/text', 'value': 'Philologist.'},
        'birth_date': '3 January 1892',
        'death_date': '2 September 1973',
        'photos': [-1, 6155606],
    })

    author = client.fetch('author', 'OL26320A')

    assert author['author_olid'] == 'OL26320A'
    assert author['name'] == 'J.r.r. Tolkien'
    assert author['bio'] == 'Philologist.'
    # The first photo id is removed (-1), so no picture
    assert author['pic_url'] is None

def test_author_picture_url(client, session):
    session.get.return_value = _response({'name': 'Ursula K. Le Guin', 'photos': [6430541]})
    author = client.fetch('author', 'OL24529A')
    assert author['pic_url'] == 'https://covers.openlibrary.org/a/id/6430541-M.jpg'
    assert author['bio'] is None

def test_search_uses_title_and_page(client, session):
    session.get.return_value = _response({
        'num_found': 1,
        'page': 2,
        'docs': [{
            'key': '/works/OL27448W',
            'title': 'The Lord of the Rings',
            'author_name': ['J.R.R. TOLKIEN'],
            'author_key': ['OL26320A'],
            'first_publish_year': 1954,
            'cover_edition_key': 'OL7353617M',
            'cover_i': 14625765,
            'edition_count': 251,
            'language': ['eng', 'fre'],
        }, 'garbage'],
    })

    result = client.fetch('search', 'lord of the rings', page=2)

    url = session.get.call_args[0][0]
    assert url == f"{BASE_URL}/search.json?title=lord+of+the+rings&page=2"
    assert session.get.call_args[1]['timeout'] == 10
    assert result['num_found'] == 1
    assert result['docs'] == [{
        'work_olid': 'OL27448W',
        'title': 'The Lord of the Rings',
        'author_names': ['J.r.r. Tolkien'],
        'author_olids': ['OL26320A'],
        'first_publish_year': 1954,
        'cover_edition_olid': 'OL7353617M',
        'cover_id': 14625765,
        'edition_count': 251,
        'languages': ['eng', 'fre'],
    }]

def test_languages_need_no_criteria(client, session):
    session.get.return_value = _response([
        {'key': '/languages/eng', 'name': 'English'},
        {'key': '/languages/fre', 'name': 'French'},
        {'key': '/languages/xxx'},
    ])

    languages = client.fetch('languages')

    assert session.get.call_args[1]['timeout'] == 20
    assert languages == [
        {'language': 'English', 'key': 'eng'},
        {'language': 'French', 'key': 'fre'},
    ]

def test_missing_criteria(client, session):
    with pytest.raises(MissingIdentifier):
        client.fetch('edition')
    with pytest.raises(MissingIdentifier):
        client.fetch('search', '')
    session.get.assert_not_called()

def test_unknown_kind(client):
    with pytest.raises(InvalidFormat):
        client.fetch('trending', 'daily')

def test_404_raises_not_found(client, session):
    session.get.return_value = _response(status_code=404)
    with pytest.raises(NotFound) as excinfo:
        client.fetch('edition', 'OL999M')
    assert excinfo.value.criteria == 'OL999M'

def test_server_error_raises_remote_unavailable(client, session):
    session.get.return_value = _response(status_code=503)
    with pytest.raises(RemoteUnavailable) as excinfo:
        client.fetch('works', 'OL1W')
    assert 'HTTP 503' in str(excinfo.value)

def test_timeout_raises_remote_unavailable(client, session):
    session.get.side_effect = requests.Timeout("read timed out")
    with pytest.raises(RemoteUnavailable):
        client.fetch('author', 'OL1A')
    # No retries
    assert session.get.call_count == 1

def test_connection_error_raises_remote_unavailable(client, session):
    session.get.side_effect = requests.ConnectionError("refused")
    with pytest.raises(RemoteUnavailable):
        client.fetch('edition', 'OL1M')

def test_non_json_body_raises_remote_unavailable(client, session):
    session.get.return_value = _response(json_error=True)
    with pytest.raises(RemoteUnavailable):
        client.fetch('edition', 'OL1M')
