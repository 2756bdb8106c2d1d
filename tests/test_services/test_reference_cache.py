# tests/test_services/test_reference_cache.py
import dataclasses
from unittest.mock import MagicMock

import pytest

from core.errors import InvalidFormat, RemoteUnavailable, StartupError, StorageError
from core.openlibrary import OpenLibraryClient
from core.services.reference_cache import ReferenceSnapshot, init_db_and_cache, refresh_languages

def test_init_seeds_statuses_and_languages(snapshot):
    assert [s['name'] for s in snapshot.statuses] == ['want to read', 'reading', 'finished']
    assert {l['key'] for l in snapshot.languages} == {'eng', 'fre'}
    assert snapshot.work_olids == frozenset()

def test_init_is_repeatable(database, mock_client, store, snapshot):
    again = init_db_and_cache(database, mock_client, store)
    assert len(again.statuses) == 3
    assert len(again.languages) == 2

def test_snapshot_reflects_cached_olids(database, mock_client, store):
    store.put_ol_work({'work_olid': 'OL1W', 'title': 'Cached'})
    snapshot = init_db_and_cache(database, mock_client, store)
    assert snapshot.is_known('work', 'OL1W')
    assert not snapshot.is_known('edition', 'OL1M')

def test_snapshot_is_read_only(snapshot):
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.statuses = ()

def test_language_lookups():
    snapshot = ReferenceSnapshot.from_records(languages=[
        {'id': 1, 'language': 'English', 'key': 'eng'},
        {'id': 2, 'language': 'German', 'key': 'ger'},
    ])
    assert snapshot.language_by_key('ger')['language'] == 'German'
    assert snapshot.language_by_key('xxx') is None
    assert [l['id'] for l in snapshot.languages_by_keys(['ger', 'xxx', 'eng'])] == [2, 1]
    assert snapshot.languages_by_keys([]) == []

def test_status_name_and_unknown_kind():
    snapshot = ReferenceSnapshot.from_records(statuses=[{'id': 1, 'name': 'want to read'}])
    assert snapshot.status_name(1) == 'want to read'
    assert snapshot.status_name(9) is None
    with pytest.raises(InvalidFormat):
        snapshot.is_known('series', 'OL1S')

def test_language_insert_failures_are_logged_not_fatal(store, mock_client, snapshot, caplog):
    mock_client.fetch.side_effect = lambda kind, criteria=None, page=1: [
        {'language': 'Spanish', 'key': 'spa'},
        {'language': 'Welsh', 'key': 'wel'},
    ]
    real_put = store.put_ol_language

    def flaky_put(language, key):
        if key == 'wel':
            raise StorageError('language', key)
        return real_put(language, key)

    store.put_ol_language = flaky_put
    assert refresh_languages(store, mock_client, max_workers=2) == 1
    assert "Failed to insert language 'wel'" in caplog.text
    assert {l['key'] for l in store.list_languages()} == {'eng', 'fre', 'spa'}

def test_remote_failure_is_fatal(database, store):
    client = MagicMock(spec=OpenLibraryClient)
    client.fetch.side_effect = RemoteUnavailable('languages', None, 'timed out')
    with pytest.raises(StartupError):
        init_db_and_cache(database, client, store)
