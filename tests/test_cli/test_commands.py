# tests/test_cli/test_commands.py
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cli.main import cli
from cli.utils import AppContext
from core.resolvers.resolver import Resolver
from core.services.auth import AuthService
from core.services.library_service import LibraryService

@pytest.fixture
def app_context(database, mock_client, store, snapshot):
    resolver = Resolver(store, mock_client, snapshot, max_workers=2)
    return AppContext(
        database=database,
        client=mock_client,
        store=store,
        snapshot=snapshot,
        resolver=resolver,
        library=LibraryService(store, resolver, snapshot),
        auth=AuthService(store, bcrypt_rounds=4)
    )

@pytest.fixture
def run(app_context):
    runner = CliRunner()

    def invoke(*args, **kwargs):
        with patch('cli.commands.book.bootstrap', return_value=app_context), \
             patch('cli.commands.user.bootstrap', return_value=app_context), \
             patch('cli.main.bootstrap', return_value=app_context):
            return runner.invoke(cli, list(args), **kwargs)
    return invoke

def test_init_reports_snapshot(run):
    result = run('init')
    assert result.exit_code == 0
    assert 'languages: 2' in result.output

def test_resolve_cached_miss(run):
    result = run('resolve', 'edition', 'OL7353617M', '--mode', 'cached')
    assert result.exit_code == 0
    assert 'is not cached' in result.output

def test_resolve_fetches_and_prints(run):
    result = run('resolve', 'edition', 'OL7353617M')
    assert result.exit_code == 0
    assert 'The Fellowship of the Ring (Open Library)' in result.output
    assert 'J.R.R. Tolkien' in result.output

def test_resolve_error_exits_nonzero(run):
    result = run('resolve', 'edition', 'OL27448W')
    assert result.exit_code == 1
    assert 'not a edition' in result.output

def test_user_lifecycle(run, store):
    created = run('user', 'create', '--username', 'frodo', '--email', 'frodo@shire.org',
                  '--password', 'one-ring-42')
    assert created.exit_code == 0
    user_id = store.get_user_credentials('frodo')['id']

    assert 'has no books' in run('books', str(user_id)).output

    assert 'Added OL7353617M' in run('add', str(user_id), 'OL7353617M').output
    assert 'already in the collection' in run('add', str(user_id), 'OL7353617M').output

    listing = run('books', str(user_id))
    assert 'The Fellowship of the Ring' in listing.output
    assert '(Not reviewed)' in listing.output

def test_user_create_validation(run):
    result = run('user', 'create', '--username', 'sam', '--email', 'nope', '--password', 'short')
    assert result.exit_code == 1
    assert 'username must be at least 4 characters long' in result.output
