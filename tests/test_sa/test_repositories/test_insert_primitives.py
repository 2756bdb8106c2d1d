# tests/test_sa/test_repositories/test_insert_primitives.py
import logging
from unittest.mock import patch

import pytest
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from core.sa.models import Edition, Language, Review, Subject, Work, WorkSubject
from core.sa.repositories import (
    InsertResult, LanguageRepository, SubjectRepository, WorkRepository, insert_or_ignore
)

def test_insert_or_ignore_reports_existing_row(db_session, caplog):
    values = {'work_olid': 'OL1W', 'title': 'Dune'}
    assert insert_or_ignore(db_session, Work, values, ['work_olid']) == InsertResult.INSERTED

    with caplog.at_level(logging.WARNING):
        result = insert_or_ignore(db_session, Work, {'work_olid': 'OL1W', 'title': 'Other'}, ['work_olid'])
    db_session.commit()

    assert result == InsertResult.ALREADY_EXISTED
    assert not result.inserted
    assert "already exists" in caplog.text
    # First write wins
    assert db_session.query(Work).one().title == 'Dune'

def test_insert_or_ignore_fills_column_defaults(db_session):
    insert_or_ignore(db_session, Work, {'work_olid': 'OL2W', 'title': 'Emma'}, ['work_olid'])
    db_session.commit()
    work = db_session.query(Work).one()
    assert work.created_at is not None
    assert work.last_synced_at is not None

def test_subject_get_or_create_returns_same_id(db_session):
    repo = SubjectRepository(db_session)
    first, subject_id = repo.get_or_create('Fantasy', 'subject')
    second, same_id = repo.get_or_create('Fantasy', 'subject')
    db_session.commit()

    assert first == InsertResult.INSERTED
    assert second == InsertResult.ALREADY_EXISTED
    assert subject_id == same_id
    assert db_session.query(func.count(Subject.id)).scalar() == 1

def test_language_get_or_create_is_unique_on_key(db_session):
    repo = LanguageRepository(db_session)
    _, eng_id = repo.get_or_create('English', 'eng')
    result, again = repo.get_or_create('Anglais', 'eng')
    db_session.commit()

    assert result == InsertResult.ALREADY_EXISTED
    assert again == eng_id
    assert repo.get_by_key('eng').language == 'English'
    assert db_session.query(func.count(Language.id)).scalar() == 1

def test_duplicate_work_subject_association(db_session):
    works = WorkRepository(db_session)
    works.create({'work_olid': 'OL3W', 'title': 'Persuasion'})
    _, subject_id = SubjectRepository(db_session).get_or_create('Romance')

    assert works.add_subject('OL3W', subject_id) == InsertResult.INSERTED
    assert works.add_subject('OL3W', subject_id) == InsertResult.ALREADY_EXISTED
    db_session.commit()

    assert db_session.query(func.count()).select_from(WorkSubject).scalar() == 1
    assert [s.name for s in works.get_subjects('OL3W')] == ['Romance']

class TestSavepointFallback:
    """Engines without ON CONFLICT go through a savepoint"""

    @pytest.fixture(autouse=True)
    def no_dialect_upsert(self):
        with patch('core.sa.repositories.base._dialect_insert', return_value=None):
            yield

    def test_new_and_duplicate_rows(self, db_session):
        values = {'work_olid': 'OL4W', 'title': 'Middlemarch'}
        assert insert_or_ignore(db_session, Work, values, ['work_olid']) == InsertResult.INSERTED
        assert insert_or_ignore(db_session, Work, values, ['work_olid']) == InsertResult.ALREADY_EXISTED
        assert db_session.query(func.count()).select_from(Work).scalar() == 1

    def test_not_null_violation_propagates(self, db_session):
        values = {'edition_olid': 'OL4M', 'work_olid': None, 'title': 'Orphan'}
        with pytest.raises(IntegrityError):
            insert_or_ignore(db_session, Edition, values, ['edition_olid'])

    def test_check_violation_propagates(self, db_session):
        values = {'user_book_id': 999, 'score': 9}
        with pytest.raises(IntegrityError):
            insert_or_ignore(db_session, Review, values, ['user_book_id'])
