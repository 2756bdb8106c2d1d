# core/sa/repositories/work.py
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from ..models import Work, WorkSubject, Subject
from .base import InsertResult, insert_or_ignore

WORK_COLUMNS = ('work_olid', 'title', 'first_publication_date', 'description')

class WorkRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_olid(self, work_olid: str) -> Optional[Work]:
        """Get a cached work by its OLID"""
        return self.session.query(Work).filter(Work.work_olid == work_olid).first()

    def exists(self, work_olid: str) -> bool:
        return self.session.query(Work.work_olid).filter(Work.work_olid == work_olid).first() is not None

    def list_olids(self) -> List[str]:
        """Get every cached work OLID"""
        return list(self.session.execute(select(Work.work_olid)).scalars())

    def create(self, work_data: Dict[str, Any]) -> InsertResult:
        """Insert a work row from a normalized Open Library record.

        Args:
            work_data: Dictionary with at least work_olid and title; extra keys are ignored

        Returns:
            InsertResult.ALREADY_EXISTED when the OLID is already cached
        """
        values = {column: work_data.get(column) for column in WORK_COLUMNS}
        values['title'] = values['title'] or ''
        return insert_or_ignore(self.session, Work, values, ['work_olid'])

    def add_subject(self, work_olid: str, subject_id: int) -> InsertResult:
        return insert_or_ignore(
            self.session,
            WorkSubject,
            {'work_olid': work_olid, 'subject_id': subject_id},
            ['work_olid', 'subject_id']
        )

    def get_subjects(self, work_olid: str) -> List[Subject]:
        """Get the subjects linked to a work, ordered by name"""
        return (
            self.session.query(Subject)
            .join(WorkSubject, WorkSubject.subject_id == Subject.id)
            .filter(WorkSubject.work_olid == work_olid)
            .order_by(Subject.name)
            .all()
        )
