# core/sa/repositories/subject.py
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from ..models import Subject, Language
from .base import InsertResult, insert_or_get

class SubjectRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_name(self, name: str) -> Optional[Subject]:
        return self.session.query(Subject).filter(Subject.name == name).first()

    def list_all(self) -> List[Subject]:
        """Get all subjects ordered by name"""
        return self.session.query(Subject).order_by(Subject.name).all()

    def get_or_create(self, name: str, subject_type: Optional[str] = None) -> Tuple[InsertResult, int]:
        """Insert a subject unless the name is already known.

        Args:
            name: Subject name as Open Library spells it
            subject_type: Optional classification (e.g. "subject", "place")

        Returns:
            Tuple of the InsertResult and the subject id
        """
        return insert_or_get(
            self.session,
            Subject,
            {'name': name, 'type': subject_type},
            ['name']
        )


class LanguageRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_key(self, key: str) -> Optional[Language]:
        return self.session.query(Language).filter(Language.key == key).first()

    def list_all(self) -> List[Language]:
        """Get all languages ordered by id"""
        return self.session.query(Language).order_by(Language.id).all()

    def list_keys(self) -> List[str]:
        return [key for (key,) in self.session.query(Language.key).all()]

    def get_or_create(self, language: str, key: str) -> Tuple[InsertResult, int]:
        """Insert a language unless its key is already known.

        Args:
            language: Display name, e.g. "English"
            key: Cleaned Open Library key, e.g. "eng"

        Returns:
            Tuple of the InsertResult and the language id
        """
        return insert_or_get(
            self.session,
            Language,
            {'language': language or key, 'key': key},
            ['key']
        )
