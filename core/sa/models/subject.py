# core/sa/models/subject.py
from sqlalchemy import Integer, String
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base

class Subject(Base):
    __tablename__ = 'subjects'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Relationships
    work_subjects = relationship('WorkSubject', back_populates='subject')

    # Convenience relationship
    works = relationship('Work', secondary='works_subjects', viewonly=True)

class Language(Base):
    __tablename__ = 'languages'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    language: Mapped[str] = mapped_column(String(255), nullable=False)
    key: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    # Relationships
    edition_languages = relationship('EditionLanguage', back_populates='language')

    # Convenience relationship
    editions = relationship('Edition', secondary='editions_languages', viewonly=True)
