# core/sa/models/work.py
from sqlalchemy import String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, LastSyncedMixin

class WorkSubject(Base):
    __tablename__ = 'works_subjects'

    work_olid: Mapped[str] = mapped_column(ForeignKey('book_works.work_olid'), primary_key=True)
    subject_id: Mapped[int] = mapped_column(ForeignKey('subjects.id'), primary_key=True)

    # Relationships
    work = relationship('Work', back_populates='work_subjects')
    subject = relationship('Subject', back_populates='work_subjects')

class Work(Base, TimestampMixin, LastSyncedMixin):
    __tablename__ = 'book_works'

    work_olid: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(1024), nullable=False)
    first_publication_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    editions = relationship('Edition', back_populates='work')
    work_subjects = relationship('WorkSubject', back_populates='work')

    # Convenience relationship
    subjects = relationship('Subject', secondary='works_subjects', viewonly=True)

    __table_args__ = (
        Index('idx_book_works_title', 'title'),
    )
