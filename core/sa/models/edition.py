# core/sa/models/edition.py
from sqlalchemy import String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, LastSyncedMixin

class AuthorBook(Base):
    __tablename__ = 'authors_books'

    author_olid: Mapped[str] = mapped_column(ForeignKey('authors.author_olid'), primary_key=True)
    edition_olid: Mapped[str] = mapped_column(ForeignKey('book_editions.edition_olid'), primary_key=True)

    # Relationships
    author = relationship('Author', back_populates='author_books')
    edition = relationship('Edition', back_populates='author_books')

class EditionLanguage(Base):
    __tablename__ = 'editions_languages'

    edition_olid: Mapped[str] = mapped_column(ForeignKey('book_editions.edition_olid'), primary_key=True)
    language_id: Mapped[int] = mapped_column(ForeignKey('languages.id'), primary_key=True)

    # Relationships
    edition = relationship('Edition', back_populates='edition_languages')
    language = relationship('Language', back_populates='edition_languages')

class Edition(Base, TimestampMixin, LastSyncedMixin):
    __tablename__ = 'book_editions'

    edition_olid: Mapped[str] = mapped_column(String(32), primary_key=True)
    work_olid: Mapped[str] = mapped_column(ForeignKey('book_works.work_olid'), nullable=False)
    title: Mapped[str] = mapped_column(String(1024), nullable=False)
    publish_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    publishers: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    isbn: Mapped[str | None] = mapped_column(String(32), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Relationships
    work = relationship('Work', back_populates='editions')
    author_books = relationship('AuthorBook', back_populates='edition')
    edition_languages = relationship('EditionLanguage', back_populates='edition')
    user_books = relationship('UserBook', back_populates='edition')

    # Convenience relationships
    authors = relationship('Author', secondary='authors_books', viewonly=True)
    languages = relationship('Language', secondary='editions_languages', viewonly=True)

    __table_args__ = (
        Index('idx_book_editions_work_olid', 'work_olid'),
    )
