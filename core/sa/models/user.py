# core/sa/models/user.py
from sqlalchemy import Integer, String, Text, ForeignKey, DateTime, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import datetime, UTC
from .base import Base, TimestampMixin

class Status(Base):
    """Reading state of a book in a user's collection"""
    __tablename__ = 'statuses'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    # Relationships
    user_books = relationship('UserBook', back_populates='status')

class User(Base, TimestampMixin):
    __tablename__ = 'users'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Relationships
    user_books = relationship('UserBook', back_populates='user')

    # Convenience relationship
    editions = relationship('Edition', secondary='users_books', viewonly=True)

class UserBook(Base, TimestampMixin):
    __tablename__ = 'users_books'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), nullable=False)
    edition_olid: Mapped[str] = mapped_column(ForeignKey('book_editions.edition_olid'), nullable=False)
    status_id: Mapped[int] = mapped_column(ForeignKey('statuses.id'), nullable=False, default=1)

    # Relationships
    user = relationship('User', back_populates='user_books')
    edition = relationship('Edition', back_populates='user_books')
    status = relationship('Status', back_populates='user_books')
    review = relationship('Review', back_populates='user_book', uselist=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'edition_olid', name='uix_users_books_user_edition'),
    )

class Review(Base):
    __tablename__ = 'book_review'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_book_id: Mapped[int] = mapped_column(ForeignKey('users_books.id'), nullable=False, unique=True)
    review: Mapped[str | None] = mapped_column(Text, nullable=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Relationships
    user_book = relationship('UserBook', back_populates='review')

    __table_args__ = (
        CheckConstraint('score >= 1 AND score <= 5', name='ck_book_review_score_range'),
    )
