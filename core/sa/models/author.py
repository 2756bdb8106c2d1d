# core/sa/models/author.py
from sqlalchemy import String, Text, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, LastSyncedMixin

class Author(Base, TimestampMixin, LastSyncedMixin):
    __tablename__ = 'authors'

    author_olid: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    birth_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    death_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    pic_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Relationships
    author_books = relationship('AuthorBook', back_populates='author')

    # Convenience relationship
    editions = relationship('Edition', secondary='authors_books', viewonly=True)

    __table_args__ = (
        # Search index
        Index('idx_authors_name', 'name'),
    )
