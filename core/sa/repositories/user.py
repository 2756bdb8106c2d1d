# core/sa/repositories/user.py
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from core.sa.models import User, Status

DEFAULT_STATUSES = ('want to read', 'reading', 'finished')

class UserRepository:
    """Repository for managing User entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by ID.

        Args:
            user_id: The ID of the user

        Returns:
            The User object if found, None otherwise
        """
        return self.session.query(User).filter(User.id == user_id).first()

    def get_by_username(self, username: str) -> Optional[User]:
        return self.session.query(User).filter(User.username == username).first()

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email, compared lower-cased"""
        return self.session.query(User).filter(User.email == email.lower()).first()

    def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        image: Optional[str] = None
    ) -> User:
        """Create a new user.

        Args:
            username: Unique login name
            email: Email address, stored lower-cased
            password_hash: bcrypt hash of the password
            image: Optional profile image path

        Returns:
            The created User object (flushed, so its id is set)
        """
        user = User(
            username=username,
            email=email.lower(),
            password_hash=password_hash,
            image=image
        )
        self.session.add(user)
        self.session.flush()
        return user


class StatusRepository:
    """Repository for the reading-status lookup table."""

    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[Status]:
        return self.session.query(Status).order_by(Status.id).all()

    def get_by_id(self, status_id: int) -> Optional[Status]:
        return self.session.query(Status).filter(Status.id == status_id).first()

    def seed_defaults(self) -> int:
        """Insert the default statuses when the table is empty.

        Returns:
            Number of statuses inserted
        """
        if self.session.query(func.count(Status.id)).scalar():
            return 0
        for status_id, name in enumerate(DEFAULT_STATUSES, start=1):
            self.session.add(Status(id=status_id, name=name))
        self.session.flush()
        return len(DEFAULT_STATUSES)
