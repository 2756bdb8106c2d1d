# core/services/auth.py
import logging
import re
from typing import Any, Dict, List, Optional

import bcrypt

from core.config import settings
from core.errors import AuthenticationError, ValidationError
from core.services.cache_store import CacheStore

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 4
MIN_PASSWORD_LENGTH = 8
EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class AuthService:
    """Sign-up validation and password login over the user table."""

    def __init__(self, store: CacheStore, bcrypt_rounds: Optional[int] = None):
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds or settings.bcrypt_rounds

    def validate_new_user(self, username: str, password: str, email: str) -> List[Dict[str, str]]:
        """Collect every problem with the sign-up data instead of stopping at the first"""
        errors = []

        if not username or len(username) < MIN_USERNAME_LENGTH:
            errors.append({'field': 'username', 'message': f'username must be at least {MIN_USERNAME_LENGTH} characters long'})
        elif self.store.username_taken(username):
            errors.append({'field': 'username', 'message': f'User: "{username}" already exists'})

        if not password or len(password) < MIN_PASSWORD_LENGTH:
            errors.append({'field': 'password', 'message': f'password must be at least {MIN_PASSWORD_LENGTH} characters long'})

        email = (email or '').strip().lower()
        if not EMAIL_PATTERN.match(email):
            errors.append({'field': 'email', 'message': f'Invalid email address: "{email}"'})
        elif self.store.email_taken(email):
            errors.append({'field': 'email', 'message': f'{email} already has an account'})

        return errors

    def register(self, username: str, password: str, email: str) -> Dict[str, Any]:
        """
        Create a user account.

        Returns:
            The new user record (without password hash)

        Raises:
            ValidationError: With one entry per failing field
        """
        errors = self.validate_new_user(username, password, email)
        if errors:
            raise ValidationError(errors)

        user = self.store.create_user(
            username=username,
            email=email.strip().lower(),
            password_hash=hash_password(password, self.bcrypt_rounds)
        )
        logger.info(f"Registered user {user['id']} ({username})")
        return user

    def authenticate(self, username: str, password: str) -> Dict[str, Any]:
        """
        Check a username/password pair.

        Returns:
            The user record on success

        Raises:
            AuthenticationError: Unknown user, wrong password or inactive account
        """
        credentials = self.store.get_user_credentials(username)
        if credentials is None:
            raise AuthenticationError("Invalid username or password")
        if credentials['status'] != 'active':
            raise AuthenticationError("Username not active - please contact site admin")
        if not verify_password(password, credentials.pop('password_hash')):
            raise AuthenticationError("Invalid username or password")
        return credentials
