"""User directory: registration and lookup of user records."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash

from files_manager.core.errors import AuthenticationError, ValidationError
from files_manager.models.database import Database
from files_manager.models.user import User

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, database: Database) -> None:
        self._db = database

    async def create(self, email: str | None, password: str | None) -> User:
        """Register a new user.

        Args:
            email: Unique email address.
            password: Clear-text password; only its hash is stored.

        Returns:
            The persisted user.

        Raises:
            ValidationError: On a missing field or an email already taken.
        """
        if not email:
            raise ValidationError("Missing email")
        if not password:
            raise ValidationError("Missing password")

        async with self._db.session() as db:
            # Check if user exists
            existing = await db.scalar(select(User.id).where(User.email == email))
            if existing is not None:
                raise ValidationError("Already exist")

            user = User(email=email, password_hash=generate_password_hash(password))
            db.add(user)
            try:
                await db.commit()
            except IntegrityError:
                # lost a race against a concurrent registration
                await db.rollback()
                raise ValidationError("Already exist") from None

        logger.info("Registered user %s", user.id)
        return user

    async def get(self, user_id: int) -> User:
        # a token pointing at a vanished user is a bad credential
        async with self._db.session() as db:
            user = await db.get(User, user_id)
        if user is None:
            raise AuthenticationError()
        return user

    async def find_by_email(self, email: str) -> User | None:
        async with self._db.session() as db:
            return await db.scalar(select(User).where(User.email == email))

    async def count(self) -> int:
        async with self._db.session() as db:
            return await db.scalar(select(func.count()).select_from(User))
