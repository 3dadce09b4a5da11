# files_manager/models/database.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from files_manager.core.errors import DependencyError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    """Handle on the persistent metadata store.

    Built once at startup and passed to every component that needs it.
    """

    def __init__(self, url: str, **engine_kwargs) -> None:
        self.engine = create_async_engine(url, **engine_kwargs)
        self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_all(self) -> None:
        # table classes must be imported before metadata.create_all
        from files_manager.models import file, user  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            logger.exception("Failed to create database schema")
            raise DependencyError("Database unavailable") from exc

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessionmaker() as session:
                yield session
        except IntegrityError:
            # constraint violations are the caller's to interpret
            raise
        except SQLAlchemyError as exc:
            logger.exception("Database operation failed")
            raise DependencyError("Database unavailable") from exc

    async def is_alive(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            logger.warning("Database liveness check failed", exc_info=True)
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
