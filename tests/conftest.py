"""Shared fixtures for files manager tests."""

import pytest
from fastapi.testclient import TestClient

from files_manager.core.config import Settings
from files_manager.logic.credentials import CredentialVerifier
from files_manager.logic.files import FileHierarchyStore
from files_manager.logic.sessions import SessionManager
from files_manager.logic.users import UserDirectory
from files_manager.main import create_app
from files_manager.models.database import Database
from files_manager.storage.blobs import LocalBlobStore
from files_manager.storage.cache import MemoryExpiringStore


class FakeClock:
    """Controllable monotonic clock in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
async def database(tmp_path):
    """SQLite database with the schema created.

    Yields:
        Database handle, disposed after the test.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryExpiringStore(clock=clock)


@pytest.fixture
def blobs(tmp_path):
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def users(database):
    return UserDirectory(database)


@pytest.fixture
def credentials(users):
    return CredentialVerifier(users)


@pytest.fixture
def sessions(cache):
    return SessionManager(cache)


@pytest.fixture
def files(database, blobs):
    return FileHierarchyStore(database, blobs)


@pytest.fixture
async def user(users):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return await users.create("bob@dylan.com", "toto1234!")


@pytest.fixture
async def other_user(users):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return await users.create("alice@example.com", "secret42")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        cache_backend="memory",
        blob_backend="local",
        folder_path=str(tmp_path / "files"),
    )


@pytest.fixture
def client(settings):
    """HTTP client running the full application lifespan.

    Yields:
        FastAPI TestClient.
    """
    with TestClient(create_app(settings)) as test_client:
        yield test_client
