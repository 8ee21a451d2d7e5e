"""Test configuration and fixtures for the library catalog."""

import os
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

# mypy: disable-error-code="import-untyped"
from testcontainers.core.docker_client import DockerClient
from testcontainers.postgres import PostgresContainer

from src.infrastructure.database.session import Database, async_session
from src.infrastructure.logging import configure_testing_logging
from src.interfaces.main import app
from src.modules.book.models import Book
from src.modules.copy.models import Copy


def is_docker_running() -> bool:
    """Check if Docker daemon is running."""
    try:
        DockerClient()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Keep test output free of application log lines."""
    configure_testing_logging()


@pytest.fixture(scope="session")
def pg_url():
    """Start a throwaway PostgreSQL container and return its asyncpg URL."""
    if not is_docker_running():
        pytest.skip("Docker is required, but not running")

    with PostgresContainer() as pg:
        host = pg.get_container_host_ip()
        port = pg.get_exposed_port(getattr(pg, "port", 5432))
        user = getattr(pg, "username", "test")
        password = getattr(pg, "password", "test")
        db = getattr(pg, "dbname", "test")

        yield f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db}"


@pytest.fixture
def test_db_url(request, tmp_path) -> str:
    """SQLite file per test by default; ``TEST_DATABASE=postgres`` switches to a container."""
    if os.environ.get("TEST_DATABASE", "sqlite") == "postgres":
        return request.getfixturevalue("pg_url")
    return f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"


@pytest_asyncio.fixture
async def database(test_db_url: str):
    """Connected store client with fresh tables."""
    store = Database(test_db_url)
    await store.connect()
    await store.create_tables()
    yield store
    await store.drop_tables()
    await store.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database):
    """Create a test database session."""
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def client(database: Database):
    """Create a test client where every request gets its own session on the test store."""
    app.dependency_overrides = {}

    async def override_get_db():
        async with database.session() as session:
            yield session

    app.dependency_overrides[async_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def test_book(db_session: AsyncSession):
    """Create a test book."""
    book = Book(title="The Name of the Wind", author="Patrick Rothfuss", isbn="9780756404741")
    db_session.add(book)
    await db_session.commit()
    return {"id": book.id, "title": book.title, "author": book.author}


@pytest_asyncio.fixture
async def test_book_2(db_session: AsyncSession):
    """Create a second test book, sorting before the first by title."""
    book = Book(title="Apes and Angels", author="Ben Bova")
    db_session.add(book)
    await db_session.commit()
    return {"id": book.id, "title": book.title, "author": book.author}


@pytest_asyncio.fixture
async def test_copy(db_session: AsyncSession, test_book: dict):
    """Create a copy of the test book that is out on loan."""
    copy = Copy(book_id=test_book["id"], imprint="Gollancz, 2011.", status="Loaned", due_back=date(2026, 11, 2))
    db_session.add(copy)
    await db_session.commit()
    return {
        "id": copy.id,
        "book_id": copy.book_id,
        "imprint": copy.imprint,
        "status": copy.status,
        "due_back": copy.due_back,
    }
