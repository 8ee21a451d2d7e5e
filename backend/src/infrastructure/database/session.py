from typing import Any, AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

from ..config.settings import DatabaseSettings


class Base(DeclarativeBase, MappedAsDataclass):
    """Base class for all catalog database models.

    Combines SQLAlchemy's DeclarativeBase with MappedAsDataclass, so every
    model gets a generated ``__init__``/``__repr__``/``__eq__`` built from its
    mapped columns. Columns the store assigns (primary keys) are declared with
    ``init=False``.

    Example:
        ```python
        class Book(Base):
            __tablename__ = "books"

            id: Mapped[int] = mapped_column(Integer, primary_key=True, init=False)
            title: Mapped[str] = mapped_column(String(255))

        book = Book(title="The Wise Man's Fear")
        ```
    """

    pass


class Database:
    """Store client owning the async engine and the session factory.

    The instance is built once at startup and shared by every request through
    ``app.state.database``. Nothing touches the network until ``connect()`` is
    awaited, and ``dispose()`` releases the pooled connections on shutdown.

    Args:
        url: SQLAlchemy async database URL
        **engine_options: Extra keyword arguments for ``create_async_engine``
    """

    def __init__(self, url: str, **engine_options: Any) -> None:
        self.url = url
        self.engine_options = engine_options
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "Database":
        """Build a store client from the application database settings."""
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.POSTGRES_POOL_SIZE,
            max_overflow=settings.POSTGRES_MAX_OVERFLOW,
        )

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._engine

    async def connect(self) -> None:
        """Create the engine and the session factory."""
        if self._engine is not None:
            return

        self._engine = create_async_engine(self.url, echo=False, future=True, **self.engine_options)
        self._sessionmaker = async_sessionmaker(bind=self._engine, class_=AsyncSession, expire_on_commit=False)

    async def dispose(self) -> None:
        """Close every pooled connection and forget the engine."""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    def session(self) -> AsyncSession:
        """Open a new session bound to this store."""
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._sessionmaker()

    async def create_tables(self) -> None:
        """Create all tables in the database if they don't exist.

        Idempotent: existing tables are left unchanged.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)


async def async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database session management with proper lifecycle.

    Opens one session per request from the store client the application
    placed on ``app.state`` during startup, and closes it once the response
    has been produced.

    Yields:
        AsyncSession: A configured async database session.

    Example:
        ```python
        @router.get("/copies")
        async def list_copies(db: AsyncSession = Depends(async_session)):
            result = await db.execute(select(Copy))
            return result.scalars().all()
        ```
    """
    database: Database = request.app.state.database
    async with database.session() as db:
        yield db
