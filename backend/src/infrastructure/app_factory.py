from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Dict, Optional

import anyio
from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.templating import Jinja2Templates

from ..modules.common.utils.error_handler import register_exception_handlers
from .config.settings import DatabaseSettings, Settings, get_settings
from .database.session import Database
from .logging import configure_logging, generate_correlation_id, get_logger, reset_correlation_id, set_correlation_id

CORRELATION_ID_HEADER = "X-Correlation-ID"

logger = get_logger(__name__)


async def set_threadpool_tokens(number_of_tokens: int = 100) -> None:
    """Configure the number of threadpool tokens for anyio."""
    limiter = anyio.to_thread.current_default_thread_limiter()
    limiter.total_tokens = number_of_tokens


def lifespan_factory(
    settings: Settings,
    database: Database,
    create_tables_on_startup: bool = True,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Factory to create a lifespan async context manager for a FastAPI app.

    The lifespan connects the store client when the process starts serving,
    optionally creates the tables, and disposes of the pooled connections on
    shutdown.

    Args:
        settings: Application settings
        database: Store client shared by all requests
        create_tables_on_startup: Whether to create database tables on startup

    Returns:
        An async context manager for FastAPI's lifespan
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        await set_threadpool_tokens()

        await database.connect()
        logger.info(f"{settings.APP_NAME} connected to its database")
        try:
            if isinstance(settings, DatabaseSettings) and create_tables_on_startup:
                await database.create_tables()

            yield

        finally:
            await database.dispose()
            logger.info(f"{settings.APP_NAME} closed its database connections")

    return lifespan


async def correlation_id_middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Tag every log record of a request with one correlation id and echo it back."""
    correlation_id = (
        request.headers.get(CORRELATION_ID_HEADER) or request.headers.get("X-Request-ID") or generate_correlation_id()
    )
    request.state.correlation_id = correlation_id
    token = set_correlation_id(correlation_id)
    try:
        response = await call_next(request)
    finally:
        reset_correlation_id(token)

    response.headers[CORRELATION_ID_HEADER] = correlation_id
    return response


def create_application(
    router: APIRouter,
    templates: Jinja2Templates,
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    lifespan: Optional[Callable[[FastAPI], AbstractAsyncContextManager[None]]] = None,
    create_tables_on_startup: Optional[bool] = None,
    enable_gzip: Optional[bool] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    version: Optional[str] = None,
    **kwargs: Any,
) -> FastAPI:
    """Creates and configures the catalog FastAPI application.

    Args:
        router: The APIRouter containing the routes for the application
        templates: Template environment used to render error pages
        settings: Application settings (uses get_settings() if None)
        database: Store client; built from the settings if None
        lifespan: Optional lifespan function for the FastAPI app. If None, uses
            lifespan_factory, which connects and disposes of the database.
        create_tables_on_startup: Whether to create database tables on startup.
            Defaults to settings.CREATE_TABLES_ON_STARTUP if None.
        enable_gzip: Whether to enable GZip compression middleware.
            Defaults to settings.GZIP_ENABLED if None.
        title: The title of the application.
        description: A detailed description of the application.
        version: The version of the application.
        **kwargs: Additional keyword arguments passed to FastAPI constructor

    Returns:
        A configured FastAPI application
    """

    if settings is None:
        settings = get_settings()

    configure_logging()

    if database is None:
        database = Database.from_settings(settings)

    _create_tables_on_startup = True
    if create_tables_on_startup is not None:
        _create_tables_on_startup = create_tables_on_startup
    elif hasattr(settings, "CREATE_TABLES_ON_STARTUP"):
        _create_tables_on_startup = settings.CREATE_TABLES_ON_STARTUP

    _enable_gzip = True
    if enable_gzip is not None:
        _enable_gzip = enable_gzip
    elif hasattr(settings, "GZIP_ENABLED"):
        _enable_gzip = settings.GZIP_ENABLED

    metadata: Dict[str, Any] = {
        "title": title if title is not None else settings.APP_NAME,
        "description": description if description is not None else settings.APP_DESCRIPTION,
        "version": version if version is not None else settings.VERSION,
        "debug": settings.DEBUG,
    }
    kwargs.update(metadata)

    if lifespan is None:
        lifespan = lifespan_factory(settings, database, create_tables_on_startup=_create_tables_on_startup)

    application = FastAPI(lifespan=lifespan, **kwargs)
    application.state.database = database

    application.include_router(router)

    register_exception_handlers(application, templates)

    if _enable_gzip:
        application.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MINIMUM_SIZE)

    if settings.LOG_CORRELATION_ID:
        application.middleware("http")(correlation_id_middleware)

    return application
