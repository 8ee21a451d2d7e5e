"""Utility functions for mapping domain and store exceptions to HTML error pages."""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError

from ....infrastructure.logging import get_logger
from ..constants import EXCEPTION_MAPPING, INTERNAL_ERROR_MESSAGE
from ..exceptions import DomainError

logger = get_logger(__name__)


def map_exception(error: DomainError) -> HTTPException:
    """Map a domain exception to a corresponding HTTP exception."""
    for exception_class, mapper in EXCEPTION_MAPPING.items():
        if isinstance(error, exception_class):
            return mapper(str(error))

    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR_MESSAGE)


def render_error(templates: Jinja2Templates, request: Request, status_code: int, message: str) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": message, "message": message, "status_code": status_code},
        status_code=status_code,
    )


def register_exception_handlers(app: FastAPI, templates: Jinja2Templates) -> None:
    """Register global exception handlers rendering the error page.

    Domain exceptions become their mapped status with the exception message.
    Store failures are never handled by the page handlers, they end up here
    and become a generic 500.
    """

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError) -> HTMLResponse:
        http_exception = map_exception(exc)
        logger.info(
            f"{request.method} {request.url.path} -> {http_exception.status_code}: {http_exception.detail}",
        )
        return render_error(templates, request, http_exception.status_code, str(http_exception.detail))

    @app.exception_handler(SQLAlchemyError)
    async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> HTMLResponse:
        logger.error(f"Store failure while serving {request.method} {request.url.path}", exc_info=exc)
        return render_error(templates, request, status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
