from fastapi import APIRouter, status
from fastapi.responses import RedirectResponse

from ...modules.copy.models import COPY_URL_PREFIX
from .copy import router as copy_router

router = APIRouter()
router.include_router(copy_router)


@router.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    """Send visitors to the copy list."""
    return RedirectResponse(COPY_URL_PREFIX, status_code=status.HTTP_302_FOUND)


@router.get(
    "/health",
    summary="Health Check",
    description="Simple health check endpoint for monitoring and container orchestration.",
    responses={
        200: {"description": "Service is healthy and responding"},
    },
)
async def health_check():
    """Health check endpoint for Docker health checks."""
    return {"status": "healthy", "message": "Library catalog is running"}
