"""Health and metrics endpoints."""

from fastapi import APIRouter

from certengine.config import settings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/metrics")
async def metrics():
    """Basic service info for observability."""
    return {
        "service": "certengine",
        "version": "0.1.0",
        "certification_threshold": settings.certification_threshold,
    }
