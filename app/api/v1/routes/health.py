"""
Health Check Routes
System status and diagnostics
"""
import logging
from fastapi import APIRouter

from app.core.config import settings
from app.models.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=VERSION, environment=settings.environment)


@router.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Drive Folder Sync API",
        "version": VERSION,
        "description": "Keeps Google Drive tokens valid and syncs configured folders into the ingestion service",
        "endpoints": {
            "health": "/health",
            "sync": {
                "folders": "/sync/folders",
                "background": "/sync/folders/background",
                "jobs": "/sync/jobs/{job_id}"
            },
            "drive": {
                "status": "/drive/folders",
                "select": "/drive/folders/{category}"
            }
        }
    }
