"""
Pydantic Schemas
All request/response models for API endpoints
"""

# Health check schemas
from .health import HealthResponse

# Sync schemas
from .sync import SyncFoldersRequest, SyncJobResponse, FolderSelectionRequest, FolderSelectionResponse

__all__ = [
    # Health
    "HealthResponse",
    # Sync
    "SyncFoldersRequest",
    "SyncJobResponse",
    "FolderSelectionRequest",
    "FolderSelectionResponse",
]
