"""
Sync Schemas
Models for folder sync and folder selection endpoints
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from app.services.sync.categories import FolderCategory


class SyncFoldersRequest(BaseModel):
    """
    Request for a folder sync run.
    Omit categories to sync every folder type.
    """
    categories: Optional[List[FolderCategory]] = Field(default=None, min_length=1)


class SyncJobResponse(BaseModel):
    """Response for a queued background folder sync."""
    status: str  # "queued"
    job_id: str
    message: str


class FolderSelectionRequest(BaseModel):
    """
    Folders picked for one folder type.
    The first folder becomes the one that is synced.
    """
    folder_ids: List[str]
    folder_name: Optional[str] = None


class FolderSelectionResponse(BaseModel):
    """Response after saving a folder selection."""
    success: bool
    category: FolderCategory
    folder_ids: List[str]
