"""
Drive Folder Routes
Folder status and folder selection per folder type
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, Request
from supabase import Client

from app.core.security import get_current_user_context
from app.core.dependencies import get_supabase
from app.models.schemas.sync import FolderSelectionRequest, FolderSelectionResponse
from app.services.sync.categories import FolderCategory
from app.services.sync.database import FolderStatus, get_folder_status, save_folder_selection
from app.middleware.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drive", tags=["drive"])


@router.get("/folders", response_model=List[FolderStatus])
async def list_folder_status(
    user_context: dict = Depends(get_current_user_context),
    supabase: Client = Depends(get_supabase)
):
    """
    Connected folder and document count for every folder type.
    Without a Drive connection every folder type is reported as not connected.
    """
    return await get_folder_status(supabase, user_context["user_id"], user_context["team_id"])


@router.put("/folders/{category}", response_model=FolderSelectionResponse)
@limiter.limit("60/hour")
async def select_folders(
    request: Request,
    category: FolderCategory,
    body: FolderSelectionRequest,
    user_context: dict = Depends(get_current_user_context),
    supabase: Client = Depends(get_supabase)
):
    """
    Save the folders picked for one folder type on the team's connection.
    The first folder is the one that gets synced.
    """
    team_id = user_context["team_id"]

    await save_folder_selection(supabase, team_id, category, body.folder_ids, body.folder_name)

    return FolderSelectionResponse(success=True, category=category, folder_ids=body.folder_ids)
