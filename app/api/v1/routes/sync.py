"""
Sync Routes
Inline and background-job folder sync endpoints
"""
import logging
from typing import Optional
import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from supabase import Client

from app.core.security import get_current_user_id, get_current_user_context
from app.core.dependencies import get_supabase, get_http_client
from app.models.schemas.sync import SyncFoldersRequest, SyncJobResponse
from app.services.jobs.tasks import sync_folders_task, SYNC_JOBS_TABLE
from app.services.sync.models import AggregateResult
from app.services.sync.orchestration.folder_sync import sync_all_folders
from app.middleware.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])


def _requested_categories(body: Optional[SyncFoldersRequest]):
    if body is None or body.categories is None:
        return None
    return [category.value for category in body.categories]


@router.post("/folders", response_model=AggregateResult)
@limiter.limit("30/hour")
async def sync_folders(
    request: Request,
    body: Optional[SyncFoldersRequest] = None,
    user_context: dict = Depends(get_current_user_context),
    supabase: Client = Depends(get_supabase),
    http_client: httpx.AsyncClient = Depends(get_http_client)
):
    """
    Sync the team's configured Drive folders now (one webhook call per folder type).

    Per-folder failures are reported inside the result. The request only
    fails if sync could not start (no connection, or the token could not be
    refreshed); those are mapped to error responses by the app's exception
    handler.
    """
    team_id = user_context["team_id"]
    user_id = user_context["user_id"]

    logger.info(f"Manual folder sync requested for team {team_id} (user {user_id})")

    return await sync_all_folders(
        http_client,
        supabase,
        team_id,
        user_id,
        session_token=user_context["session_token"],
        categories=_requested_categories(body)
    )


@router.post("/folders/background", response_model=SyncJobResponse)
@limiter.limit("30/hour")
async def sync_folders_background(
    request: Request,
    body: Optional[SyncFoldersRequest] = None,
    user_context: dict = Depends(get_current_user_context),
    supabase: Client = Depends(get_supabase)
):
    """
    Start folder sync as background job.
    Returns immediately with job_id for status tracking.
    """
    team_id = user_context["team_id"]
    user_id = user_context["user_id"]

    logger.info(f"Enqueueing folder sync for team {team_id} (user {user_id})")

    try:
        job = supabase.table(SYNC_JOBS_TABLE).insert({
            "team_id": team_id,
            "user_id": user_id,
            "job_type": "drive_folders",
            "status": "queued"
        }).execute()

        job_id = str(job.data[0]["id"])

        sync_folders_task.send(team_id, user_id, job_id, _requested_categories(body))

        logger.info(f"✅ Folder sync job {job_id} queued")

        return SyncJobResponse(
            status="queued",
            job_id=job_id,
            message="Folder sync started in background. Use GET /sync/jobs/{job_id} to check status."
        )
    except Exception as e:
        logger.error(f"Error enqueueing folder sync: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/jobs/{job_id}")
async def get_job_status(
    job_id: str,
    user_id: str = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """
    Get status of a background sync job.

    Returns:
    - status: queued, running, completed, failed
    - started_at / completed_at
    - result: AggregateResult of the run
    - error_message: Error details if failed
    """
    result = supabase.table(SYNC_JOBS_TABLE)\
        .select("*")\
        .eq("id", job_id)\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()

    if not result.data:
        raise HTTPException(status_code=404, detail="Job not found")

    return result.data[0]
