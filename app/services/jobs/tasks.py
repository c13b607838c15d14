"""
Dramatiq Background Tasks
Runs folder sync outside the request cycle and records progress in sync_jobs
"""
import dramatiq
import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

import httpx
from supabase import Client, create_client

from app.services.sync.errors import SyncCouldNotStart

logger = logging.getLogger(__name__)

SYNC_JOBS_TABLE = "sync_jobs"


def get_sync_dependencies():
    """
    Create fresh instances of dependencies for background tasks.
    Dramatiq workers run in separate processes, so we can't share global clients.
    """
    from app.core.config import settings
    from app.core.dependencies import create_http_client

    http_client = create_http_client()
    supabase = create_client(settings.supabase_url, settings.supabase_service_key)

    return http_client, supabase


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def update_job(supabase: Client, job_id: str, **fields):
    """Update a sync_jobs row."""
    supabase.table(SYNC_JOBS_TABLE).update(fields).eq("id", job_id).execute()


async def _run_folder_sync_with_cleanup(
    http_client: httpx.AsyncClient,
    supabase: Client,
    team_id: str,
    user_id: str,
    categories: Optional[List[str]] = None
):
    """
    Async wrapper that runs folder sync and closes the HTTP client in the same event loop.

    No user session exists in a worker, so the refresh call is authenticated
    with the service key. The token refresh endpoint must therefore accept
    service-role callers; one that only verifies user sessions will reject
    the refresh and the job fails with TokenRefreshFailed.
    """
    from app.core.config import settings
    from app.services.sync.orchestration.folder_sync import sync_all_folders

    try:
        return await sync_all_folders(
            http_client,
            supabase,
            team_id,
            user_id,
            session_token=settings.supabase_service_key,
            categories=categories
        )
    finally:
        await http_client.aclose()


@dramatiq.actor(max_retries=3, throws=(SyncCouldNotStart,))
def sync_folders_task(team_id: str, user_id: str, job_id: str, categories: Optional[List[str]] = None):
    """
    Background job for Drive folder sync.

    Fatal errors (no connection, token refresh failed) mark the job failed
    and are not retried.

    Args:
        team_id: Team ID
        user_id: User who queued the job
        job_id: Sync job ID for status tracking
        categories: Optional folder types (None = all)
    """
    logger.info(f"🚀 Starting folder sync job {job_id} for team {team_id}")

    http_client, supabase = get_sync_dependencies()

    try:
        update_job(supabase, job_id, status="running", started_at=_now())

        result = asyncio.run(_run_folder_sync_with_cleanup(
            http_client, supabase, team_id, user_id, categories
        ))
        payload = result.model_dump(mode="json")

        update_job(supabase, job_id, status="completed", completed_at=_now(), result=payload)

        logger.info(f"✅ Folder sync job {job_id} complete: {result.total_files_sent} files sent")
        return payload

    except Exception as e:
        logger.error(f"❌ Folder sync job {job_id} failed: {e}")

        update_job(supabase, job_id, status="failed", completed_at=_now(), error_message=str(e))

        raise  # Re-raise for Dramatiq retry logic
