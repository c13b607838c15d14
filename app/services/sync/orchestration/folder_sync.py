"""
Google Drive Folder Sync Engine
Resolves the connection, validates the token and syncs every requested folder type
"""
import logging
from typing import Iterable, Optional, Sequence

import httpx
from supabase import Client

from app.services.sync.categories import normalize_categories
from app.services.sync.database import resolve_connection
from app.services.sync.ingestion import dispatch_all
from app.services.sync.models import AggregateResult, SyncOutcome
from app.services.sync.oauth import get_valid_token

logger = logging.getLogger(__name__)


def aggregate_outcomes(outcomes: Sequence[SyncOutcome]) -> AggregateResult:
    """
    Merge per-folder outcomes into one report.

    Pure: success iff every outcome succeeded, totals are plain sums.
    """
    return AggregateResult(
        success=all(outcome.success for outcome in outcomes),
        results=list(outcomes),
        total_files_sent=sum(outcome.files_sent for outcome in outcomes),
        total_files_failed=sum(outcome.files_failed for outcome in outcomes),
    )


async def sync_all_folders(
    http_client: httpx.AsyncClient,
    supabase: Client,
    team_id: str,
    user_id: str,
    session_token: Optional[str],
    categories: Optional[Iterable[str]] = None
) -> AggregateResult:
    """
    Sync all configured Drive folders for a team.

    Flow:
    1. Resolve the connection (user first, then team)
    2. Get a valid access token (refresh if it expires within the buffer)
    3. Call the ingestion webhook once per folder type, in order
    4. Aggregate the outcomes

    The refreshed token is passed along in memory; the connection is not
    re-read after a refresh.

    Args:
        http_client: HTTP client
        supabase: Supabase client
        team_id: Team ID
        user_id: User ID
        session_token: Session credential used to authenticate a token refresh
        categories: Folder types to sync (None = all)

    Returns:
        AggregateResult with one outcome per requested folder type

    Raises:
        ConnectionNotFound: No active connection for the user or team
        TokenRefreshFailed: Token needed a refresh and it failed
    """
    requested = normalize_categories(categories)
    logger.info(f"🚀 Starting folder sync for team {team_id} (user {user_id}): {[c.value for c in requested]}")

    resolution = await resolve_connection(supabase, user_id, team_id)
    connection = resolution.connection

    token = await get_valid_token(http_client, connection, session_token, team_id=team_id)

    outcomes = await dispatch_all(
        http_client,
        connection,
        token,
        requested,
        team_id=team_id,
        user_id=user_id
    )

    result = aggregate_outcomes(outcomes)

    logger.info(
        f"{'✅' if result.success else '⚠️ '} Folder sync complete for team {team_id}: "
        f"{result.total_files_sent} sent, {result.total_files_failed} failed, "
        f"{sum(not o.success for o in result.results)} of {len(result.results)} folder types failed"
    )
    return result
