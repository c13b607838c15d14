"""
Google Drive token lifecycle
Returns an access token that is valid for immediate use, refreshing it first if needed
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from app.core.config import settings
from app.services.sync.errors import TokenRefreshFailed
from app.services.sync.models import Connection

logger = logging.getLogger(__name__)


def _preview(token: Optional[str]) -> str:
    """Token prefix/suffix for logs."""
    if not token:
        return "MISSING"
    return f"{token[:4]}...{token[-4:]}" if len(token) > 8 else "****"


# ============================================================================
# EXPIRY POLICY
# ============================================================================

def needs_refresh(
    connection: Connection,
    now: Optional[datetime] = None,
    buffer: Optional[timedelta] = None
) -> bool:
    """
    True if the stored access token expires within the refresh buffer.

    Already-expired tokens and unknown expiry both count as needing refresh.
    """
    if connection.token_expires_at is None:
        return True

    now = now or datetime.now(timezone.utc)
    if buffer is None:
        buffer = timedelta(seconds=settings.token_refresh_buffer_seconds)

    time_until_expiry = connection.token_expires_at - now
    return time_until_expiry < buffer


# ============================================================================
# REFRESH
# ============================================================================

async def refresh_access_token(
    http_client: httpx.AsyncClient,
    team_id: str,
    session_token: Optional[str]
) -> str:
    """
    Ask the refresh endpoint for a new Drive access token.

    The endpoint persists the new token on the connection itself; this
    function only returns it.

    Args:
        http_client: Async HTTP client instance
        team_id: Team whose connection is refreshed
        session_token: Caller's session credential (not the Drive token)

    Returns:
        New access token

    Raises:
        TokenRefreshFailed: No session credential, non-2xx, transport error or bad body
    """
    if not session_token:
        logger.error("No auth session available for Drive token refresh")
        raise TokenRefreshFailed("No session credential available to refresh the Drive token")

    url = settings.resolved_token_refresh_url
    logger.info(f"🔄 Refreshing Drive token for team {team_id}")

    try:
        response = await http_client.post(
            url,
            headers={
                "Authorization": f"Bearer {session_token}",
                "Content-Type": "application/json"
            },
            json={"team_id": team_id},
            timeout=settings.token_refresh_timeout
        )
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error(f"Drive token refresh failed: {e.response.status_code} - {e.response.text[:500]}")
        raise TokenRefreshFailed(
            f"Token refresh returned {e.response.status_code}: {e.response.text[:200]}"
        ) from e
    except ValueError as e:
        # malformed JSON or undecodable bytes
        logger.error(f"Invalid JSON from token refresh endpoint: {e}")
        raise TokenRefreshFailed(f"Invalid JSON from token refresh endpoint: {e}") from e
    except httpx.HTTPError as e:
        logger.error(f"Error calling token refresh endpoint: {e}")
        raise TokenRefreshFailed(f"Token refresh request failed: {e}") from e

    access_token = data.get("access_token") if isinstance(data, dict) else None
    if not isinstance(access_token, str) or not access_token:
        logger.error("Token refresh response did not include an access_token")
        raise TokenRefreshFailed("Token refresh response did not include an access_token")

    logger.info(f"✅ Drive token refreshed for team {team_id} ({_preview(access_token)})")
    return access_token


async def get_valid_token(
    http_client: httpx.AsyncClient,
    connection: Connection,
    session_token: Optional[str],
    team_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> str:
    """
    Return a Drive access token that is valid for immediate use.

    If the stored token is still good for longer than the buffer it is
    returned unchanged. Otherwise exactly one refresh is attempted; a stale
    token is never returned after a failed refresh.

    Raises:
        TokenRefreshFailed: Refresh was required and did not succeed
    """
    if not needs_refresh(connection, now=now):
        logger.debug(f"Stored Drive token still valid (expires {connection.token_expires_at})")
        return connection.access_token

    logger.info(f"⏰ Drive token expires {connection.token_expires_at}, refresh required")
    return await refresh_access_token(http_client, team_id or connection.team_id, session_token)
