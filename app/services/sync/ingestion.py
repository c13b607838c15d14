"""
Folder ingestion dispatch
Calls the ingestion webhook once per configured folder type
"""
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.core.config import settings
from app.services.sync.categories import FolderCategory
from app.services.sync.errors import SyncErrorKind
from app.services.sync.models import Connection, SyncOutcome, SyncRequest

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "not configured"


# ============================================================================
# RESPONSE INTERPRETATION
# ============================================================================

def _count(data: Dict[str, Any], key: str) -> int:
    """Read a file count; anything but a non-negative whole number is malformed."""
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{key} is not a number: {value!r}")

    if isinstance(value, int):
        number = value
    else:
        try:
            number = float(value)
        except ValueError:
            raise ValueError(f"{key} is not a number: {value!r}") from None
        if not math.isfinite(number) or not number.is_integer():
            raise ValueError(f"{key} is not a whole number: {value!r}")
        number = int(number)

    if number < 0:
        raise ValueError(f"{key} is negative: {value!r}")
    return number


def _failure(category: FolderCategory, error: str, sent: int = 0, failed: int = 0) -> SyncOutcome:
    return SyncOutcome(
        category=category,
        success=False,
        files_sent=sent,
        files_failed=failed,
        error=error,
        error_kind=SyncErrorKind.REMOTE_SYNC_FAILED,
    )


def interpret_sync_response(category: FolderCategory, response: httpx.Response) -> SyncOutcome:
    """
    Turn an ingestion webhook response into a SyncOutcome.

    - non-2xx: failure, error = status + body text, counts only if the body supplies them
    - 2xx: success/files_sent/files_failed from the JSON body (defaults False/0/0)
    - unparseable 2xx body: failure
    """
    if not response.is_success:
        error = f"Manual sync failed: {response.status_code} {response.text}".rstrip()
        sent = failed = 0
        try:
            body = response.json()
            if isinstance(body, dict):
                sent = _count(body, "files_sent")
                failed = _count(body, "files_failed")
        except ValueError:
            pass  # opaque error body
        return _failure(category, error, sent, failed)

    try:
        body = response.json()
    except ValueError as e:
        return _failure(category, f"Malformed sync response: {e}")

    if not isinstance(body, dict):
        return _failure(category, f"Malformed sync response: expected an object, got {type(body).__name__}")

    try:
        sent = _count(body, "files_sent")
        failed = _count(body, "files_failed")
    except ValueError as e:
        return _failure(category, f"Malformed sync response: {e}")

    success = body.get("success") is True
    message = body.get("message") if isinstance(body.get("message"), str) else None

    return SyncOutcome(
        category=category,
        success=success,
        files_sent=sent,
        files_failed=failed,
        error=None if success else (message or "Sync reported failure"),
        error_kind=None if success else SyncErrorKind.REMOTE_SYNC_FAILED,
        message=message,
    )


# ============================================================================
# DISPATCH
# ============================================================================

def not_configured(category: FolderCategory) -> SyncOutcome:
    """Outcome for a folder type without a mapped folder (no network call)."""
    return SyncOutcome(
        category=category,
        success=False,
        files_sent=0,
        files_failed=0,
        error=NOT_CONFIGURED,
        error_kind=SyncErrorKind.RESOURCE_NOT_CONFIGURED,
    )


async def trigger_folder_sync(http_client: httpx.AsyncClient, request: SyncRequest) -> SyncOutcome:
    """
    Perform one webhook call for one folder.

    Transport errors, timeouts and unexpected failures are captured in the
    outcome, never raised.
    """
    logger.info(f"📤 Syncing {request.category.value} folder {request.folder_id} for team {request.team_id}")

    try:
        response = await http_client.post(
            settings.manual_sync_webhook_url,
            headers={"Content-Type": "application/json"},
            json=request.to_payload(),
            timeout=settings.sync_request_timeout
        )
        outcome = interpret_sync_response(request.category, response)
    except Exception as e:
        logger.error(f"❌ Failed to sync {request.category.value} folder: {type(e).__name__}: {e}", exc_info=not isinstance(e, httpx.HTTPError))
        return _failure(request.category, str(e) or type(e).__name__)

    if outcome.success:
        logger.info(f"   ✅ {request.category.value}: {outcome.files_sent} sent, {outcome.files_failed} failed")
    else:
        logger.error(f"   ❌ {request.category.value}: {outcome.error}")
    return outcome


async def dispatch_all(
    http_client: httpx.AsyncClient,
    connection: Connection,
    token: str,
    categories: Sequence[FolderCategory],
    *,
    team_id: Optional[str] = None,
    user_id: Optional[str] = None
) -> List[SyncOutcome]:
    """
    Sync each requested folder type, sequentially and in order.

    Args:
        http_client: Async HTTP client instance
        connection: Resolved Drive connection (folder configuration)
        token: Currently valid Drive access token
        categories: Folder types to sync, in order
        team_id: Team sending the request (defaults to the connection's team)
        user_id: User sending the request (defaults to the connection's user)

    Returns:
        One SyncOutcome per category, in request order
    """
    team_id = team_id or connection.team_id
    user_id = user_id or connection.user_id

    outcomes: List[SyncOutcome] = []
    for category in categories:
        folder_id = connection.folder_id(category)

        if not folder_id:
            logger.info(f"   ⏭️  {category.value} folder not configured, skipping")
            outcomes.append(not_configured(category))
            continue

        request = SyncRequest(
            team_id=team_id,
            user_id=user_id,
            folder_id=folder_id,
            category=category,
            access_token=token,
        )
        outcomes.append(await trigger_folder_sync(http_client, request))

    return outcomes
