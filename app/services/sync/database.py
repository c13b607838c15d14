"""
Database helper functions for Drive folder sync
Handles connection lookup, folder selection and folder status
"""
import logging
from collections import Counter
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel
from supabase import Client

from app.core.config import settings
from app.services.sync.categories import FOLDER_COLUMNS, FolderCategory
from app.services.sync.errors import ConnectionNotFound
from app.services.sync.models import Connection

logger = logging.getLogger(__name__)


# ============================================================================
# CONNECTION RESOLUTION
# ============================================================================

class ResolutionSource(str, Enum):
    """Which lookup produced the connection."""
    USER = "user"
    TEAM = "team"
    NOT_FOUND = "not_found"


class ConnectionResolution(BaseModel):
    """Result of the user → team fallback lookup."""
    source: ResolutionSource
    connection: Optional[Connection] = None

    @property
    def found(self) -> bool:
        return self.connection is not None


def _first_active_row(supabase: Client, column: str, value: str) -> Optional[Dict[str, Any]]:
    """Fetch the first active connection row where column == value."""
    result = supabase.table(settings.drive_connections_table)\
        .select("*")\
        .eq(column, value)\
        .eq("is_active", True)\
        .limit(1)\
        .execute()

    if result is not None and result.data:
        return result.data[0]
    return None


async def lookup_connection(
    supabase: Client,
    user_id: Optional[str],
    team_id: Optional[str]
) -> ConnectionResolution:
    """
    Find the applicable Drive connection (first match wins).

    1. Active connection owned by user_id
    2. Active connection owned by team_id

    Args:
        supabase: Supabase client
        user_id: Calling user ID
        team_id: Calling user's team ID

    Returns:
        ConnectionResolution (source is NOT_FOUND if neither lookup matched)

    Raises:
        ConnectionNotFound: If the lookup layer itself errors
    """
    try:
        if user_id:
            row = _first_active_row(supabase, "user_id", user_id)
            if row:
                return ConnectionResolution(source=ResolutionSource.USER, connection=Connection.from_row(row))

        if team_id:
            row = _first_active_row(supabase, "team_id", team_id)
            if row:
                return ConnectionResolution(source=ResolutionSource.TEAM, connection=Connection.from_row(row))
    except Exception as e:
        logger.error(f"❌ Drive connection lookup failed (user={user_id}, team={team_id}): {e}")
        raise ConnectionNotFound(f"Drive connection lookup failed: {e}") from e

    return ConnectionResolution(source=ResolutionSource.NOT_FOUND)


async def resolve_connection(
    supabase: Client,
    user_id: Optional[str],
    team_id: Optional[str]
) -> ConnectionResolution:
    """
    Same as lookup_connection, but a missing connection is fatal.

    Raises:
        ConnectionNotFound: If neither the user nor the team has an active connection
    """
    resolution = await lookup_connection(supabase, user_id, team_id)

    if not resolution.found:
        logger.warning(f"No active Google Drive connection for user {user_id} or team {team_id}")
        raise ConnectionNotFound("No active Google Drive connection found")

    logger.info(f"🔗 Drive connection resolved via {resolution.source.value} (connection {resolution.connection.id})")
    return resolution


# ============================================================================
# FOLDER SELECTION
# ============================================================================

async def save_folder_selection(
    supabase: Client,
    team_id: str,
    category: FolderCategory,
    folder_ids: Sequence[str],
    folder_name: Optional[str] = None
) -> Dict[str, Any]:
    """
    Save the selected folders for one folder type on the team's connection.

    Always writes the selected_<type>_folder_ids array. When at least one
    folder is selected, the single-folder columns used by sync are set to
    the first folder (and its name, if given).

    Returns:
        The column update that was applied
    """
    columns = FOLDER_COLUMNS[category]
    update_data: Dict[str, Any] = {columns.selected_folder_ids: list(folder_ids)}

    if folder_ids:
        update_data[columns.folder_id] = folder_ids[0]
        if folder_name:
            update_data[columns.folder_name] = folder_name

    supabase.table(settings.drive_connections_table)\
        .update(update_data)\
        .eq("team_id", team_id)\
        .execute()

    logger.info(f"✅ Saved {len(folder_ids)} {category.value} folder(s) for team {team_id}")
    return update_data


# ============================================================================
# FOLDER STATUS
# ============================================================================

class FolderStatus(BaseModel):
    """Connection state and document count for one folder type."""
    category: FolderCategory
    folder_id: Optional[str] = None
    folder_name: Optional[str] = None
    connected: bool = False
    document_count: int = 0


async def count_documents_by_category(supabase: Client, team_id: str) -> Dict[FolderCategory, int]:
    """Count ingested documents per folder type for a team."""
    result = supabase.table(settings.documents_table)\
        .select("folder_type")\
        .eq("team_id", team_id)\
        .execute()

    rows = result.data if result is not None and result.data else []
    counts = Counter(row.get("folder_type") for row in rows)
    return {category: counts.get(category.value, 0) for category in FolderCategory}


async def get_folder_status(
    supabase: Client,
    user_id: Optional[str],
    team_id: str
) -> List[FolderStatus]:
    """
    Report which folder types are connected and how many documents each holds.

    A missing connection is not an error here: every folder type is reported
    as not connected.
    """
    resolution = await lookup_connection(supabase, user_id, team_id)
    counts = await count_documents_by_category(supabase, team_id)
    connection = resolution.connection

    statuses = []
    for category in FolderCategory:
        folder_id = connection.folder_id(category) if connection else None
        statuses.append(FolderStatus(
            category=category,
            folder_id=folder_id,
            folder_name=connection.folder_names.get(category) if connection else None,
            connected=folder_id is not None,
            document_count=counts[category],
        ))

    logger.debug(f"Folder status for team {team_id}: {sum(s.connected for s in statuses)} of {len(statuses)} connected")
    return statuses
