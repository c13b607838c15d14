"""
Drive Folder Sync System
Connection resolution, token lifecycle and per-folder-type ingestion dispatch
"""
from app.services.sync.categories import FolderCategory, FOLDER_COLUMNS, DEFAULT_CATEGORIES, normalize_categories
from app.services.sync.database import lookup_connection, resolve_connection, save_folder_selection, get_folder_status
from app.services.sync.errors import SyncCouldNotStart, ConnectionNotFound, TokenRefreshFailed, SyncErrorKind
from app.services.sync.ingestion import dispatch_all, interpret_sync_response
from app.services.sync.models import Connection, SyncRequest, SyncOutcome, AggregateResult
from app.services.sync.oauth import get_valid_token, needs_refresh, refresh_access_token
from app.services.sync.orchestration.folder_sync import aggregate_outcomes, sync_all_folders

__all__ = [
    "FolderCategory",
    "FOLDER_COLUMNS",
    "DEFAULT_CATEGORIES",
    "normalize_categories",
    "lookup_connection",
    "resolve_connection",
    "save_folder_selection",
    "get_folder_status",
    "SyncCouldNotStart",
    "ConnectionNotFound",
    "TokenRefreshFailed",
    "SyncErrorKind",
    "dispatch_all",
    "interpret_sync_response",
    "Connection",
    "SyncRequest",
    "SyncOutcome",
    "AggregateResult",
    "get_valid_token",
    "needs_refresh",
    "refresh_access_token",
    "aggregate_outcomes",
    "sync_all_folders",
]
