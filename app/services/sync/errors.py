"""
Folder Sync Errors

Fatal errors abort a sync run before any folder is dispatched.
Non-fatal errors are recorded per folder type on the SyncOutcome and never raised.
"""
from enum import Enum


class SyncCouldNotStart(Exception):
    """Base class for fatal errors: nothing can be synced without a connection and a valid token."""

    error_type = "sync_could_not_start"


class ConnectionNotFound(SyncCouldNotStart):
    """No active Drive connection for the user or the team (or the lookup itself failed)."""

    error_type = "connection_not_found"


class TokenRefreshFailed(SyncCouldNotStart):
    """A refresh was required and did not succeed."""

    error_type = "token_refresh_failed"


class SyncErrorKind(str, Enum):
    """Non-fatal, per-folder-type failure kinds."""

    RESOURCE_NOT_CONFIGURED = "resource_not_configured"
    REMOTE_SYNC_FAILED = "remote_sync_failed"
