"""
Folder Sync Models
Connection record, per-folder sync request/outcome and the aggregate report
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.services.sync.categories import FOLDER_COLUMNS, FolderCategory
from app.services.sync.errors import SyncErrorKind


class Connection(BaseModel):
    """
    One tenant's link to Google Drive (a user_drive_connections row).

    Read-only here, except that a token refresh replaces access_token and
    token_expires_at as a side effect of the refresh endpoint.
    """
    id: Optional[str] = None
    user_id: Optional[str] = None
    team_id: Optional[str] = None
    access_token: str = ""
    refresh_token: Optional[str] = None
    token_expires_at: Optional[datetime] = None
    is_active: bool = True
    folders: Dict[FolderCategory, Optional[str]] = Field(default_factory=dict)
    folder_names: Dict[FolderCategory, Optional[str]] = Field(default_factory=dict)

    @field_validator("token_expires_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Connection":
        """Build a Connection from a raw Supabase row."""
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            user_id=row.get("user_id"),
            team_id=row.get("team_id"),
            access_token=row.get("access_token") or "",
            refresh_token=row.get("refresh_token"),
            token_expires_at=row.get("token_expires_at"),
            is_active=bool(row.get("is_active", True)),
            folders={
                category: row.get(columns.folder_id)
                for category, columns in FOLDER_COLUMNS.items()
            },
            folder_names={
                category: row.get(columns.folder_name)
                for category, columns in FOLDER_COLUMNS.items()
            },
        )

    def folder_id(self, category: FolderCategory) -> Optional[str]:
        """Configured folder for a category, or None if absent/empty."""
        return self.folders.get(category) or None


class SyncRequest(BaseModel):
    """One dispatch attempt. Built fresh per folder type, never persisted."""
    team_id: str
    user_id: str
    folder_id: str
    category: FolderCategory
    access_token: str

    def to_payload(self) -> Dict[str, str]:
        """Wire payload for the ingestion webhook."""
        return {
            "team_id": self.team_id,
            "user_id": self.user_id,
            "folder_id": self.folder_id,
            "folder_type": self.category.value,
            "access_token": self.access_token,
        }


class SyncOutcome(BaseModel):
    """Result of one dispatch attempt (exactly one per requested folder type)."""
    category: FolderCategory
    success: bool
    files_sent: int = 0
    files_failed: int = 0
    error: Optional[str] = None
    error_kind: Optional[SyncErrorKind] = None
    message: Optional[str] = None


class AggregateResult(BaseModel):
    """
    Consolidated report for one sync run.

    success is True iff every outcome succeeded. An empty run is vacuously
    successful and means nothing was requested.
    """
    success: bool
    results: List[SyncOutcome] = Field(default_factory=list)
    total_files_sent: int = 0
    total_files_failed: int = 0
