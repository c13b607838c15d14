"""
Shared fixtures: environment, an in-memory Supabase stand-in and HTTP mocking.
"""
import os

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
os.environ.setdefault("MANUAL_SYNC_WEBHOOK_URL", "https://ingest.test/webhook/manual-folder-sync")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.pop("REDIS_URL", None)
os.environ.pop("TOKEN_REFRESH_URL", None)

import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

REFRESH_URL = "https://project.supabase.test/functions/v1/google-drive-refresh-token"
WEBHOOK_URL = "https://ingest.test/webhook/manual-folder-sync"


class FakeQuery:
    """Just enough of the PostgREST query builder for these tests."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.filters: List = []
        self.operation = "select"
        self.payload: Any = None
        self.max_rows: Optional[int] = None

    def select(self, *columns):
        self.operation = "select"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def insert(self, row):
        self.operation = "insert"
        self.payload = row
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.queries.append(self)
        if self.db.error is not None:
            raise self.db.error

        rows = self.db.tables.setdefault(self.table, [])

        if self.operation == "insert":
            row = dict(self.payload)
            row.setdefault("id", f"{self.table}-{len(rows) + 1}")
            rows.append(row)
            return SimpleNamespace(data=[row])

        matched = [row for row in rows if self._matches(row)]

        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=matched)

        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        return SimpleNamespace(data=[dict(row) for row in matched])


class FakeSupabase:
    """In-memory stand-in for supabase.Client (table queries only)."""

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables = tables or {}
        self.queries: List[FakeQuery] = []
        self.error: Optional[Exception] = None

    def table(self, name):
        return FakeQuery(self, name)


def connection_row(**overrides) -> Dict[str, Any]:
    """A user_drive_connections row with a token valid for another hour."""
    row = {
        "id": "conn-1",
        "user_id": "user-1",
        "team_id": "team-1",
        "access_token": "stored-access-token",
        "refresh_token": "refresh-token",
        "token_expires_at": (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat(),
        "is_active": True,
        "strategy_folder_id": "folder-strategy",
        "strategy_folder_name": "Strategy Docs",
        "meetings_folder_id": None,
        "meetings_folder_name": None,
        "financial_folder_id": "folder-financial",
        "financial_folder_name": "Finance",
        "projects_folder_id": None,
        "projects_folder_name": None,
    }
    row.update(overrides)
    return row


class RecordingTransport:
    """httpx mock transport that records every request and delegates to a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def to(self, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]

    def bodies(self, url: str) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.to(url)]


@pytest.fixture
def fake_supabase():
    return FakeSupabase({"user_drive_connections": [], "documents": [], "sync_jobs": []})


@pytest.fixture
def make_http_client():
    """Build an AsyncClient backed by a RecordingTransport."""
    def _make(handler):
        recorder = RecordingTransport(handler)
        return httpx.AsyncClient(transport=httpx.MockTransport(recorder)), recorder

    return _make
