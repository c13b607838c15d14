"""
Tests for the background folder sync actor.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import httpx
import pytest

from conftest import REFRESH_URL, connection_row
from app.services.jobs import tasks
from app.services.sync.errors import ConnectionNotFound, SyncCouldNotStart


def _handler(request):
    if str(request.url) == REFRESH_URL:
        return httpx.Response(200, json={"access_token": "worker-token"})
    return httpx.Response(200, json={"success": True, "files_sent": 2})


class TestSyncFoldersTask:
    def test_completed_job_stores_result(self, fake_supabase, make_http_client):
        fake_supabase.tables["user_drive_connections"] = [connection_row()]
        fake_supabase.tables["sync_jobs"] = [{"id": "job-1", "status": "queued"}]
        http_client, _ = make_http_client(_handler)

        with patch.object(tasks, "get_sync_dependencies", return_value=(http_client, fake_supabase)):
            payload = tasks.sync_folders_task.fn("team-1", "user-1", "job-1", ["strategy"])

        job = fake_supabase.tables["sync_jobs"][0]
        assert job["status"] == "completed"
        assert job["result"] == payload
        assert payload["success"] is True
        assert payload["total_files_sent"] == 2
        assert http_client.is_closed

    def test_refresh_uses_service_key(self, fake_supabase, make_http_client):
        expiring = (datetime.now(timezone.utc) + timedelta(seconds=30)).isoformat()
        fake_supabase.tables["user_drive_connections"] = [connection_row(token_expires_at=expiring)]
        fake_supabase.tables["sync_jobs"] = [{"id": "job-1", "status": "queued"}]
        http_client, recorder = make_http_client(_handler)

        with patch.object(tasks, "get_sync_dependencies", return_value=(http_client, fake_supabase)):
            tasks.sync_folders_task.fn("team-1", "user-1", "job-1", ["strategy"])

        assert recorder.to(REFRESH_URL)[0].headers["Authorization"] == "Bearer service-key"

    def test_fatal_error_marks_job_failed(self, fake_supabase, make_http_client):
        fake_supabase.tables["sync_jobs"] = [{"id": "job-1", "status": "queued"}]
        http_client, _ = make_http_client(_handler)

        with patch.object(tasks, "get_sync_dependencies", return_value=(http_client, fake_supabase)):
            with pytest.raises(ConnectionNotFound):
                tasks.sync_folders_task.fn("team-1", "user-1", "job-1")

        job = fake_supabase.tables["sync_jobs"][0]
        assert job["status"] == "failed"
        assert "No active Google Drive connection" in job["error_message"]

    def test_fatal_errors_are_not_retried(self):
        assert tasks.sync_folders_task.options["throws"] == (SyncCouldNotStart,)
