"""
End-to-end tests for sync_all_folders with a fake Supabase and mocked HTTP.
"""
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from conftest import REFRESH_URL, WEBHOOK_URL, connection_row
from app.services.sync.categories import FolderCategory
from app.services.sync.errors import ConnectionNotFound, SyncErrorKind, TokenRefreshFailed
from app.services.sync.orchestration.folder_sync import sync_all_folders


def _ingestion_handler(request: httpx.Request) -> httpx.Response:
    if str(request.url) == REFRESH_URL:
        return httpx.Response(200, json={"access_token": "refreshed-token"})
    if b'"financial"' in request.content:
        return httpx.Response(500, text="Internal Server Error")
    return httpx.Response(200, json={"success": True, "files_sent": 12, "files_failed": 0})


class TestSyncAllFolders:
    @pytest.mark.asyncio
    async def test_mixed_outcomes(self, fake_supabase, make_http_client):
        fake_supabase.tables["user_drive_connections"] = [connection_row()]
        client, recorder = make_http_client(_ingestion_handler)

        result = await sync_all_folders(
            client, fake_supabase, "team-1", "user-1", "session",
            categories=["strategy", "meetings", "financial"],
        )

        assert result.success is False
        assert result.total_files_sent == 12
        assert result.total_files_failed == 0

        strategy, meetings, financial = result.results
        assert (strategy.category, strategy.success, strategy.files_sent, strategy.files_failed) == (
            FolderCategory.STRATEGY, True, 12, 0
        )
        assert (meetings.category, meetings.success, meetings.files_sent, meetings.files_failed) == (
            FolderCategory.MEETINGS, False, 0, 0
        )
        assert meetings.error == "not configured"
        assert (financial.category, financial.success, financial.files_sent, financial.files_failed) == (
            FolderCategory.FINANCIAL, False, 0, 0
        )
        assert "500" in financial.error
        assert financial.error_kind == SyncErrorKind.REMOTE_SYNC_FAILED

        # valid token, no refresh; meetings skipped
        assert recorder.to(REFRESH_URL) == []
        assert len(recorder.to(WEBHOOK_URL)) == 2

    @pytest.mark.asyncio
    async def test_no_connection_raises_before_any_network_call(self, fake_supabase, make_http_client):
        client, recorder = make_http_client(_ingestion_handler)

        with pytest.raises(ConnectionNotFound):
            await sync_all_folders(client, fake_supabase, "team-1", "user-1", "session")

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_refresh_happens_before_dispatch_and_token_is_threaded(self, fake_supabase, make_http_client):
        expiring = (datetime.now(timezone.utc) + timedelta(minutes=2)).isoformat()
        fake_supabase.tables["user_drive_connections"] = [connection_row(token_expires_at=expiring)]
        client, recorder = make_http_client(_ingestion_handler)

        await sync_all_folders(client, fake_supabase, "team-1", "user-1", "session", categories=["strategy"])

        assert [str(r.url) for r in recorder.requests] == [REFRESH_URL, WEBHOOK_URL]
        assert recorder.bodies(WEBHOOK_URL)[0]["access_token"] == "refreshed-token"

    @pytest.mark.asyncio
    async def test_refresh_failure_aborts_without_dispatch(self, fake_supabase, make_http_client):
        expired = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()
        fake_supabase.tables["user_drive_connections"] = [connection_row(token_expires_at=expired)]

        def handler(request):
            if str(request.url) == REFRESH_URL:
                return httpx.Response(500, json={"error": "refresh failed"})
            return httpx.Response(200, json={"success": True})

        client, recorder = make_http_client(handler)

        with pytest.raises(TokenRefreshFailed):
            await sync_all_folders(client, fake_supabase, "team-1", "user-1", "session")

        assert recorder.to(WEBHOOK_URL) == []

    @pytest.mark.asyncio
    async def test_defaults_to_every_category(self, fake_supabase, make_http_client):
        fake_supabase.tables["user_drive_connections"] = [connection_row()]
        client, _ = make_http_client(_ingestion_handler)

        result = await sync_all_folders(client, fake_supabase, "team-1", "user-1", "session")

        assert [o.category for o in result.results] == list(FolderCategory)

    @pytest.mark.asyncio
    async def test_team_connection_used_with_callers_ids(self, fake_supabase, make_http_client):
        fake_supabase.tables["user_drive_connections"] = [
            connection_row(user_id="team-admin", team_id="team-1"),
        ]
        client, recorder = make_http_client(_ingestion_handler)

        result = await sync_all_folders(
            client, fake_supabase, "team-1", "member-7", "session", categories=["strategy"]
        )

        assert result.success is True
        body = recorder.bodies(WEBHOOK_URL)[0]
        assert body["user_id"] == "member-7"
        assert body["team_id"] == "team-1"
