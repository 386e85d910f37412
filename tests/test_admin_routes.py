"""
Tests for the admin moderation console endpoints.

Covers access control (401/403), queue/history/stats, review decisions,
batch re-moderation and console sessions.
"""

import pytest
from unittest.mock import patch

ADMIN = {"id": "admin-1", "email": "admin@example.com"}


@pytest.fixture
def as_admin():
    with patch("horizon.utils.auth.get_current_user", return_value=ADMIN), \
            patch("horizon.services.supabase_client.is_admin", return_value=True):
        yield


class TestAccessControl:

    def test_requires_login(self, client):
        response = client.get("/admin/moderation/queue")
        assert response.status_code == 401

    @patch("horizon.utils.auth.get_current_user", return_value={"id": "user-1"})
    @patch("horizon.services.supabase_client.is_admin", return_value=False)
    def test_requires_admin(self, _mock_admin, _mock_auth, client):
        response = client.get("/admin/moderation/queue")
        assert response.status_code == 403


class TestQueueHistoryStats:

    @patch("horizon.routes.admin.campaigns.list_review_queue")
    def test_queue(self, mock_queue, as_admin, client):
        mock_queue.return_value = ([{"id": "c1", "status": "UNDER_REVIEW"}], None)

        response = client.get("/admin/moderation/queue?limit=10")

        assert response.status_code == 200
        assert response.get_json()["count"] == 1
        mock_queue.assert_called_once_with(limit=10)

    @patch("horizon.routes.admin.campaigns.list_review_queue")
    def test_queue_database_error(self, mock_queue, as_admin, client):
        mock_queue.return_value = ([], "Error loading review queue: boom")

        response = client.get("/admin/moderation/queue")

        assert response.status_code == 500
        assert "boom" not in response.get_json()["error"]

    @patch("horizon.routes.admin.moderation_history.list_recent_moderations")
    def test_history_filter(self, mock_list, as_admin, client):
        mock_list.return_value = ([{"decision": "rejected"}], None)

        response = client.get("/admin/moderation/history?decision=rejected&days=7")

        assert response.status_code == 200
        kwargs = mock_list.call_args.kwargs
        assert kwargs["decision"] == "rejected"
        assert kwargs["since"] is not None

    def test_history_invalid_filter(self, as_admin, client):
        response = client.get("/admin/moderation/history?decision=maybe")
        assert response.status_code == 400

    @patch("horizon.routes.admin.moderation_history.get_moderation_statistics")
    def test_stats(self, mock_stats, as_admin, client):
        mock_stats.return_value = ({"total": 3, "period_days": 30}, None)

        response = client.get("/admin/moderation/stats")

        assert response.status_code == 200
        assert response.get_json()["stats"]["total"] == 3
        mock_stats.assert_called_once_with(days=30)


class TestReviewDecisions:

    @patch("horizon.routes.admin.campaigns.apply_review_decision", return_value=(True, None))
    def test_approve(self, mock_apply, as_admin, client):
        response = client.post("/admin/campaigns/c1/approve", json={"notes": "Verified bills"})

        assert response.status_code == 200
        mock_apply.assert_called_once_with("c1", "approved", "admin-1", "Verified bills")

    @patch("horizon.routes.admin.campaigns.apply_review_decision", return_value=(True, None))
    def test_reject_requires_reason(self, mock_apply, as_admin, client):
        response = client.post("/admin/campaigns/c1/reject", json={})

        assert response.status_code == 400
        mock_apply.assert_not_called()

    @patch("horizon.routes.admin.campaigns.apply_review_decision", return_value=(True, None))
    def test_reject(self, mock_apply, as_admin, client):
        response = client.post("/admin/campaigns/c1/reject", json={"notes": "Luxury purchase"})

        assert response.status_code == 200
        assert response.get_json()["decision"] == "rejected"

    @patch("horizon.routes.admin.campaigns.request_changes", return_value=(True, None))
    def test_request_changes(self, mock_request, as_admin, client):
        response = client.post("/admin/campaigns/c1/request-changes", json={
            "changes": ["Add hospital bills", "  "],
            "notes": "Almost there",
        })

        assert response.status_code == 200
        mock_request.assert_called_once_with("c1", ["Add hospital bills"], "admin-1", "Almost there")

    def test_request_changes_without_changes(self, as_admin, client):
        response = client.post("/admin/campaigns/c1/request-changes", json={"changes": []})
        assert response.status_code == 400


class TestBatch:

    @patch("horizon.routes.admin.campaigns.batch_moderate")
    def test_batch_summary(self, mock_batch, as_admin, client):
        mock_batch.return_value = [
            {"campaignId": "c1", "decision": "approved", "overall": 90},
            {"campaignId": "c2", "decision": "error", "error": "Campaign not found"},
        ]

        response = client.post("/admin/moderation/batch", json={"campaignIds": ["c1", "c2"]})

        assert response.status_code == 200
        summary = response.get_json()["summary"]
        assert summary == {"approved": 1, "review": 0, "rejected": 0, "error": 1}
        mock_batch.assert_called_once_with(["c1", "c2"])

    @patch("horizon.routes.admin.campaigns.batch_moderate", return_value=[])
    def test_batch_defaults_to_queue(self, mock_batch, as_admin, client):
        response = client.post("/admin/moderation/batch", json={})

        assert response.status_code == 200
        mock_batch.assert_called_once_with(None)

    def test_batch_rejects_bad_ids(self, as_admin, client):
        response = client.post("/admin/moderation/batch", json={"campaignIds": "c1"})
        assert response.status_code == 400


class TestConsoleSession:

    @patch("horizon.routes.admin.supabase_client.is_admin", return_value=True)
    @patch("horizon.routes.admin.supabase_client.verify_session", return_value=ADMIN)
    def test_sign_in_sets_session(self, _mock_verify, _mock_admin, client):
        response = client.post("/admin/session", json={"access_token": "jwt", "refresh_token": "r"})

        assert response.status_code == 200
        with client.session_transaction() as sess:
            assert sess["access_token"] == "jwt"
            assert sess["user"]["id"] == "admin-1"

    @patch("horizon.routes.admin.supabase_client.is_admin", return_value=False)
    @patch("horizon.routes.admin.supabase_client.verify_session", return_value={"id": "user-1"})
    def test_non_admin_cannot_sign_in(self, _mock_verify, _mock_admin, client):
        response = client.post("/admin/session", json={"access_token": "jwt"})
        assert response.status_code == 403

    @patch("horizon.routes.admin.supabase_client.verify_session", return_value=None)
    def test_invalid_tokens(self, _mock_verify, client):
        response = client.post("/admin/session", json={"access_token": "expired"})
        assert response.status_code == 401

    def test_sign_out_clears_session(self, client):
        with client.session_transaction() as sess:
            sess["access_token"] = "jwt"

        response = client.delete("/admin/session")

        assert response.status_code == 200
        with client.session_transaction() as sess:
            assert "access_token" not in sess

    def test_session_info_returns_csrf_token(self, client):
        response = client.get("/admin/session")

        data = response.get_json()
        assert data["authenticated"] is False
        assert data["csrf_token"]

    def test_csrf_enforced_on_console_posts(self, app, client):
        app.config["WTF_CSRF_ENABLED"] = True

        response = client.post("/admin/session", json={"access_token": "jwt"})

        assert response.status_code == 400
