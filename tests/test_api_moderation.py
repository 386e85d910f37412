"""
Integration tests for the moderation API endpoints.

Authentication is mocked at horizon.utils.auth.get_current_user, the same
seam the decorators use.
"""

import pytest
from unittest.mock import patch

USER = {"id": "test-user-id", "email": "test@example.com"}


class TestAnalyzeEndpoint:

    def test_requires_auth(self, client, medical_campaign):
        response = client.post("/api/v1/moderation/analyze", json={"campaign": medical_campaign})

        assert response.status_code == 401
        assert response.get_json()["success"] is False

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_analyze_inline_campaign(self, _mock_auth, client, medical_campaign):
        response = client.post("/api/v1/moderation/analyze", json={"campaign": medical_campaign})

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["result"]["decision"] == "approved"
        assert data["recorded"] is None

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_analyze_scam_is_rejected(self, _mock_auth, client, scam_campaign):
        response = client.post("/api/v1/moderation/analyze", json={"campaign": scam_campaign})

        assert response.status_code == 200
        result = response.get_json()["result"]
        assert result["decision"] == "rejected"
        assert "fraud-veto" in result["flags"]

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_invalid_campaign_returns_400(self, _mock_auth, client, medical_campaign):
        campaign = dict(medical_campaign)
        del campaign["title"]

        response = client.post("/api/v1/moderation/analyze", json={"campaign": campaign})

        assert response.status_code == 400
        assert "title" in response.get_json()["error"]

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_missing_body_returns_400(self, _mock_auth, client):
        response = client.post("/api/v1/moderation/analyze", data="not json", content_type="text/plain")

        assert response.status_code == 400

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_neither_campaign_nor_id(self, _mock_auth, client):
        response = client.post("/api/v1/moderation/analyze", json={"persist": True})

        assert response.status_code == 400
        assert "campaignId" in response.get_json()["error"]

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_oversized_text_returns_422(self, _mock_auth, app, client, medical_campaign):
        app.config["MODERATION_MAX_TEXT_LENGTH"] = 100

        response = client.post("/api/v1/moderation/analyze", json={"campaign": medical_campaign})

        assert response.status_code == 422
        assert response.get_json()["success"] is False

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_persist_requires_stored_campaign(self, _mock_auth, client, medical_campaign):
        response = client.post("/api/v1/moderation/analyze", json={"campaign": medical_campaign, "persist": True})

        assert response.status_code == 400

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    @patch("horizon.routes.api.moderation_history.record_moderation")
    @patch("horizon.routes.api.campaigns.get_campaign")
    def test_analyze_stored_campaign_and_persist(self, mock_get, mock_record, _mock_auth, client, stored_campaign):
        mock_get.return_value = stored_campaign
        mock_record.return_value = {"stored": True, "status": "ACTIVE", "notified": False, "errors": []}

        response = client.post("/api/v1/moderation/analyze", json={
            "campaignId": "campaign-medical",
            "persist": True,
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["result"]["campaignId"] == "campaign-medical"
        assert data["recorded"]["status"] == "ACTIVE"
        mock_record.assert_called_once()

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    @patch("horizon.routes.api.supabase_client.is_admin", return_value=False)
    @patch("horizon.routes.api.campaigns.get_campaign")
    def test_stored_campaign_of_another_user(self, mock_get, _mock_admin, _mock_auth, client, stored_campaign):
        mock_get.return_value = dict(stored_campaign, recipient_id="someone-else")

        response = client.post("/api/v1/moderation/analyze", json={"campaignId": "campaign-medical"})

        assert response.status_code == 403

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    @patch("horizon.routes.api.campaigns.get_campaign", return_value=None)
    def test_stored_campaign_not_found(self, _mock_get, _mock_auth, client):
        response = client.post("/api/v1/moderation/analyze", json={"campaignId": "nope"})

        assert response.status_code == 404

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    @patch("horizon.routes.api.moderate_campaign", side_effect=RuntimeError("secret internals"))
    def test_unexpected_error_is_sanitized(self, _mock_moderate, _mock_auth, client, medical_campaign):
        response = client.post("/api/v1/moderation/analyze", json={"campaign": medical_campaign})

        assert response.status_code == 500
        assert "secret internals" not in response.get_json()["error"]


class TestBearerToken:

    @patch("horizon.services.supabase_client.get_user_from_token", return_value=USER)
    def test_bearer_token_authenticates(self, mock_token, client, auth_headers, community_campaign):
        response = client.post(
            "/api/v1/moderation/analyze",
            json={"campaign": community_campaign},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.get_json()["result"]["decision"] == "review"
        mock_token.assert_called_once_with("test-token")

    @patch("horizon.services.supabase_client.get_user_from_token", return_value=None)
    def test_invalid_bearer_token(self, _mock_token, client, auth_headers, community_campaign):
        response = client.post(
            "/api/v1/moderation/analyze",
            json={"campaign": community_campaign},
            headers=auth_headers,
        )

        assert response.status_code == 401


class TestCheckEndpoint:

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_check_flags_luxury(self, _mock_auth, client):
        response = client.post("/api/v1/moderation/check", json={"content": "A luxury yacht for outreach"})

        assert response.status_code == 200
        data = response.get_json()
        assert data["passed"] is False
        assert data["checks"]["hasLuxury"] is True

    @patch("horizon.utils.auth.get_current_user", return_value=USER)
    def test_check_requires_content(self, _mock_auth, client):
        response = client.post("/api/v1/moderation/check", json={})

        assert response.status_code == 400
