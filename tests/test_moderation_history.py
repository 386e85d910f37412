"""
Tests for moderation persistence and statistics.

Supabase is mocked; these tests check what gets written and how failures
are reported, not the database itself.
"""

import pytest
from unittest.mock import MagicMock, Mock, patch

from horizon.services import moderation_history
from horizon.services.moderation import moderate_campaign


@pytest.fixture
def review_result(community_campaign):
    return moderate_campaign(community_campaign)


class TestHistoryRow:

    def test_row_carries_scores_and_decision(self, review_result):
        row = moderation_history.to_history_row(review_result, "campaign-garden")

        assert row["campaign_id"] == "campaign-garden"
        assert row["moderation_score"] == review_result["scores"]["overall"]
        assert row["decision"] == "review"
        assert row["flags"] == review_result["flags"]
        assert row["moderated_at"] == review_result["timestamp"]


class TestRecordModeration:

    @patch("horizon.services.moderation_history.get_admin_client")
    def test_review_decision_stores_updates_and_notifies(self, mock_admin, community_campaign, review_result):
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.return_value = Mock(data=[{"id": "row-1"}])
        mock_admin.return_value = client

        summary = moderation_history.record_moderation(community_campaign, review_result)

        assert summary == {"stored": True, "status": "UNDER_REVIEW", "notified": True, "errors": []}
        tables = [c.args[0] for c in client.table.call_args_list]
        assert tables == ["campaign_moderation", "campaigns", "notifications"]

        notification = client.table.return_value.insert.call_args_list[-1].args[0]
        assert notification["type"] == "campaign_review"
        assert notification["user_id"] == "test-user-id"

    @patch("horizon.services.moderation_history.get_admin_client")
    def test_approved_decision_does_not_notify(self, mock_admin, medical_campaign):
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.return_value = Mock(data=[{"id": "row-1"}])
        mock_admin.return_value = client

        summary = moderation_history.record_moderation(medical_campaign, moderate_campaign(medical_campaign))

        assert summary["status"] == "ACTIVE"
        assert summary["notified"] is False
        assert "notifications" not in [c.args[0] for c in client.table.call_args_list]

    @patch("horizon.services.moderation_history.get_admin_client")
    def test_storage_failure_is_reported_not_raised(self, mock_admin, community_campaign, review_result):
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.side_effect = Exception("connection reset")
        mock_admin.return_value = client

        summary = moderation_history.record_moderation(community_campaign, review_result)

        assert summary["stored"] is False
        assert summary["status"] == "UNDER_REVIEW"
        assert any("connection reset" in e for e in summary["errors"])

    @patch("horizon.services.moderation_history.get_admin_client", return_value=None)
    def test_unconfigured_database(self, _mock_admin, community_campaign, review_result):
        summary = moderation_history.record_moderation(community_campaign, review_result)

        assert summary["stored"] is False
        assert summary["status"] is None
        assert "Database not configured" in summary["errors"]

    def test_missing_campaign_id(self, community_campaign, review_result):
        campaign = dict(community_campaign, id=None)
        result = dict(review_result, campaignId=None)

        summary = moderation_history.record_moderation(campaign, result)
        assert summary["errors"] == ["Campaign ID is required to record moderation"]


class TestListing:

    @patch("horizon.services.moderation_history.get_admin_client")
    def test_invalid_decision_filter(self, mock_admin):
        rows, err = moderation_history.list_recent_moderations(decision="maybe")

        assert rows == []
        assert "Invalid decision filter" in err

    @patch("horizon.services.moderation_history.get_admin_client")
    def test_history_newest_first_query(self, mock_admin):
        client = MagicMock()
        query = client.table.return_value.select.return_value.eq.return_value.order.return_value
        query.execute.return_value = Mock(data=[{"id": "b"}, {"id": "a"}])
        mock_admin.return_value = client

        rows = moderation_history.get_moderation_history("campaign-1")

        assert [r["id"] for r in rows] == ["b", "a"]
        client.table.return_value.select.return_value.eq.return_value.order.assert_called_once_with(
            "moderated_at", desc=True
        )


class TestStatistics:

    def test_empty_rows(self):
        stats = moderation_history.compute_statistics([])

        assert stats["total"] == 0
        assert stats["decisions"] == {"approved": 0, "review": 0, "rejected": 0}
        assert stats["decision_rates"]["approved"] == 0.0
        assert stats["average_scores"]["overall"] is None
        assert stats["top_flags"] == []

    def test_distribution_and_averages(self):
        rows = [
            {"decision": "approved", "moderation_score": 90, "processing_time": 4,
             "scores": {"fraud": 0, "trust": 80}, "flags": []},
            {"decision": "review", "moderation_score": 60, "processing_time": 6,
             "scores": {"fraud": 20, "trust": 35}, "flags": ["low-trust-signals", "manual-review-required"]},
            {"decision": "rejected", "moderation_score": 10, "processing_time": 5,
             "scores": {"fraud": 100, "trust": 30}, "flags": ["fraud-veto", "low-trust-signals", "high-risk"]},
            {"decision": "approved", "moderation_score": 80, "processing_time": 5,
             "scores": {"fraud": 10, "trust": 75}, "flags": []},
        ]

        stats = moderation_history.compute_statistics(rows)

        assert stats["total"] == 4
        assert stats["decisions"] == {"approved": 2, "review": 1, "rejected": 1}
        assert stats["decision_rates"]["approved"] == 50.0
        assert stats["average_scores"]["overall"] == 60.0
        assert stats["average_scores"]["fraud"] == 32.5
        assert stats["average_scores"]["luxury"] is None
        assert stats["average_processing_time"] == 5.0
        assert stats["top_flags"][0] == {"flag": "low-trust-signals", "count": 2}

    @patch("horizon.services.moderation_history.list_recent_moderations")
    def test_statistics_period(self, mock_list):
        mock_list.return_value = ([{"decision": "approved", "moderation_score": 75, "flags": []}], None)

        stats, err = moderation_history.get_moderation_statistics(days=7)

        assert err is None
        assert stats["period_days"] == 7
        assert stats["total"] == 1
        assert mock_list.call_args.kwargs["since"] is not None

    @patch("horizon.services.moderation_history.list_recent_moderations")
    def test_statistics_error(self, mock_list):
        mock_list.return_value = ([], "Database not configured")

        stats, err = moderation_history.get_moderation_statistics()

        assert stats is None
        assert err == "Database not configured"
