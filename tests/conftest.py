# tests/conftest.py
"""
Test configuration and shared fixtures.

Provides Flask app, test client, Supabase mocks and sample campaigns.
"""

import os
import sys
import pytest
from unittest.mock import Mock, MagicMock

# Add the project root to sys.path
PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def app():
    """Create and configure a Flask app instance for testing."""
    os.environ["APP_CONFIG"] = "horizon.config.TestConfig"

    from horizon import create_app

    app = create_app()
    app.config.update({
        "TESTING": True,
        "WTF_CSRF_ENABLED": False,
        "RATELIMIT_ENABLED": False,
    })

    yield app


@pytest.fixture
def client(app):
    """Create a test client for the Flask app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner for the Flask app."""
    return app.test_cli_runner()


@pytest.fixture
def auth_headers():
    """Return headers for a bearer-token request."""
    return {"Authorization": "Bearer test-token"}


@pytest.fixture
def test_user():
    return {"id": "test-user-id", "email": "test@example.com"}


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for testing without a real database."""
    mock_client = MagicMock()

    mock_client.auth.get_user.return_value = Mock(
        user=Mock(id="test-user-id", email="test@example.com")
    )
    mock_client.table.return_value.select.return_value.execute.return_value = Mock(
        data=[]
    )

    return mock_client


@pytest.fixture
def medical_campaign():
    """Well-documented medical campaign (expected: approved)."""
    return {
        "id": "campaign-medical",
        "title": "Help Fund Medical Treatment for Sarah",
        "story": (
            "Sarah was diagnosed with stage 2 breast cancer in March. Her oncologist at "
            "St. Mary's Hospital has prescribed six months of chemotherapy followed by surgery. "
            "We have a detailed treatment plan from her doctor and copies of the hospital bills, "
            "and we will post receipts and regular updates on her progress. Our church family is "
            "praying for her and we are grateful for your support."
        ),
        "need_type": "medical",
        "goal_amount": 15000,
        "budget_breakdown": [
            {"description": "Chemotherapy sessions", "amount": 9250, "category": "medical"},
            {"description": "Surgery co-pay", "amount": 3800, "category": "medical"},
            {"description": "Prescription medication", "amount": 1450, "category": "medical"},
            {"description": "Travel to hospital appointments", "amount": 500, "category": "travel"},
        ],
        "created_by": "test-user-id",
    }


@pytest.fixture
def luxury_campaign():
    """Luxury purchase framed as ministry (expected: rejected)."""
    return {
        "id": "campaign-luxury",
        "title": "Need a New Mercedes for Ministry",
        "story": (
            "I need a brand new Mercedes Benz for my ministry work. The luxury car comes "
            "with premium features and will help me reach more people."
        ),
        "need_type": "other",
        "goal_amount": 80000,
        "budget_breakdown": [
            {"description": "Mercedes Benz S-Class", "amount": 75000},
            {"description": "Insurance", "amount": 5000},
        ],
        "created_by": "test-user-id",
    }


@pytest.fixture
def scam_campaign():
    """Classic money-flipping scam (expected: rejected by fraud veto)."""
    return {
        "id": "campaign-scam",
        "title": "URGENT - Quick Money Needed ASAP",
        "story": "Send money fast! Guaranteed returns! Wire transfer only. Double your money in 30 days!",
        "need_type": "emergency",
        "goal_amount": 100000,
        "budget_breakdown": [],
        "created_by": "test-user-id",
    }


@pytest.fixture
def community_campaign():
    """Vague but harmless community project (expected: review)."""
    return {
        "id": "campaign-garden",
        "title": "Community Garden Project",
        "story": "We want to start a garden for our neighborhood. Any help is appreciated.",
        "need_type": "community",
        "goal_amount": 2000,
        "budget_breakdown": [
            {"description": "Seeds and soil", "amount": 400},
            {"description": "Garden tools", "amount": 300},
        ],
        "created_by": "test-user-id",
    }


@pytest.fixture
def stored_campaign(medical_campaign):
    """Campaign row as stored in the campaigns table."""
    row = {k: v for k, v in medical_campaign.items() if k not in ("story", "created_by")}
    row.update({
        "story_markdown": medical_campaign["story"],
        "recipient_id": "test-user-id",
        "status": "DRAFT",
        "category_id": "category-health",
        "created_at": "2026-01-01T00:00:00Z",
    })
    return row
