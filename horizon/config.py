"""
Centralized configuration for all environments.

Select a config by setting:
  APP_CONFIG=horizon.config.DevConfig      # local dev
  APP_CONFIG=horizon.config.ProdConfig     # production (default if unset)
  APP_CONFIG=horizon.config.TestConfig     # pytest

Notes:
- SECRET_KEY is read from FLASK_SECRET_KEY
- Rate limiting uses Flask-Limiter v3 keys (RATELIMIT_*).
- Moderation bands are tunable per environment (MODERATION_*). They must
  satisfy 0 < review < approve <= 100; production startup checks this.
"""

from __future__ import annotations
import os
from datetime import timedelta

class BaseConfig:
    # Secrets & basics
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "")
    DEBUG = False
    TESTING = False

    # Session configuration (admin console)
    PERMANENT_SESSION_LIFETIME = timedelta(hours=12)
    SESSION_COOKIE_SECURE = True  # Only send cookies over HTTPS (overridden in dev)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Supabase (Database + Auth)
    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
    SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    # Flask-Limiter v3
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "60 per minute; 2000 per day")
    RATELIMIT_ANALYZE = os.getenv("RATELIMIT_ANALYZE", "30 per minute; 1000 per day")
    CAMPAIGN_CREATE_RATE_LIMIT = "10 per hour"

    # CSRF is enforced on session-authenticated admin requests only (see routes/admin.py)
    WTF_CSRF_CHECK_DEFAULT = False

    # Request bodies are JSON only; keep them small
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024

    # Moderation decision bands and guards
    MODERATION_APPROVE_THRESHOLD = int(os.getenv("MODERATION_APPROVE_THRESHOLD", "70"))
    MODERATION_REVIEW_THRESHOLD = int(os.getenv("MODERATION_REVIEW_THRESHOLD", "45"))
    MODERATION_FRAUD_VETO = int(os.getenv("MODERATION_FRAUD_VETO", "60"))
    MODERATION_LARGE_GOAL_THRESHOLD = os.getenv("MODERATION_LARGE_GOAL_THRESHOLD", "10000")
    MODERATION_LUXURY_LINE_AMOUNT = os.getenv("MODERATION_LUXURY_LINE_AMOUNT", "5000")
    MODERATION_MAX_TEXT_LENGTH = int(os.getenv("MODERATION_MAX_TEXT_LENGTH", "20000"))
    MODERATION_TIME_BUDGET_MS = int(os.getenv("MODERATION_TIME_BUDGET_MS", "2000"))

    # Campaign limits (creation form)
    CAMPAIGN_MIN_GOAL = 100
    CAMPAIGN_MAX_GOAL = 1_000_000

    # Misc
    PREFERRED_URL_SCHEME = os.getenv("PREFERRED_URL_SCHEME", "https")

class ProdConfig(BaseConfig):
    """Production settings (selected by default if APP_CONFIG is unset)."""
    pass

class DevConfig(BaseConfig):
    """Developer-friendly settings."""
    ENV = "development"
    DEBUG = True
    PREFERRED_URL_SCHEME = "http"
    # Allow cookies over HTTP in dev
    SESSION_COOKIE_SECURE = False
    RATELIMIT_ANALYZE = "300 per minute"

class TestConfig(BaseConfig):
    """CI/pytest settings."""
    TESTING = True
    DEBUG = True
    SECRET_KEY = "test-secret-key-for-testing-only"
    # Usually disable the limiter in tests to avoid flakiness
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED = False
    MODERATION_APPROVE_THRESHOLD = 70
    MODERATION_REVIEW_THRESHOLD = 45
    MODERATION_FRAUD_VETO = 60
