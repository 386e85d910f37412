"""
Supabase client initialization and helper functions.

Provides centralized access to Supabase for:
- Authentication (bearer tokens from the client app, admin console sessions)
- Profiles (roles used for admin checks)

Campaign and moderation tables are accessed from their own service modules
through get_admin_client().
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from flask import current_app, has_app_context
from supabase import create_client, Client


def _safe_log_error(message: str) -> None:
    """
    Log error message only if Flask app context is available.

    This allows functions to be called from tests without app context.
    """
    try:
        if has_app_context():
            current_app.logger.error(message)
    except (ImportError, RuntimeError):
        pass


# Global client instances (initialized once per app)
_supabase_client: Optional[Client] = None  # User client (anon key)
_supabase_admin: Optional[Client] = None   # Admin client (service role key)


def init_supabase(app) -> None:
    """
    Initialize Supabase clients with app config.
    Creates two clients:
    - Regular client with anon key (token verification)
    - Admin client with service role key (campaign writes, moderation history)

    Call this from the Flask app factory.
    """
    global _supabase_client, _supabase_admin

    url = app.config.get("SUPABASE_URL", "")
    anon_key = app.config.get("SUPABASE_ANON_KEY", "")
    service_key = app.config.get("SUPABASE_SERVICE_ROLE_KEY", "")

    if not url or not anon_key:
        app.logger.warning("Supabase URL or ANON_KEY not configured. Supabase features will be disabled.")
        _supabase_client = None
        _supabase_admin = None
        return

    try:
        _supabase_client = create_client(url, anon_key)
        app.logger.info("Supabase client initialized successfully")

        if service_key:
            _supabase_admin = create_client(url, service_key)
            app.logger.info("Supabase admin client initialized successfully")
        else:
            app.logger.warning("SUPABASE_SERVICE_ROLE_KEY not configured. Moderation results will not be stored.")

    except Exception as e:
        app.logger.error(f"Failed to initialize Supabase client: {e}")
        _supabase_client = None
        _supabase_admin = None


def get_client() -> Optional[Client]:
    """Get the global Supabase client instance (user client with anon key)."""
    return _supabase_client


def get_admin_client() -> Optional[Client]:
    """Get the admin Supabase client instance (admin client with service role key)."""
    return _supabase_admin


def is_configured() -> bool:
    """Check if Supabase is properly configured."""
    return _supabase_client is not None


# ============================================================================
# Authentication Helpers
# ============================================================================

def get_user_from_token(access_token: str) -> Optional[Dict[str, Any]]:
    """
    Resolve a bearer token (JWT issued by Supabase Auth) to its user.

    Args:
        access_token: JWT from the Authorization header

    Returns:
        User dict with id, email, etc. or None if the token is invalid
    """
    if not _supabase_client or not access_token:
        return None

    try:
        response = _supabase_client.auth.get_user(access_token)
        if response and response.user:
            return response.user.model_dump()
        return None
    except Exception as e:
        _safe_log_error(f"Error verifying access token: {e}")
        return None


def verify_session(access_token: str, refresh_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Verify an admin console session and return user data.

    Args:
        access_token: JWT access token from Supabase Auth
        refresh_token: Optional refresh token

    Returns:
        User dict with id, email, etc. or None if invalid
    """
    if not _supabase_client:
        return None

    try:
        session_response = _supabase_client.auth.set_session(
            access_token=access_token,
            refresh_token=refresh_token or ""
        )

        if session_response and session_response.user:
            return session_response.user.model_dump()
        return None

    except Exception as e:
        _safe_log_error(f"Error verifying session: {e}")
        return None


def get_user_profile(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Get user profile by user ID.

    Args:
        user_id: Supabase user UUID

    Returns:
        Profile dict with role, is_admin, etc. or None if not found
    """
    client = _supabase_admin or _supabase_client
    if not client:
        return None

    try:
        # maybe_single() handles 0 rows gracefully
        response = client.table("profiles").select("*").eq("id", user_id).maybe_single().execute()
        return response.data if response else None
    except Exception as e:
        _safe_log_error(f"Error fetching user profile: {e}")
        return None


def is_admin(user_id: Optional[str]) -> bool:
    """Admins and moderators may review campaigns."""
    if not user_id:
        return False
    profile = get_user_profile(user_id)
    if not profile:
        return False
    return bool(profile.get("is_admin")) or profile.get("role") in ("admin", "moderator")
