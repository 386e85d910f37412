"""
Authentication utilities and decorators for route protection.

Provides:
- @require_auth: Decorator to require an authenticated user (JSON 401 otherwise)
- @require_admin: Decorator to require an admin/moderator (JSON 403 otherwise)
- Session management helpers for the admin console

API clients authenticate with a Supabase access token in the
`Authorization: Bearer <token>` header; the admin console keeps its tokens
in the Flask session.
"""

from __future__ import annotations
from functools import wraps
from typing import Optional, Dict, Any
from flask import session, request, jsonify, g
from horizon.services import supabase_client


# ============================================================================
# Session Management
# ============================================================================

SESSION_USER_KEY = "user"
SESSION_ACCESS_TOKEN_KEY = "access_token"
SESSION_REFRESH_TOKEN_KEY = "refresh_token"


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user() -> Optional[Dict[str, Any]]:
    """
    Get the authenticated user for this request.

    Checks the bearer token first, then the session tokens.

    Returns:
        User dict with id, email, etc. or None if not authenticated
    """
    # Check if user already loaded in request context
    if hasattr(g, "user"):
        return g.user

    token = _bearer_token()
    if token:
        g.user = supabase_client.get_user_from_token(token)
        return g.user

    access_token = session.get(SESSION_ACCESS_TOKEN_KEY)
    refresh_token = session.get(SESSION_REFRESH_TOKEN_KEY)

    if not access_token:
        g.user = None
        return None

    user = supabase_client.verify_session(access_token, refresh_token)
    if not user:
        # Token invalid/expired, clear session
        clear_session()
        g.user = None
        return None

    g.user = user
    return user


def get_current_user_id() -> Optional[str]:
    user = get_current_user()
    return user.get("id") if user else None


def set_session(user: Dict[str, Any], access_token: str, refresh_token: Optional[str] = None) -> None:
    """
    Store admin console session data.

    Security: Regenerates session ID to prevent session fixation attacks.
    """
    session.clear()
    session.modified = True

    session[SESSION_USER_KEY] = {
        "id": user.get("id"),
        "email": user.get("email"),
    }
    session[SESSION_ACCESS_TOKEN_KEY] = access_token
    if refresh_token:
        session[SESSION_REFRESH_TOKEN_KEY] = refresh_token
    session.permanent = True


def clear_session() -> None:
    """Clear user session data."""
    session.pop(SESSION_USER_KEY, None)
    session.pop(SESSION_ACCESS_TOKEN_KEY, None)
    session.pop(SESSION_REFRESH_TOKEN_KEY, None)


def is_authenticated() -> bool:
    return get_current_user() is not None


# ============================================================================
# Decorators
# ============================================================================

def require_auth(f):
    """
    Decorator to require authentication for a route.

    Usage:
        @api_bp.route('/campaigns', methods=['POST'])
        @require_auth
        def create():
            user_id = get_current_user_id()
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated():
            return jsonify({"success": False, "error": "Authentication required"}), 401
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """
    Decorator to require admin privileges for a route.

    Returns 401 when not signed in and 403 when the profile is neither an
    admin nor a moderator.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated():
            return jsonify({"success": False, "error": "Authentication required"}), 401

        if not supabase_client.is_admin(get_current_user_id()):
            return jsonify({"success": False, "error": "Admin privileges required"}), 403

        return f(*args, **kwargs)

    return decorated_function
