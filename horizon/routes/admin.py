"""
Admin routes for the moderation console.

Provides:
- Review queue (campaigns waiting on a human reviewer)
- Moderation history and statistics
- Human overrides: approve, reject, request changes
- Batch re-moderation
- Console session sign-in/out (Supabase tokens kept in the Flask session)
"""

from __future__ import annotations
from datetime import datetime, timedelta, timezone
from flask import Blueprint, request, jsonify, current_app
from flask_wtf.csrf import generate_csrf
from horizon.utils.auth import (
    require_admin,
    get_current_user,
    get_current_user_id,
    set_session,
    clear_session,
)
from horizon.utils.errors import GENERIC_MESSAGES
from horizon.services import campaigns, moderation_history, supabase_client
from horizon.extensions import csrf

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

MAX_PAGE_SIZE = 200
MAX_BATCH_SIZE = 100


@admin_bp.before_request
def _protect_session_requests():
    """Console requests ride on a session cookie; bearer-token clients do not."""
    if request.method not in ("POST", "PUT", "PATCH", "DELETE"):
        return
    if request.headers.get("Authorization") or not current_app.config.get("WTF_CSRF_ENABLED", True):
        return
    csrf.protect()


def _int_arg(name: str, default: int, upper: int) -> int:
    value = request.args.get(name, default, type=int)
    return max(1, min(value or default, upper))


def _database_error(error: str):
    current_app.logger.error(f"Admin request failed: {error}")
    return jsonify({"success": False, "error": GENERIC_MESSAGES["database"]}), 500


# ============================================================================
# Console session
# ============================================================================

@admin_bp.route("/session", methods=["GET"])
def session_info():
    """Current console user and a CSRF token for the console's POST requests."""
    user = get_current_user()
    return jsonify({
        "authenticated": user is not None,
        "user": {"id": user.get("id"), "email": user.get("email")} if user else None,
        "csrf_token": generate_csrf(),
    })


@admin_bp.route("/session", methods=["POST"])
def sign_in():
    """Exchange Supabase tokens for a console session (admins/moderators only)."""
    data = request.get_json(silent=True) or {}
    access_token = data.get("access_token")
    if not access_token:
        return jsonify({"success": False, "error": "access_token is required"}), 400

    user = supabase_client.verify_session(access_token, data.get("refresh_token"))
    if not user:
        return jsonify({"success": False, "error": GENERIC_MESSAGES["auth"]}), 401
    if not supabase_client.is_admin(user.get("id")):
        return jsonify({"success": False, "error": "Admin privileges required"}), 403

    set_session(user, access_token, data.get("refresh_token"))
    current_app.logger.info(f"Admin console sign-in for user {user.get('id')}")
    return jsonify({"success": True}), 200


@admin_bp.route("/session", methods=["DELETE"])
def sign_out():
    clear_session()
    return jsonify({"success": True}), 200


# ============================================================================
# Queue, history, statistics
# ============================================================================

@admin_bp.route("/moderation/queue")
@require_admin
def queue():
    """Campaigns in PENDING_REVIEW or UNDER_REVIEW, oldest first."""
    rows, error = campaigns.list_review_queue(limit=_int_arg("limit", 50, MAX_PAGE_SIZE))
    if error:
        return _database_error(error)
    return jsonify({"success": True, "count": len(rows), "campaigns": rows})


@admin_bp.route("/moderation/history")
@require_admin
def history():
    """
    Recent moderation results.

    Query params:
        decision: approved | review | rejected (optional)
        days: only results from the last N days (optional)
        limit: page size (default 50)
    """
    decision = request.args.get("decision") or None
    days = request.args.get("days", type=int)
    since = datetime.now(timezone.utc) - timedelta(days=days) if days else None

    if decision and decision not in moderation_history.DECISION_STATUS:
        return jsonify({"success": False, "error": "Invalid decision filter"}), 400

    rows, error = moderation_history.list_recent_moderations(
        limit=_int_arg("limit", 50, MAX_PAGE_SIZE), decision=decision, since=since
    )
    if error:
        return _database_error(error)
    return jsonify({"success": True, "count": len(rows), "results": rows})


@admin_bp.route("/moderation/stats")
@require_admin
def stats():
    """Decision distribution, average scores and top flags over the last N days."""
    stats, error = moderation_history.get_moderation_statistics(days=_int_arg("days", 30, 365))
    if error:
        return _database_error(error)
    return jsonify({"success": True, "stats": stats})


# ============================================================================
# Human review decisions
# ============================================================================

def _review(campaign_id: str, decision: str):
    data = request.get_json(silent=True) or {}
    notes = (data.get("notes") or "").strip()
    if decision == "rejected" and not notes:
        return jsonify({"success": False, "error": "A reason is required to reject a campaign"}), 400

    ok, error = campaigns.apply_review_decision(campaign_id, decision, get_current_user_id(), notes)
    if not ok:
        return _database_error(error)
    return jsonify({"success": True, "campaign_id": campaign_id, "decision": decision})


@admin_bp.route("/campaigns/<campaign_id>/approve", methods=["POST"])
@require_admin
def approve(campaign_id: str):
    return _review(campaign_id, "approved")


@admin_bp.route("/campaigns/<campaign_id>/reject", methods=["POST"])
@require_admin
def reject(campaign_id: str):
    return _review(campaign_id, "rejected")


@admin_bp.route("/campaigns/<campaign_id>/request-changes", methods=["POST"])
@require_admin
def request_changes(campaign_id: str):
    """
    Request body (JSON):
        {"changes": ["Add itemized receipts", ...], "notes": "optional"}
    """
    data = request.get_json(silent=True) or {}
    changes = [c.strip() for c in data.get("changes") or [] if isinstance(c, str) and c.strip()]
    if not changes:
        return jsonify({"success": False, "error": "At least one requested change is required"}), 400

    ok, error = campaigns.request_changes(
        campaign_id, changes, get_current_user_id(), (data.get("notes") or "").strip()
    )
    if not ok:
        if error == "Campaign not found":
            return jsonify({"success": False, "error": GENERIC_MESSAGES["not_found"]}), 404
        return _database_error(error)
    return jsonify({"success": True, "campaign_id": campaign_id, "decision": "review"})


@admin_bp.route("/moderation/batch", methods=["POST"])
@require_admin
def batch():
    """
    Re-moderate campaigns.

    Request body (JSON):
        {"campaignIds": ["<uuid>", ...]}   # omit to re-score the review queue
    """
    data = request.get_json(silent=True) or {}
    campaign_ids = data.get("campaignIds")
    if campaign_ids is not None:
        if not isinstance(campaign_ids, list) or not all(isinstance(c, str) for c in campaign_ids):
            return jsonify({"success": False, "error": "campaignIds must be a list of ids"}), 400
        if len(campaign_ids) > MAX_BATCH_SIZE:
            return jsonify({"success": False, "error": f"At most {MAX_BATCH_SIZE} campaigns per batch"}), 400

    results = campaigns.batch_moderate(campaign_ids)
    summary = {
        decision: sum(1 for r in results if r["decision"] == decision)
        for decision in ("approved", "review", "rejected", "error")
    }
    return jsonify({"success": True, "summary": summary, "results": results})
