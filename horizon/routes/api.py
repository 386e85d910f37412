"""
Defines the moderation JSON endpoints used by the client app.

Endpoints:
- /moderation/analyze: Score a campaign (inline payload or stored campaign)
- /moderation/check: Quick content pre-screen for editor drafts
"""

from flask import Blueprint, request, jsonify, current_app
from ..utils.auth import require_auth, get_current_user_id
from ..utils.errors import sanitize_error, GENERIC_MESSAGES
from ..services import supabase_client, campaigns, moderation_history
from ..services.moderation import (
    InvalidSubmissionError,
    ModerationProcessingError,
    moderate_campaign,
    quick_check,
)
from ..extensions import limiter


api_bp = Blueprint("api", __name__)


def _analyze_limit() -> str:
    return current_app.config.get("RATELIMIT_ANALYZE", "30 per minute")


def can_access_campaign(campaign: dict, user_id: str) -> bool:
    """Owners see their own campaigns; admins and moderators see all."""
    return campaign.get("recipient_id") == user_id or supabase_client.is_admin(user_id)


@api_bp.route("/moderation/analyze", methods=["POST"])
@require_auth
@limiter.limit(_analyze_limit)
def analyze_campaign():
    """
    Score a campaign and return the full moderation result.

    **Authentication required**

    Request body (JSON), one of:
        {"campaign": {title, story, need_type, goal_amount, budget_breakdown, ...}}
        {"campaignId": "<uuid>", "persist": true|false}

    `persist` stores the result and applies the decision; it is only
    accepted for stored campaigns.

    Returns:
        200: {"success": true, "result": ScoreResult, "recorded": {...} | null}
        400: Invalid input
        403: Stored campaign belongs to someone else
        404: Stored campaign not found
        422: Moderation could not be completed (campaign not approved)
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"success": False, "error": "Invalid request body"}), 400

    user_id = get_current_user_id()
    payload = data.get("campaign")
    campaign_id = data.get("campaignId")
    stored = None

    if payload is None and campaign_id:
        stored = campaigns.get_campaign(str(campaign_id))
        if not stored:
            return jsonify({"success": False, "error": GENERIC_MESSAGES["not_found"]}), 404
        if not can_access_campaign(stored, user_id):
            return jsonify({"success": False, "error": "Access denied"}), 403
        payload = campaigns.to_moderation_payload(stored)
    elif payload is None:
        return jsonify({"success": False, "error": "Campaign data or campaignId is required"}), 400

    if data.get("persist") and stored is None:
        return jsonify({"success": False, "error": "Only stored campaigns can be persisted"}), 400

    try:
        result = moderate_campaign(payload)
    except InvalidSubmissionError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except ModerationProcessingError as e:
        current_app.logger.warning(f"Moderation processing failed: {e}")
        return jsonify({"success": False, "error": str(e)}), 422
    except Exception as e:
        sanitized_msg = sanitize_error(e, "moderation", "Campaign analysis failed")
        return jsonify({"success": False, "error": sanitized_msg}), 500

    recorded = None
    if data.get("persist"):
        recorded = moderation_history.record_moderation(payload, result)

    return jsonify({"success": True, "result": result, "recorded": recorded}), 200


@api_bp.route("/moderation/check", methods=["POST"])
@require_auth
@limiter.limit(_analyze_limit)
def check_content():
    """
    Quick pattern check of free text (no scoring, nothing stored).

    Request body (JSON):
        {"content": "text to check"}

    Returns:
        {"success": true, "passed": bool, "checks": {...}}
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get("content"):
        return jsonify({"success": False, "error": "Content is required"}), 400

    report = quick_check(data["content"])
    return jsonify({"success": True, **report}), 200
