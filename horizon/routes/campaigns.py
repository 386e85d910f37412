"""
Campaign endpoints for creators.

Creating a campaign runs moderation immediately; the decision sets the
initial status (ACTIVE, UNDER_REVIEW or REJECTED). A draft that could not be
moderated stays in DRAFT and can be submitted for manual review.
"""

from flask import Blueprint, request, jsonify, current_app
from ..utils.auth import require_auth, get_current_user_id
from ..utils.errors import sanitize_error, GENERIC_MESSAGES
from ..utils.validation import validate_campaign_payload
from ..services import campaigns as campaign_service
from ..services import moderation_history
from ..extensions import limiter
from .api import can_access_campaign


campaigns_bp = Blueprint("campaigns", __name__)


def _create_limit() -> str:
    return current_app.config.get("CAMPAIGN_CREATE_RATE_LIMIT", "10 per hour")


@campaigns_bp.route("/campaigns", methods=["POST"])
@require_auth
@limiter.limit(_create_limit)
def create():
    """
    Create a campaign and moderate it.

    **Authentication required**

    Returns:
        201: {"success": true, "campaign": {..., "moderation": {...}}}
        400: Validation failed
        500: Database error
    """
    data = request.get_json(silent=True)
    payload, error = validate_campaign_payload(
        data,
        min_goal=current_app.config.get("CAMPAIGN_MIN_GOAL", 100),
        max_goal=current_app.config.get("CAMPAIGN_MAX_GOAL", 1_000_000),
    )
    if error:
        return jsonify({"success": False, "error": error}), 400

    try:
        campaign, error = campaign_service.create_campaign(get_current_user_id(), payload)
    except Exception as e:
        sanitized_msg = sanitize_error(e, "database", "Campaign creation failed")
        return jsonify({"success": False, "error": sanitized_msg}), 500

    if error:
        current_app.logger.error(f"Campaign creation failed: {error}")
        return jsonify({"success": False, "error": GENERIC_MESSAGES["database"]}), 500

    return jsonify({"success": True, "campaign": campaign}), 201


@campaigns_bp.route("/campaigns/<campaign_id>/submit", methods=["POST"])
@require_auth
def submit(campaign_id: str):
    """
    Submit a draft for review.

    Returns:
        200: {"success": true, "campaign": {...}}
        400: Not a draft, or the completeness checklist failed
        403: Not the owner
        404: Campaign not found
    """
    campaign, error = campaign_service.submit_for_review(get_current_user_id(), campaign_id)
    if error:
        if error == "Campaign not found":
            status = 404
        elif error.startswith("Unauthorized"):
            status = 403
        elif error.startswith("Error") or error == "Database not configured":
            current_app.logger.error(f"Submit for review failed: {error}")
            return jsonify({"success": False, "error": GENERIC_MESSAGES["database"]}), 500
        else:
            status = 400
        return jsonify({"success": False, "error": error}), status

    return jsonify({"success": True, "campaign": campaign}), 200


@campaigns_bp.route("/campaigns/<campaign_id>/moderation", methods=["GET"])
@require_auth
def moderation(campaign_id: str):
    """Moderation history for a campaign, newest first (owner or admin)."""
    campaign = campaign_service.get_campaign(campaign_id)
    if not campaign:
        return jsonify({"success": False, "error": GENERIC_MESSAGES["not_found"]}), 404
    if not can_access_campaign(campaign, get_current_user_id()):
        return jsonify({"success": False, "error": "Access denied"}), 403

    history = moderation_history.get_moderation_history(campaign_id)
    return jsonify({
        "success": True,
        "campaign_id": campaign_id,
        "status": campaign.get("status"),
        "history": history,
    }), 200
