"""
Campaign workflow service.

Creates draft campaigns and runs moderation on them, submits drafts for
review, serves the admin review queue, applies human review decisions and
re-moderates stored campaigns in batches.

Moderation failures never approve a campaign: on any ModerationError the
campaign stays in its current (unmoderated) status and the error is reported.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging
from flask import current_app, has_app_context
from horizon.services.supabase_client import get_admin_client
from horizon.services.moderation import ModerationError, moderate_campaign
from horizon.services import moderation_history
from horizon.utils.validation import check_submission_completeness

logger = logging.getLogger(__name__)


def _safe_log_error(message: str) -> None:
    """Safely log an error, handling cases where no app context exists."""
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)


def _safe_log_info(message: str) -> None:
    if has_app_context():
        current_app.logger.info(message)
    else:
        logger.info(message)


STATUS_DRAFT = "DRAFT"
STATUS_PENDING_REVIEW = "PENDING_REVIEW"
STATUS_UNDER_REVIEW = "UNDER_REVIEW"
REVIEW_QUEUE_STATUSES = [STATUS_PENDING_REVIEW, STATUS_UNDER_REVIEW]

REVIEW_DECISIONS = ("approved", "rejected", "review")


def to_moderation_payload(campaign: Dict[str, Any]) -> Dict[str, Any]:
    """Map a campaigns row onto the moderation engine's input fields."""
    return {
        "id": campaign.get("id"),
        "title": campaign.get("title"),
        "story": campaign.get("story_markdown") or campaign.get("story"),
        "description": campaign.get("description"),
        "need_type": campaign.get("need_type"),
        "goal_amount": campaign.get("goal_amount"),
        "budget_breakdown": campaign.get("budget_breakdown") or [],
        "created_by": campaign.get("recipient_id") or campaign.get("created_by"),
    }


def get_campaign(campaign_id: str) -> Optional[Dict[str, Any]]:
    supabase = get_admin_client()
    if not supabase:
        return None

    try:
        response = supabase.table("campaigns").select("*").eq("id", campaign_id).maybe_single().execute()
        return response.data if response else None
    except Exception as e:
        _safe_log_error(f"Error fetching campaign {campaign_id}: {e}")
        return None


def _moderation_summary(result: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "decision": result["decision"],
        "score": result["scores"]["overall"],
        "flags": result["flags"],
        "recommendations": result["recommendations"],
    }


def moderate_and_record(campaign: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Dict[str, Any], Optional[str]]:
    """
    Run moderation for a stored campaign and persist the outcome.

    Returns:
        (result, record_summary, error_message). On error the result is None
        and nothing was written.
    """
    try:
        result = moderate_campaign(to_moderation_payload(campaign))
    except ModerationError as e:
        _safe_log_error(f"Moderation failed for campaign {campaign.get('id')}: {e}")
        return None, {}, str(e)

    summary = moderation_history.record_moderation(to_moderation_payload(campaign), result)
    if summary["errors"]:
        _safe_log_error(
            f"Moderation for campaign {campaign.get('id')} not fully recorded: {'; '.join(summary['errors'])}"
        )
    return result, summary, None


def create_campaign(user_id: str, data: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Insert a draft campaign and moderate it.

    Args:
        user_id: creator's UUID
        data: payload already cleaned by validate_campaign_payload()

    Returns:
        (campaign_dict, error_message). The campaign carries a 'moderation'
        key with the decision summary, or with an 'error' when moderation
        could not run (the campaign then stays in DRAFT).
    """
    supabase = get_admin_client()
    if not supabase:
        return None, "Database not configured"

    tags = data.get("tags") or []
    beneficiaries = data.get("beneficiaries") or []

    try:
        campaign_data = {
            "recipient_id": user_id,
            "title": data["title"],
            "need_type": data["need_type"],
            "goal_amount": data["goal_amount"],
            "currency": data.get("currency") or "USD",
            "deadline": data.get("deadline"),
            "story_markdown": data["story_markdown"],
            "scripture_reference": data.get("scripture_reference"),
            "budget_breakdown": data["budget_breakdown"],
            "category_id": data.get("category_id"),
            "location_country": data.get("location_country"),
            "location_city": data.get("location_city"),
            "status": STATUS_DRAFT,
        }
        response = supabase.table("campaigns").insert(campaign_data).execute()
        if not response.data:
            return None, "Failed to create campaign"
        campaign = response.data[0]
    except Exception as e:
        _safe_log_error(f"Error creating campaign: {e}")
        return None, f"Error creating campaign: {str(e)}"

    try:
        if tags:
            supabase.table("campaign_tags").insert(
                [{"campaign_id": campaign["id"], "tag": tag} for tag in tags]
            ).execute()
        if beneficiaries:
            supabase.table("campaign_beneficiaries").insert(
                [{"campaign_id": campaign["id"], **b} for b in beneficiaries]
            ).execute()
    except Exception as e:
        _safe_log_error(f"Error saving tags/beneficiaries for campaign {campaign['id']}: {e}")

    result, summary, err = moderate_and_record(campaign)
    if err:
        campaign["moderation"] = {"error": err}
        return campaign, None

    if summary.get("status"):
        campaign["status"] = summary["status"]
    campaign["moderation_score"] = result["scores"]["overall"]
    campaign["moderation"] = _moderation_summary(result)

    _safe_log_info(f"Campaign {campaign['id']} created with moderation decision {result['decision']}")
    return campaign, None


def submit_for_review(user_id: str, campaign_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Move an owned, complete DRAFT campaign to PENDING_REVIEW and enqueue it.

    Returns:
        (updated_campaign, error_message)
    """
    supabase = get_admin_client()
    if not supabase:
        return None, "Database not configured"

    campaign = get_campaign(campaign_id)
    if not campaign:
        return None, "Campaign not found"
    if campaign.get("recipient_id") != user_id:
        return None, "Unauthorized to submit this campaign"
    if campaign.get("status") != STATUS_DRAFT:
        return None, "Only draft campaigns can be submitted for review"

    errors = check_submission_completeness(campaign)
    try:
        media = supabase.table("campaign_media").select("id").eq("campaign_id", campaign_id).limit(1).execute()
        if not media.data:
            errors.append("At least one image is required")
    except Exception as e:
        _safe_log_error(f"Error checking media for campaign {campaign_id}: {e}")
        errors.append("Could not verify campaign media")

    if errors:
        return None, f"Campaign validation failed: {', '.join(errors)}"

    try:
        response = supabase.table("campaigns") \
            .update({"status": STATUS_PENDING_REVIEW}) \
            .eq("id", campaign_id) \
            .execute()
        supabase.table("moderation_queue").insert({"campaign_id": campaign_id, "status": "pending"}).execute()
    except Exception as e:
        _safe_log_error(f"Error submitting campaign {campaign_id} for review: {e}")
        return None, f"Error submitting campaign: {str(e)}"

    updated = response.data[0] if response.data else {**campaign, "status": STATUS_PENDING_REVIEW}
    return updated, None


def list_review_queue(limit: int = 50) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """Campaigns waiting for a human reviewer, oldest first."""
    supabase = get_admin_client()
    if not supabase:
        return [], "Database not configured"

    try:
        response = supabase.table("campaigns") \
            .select("*") \
            .in_("status", REVIEW_QUEUE_STATUSES) \
            .order("created_at", desc=False) \
            .limit(limit) \
            .execute()
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading review queue: {e}")
        return [], f"Error loading review queue: {str(e)}"


def apply_review_decision(
    campaign_id: str,
    decision: str,
    reviewer_id: str,
    notes: str = "",
) -> Tuple[bool, Optional[str]]:
    """
    Record a human reviewer's decision (overrides the automated one).

    Returns:
        (success, error_message)
    """
    if decision not in REVIEW_DECISIONS:
        return False, f"Invalid decision. Must be one of: {', '.join(REVIEW_DECISIONS)}"

    supabase = get_admin_client()
    if not supabase:
        return False, "Database not configured"

    try:
        supabase.rpc("update_campaign_moderation_status", {
            "p_campaign_id": campaign_id,
            "p_decision": decision,
            "p_reviewer_id": reviewer_id,
            "p_notes": notes,
        }).execute()
        _safe_log_info(f"Campaign {campaign_id} set to {decision} by reviewer {reviewer_id}")
        return True, None
    except Exception as e:
        _safe_log_error(f"Error applying review decision to campaign {campaign_id}: {e}")
        return False, f"Error applying review decision: {str(e)}"


def request_changes(
    campaign_id: str,
    changes: List[str],
    reviewer_id: str,
    notes: str = "",
) -> Tuple[bool, Optional[str]]:
    """Notify the creator of required changes and keep the campaign in review."""
    if not changes:
        return False, "At least one requested change is required"

    supabase = get_admin_client()
    if not supabase:
        return False, "Database not configured"

    campaign = get_campaign(campaign_id)
    if not campaign:
        return False, "Campaign not found"

    try:
        supabase.table("notifications").insert({
            "user_id": campaign.get("recipient_id"),
            "type": "campaign_changes_requested",
            "title": "Changes Required for Your Campaign",
            "body": f"Your campaign requires changes before it can be approved. {', '.join(changes)}",
            "metadata": {"campaign_id": campaign_id, "changes": changes, "review_notes": notes},
        }).execute()
    except Exception as e:
        _safe_log_error(f"Error notifying creator of campaign {campaign_id}: {e}")
        return False, f"Error sending change request: {str(e)}"

    return apply_review_decision(campaign_id, "review", reviewer_id, notes)


def batch_moderate(campaign_ids: Optional[List[str]] = None) -> List[Dict[str, Any]]:
    """
    Re-moderate stored campaigns one by one.

    Args:
        campaign_ids: campaigns to re-score; defaults to the review queue

    Returns:
        One entry per campaign: {"campaignId", "decision", "overall"} or
        {"campaignId", "decision": "error", "error"}.
    """
    if campaign_ids is None:
        queue, err = list_review_queue(limit=500)
        if err:
            return [{"campaignId": None, "decision": "error", "error": err}]
        campaigns = queue
    else:
        campaigns = []
        for campaign_id in campaign_ids:
            campaign = get_campaign(campaign_id)
            campaigns.append(campaign or {"id": campaign_id, "_missing": True})

    results = []
    for campaign in campaigns:
        if campaign.get("_missing"):
            results.append({"campaignId": campaign["id"], "decision": "error", "error": "Campaign not found"})
            continue

        result, _summary, err = moderate_and_record(campaign)
        if err:
            results.append({"campaignId": campaign.get("id"), "decision": "error", "error": err})
        else:
            results.append({
                "campaignId": campaign.get("id"),
                "decision": result["decision"],
                "overall": result["scores"]["overall"],
            })
    return results
