"""
Moderation history service.

Persists moderation results in the campaign_moderation table, applies the
decision to the campaign status, notifies creators whose campaigns need a
manual review, and reports statistics over stored results.

The scoring engine never writes anything; this module is the caller-side
persistence layer used by the API routes, the admin console and the CLI.
"""

from __future__ import annotations
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging
from flask import current_app, has_app_context
from horizon.services.supabase_client import get_admin_client

logger = logging.getLogger(__name__)


def _safe_log_error(message: str) -> None:
    """Safely log an error, handling cases where no app context exists."""
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)


# Decision -> campaign status
DECISION_STATUS = {
    "approved": "ACTIVE",
    "review": "UNDER_REVIEW",
    "rejected": "REJECTED",
}

SCORE_KEYS = ("luxury", "inappropriate", "fraud", "needValidation", "trust", "overall")


def to_history_row(result: Dict[str, Any], campaign_id: Optional[str] = None) -> Dict[str, Any]:
    """Shape a moderation result for the campaign_moderation table."""
    return {
        "campaign_id": campaign_id or result.get("campaignId"),
        "moderation_score": result["scores"]["overall"],
        "scores": result["scores"],
        "decision": result["decision"],
        "flags": result["flags"],
        "details": result["details"],
        "recommendations": result["recommendations"],
        "processing_time": result["processingTime"],
        "moderated_at": result["timestamp"],
    }


def store_moderation_result(
    result: Dict[str, Any],
    campaign_id: Optional[str] = None,
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Insert a moderation history row.

    Returns:
        (row, error_message)
    """
    supabase = get_admin_client()
    if not supabase:
        return None, "Database not configured"

    row = to_history_row(result, campaign_id)
    if not row["campaign_id"]:
        return None, "Campaign ID is required to store a moderation result"

    try:
        response = supabase.table("campaign_moderation").insert(row).execute()
        if response.data:
            return response.data[0], None
        return None, "Failed to store moderation result"
    except Exception as e:
        _safe_log_error(f"Error storing moderation result for campaign {row['campaign_id']}: {e}")
        return None, f"Error storing moderation result: {str(e)}"


def update_campaign_status(campaign_id: str, result: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """
    Apply a moderation decision to the campaign row.

    Returns:
        (new_status, error_message)
    """
    supabase = get_admin_client()
    if not supabase:
        return None, "Database not configured"

    new_status = DECISION_STATUS.get(result["decision"])
    if not new_status:
        return None, f"Unknown moderation decision: {result['decision']}"

    try:
        supabase.table("campaigns").update({
            "status": new_status,
            "moderation_score": result["scores"]["overall"],
            "moderated_at": result["timestamp"],
        }).eq("id", campaign_id).execute()
        return new_status, None
    except Exception as e:
        _safe_log_error(f"Error updating campaign {campaign_id} status: {e}")
        return None, f"Error updating campaign status: {str(e)}"


def send_review_notification(campaign: Dict[str, Any], result: Dict[str, Any]) -> Optional[str]:
    """Tell the creator their campaign is waiting on a human reviewer. Returns an error message or None."""
    supabase = get_admin_client()
    if not supabase:
        return "Database not configured"

    user_id = campaign.get("created_by") or campaign.get("recipient_id")
    if not user_id:
        return "Campaign has no creator to notify"

    try:
        supabase.table("notifications").insert({
            "user_id": user_id,
            "type": "campaign_review",
            "title": "Campaign Under Review",
            "body": (
                f'Your campaign "{campaign.get("title", "")}" is under review. '
                "We'll notify you once the review is complete."
            ),
            "metadata": {
                "campaign_id": campaign.get("id"),
                "moderation_score": result["scores"]["overall"],
                "flags": result["flags"],
            },
        }).execute()
        return None
    except Exception as e:
        _safe_log_error(f"Error sending review notification for campaign {campaign.get('id')}: {e}")
        return f"Error sending review notification: {str(e)}"


def record_moderation(campaign: Dict[str, Any], result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Persist a result and apply it: history row, campaign status, review notice.

    Storage problems are logged and reported in the summary; they never undo
    or hide the moderation decision itself.

    Returns:
        {"stored": bool, "status": str | None, "notified": bool, "errors": [str]}
    """
    campaign_id = campaign.get("id") or result.get("campaignId")
    summary: Dict[str, Any] = {"stored": False, "status": None, "notified": False, "errors": []}

    if not campaign_id:
        summary["errors"].append("Campaign ID is required to record moderation")
        return summary

    row, err = store_moderation_result(result, campaign_id)
    summary["stored"] = row is not None
    if err:
        summary["errors"].append(err)

    status, err = update_campaign_status(campaign_id, result)
    summary["status"] = status
    if err:
        summary["errors"].append(err)

    if result["decision"] == "review":
        err = send_review_notification({**campaign, "id": campaign_id}, result)
        summary["notified"] = err is None
        if err:
            summary["errors"].append(err)

    return summary


def get_moderation_history(campaign_id: str) -> List[Dict[str, Any]]:
    """All moderation rows for a campaign, newest first."""
    supabase = get_admin_client()
    if not supabase:
        return []

    try:
        response = supabase.table("campaign_moderation") \
            .select("*") \
            .eq("campaign_id", campaign_id) \
            .order("moderated_at", desc=True) \
            .execute()
        return response.data or []
    except Exception as e:
        _safe_log_error(f"Error fetching moderation history for campaign {campaign_id}: {e}")
        return []


def list_recent_moderations(
    limit: int = 50,
    decision: Optional[str] = None,
    since: Optional[datetime] = None,
) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """
    Recent moderation rows across all campaigns (admin history view).

    Returns:
        (rows, error_message)
    """
    supabase = get_admin_client()
    if not supabase:
        return [], "Database not configured"

    if decision is not None and decision not in DECISION_STATUS:
        return [], f"Invalid decision filter. Must be one of: {', '.join(DECISION_STATUS)}"

    try:
        query = supabase.table("campaign_moderation").select("*, campaigns(title, status)")
        if decision:
            query = query.eq("decision", decision)
        if since:
            query = query.gte("moderated_at", since.isoformat())
        response = query.order("moderated_at", desc=True).limit(limit).execute()
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error listing moderation history: {e}")
        return [], f"Error listing moderation history: {str(e)}"


def _average(values: Iterable[Any]) -> Optional[float]:
    numbers = [float(v) for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
    if not numbers:
        return None
    return round(sum(numbers) / len(numbers), 1)


def compute_statistics(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Summarize stored moderation rows.

    Returns:
        {
            "total": int,
            "decisions": {"approved": n, "review": n, "rejected": n},
            "decision_rates": {"approved": pct, ...},
            "average_scores": {"overall": x, "luxury": x, ...},
            "average_processing_time": ms,
            "top_flags": [{"flag": str, "count": n}, ...]
        }
    """
    total = len(rows)
    decisions = Counter(row.get("decision") for row in rows)
    flags = Counter(flag for row in rows for flag in (row.get("flags") or []))

    average_scores: Dict[str, Optional[float]] = {}
    for key in SCORE_KEYS:
        if key == "overall":
            values = [row.get("moderation_score") for row in rows]
        else:
            values = [(row.get("scores") or {}).get(key) for row in rows]
        average_scores[key] = _average(values)

    return {
        "total": total,
        "decisions": {d: decisions.get(d, 0) for d in DECISION_STATUS},
        "decision_rates": {
            d: round(100.0 * decisions.get(d, 0) / total, 1) if total else 0.0
            for d in DECISION_STATUS
        },
        "average_scores": average_scores,
        "average_processing_time": _average(row.get("processing_time") for row in rows),
        "top_flags": [{"flag": flag, "count": count} for flag, count in flags.most_common(5)],
    }


def get_moderation_statistics(days: int = 30) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Statistics over the last `days` days of moderation history.

    Returns:
        (stats_dict, error_message)
    """
    since = datetime.now(timezone.utc) - timedelta(days=days)
    rows, err = list_recent_moderations(limit=5000, since=since)
    if err:
        return None, err

    stats = compute_statistics(rows)
    stats["period_days"] = days
    return stats, None
