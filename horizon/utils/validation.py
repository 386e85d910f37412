"""
Input validation and normalization for campaign forms.

Trims and bounds text fields, strips control characters, checks goal and
deadline limits, and builds a clean payload for the campaign service.
Moderation has its own stricter parsing in services/moderation.py; this
module covers the creation form and the submit-for-review checklist.
"""

from __future__ import annotations
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from horizon.services.moderation import InvalidSubmissionError, normalize_need_type

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

MAX_TITLE_LEN = 120
MAX_STORY_LEN = 20000
MAX_BUDGET_LINES = 50
MAX_BUDGET_DESCRIPTION_LEN = 300
MAX_TAGS = 10

MIN_DEADLINE_DAYS = 7
MAX_DEADLINE_DAYS = 365

# Submit-for-review checklist
MIN_SUBMIT_TITLE_LEN = 10
MIN_SUBMIT_STORY_LEN = 200


def _clean_text(text: Any, max_len: int) -> str:
    """
    - strip whitespace
    - bound length
    - remove control chars; keep punctuation and newlines
    - collapse repeated spaces/tabs
    """
    if not isinstance(text, str):
        return ""
    t = text.strip()
    if not t:
        return ""
    t = t[:max_len]
    t = _CONTROL_CHARS.sub("", t)
    t = re.sub(r"[ \t]{2,}", " ", t)
    return t


def _parse_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = float(str(value).strip())
    except ValueError:
        return None
    if amount != amount or amount in (float("inf"), float("-inf")):
        return None
    return round(amount, 2)


def _parse_deadline(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _clean_budget(raw: Any, errors: List[str], max_amount: float) -> List[Dict[str, Any]]:
    if not isinstance(raw, list) or not raw:
        errors.append("Budget breakdown is required")
        return []
    if len(raw) > MAX_BUDGET_LINES:
        errors.append(f"Budget breakdown cannot have more than {MAX_BUDGET_LINES} lines")
        return []

    lines = []
    for i, entry in enumerate(raw, 1):
        if not isinstance(entry, dict):
            errors.append(f"Budget line {i} is invalid")
            continue
        description = _clean_text(entry.get("description") or entry.get("item"), MAX_BUDGET_DESCRIPTION_LEN)
        amount = _parse_amount(entry.get("amount"))
        if not description:
            errors.append(f"Budget line {i} needs a description")
        if amount is None or amount < 0:
            errors.append(f"Budget line {i} needs a non-negative amount")
            continue
        if amount > max_amount:
            errors.append(f"Budget line {i} cannot exceed ${max_amount:,.0f}")
            continue
        line = {"description": description, "amount": amount}
        category = _clean_text(entry.get("category"), 60)
        if category:
            line["category"] = category
        lines.append(line)
    return lines


def validate_campaign_payload(
    data: Dict[str, Any],
    min_goal: float = 100,
    max_goal: float = 1_000_000,
    today: Optional[date] = None,
) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    Validates a campaign creation request and returns (payload, error_message).

    On success, payload has title, need_type, goal_amount, story_markdown,
    budget_breakdown and the optional deadline (ISO date), currency,
    scripture_reference, category_id, location_*, tags and beneficiaries.
    """
    if not isinstance(data, dict) or not data:
        return {}, "Campaign data is required"

    today = today or date.today()
    errors: List[str] = []

    title = _clean_text(data.get("title"), MAX_TITLE_LEN)
    if not title:
        errors.append("Title is required")

    story = _clean_text(data.get("story_markdown") or data.get("story"), MAX_STORY_LEN)
    if not story:
        errors.append("Story is required")

    need_type = None
    try:
        need_type = normalize_need_type(data.get("need_type"))
    except InvalidSubmissionError as e:
        errors.append(str(e))

    goal = _parse_amount(data.get("goal_amount"))
    if goal is None:
        errors.append("Goal amount is required")
    elif goal < min_goal or goal > max_goal:
        errors.append(f"Goal amount must be between ${min_goal:,.0f} and ${max_goal:,.0f}")

    deadline = None
    if data.get("deadline"):
        deadline = _parse_deadline(data.get("deadline"))
        if deadline is None:
            errors.append("Deadline must be an ISO date")
        elif deadline < today + timedelta(days=MIN_DEADLINE_DAYS):
            errors.append(f"Deadline must be at least {MIN_DEADLINE_DAYS} days from now")
        elif deadline > today + timedelta(days=MAX_DEADLINE_DAYS):
            errors.append("Deadline cannot be more than 1 year from now")

    budget = _clean_budget(data.get("budget_breakdown"), errors, max_goal)

    if errors:
        return {}, "; ".join(errors)

    tags = [_clean_text(t, 40) for t in (data.get("tags") or []) if isinstance(t, str)]
    beneficiaries = [b for b in (data.get("beneficiaries") or []) if isinstance(b, dict)]

    return {
        "title": title,
        "story_markdown": story,
        "need_type": need_type,
        "goal_amount": goal,
        "budget_breakdown": budget,
        "deadline": deadline.isoformat() if deadline else None,
        "currency": _clean_text(data.get("currency"), 3).upper() or "USD",
        "scripture_reference": _clean_text(data.get("scripture_reference"), 120) or None,
        "category_id": data.get("category_id"),
        "location_country": _clean_text(data.get("location_country"), 80) or None,
        "location_city": _clean_text(data.get("location_city"), 80) or None,
        "tags": [t for t in tags if t][:MAX_TAGS],
        "beneficiaries": beneficiaries,
    }, None


def check_submission_completeness(campaign: Dict[str, Any]) -> List[str]:
    """Checklist a draft must pass before it can be submitted for review."""
    errors = []
    if len((campaign.get("title") or "").strip()) < MIN_SUBMIT_TITLE_LEN:
        errors.append(f"Title must be at least {MIN_SUBMIT_TITLE_LEN} characters")
    if len((campaign.get("story_markdown") or "").strip()) < MIN_SUBMIT_STORY_LEN:
        errors.append(f"Story must be at least {MIN_SUBMIT_STORY_LEN} characters")
    if not campaign.get("budget_breakdown"):
        errors.append("Budget breakdown is required")
    if not campaign.get("category_id"):
        errors.append("Category is required")
    return errors
