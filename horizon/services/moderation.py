"""
Campaign moderation engine.

Scores a campaign submission and returns an approve / review / reject
decision. The pipeline is synchronous and holds no state between calls:

1. parse_submission() validates the raw payload (fails fast on missing fields)
2. extract_text() builds one normalized text blob
3. five independent scorers produce 0-100 sub-scores with matched evidence
   (luxury, inappropriate, fraud are risk scores; need validation and trust
   are credibility scores)
4. aggregate() blends them into an overall score, applies the decision bands
   and the fraud veto, and derives flags and recommendations
5. assemble() packages everything into the JSON-ready result

Errors are explicit: InvalidSubmissionError for bad input and
ModerationProcessingError when the text cannot be evaluated. A result is
never returned for a campaign that was not fully scored.
"""

from __future__ import annotations
import json
import logging
import math
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypedDict

from flask import current_app, has_app_context

from horizon.services.moderation_rules import (
    EMERGENCY_FUNDS_PATTERN,
    FRAUD_PATTERNS,
    INAPPROPRIATE_TIERS,
    LUXURY_PATTERNS,
    NEED_INDICATORS,
    NEED_SUSPICIOUS,
    NEED_TYPE_ALIASES,
    NEED_TYPES,
    QUICK_CHECKS,
    TRUST_INDICATORS,
    URGENCY_PATTERN,
)

logger = logging.getLogger(__name__)


def _safe_log_error(message: str) -> None:
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)


def _safe_log_warning(message: str) -> None:
    if has_app_context():
        current_app.logger.warning(message)
    else:
        logger.warning(message)


def _safe_log_info(message: str) -> None:
    if has_app_context():
        current_app.logger.info(message)
    else:
        logger.info(message)


# ============================================================================
# Errors
# ============================================================================

class ModerationError(Exception):
    """Base class for failures that prevent a campaign from being scored."""


class InvalidSubmissionError(ModerationError):
    """Submission is missing required fields or contains malformed values."""


class ModerationProcessingError(ModerationError):
    """Text could not be evaluated (oversized input, regex failure, time budget)."""


# ============================================================================
# Tunables
# ============================================================================

# Risk scores pull the overall score down, credibility shortfalls pull it down
RISK_WEIGHTS = {"luxury": 0.45, "inappropriate": 0.50, "fraud": 0.40}
CREDIBILITY_WEIGHTS = {"needValidation": 0.30, "trust": 0.35}

LUXURY_NARRATIVE_POINTS = 15
LUXURY_BUDGET_POINTS = 30
LUXURY_HIGH_VALUE_POINTS = 20

FRAUD_PATTERN_POINTS = 20
FRAUD_URGENCY_POINTS = 15
FRAUD_BRIEF_STORY_POINTS = 10
FRAUD_NO_BUDGET_POINTS = 20
FRAUD_LARGE_GOAL_NO_BUDGET_POINTS = 15
FRAUD_ROUND_AMOUNTS_POINTS = 15
BRIEF_STORY_LENGTH = 200

NEED_BASE = 30
NEED_SUSPICIOUS_PENALTY = 40
EMERGENCY_BRIEF_STORY_LENGTH = 300
EMERGENCY_BRIEF_STORY_PENALTY = 25

TRUST_BASE = 30

# Sub-score levels that raise flags
LUXURY_FLAG_LEVEL = 30
INAPPROPRIATE_FLAG_LEVEL = 20
FRAUD_FLAG_LEVEL = 40
LOW_NEED_LEVEL = 50
LOW_TRUST_LEVEL = 40

MISSING_BUDGET_MATCH = "missing budget breakdown"

# Goal and budget amounts above this are refused before scoring
MAX_AMOUNT = Decimal("1000000000")

DECISIONS = ("approved", "review", "rejected")


@dataclass(frozen=True)
class ModerationSettings:
    """Decision bands and guards. Defaults mirror horizon.config.BaseConfig."""

    approve_threshold: int = 70
    review_threshold: int = 45
    fraud_veto: int = 60
    large_goal_threshold: Decimal = Decimal("10000")
    luxury_line_amount: Decimal = Decimal("5000")
    max_text_length: int = 20000
    time_budget_ms: int = 2000

    def validate(self) -> None:
        """Bands must split [0, 100] into three contiguous, non-empty ranges."""
        if not 0 < self.review_threshold < self.approve_threshold <= 100:
            raise ValueError(
                "Moderation thresholds must satisfy 0 < review < approve <= 100 "
                f"(got review={self.review_threshold}, approve={self.approve_threshold})"
            )
        if not 0 < self.fraud_veto <= 100:
            raise ValueError(f"Fraud veto must be within (0, 100] (got {self.fraud_veto})")
        if self.max_text_length <= 0 or self.time_budget_ms <= 0:
            raise ValueError("Text length and time budget limits must be positive")


DEFAULT_SETTINGS = ModerationSettings()


def settings_from_config(config: Mapping[str, Any]) -> ModerationSettings:
    """Build and validate ModerationSettings from a Flask config mapping (ValueError on bad bands)."""
    settings = ModerationSettings(
        approve_threshold=int(config.get("MODERATION_APPROVE_THRESHOLD", DEFAULT_SETTINGS.approve_threshold)),
        review_threshold=int(config.get("MODERATION_REVIEW_THRESHOLD", DEFAULT_SETTINGS.review_threshold)),
        fraud_veto=int(config.get("MODERATION_FRAUD_VETO", DEFAULT_SETTINGS.fraud_veto)),
        large_goal_threshold=Decimal(str(config.get("MODERATION_LARGE_GOAL_THRESHOLD", DEFAULT_SETTINGS.large_goal_threshold))),
        luxury_line_amount=Decimal(str(config.get("MODERATION_LUXURY_LINE_AMOUNT", DEFAULT_SETTINGS.luxury_line_amount))),
        max_text_length=int(config.get("MODERATION_MAX_TEXT_LENGTH", DEFAULT_SETTINGS.max_text_length)),
        time_budget_ms=int(config.get("MODERATION_TIME_BUDGET_MS", DEFAULT_SETTINGS.time_budget_ms)),
    )
    settings.validate()
    return settings


def _active_settings() -> ModerationSettings:
    if has_app_context():
        return settings_from_config(current_app.config)
    return DEFAULT_SETTINGS


# ============================================================================
# Input
# ============================================================================

@dataclass(frozen=True)
class BudgetLine:
    description: str
    amount: Decimal
    category: Optional[str] = None


@dataclass(frozen=True)
class CampaignSubmission:
    title: str
    story: str
    need_type: str
    goal_amount: Decimal
    budget_breakdown: Tuple[BudgetLine, ...] = field(default_factory=tuple)
    description: str = ""
    created_by: Optional[str] = None
    id: Optional[str] = None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidSubmissionError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidSubmissionError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise InvalidSubmissionError(f"{field_name} must be a finite number")
    if abs(amount) > MAX_AMOUNT:
        raise InvalidSubmissionError(f"{field_name} exceeds the maximum of {MAX_AMOUNT:,}")
    return amount


def normalize_need_type(value: Any) -> str:
    """Map form values (e.g. 'COMMUNITY_LONG_TERM') onto moderation need types."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidSubmissionError("need_type is required")
    need = value.strip().lower().replace("-", "_").replace(" ", "_")
    need = NEED_TYPE_ALIASES.get(need, need)
    if need not in NEED_TYPES:
        raise InvalidSubmissionError(
            f"Invalid need_type '{value}'. Must be one of: {', '.join(NEED_TYPES)}"
        )
    return need


def _parse_budget_line(index: int, entry: Any) -> BudgetLine:
    if not isinstance(entry, Mapping):
        raise InvalidSubmissionError(f"budget_breakdown[{index}] must be an object")

    # Older campaign records store a short 'item' name next to a longer description
    parts = [entry.get("item"), entry.get("description")]
    texts = [p.strip() for p in parts if isinstance(p, str) and p.strip()]
    if not texts:
        raise InvalidSubmissionError(f"budget_breakdown[{index}] is missing a description")

    if "amount" not in entry:
        raise InvalidSubmissionError(f"budget_breakdown[{index}] is missing an amount")
    amount = _to_decimal(entry.get("amount"), f"budget_breakdown[{index}].amount")
    if amount < 0:
        raise InvalidSubmissionError(f"budget_breakdown[{index}].amount cannot be negative")

    category = entry.get("category")
    if category is not None and not isinstance(category, str):
        raise InvalidSubmissionError(f"budget_breakdown[{index}].category must be a string")

    return BudgetLine(description=" ".join(texts), amount=amount, category=category or None)


def parse_submission(payload: Mapping[str, Any]) -> CampaignSubmission:
    """
    Validate a raw campaign payload and build a CampaignSubmission.

    Accepts the field names used across the platform: 'story' or
    'story_markdown' for the narrative, 'created_by' or 'recipient_id' for
    the owner. A payload that only carries 'description' uses it as the story.

    Raises:
        InvalidSubmissionError: required field missing or malformed
    """
    if not isinstance(payload, Mapping) or not payload:
        raise InvalidSubmissionError("Campaign data is required")

    story = payload.get("story")
    if _is_blank(story):
        story = payload.get("story_markdown")
    description = payload.get("description")
    if _is_blank(story) and not _is_blank(description):
        story, description = description, None

    fields = {
        "title": payload.get("title"),
        "story": story,
        "need_type": payload.get("need_type"),
        "goal_amount": payload.get("goal_amount"),
    }
    missing = [name for name, value in fields.items() if _is_blank(value)]
    if missing:
        raise InvalidSubmissionError(f"Missing required fields: {', '.join(missing)}")

    if not isinstance(fields["title"], str) or not isinstance(story, str):
        raise InvalidSubmissionError("title and story must be text")
    if description is not None and not isinstance(description, str):
        raise InvalidSubmissionError("description must be text")

    goal_amount = _to_decimal(fields["goal_amount"], "goal_amount")
    if goal_amount <= 0:
        raise InvalidSubmissionError("goal_amount must be greater than 0")

    raw_budget = payload.get("budget_breakdown")
    if raw_budget is None:
        raw_budget = []
    if not isinstance(raw_budget, (list, tuple)):
        raise InvalidSubmissionError("budget_breakdown must be a list")

    created_by = payload.get("created_by") or payload.get("recipient_id")
    campaign_id = payload.get("id")

    return CampaignSubmission(
        title=fields["title"].strip(),
        story=story.strip(),
        need_type=normalize_need_type(fields["need_type"]),
        goal_amount=goal_amount,
        budget_breakdown=tuple(_parse_budget_line(i, e) for i, e in enumerate(raw_budget)),
        description=(description or "").strip(),
        created_by=str(created_by) if created_by else None,
        id=str(campaign_id) if campaign_id else None,
    )


# ============================================================================
# Text extraction
# ============================================================================

_WHITESPACE = re.compile(r"\s+")


def normalize_text(*parts: Optional[str]) -> str:
    joined = " ".join(p for p in parts if p)
    return _WHITESPACE.sub(" ", joined).strip().lower()


def extract_text(submission: CampaignSubmission) -> str:
    """Title, story, description and every budget line, lowercased with single spaces."""
    parts: List[Optional[str]] = [submission.title, submission.story, submission.description]
    for line in submission.budget_breakdown:
        parts.append(line.description)
        parts.append(line.category)
    return normalize_text(*parts)


# ============================================================================
# Scorers
# ============================================================================

class SubScore(TypedDict, total=False):
    score: int
    matches: List[str]
    # Findings that carry their own flag (budget luxury items, missing budget,
    # suspicious need claims)
    concerns: List[str]


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _find_all(text: str, patterns) -> List[str]:
    found = []
    for pattern in patterns:
        found.extend(m.group(0).strip() for m in pattern.finditer(text))
    return found


def _bounded(value: float) -> int:
    return max(0, min(100, int(round(value))))


def _line_luxury_terms(line: BudgetLine) -> List[str]:
    return _find_all(normalize_text(line.description), LUXURY_PATTERNS)


def score_luxury(text: str, submission: CampaignSubmission,
                 settings: ModerationSettings = DEFAULT_SETTINGS) -> SubScore:
    """
    Distinct luxury terms; a term that appears in a budget line weighs double
    a narrative-only mention, and a high-value budget line carrying one adds more.
    """
    terms = _unique(_find_all(text, LUXURY_PATTERNS))

    budget_terms: List[str] = []
    high_value_lines = 0
    for line in submission.budget_breakdown:
        line_terms = _line_luxury_terms(line)
        if line_terms:
            budget_terms.extend(line_terms)
            if line.amount > settings.luxury_line_amount:
                high_value_lines += 1
    budget_terms = _unique(budget_terms)

    score = 0
    for term in terms:
        score += LUXURY_BUDGET_POINTS if term in budget_terms else LUXURY_NARRATIVE_POINTS
    score += high_value_lines * LUXURY_HIGH_VALUE_POINTS

    return {"score": _bounded(score), "matches": terms, "concerns": budget_terms}


def score_inappropriate(text: str, submission: CampaignSubmission,
                        settings: ModerationSettings = DEFAULT_SETTINGS) -> SubScore:
    score = 0
    matches: List[str] = []
    for _tier, points, patterns in INAPPROPRIATE_TIERS:
        found = _find_all(text, patterns)
        score += points * len(found)
        matches.extend(found)
    return {"score": _bounded(score), "matches": _unique(matches)}


def score_fraud(text: str, submission: CampaignSubmission,
                settings: ModerationSettings = DEFAULT_SETTINGS) -> SubScore:
    """
    Scam phrasing, urgency pressure and low-transparency budget signals.

    Budget signals only count essential lines (lines without a luxury term).
    """
    matches = _find_all(text, FRAUD_PATTERNS)
    if submission.need_type != "emergency":
        matches.extend(_find_all(text, (EMERGENCY_FUNDS_PATTERN,)))
    score = FRAUD_PATTERN_POINTS * len(matches)
    concerns: List[str] = []

    if len(URGENCY_PATTERN.findall(text)) > 2:
        score += FRAUD_URGENCY_POINTS

    if len(submission.story) < BRIEF_STORY_LENGTH:
        score += FRAUD_BRIEF_STORY_POINTS

    lines = submission.budget_breakdown
    essential = [line for line in lines if not _line_luxury_terms(line)]
    if not essential:
        score += FRAUD_NO_BUDGET_POINTS
        if submission.goal_amount > settings.large_goal_threshold:
            score += FRAUD_LARGE_GOAL_NO_BUDGET_POINTS
            matches.append(MISSING_BUDGET_MATCH)
            concerns.append(MISSING_BUDGET_MATCH)
    elif len(lines) > 2 and all(line.amount % 100 == 0 for line in essential):
        score += FRAUD_ROUND_AMOUNTS_POINTS

    return {"score": _bounded(score), "matches": _unique(matches), "concerns": concerns}


def score_need_validation(text: str, submission: CampaignSubmission,
                          settings: ModerationSettings = DEFAULT_SETTINGS) -> SubScore:
    """
    Credibility of the declared need: share of need-type indicator groups the
    text substantiates. Higher is better.
    """
    groups = NEED_INDICATORS[submission.need_type]
    matches: List[str] = []
    matched_groups = 0
    for _name, pattern in groups:
        found = [m.group(0) for m in pattern.finditer(text)]
        if found:
            matched_groups += 1
            matches.extend(found)

    score = NEED_BASE + (100 - NEED_BASE) * matched_groups / len(groups)

    concerns = _unique(_find_all(text, NEED_SUSPICIOUS.get(submission.need_type, ())))
    if concerns:
        score -= NEED_SUSPICIOUS_PENALTY

    if submission.need_type == "emergency" and len(submission.story) < EMERGENCY_BRIEF_STORY_LENGTH:
        score -= EMERGENCY_BRIEF_STORY_PENALTY

    return {"score": _bounded(score), "matches": _unique(matches), "concerns": concerns}


def score_trust(text: str, submission: CampaignSubmission,
                settings: ModerationSettings = DEFAULT_SETTINGS) -> SubScore:
    score = TRUST_BASE
    matches: List[str] = []
    for name, points, pattern in TRUST_INDICATORS:
        if pattern.search(text):
            score += points
            matches.append(name)
    return {"score": _bounded(score), "matches": matches}


Scorer = Callable[[str, CampaignSubmission, ModerationSettings], SubScore]

SCORERS: Tuple[Tuple[str, Scorer], ...] = (
    ("luxury", score_luxury),
    ("inappropriate", score_inappropriate),
    ("fraud", score_fraud),
    ("needValidation", score_need_validation),
    ("trust", score_trust),
)


# ============================================================================
# Aggregation
# ============================================================================

class AggregateResult(TypedDict):
    overall: int
    decision: str
    flags: List[str]
    recommendations: List[str]


LOW_NEED_RECOMMENDATIONS = {
    "medical": "Add supporting medical documentation such as a diagnosis letter, treatment plan or hospital bills",
    "education": "Add enrollment or admission documents and the institution's fee statement",
    "emergency": "Describe the emergency in more detail and include police, insurance or incident reports",
    "community": "Explain who will benefit and include contractor quotes or a project plan",
}
DEFAULT_LOW_NEED_RECOMMENDATION = "Explain the need in more detail with specific, verifiable information"

FLAG_RECOMMENDATIONS = {
    "luxury-items-detected": "Remove or justify luxury items; donors expect funds to cover essential needs",
    "luxury-budget-items": "Replace luxury budget items with essential alternatives",
    "inappropriate-content": "Remove content that violates community guidelines",
    "fraud-indicators": "Remove investment, wire-transfer or pressure language from the campaign",
    "fraud-veto": "Campaign matches known scam patterns and cannot be published",
    "missing-budget-breakdown": "Add an itemized budget breakdown showing how funds will be used",
    "suspicious-need-claims": "Remove unverifiable claims such as guaranteed outcomes",
    "low-trust-signals": "Commit to sharing receipts and regular progress updates with donors",
}

DECISION_RECOMMENDATIONS = {
    "approved": "Campaign looks good for publication",
    "review": "Campaign requires manual review; consider requesting additional documentation",
    "rejected": "Campaign does not meet platform guidelines",
}

DECISION_FLAGS = {"review": "manual-review-required", "rejected": "high-risk"}


def _clamp_subscore(name: str, value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ModerationProcessingError(f"Sub-score '{name}' is not numeric: {value!r}")
    if not math.isfinite(number):
        raise ModerationProcessingError(f"Sub-score '{name}' is not a finite number")
    if number < 0 or number > 100:
        _safe_log_warning(f"Moderation sub-score '{name}' out of range ({number}); clamping")
    return _bounded(number)


def calculate_overall(scores: Mapping[str, int]) -> int:
    """100 minus weighted risk, plus weighted credibility relative to full credibility."""
    risk = sum(scores[name] * weight for name, weight in RISK_WEIGHTS.items())
    credibility = sum((scores[name] - 100) * weight for name, weight in CREDIBILITY_WEIGHTS.items())
    return _bounded(100 - risk + credibility)


def decide(overall: int, fraud: int, settings: ModerationSettings = DEFAULT_SETTINGS) -> str:
    if fraud >= settings.fraud_veto:
        return "rejected"
    if overall >= settings.approve_threshold:
        return "approved"
    if overall >= settings.review_threshold:
        return "review"
    return "rejected"


def build_flags(scores: Mapping[str, int], subscores: Mapping[str, SubScore],
                decision: str, settings: ModerationSettings = DEFAULT_SETTINGS) -> List[str]:
    flags = []
    if scores["luxury"] >= LUXURY_FLAG_LEVEL:
        flags.append("luxury-items-detected")
    if subscores["luxury"].get("concerns"):
        flags.append("luxury-budget-items")
    if scores["inappropriate"] >= INAPPROPRIATE_FLAG_LEVEL:
        flags.append("inappropriate-content")
    if scores["fraud"] >= FRAUD_FLAG_LEVEL:
        flags.append("fraud-indicators")
    if scores["fraud"] >= settings.fraud_veto:
        flags.append("fraud-veto")
    if MISSING_BUDGET_MATCH in subscores["fraud"].get("concerns", []):
        flags.append("missing-budget-breakdown")
    if subscores["needValidation"].get("concerns"):
        flags.append("suspicious-need-claims")
    if scores["needValidation"] < LOW_NEED_LEVEL:
        flags.append("low-need-validation")
    if scores["trust"] < LOW_TRUST_LEVEL:
        flags.append("low-trust-signals")
    if decision in DECISION_FLAGS:
        flags.append(DECISION_FLAGS[decision])
    return _unique(flags)


def build_recommendations(flags: List[str], decision: str, need_type: str) -> List[str]:
    recommendations = [DECISION_RECOMMENDATIONS[decision]]
    for flag in flags:
        if flag == "low-need-validation":
            recommendations.append(LOW_NEED_RECOMMENDATIONS.get(need_type, DEFAULT_LOW_NEED_RECOMMENDATION))
        elif flag in FLAG_RECOMMENDATIONS:
            recommendations.append(FLAG_RECOMMENDATIONS[flag])
    return _unique(recommendations)


def aggregate(subscores: Mapping[str, SubScore], submission: CampaignSubmission,
              settings: ModerationSettings = DEFAULT_SETTINGS) -> AggregateResult:
    """
    Combine sub-scores into the overall score and decision.

    Fraud at or above the veto level rejects regardless of the overall score.
    Out-of-range sub-scores are clamped (and logged) before use.
    """
    scores = {name: _clamp_subscore(name, subscores[name]["score"]) for name, _ in SCORERS}
    overall = calculate_overall(scores)
    decision = decide(overall, scores["fraud"], settings)
    flags = build_flags(scores, subscores, decision, settings)
    return {
        "overall": overall,
        "decision": decision,
        "flags": flags,
        "recommendations": build_recommendations(flags, decision, submission.need_type),
    }


# ============================================================================
# Result
# ============================================================================

class Scores(TypedDict):
    luxury: int
    inappropriate: int
    fraud: int
    needValidation: int
    trust: int
    overall: int


class Details(TypedDict):
    luxuryItems: List[str]
    inappropriateContent: List[str]
    suspiciousPatterns: List[str]
    trustIndicators: List[Dict[str, Any]]


class ScoreResult(TypedDict):
    campaignId: Optional[str]
    scores: Scores
    decision: str
    flags: List[str]
    recommendations: List[str]
    details: Details
    processingTime: int
    timestamp: str


def collect_details(subscores: Mapping[str, SubScore]) -> Details:
    return {
        "luxuryItems": list(subscores["luxury"]["matches"]),
        "inappropriateContent": list(subscores["inappropriate"]["matches"]),
        "suspiciousPatterns": _unique(
            list(subscores["fraud"]["matches"]) + list(subscores["needValidation"].get("concerns", []))
        ),
        "trustIndicators": [{"category": name, "found": True} for name in subscores["trust"]["matches"]],
    }


def elapsed_ms(started_at: float) -> int:
    return int(round((time.perf_counter() - started_at) * 1000))


def assemble(subscores: Mapping[str, SubScore], result: AggregateResult, details: Details,
             started_at: float, submission: Optional[CampaignSubmission] = None) -> ScoreResult:
    scores: Scores = {
        "luxury": _bounded(subscores["luxury"]["score"]),
        "inappropriate": _bounded(subscores["inappropriate"]["score"]),
        "fraud": _bounded(subscores["fraud"]["score"]),
        "needValidation": _bounded(subscores["needValidation"]["score"]),
        "trust": _bounded(subscores["trust"]["score"]),
        "overall": result["overall"],
    }
    return {
        "campaignId": submission.id if submission else None,
        "scores": scores,
        "decision": result["decision"],
        "flags": list(result["flags"]),
        "recommendations": list(result["recommendations"]),
        "details": details,
        "processingTime": elapsed_ms(started_at),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ============================================================================
# Entry points
# ============================================================================

def moderate_campaign(campaign: Any, settings: Optional[ModerationSettings] = None) -> ScoreResult:
    """
    Score a campaign and return the moderation result.

    Args:
        campaign: raw payload dict or a CampaignSubmission
        settings: decision bands and guards (defaults to the app config)

    Returns:
        ScoreResult dict (JSON serializable)

    Raises:
        InvalidSubmissionError: payload is missing required fields
        ModerationProcessingError: text could not be evaluated within limits
    """
    started_at = time.perf_counter()
    settings = settings or _active_settings()
    submission = campaign if isinstance(campaign, CampaignSubmission) else parse_submission(campaign)

    text = extract_text(submission)
    if len(text) > settings.max_text_length:
        _safe_log_error(
            f"Moderation refused for campaign {submission.id}: text length {len(text)} "
            f"exceeds {settings.max_text_length}"
        )
        raise ModerationProcessingError(
            f"Campaign text is too long to moderate ({len(text)} > {settings.max_text_length} characters)"
        )

    try:
        subscores = {name: scorer(text, submission, settings) for name, scorer in SCORERS}
    except (re.error, RecursionError, ArithmeticError) as e:
        _safe_log_error(f"Scoring failed for campaign {submission.id}: {e}")
        raise ModerationProcessingError(f"Scoring failed: {e}") from e

    if elapsed_ms(started_at) > settings.time_budget_ms:
        _safe_log_error(f"Moderation for campaign {submission.id} exceeded {settings.time_budget_ms}ms")
        raise ModerationProcessingError("Moderation exceeded its time budget")

    result = assemble(subscores, aggregate(subscores, submission, settings),
                      collect_details(subscores), started_at, submission)

    _safe_log_info(
        f"Moderated campaign {submission.id}: decision={result['decision']} "
        f"overall={result['scores']['overall']} flags={','.join(result['flags']) or '-'} "
        f"time={result['processingTime']}ms"
    )
    return result


def quick_check(content: Any) -> Dict[str, Any]:
    """
    Lightweight pre-screen for editor drafts (no scoring, no persistence).

    Returns:
        {"passed": bool, "checks": {"hasLuxury", "hasInappropriate", "hasSuspicious", "hasTrust"}}
    """
    text = content if isinstance(content, str) else json.dumps(content, default=str)
    checks = {name: bool(pattern.search(text)) for name, pattern in QUICK_CHECKS.items()}
    passed = not (checks["hasLuxury"] or checks["hasInappropriate"] or checks["hasSuspicious"])
    return {"passed": passed, "checks": checks}
