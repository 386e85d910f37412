"""
Pattern libraries for campaign moderation.

Compiled once at import and shared read-only by every scoring call:
- Luxury items (brands, vehicles, property, jewelry, leisure)
- Inappropriate content, grouped by severity tier
- Scam / fraud phrasing and urgency language
- Legitimate-need indicators per need type, plus suspicious need claims
- Trust signals (documentation, updates, named institutions, references)

All patterns run against lowercased text but are compiled case-insensitive
so they also work on raw input.
"""

from __future__ import annotations
import re
from typing import Dict, Tuple

_FLAGS = re.IGNORECASE


def _compile(*patterns: str) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(p, _FLAGS) for p in patterns)


# ============================================================================
# Need types
# ============================================================================

NEED_TYPES = ("medical", "education", "emergency", "community", "personal", "other")

# Values used by the campaign creation form map onto the moderation need types
NEED_TYPE_ALIASES = {
    "community_long_term": "community",
    "long_term": "community",
    "health": "medical",
    "school": "education",
}


# ============================================================================
# Risk patterns
# ============================================================================

LUXURY_PATTERNS = _compile(
    r"\b(luxury|luxurious|deluxe|premium|high-end|designer|brand new)\b",
    r"\b(mercedes|benz|bmw|ferrari|lamborghini|porsche|rolex|gucci|prada|louis vuitton)\b",
    r"\b(mansion|villa|penthouse|yacht|private jet|first class)\b",
    r"\b(diamonds?|gold|platinum|jewelry|jewellery)\b",
    r"\b(vacation|holiday|resort|cruise|spa)\b",
    r"\b(latest|newest|top of the line|state of the art)\b",
)

# (tier, points per occurrence, patterns)
INAPPROPRIATE_TIERS: Tuple[Tuple[str, int, Tuple[re.Pattern, ...]], ...] = (
    ("high", 30, _compile(
        r"\b(weapons?|guns?|ammunition|explosives?)\b",
        r"\b(racist|sexist|nazi|white power)\b",
        r"\b(xxx|porn|pornography|escort services?)\b",
    )),
    ("medium", 20, _compile(
        r"\b(scam|fraud|fake|hoax|pyramid scheme|ponzi)\b",
        r"\b((?:illegal|recreational|street) drugs|narcotics|cocaine|heroin)\b",
        r"\b(gambling|casino|betting)\b",
    )),
    ("low", 10, _compile(
        r"\b(alcohol|liquor|cigarettes|tobacco|vape)\b",
        r"\b(hate|discriminate)\b",
        r"\b(adult content)\b",
    )),
)

FRAUD_PATTERNS = _compile(
    r"\b(quick money|fast cash|easy money|guaranteed returns?|double your money)\b",
    r"\b(investment opportunity|forex|crypto|bitcoin)\b",
    r"\b(wire transfer|western union|moneygram|gift cards?)\b",
    r"\b(urgent|immediately|asap)\s+.{0,20}?(money|funds|cash)\b",
    r"\b(act now|limited time|send money|don'?t miss out|before it'?s too late)\b",
    r"\$\s*\d{5,}",
    r"\b\d{6,}\s*(dollars|usd|euros|pounds)\b",
)

# Counted for every need type except emergency
EMERGENCY_FUNDS_PATTERN = re.compile(r"\bemergency\s+.{0,20}?(money|funds|cash)\b", _FLAGS)

URGENCY_PATTERN = re.compile(r"\b(urgent|emergency|immediately|asap|deadline|critical)\b", _FLAGS)


# ============================================================================
# Credibility patterns
# ============================================================================

# need_type -> ((indicator group, pattern), ...)
NEED_INDICATORS: Dict[str, Tuple[Tuple[str, re.Pattern], ...]] = {
    "medical": (
        ("facility", re.compile(r"\b(hospital|clinic|medical center|healthcare|hospice)\b", _FLAGS)),
        ("procedure", re.compile(r"\b(surgery|operation|treatment|therapy|chemotherapy|dialysis|medications?)\b", _FLAGS)),
        ("condition", re.compile(r"\b(cancer|diabetes|heart|kidney|liver|tumou?r|stroke)\b", _FLAGS)),
        ("professional", re.compile(r"\b(doctor|physician|surgeon|specialist|oncologist|nurse)\b", _FLAGS)),
        ("diagnosis", re.compile(r"\b(diagnosis|diagnosed|prognosis|condition|disease)\b", _FLAGS)),
    ),
    "education": (
        ("institution", re.compile(r"\b(university|college|school|institute|academy)\b", _FLAGS)),
        ("costs", re.compile(r"\b(tuition|fees|books|supplies|dormitory)\b", _FLAGS)),
        ("credential", re.compile(r"\b(scholarship|student|degree|diploma|certificate)\b", _FLAGS)),
        ("term", re.compile(r"\b(semester|term|academic year|course)\b", _FLAGS)),
    ),
    "emergency": (
        ("event", re.compile(r"\b(accident|fire|flood|storm|hurricane|earthquake|disaster|evicted|eviction|burglary|injur(?:y|ed))\b", _FLAGS)),
        ("authority", re.compile(r"\b(police|insurance|claim|firefighters|red cross|fema|report)\b", _FLAGS)),
        ("loss", re.compile(r"\b(lost|destroyed|damaged|damage|belongings|everything)\b", _FLAGS)),
        ("relief", re.compile(r"\b(shelter|food|clothing|temporary|housing|repairs?|rebuild)\b", _FLAGS)),
    ),
    "community": (
        ("place", re.compile(r"\b(community|neighbou?rhood|village|town|local|hometown|region)\b", _FLAGS)),
        ("beneficiaries", re.compile(r"\b(families|residents|children|members|neighbou?rs|people|youth|elderly)\b", _FLAGS)),
        ("project", re.compile(r"\b(well|garden|school|church|cent(?:er|re)|clinic|library|park|playground|water|kitchen)\b", _FLAGS)),
        ("planning", re.compile(r"\b(contractors?|quotes?|estimates?|volunteers?|plan|timeline|permit|committee|partners?)\b", _FLAGS)),
    ),
    "personal": (
        ("circumstance", re.compile(r"\b(lost|job|unemployed|eviction|accident|illness|divorce|widow(?:ed)?|disaster|loss)\b", _FLAGS)),
        ("expense", re.compile(r"\b(costs?|expenses?|bills?|payments?|fees|rent|insurance)\b", _FLAGS)),
        ("plan", re.compile(r"\b(plan|timeline|budget|months?|weeks?)\b", _FLAGS)),
        ("household", re.compile(r"\b(family|children|kids|wife|husband|mother|father|myself)\b", _FLAGS)),
    ),
}
NEED_INDICATORS["other"] = NEED_INDICATORS["personal"]

NEED_SUSPICIOUS: Dict[str, Tuple[re.Pattern, ...]] = {
    "medical": _compile(
        r"\b(miracle cure|guaranteed healing|alternative medicine|experimental|untested)\b",
        r"\b(overseas treatment|foreign doctor)\b",
        r"\b100% (success|cure)",
    ),
    "education": _compile(
        r"\b(online degree|fast track|guaranteed admission)\b",
        r"\b(pay for grades|buy (?:a )?diploma)\b",
    ),
}

# (indicator group, points, pattern)
TRUST_INDICATORS: Tuple[Tuple[str, int, re.Pattern], ...] = (
    ("documentation", 12, re.compile(r"\b(receipts?|invoices?|documentation|documents|proof|evidence|records|bills|statements?)\b", _FLAGS)),
    ("itemization", 8, re.compile(r"\b(breakdown|itemi[sz]ed|detailed|specific|quotes?|estimates?)\b", _FLAGS)),
    ("accountability", 8, re.compile(r"\b(accountab(?:ility|le)|transparen(?:t|cy)|track|monitor)\b", _FLAGS)),
    ("updates", 12, re.compile(r"\b(updates?|progress|keep you posted|report back)\b", _FLAGS)),
    ("institutions", 10, re.compile(r"\b(hospital|clinic|university|college|school|church|ministry|bank|charity|red cross|foundation)\b", _FLAGS)),
    ("references", 10, re.compile(r"\b(references?|verif(?:y|ied|iable)|admission letter|letter|contact)\b", _FLAGS)),
    ("faith", 5, re.compile(r"\b(god|lord|jesus|christ|faith|pray(?:ers?|ing)?|blessings?|bible|scripture|psalm|fellowship|congregation)\b", _FLAGS)),
    ("community", 5, re.compile(r"\b(community|family|neighbou?rs?|support|help|local|hometown|village|together|unity)\b", _FLAGS)),
)


# ============================================================================
# Quick content check (single-string pre-screen used by the campaign editor)
# ============================================================================

QUICK_CHECKS: Dict[str, re.Pattern] = {
    "hasLuxury": re.compile(r"\b(luxury|luxurious|deluxe|premium|ferrari|rolex|yacht|mansion)\b", _FLAGS),
    "hasInappropriate": re.compile(r"\b(scam|fraud|weapons?|porn|(?:illegal|street) drugs)\b", _FLAGS),
    "hasSuspicious": re.compile(r"\b(quick money|guaranteed returns?|wire transfer|double your money)\b", _FLAGS),
    "hasTrust": re.compile(r"\b(receipts?|documentation|transparent|god|faith)\b", _FLAGS),
}
