"""Pairwise compatibility predicates.

Every predicate returns ``True`` when the data it needs is missing on either
side, so absent profile fields never block a pairing.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from ..models.category import BEST_PAIRINGS, Category
from ..models.participant import Participant

logger = logging.getLogger(__name__)

MAX_AGE_GAP = 5

BUDGET_BANDS = ("<500", "500-1000", "1000-1500", "1500+")

SINGLE_STATUSES = frozenset({"single"})
COMMITTED_STATUSES = frozenset({"married", "in_relationship", "dating", "engaged"})

_NUMBER = re.compile(r"^\d+(\.\d+)?$")


def best_pairs_with(category: Category, other: Category) -> bool:
    """Return True if ``other`` is in the best-pairing set of ``category``."""
    return other in BEST_PAIRINGS[category]


def category_compatible(a: Participant, b: Participant) -> bool:
    """Directed lookup: ``b``'s category is one ``a`` pairs best with."""
    return best_pairs_with(a.category, b.category)


def category_affinity(a: Participant, b: Participant) -> bool:
    """Undirected variant used for scoring: either direction counts."""
    return category_compatible(a, b) or category_compatible(b, a)


def age_compatible(a: Participant, b: Participant, max_gap: int = MAX_AGE_GAP) -> bool:
    if not a.age or not b.age:
        return True
    return abs(a.age - b.age) <= max_gap


def budget_compatible(a: Participant, b: Participant) -> bool:
    if not a.budget_band or not b.budget_band:
        return True
    return a.budget_band == b.budget_band


def relationship_side(status: Optional[str]) -> Optional[str]:
    """Map a relationship status onto ``"single"`` or ``"committed"``.

    Statuses outside both vocabularies are treated as unknown.
    """
    if not status:
        return None
    status = status.strip().lower().replace(" ", "_")
    if status in SINGLE_STATUSES:
        return "single"
    if status in COMMITTED_STATUSES:
        return "committed"
    return None


def relationship_compatible(a: Participant, b: Participant) -> bool:
    side_a = relationship_side(a.relationship_status)
    side_b = relationship_side(b.relationship_status)
    if side_a is None or side_b is None:
        return True
    return side_a == side_b


def pair_compatibility(a: Participant, b: Participant) -> int:
    """Contribution of one unordered pair to a group's compatibility score."""
    score = 0
    if category_affinity(a, b):
        score += 10
    score += 5 if age_compatible(a, b) else -10
    score += 5 if budget_compatible(a, b) else -5
    return score


def _band_for_amount(amount: float) -> str:
    if amount < 500:
        return "<500"
    if amount < 1000:
        return "500-1000"
    if amount < 1500:
        return "1000-1500"
    return "1500+"


def normalize_budget(value: object) -> Optional[str]:
    """Normalize a spending answer into one of :data:`BUDGET_BANDS`.

    Numbers and numeric strings are bucketed, strings already in band form
    pass through, and the phrasings used by the signup form are mapped to
    the nearest band. Anything else is logged and treated as unknown.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if value <= 0:
            return None
        return _band_for_amount(float(value))

    text = str(value).strip()
    if not text:
        return None
    if text in BUDGET_BANDS:
        return text
    if _NUMBER.match(text):
        return _band_for_amount(float(text))

    lowered = text.lower().replace(",", "")
    compact = lowered.replace(" ", "")
    for band in ("500-1000", "1000-1500", "1500+"):
        if band in compact:
            return band
    if "less than 500" in lowered or "<500" in compact:
        return "<500"
    if "more than 1500" in lowered:
        return "1500+"
    # "1500" contains "500", so the upper band is tested first
    if "1000" in lowered and "1500" in lowered:
        return "1000-1500"
    if "500" in lowered and "1000" in lowered:
        return "500-1000"
    if "1500" in lowered or "more" in lowered:
        return "1500+"

    logger.warning("Unrecognized budget value %r treated as unknown", value)
    return None
