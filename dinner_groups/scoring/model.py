"""Personality scoring and categorization."""
from __future__ import annotations

import datetime
from typing import Any, Dict, Mapping, Optional

from ..models.category import Category, empty_scores, top_category
from ..models.participant import Participant
from ..rules.compatibility import normalize_budget
from .answers import ChoiceAnswer, ScaleAnswer, parse_answers
from .weights import CHOICE_WEIGHTS, SCALE_WEIGHTS, Deltas


def _deltas_for(answer) -> Deltas:
    if isinstance(answer, ChoiceAnswer):
        return CHOICE_WEIGHTS.get((answer.question, answer.choice), ())
    if isinstance(answer, ScaleAnswer):
        return SCALE_WEIGHTS.get((answer.question, answer.band), ())
    return ()


def score_answers(raw: Optional[Mapping[str, Any]]) -> Dict[Category, float]:
    """Map an answer blob to per-category scores.

    Unrecognized or missing answers contribute nothing; every category is
    present in the result.
    """
    scores = empty_scores()
    for answer in parse_answers(raw):
        for category, delta in _deltas_for(answer):
            scores[category] += delta
    return scores


def categorize(scores: Mapping[Category, float]) -> Category:
    return top_category(scores)


def age_from_birthday(
    birthday: Any, today: Optional[datetime.date] = None
) -> Optional[int]:
    """Return the age in whole years for an ISO birthday, or ``None``."""
    if not birthday:
        return None
    try:
        born = datetime.date.fromisoformat(str(birthday)[:10])
    except ValueError:
        return None
    today = today or datetime.date.today()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age if age >= 0 else None


def default_participant(
    participant_id: str,
    age: Optional[int] = None,
    gender: Optional[str] = None,
    name: str = "",
) -> Participant:
    """Participant for a guest without assessment data (Free Spirits)."""
    return Participant(id=participant_id, age=age or None, gender=gender or None, name=name)


def score_participant(
    participant_id: str,
    answers: Optional[Mapping[str, Any]],
    age: Optional[int] = None,
    gender: Optional[str] = None,
    relationship_status: Optional[str] = None,
    name: str = "",
    today: Optional[datetime.date] = None,
) -> Participant:
    """Build a categorized :class:`Participant` from raw answers.

    Explicit ``age``, ``gender`` and ``relationship_status`` (from a guest
    record or profile) take precedence over the values found in the blob.
    """
    if not answers:
        return default_participant(participant_id, age=age, gender=gender, name=name)

    scores = score_answers(answers)
    return Participant(
        id=participant_id,
        category_scores=scores,
        category=categorize(scores),
        age=age or age_from_birthday(answers.get("birthday"), today),
        gender=gender or answers.get("gender") or None,
        budget_band=normalize_budget(answers.get("spending")),
        relationship_status=relationship_status
        or answers.get("relationshipStatus")
        or answers.get("relationship_status")
        or None,
        raw_answers=dict(answers),
        name=name,
    )
