"""Personality scoring model for dinner_groups."""

from .answers import (
    Answer,
    ChoiceAnswer,
    Question,
    ScaleAnswer,
    ScaleBand,
    UnknownAnswer,
    parse_answer,
    parse_answers,
)
from .model import (
    age_from_birthday,
    categorize,
    default_participant,
    score_answers,
    score_participant,
)

__all__ = [
    "Answer",
    "ChoiceAnswer",
    "ScaleAnswer",
    "UnknownAnswer",
    "Question",
    "ScaleBand",
    "parse_answer",
    "parse_answers",
    "score_answers",
    "categorize",
    "score_participant",
    "default_participant",
    "age_from_birthday",
]
