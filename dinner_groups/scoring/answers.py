"""Typed view over a raw personality-answer blob.

Each raw ``(key, value)`` pair parses into exactly one variant:
:class:`ChoiceAnswer` for a recognized option of a choice question,
:class:`ScaleAnswer` for a 1-5 scale question, or :class:`UnknownAnswer`
for anything else (unknown keys, unknown options, out-of-range scales).
Legacy human-readable labels are folded into the same canonical option
codes as the short codes the current form submits.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


class Question(str, Enum):
    TALK_TOPIC = "talkTopic"
    GROUP_DYNAMIC = "groupDynamic"
    DINNER_VIBE = "dinnerVibe"
    HUMOR_TYPE = "humorType"
    WARDROBE_STYLE = "wardrobeStyle"
    MEETING_PRIORITY = "meetingPriority"
    INTROVERT_SCALE = "introvertScale"
    ALONE_TIME_SCALE = "aloneTimeScale"
    FAMILY_SCALE = "familyScale"
    SPIRITUALITY_SCALE = "spiritualityScale"
    HUMOR_SCALE = "humorScale"

    @property
    def is_scale(self) -> bool:
        return self.value.endswith("Scale")


class ScaleBand(str, Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


# Option code -> synonyms accepted for it (the code itself always matches).
CHOICE_SYNONYMS: Dict[Question, Dict[str, tuple]] = {
    Question.TALK_TOPIC: {
        "current_events": ("Current events and world issues",),
        "arts_entertainment": ("Arts, entertainment, and pop culture",),
        "personal_growth": ("Personal growth and philosophy",),
        "food_travel": ("Food, travel, and experiences",),
        "hobbies": ("Hobbies and niche interests",),
    },
    Question.GROUP_DYNAMIC: {
        "similar": ("A mix of people with shared interests and similar personalities",),
        "diverse": ("A diverse group with different viewpoints and experiences",),
    },
    Question.DINNER_VIBE: {
        "steering": (),
        "sharing": (),
        "observing": (),
        "adapting": (),
    },
    Question.HUMOR_TYPE: {
        "sarcastic": (),
        "playful": ("lighthearted",),
        "witty": ("clever", "dry"),
        "not_a_fan": ("none",),
    },
    Question.WARDROBE_STYLE: {
        "timeless": ("classics",),
        "bold": ("trendy", "statement"),
    },
    Question.MEETING_PRIORITY: {
        "values": ("Shared values and interests", "friendship"),
        "fun": ("Fun and engaging conversations",),
        "learning": ("Learning something new from others",),
        "connection": ("Feeling a sense of connection",),
    },
}

_CHOICE_LOOKUP: Dict[Question, Dict[str, str]] = {
    question: {
        label: code
        for code, synonyms in options.items()
        for label in (code,) + synonyms
    }
    for question, options in CHOICE_SYNONYMS.items()
}


def _snake(name: str) -> str:
    return "".join("_" + c.lower() if c.isupper() else c for c in name)


QUESTION_KEYS: Dict[str, Question] = {}
for _question in Question:
    QUESTION_KEYS[_question.value] = _question
    QUESTION_KEYS[_snake(_question.value)] = _question


@dataclass(frozen=True)
class ChoiceAnswer:
    question: Question
    choice: str


@dataclass(frozen=True)
class ScaleAnswer:
    question: Question
    value: int

    @property
    def band(self) -> ScaleBand:
        if self.value <= 2:
            return ScaleBand.LOW
        if self.value == 3:
            return ScaleBand.MID
        return ScaleBand.HIGH


@dataclass(frozen=True)
class UnknownAnswer:
    key: str
    value: Any


Answer = Union[ChoiceAnswer, ScaleAnswer, UnknownAnswer]


def _scale_value(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        return None
    return number if 1 <= number <= 5 else None


def parse_answer(key: str, value: Any) -> Answer:
    """Parse one raw answer into its typed variant."""
    question = QUESTION_KEYS.get(key)
    if question is None:
        return UnknownAnswer(key, value)
    if question.is_scale:
        number = _scale_value(value)
        if number is None:
            return UnknownAnswer(key, value)
        return ScaleAnswer(question, number)
    if not isinstance(value, str):
        return UnknownAnswer(key, value)
    code = _CHOICE_LOOKUP[question].get(value.strip())
    if code is None:
        return UnknownAnswer(key, value)
    return ChoiceAnswer(question, code)


def parse_answers(raw: Optional[Mapping[str, Any]]) -> List[Answer]:
    """Parse a whole answer blob; ``None`` parses to an empty list."""
    if not raw:
        return []
    return [parse_answer(str(key), value) for key, value in raw.items()]
