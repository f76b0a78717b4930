"""Static score deltas per recognized answer.

Weights reflect question importance: the dinner-vibe question counts about
three times a single scale question, talk topic and group dynamic about
twice.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

from ..models.category import Category
from .answers import Question, ScaleBand

TR = Category.TRAILBLAZERS
ST = Category.STORYTELLERS
PH = Category.PHILOSOPHERS
PL = Category.PLANNERS
FS = Category.FREE_SPIRITS

Deltas = Tuple[Tuple[Category, int], ...]

CHOICE_WEIGHTS: Mapping[Tuple[Question, str], Deltas] = MappingProxyType(
    {
        (Question.TALK_TOPIC, "current_events"): ((PH, 1), (PL, 3)),
        (Question.TALK_TOPIC, "arts_entertainment"): ((ST, 2), (FS, 2)),
        (Question.TALK_TOPIC, "personal_growth"): ((PH, 3),),
        (Question.TALK_TOPIC, "food_travel"): ((TR, 2), (FS, 2)),
        (Question.TALK_TOPIC, "hobbies"): ((TR, 2), (ST, 2)),
        (Question.GROUP_DYNAMIC, "similar"): ((ST, 2), (PL, 2), (PH, 2)),
        (Question.GROUP_DYNAMIC, "diverse"): ((TR, 2), (FS, 2)),
        (Question.DINNER_VIBE, "steering"): ((ST, 6), (TR, 3)),
        (Question.DINNER_VIBE, "sharing"): ((ST, 3),),
        (Question.DINNER_VIBE, "observing"): ((PH, 4), (PL, 4)),
        (Question.DINNER_VIBE, "adapting"): ((FS, 6),),
        (Question.HUMOR_TYPE, "sarcastic"): ((ST, 1),),
        (Question.HUMOR_TYPE, "playful"): ((ST, 1), (FS, 1), (TR, 1)),
        (Question.HUMOR_TYPE, "witty"): ((PH, 1), (ST, 1)),
        (Question.HUMOR_TYPE, "not_a_fan"): ((PH, 1), (PL, 1)),
        (Question.WARDROBE_STYLE, "timeless"): ((PL, 4), (PH, 1)),
        (Question.WARDROBE_STYLE, "bold"): ((TR, 3), (ST, 1), (FS, 1)),
        (Question.MEETING_PRIORITY, "values"): ((PH, 1), (PL, 1)),
        (Question.MEETING_PRIORITY, "fun"): ((ST, 1), (TR, 1)),
        (Question.MEETING_PRIORITY, "learning"): ((PH, 1), (TR, 1)),
        (Question.MEETING_PRIORITY, "connection"): ((FS, 2),),
    }
)

SCALE_WEIGHTS: Mapping[Tuple[Question, ScaleBand], Deltas] = MappingProxyType(
    {
        (Question.INTROVERT_SCALE, ScaleBand.LOW): ((TR, 1), (ST, 1)),
        (Question.INTROVERT_SCALE, ScaleBand.MID): ((FS, 1),),
        (Question.INTROVERT_SCALE, ScaleBand.HIGH): ((PH, 2), (PL, 2)),
        (Question.ALONE_TIME_SCALE, ScaleBand.LOW): ((ST, 1), (TR, 1)),
        (Question.ALONE_TIME_SCALE, ScaleBand.MID): ((FS, 1),),
        (Question.ALONE_TIME_SCALE, ScaleBand.HIGH): ((PH, 1), (PL, 1)),
        (Question.FAMILY_SCALE, ScaleBand.LOW): ((FS, 1),),
        (Question.FAMILY_SCALE, ScaleBand.MID): ((TR, 1),),
        (Question.FAMILY_SCALE, ScaleBand.HIGH): ((PH, 1), (PL, 1)),
        (Question.SPIRITUALITY_SCALE, ScaleBand.LOW): ((TR, 1), (ST, 1)),
        (Question.SPIRITUALITY_SCALE, ScaleBand.MID): ((FS, 1),),
        (Question.SPIRITUALITY_SCALE, ScaleBand.HIGH): ((PH, 2),),
        (Question.HUMOR_SCALE, ScaleBand.LOW): ((PH, 1),),
        (Question.HUMOR_SCALE, ScaleBand.MID): ((TR, 1),),
        (Question.HUMOR_SCALE, ScaleBand.HIGH): ((ST, 1), (FS, 1)),
    }
)
