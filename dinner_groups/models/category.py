"""Personality categories and the fixed best-pairing graph."""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Tuple


class Category(str, Enum):
    TRAILBLAZERS = "Trailblazers"
    STORYTELLERS = "Storytellers"
    PHILOSOPHERS = "Philosophers"
    PLANNERS = "Planners"
    FREE_SPIRITS = "Free Spirits"

    def __str__(self) -> str:
        return self.value


# Directed: a category lists the two categories it pairs best with. The
# graph is not required to be symmetric.
BEST_PAIRINGS: Mapping[Category, Tuple[Category, Category]] = MappingProxyType(
    {
        Category.TRAILBLAZERS: (Category.FREE_SPIRITS, Category.STORYTELLERS),
        Category.STORYTELLERS: (Category.PHILOSOPHERS, Category.TRAILBLAZERS),
        Category.PHILOSOPHERS: (Category.PLANNERS, Category.STORYTELLERS),
        Category.PLANNERS: (Category.PHILOSOPHERS, Category.FREE_SPIRITS),
        Category.FREE_SPIRITS: (Category.TRAILBLAZERS, Category.PLANNERS),
    }
)

# Arg-max ties go to the first category in this order. An all-zero score
# vector therefore lands on the neutral Free Spirits label.
CATEGORY_PRIORITY: Tuple[Category, ...] = (
    Category.FREE_SPIRITS,
    Category.PLANNERS,
    Category.PHILOSOPHERS,
    Category.STORYTELLERS,
    Category.TRAILBLAZERS,
)


def empty_scores() -> Dict[Category, float]:
    """Return a score vector with every category at zero."""
    return {category: 0 for category in Category}


def default_scores() -> Dict[Category, float]:
    """Scores given to a participant without any assessment data."""
    scores = empty_scores()
    scores[Category.FREE_SPIRITS] = 1
    return scores


def top_category(scores: Mapping[Category, float]) -> Category:
    """Return the arg-max of ``scores`` using :data:`CATEGORY_PRIORITY` for ties."""
    best = CATEGORY_PRIORITY[0]
    best_score = scores.get(best, 0)
    for category in CATEGORY_PRIORITY[1:]:
        value = scores.get(category, 0)
        if value > best_score:
            best, best_score = category, value
    return best


def parse_category(value: object) -> Category:
    """Look up a category by its label or enum name."""
    if isinstance(value, Category):
        return value
    text = str(value).strip()
    for category in Category:
        if text == category.value or text.upper().replace(" ", "_") == category.name:
            return category
    raise ValueError(f"Unknown category: {value!r}")
