from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional

from .category import Category, default_scores, top_category


@dataclass(frozen=True, eq=False)
class Participant:
    """A categorized guest taking part in one matching run.

    ``category`` is always the arg-max of ``category_scores``. It may be
    omitted, in which case it is derived; an explicit value that disagrees
    with the scores is rejected. Empty scores become the default vector of a
    participant without assessment data.
    """

    id: str
    category_scores: Mapping[Category, float] = field(default_factory=dict)
    category: Optional[Category] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    budget_band: Optional[str] = None
    relationship_status: Optional[str] = None
    raw_answers: Mapping[str, Any] = field(default_factory=dict)
    name: str = ""

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise ValueError("Participant id is required")
        if self.age is not None and self.age < 0:
            raise ValueError("age must be non-negative")

        if self.category_scores:
            scores: Dict[Category, float] = {c: 0 for c in Category}
            scores.update(self.category_scores)
        else:
            scores = default_scores()
        derived = top_category(scores)
        if self.category is not None and self.category != derived:
            raise ValueError(
                f"Participant {self.id}: category {self.category} is not the top score ({derived})"
            )

        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "category_scores", scores)
        object.__setattr__(self, "category", derived)
        if self.gender is not None:
            object.__setattr__(self, "gender", str(self.gender).strip().lower() or None)
        if self.relationship_status is not None:
            object.__setattr__(
                self,
                "relationship_status",
                str(self.relationship_status).strip().lower() or None,
            )

    @property
    def has_assessment(self) -> bool:
        return bool(self.raw_answers)


@dataclass(frozen=True)
class AvoidConstraint:
    """Two participants who must never share a group."""

    participant_id_a: str
    participant_id_b: str
    reason: str = ""

    def __post_init__(self) -> None:
        if self.participant_id_a == self.participant_id_b:
            raise ValueError("An avoid constraint needs two different participants")

    @property
    def pair(self) -> FrozenSet[str]:
        return frozenset((self.participant_id_a, self.participant_id_b))

    def involves(self, participant_id: str) -> bool:
        return participant_id in self.pair
