from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..models.category import BEST_PAIRINGS
from ..models.participant import Participant
from .base import HardRule, SoftRule
from .compatibility import (
    MAX_AGE_GAP,
    age_compatible,
    budget_compatible,
    relationship_compatible,
)


@dataclass
class AgeWindowRule(HardRule):
    """Members may be at most ``max_gap`` years apart."""

    slug = "age_window"

    def check(self, candidate: Participant, members: Sequence[Participant]) -> bool:
        max_gap = self.params.get("max_gap", MAX_AGE_GAP)
        return all(age_compatible(m, candidate, max_gap) for m in members)


@dataclass
class BudgetMatchRule(HardRule):
    """Members must share the same budget band."""

    slug = "budget_match"

    def check(self, candidate: Participant, members: Sequence[Participant]) -> bool:
        return all(budget_compatible(m, candidate) for m in members)


@dataclass
class RelationshipParityRule(HardRule):
    """Singles sit with singles, committed guests with committed guests."""

    slug = "relationship_parity"

    def check(self, candidate: Participant, members: Sequence[Participant]) -> bool:
        return all(relationship_compatible(m, candidate) for m in members)


@dataclass
class CategoryAffinityRule(SoftRule):
    """Count members whose best pairings include the candidate's category."""

    slug = "category_affinity"

    def score(self, candidate: Participant, members: Sequence[Participant]) -> float:
        return sum(1 for m in members if candidate.category in BEST_PAIRINGS[m.category])


@dataclass
class AgeAffinityRule(SoftRule):
    slug = "age_affinity"

    def score(self, candidate: Participant, members: Sequence[Participant]) -> float:
        max_gap = self.params.get("max_gap", MAX_AGE_GAP)
        return sum(1 for m in members if age_compatible(m, candidate, max_gap))


@dataclass
class BudgetAffinityRule(SoftRule):
    slug = "budget_affinity"

    def score(self, candidate: Participant, members: Sequence[Participant]) -> float:
        return sum(1 for m in members if budget_compatible(m, candidate))
