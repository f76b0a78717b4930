from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence, Tuple

from ..models.participant import Participant


@dataclass
class Rule(ABC):
    """Base class for the rules applied while growing a group."""

    name: str
    priority: int
    params: Dict[str, Any] = field(default_factory=dict)
    explain_exclude: str | None = None
    explain_score: str | None = None

    @abstractmethod
    def evaluate(
        self, candidate: Participant, members: Sequence[Participant]
    ) -> Tuple[Any, str]:
        """Evaluate the rule for a candidate joining ``members``."""


@dataclass
class HardRule(Rule):
    """Rule that decides whether a candidate may join at all."""

    def evaluate(
        self, candidate: Participant, members: Sequence[Participant]
    ) -> Tuple[bool, str]:
        eligible = self.check(candidate, members)
        rationale = ""
        if not eligible:
            template = self.explain_exclude or f"{candidate.id} excluded by {self.name}"
            rationale = template.format(
                participant=candidate, members=members, params=self.params
            )
        return eligible, rationale

    @abstractmethod
    def check(self, candidate: Participant, members: Sequence[Participant]) -> bool:
        """Return ``True`` if the candidate is compatible with every member."""


@dataclass
class SoftRule(Rule):
    """Rule that contributes to the candidate score."""

    weight: float = 1.0

    def evaluate(
        self, candidate: Participant, members: Sequence[Participant]
    ) -> Tuple[float, str]:
        score = self.score(candidate, members) * self.weight
        template = self.explain_score or f"{self.name} score {score:g}"
        rationale = template.format(
            participant=candidate, members=members, score=score, params=self.params
        )
        return score, rationale

    @abstractmethod
    def score(self, candidate: Participant, members: Sequence[Participant]) -> float:
        """Return the unweighted score for the candidate."""
