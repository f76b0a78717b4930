from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, List, Optional

from ..rules.compatibility import pair_compatibility
from ..rules.gender import GenderCounts
from .category import Category
from .participant import Participant

UNKNOWN_BUDGET = "unknown"


@dataclass(eq=False)
class Group:
    """A dinner group and the metrics derived from its members.

    Derived fields are recomputed from ``participants`` on construction and
    after every membership change made through :meth:`add_participant` or
    :meth:`remove_participant`.
    """

    participants: List[Participant] = field(default_factory=list)
    name: Optional[str] = None
    category_distribution: Dict[Category, int] = field(init=False)
    gender_distribution: GenderCounts = field(init=False)
    average_age: int = field(init=False)
    dominant_budget_band: str = field(init=False)
    compatibility_score: int = field(init=False)

    def __post_init__(self) -> None:
        self.participants = list(self.participants)
        ids = [p.id for p in self.participants]
        if len(ids) != len(set(ids)):
            raise ValueError("A participant cannot appear twice in a group")
        self.recompute()

    def __len__(self) -> int:
        return len(self.participants)

    @property
    def size(self) -> int:
        return len(self.participants)

    def member_ids(self) -> List[str]:
        return [p.id for p in self.participants]

    def has_member(self, participant_id: str) -> bool:
        return any(p.id == participant_id for p in self.participants)

    def add_participant(self, participant: Participant) -> None:
        if self.has_member(participant.id):
            raise ValueError(f"{participant.id} is already in this group")
        self.participants.append(participant)
        self.recompute()

    def remove_participant(self, participant_id: str) -> Participant:
        for index, participant in enumerate(self.participants):
            if participant.id == participant_id:
                del self.participants[index]
                self.recompute()
                return participant
        raise ValueError(f"{participant_id} is not in this group")

    def recompute(self) -> None:
        """Re-derive every metric from the current members."""
        distribution = {category: 0 for category in Category}
        for participant in self.participants:
            distribution[participant.category] += 1
        self.category_distribution = distribution
        self.gender_distribution = GenderCounts.of(self.participants)

        ages = [p.age for p in self.participants if p.age]
        # round half up
        self.average_age = math.floor(sum(ages) / len(ages) + 0.5) if ages else 0

        bands = Counter(p.budget_band for p in self.participants if p.budget_band)
        self.dominant_budget_band = (
            bands.most_common(1)[0][0] if bands else UNKNOWN_BUDGET
        )

        self.compatibility_score = sum(
            pair_compatibility(a, b) for a, b in combinations(self.participants, 2)
        )
