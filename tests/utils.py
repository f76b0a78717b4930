"""Builders shared by the dinner_groups tests."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dinner_groups.models import Category, Participant
from dinner_groups.models.records import GuestRecord


def person(
    pid: str,
    category: Category = Category.FREE_SPIRITS,
    gender: Optional[str] = None,
    age: Optional[int] = None,
    budget: Optional[str] = None,
    relationship: Optional[str] = None,
) -> Participant:
    """A participant whose top score is ``category``."""
    return Participant(
        id=pid,
        category_scores={category: 5},
        age=age,
        gender=gender,
        budget_band=budget,
        relationship_status=relationship,
    )


def balanced_roster(count: int, prefix: str = "p", **kwargs) -> List[Participant]:
    """Alternate male and female participants with zero-padded ids."""
    return [
        person(f"{prefix}{i:02d}", gender="male" if i % 2 == 0 else "female", **kwargs)
        for i in range(count)
    ]


def guest(gid: str, event_id: str = "evt", **kwargs) -> GuestRecord:
    return GuestRecord(id=gid, event_id=event_id, name=kwargs.pop("name", gid.title()), **kwargs)
