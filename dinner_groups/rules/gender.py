"""Group-level gender balance law.

A finished group of four or more must contain at least one man and one
woman, and the gap between them may not exceed :data:`MAX_GENDER_GAP` for
its exact size. :func:`can_maintain_balance` is the lookahead used while a
group is still being filled.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..models.participant import Participant

MAX_GENDER_GAP = {4: 0, 5: 1, 6: 2, 7: 1, 8: 2, 9: 1}
DEFAULT_GENDER_GAP = 1
BALANCE_MIN_SIZE = 4


def normalize_gender(value: Optional[str]) -> str:
    gender = (value or "").strip().lower()
    if gender in ("male", "female"):
        return gender
    return "other"


@dataclass(frozen=True)
class GenderCounts:
    male: int = 0
    female: int = 0
    other: int = 0

    @classmethod
    def of(cls, participants: Iterable[Participant]) -> "GenderCounts":
        male = female = other = 0
        for participant in participants:
            gender = normalize_gender(participant.gender)
            if gender == "male":
                male += 1
            elif gender == "female":
                female += 1
            else:
                other += 1
        return cls(male=male, female=female, other=other)

    @property
    def total(self) -> int:
        return self.male + self.female + self.other

    @property
    def gap(self) -> int:
        return abs(self.male - self.female)

    def as_dict(self) -> dict:
        return {"male": self.male, "female": self.female, "other": self.other}


def max_gender_gap(size: int) -> int:
    return MAX_GENDER_GAP.get(size, DEFAULT_GENDER_GAP)


def is_valid_gender_balance(counts: GenderCounts) -> bool:
    """Check a finished group against the balance law."""
    if counts.total < BALANCE_MIN_SIZE:
        return True
    if counts.male == 0 or counts.female == 0:
        return False
    return counts.gap <= max_gender_gap(counts.total)


def can_maintain_balance(
    counts: GenderCounts, remaining_slots: int, target_size: int
) -> bool:
    """Return True if some way of filling ``remaining_slots`` meets the law.

    The remaining slots may be filled by men, women or others in any mix;
    the group is feasible if at least one mix satisfies the law for
    ``target_size``.
    """
    if remaining_slots < 0:
        return False
    if target_size < BALANCE_MIN_SIZE:
        return True
    allowed = max_gender_gap(target_size)
    for add_male in range(remaining_slots + 1):
        for add_female in range(remaining_slots - add_male + 1):
            male = counts.male + add_male
            female = counts.female + add_female
            if male and female and abs(male - female) <= allowed:
                return True
    return False
