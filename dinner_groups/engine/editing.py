"""Manual adjustments made by an administrator after formation."""
from __future__ import annotations

from typing import Iterable, List, Sequence

from ..models.group import Group
from ..models.participant import AvoidConstraint
from ..rules.gender import is_valid_gender_balance
from .formation import MIN_PARTICIPANTS, SINGLE_GROUP_MAX, AvoidIndex

MAX_AGE_SPREAD = 10


def recompute_group(group: Group) -> Group:
    """Re-derive every metric of ``group`` from its current members."""
    group.recompute()
    return group


def move_participant(groups: Sequence[Group], participant_id: str, to_index: int) -> List[Group]:
    """Move a participant into ``groups[to_index]``; both groups are recomputed."""
    if not 0 <= to_index < len(groups):
        raise IndexError(f"No group at index {to_index}")
    source = next((g for g in groups if g.has_member(participant_id)), None)
    if source is None:
        raise ValueError(f"{participant_id} is not in any group")
    destination = groups[to_index]
    if source is destination:
        return list(groups)
    participant = source.remove_participant(participant_id)
    destination.add_participant(participant)
    return list(groups)


def validate_group_composition(
    group: Group, constraints: Iterable[AvoidConstraint] = ()
) -> List[str]:
    """Return advisory warnings for a (possibly hand-edited) group."""
    warnings: List[str] = []
    size = group.size
    if size == 0:
        warnings.append("Group is empty")
    elif size < MIN_PARTICIPANTS:
        warnings.append(f"Group has fewer than {MIN_PARTICIPANTS} participants")
    if size > SINGLE_GROUP_MAX:
        warnings.append(f"Group has more than {SINGLE_GROUP_MAX} participants")

    if not is_valid_gender_balance(group.gender_distribution):
        counts = group.gender_distribution
        warnings.append(f"Gender balance violated ({counts.male}M/{counts.female}F)")

    ages = [p.age for p in group.participants if p.age]
    if len(ages) > 1 and max(ages) - min(ages) > MAX_AGE_SPREAD:
        warnings.append(f"Age spread is {max(ages) - min(ages)} years")

    bands = {p.budget_band for p in group.participants if p.budget_band}
    if len(bands) > 1:
        warnings.append("Mixed budget bands: " + ", ".join(sorted(bands)))

    for a, b in AvoidIndex(constraints).violations(group.participants):
        warnings.append(f"Avoid pair {a}/{b} shares this group")
    return warnings
