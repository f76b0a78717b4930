"""Read back group files written by :func:`dinner_groups.reporting.export_yaml`.

Only the member data is read. Distributions, average age, dominant budget
band and compatibility score are recomputed, so a file edited by hand
(members moved between groups) loads with correct metrics.
"""
from __future__ import annotations

from typing import Any, Dict, List

import yaml

from ..models.category import parse_category
from ..models.group import Group
from ..models.participant import Participant


def participant_from_dict(data: Dict[str, Any]) -> Participant:
    scores = {
        parse_category(label): float(value)
        for label, value in (data.get("category_scores") or {}).items()
    }
    return Participant(
        id=str(data["id"]),
        category_scores=scores,
        age=data.get("age"),
        gender=data.get("gender"),
        budget_band=data.get("budget_band"),
        relationship_status=data.get("relationship_status"),
        name=data.get("name") or "",
    )


def groups_from_data(data: Any) -> List[Group]:
    if isinstance(data, dict):
        data = data.get("groups")
    if not isinstance(data, list):
        raise ValueError("Groups file must contain a list of groups")

    groups: List[Group] = []
    for idx, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Group {idx}: expected mapping but found {type(item).__name__}")
        members = item.get("participants") or []
        if not isinstance(members, list):
            raise ValueError(f"Group {idx}: participants must be a list")
        try:
            participants = [participant_from_dict(m) for m in members]
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Group {idx}: invalid participant ({exc})") from exc
        groups.append(Group(participants, name=item.get("name") or f"Group {idx}"))
    return groups


def load_groups(path: str) -> List[Group]:
    """Load groups from a YAML file and recompute their metrics."""
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle)
    return groups_from_data(data)
