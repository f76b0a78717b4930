"""Utilities for exporting formed groups, rationales and seat assignments.

This module turns a :class:`~dinner_groups.engine.formation.FormationResult`
into structures suitable for YAML or CSV output. Placement rationales are
grouped by group and participant. The groups YAML written here is also the
input format of :func:`dinner_groups.io.groups_loader.load_groups`.
"""
from __future__ import annotations

import csv
from typing import Any, Dict, List, Sequence

import yaml

from ..engine.distribution import DistributionResult
from ..engine.formation import FormationResult
from ..models.category import Category
from ..models.group import Group
from ..models.participant import Participant
from ..models.venue import SeatAssignment


def participant_to_dict(participant: Participant) -> Dict[str, Any]:
    return {
        "id": participant.id,
        "name": participant.name,
        "category": participant.category.value,
        "category_scores": {c.value: participant.category_scores[c] for c in Category},
        "age": participant.age,
        "gender": participant.gender,
        "budget_band": participant.budget_band,
        "relationship_status": participant.relationship_status,
    }


def group_to_dict(group: Group) -> Dict[str, Any]:
    return {
        "name": group.name,
        "size": group.size,
        "compatibility_score": group.compatibility_score,
        "average_age": group.average_age,
        "dominant_budget_band": group.dominant_budget_band,
        "category_distribution": {c.value: n for c, n in group.category_distribution.items()},
        "gender_distribution": group.gender_distribution.as_dict(),
        "participants": [participant_to_dict(p) for p in group.participants],
    }


def format_group_rationales(result: FormationResult) -> Dict[str, Dict[str, str]]:
    """Return placement rationales grouped by group and participant.

    Parameters
    ----------
    result:
        Formation result containing rationales keyed by ``(group, participant id)``.

    Returns
    -------
    dict[str, dict[str, str]]
        Mapping of group name -> participant id -> rationale string.
    """
    grouped: Dict[str, Dict[str, str]] = {}
    for (group, participant), rationale in sorted(result.rationales.items()):
        grouped.setdefault(group, {})[participant] = rationale
    return grouped


def result_to_dict(result: FormationResult) -> Dict[str, Any]:
    return {
        "status": result.status,
        "forced_placements": result.forced_placements,
        "warnings": list(result.warnings),
        "groups": [group_to_dict(g) for g in result.groups],
    }


def distribution_to_dict(result: DistributionResult) -> Dict[str, Any]:
    return {
        "summary": result.summary,
        "skipped_participants": list(result.skipped_participants),
        "venues": [
            {
                "id": placement.venue.id,
                "name": placement.venue.name,
                "capacity": placement.venue.capacity,
                "total_guests": placement.total_guests,
                "tables": [
                    {
                        "id": table.table.id,
                        "table_number": table.table.table_number,
                        "capacity": table.table.capacity,
                        "group": table.group_name,
                        "seats": [
                            {"participant_id": a.participant_id, "seat_number": a.seat_number}
                            for a in table.assignments
                        ],
                    }
                    for table in placement.tables
                ],
            }
            for placement in result.venues
        ],
    }


def export_yaml(result: FormationResult, groups_file: str, rationale_file: str) -> None:
    """Write groups and rationale data to YAML files.

    The groups file holds the status, warnings and every group with its
    members and derived metrics. The rationale file maps each group to its
    members' placement rationales.
    """
    with open(groups_file, "w", encoding="utf8") as handle:
        yaml.safe_dump(result_to_dict(result), handle, sort_keys=False, allow_unicode=True)
    with open(rationale_file, "w", encoding="utf8") as handle:
        yaml.safe_dump(format_group_rationales(result), handle, sort_keys=True, allow_unicode=True)


def export_csv(result: FormationResult, groups_file: str, rationale_file: str) -> None:
    """Write groups and rationale data to CSV files.

    The groups CSV has one row per member with the member's category and the
    group's derived metrics. The rationale CSV lists ``group``,
    ``participant`` and ``rationale``.
    """
    fieldnames = [
        "group",
        "participant",
        "name",
        "category",
        "age",
        "gender",
        "budget_band",
        "compatibility_score",
        "average_age",
        "dominant_budget_band",
    ]
    rows: List[Dict[str, Any]] = []
    for group in result.groups:
        for participant in group.participants:
            rows.append(
                {
                    "group": group.name,
                    "participant": participant.id,
                    "name": participant.name,
                    "category": participant.category.value,
                    "age": participant.age if participant.age is not None else "",
                    "gender": participant.gender or "",
                    "budget_band": participant.budget_band or "",
                    "compatibility_score": group.compatibility_score,
                    "average_age": group.average_age,
                    "dominant_budget_band": group.dominant_budget_band,
                }
            )
    with open(groups_file, "w", newline="", encoding="utf8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)

    rationales = format_group_rationales(result)
    with open(rationale_file, "w", newline="", encoding="utf8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["group", "participant", "rationale"])
        for group in sorted(rationales):
            members = rationales[group]
            for participant in sorted(members):
                writer.writerow([group, participant, members[participant]])


def export_assignments_csv(assignments: Sequence[SeatAssignment], path: str) -> None:
    """Write seat assignments with columns venue, table, seat and participant."""
    with open(path, "w", newline="", encoding="utf8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["venue_id", "table_id", "seat_number", "participant_id"])
        for a in assignments:
            writer.writerow([a.venue_id, a.table_id, a.seat_number, a.participant_id])
