"""Load avoid-pair constraints from CSV files."""
from __future__ import annotations

import csv
from typing import List

from ..models.participant import AvoidConstraint


def load_constraints(path: str) -> List[AvoidConstraint]:
    """Load avoid pairs from a CSV with ``participant_a`` and ``participant_b`` columns.

    An optional ``reason`` column is kept for reporting.
    """

    with open(path, newline="", encoding="utf8") as handle:
        reader = csv.DictReader(handle)
        fieldnames = reader.fieldnames or []
        required = {"participant_a", "participant_b"}
        missing = required - set(fieldnames)
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(sorted(missing))}")

        constraints: List[AvoidConstraint] = []
        for lineno, row in enumerate(reader, start=2):
            a = (row.get("participant_a") or "").strip()
            b = (row.get("participant_b") or "").strip()
            if not a or not b:
                raise ValueError(f"Row {lineno}: both participants are required")
            if a == b:
                raise ValueError(f"Row {lineno}: a participant cannot avoid themselves")
            constraints.append(
                AvoidConstraint(a, b, reason=(row.get("reason") or "").strip())
            )

    return constraints
