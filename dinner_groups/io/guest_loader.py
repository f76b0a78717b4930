"""Utilities for loading :class:`~dinner_groups.models.records.GuestRecord` objects from CSV files."""
from __future__ import annotations

import csv
from typing import Any, Dict, List, Optional

from ..models.records import GuestRecord

GUEST_COLUMNS = {"id", "name", "email", "user_id", "age", "gender"}


def _optional_int(lineno: int, column: str, raw: str) -> Optional[int]:
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"Row {lineno}: {column} must be an integer") from exc
    if value < 0:
        raise ValueError(f"Row {lineno}: {column} must be non-negative")
    return value


def load_guests(path: str, event_id: str) -> List[GuestRecord]:
    """Load the guests of ``event_id`` from a CSV file.

    The CSV must contain an ``id`` column. ``name``, ``email``, ``user_id``,
    ``age`` and ``gender`` are optional. Every other non-empty column is
    taken as an assessment answer (``talkTopic``, ``introvertScale``,
    ``spending``, ``relationshipStatus`` and so on) and stored as the guest's
    personality data.

    Raises
    ------
    ValueError
        If the ``id`` column is missing, an id is blank or repeated, or an
        age is not a non-negative integer.
    """

    with open(path, newline="", encoding="utf8") as handle:
        reader = csv.DictReader(handle)
        fieldnames = reader.fieldnames or []
        if "id" not in fieldnames:
            raise ValueError("Missing required columns: id")

        guests: List[GuestRecord] = []
        seen = set()
        for lineno, row in enumerate(reader, start=2):
            guest_id = (row.get("id") or "").strip()
            if not guest_id:
                raise ValueError(f"Row {lineno}: 'id' is required")
            if guest_id in seen:
                raise ValueError(f"Row {lineno}: duplicate id '{guest_id}'")
            seen.add(guest_id)

            answers: Dict[str, Any] = {
                key: value.strip()
                for key, value in row.items()
                if key and key not in GUEST_COLUMNS and value and value.strip()
            }
            guests.append(
                GuestRecord(
                    id=guest_id,
                    event_id=event_id,
                    name=(row.get("name") or "").strip(),
                    email=(row.get("email") or "").strip() or None,
                    user_id=(row.get("user_id") or "").strip() or None,
                    age=_optional_int(lineno, "age", row.get("age") or ""),
                    gender=(row.get("gender") or "").strip() or None,
                    personality=answers or None,
                )
            )

    return guests
