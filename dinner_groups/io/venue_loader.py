"""Load venues from CSV files."""
from __future__ import annotations

import csv
from typing import List

from ..models.venue import Venue


def load_venues(path: str) -> List[Venue]:
    """Load venues in the order they should be considered for packing.

    A row either describes a new venue (``name`` and ``capacity``) or
    refers to a stored one by ``id``, in which case the stored capacity is
    used and ``capacity`` may be left blank. ``address`` and
    ``contact_info`` are optional.
    """

    with open(path, newline="", encoding="utf8") as handle:
        reader = csv.DictReader(handle)
        fieldnames = set(reader.fieldnames or [])
        if "id" not in fieldnames and not {"name", "capacity"} <= fieldnames:
            raise ValueError("Missing required columns: either id or name and capacity")

        venues: List[Venue] = []
        for lineno, row in enumerate(reader, start=2):
            venue_id = (row.get("id") or "").strip() or None
            name = (row.get("name") or "").strip()
            if not venue_id and not name:
                raise ValueError(f"Row {lineno}: 'name' is required for a new venue")

            capacity_raw = (row.get("capacity") or "").strip()
            if not capacity_raw and venue_id:
                capacity_raw = "0"
            try:
                capacity = int(capacity_raw)
            except ValueError as exc:
                raise ValueError(f"Row {lineno}: capacity must be an integer") from exc
            if capacity < 0:
                raise ValueError(f"Row {lineno}: capacity must be non-negative")

            venues.append(
                Venue(
                    name=name or venue_id,
                    capacity=capacity,
                    id=venue_id,
                    address=(row.get("address") or "").strip() or None,
                    contact_info=(row.get("contact_info") or "").strip() or None,
                )
            )

    return venues
