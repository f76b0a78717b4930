"""Flask JSON API exposing roster, formation and seating controls."""
from __future__ import annotations

import logging
import os
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..engine.editing import validate_group_composition
from ..engine.service import MatchingService
from ..errors import CapacityShortfallError, MatchingError, NoVenuesError
from ..io.config_loader import MatchingConfig, load_config
from ..io.groups_loader import groups_from_data
from ..models.participant import AvoidConstraint
from ..models.venue import Venue
from ..reporting.export import (
    distribution_to_dict,
    format_group_rationales,
    group_to_dict,
    participant_to_dict,
    result_to_dict,
)
from ..store.base import PairingStore
from ..store.memory import InMemoryPairingStore
from ..store.yaml_store import YamlPairingStore

logger = logging.getLogger(__name__)


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _venues_from_payload(items: Any) -> List[Venue]:
    if not isinstance(items, list):
        raise ValueError("'venues' must be a list")
    venues = []
    for idx, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Venue {idx}: expected an object")
        venue_id = item.get("id")
        name = item.get("name") or venue_id
        if not name:
            raise ValueError(f"Venue {idx}: 'name' is required for a new venue")
        try:
            capacity = int(item.get("capacity") or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Venue {idx}: capacity must be an integer") from exc
        venues.append(
            Venue(
                name=str(name),
                capacity=capacity,
                id=str(venue_id) if venue_id is not None else None,
                address=item.get("address"),
                contact_info=item.get("contact_info"),
            )
        )
    return venues


def _constraints_from_payload(items: Any) -> List[AvoidConstraint]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError("'constraints' must be a list")
    constraints = []
    for idx, item in enumerate(items, start=1):
        if isinstance(item, dict):
            pair = (item.get("participant_a"), item.get("participant_b"))
        elif isinstance(item, list) and len(item) == 2:
            pair = (item[0], item[1])
        else:
            raise ValueError(f"Constraint {idx}: expected a pair of participant ids")
        if pair[0] is None or pair[1] is None:
            raise ValueError(f"Constraint {idx}: both participants are required")
        constraints.append(AvoidConstraint(str(pair[0]), str(pair[1])))
    return constraints


def create_app(
    store: Optional[PairingStore] = None, config: Optional[MatchingConfig] = None
) -> Flask:
    """Return a Flask application bound to ``store``.

    Without a store an empty in-memory one is used.
    """
    app = Flask(__name__)
    service = MatchingService(store or InMemoryPairingStore(), config)
    app.config["MATCHING_SERVICE"] = service

    @app.get("/events/<event_id>/roster")
    def roster(event_id: str):
        participants = service.roster(event_id)
        return jsonify(
            {"event_id": event_id, "participants": [participant_to_dict(p) for p in participants]}
        )

    @app.post("/events/<event_id>/groups")
    def generate(event_id: str):
        data = _payload()
        target_size = data.get("target_size")
        result = service.generate(event_id, target_size=target_size)
        body = result_to_dict(result)
        body["rationales"] = format_group_rationales(result)
        return jsonify(body)

    @app.post("/events/<event_id>/distribute")
    def distribute(event_id: str):
        data = _payload()
        groups = groups_from_data(data.get("groups"))
        venues = _venues_from_payload(data.get("venues"))
        result = service.distribute(event_id, groups, venues)
        return jsonify(distribution_to_dict(result))

    @app.delete("/events/<event_id>/assignments")
    def clear(event_id: str):
        service.clear(event_id)
        return jsonify({"event_id": event_id, "status": "cleared"})

    @app.get("/events/<event_id>/assignments")
    def assignments(event_id: str):
        rows = [asdict(a) for a in service.store.list_assignments(event_id)]
        return jsonify({"event_id": event_id, "assignments": rows})

    @app.post("/groups/recompute")
    def recompute():
        data = _payload()
        groups = MatchingService.recompute(groups_from_data(data.get("groups")))
        constraints = _constraints_from_payload(data.get("constraints"))
        return jsonify(
            {
                "groups": [
                    dict(group_to_dict(g), warnings=validate_group_composition(g, constraints))
                    for g in groups
                ]
            }
        )

    @app.errorhandler(NoVenuesError)
    @app.errorhandler(CapacityShortfallError)
    def capacity_error(exc: MatchingError):
        return jsonify({"error": str(exc), "type": type(exc).__name__}), 422

    @app.errorhandler(ValueError)
    def bad_request(exc: ValueError):
        return jsonify({"error": str(exc), "type": type(exc).__name__}), 400

    @app.errorhandler(Exception)
    def server_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("Unhandled error while serving %s", request.path)
        return jsonify({"error": "Internal server error"}), 500

    return app


if __name__ == "__main__":
    store_path = os.environ.get("DINNER_GROUPS_STORE", "dinner_groups.yaml")
    app = create_app(
        YamlPairingStore(store_path), load_config(os.environ.get("DINNER_GROUPS_CONFIG"))
    )
    # Bind to all interfaces to allow remote access when running the app directly.
    app.run(debug=True, host="0.0.0.0")
