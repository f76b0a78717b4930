"""Operational entry points shared by the CLI and the web API."""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from ..io.config_loader import MatchingConfig
from ..models.group import Group
from ..models.participant import Participant
from ..models.venue import Venue
from ..store.base import PairingStore
from .distribution import DistributionResult, VenueDistributor
from .formation import FormationResult, generate_groups
from .roster import build_roster

logger = logging.getLogger(__name__)


class MatchingService:
    """Bind a store and a configuration to the matching operations."""

    def __init__(self, store: PairingStore, config: Optional[MatchingConfig] = None) -> None:
        self.store = store
        self.config = config or MatchingConfig()
        self.rules = self.config.build_rules()

    def _rng(self) -> random.Random:
        return random.Random(self.config.random_seed)

    def roster(self, event_id: str) -> List[Participant]:
        return build_roster(self.store, event_id)

    def generate(self, event_id: str, target_size: Optional[int] = None) -> FormationResult:
        """Build the roster of ``event_id`` and form its groups."""
        roster = self.roster(event_id)
        constraints = self.store.list_avoid_constraints(event_id)
        result = generate_groups(
            roster,
            constraints,
            target_size=target_size or self.config.target_group_size,
            rules=self.rules,
            rng=self._rng(),
            lenient_attempts=self.config.lenient_attempts,
        )
        logger.info(
            "Event %s: %s, %d group(s) from %d participant(s)",
            event_id,
            result.status,
            len(result.groups),
            len(roster),
        )
        return result

    def distribute(
        self, event_id: str, groups: Sequence[Group], venues: Sequence[Venue]
    ) -> DistributionResult:
        return VenueDistributor.distribute(self.store, event_id, groups, venues)

    def clear(self, event_id: str) -> None:
        VenueDistributor.clear(self.store, event_id)

    @staticmethod
    def recompute(groups: Sequence[Group]) -> List[Group]:
        """Re-derive metrics and compatibility of manually edited groups."""
        for group in groups:
            group.recompute()
        return list(groups)
