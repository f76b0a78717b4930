"""Roster building, group formation and venue distribution."""

from .distribution import DistributionResult, VenueDistributor
from .editing import move_participant, recompute_group, validate_group_composition
from .formation import FormationResult, GroupFormer, generate_groups, plan_group_sizes
from .roster import build_roster, import_bookings_as_guests

__all__ = [
    "DistributionResult",
    "VenueDistributor",
    "FormationResult",
    "GroupFormer",
    "generate_groups",
    "plan_group_sizes",
    "move_participant",
    "recompute_group",
    "validate_group_composition",
    "build_roster",
    "import_bookings_as_guests",
]
