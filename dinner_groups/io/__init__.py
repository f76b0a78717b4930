"""Input/output helpers for :mod:`dinner_groups`."""

from .config_loader import MatchingConfig, RuleDefinition, load_config, load_rules
from .constraint_loader import load_constraints
from .groups_loader import load_groups
from .guest_loader import load_guests
from .venue_loader import load_venues

__all__ = [
    "MatchingConfig",
    "RuleDefinition",
    "load_config",
    "load_rules",
    "load_constraints",
    "load_groups",
    "load_guests",
    "load_venues",
]
