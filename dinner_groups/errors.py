"""Exception hierarchy for caller-visible matching failures.

Expected outcomes such as a roster that is too small or a strict pass that
falls back to lenient placement are reported through return values, never
through these exceptions.
"""
from __future__ import annotations


class MatchingError(ValueError):
    """Base class for all matching failures."""


class RosterError(MatchingError):
    """The roster or its parameters are malformed."""


class UnsatisfiableConstraintError(MatchingError):
    """A participant cannot be placed without co-locating an avoid pair."""


class ConfigError(MatchingError):
    """The matching configuration file is invalid."""


class DistributionError(MatchingError):
    """A venue distribution precondition failed; nothing was written."""


class NoVenuesError(DistributionError):
    """No venue was supplied."""


class CapacityShortfallError(DistributionError):
    """The venues cannot seat every group."""

    def __init__(self, message: str, required: int, available: int) -> None:
        super().__init__(message)
        self.required = required
        self.available = available


class UnknownVenueError(MatchingError):
    """A venue id was given for reuse but does not exist."""
