"""Data models for dinner_groups."""

from .category import BEST_PAIRINGS, CATEGORY_PRIORITY, Category, top_category
from .participant import AvoidConstraint, Participant
from .group import Group
from .venue import SeatAssignment, Table, Venue
from .records import BookingRecord, GuestRecord

__all__ = [
    "Category",
    "BEST_PAIRINGS",
    "CATEGORY_PRIORITY",
    "top_category",
    "Participant",
    "AvoidConstraint",
    "Group",
    "Venue",
    "Table",
    "SeatAssignment",
    "GuestRecord",
    "BookingRecord",
]
