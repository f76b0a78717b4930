"""Reporting utilities for dinner_groups."""

from .export import (
    distribution_to_dict,
    export_assignments_csv,
    export_csv,
    export_yaml,
    format_group_rationales,
    group_to_dict,
    participant_to_dict,
    result_to_dict,
)

__all__ = [
    "distribution_to_dict",
    "export_assignments_csv",
    "export_csv",
    "export_yaml",
    "format_group_rationales",
    "group_to_dict",
    "participant_to_dict",
    "result_to_dict",
]
