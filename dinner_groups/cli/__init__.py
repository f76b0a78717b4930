"""Command line interface for dinner_groups."""
