"""Flask-based JSON API for dinner group matching."""
from __future__ import annotations

from .app import create_app

__all__ = ["create_app"]
