"""Persistence backends for dinner_groups."""

from .base import PairingStore
from .memory import InMemoryPairingStore
from .yaml_store import YamlPairingStore

__all__ = ["PairingStore", "InMemoryPairingStore", "YamlPairingStore"]
