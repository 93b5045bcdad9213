"""Sitzungsspeicher (drei Slots) hinter einem austauschbaren Backend."""

from .store import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    SessionState,
    SessionStore,
    StorageSlot,
)

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "SessionState",
    "SessionStore",
    "StorageSlot",
]
