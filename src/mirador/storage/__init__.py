"""
Módulo de almacenamiento local.

Provee el key-value store y los repositorios de sesión.
"""

from mirador.storage.kv_store import KeyValueStore, JsonFileStore, MemoryStore
from mirador.storage.repositories import (
    STORAGE_KEYS,
    SessionRepository,
    SavedPropertyRepository,
    AlertRepository,
    OnboardingRepository,
    ChatHistoryRepository,
)

__all__ = [
    "KeyValueStore",
    "JsonFileStore",
    "MemoryStore",
    "STORAGE_KEYS",
    "SessionRepository",
    "SavedPropertyRepository",
    "AlertRepository",
    "OnboardingRepository",
    "ChatHistoryRepository",
]
