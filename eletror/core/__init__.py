"""Core app configuration, database and key-value store."""

from eletror.core.config import get_settings, settings
from eletror.core.database import get_db
from eletror.core.kv_store import InMemoryKeyValueStore, KeyValueStore, SQLKeyValueStore

__all__ = [
    "get_settings",
    "settings",
    "get_db",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SQLKeyValueStore",
]
