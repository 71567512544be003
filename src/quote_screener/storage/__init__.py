"""
Storage Package - Persistence for User Lists.

Components:
    - KeyValueStore: Protocol for JSON key-value persistence
    - InMemoryStore / JsonFileStore: Store implementations
    - ExclusionList / WatchlistStore: Typed accessors over a store
"""

from quote_screener.storage.kv_store import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    create_store,
)
from quote_screener.storage.lists import (
    EXCLUSION_KEY,
    WATCHLIST_KEY,
    ExclusionList,
    WatchlistStore,
    add_group,
    add_to_group,
    exclude,
    is_excluded,
    remove_from_group,
    remove_group,
    rename_group,
    restore,
)

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "create_store",
    "EXCLUSION_KEY",
    "WATCHLIST_KEY",
    "ExclusionList",
    "WatchlistStore",
    "add_group",
    "add_to_group",
    "exclude",
    "is_excluded",
    "remove_from_group",
    "remove_group",
    "rename_group",
    "restore",
]
