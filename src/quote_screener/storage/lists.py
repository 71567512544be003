"""
User Lists - Exclusion List and Watchlist Accessors.

Both lists live in a KeyValueStore as JSON documents:

    stock_excluded:  [{"code", "name", "reason", "excludedAt"}, ...]
    stock_watchlist: {"groups": [{"id", "name", "codes": [...]}, ...]}

A bare list of groups is still read as a watchlist document.

Design Notes:
    - Codes are canonicalized before they are stored or looked up
    - Read failures (store error, malformed document) log and fall back to
      defaults; write failures log and are dropped
    - Every mutation is read-modify-write against the store, so several
      accessors over one store stay consistent
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from quote_screener.domain.entities import (
    DEFAULT_GROUP_ID,
    ExclusionEntry,
    Watchlist,
    WatchlistGroup,
)
from quote_screener.normalization.codes import canonicalize
from quote_screener.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

EXCLUSION_KEY = "stock_excluded"
WATCHLIST_KEY = "stock_watchlist"


def _now_ms(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


class ExclusionList:
    """Persisted set of stocks hidden from every screening pass."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = EXCLUSION_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize accessor.

        Args:
            store: Backing key-value store
            key: Storage key of the exclusion document
            clock: Seconds-since-epoch source for timestamps
        """
        self.store = store
        self.key = key
        self.clock = clock

    def entries(self) -> List[ExclusionEntry]:
        """All entries in insertion order (empty on read failure)."""
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read exclusion list: {e}")
            return []

        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(
                f"Malformed exclusion list ({type(raw).__name__}), using empty list"
            )
            return []

        entries: List[ExclusionEntry] = []
        for item in raw:
            try:
                entries.append(self._decode(item))
            except (ValidationError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed exclusion entry {item!r}: {e}")
        return entries

    def codes(self) -> List[str]:
        return [entry.code for entry in self.entries()]

    def exclude(self, code: str, name: str = "", reason: str = "") -> bool:
        """
        Add a code to the exclusion list.

        Returns:
            True if added, False if already excluded or the code is empty
        """
        code = canonicalize(code)
        if not code:
            return False

        entries = self.entries()
        if any(entry.code == code for entry in entries):
            return False

        entries.append(
            ExclusionEntry(
                code=code,
                name=name or "",
                reason=reason or "",
                excluded_at=_now_ms(self.clock),
            )
        )
        self._write(entries)
        logger.info(f"Excluded {code}" + (f" ({reason})" if reason else ""))
        return True

    def restore(self, code: str) -> bool:
        """
        Remove a code from the exclusion list.

        Returns:
            True if an entry was removed
        """
        code = canonicalize(code)
        entries = self.entries()
        remaining = [entry for entry in entries if entry.code != code]
        if len(remaining) == len(entries):
            return False
        self._write(remaining)
        logger.info(f"Restored {code}")
        return True

    def is_excluded(self, code: str) -> bool:
        code = canonicalize(code)
        return any(entry.code == code for entry in self.entries())

    def reason_for(self, code: str) -> Optional[str]:
        """Stored reason, or None when the code is not excluded."""
        code = canonicalize(code)
        for entry in self.entries():
            if entry.code == code:
                return entry.reason
        return None

    def _write(self, entries: List[ExclusionEntry]) -> None:
        try:
            self.store.set(self.key, [self._encode(entry) for entry in entries])
        except Exception as e:
            logger.error(f"Failed to persist exclusion list: {e}")

    @staticmethod
    def _encode(entry: ExclusionEntry) -> Dict[str, Any]:
        return {
            "code": entry.code,
            "name": entry.name,
            "reason": entry.reason,
            "excludedAt": entry.excluded_at,
        }

    @staticmethod
    def _decode(item: Any) -> ExclusionEntry:
        if not isinstance(item, dict):
            raise TypeError(f"expected object, got {type(item).__name__}")
        return ExclusionEntry(
            code=canonicalize(str(item.get("code", ""))),
            name=item.get("name") or "",
            reason=item.get("reason") or "",
            excluded_at=item.get("excludedAt", item.get("excluded_at", 0)),
        )


class WatchlistStore:
    """Persisted, grouped favorites."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = WATCHLIST_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.key = key
        self.clock = clock

    def load(self) -> Watchlist:
        """
        Current watchlist.

        Absent, unreadable or empty documents yield the default watchlist
        (one empty default group).
        """
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read watchlist: {e}")
            return Watchlist.default()

        if raw is None:
            return Watchlist.default()
        if isinstance(raw, dict):
            raw = raw.get("groups")
        if not isinstance(raw, list):
            logger.warning(
                f"Malformed watchlist ({type(raw).__name__}), using default"
            )
            return Watchlist.default()

        groups: List[WatchlistGroup] = []
        for item in raw:
            try:
                groups.append(self._decode(item))
            except (ValidationError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed watchlist group {item!r}: {e}")

        if not groups:
            return Watchlist.default()
        return Watchlist(groups=groups)

    def save(self, watchlist: Watchlist) -> None:
        try:
            self.store.set(
                self.key, {"groups": [g.model_dump() for g in watchlist.groups]}
            )
        except Exception as e:
            logger.error(f"Failed to persist watchlist: {e}")

    def add_to_group(self, code: str, group_id: str = DEFAULT_GROUP_ID) -> bool:
        """
        Append a code to a group.

        Unknown group ids fall back to the first group.

        Returns:
            True if the code was added, False if already present
        """
        code = canonicalize(code)
        if not code:
            return False

        watchlist = self.load()
        group = watchlist.find_group(group_id) or watchlist.groups[0]
        if code in group.codes:
            return False

        group.codes.append(code)
        self.save(watchlist)
        logger.info(f"Added {code} to watchlist group {group.id}")
        return True

    def remove_from_group(self, code: str, group_id: Optional[str] = None) -> bool:
        """
        Remove a code from one group, or from every group when group_id is None.

        Returns:
            True if any group changed
        """
        code = canonicalize(code)
        watchlist = self.load()
        changed = False

        for group in watchlist.groups:
            if group_id is not None and group.id != group_id:
                continue
            if code in group.codes:
                group.codes = [c for c in group.codes if c != code]
                changed = True

        if changed:
            self.save(watchlist)
        return changed

    def is_in_watchlist(self, code: str) -> bool:
        code = canonicalize(code)
        return any(code in group.codes for group in self.load().groups)

    def all_codes(self) -> List[str]:
        """Codes across all groups, deduplicated in first-seen order."""
        seen: Dict[str, None] = {}
        for group in self.load().groups:
            for code in group.codes:
                seen.setdefault(code, None)
        return list(seen)

    def add_group(self, name: str = "") -> str:
        """
        Append an empty group.

        Args:
            name: Group name; blank names become "分组<n+1>"

        Returns:
            Id of the new group
        """
        watchlist = self.load()
        name = (name or "").strip() or f"分组{len(watchlist.groups) + 1}"

        group_id = f"group_{_now_ms(self.clock)}"
        existing = {group.id for group in watchlist.groups}
        suffix = 1
        while group_id in existing:
            group_id = f"group_{_now_ms(self.clock)}_{suffix}"
            suffix += 1

        watchlist.groups.append(WatchlistGroup(id=group_id, name=name))
        self.save(watchlist)
        logger.info(f"Created watchlist group {group_id} ({name})")
        return group_id

    def rename_group(self, group_id: str, name: str) -> bool:
        """Rename a group. Blank names and unknown ids are ignored."""
        name = (name or "").strip()
        if not name:
            return False

        watchlist = self.load()
        group = watchlist.find_group(group_id)
        if group is None:
            return False

        group.name = name
        self.save(watchlist)
        return True

    def remove_group(self, group_id: str) -> bool:
        """
        Delete a group and its codes.

        The last remaining group is never removed.
        """
        watchlist = self.load()
        if watchlist.find_group(group_id) is None:
            return False
        if len(watchlist.groups) <= 1:
            logger.warning(f"Refusing to remove last watchlist group {group_id}")
            return False

        watchlist.groups = [g for g in watchlist.groups if g.id != group_id]
        self.save(watchlist)
        logger.info(f"Removed watchlist group {group_id}")
        return True

    @staticmethod
    def _decode(item: Any) -> WatchlistGroup:
        if not isinstance(item, dict):
            raise TypeError(f"expected object, got {type(item).__name__}")
        codes: List[str] = []
        for code in item.get("codes") or []:
            code = canonicalize(str(code))
            if code and code not in codes:
                codes.append(code)
        group_id = item.get("id")
        if not group_id:
            raise ValueError("group without id")
        return WatchlistGroup(id=str(group_id), name=str(item.get("name", "")), codes=codes)


# ============================================================================
# Module-level accessors
# ============================================================================


def exclude(store: KeyValueStore, code: str, name: str = "", reason: str = "") -> bool:
    """Add a code to the exclusion list held in ``store``."""
    return ExclusionList(store).exclude(code, name, reason)


def restore(store: KeyValueStore, code: str) -> bool:
    return ExclusionList(store).restore(code)


def is_excluded(store: KeyValueStore, code: str) -> bool:
    return ExclusionList(store).is_excluded(code)


def add_to_group(
    store: KeyValueStore, code: str, group_id: str = DEFAULT_GROUP_ID
) -> bool:
    """Add a code to a watchlist group held in ``store``."""
    return WatchlistStore(store).add_to_group(code, group_id)


def remove_from_group(
    store: KeyValueStore, code: str, group_id: Optional[str] = None
) -> bool:
    return WatchlistStore(store).remove_from_group(code, group_id)


def add_group(store: KeyValueStore, name: str = "") -> str:
    return WatchlistStore(store).add_group(name)


def rename_group(store: KeyValueStore, group_id: str, name: str) -> bool:
    return WatchlistStore(store).rename_group(group_id, name)


def remove_group(store: KeyValueStore, group_id: str) -> bool:
    return WatchlistStore(store).remove_group(group_id)
