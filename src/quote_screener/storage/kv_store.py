"""
Key-Value Stores - Persistence Substrate for User Lists.

The list accessors only need ``get(key)`` and ``set(key, value)`` over
JSON-compatible values. Absent keys return None.

Implementations:
    - InMemoryStore: Process-local dict, for tests and ephemeral sessions
    - JsonFileStore: One JSON document per key in a directory

Design Notes:
    - Values round-trip through JSON in both stores so callers never share
      mutable state with the store
    - File writes are atomic (temp file + replace)
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Protocol, Union

from quote_screener.config.models import StorageConfig

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Protocol for JSON key-value persistence."""

    def get(self, key: str) -> Optional[Any]:
        """Stored value, or None when the key is absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value."""
        ...


class InMemoryStore:
    """Thread-safe in-memory store."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, str] = {}
        self._lock = Lock()
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            encoded = self._data.get(key)
        if encoded is None:
            return None
        return json.loads(encoded)

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._data[key] = encoded

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)


class JsonFileStore:
    """Directory of ``<key>.json`` documents."""

    def __init__(self, directory: Union[str, Path]) -> None:
        """
        Initialize file store.

        Args:
            directory: Directory holding the documents (created on first write)
        """
        self.directory = Path(directory).expanduser()

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        encoded = json.dumps(value, ensure_ascii=False, indent=2)
        self.directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(encoded)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"


def create_store(config: Optional[StorageConfig] = None) -> KeyValueStore:
    """Build the store selected by configuration."""
    config = config or StorageConfig()
    if config.backend == "json_file":
        logger.info(f"Using JSON file store at {config.path}")
        return JsonFileStore(config.path)
    return InMemoryStore()
