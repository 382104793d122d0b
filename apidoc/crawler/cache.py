"""Filesystem-backed cache of extracted type records.

One `<full name>.json` file per type. The directory is scanned once at
construction so `is_cached` is a set lookup afterwards. Writes are
first-write-wins and never overwrite an existing record.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from .io import atomic_write_json
from .types import JSONDict, TypeDoc


LOGGER = logging.getLogger(__name__)

CACHE_SUFFIX = ".json"


class TypeDocCache:
    """Persist `TypeDoc` records under `cache_dir`, keyed by fully-qualified name.

    Cache I/O problems never raise: unreadable or malformed records are misses,
    and failed writes are retried once and then given up. A key only enters
    the index once its file is written, so readers never see a half-stored
    record.
    """

    def __init__(self, cache_dir: str | Path, *, enabled: bool = True) -> None:
        self.cache_dir = Path(cache_dir)
        self.enabled = enabled

        self._index_lock = threading.Lock()
        self._index: set[str] = set()
        # Keys claimed by a `put` whose file is not written yet.
        self._pending: set[str] = set()

        if self.enabled:
            self._load_index()

    def _load_index(self) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            names = {
                path.name[: -len(CACHE_SUFFIX)]
                for path in self.cache_dir.iterdir()
                if path.is_file() and path.name.endswith(CACHE_SUFFIX)
            }
        except OSError as exc:
            LOGGER.warning("Cache directory %s unavailable, caching disabled: %s", self.cache_dir, exc)
            self.enabled = False
            return

        with self._index_lock:
            self._index.update(names)
        LOGGER.info("Loaded cache index: %d types in %s", len(names), self.cache_dir)

    def path_for(self, full_name: str) -> Path:
        return self.cache_dir / f"{full_name}{CACHE_SUFFIX}"

    def is_cached(self, full_name: str) -> bool:
        if not self.enabled:
            return False
        with self._index_lock:
            return full_name in self._index

    def get(self, full_name: str) -> TypeDoc | None:
        """Load a cached record; corrupt or unreadable files count as a miss."""

        if not self.is_cached(full_name):
            return None

        path = self.path_for(full_name)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise ValueError("cache record is not a JSON object")
            return TypeDoc.from_json(payload)
        except (OSError, ValueError, TypeError, AttributeError, KeyError) as exc:
            LOGGER.warning("Ignoring unreadable cache record %s: %s", path, exc)
            # Let a fresh parse replace the broken record.
            with self._index_lock:
                self._index.discard(full_name)
            return None

    def put(self, type_doc: TypeDoc) -> bool:
        """Store a record unless one already exists. Returns True when written."""

        if not self.enabled:
            return False

        full_name = type_doc.full_name
        with self._index_lock:
            if full_name in self._index or full_name in self._pending:
                return False
            self._pending.add(full_name)

        path = self.path_for(full_name)
        payload = type_doc.to_json()
        for attempt in (1, 2):
            try:
                atomic_write_json(path, payload)
            except OSError as exc:
                LOGGER.warning(
                    "Cache write failed for %s (attempt %d/2): %s",
                    full_name,
                    attempt,
                    exc,
                )
                continue

            with self._index_lock:
                self._pending.discard(full_name)
                self._index.add(full_name)
            return True

        with self._index_lock:
            self._pending.discard(full_name)
        return False

    def stats(self) -> JSONDict:
        with self._index_lock:
            count = len(self._index)
        return {
            "enabled": self.enabled,
            "count": count if self.enabled else 0,
            "location": str(self.cache_dir),
        }

    def describe(self) -> str:
        stats = self.stats()
        if not stats["enabled"]:
            return "Cache disabled"
        return f"Cache: {stats['count']} types cached in {stats['location']}"


__all__ = ["TypeDocCache"]
