"""Insert-only containers shared by crawl workers."""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Iterable

from .constants import DEFAULT_PACKAGE_NAME
from .types import PackageDoc, TypeDoc


class ConcurrentSet:
    """A set whose only mutation is atomic insert-if-absent."""

    def __init__(self, items: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._items: set[str] = set(items)

    def add_if_absent(self, item: str) -> bool:
        """Insert `item`; return False when it was already present."""

        with self._lock:
            if item in self._items:
                return False
            self._items.add(item)
            return True



class PackageGrouping:
    """Collect type records by package; first record per full name is kept."""

    def __init__(self, default_package: str = DEFAULT_PACKAGE_NAME) -> None:
        self.default_package = default_package
        self._lock = threading.Lock()
        self._types_by_package: dict[str, dict[str, TypeDoc]] = defaultdict(dict)

    def add(self, type_doc: TypeDoc) -> bool:
        package = type_doc.package_name or self.default_package
        with self._lock:
            bucket = self._types_by_package[package]
            if type_doc.name in bucket:
                return False
            bucket[type_doc.name] = type_doc
            return True

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._types_by_package.values())

    def materialize(self) -> tuple[PackageDoc, ...]:
        """Return packages sorted by name, each with types sorted by name."""

        with self._lock:
            snapshot = {name: dict(bucket) for name, bucket in self._types_by_package.items()}

        return tuple(
            PackageDoc(
                name=package,
                types=tuple(bucket[name] for name in sorted(bucket)),
            )
            for package, bucket in sorted(snapshot.items())
            if bucket
        )


__all__ = ["ConcurrentSet", "PackageGrouping"]
