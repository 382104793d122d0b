"""Atomic file writes shared by the cache and the output writer."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write `data` to a temp file beside `path`, then rename it into place."""

    tmp_fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=path.name + ".",
        suffix=".tmp",
    )
    try:
        with os.fdopen(tmp_fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise


def atomic_write_json(path: Path, payload: Mapping[str, Any], *, indent: int = 2) -> None:
    content = json.dumps(payload, ensure_ascii=False, indent=indent) + "\n"
    atomic_write_bytes(path, content.encode("utf-8"))


__all__ = ["atomic_write_bytes", "atomic_write_json"]
