"""Serialize crawl results as per-type JSON files or one aggregate document."""

from __future__ import annotations

import logging
from pathlib import Path

from .constants import (
    AGGREGATE_FILENAME,
    DEFAULT_OUTPUT_MODE,
    OUTPUT_FORMAT_VERSION,
    OUTPUT_MODES,
    OUTPUT_SOURCE,
    TYPE_RECORD_COMPATIBLE,
    TYPE_RECORD_FORMAT,
    TYPE_RECORD_VERSION,
)
from .io import atomic_write_json
from .types import CrawlResult, JSONDict, TypeDoc, utc_now_iso


LOGGER = logging.getLogger(__name__)


def type_record(type_doc: TypeDoc) -> JSONDict:
    """Per-type JSON record with counts and search metadata."""

    return {
        **type_doc.to_json(),
        "methodCount": len(type_doc.methods),
        "fieldCount": len(type_doc.fields),
        "constructorCount": len(type_doc.constructors),
        "searchKeywords": [type_doc.name, type_doc.full_name, type_doc.kind.value],
        "mcpMetadata": {
            "version": TYPE_RECORD_VERSION,
            "format": TYPE_RECORD_FORMAT,
            "compatible": TYPE_RECORD_COMPATIBLE,
            "className": type_doc.full_name,
        },
    }


def aggregate_record(result: CrawlResult, *, generated_at: str | None = None) -> JSONDict:
    """One document holding every package and type of a crawl."""

    return {
        "metadata": {
            "generatedAt": generated_at or utc_now_iso(),
            "source": OUTPUT_SOURCE,
            "baseUrl": result.base_url,
            "version": OUTPUT_FORMAT_VERSION,
        },
        "packages": [package.to_json() for package in result.packages],
    }


class OutputWriter:
    """Write a `CrawlResult` under `output_dir` in the selected shape."""

    def __init__(self, output_dir: str | Path, *, mode: str = DEFAULT_OUTPUT_MODE) -> None:
        if mode not in OUTPUT_MODES:
            raise ValueError(f"Unsupported output mode {mode!r}. Supported: {OUTPUT_MODES}")
        self.output_dir = Path(output_dir)
        self.mode = mode

    def write(self, result: CrawlResult) -> list[Path]:
        self.output_dir.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        if self.mode in {"per_type", "both"}:
            written.extend(self.write_per_type(result))
        if self.mode in {"aggregate", "both"}:
            written.append(self.write_aggregate(result))
        return written

    def write_per_type(self, result: CrawlResult) -> list[Path]:
        paths: list[Path] = []
        for type_doc in result.types:
            path = self.output_dir / f"{type_doc.full_name}.json"
            atomic_write_json(path, type_record(type_doc))
            paths.append(path)
        LOGGER.info("Wrote %d type records to %s", len(paths), self.output_dir)
        return paths

    def write_aggregate(self, result: CrawlResult) -> Path:
        path = self.output_dir / AGGREGATE_FILENAME
        atomic_write_json(path, aggregate_record(result))
        LOGGER.info("Wrote aggregate record to %s", path)
        return path


__all__ = [
    "OutputWriter",
    "aggregate_record",
    "type_record",
]
