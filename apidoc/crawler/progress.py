"""Thread-safe crawl progress counters with rate-limited log output."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from .types import JSONDict


LOGGER = logging.getLogger(__name__)


class ProgressTracker:
    """Count processed/skipped/failed pages against a known total.

    A progress line is logged on increment only when `interval_seconds` has
    passed since the previous one. `log_final_summary` always logs.
    """

    def __init__(
        self,
        *,
        interval_seconds: float = 5.0,
        logger: logging.Logger | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval_seconds = max(0.0, interval_seconds)
        self._logger = logger or LOGGER
        self._clock = clock

        self._lock = threading.Lock()
        self._total = 0
        self._processed = 0
        self._skipped = 0
        self._failed = 0

        self._started = self._clock()
        self._last_report = self._started

    def set_total(self, total: int) -> None:
        with self._lock:
            self._total = max(0, int(total))

    def add_to_total(self, count: int) -> None:
        if count <= 0:
            return
        with self._lock:
            self._total += count

    def record_processed(self, count: int = 1) -> None:
        self._increment("_processed", count)

    def record_skipped(self, count: int = 1) -> None:
        self._increment("_skipped", count)

    def record_failed(self, count: int = 1) -> None:
        self._increment("_failed", count)

    def _increment(self, attr: str, count: int) -> None:
        if count <= 0:
            return

        line: str | None = None
        with self._lock:
            setattr(self, attr, getattr(self, attr) + count)
            now = self._clock()
            if now - self._last_report >= self.interval_seconds:
                self._last_report = now
                line = self._progress_line(now)

        if line is not None:
            self._logger.info(line)

    def _progress_line(self, now: float) -> str:
        done = self._processed + self._skipped + self._failed
        percent = (done / self._total * 100.0) if self._total > 0 else 0.0
        elapsed = now - self._started
        rate = self._processed / elapsed if elapsed > 0 else 0.0
        return (
            f"Progress: {done}/{self._total} ({percent:.1f}%) - "
            f"{self._processed} processed, {self._skipped} skipped, {self._failed} failed. "
            f"Rate: {rate:.1f} types/sec"
        )

    def to_json(self) -> JSONDict:
        """Return a JSON-serializable copy of the counters and derived rates."""

        with self._lock:
            elapsed = max(0.0, self._clock() - self._started)
            total = self._total
            processed = self._processed
            skipped = self._skipped
            failed = self._failed

        return {
            "total": total,
            "processed": processed,
            "skipped": skipped,
            "failed": failed,
            "duration_seconds": elapsed,
            "success_rate": (processed / total) if total > 0 else 0.0,
            "rate_per_second": (processed / elapsed) if elapsed > 0 else 0.0,
        }

    def log_final_summary(self) -> JSONDict:
        summary = self.to_json()
        self._logger.info(
            "Crawl finished in %.1fs: %d processed, %d skipped, %d failed of %d found. "
            "Success rate: %.1f%%. Average rate: %.1f types/sec",
            summary["duration_seconds"],
            summary["processed"],
            summary["skipped"],
            summary["failed"],
            summary["total"],
            summary["success_rate"] * 100.0,
            summary["rate_per_second"],
        )
        return summary


__all__ = ["ProgressTracker"]
