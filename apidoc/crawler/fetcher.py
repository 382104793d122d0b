"""URL fetching with `requests`, retry and per-host rate-limit logic."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

import requests

from .config import CrawlConfig
from .types import FetchResult
from .url import host_from_url, normalize_url


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _AttemptConfig:
    attempts: int
    backoff_seconds: float


class Fetcher:
    """Fetch documentation pages over HTTP(S).

    Concurrency model:
    - One `requests.Session` per worker thread, created lazily.
    - Per-host rate limiting is shared across threads behind a lock.

    `session_factory` lets callers substitute the session type (tests use an
    in-memory fake site).
    """

    def __init__(
        self,
        config: CrawlConfig,
        *,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.config = config
        self._session_factory = session_factory

        self._thread_local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

        self._rate_lock = threading.Lock()
        self._next_allowed_time_by_host: dict[str, float] = {}

        self._closed = False
        self._closed_lock = threading.Lock()

    def fetch(self, url: str) -> FetchResult:
        """Fetch one URL with configured retries and rate limit."""

        normalized = normalize_url(url)
        if normalized is None:
            return FetchResult(
                requested_url=url,
                final_url=None,
                status_code=None,
                content_type=None,
                body=None,
                error="Invalid or unsupported URL",
            )

        attempt_cfg = _AttemptConfig(
            attempts=max(1, self.config.retries + 1),
            backoff_seconds=max(0.0, self.config.retry_backoff_seconds),
        )
        return self._fetch_with_retries(url=normalized, attempt_cfg=attempt_cfg)

    def close(self) -> None:
        """Close all sessions opened by worker threads."""

        with self._closed_lock:
            self._closed = True

        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []

        for session in sessions:
            session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _is_closed(self) -> bool:
        with self._closed_lock:
            return self._closed

    def _fetch_with_retries(self, *, url: str, attempt_cfg: _AttemptConfig) -> FetchResult:
        last_result: FetchResult | None = None

        for attempt in range(1, attempt_cfg.attempts + 1):
            if self._is_closed():
                return FetchResult(
                    requested_url=url,
                    final_url=None,
                    status_code=None,
                    content_type=None,
                    body=None,
                    error="Fetcher is closed",
                )

            result = self._fetch_once(url)
            last_result = result

            if self._is_terminal_result(result):
                LOGGER.debug(
                    "Fetched %s: HTTP %s in %d ms",
                    url,
                    result.status_code,
                    result.elapsed_ms or 0,
                )
                return result

            LOGGER.debug(
                "Attempt %d/%d for %s failed: %s",
                attempt,
                attempt_cfg.attempts,
                url,
                result.describe_failure(),
            )
            if attempt < attempt_cfg.attempts and attempt_cfg.backoff_seconds > 0:
                # Linear backoff.
                time.sleep(attempt_cfg.backoff_seconds * attempt)

        if last_result is None:
            return FetchResult(
                requested_url=url,
                final_url=None,
                status_code=None,
                content_type=None,
                body=None,
                error="Unknown fetch failure",
            )

        return last_result

    @staticmethod
    def _is_terminal_result(result: FetchResult) -> bool:
        if result.error is not None:
            return False

        if result.status_code is None:
            return False

        if result.status_code in {408, 429} or result.status_code >= 500:
            return False

        return True

    def _fetch_once(self, url: str) -> FetchResult:
        self._wait_for_rate_limit(url)
        started = time.perf_counter()

        session = self._thread_local_session()
        try:
            response = session.get(
                url,
                headers=self.config.headers(),
                timeout=self.config.timeout_seconds,
                allow_redirects=True,
            )
            elapsed_ms = int((time.perf_counter() - started) * 1000)

            body = response.content if response.content is not None else b""
            return FetchResult(
                requested_url=url,
                final_url=response.url or url,
                status_code=response.status_code,
                content_type=response.headers.get("Content-Type"),
                body=body,
                elapsed_ms=elapsed_ms,
                error=None,
            )
        except requests.RequestException as exc:
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            return FetchResult(
                requested_url=url,
                final_url=None,
                status_code=None,
                content_type=None,
                body=None,
                elapsed_ms=elapsed_ms,
                error=f"{exc.__class__.__name__}: {exc}",
            )

    def _thread_local_session(self) -> requests.Session:
        session = getattr(self._thread_local, "session", None)
        if session is None:
            session = self._session_factory()
            proxies = self.config.proxies()
            if proxies:
                session.proxies.update(proxies)
            self._thread_local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def _wait_for_rate_limit(self, url: str) -> None:
        wait_seconds = max(0.0, self.config.rate_limit_seconds)
        if wait_seconds <= 0:
            return

        host = host_from_url(url)

        while True:
            with self._rate_lock:
                now = time.monotonic()
                next_allowed = self._next_allowed_time_by_host.get(host, 0.0)
                if now >= next_allowed:
                    self._next_allowed_time_by_host[host] = now + wait_seconds
                    return
                sleep_for = next_allowed - now

            if sleep_for > 0:
                time.sleep(sleep_for)


__all__ = ["Fetcher"]
