"""Shared test fixtures for the apidoc test suite."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from apidoc.crawler.config import CrawlConfig
from apidoc.crawler.fetcher import Fetcher
from tests.fakes import FakeSite

BASE_URL = "https://docs.example.com/api/"


@pytest.fixture()
def base_url() -> str:
    return BASE_URL


@pytest.fixture()
def site() -> FakeSite:
    """Empty in-memory documentation site; every unknown URL is a 404."""
    return FakeSite()


@pytest.fixture()
def config(tmp_path: Path) -> CrawlConfig:
    """Crawl config pointed at the fake site, with a per-test cache and no waits."""
    return CrawlConfig(
        base_url=BASE_URL,
        output_dir=tmp_path / "out",
        cache_dir=tmp_path / "cache",
        concurrency=2,
        retries=0,
        retry_backoff_seconds=0.0,
        progress_interval_seconds=0.0,
        shutdown_grace_seconds=5.0,
    )


@pytest.fixture()
def fetcher(config: CrawlConfig, site: FakeSite) -> Iterator[Fetcher]:
    with Fetcher(config, session_factory=site.session_factory) as instance:
        yield instance
