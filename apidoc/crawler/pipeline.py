"""End-to-end crawl orchestration: discovery, URL extraction, concurrent parsing."""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Iterable
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .cache import TypeDocCache
from .config import CrawlConfig
from .constants import PACKAGE_SUMMARY_PAGE
from .dialects import DialectRegistry
from .discovery import EntryPointDiscovery
from .errors import ConfigurationError
from .fetcher import Fetcher
from .grouping import ConcurrentSet, PackageGrouping
from .page_parser import TypePageParser
from .progress import ProgressTracker
from .types import CrawlResult, EntryPointResult, OutcomeStatus, PageOutcome
from .url import PACKAGE_NAME_RE, TypeUrlExtractor, infer_package_name, infer_type_name


LOGGER = logging.getLogger(__name__)

_SUBTREE_SUFFIXES = (r"\..*", ".*")


def literal_package(pattern: str) -> str | None:
    """Return the package a filter names literally, or None for real regexes.

    `com\\.acme` and the subtree form `com\\.acme\\..*` both name `com.acme`.
    """

    candidate = pattern.strip()
    for suffix in _SUBTREE_SUFFIXES:
        if candidate.endswith(suffix):
            candidate = candidate[: -len(suffix)]
            break
    candidate = candidate.replace("\\.", ".").rstrip(".")
    if PACKAGE_NAME_RE.fullmatch(candidate):
        return candidate
    return None


@dataclass(slots=True)
class _CrawlRun:
    """State owned by one `crawl()` call."""

    fetcher: Fetcher
    extractor: TypeUrlExtractor
    parser: TypePageParser
    cache: TypeDocCache
    progress: ProgressTracker
    visited: ConcurrentSet
    grouping: PackageGrouping


class CrawlPipeline:
    """Crawl one documentation site into package-grouped type records.

    Cache, progress tracker, visited set and grouping are created per `crawl()`
    call, so one pipeline can crawl several sites in sequence.
    """

    def __init__(
        self,
        config: CrawlConfig,
        *,
        fetcher: Fetcher | None = None,
        dialects: DialectRegistry | None = None,
    ) -> None:
        self.config = config
        self.dialects = dialects or DialectRegistry()
        self._fetcher = fetcher

    def crawl(self, base_url: str | None = None) -> CrawlResult:
        """Run a full crawl. Only configuration errors raise."""

        target = (base_url or self.config.base_url or "").strip()
        if not target:
            raise ConfigurationError("A base URL is required")

        extractor = TypeUrlExtractor(target, self.config.package_filters)

        owns_fetcher = self._fetcher is None
        fetcher = self._fetcher or Fetcher(self.config)
        run = _CrawlRun(
            fetcher=fetcher,
            extractor=extractor,
            parser=TypePageParser(fetcher, self.dialects),
            cache=TypeDocCache(self.config.cache_dir, enabled=self.config.enable_cache),
            progress=ProgressTracker(interval_seconds=self.config.progress_interval_seconds),
            visited=ConcurrentSet(),
            grouping=PackageGrouping(),
        )

        try:
            return self._crawl(run)
        finally:
            if owns_fetcher:
                fetcher.close()

    def _crawl(self, run: _CrawlRun) -> CrawlResult:
        base_url = run.extractor.base_url
        discovery = EntryPointDiscovery(
            run.fetcher,
            run.extractor,
            entry_points=self.config.entry_points,
        )

        entry = discovery.discover()
        if entry is None:
            LOGGER.error("Crawl of %s aborted: no entry point", base_url)
            stats = run.progress.log_final_summary()
            return CrawlResult(base_url=base_url, stats=stats)

        urls = self._extract_urls(run, entry)
        LOGGER.info("Found %d type pages from %s", len(urls), entry.url)

        if not urls and self.config.package_filters:
            LOGGER.info("No type pages found, fetching filtered packages directly")
            urls = self._direct_package_fallback(run)

        if not urls:
            LOGGER.warning("No type pages found for %s", base_url)

        run.progress.set_total(len(urls))
        self._dispatch(run, sorted(urls))

        packages = run.grouping.materialize()
        LOGGER.info("Aggregated %d types into %d packages", len(run.grouping), len(packages))
        stats = run.progress.log_final_summary()
        LOGGER.info(run.cache.describe())

        return CrawlResult(
            base_url=base_url,
            packages=packages,
            entry_point=entry.entry_point,
            stats=stats,
        )

    def _extract_urls(self, run: _CrawlRun, entry: EntryPointResult) -> set[str]:
        if entry.document is not None:
            return run.extractor.extract(entry.document, page_url=entry.url)

        packages = [name for name in entry.package_names if run.extractor.accepts_package(name)]
        LOGGER.info("Package listing names %d packages, %d selected", len(entry.package_names), len(packages))
        return self._collect_from_packages(run, packages)

    def _direct_package_fallback(self, run: _CrawlRun) -> set[str]:
        packages: list[str] = []
        for pattern in self.config.package_filters:
            package = literal_package(pattern)
            if package is None:
                LOGGER.debug("Filter %r is not a literal package, skipping direct package fetch", pattern)
                continue
            if package not in packages:
                packages.append(package)
        return self._collect_from_packages(run, packages)

    def _collect_from_packages(self, run: _CrawlRun, packages: Iterable[str]) -> set[str]:
        urls: set[str] = set()
        for package in packages:
            page_url = urljoin(
                run.extractor.base_url,
                package.replace(".", "/") + "/" + PACKAGE_SUMMARY_PAGE,
            )
            fetch_result = run.fetcher.fetch(page_url)
            if not fetch_result.ok:
                LOGGER.warning(
                    "Package page %s not accessible: %s",
                    page_url,
                    fetch_result.describe_failure(),
                )
                continue

            document = BeautifulSoup(fetch_result.text, "lxml")
            urls.update(run.extractor.extract_from_package_page(document, fetch_result.url))
        return urls

    def _dispatch(self, run: _CrawlRun, urls: list[str]) -> None:
        if not urls:
            return

        executor = ThreadPoolExecutor(
            max_workers=self.config.concurrency,
            thread_name_prefix="apidoc-worker",
        )
        pending: set[Future[PageOutcome]] = set()
        try:
            pending = {executor.submit(self._process_url, run, url) for url in urls}
            # Every fetch carries its own timeout, so collection waits without one.
            while pending:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    pending.discard(future)
                    self._collect(run, future.result())
        finally:
            self._shutdown(run, executor, pending)

    def _shutdown(
        self,
        run: _CrawlRun,
        executor: ThreadPoolExecutor,
        pending: set[Future[PageOutcome]],
    ) -> None:
        """Stop the pool; in-flight pages get the grace period to finish.

        Only reached with pending work when collection was interrupted. Queued
        pages that never started count as failed. Pages still running after
        the grace period are abandoned and left uncounted.
        """

        executor.shutdown(wait=False, cancel_futures=True)
        if not pending:
            return

        cancelled = {future for future in pending if future.cancelled()}
        for _ in cancelled:
            run.progress.record_failed()

        grace = self.config.shutdown_grace_seconds
        done, still_running = wait(pending - cancelled, timeout=grace)
        for future in done:
            if future.exception() is None:
                self._collect(run, future.result())

        LOGGER.warning(
            "Crawl stopped early: %d queued pages cancelled, %d abandoned after %.1fs grace",
            len(cancelled),
            len(still_running),
            grace,
        )

    def _process_url(self, run: _CrawlRun, url: str) -> PageOutcome:
        if not run.visited.add_if_absent(url):
            return PageOutcome(url=url, status=OutcomeStatus.VISITED)

        name = infer_type_name(url)
        package_name = infer_package_name(url, run.extractor.base_url)
        full_name = f"{package_name}.{name}" if package_name else name

        try:
            cached = run.cache.get(full_name)
            if cached is not None:
                return PageOutcome(url=url, status=OutcomeStatus.CACHED, type_doc=cached)

            type_doc = run.parser.parse(url, name=name, package_name=package_name)
            run.cache.put(type_doc)
            return PageOutcome(url=url, status=OutcomeStatus.PROCESSED, type_doc=type_doc)
        except Exception as exc:
            return PageOutcome(
                url=url,
                status=OutcomeStatus.FAILED,
                error=f"{exc.__class__.__name__}: {exc}",
            )

    @staticmethod
    def _collect(run: _CrawlRun, outcome: PageOutcome) -> None:
        if outcome.status == OutcomeStatus.FAILED:
            LOGGER.warning("Failed to process %s: %s", outcome.url, outcome.error)
            run.progress.record_failed()
            return

        if outcome.status == OutcomeStatus.VISITED:
            LOGGER.debug("Already visited %s", outcome.url)
            run.progress.record_skipped()
            return

        if outcome.status == OutcomeStatus.CACHED:
            run.progress.record_skipped()
        else:
            run.progress.record_processed()

        if outcome.type_doc is not None:
            run.grouping.add(outcome.type_doc)


__all__ = [
    "CrawlPipeline",
    "literal_package",
]
