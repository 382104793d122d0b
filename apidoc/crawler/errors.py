"""Exception hierarchy for the documentation crawler.

Only `ConfigurationError` is expected to reach callers of `CrawlPipeline.crawl`.
Page-level errors are raised by the page parser and converted to failed
outcomes by the pipeline.
"""

from __future__ import annotations


class CrawlerError(Exception):
    """Base class for crawler errors."""


class ConfigurationError(CrawlerError, ValueError):
    """Invalid crawl configuration (bad base URL, bad filter pattern, ...)."""


class PageFetchError(CrawlerError):
    """A page could not be downloaded."""

    def __init__(self, url: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code


class PageParseError(CrawlerError):
    """A downloaded page could not be turned into a type record."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url


__all__ = [
    "ConfigurationError",
    "CrawlerError",
    "PageFetchError",
    "PageParseError",
]
