"""Default values shared by crawler config, fetcher, and pipeline."""

from __future__ import annotations

import tempfile
from pathlib import Path


DEFAULT_USER_AGENT = "JavaDocCrawler/1.0"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_CONCURRENCY = 5
DEFAULT_RETRIES = 2
DEFAULT_RETRY_BACKOFF_SECONDS = 1.0
DEFAULT_RATE_LIMIT_SECONDS = 0.0
DEFAULT_PROXY_PORT = 8080

DEFAULT_ENABLE_CACHE = True
DEFAULT_CACHE_DIR = Path(tempfile.gettempdir()) / "javadoc-crawler-cache"

DEFAULT_PROGRESS_INTERVAL_SECONDS = 5.0
DEFAULT_SHUTDOWN_GRACE_SECONDS = 60.0

DEFAULT_OUTPUT_DIR = Path("apidoc_output")
DEFAULT_OUTPUT_MODE = "per_type"
OUTPUT_MODES = ("per_type", "aggregate", "both")
AGGREGATE_FILENAME = "javadoc.json"

DEFAULT_HTTP_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.8",
}

# Ranked entry point candidates, tried group by group, in order.
ENTRY_POINT_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "all_types",
        (
            "allclasses-index.html",
            "allclasses-frame.html",
            "allclasses.html",
            "allclasses-noframe.html",
        ),
    ),
    (
        "overview",
        (
            "overview-summary.html",
            "overview-frame.html",
            "index.html",
        ),
    ),
    (
        "fallback",
        (
            "package-list",
            "element-list",
        ),
    ),
)

# Link targets containing any of these are index/meta pages, not type pages.
NON_TYPE_PAGE_MARKERS = (
    "package-",
    "overview",
    "index",
    "help-",
    "constant-values",
    "serialized-form",
    "deprecated-list",
    "allclasses",
    "class-use/",
)

DEFAULT_PACKAGE_NAME = "default"
PACKAGE_SUMMARY_PAGE = "package-summary.html"

JAVA_MODIFIERS = (
    "public",
    "protected",
    "private",
    "abstract",
    "static",
    "final",
    "sealed",
    "non-sealed",
    "synchronized",
    "native",
    "transient",
    "volatile",
    "strictfp",
    "default",
)

JSON_INDENT = 2
SUPPORTED_CONFIG_SUFFIXES = (".json", ".yaml", ".yml")

OUTPUT_FORMAT_VERSION = "1.0.0"
TYPE_RECORD_VERSION = "1.0"
TYPE_RECORD_FORMAT = "javadoc-class-json"
TYPE_RECORD_COMPATIBLE = "mcp-javadoc-search"
OUTPUT_SOURCE = "javadoc-html-crawler"


__all__ = [
    "AGGREGATE_FILENAME",
    "DEFAULT_CACHE_DIR",
    "DEFAULT_CONCURRENCY",
    "DEFAULT_ENABLE_CACHE",
    "DEFAULT_HTTP_HEADERS",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_OUTPUT_MODE",
    "DEFAULT_PACKAGE_NAME",
    "DEFAULT_PROGRESS_INTERVAL_SECONDS",
    "DEFAULT_PROXY_PORT",
    "DEFAULT_RATE_LIMIT_SECONDS",
    "DEFAULT_RETRIES",
    "DEFAULT_RETRY_BACKOFF_SECONDS",
    "DEFAULT_SHUTDOWN_GRACE_SECONDS",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_USER_AGENT",
    "ENTRY_POINT_GROUPS",
    "JAVA_MODIFIERS",
    "JSON_INDENT",
    "NON_TYPE_PAGE_MARKERS",
    "OUTPUT_FORMAT_VERSION",
    "OUTPUT_MODES",
    "OUTPUT_SOURCE",
    "PACKAGE_SUMMARY_PAGE",
    "SUPPORTED_CONFIG_SUFFIXES",
    "TYPE_RECORD_COMPATIBLE",
    "TYPE_RECORD_FORMAT",
    "TYPE_RECORD_VERSION",
]
