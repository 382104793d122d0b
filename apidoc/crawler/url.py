"""URL normalization, type-link detection, and package inference helpers."""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Iterable
from urllib.parse import quote, unquote, urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup

from .constants import NON_TYPE_PAGE_MARKERS
from .errors import ConfigurationError
from .text import clean_text


LOGGER = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https"})
SKIP_HREF_PREFIXES = ("javascript:", "mailto:", "tel:", "data:")
TYPE_PAGE_SUFFIX = ".html"
PACKAGE_NAME_RE = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*")


def host_from_url(url: str) -> str:
    """Extract lowercase host from URL."""

    return (urlsplit(url).hostname or "").strip().lower().strip(".")


def _has_default_port(scheme: str, port: int | None) -> bool:
    if port is None:
        return False
    return (scheme == "http" and port == 80) or (scheme == "https" and port == 443)


def _normalize_netloc(parsed_url) -> str:
    host = (parsed_url.hostname or "").lower()
    if not host:
        return parsed_url.netloc.lower()

    userinfo = ""
    if parsed_url.username:
        userinfo = quote(parsed_url.username, safe="")
        if parsed_url.password:
            userinfo += ":" + quote(parsed_url.password, safe="")
        userinfo += "@"

    port: int | None
    try:
        port = parsed_url.port
    except ValueError:
        port = None

    if port is not None and not _has_default_port(parsed_url.scheme.lower(), port):
        return f"{userinfo}{host}:{port}"
    return f"{userinfo}{host}"


def _normalize_path(path: str, *, keep_trailing_slash: bool) -> str:
    if not path:
        return "/"

    collapsed = re.sub(r"/{2,}", "/", path)
    normalized = posixpath.normpath(collapsed)

    if collapsed.startswith("/") and not normalized.startswith("/"):
        normalized = "/" + normalized

    if normalized in {"", "."}:
        normalized = "/"

    if keep_trailing_slash and collapsed.endswith("/") and not normalized.endswith("/"):
        normalized += "/"

    return normalized or "/"


def normalize_url(url: str, *, keep_trailing_slash: bool = False) -> str | None:
    """Canonicalize absolute URL for dedup and visited-set consistency.

    The fragment and default ports are dropped. Returns `None` for URLs that
    are relative or not http(s).
    """

    if not url:
        return None

    raw = url.strip()
    if not raw:
        return None

    parsed = urlsplit(raw)
    if not parsed.scheme or not parsed.netloc:
        return None

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        return None

    netloc = _normalize_netloc(parsed)
    if not netloc:
        return None

    path = _normalize_path(parsed.path, keep_trailing_slash=keep_trailing_slash)
    return urlunsplit((scheme, netloc, path, parsed.query, ""))


def base_directory_url(base_url: str) -> str:
    """Normalize a site base URL and make sure it denotes a directory."""

    normalized = normalize_url(base_url, keep_trailing_slash=True)
    if normalized is None:
        raise ConfigurationError(f"Base URL must be an absolute http(s) URL: {base_url!r}")

    parsed = urlsplit(normalized)
    path = parsed.path if parsed.path.endswith("/") else parsed.path + "/"
    return urlunsplit((parsed.scheme, parsed.netloc, path, "", ""))


def resolve_url(base_url: str, href: str | None) -> str | None:
    """Resolve a possibly relative link against base URL and normalize it."""

    if href is None:
        return None

    candidate = href.strip()
    if not candidate or candidate.startswith("#"):
        return None

    lowered = candidate.lower()
    if any(lowered.startswith(prefix) for prefix in SKIP_HREF_PREFIXES):
        return None

    return normalize_url(urljoin(base_url, candidate))


def is_type_link(href: str | None, text: str | None) -> bool:
    """Heuristic: does this link point to a type documentation page?

    The target must be an `.html` page outside the known index/meta pages, and
    the visible link text must start with an uppercase letter.
    """

    if not href:
        return False

    target = href.strip().split("#", maxsplit=1)[0].split("?", maxsplit=1)[0]
    if not target.lower().endswith(TYPE_PAGE_SUFFIX):
        return False

    if any(marker in target for marker in NON_TYPE_PAGE_MARKERS):
        return False

    label = clean_text(text)
    return bool(label) and label[0].isupper()


def _relative_path(url: str, base_url: str) -> str:
    path = unquote(urlsplit(url).path)
    base_path = unquote(urlsplit(base_url).path)
    if not base_path.endswith("/"):
        base_path = base_path.rsplit("/", maxsplit=1)[0] + "/"

    if path.startswith(base_path):
        path = path[len(base_path):]
    return path.lstrip("/")


def infer_package_name(url: str, base_url: str) -> str:
    """Map a type page URL to its dotted package name.

    The base path is stripped and the remaining directories are joined with
    dots. A leading module directory (JDK 9+ layout, e.g. `java.base/`) is
    dropped since package directories never contain dots. Root-level pages
    yield an empty string.
    """

    relative = _relative_path(url, base_url)
    directory, _, _ = relative.rpartition("/")
    segments = [segment for segment in directory.split("/") if segment]
    if len(segments) > 1 and "." in segments[0]:
        segments = segments[1:]
    return ".".join(segments)


def infer_type_name(url: str) -> str:
    """Return the simple type name from a type page URL (`Map.Entry.html` -> `Map.Entry`)."""

    filename = unquote(urlsplit(url).path).rsplit("/", maxsplit=1)[-1]
    if filename.lower().endswith(TYPE_PAGE_SUFFIX):
        filename = filename[: -len(TYPE_PAGE_SUFFIX)]
    return filename


def compile_package_filters(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigurationError(f"Invalid package filter {pattern!r}: {exc}") from exc
    return tuple(compiled)


def _as_soup(document: BeautifulSoup | str | bytes) -> BeautifulSoup:
    if isinstance(document, BeautifulSoup):
        return document
    return BeautifulSoup(document, "lxml")


class TypeUrlExtractor:
    """Find type page links in a document and filter them by package.

    Filters are compiled once per extractor. A URL is kept when no filter is
    configured or when at least one filter matches the whole inferred package
    name.
    """

    def __init__(self, base_url: str, package_filters: Iterable[str] = ()) -> None:
        self.base_url = base_directory_url(base_url)
        self._patterns = compile_package_filters(package_filters)

    @property
    def has_filters(self) -> bool:
        return bool(self._patterns)

    def accepts_package(self, package_name: str) -> bool:
        """Anchored match of the package name against the configured filters.

        A subtree filter such as `com\\.acme\\..*` also accepts its root package
        `com.acme`: the name is tried both as-is and with a trailing dot.
        """

        if not self._patterns:
            return True
        candidates = (package_name, package_name + ".")
        return any(
            pattern.fullmatch(candidate)
            for pattern in self._patterns
            for candidate in candidates
        )

    def type_links(
        self,
        document: BeautifulSoup | str | bytes,
        *,
        page_url: str | None = None,
    ) -> set[str]:
        """Return absolute URLs of all valid type links, unfiltered."""

        soup = _as_soup(document)
        resolve_base = page_url or self.base_url

        out: set[str] = set()
        for element in soup.find_all(["a", "area"]):
            href = element.get("href")
            if not is_type_link(href, element.get_text(" ", strip=True)):
                continue
            resolved = resolve_url(resolve_base, href)
            if resolved:
                out.add(resolved)
        return out

    def has_type_links(self, document: BeautifulSoup | str | bytes) -> bool:
        soup = _as_soup(document)
        return any(
            is_type_link(element.get("href"), element.get_text(" ", strip=True))
            for element in soup.find_all(["a", "area"])
        )

    def extract(
        self,
        document: BeautifulSoup | str | bytes,
        *,
        page_url: str | None = None,
    ) -> set[str]:
        """Return the filtered, deduplicated set of absolute type page URLs."""

        return {
            url
            for url in self.type_links(document, page_url=page_url)
            if self.accepts_package(infer_package_name(url, self.base_url))
        }

    def extract_from_package_page(
        self,
        document: BeautifulSoup | str | bytes,
        page_url: str,
    ) -> set[str]:
        """Return filtered type URLs listed on a `package-summary.html` page.

        Relative links on a package page point into the package directory, so
        they are resolved against the page URL rather than the site base.
        """

        urls = self.extract(document, page_url=page_url)
        LOGGER.debug("Extracted %d type URLs from package page %s", len(urls), page_url)
        return urls


__all__ = [
    "ALLOWED_SCHEMES",
    "PACKAGE_NAME_RE",
    "SKIP_HREF_PREFIXES",
    "TypeUrlExtractor",
    "base_directory_url",
    "compile_package_filters",
    "host_from_url",
    "infer_package_name",
    "infer_type_name",
    "is_type_link",
    "normalize_url",
    "resolve_url",
]
