"""Entry point discovery: find the first usable index page of a documentation site."""

from __future__ import annotations

import logging
from typing import Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .constants import ENTRY_POINT_GROUPS
from .fetcher import Fetcher
from .types import EntryPointResult, FetchResult
from .url import PACKAGE_NAME_RE, TypeUrlExtractor


LOGGER = logging.getLogger(__name__)

CONFIGURED_GROUP = "configured"
_PACKAGE_LIST_NAMES = {"package-list", "element-list"}


def parse_package_list(text: str) -> list[str]:
    """Read a `package-list` / `element-list` file (one package per line)."""

    packages: list[str] = []
    for line in text.splitlines():
        name = line.strip()
        if not name or name.startswith("module:"):
            continue
        if PACKAGE_NAME_RE.fullmatch(name) and name not in packages:
            packages.append(name)
    return packages


class EntryPointDiscovery:
    """Try ranked entry point candidates until one yields type links.

    An HTML candidate is accepted only when it contains at least one valid type
    link. A plain package listing (`package-list`, `element-list`) is accepted
    when it names at least one package. Fetch failures move on to the next
    candidate; nothing after the accepted candidate is fetched.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        extractor: TypeUrlExtractor,
        *,
        entry_points: Sequence[str] | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.extractor = extractor

        if entry_points:
            self.groups: tuple[tuple[str, tuple[str, ...]], ...] = (
                (CONFIGURED_GROUP, tuple(entry_points)),
            )
        else:
            self.groups = ENTRY_POINT_GROUPS

    @property
    def base_url(self) -> str:
        return self.extractor.base_url

    def discover(self) -> EntryPointResult | None:
        LOGGER.info("Looking for an entry point under %s", self.base_url)

        for group, candidates in self.groups:
            LOGGER.debug("Trying %s entry points", group)
            for candidate in candidates:
                result = self._try_candidate(group, candidate)
                if result is not None:
                    LOGGER.info("Using %s entry point %s", group, result.url)
                    return result
            LOGGER.debug("No usable %s entry point", group)

        LOGGER.error("No valid entry point found for %s", self.base_url)
        return None

    def _try_candidate(self, group: str, candidate: str) -> EntryPointResult | None:
        url = urljoin(self.base_url, candidate)
        fetch_result = self.fetcher.fetch(url)
        if not fetch_result.ok:
            LOGGER.debug("Entry point %s not accessible: %s", url, fetch_result.describe_failure())
            return None

        if self._is_package_listing(candidate, fetch_result):
            packages = parse_package_list(fetch_result.text)
            if not packages:
                LOGGER.debug("Package listing %s names no packages", url)
                return None
            return EntryPointResult(
                entry_point=candidate,
                group=group,
                url=fetch_result.url,
                document=None,
                package_names=tuple(packages),
            )

        document = BeautifulSoup(fetch_result.text, "lxml")
        if not self.extractor.has_type_links(document):
            LOGGER.debug("Entry point %s has no type links", url)
            return None

        return EntryPointResult(
            entry_point=candidate,
            group=group,
            url=fetch_result.url,
            document=document,
        )

    @staticmethod
    def _is_package_listing(candidate: str, fetch_result: FetchResult) -> bool:
        name = candidate.rsplit("/", maxsplit=1)[-1]
        if name in _PACKAGE_LIST_NAMES:
            return True
        content_type = (fetch_result.content_type or "").lower()
        return content_type.startswith("text/plain")


__all__ = [
    "EntryPointDiscovery",
    "parse_package_list",
]
