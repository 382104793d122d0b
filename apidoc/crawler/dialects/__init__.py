"""Parsing dialects and the registry that picks one per page."""

from __future__ import annotations

from typing import Iterable

from bs4 import BeautifulSoup

from .base import ParsingDialect
from .legacy import LegacyJavadocDialect
from .modern import ModernJavadocDialect


def default_dialects() -> list[ParsingDialect]:
    """Built-in dialects, most specific first."""

    return [ModernJavadocDialect(), LegacyJavadocDialect()]


class DialectRegistry:
    """Ordered dialect list; the first one whose applicability check passes wins."""

    def __init__(self, dialects: Iterable[ParsingDialect] | None = None) -> None:
        self._dialects = list(dialects) if dialects is not None else default_dialects()
        if not self._dialects:
            raise ValueError("DialectRegistry needs at least one dialect")

    @property
    def dialects(self) -> list[ParsingDialect]:
        return list(self._dialects)

    def register(self, dialect: ParsingDialect, *, first: bool = True) -> None:
        if first:
            self._dialects.insert(0, dialect)
        else:
            self._dialects.append(dialect)

    def select(self, soup: BeautifulSoup) -> ParsingDialect | None:
        for dialect in self._dialects:
            if dialect.is_applicable(soup):
                return dialect
        return None


__all__ = [
    "DialectRegistry",
    "LegacyJavadocDialect",
    "ModernJavadocDialect",
    "ParsingDialect",
    "default_dialects",
]
