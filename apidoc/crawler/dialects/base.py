"""Parsing dialect interface and shared HTML text helpers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup, Tag

from ..constants import JAVA_MODIFIERS
from ..text import clean_text, split_top_level, tidy_punctuation
from ..types import MemberCategory, TypeKind


_TYPE_KEYWORDS = {"class", "interface", "@interface", "enum", "record"}
_DEFAULT_VALUE_RE = re.compile(r"=\s*(.+?);?\s*$")


def inline_text(element: Tag | None) -> str:
    """Text of an inline element such as a signature, without added separators."""

    if element is None:
        return ""
    return clean_text(element.get_text(""))


def block_text(element: Tag | None) -> str:
    """Text of a block of prose, with child elements separated by spaces."""

    if element is None:
        return ""
    return tidy_punctuation(clean_text(element.get_text(" ")))


def cut_at_paren(text: str) -> str:
    return text.split("(", maxsplit=1)[0].strip()


def kind_from_title(title: str) -> TypeKind:
    """Map a page heading such as `Enum Class Color` to a type kind."""

    lowered = clean_text(title).lower()
    if lowered.startswith("annotation"):
        return TypeKind.ANNOTATION
    if lowered.startswith("enum"):
        return TypeKind.ENUM
    if lowered.startswith("interface"):
        return TypeKind.INTERFACE
    return TypeKind.CLASS


def modifiers_from_declaration(declaration: str) -> list[str]:
    """Collect modifier keywords that precede the type keyword of a declaration."""

    modifiers: list[str] = []
    for token in clean_text(declaration).split(" "):
        if token in _TYPE_KEYWORDS:
            break
        if token in JAVA_MODIFIERS and token not in modifiers:
            modifiers.append(token)
    return modifiers


def interfaces_from_notes(soup: BeautifulSoup, dl_selector: str) -> list[str]:
    """Read the `All Implemented Interfaces` / `All Superinterfaces` list."""

    for dl in soup.select(dl_selector):
        for dt in dl.find_all("dt"):
            label = inline_text(dt)
            if "All Implemented Interfaces" not in label and "All Superinterfaces" not in label:
                continue
            dd = dt.find_next_sibling("dd")
            return split_top_level(inline_text(dd))
    return []


def fragment_target(soup: BeautifulSoup, link: Tag | None) -> Tag | None:
    """Return the element a same-page `#fragment` link points at."""

    if link is None:
        return None
    href = link.get("href")
    if not href:
        return None

    fragment = unquote(urlsplit(href).fragment)
    if not fragment:
        return None

    target = soup.find(id=fragment)
    if target is None:
        target = soup.find("a", attrs={"name": fragment})
    return target


class ParsingDialect(ABC):
    """Selectors and extractors for one family of documentation HTML.

    Dialects are stateless; one instance may serve all worker threads.
    """

    name = "abstract"

    @abstractmethod
    def is_applicable(self, soup: BeautifulSoup) -> bool:
        """Return True when this dialect understands the page."""

    @abstractmethod
    def extract_description(self, soup: BeautifulSoup) -> str:
        ...

    @abstractmethod
    def extract_kind(self, soup: BeautifulSoup) -> TypeKind:
        ...

    @abstractmethod
    def extract_modifiers(self, soup: BeautifulSoup) -> list[str]:
        ...

    @abstractmethod
    def extract_super_class(self, soup: BeautifulSoup) -> str | None:
        ...

    @abstractmethod
    def extract_interfaces(self, soup: BeautifulSoup) -> list[str]:
        ...

    @abstractmethod
    def member_selector(self, category: MemberCategory) -> str:
        """CSS selector enumerating candidate elements for one member category."""

    @abstractmethod
    def is_valid_member(self, category: MemberCategory, element: Tag) -> bool:
        """Reject elements the member selector over-matched (headers, spacers)."""

    @abstractmethod
    def extract_member_name(self, category: MemberCategory, element: Tag) -> str:
        ...

    @abstractmethod
    def extract_signature(self, category: MemberCategory, element: Tag) -> str:
        ...

    @abstractmethod
    def extract_modifier_and_type(self, category: MemberCategory, element: Tag) -> str:
        ...

    @abstractmethod
    def extract_member_description(self, category: MemberCategory, element: Tag) -> str:
        ...

    @abstractmethod
    def find_detail(
        self,
        category: MemberCategory,
        element: Tag,
        soup: BeautifulSoup,
    ) -> Tag | None:
        """Locate the full documentation block of the member behind `element`."""

    @abstractmethod
    def declaration_of(self, detail: Tag) -> str:
        """Return the declaration line (modifiers, type, name, throws) of a detail block."""

    def extract_detail_text(
        self,
        category: MemberCategory,
        element: Tag,
        soup: BeautifulSoup,
    ) -> str:
        return block_text(self.find_detail(category, element, soup))

    def extract_declaration(
        self,
        category: MemberCategory,
        element: Tag,
        soup: BeautifulSoup,
    ) -> str:
        detail = self.find_detail(category, element, soup)
        if detail is None:
            return ""
        return self.declaration_of(detail)

    def extract_default_value(
        self,
        category: MemberCategory,
        element: Tag,
        soup: BeautifulSoup,
    ) -> str | None:
        if category != MemberCategory.FIELD:
            return None
        match = _DEFAULT_VALUE_RE.search(self.extract_declaration(category, element, soup))
        if match is None:
            return None
        return match.group(1).strip() or None


__all__ = [
    "ParsingDialect",
    "block_text",
    "cut_at_paren",
    "fragment_target",
    "inline_text",
    "interfaces_from_notes",
    "kind_from_title",
    "modifiers_from_declaration",
]
