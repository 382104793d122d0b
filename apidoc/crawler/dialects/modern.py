"""Dialect for HTML5 javadoc output built on `div.summary-table` grids (JDK 17+)."""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag

from ..text import clean_text
from ..types import MemberCategory, TypeKind
from .base import (
    ParsingDialect,
    block_text,
    cut_at_paren,
    fragment_target,
    inline_text,
    interfaces_from_notes,
    kind_from_title,
    modifiers_from_declaration,
)


_SUMMARY_SECTIONS: dict[MemberCategory, str] = {
    MemberCategory.METHOD: "method-summary",
    MemberCategory.FIELD: "field-summary",
    MemberCategory.CONSTRUCTOR: "constructor-summary",
}

_NAME_COLUMNS: dict[MemberCategory, str] = {
    MemberCategory.METHOD: "col-second",
    MemberCategory.FIELD: "col-second",
    MemberCategory.CONSTRUCTOR: "col-constructor-name",
}


def _has_class(element: Tag | None, class_name: str) -> bool:
    if element is None:
        return False
    return class_name in (element.get("class") or [])


def _own_text(element: Tag) -> str:
    """Text of `element` without the text of nested `div` children."""

    parts: list[str] = []
    for child in element.children:
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag) and child.name != "div":
            parts.append(child.get_text(""))
    return clean_text("".join(parts))


class ModernJavadocDialect(ParsingDialect):
    """Grid rows: `div.col-first` (type) / `div.col-second` (name) / `div.col-last`."""

    name = "modern"

    def is_applicable(self, soup: BeautifulSoup) -> bool:
        return soup.select_one("div.summary-table, div.type-signature, section.class-description") is not None

    def extract_description(self, soup: BeautifulSoup) -> str:
        block = soup.select_one("section.class-description > div.block")
        if block is None:
            block = soup.select_one("#class-description .block")
        return block_text(block)

    def extract_kind(self, soup: BeautifulSoup) -> TypeKind:
        title = soup.select_one("h1.title")
        if title is None:
            return TypeKind.CLASS
        return kind_from_title(title.get("title") or title.get_text(" "))

    def extract_modifiers(self, soup: BeautifulSoup) -> list[str]:
        signature = soup.select_one("div.type-signature")
        if signature is None:
            return []
        modifiers = signature.select_one(".modifiers")
        return modifiers_from_declaration(inline_text(modifiers or signature))

    def extract_super_class(self, soup: BeautifulSoup) -> str | None:
        chain = [_own_text(item) for item in soup.select("div.inheritance")]
        chain = [item for item in chain if item]
        if len(chain) < 2:
            return None
        return chain[-2]

    def extract_interfaces(self, soup: BeautifulSoup) -> list[str]:
        return interfaces_from_notes(soup, "section.class-description dl.notes")

    def member_selector(self, category: MemberCategory) -> str:
        section = _SUMMARY_SECTIONS[category]
        column = _NAME_COLUMNS[category]
        return f"section.{section} div.summary-table > div.{column}:not(.table-header)"

    def is_valid_member(self, category: MemberCategory, element: Tag) -> bool:
        if element.find("code") is None:
            return False
        return bool(self.extract_member_name(category, element))

    def extract_member_name(self, category: MemberCategory, element: Tag) -> str:
        link = element.select_one("a.member-name-link")
        if link is not None:
            return cut_at_paren(inline_text(link))
        return cut_at_paren(inline_text(element.find("code") or element))

    def extract_signature(self, category: MemberCategory, element: Tag) -> str:
        return inline_text(element.find("code") or element)

    def extract_modifier_and_type(self, category: MemberCategory, element: Tag) -> str:
        previous = element.find_previous_sibling("div")
        if not _has_class(previous, "col-first") or _has_class(previous, "table-header"):
            return ""
        return inline_text(previous)

    def extract_member_description(self, category: MemberCategory, element: Tag) -> str:
        following = element.find_next_sibling("div")
        if not _has_class(following, "col-last"):
            return ""
        return block_text(following.select_one(".block") or following)

    def find_detail(
        self,
        category: MemberCategory,
        element: Tag,
        soup: BeautifulSoup,
    ) -> Tag | None:
        target = fragment_target(soup, element.select_one("a[href]"))
        if target is not None:
            return target

        name = self.extract_member_name(category, element)
        for section in soup.select("section.detail"):
            if inline_text(section.find("h3")) == name:
                return section
        return None

    def declaration_of(self, detail: Tag) -> str:
        return inline_text(detail.select_one(".member-signature"))


__all__ = ["ModernJavadocDialect"]
