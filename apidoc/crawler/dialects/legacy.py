"""Dialect for table-based javadoc output (JDK 8 through JDK 16)."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

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


_SUMMARY_ANCHORS: dict[MemberCategory, str] = {
    MemberCategory.METHOD: "method.summary",
    MemberCategory.FIELD: "field.summary",
    MemberCategory.CONSTRUCTOR: "constructor.summary",
}

# JDK 9+ puts the name in its own column; JDK 8 merges it into colLast/colOne.
_NAME_CELL_SELECTORS = (
    ".colSecond",
    ".colConstructorName",
    "td.colOne",
    "td.colLast",
)


class LegacyJavadocDialect(ParsingDialect):
    """`table.memberSummary` rows with `colFirst` / `colSecond` / `colLast` cells.

    Accepts any page, so it is registered last as the catch-all.
    """

    name = "legacy"

    def is_applicable(self, soup: BeautifulSoup) -> bool:
        return True

    def extract_description(self, soup: BeautifulSoup) -> str:
        return block_text(soup.select_one(".contentContainer .description .block"))

    def extract_kind(self, soup: BeautifulSoup) -> TypeKind:
        title = soup.select_one("h1.title, h2.title")
        if title is None:
            return TypeKind.CLASS
        return kind_from_title(title.get("title") or title.get_text(" "))

    def extract_modifiers(self, soup: BeautifulSoup) -> list[str]:
        return modifiers_from_declaration(inline_text(soup.select_one(".description pre")))

    def extract_super_class(self, soup: BeautifulSoup) -> str | None:
        # Leaf <li> items of the nested inheritance list, root first.
        chain = [
            inline_text(item)
            for item in soup.select("ul.inheritance > li")
            if item.find("ul") is None
        ]
        chain = [item for item in chain if item]
        if len(chain) < 2:
            return None
        return chain[-2]

    def extract_interfaces(self, soup: BeautifulSoup) -> list[str]:
        return interfaces_from_notes(soup, ".description dl")

    def member_selector(self, category: MemberCategory) -> str:
        anchor = _SUMMARY_ANCHORS[category]
        return (
            f'li.blockList:has(> a[id="{anchor}"]) table.memberSummary tr, '
            f'li.blockList:has(> a[name="{anchor}"]) table.memberSummary tr'
        )

    def is_valid_member(self, category: MemberCategory, element: Tag) -> bool:
        if element.name != "tr" or element.find("td") is None:
            return False
        return bool(self.extract_member_name(category, element))

    def extract_member_name(self, category: MemberCategory, element: Tag) -> str:
        cell = self._name_cell(element)
        if cell is None:
            return ""

        link = cell.select_one(".memberNameLink")
        if link is not None:
            return cut_at_paren(inline_text(link))
        return cut_at_paren(inline_text(cell.find("code") or cell))

    def extract_signature(self, category: MemberCategory, element: Tag) -> str:
        cell = self._name_cell(element)
        if cell is None:
            return ""
        return inline_text(cell.find("code") or cell)

    def extract_modifier_and_type(self, category: MemberCategory, element: Tag) -> str:
        return inline_text(element.select_one("td.colFirst"))

    def extract_member_description(self, category: MemberCategory, element: Tag) -> str:
        return block_text(element.select_one(".block"))

    def find_detail(
        self,
        category: MemberCategory,
        element: Tag,
        soup: BeautifulSoup,
    ) -> Tag | None:
        cell = self._name_cell(element)
        if cell is None:
            return None

        target = fragment_target(soup, cell.select_one("a[href]"))
        if target is not None:
            # Older doclets emit an empty <a name=...> right before the block.
            if target.name == "a" and not inline_text(target):
                return target.find_next_sibling(["ul", "section", "div"])
            return target

        name = self.extract_member_name(category, element)
        if not name:
            return None
        for pre in soup.select(".details pre"):
            declaration = inline_text(pre)
            if f"{name}(" in declaration or declaration.endswith(f" {name}"):
                return pre.parent
        return None

    def declaration_of(self, detail: Tag) -> str:
        return inline_text(detail.find("pre"))

    @staticmethod
    def _name_cell(row: Tag) -> Tag | None:
        for selector in _NAME_CELL_SELECTORS:
            cell = row.select_one(selector)
            if cell is not None:
                return cell
        return None


__all__ = ["LegacyJavadocDialect"]
