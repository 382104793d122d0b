"""Type page parser: fetch one documentation page and extract a `TypeDoc`."""

from __future__ import annotations

import logging
import re
from typing import Callable, TypeVar

from bs4 import BeautifulSoup, Tag

from .constants import JAVA_MODIFIERS
from .dialects import DialectRegistry, ParsingDialect
from .errors import PageFetchError, PageParseError
from .fetcher import Fetcher
from .text import clean_text, split_top_level
from .types import (
    ConstructorDoc,
    FieldDoc,
    MemberCategory,
    MethodDoc,
    ParameterDoc,
    TypeDoc,
)


LOGGER = logging.getLogger(__name__)

_THROWS_RE = re.compile(r"\bthrows\s+(.+)$")
_ANNOTATION_RE = re.compile(r"^@\w+(?:\([^)]*\))?\s+")

MemberT = TypeVar("MemberT", MethodDoc, FieldDoc, ConstructorDoc)


def split_modifier_and_type(modifier_and_type: str) -> tuple[list[str], str]:
    """Split `public static <T> List<T>` into modifiers and the remaining type."""

    tokens = clean_text(modifier_and_type).split(" ")
    modifiers: list[str] = []
    index = 0
    while index < len(tokens) and tokens[index] in JAVA_MODIFIERS:
        modifiers.append(tokens[index])
        index += 1
    return modifiers, " ".join(tokens[index:]).strip()


def parse_parameters(signature: str) -> list[ParameterDoc]:
    """Parse the parenthesized parameter list of a member signature."""

    start = signature.find("(")
    end = signature.rfind(")")
    if start < 0 or end <= start:
        return []

    parameters: list[ParameterDoc] = []
    for raw in split_top_level(signature[start + 1 : end]):
        declaration = raw.strip()
        while _ANNOTATION_RE.match(declaration):
            declaration = _ANNOTATION_RE.sub("", declaration, count=1)

        param_type, _, param_name = declaration.rpartition(" ")
        if not param_type:
            # Type-only parameter lists (no names) show up in some doclets.
            parameters.append(ParameterDoc(name="", type=param_name))
            continue
        parameters.append(ParameterDoc(name=param_name, type=param_type.strip()))
    return parameters


def parse_exceptions(declaration: str) -> list[str]:
    """Return the exception types of a `throws` clause in a declaration line."""

    match = _THROWS_RE.search(clean_text(declaration))
    if match is None:
        return []
    return split_top_level(match.group(1))


class TypePageParser:
    """Fetch a type page, pick a dialect, and extract members.

    Every extracted string is normalized before it is compared or stored.
    Within one category, the first member of a given name wins.
    """

    def __init__(self, fetcher: Fetcher, dialects: DialectRegistry | None = None) -> None:
        self.fetcher = fetcher
        self.dialects = dialects or DialectRegistry()

    def parse(self, url: str, *, name: str, package_name: str) -> TypeDoc:
        fetch_result = self.fetcher.fetch(url)
        if not fetch_result.ok:
            raise PageFetchError(
                url,
                fetch_result.describe_failure(),
                status_code=fetch_result.status_code,
            )

        try:
            soup = BeautifulSoup(fetch_result.text, "lxml")
        except Exception as exc:
            raise PageParseError(url, f"Unparseable HTML: {exc}") from exc

        dialect = self.dialects.select(soup)
        if dialect is None:
            raise PageParseError(url, "No parsing dialect accepts this page")

        LOGGER.debug("Parsing %s with %s dialect", url, dialect.name)
        return self.parse_document(soup, dialect, name=name, package_name=package_name)

    def parse_document(
        self,
        soup: BeautifulSoup,
        dialect: ParsingDialect,
        *,
        name: str,
        package_name: str,
    ) -> TypeDoc:
        super_class = clean_text(dialect.extract_super_class(soup)) or None
        return TypeDoc(
            name=clean_text(name),
            package_name=clean_text(package_name),
            kind=dialect.extract_kind(soup),
            description=clean_text(dialect.extract_description(soup)),
            modifiers=tuple(clean_text(item) for item in dialect.extract_modifiers(soup)),
            super_class=super_class,
            interfaces=tuple(
                item for item in (clean_text(value) for value in dialect.extract_interfaces(soup)) if item
            ),
            methods=tuple(self._extract_members(soup, dialect, MemberCategory.METHOD, self._build_method)),
            fields=tuple(self._extract_members(soup, dialect, MemberCategory.FIELD, self._build_field)),
            constructors=tuple(
                self._extract_members(soup, dialect, MemberCategory.CONSTRUCTOR, self._build_constructor)
            ),
        )

    @staticmethod
    def _extract_members(
        soup: BeautifulSoup,
        dialect: ParsingDialect,
        category: MemberCategory,
        build: Callable[[BeautifulSoup, ParsingDialect, Tag, str], MemberT],
    ) -> list[MemberT]:
        members: list[MemberT] = []
        seen: set[str] = set()

        for element in soup.select(dialect.member_selector(category)):
            if not dialect.is_valid_member(category, element):
                continue

            member_name = clean_text(dialect.extract_member_name(category, element))
            if not member_name or member_name in seen:
                continue

            seen.add(member_name)
            members.append(build(soup, dialect, element, member_name))

        return members

    @staticmethod
    def _build_method(soup: BeautifulSoup, dialect: ParsingDialect, element: Tag, member_name: str) -> MethodDoc:
        category = MemberCategory.METHOD
        signature = clean_text(dialect.extract_signature(category, element))
        modifier_and_type = clean_text(dialect.extract_modifier_and_type(category, element))
        modifiers, return_type = split_modifier_and_type(modifier_and_type)
        return MethodDoc(
            name=member_name,
            signature=signature,
            description=clean_text(dialect.extract_member_description(category, element)),
            modifiers=tuple(modifiers),
            return_type=return_type,
            parameters=tuple(parse_parameters(signature)),
            exceptions=tuple(parse_exceptions(dialect.extract_declaration(category, element, soup))),
            modifier_and_type=modifier_and_type,
            detail_text=clean_text(dialect.extract_detail_text(category, element, soup)),
        )

    @staticmethod
    def _build_constructor(soup: BeautifulSoup, dialect: ParsingDialect, element: Tag, member_name: str) -> ConstructorDoc:
        category = MemberCategory.CONSTRUCTOR
        signature = clean_text(dialect.extract_signature(category, element))
        modifiers, _ = split_modifier_and_type(dialect.extract_modifier_and_type(category, element))
        return ConstructorDoc(
            name=member_name,
            signature=signature,
            description=clean_text(dialect.extract_member_description(category, element)),
            modifiers=tuple(modifiers),
            parameters=tuple(parse_parameters(signature)),
            exceptions=tuple(parse_exceptions(dialect.extract_declaration(category, element, soup))),
            detail_text=clean_text(dialect.extract_detail_text(category, element, soup)),
        )

    @staticmethod
    def _build_field(soup: BeautifulSoup, dialect: ParsingDialect, element: Tag, member_name: str) -> FieldDoc:
        category = MemberCategory.FIELD
        default_value = dialect.extract_default_value(category, element, soup)
        return FieldDoc(
            name=member_name,
            description=clean_text(dialect.extract_member_description(category, element)),
            modifier_and_type=clean_text(dialect.extract_modifier_and_type(category, element)),
            default_value=clean_text(default_value) or None,
        )


__all__ = [
    "TypePageParser",
    "parse_exceptions",
    "parse_parameters",
    "split_modifier_and_type",
]
