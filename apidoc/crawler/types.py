"""Core type definitions for the documentation crawler.

This module is intentionally dependency-light so other crawler modules can import
shared records without introducing cycles. Records serialize with the camelCase
keys of the javadoc JSON format consumed by downstream search tooling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONDict = dict[str, JSONValue]


def utc_now_iso() -> str:
    """Return an RFC3339-like UTC timestamp string for output metadata."""

    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class TypeKind(str, Enum):
    """Kind of documented type."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ANNOTATION = "annotation"

    @classmethod
    def coerce(cls, value: Any) -> "TypeKind":
        if isinstance(value, TypeKind):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.CLASS


class MemberCategory(str, Enum):
    """Member sections extracted from a type page."""

    METHOD = "method"
    FIELD = "field"
    CONSTRUCTOR = "constructor"


class OutcomeStatus(str, Enum):
    """Per-URL result of one crawl task."""

    PROCESSED = "processed"
    CACHED = "cached"
    VISITED = "visited"
    FAILED = "failed"


def _str_list(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    return tuple(str(value) for value in values)


@dataclass(frozen=True, slots=True)
class ParameterDoc:
    name: str
    type: str
    description: str = ""

    def to_json(self) -> JSONDict:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
        }

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "ParameterDoc":
        return cls(
            name=str(payload.get("name", "")),
            type=str(payload.get("type", "")),
            description=str(payload.get("description", "")),
        )


@dataclass(frozen=True, slots=True)
class MethodDoc:
    """One documented method."""

    name: str
    signature: str = ""
    description: str = ""
    modifiers: tuple[str, ...] = ()
    return_type: str = ""
    parameters: tuple[ParameterDoc, ...] = ()
    exceptions: tuple[str, ...] = ()
    modifier_and_type: str = ""
    detail_text: str = ""

    def to_json(self) -> JSONDict:
        return {
            "name": self.name,
            "signature": self.signature,
            "description": self.description,
            "modifiers": list(self.modifiers),
            "returnType": self.return_type,
            "parameters": [param.to_json() for param in self.parameters],
            "exceptions": list(self.exceptions),
            "modifierAndType": self.modifier_and_type,
            "detailText": self.detail_text,
        }

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "MethodDoc":
        return cls(
            name=str(payload.get("name", "")),
            signature=str(payload.get("signature", "")),
            description=str(payload.get("description", "")),
            modifiers=_str_list(payload.get("modifiers")),
            return_type=str(payload.get("returnType", "")),
            parameters=tuple(
                ParameterDoc.from_json(item) for item in payload.get("parameters") or []
            ),
            exceptions=_str_list(payload.get("exceptions")),
            modifier_and_type=str(payload.get("modifierAndType", "")),
            detail_text=str(payload.get("detailText", "")),
        )


@dataclass(frozen=True, slots=True)
class ConstructorDoc:
    """One documented constructor."""

    name: str
    signature: str = ""
    description: str = ""
    modifiers: tuple[str, ...] = ()
    parameters: tuple[ParameterDoc, ...] = ()
    exceptions: tuple[str, ...] = ()
    detail_text: str = ""

    def to_json(self) -> JSONDict:
        return {
            "name": self.name,
            "signature": self.signature,
            "description": self.description,
            "modifiers": list(self.modifiers),
            "parameters": [param.to_json() for param in self.parameters],
            "exceptions": list(self.exceptions),
            "detailText": self.detail_text,
        }

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "ConstructorDoc":
        return cls(
            name=str(payload.get("name", "")),
            signature=str(payload.get("signature", "")),
            description=str(payload.get("description", "")),
            modifiers=_str_list(payload.get("modifiers")),
            parameters=tuple(
                ParameterDoc.from_json(item) for item in payload.get("parameters") or []
            ),
            exceptions=_str_list(payload.get("exceptions")),
            detail_text=str(payload.get("detailText", "")),
        )


@dataclass(frozen=True, slots=True)
class FieldDoc:
    """One documented field. `modifier_and_type` is kept combined."""

    name: str
    description: str = ""
    modifier_and_type: str = ""
    default_value: str | None = None

    def to_json(self) -> JSONDict:
        return {
            "name": self.name,
            "description": self.description,
            "modifierAndType": self.modifier_and_type,
            "defaultValue": self.default_value,
        }

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "FieldDoc":
        default_value = payload.get("defaultValue")
        return cls(
            name=str(payload.get("name", "")),
            description=str(payload.get("description", "")),
            modifier_and_type=str(payload.get("modifierAndType", "")),
            default_value=None if default_value is None else str(default_value),
        )


@dataclass(frozen=True, slots=True)
class TypeDoc:
    """Structured documentation of one type (class, interface, enum, annotation).

    `package_name` comes from the page URL, not from page content. Within one
    record, member names are unique per category.
    """

    name: str
    package_name: str = ""
    kind: TypeKind = TypeKind.CLASS
    description: str = ""
    modifiers: tuple[str, ...] = ()
    super_class: str | None = None
    interfaces: tuple[str, ...] = ()
    methods: tuple[MethodDoc, ...] = ()
    fields: tuple[FieldDoc, ...] = ()
    constructors: tuple[ConstructorDoc, ...] = ()

    @property
    def full_name(self) -> str:
        if not self.package_name:
            return self.name
        return f"{self.package_name}.{self.name}"

    def to_json(self) -> JSONDict:
        return {
            "name": self.name,
            "packageName": self.package_name,
            "type": self.kind.value,
            "description": self.description,
            "modifiers": list(self.modifiers),
            "superClass": self.super_class,
            "interfaces": list(self.interfaces),
            "constructors": [item.to_json() for item in self.constructors],
            "methods": [item.to_json() for item in self.methods],
            "fields": [item.to_json() for item in self.fields],
        }

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "TypeDoc":
        name = payload.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Type record missing 'name'")

        super_class = payload.get("superClass")
        return cls(
            name=name,
            package_name=str(payload.get("packageName") or ""),
            kind=TypeKind.coerce(payload.get("type")),
            description=str(payload.get("description", "")),
            modifiers=_str_list(payload.get("modifiers")),
            super_class=None if super_class is None else str(super_class),
            interfaces=_str_list(payload.get("interfaces")),
            methods=tuple(MethodDoc.from_json(item) for item in payload.get("methods") or []),
            fields=tuple(FieldDoc.from_json(item) for item in payload.get("fields") or []),
            constructors=tuple(
                ConstructorDoc.from_json(item) for item in payload.get("constructors") or []
            ),
        )


@dataclass(slots=True)
class FetchResult:
    """Result of attempting to download one URL."""

    requested_url: str
    final_url: str | None
    status_code: int | None
    content_type: str | None
    body: bytes | None
    elapsed_ms: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.status_code is not None
            and 200 <= self.status_code < 300
            and self.body is not None
        )

    @property
    def url(self) -> str:
        return self.final_url or self.requested_url

    @property
    def text(self) -> str:
        if self.body is None:
            return ""
        return self.body.decode("utf-8", errors="replace")

    def describe_failure(self) -> str:
        if self.error:
            return self.error
        if self.status_code is not None:
            return f"HTTP status {self.status_code}"
        return "Unknown fetch failure"


@dataclass(frozen=True, slots=True)
class EntryPointResult:
    """The accepted starting page of a documentation site.

    `document` is the parsed HTML page; it is None for plain package listings,
    which carry `package_names` instead.
    """

    entry_point: str
    group: str
    url: str
    document: Any
    package_names: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PageOutcome:
    """Per-URL worker result collected by the pipeline."""

    url: str
    status: OutcomeStatus
    type_doc: TypeDoc | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class PackageDoc:
    name: str
    types: tuple[TypeDoc, ...] = ()

    def to_json(self) -> JSONDict:
        return {
            "name": self.name,
            "classes": [type_doc.to_json() for type_doc in self.types],
        }


@dataclass(frozen=True, slots=True)
class CrawlResult:
    """Grouped output of one crawl run. Packages and types are sorted by name."""

    base_url: str
    packages: tuple[PackageDoc, ...] = ()
    entry_point: str | None = None
    stats: JSONDict = field(default_factory=dict)

    @property
    def types(self) -> list[TypeDoc]:
        return [type_doc for package in self.packages for type_doc in package.types]

    def to_json(self) -> JSONDict:
        return {
            "baseUrl": self.base_url,
            "entryPoint": self.entry_point,
            "packages": [package.to_json() for package in self.packages],
            "stats": self.stats,
        }


__all__ = [
    "ConstructorDoc",
    "CrawlResult",
    "EntryPointResult",
    "FetchResult",
    "FieldDoc",
    "JSONDict",
    "JSONPrimitive",
    "JSONValue",
    "MemberCategory",
    "MethodDoc",
    "OutcomeStatus",
    "PackageDoc",
    "PageOutcome",
    "ParameterDoc",
    "TypeDoc",
    "TypeKind",
    "utc_now_iso",
]
