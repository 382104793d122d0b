"""Unit tests for apidoc.crawler.page_parser."""

from __future__ import annotations

import pytest

from apidoc.crawler.errors import PageFetchError
from apidoc.crawler.fetcher import Fetcher
from apidoc.crawler.page_parser import (
    TypePageParser,
    parse_exceptions,
    parse_parameters,
    split_modifier_and_type,
)
from apidoc.crawler.types import ParameterDoc, TypeDoc, TypeKind
from tests.fakes import FakeSite
from tests.pages import LEGACY_WIDGET_PAGE, MODERN_BUFFER_PAGE, simple_type_page

# ---------------------------------------------------------------------------
# Signature helpers
# ---------------------------------------------------------------------------


class TestSplitModifierAndType:
    def test_modifiers_and_generic_type(self) -> None:
        assert split_modifier_and_type("public static <T> List<T>") == (
            ["public", "static"],
            "<T> List<T>",
        )

    def test_type_only(self) -> None:
        assert split_modifier_and_type("java.lang.String") == ([], "java.lang.String")

    def test_empty(self) -> None:
        assert split_modifier_and_type("") == ([], "")


class TestParseParameters:
    def test_generic_parameters(self) -> None:
        assert parse_parameters("put(Map<K, V> map, int count)") == [
            ParameterDoc(name="map", type="Map<K, V>"),
            ParameterDoc(name="count", type="int"),
        ]

    def test_annotations_and_varargs(self) -> None:
        assert parse_parameters("of(@Nullable String first, String... rest)") == [
            ParameterDoc(name="first", type="String"),
            ParameterDoc(name="rest", type="String..."),
        ]

    def test_no_parameters(self) -> None:
        assert parse_parameters("close()") == []
        assert parse_parameters("MAX_SIZE") == []

    def test_type_only_parameters(self) -> None:
        assert parse_parameters("wait(long)") == [ParameterDoc(name="", type="long")]


class TestParseExceptions:
    def test_throws_clause(self) -> None:
        declaration = "public void resize(int w) throws java.io.IOException, IllegalStateException"
        assert parse_exceptions(declaration) == ["java.io.IOException", "IllegalStateException"]

    def test_no_throws(self) -> None:
        assert parse_exceptions("public void close()") == []
        assert parse_exceptions("") == []


# ---------------------------------------------------------------------------
# Table-based page
# ---------------------------------------------------------------------------


class TestLegacyPage:
    @pytest.fixture()
    def widget(self, fetcher: Fetcher, site: FakeSite, base_url: str) -> TypeDoc:
        url = base_url + "com/acme/Widget.html"
        site.add(url, LEGACY_WIDGET_PAGE)
        return TypePageParser(fetcher).parse(url, name="Widget", package_name="com.acme")

    def test_type_fields(self, widget: TypeDoc) -> None:
        assert widget.full_name == "com.acme.Widget"
        assert widget.kind == TypeKind.CLASS
        assert widget.modifiers == ("public", "final")
        assert widget.super_class == "com.acme.AbstractWidget"
        assert widget.interfaces == ("java.io.Serializable", "Sizeable<Widget>")
        assert widget.description == "A small widget. Widgets are resizable."

    def test_overloads_collapse_to_first(self, widget: TypeDoc) -> None:
        assert [method.name for method in widget.methods] == ["resize", "label"]

        resize = widget.methods[0]
        assert resize.description == "Resizes the widget."
        assert resize.signature == (
            "resize(int width, java.util.Map<java.lang.String,java.lang.Integer> hints)"
        )
        assert resize.parameters == (
            ParameterDoc(name="width", type="int"),
            ParameterDoc(name="hints", type="java.util.Map<java.lang.String,java.lang.Integer>"),
        )
        assert resize.modifiers == ("static",)
        assert resize.return_type == "void"
        assert resize.modifier_and_type == "static void"
        assert resize.exceptions == ("java.io.IOException", "java.lang.IllegalStateException")
        assert "Resizes the widget." in resize.detail_text

    def test_escaped_text_is_normalized(self, widget: TypeDoc) -> None:
        label = widget.methods[1]
        assert label.description == "Returns the label text."
        assert label.return_type == "java.lang.String"
        assert label.parameters == ()

    def test_field(self, widget: TypeDoc) -> None:
        assert len(widget.fields) == 1
        field = widget.fields[0]
        assert field.name == "MAX_SIZE"
        assert field.modifier_and_type == "static int"
        assert field.description == "Largest supported size."
        assert field.default_value == "64"

    def test_constructor(self, widget: TypeDoc) -> None:
        assert len(widget.constructors) == 1
        constructor = widget.constructors[0]
        assert constructor.name == "Widget"
        assert constructor.signature == "Widget(java.lang.String name)"
        assert constructor.parameters == (ParameterDoc(name="name", type="java.lang.String"),)
        assert constructor.description == "Creates a named widget."
        assert constructor.exceptions == ()


# ---------------------------------------------------------------------------
# Grid-based page
# ---------------------------------------------------------------------------


class TestModernPage:
    @pytest.fixture()
    def buffer(self, fetcher: Fetcher, site: FakeSite, base_url: str) -> TypeDoc:
        url = base_url + "com/acme/io/Buffer.html"
        site.add(url, MODERN_BUFFER_PAGE)
        return TypePageParser(fetcher).parse(url, name="Buffer", package_name="com.acme.io")

    def test_type_fields(self, buffer: TypeDoc) -> None:
        assert buffer.full_name == "com.acme.io.Buffer"
        assert buffer.modifiers == ("public", "abstract")
        assert buffer.super_class == "java.lang.Object"
        assert buffer.interfaces == ("Closeable", "AutoCloseable")

    def test_members(self, buffer: TypeDoc) -> None:
        assert [method.name for method in buffer.methods] == ["read", "flush"]
        assert [field.name for field in buffer.fields] == ["CAPACITY"]
        assert [constructor.name for constructor in buffer.constructors] == ["Buffer"]

    def test_method_details(self, buffer: TypeDoc) -> None:
        read, flush = buffer.methods
        assert read.signature == "read(byte[] dst, int offset)"
        assert read.description == "Reads bytes into dst."
        assert read.return_type == "int"
        assert read.exceptions == ("java.io.IOException",)
        assert [param.name for param in read.parameters] == ["dst", "offset"]
        assert flush.modifiers == ("abstract",)
        assert flush.exceptions == ()

    def test_field_without_initializer(self, buffer: TypeDoc) -> None:
        assert buffer.fields[0].default_value is None
        assert buffer.fields[0].modifier_and_type == "static final int"


# ---------------------------------------------------------------------------
# Degenerate pages
# ---------------------------------------------------------------------------


class TestDegeneratePages:
    def test_page_without_members(self, fetcher: Fetcher, site: FakeSite, base_url: str) -> None:
        url = base_url + "Empty.html"
        site.add(url, simple_type_page("Empty", kind="Interface"))

        type_doc = TypePageParser(fetcher).parse(url, name="Empty", package_name="")

        assert type_doc.kind == TypeKind.INTERFACE
        assert type_doc.methods == ()
        assert type_doc.fields == ()
        assert type_doc.constructors == ()
        assert type_doc.full_name == "Empty"

    def test_fetch_failure_raises(self, fetcher: Fetcher, base_url: str) -> None:
        with pytest.raises(PageFetchError) as excinfo:
            TypePageParser(fetcher).parse(base_url + "Gone.html", name="Gone", package_name="")
        assert excinfo.value.status_code == 404
