"""Unit tests for apidoc.crawler.url."""

from __future__ import annotations

import pytest

from apidoc.crawler.errors import ConfigurationError
from apidoc.crawler.url import (
    TypeUrlExtractor,
    base_directory_url,
    infer_package_name,
    infer_type_name,
    is_type_link,
    normalize_url,
    resolve_url,
)
from tests.pages import index_page

# ---------------------------------------------------------------------------
# normalize_url / base_directory_url / resolve_url
# ---------------------------------------------------------------------------


class TestNormalizeUrl:
    def test_lowercases_host_and_strips_default_port(self) -> None:
        assert normalize_url("HTTPS://Docs.Example.com:443/api/Foo.html") == (
            "https://docs.example.com/api/Foo.html"
        )

    def test_strips_fragment_and_dot_segments(self) -> None:
        assert normalize_url("https://x.org/a/./b/../Foo.html#method.summary") == (
            "https://x.org/a/Foo.html"
        )

    def test_rejects_relative_and_non_http(self) -> None:
        assert normalize_url("Foo.html") is None
        assert normalize_url("ftp://x.org/Foo.html") is None
        assert normalize_url("") is None


class TestBaseDirectoryUrl:
    def test_adds_trailing_slash(self) -> None:
        assert base_directory_url("https://docs.example.com/api") == "https://docs.example.com/api/"

    def test_keeps_existing_slash_and_drops_query(self) -> None:
        assert base_directory_url("https://docs.example.com/api/?x=1") == (
            "https://docs.example.com/api/"
        )

    def test_invalid_raises_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            base_directory_url("not a url")


class TestResolveUrl:
    def test_relative_link(self) -> None:
        assert resolve_url("https://x.org/api/com/acme/package-summary.html", "Foo.html") == (
            "https://x.org/api/com/acme/Foo.html"
        )

    def test_skips_fragments_and_scripts(self) -> None:
        assert resolve_url("https://x.org/api/", "#top") is None
        assert resolve_url("https://x.org/api/", "javascript:void(0)") is None
        assert resolve_url("https://x.org/api/", None) is None


# ---------------------------------------------------------------------------
# is_type_link
# ---------------------------------------------------------------------------


class TestIsTypeLink:
    def test_type_page(self) -> None:
        assert is_type_link("com/acme/Foo.html", "Foo")

    def test_type_page_with_fragment(self) -> None:
        assert is_type_link("Foo.html#method.summary", "Foo")

    def test_lowercase_label_rejected(self) -> None:
        assert not is_type_link("com/acme/package-tree.html", "tree")
        assert not is_type_link("com/acme/foo.html", "foo")

    @pytest.mark.parametrize(
        "href",
        [
            "com/acme/package-summary.html",
            "overview-summary.html",
            "index.html",
            "help-doc.html",
            "constant-values.html",
            "serialized-form.html",
            "deprecated-list.html",
            "allclasses-frame.html",
            "com/acme/class-use/Foo.html",
        ],
    )
    def test_index_and_meta_pages_rejected(self, href: str) -> None:
        assert not is_type_link(href, "Foo")

    def test_non_html_rejected(self) -> None:
        assert not is_type_link("element-list", "Foo")
        assert not is_type_link(None, "Foo")
        assert not is_type_link("Foo.html", "")


# ---------------------------------------------------------------------------
# infer_package_name / infer_type_name
# ---------------------------------------------------------------------------


class TestInference:
    def test_package_from_path(self, base_url: str) -> None:
        assert infer_package_name(base_url + "com/acme/util/Foo.html", base_url) == "com.acme.util"

    def test_root_page_has_empty_package(self, base_url: str) -> None:
        assert infer_package_name(base_url + "Foo.html", base_url) == ""

    def test_module_directory_is_dropped(self, base_url: str) -> None:
        assert infer_package_name(base_url + "java.base/java/util/Map.html", base_url) == "java.util"

    def test_nested_type_name(self) -> None:
        assert infer_type_name("https://x.org/api/java/util/Map.Entry.html") == "Map.Entry"

    def test_type_name_is_unquoted(self) -> None:
        assert infer_type_name("https://x.org/api/My%24Type.html") == "My$Type"


# ---------------------------------------------------------------------------
# TypeUrlExtractor
# ---------------------------------------------------------------------------


class TestTypeUrlExtractor:
    def test_no_filters_accepts_everything(self, base_url: str) -> None:
        extractor = TypeUrlExtractor(base_url)
        assert not extractor.has_filters
        assert extractor.accepts_package("")
        assert extractor.accepts_package("org.other")

    def test_filter_is_anchored(self, base_url: str) -> None:
        extractor = TypeUrlExtractor(base_url, [r"com\.example\.core"])
        assert extractor.accepts_package("com.example.core")
        assert not extractor.accepts_package("com.example.core2")
        assert not extractor.accepts_package("org.com.example.core")
        assert not extractor.accepts_package("com.example.core.impl")

    def test_subtree_filter_includes_root(self, base_url: str) -> None:
        extractor = TypeUrlExtractor(base_url, [r"com\.acme\..*"])
        assert extractor.accepts_package("com.acme")
        assert extractor.accepts_package("com.acme.io")
        assert not extractor.accepts_package("com.acmetools")
        assert not extractor.accepts_package("org.other")

    def test_any_filter_may_match(self, base_url: str) -> None:
        extractor = TypeUrlExtractor(base_url, [r"com\.acme", r"org\..*"])
        assert extractor.accepts_package("com.acme")
        assert extractor.accepts_package("org.other")
        assert not extractor.accepts_package("net.thing")

    def test_invalid_filter_raises(self, base_url: str) -> None:
        with pytest.raises(ConfigurationError):
            TypeUrlExtractor(base_url, ["com\\.acme("])

    def test_extract_filters_and_dedups(self, base_url: str) -> None:
        html = index_page(
            [
                ("com/acme/Foo.html", "Foo"),
                ("com/acme/Foo.html#constructor.summary", "Foo"),
                ("org/other/Bar.html", "Bar"),
                ("com/acme/package-summary.html", "Package"),
            ]
        )
        extractor = TypeUrlExtractor(base_url, [r"com\.acme"])
        assert extractor.extract(html) == {base_url + "com/acme/Foo.html"}

    def test_extract_resolves_against_page_url(self, base_url: str) -> None:
        html = index_page([("Foo.html", "Foo")])
        urls = TypeUrlExtractor(base_url).extract(
            html, page_url=base_url + "com/acme/package-summary.html"
        )
        assert urls == {base_url + "com/acme/Foo.html"}

    def test_has_type_links(self, base_url: str) -> None:
        extractor = TypeUrlExtractor(base_url)
        assert extractor.has_type_links(index_page([("Foo.html", "Foo")]))
        assert not extractor.has_type_links(index_page([("help-doc.html", "Help")]))

    def test_extract_from_package_page(self, base_url: str) -> None:
        html = index_page(
            [
                ("Foo.html", "Foo"),
                ("Foo.Inner.html", "Foo.Inner"),
                ("package-tree.html", "Tree"),
                ("../../overview-summary.html", "Overview"),
                ("../other/Bar.html", "Bar"),
            ]
        )
        extractor = TypeUrlExtractor(base_url, [r"com\.acme"])

        urls = extractor.extract_from_package_page(html, base_url + "com/acme/package-summary.html")

        assert urls == {base_url + "com/acme/Foo.html", base_url + "com/acme/Foo.Inner.html"}
