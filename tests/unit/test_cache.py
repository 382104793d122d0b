"""Unit tests for apidoc.crawler.cache."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from apidoc.crawler import cache as cache_module
from apidoc.crawler.cache import TypeDocCache
from apidoc.crawler.types import FieldDoc, MethodDoc, ParameterDoc, TypeDoc, TypeKind


@pytest.fixture()
def foo() -> TypeDoc:
    return TypeDoc(
        name="Foo",
        package_name="com.acme",
        kind=TypeKind.INTERFACE,
        description="Foo things.",
        modifiers=("public",),
        interfaces=("java.io.Closeable",),
        methods=(
            MethodDoc(
                name="run",
                signature="run(int times)",
                parameters=(ParameterDoc(name="times", type="int"),),
                return_type="void",
                exceptions=("java.io.IOException",),
            ),
        ),
        fields=(FieldDoc(name="LIMIT", modifier_and_type="static final int", default_value="3"),),
    )


# ---------------------------------------------------------------------------
# Read / write
# ---------------------------------------------------------------------------


class TestTypeDocCache:
    def test_put_then_get(self, tmp_path: Path, foo: TypeDoc) -> None:
        cache = TypeDocCache(tmp_path)

        assert cache.put(foo) is True
        assert cache.is_cached("com.acme.Foo")
        assert cache.get("com.acme.Foo") == foo
        assert (tmp_path / "com.acme.Foo.json").is_file()

    def test_miss(self, tmp_path: Path) -> None:
        cache = TypeDocCache(tmp_path)
        assert cache.get("com.acme.Missing") is None
        assert not cache.is_cached("com.acme.Missing")

    def test_first_write_wins(self, tmp_path: Path, foo: TypeDoc) -> None:
        cache = TypeDocCache(tmp_path)
        second = TypeDoc(name="Foo", package_name="com.acme", description="Other text.")

        assert cache.put(foo) is True
        assert cache.put(second) is False
        assert cache.get("com.acme.Foo").description == "Foo things."

    def test_record_being_written_is_a_miss_not_corrupt(
        self, tmp_path: Path, foo: TypeDoc, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cache = TypeDocCache(tmp_path)
        real_write = cache_module.atomic_write_json
        seen: dict[str, object] = {}

        def write_with_concurrent_access(path: Path, payload: dict) -> None:
            # Another worker touches the same key before the file exists.
            seen["get"] = cache.get("com.acme.Foo")
            seen["put"] = cache.put(TypeDoc(name="Foo", package_name="com.acme"))
            real_write(path, payload)

        monkeypatch.setattr(cache_module, "atomic_write_json", write_with_concurrent_access)

        assert cache.put(foo) is True
        assert seen == {"get": None, "put": False}
        assert cache.get("com.acme.Foo") == foo

    def test_index_loaded_from_existing_directory(self, tmp_path: Path, foo: TypeDoc) -> None:
        TypeDocCache(tmp_path).put(foo)

        reopened = TypeDocCache(tmp_path)

        assert reopened.is_cached("com.acme.Foo")
        assert reopened.get("com.acme.Foo") == foo
        assert reopened.stats()["count"] == 1

    def test_record_uses_output_keys(self, tmp_path: Path, foo: TypeDoc) -> None:
        TypeDocCache(tmp_path).put(foo)

        payload = json.loads((tmp_path / "com.acme.Foo.json").read_text(encoding="utf-8"))

        assert payload["packageName"] == "com.acme"
        assert payload["type"] == "interface"
        assert payload["fields"][0]["defaultValue"] == "3"


# ---------------------------------------------------------------------------
# Degraded modes
# ---------------------------------------------------------------------------


class TestCacheFailures:
    def test_corrupt_record_is_a_miss_and_can_be_replaced(
        self, tmp_path: Path, foo: TypeDoc
    ) -> None:
        (tmp_path / "com.acme.Foo.json").write_text("{not json", encoding="utf-8")
        cache = TypeDocCache(tmp_path)
        assert cache.is_cached("com.acme.Foo")

        assert cache.get("com.acme.Foo") is None
        assert not cache.is_cached("com.acme.Foo")

        assert cache.put(foo) is True
        assert TypeDocCache(tmp_path).get("com.acme.Foo") == foo

    def test_record_without_name_is_a_miss(self, tmp_path: Path) -> None:
        (tmp_path / "com.acme.Foo.json").write_text('{"packageName": "com.acme"}', encoding="utf-8")
        assert TypeDocCache(tmp_path).get("com.acme.Foo") is None

    @pytest.mark.parametrize(
        "record",
        [
            {"name": "Foo", "methods": ["x"]},
            {"name": "Foo", "fields": "LIMIT"},
            {"name": "Foo", "constructors": [1]},
        ],
    )
    def test_wrong_shape_is_a_miss_and_can_be_replaced(
        self, tmp_path: Path, foo: TypeDoc, record: dict
    ) -> None:
        (tmp_path / "com.acme.Foo.json").write_text(json.dumps(record), encoding="utf-8")
        cache = TypeDocCache(tmp_path)

        assert cache.get("com.acme.Foo") is None
        assert not cache.is_cached("com.acme.Foo")
        assert cache.put(foo) is True

    def test_write_retried_once(
        self, tmp_path: Path, foo: TypeDoc, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[Path] = []
        real_write = cache_module.atomic_write_json

        def flaky_write(path: Path, payload: dict) -> None:
            calls.append(path)
            if len(calls) == 1:
                raise OSError("disk full")
            real_write(path, payload)

        monkeypatch.setattr(cache_module, "atomic_write_json", flaky_write)
        cache = TypeDocCache(tmp_path)

        assert cache.put(foo) is True
        assert len(calls) == 2
        assert cache.get("com.acme.Foo") == foo

    def test_failed_write_is_not_cached(
        self, tmp_path: Path, foo: TypeDoc, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def broken_write(path: Path, payload: dict) -> None:
            raise OSError("read-only file system")

        monkeypatch.setattr(cache_module, "atomic_write_json", broken_write)
        cache = TypeDocCache(tmp_path)

        assert cache.put(foo) is False
        assert not cache.is_cached("com.acme.Foo")
        assert cache.stats()["count"] == 0

    def test_disabled_cache(self, tmp_path: Path, foo: TypeDoc) -> None:
        cache = TypeDocCache(tmp_path / "unused", enabled=False)

        assert cache.put(foo) is False
        assert cache.get("com.acme.Foo") is None
        assert not (tmp_path / "unused").exists()
        assert cache.describe() == "Cache disabled"

    def test_unusable_directory_disables_cache(self, tmp_path: Path, foo: TypeDoc) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory", encoding="utf-8")

        cache = TypeDocCache(blocker)

        assert cache.enabled is False
        assert cache.put(foo) is False

    def test_describe(self, tmp_path: Path, foo: TypeDoc) -> None:
        cache = TypeDocCache(tmp_path)
        cache.put(foo)
        assert cache.describe() == f"Cache: 1 types cached in {tmp_path}"
