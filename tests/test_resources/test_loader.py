"""Tests for namespace resolution and resource loading."""

from __future__ import annotations

import json

import pytest

from i18nfanout.errors import ResourceLoadError
from i18nfanout.models import FileRecord, Options
from i18nfanout.resources import (
    BundleRegistry,
    FileNamespaceSource,
    MappingNamespaceSource,
    ResourceLoader,
    namespace_list,
    namespace_path,
)


def _opts(**kwargs) -> Options:
    return Options(locales=["en"], namespaces=["translations", "other"], **kwargs)


class TestNamespaceList:
    def test_default_namespace_only(self):
        assert namespace_list(FileRecord(), _opts()) == ["translations"]

    def test_record_namespace_overrides_default(self):
        record = FileRecord(metadata={"namespace": "blog"})
        assert namespace_list(record, _opts()) == ["blog"]

    def test_preload_string_is_split(self):
        record = FileRecord(metadata={"preloadNamespaces": "foo, bar baz"})
        assert namespace_list(record, _opts()) == ["translations", "foo", "bar", "baz"]

    def test_namespace_moved_to_front_without_duplicates(self):
        record = FileRecord(metadata={
            "namespace": "b",
            "preloadNamespaces": ["a", "b", "c", "a"],
        })
        assert namespace_list(record, _opts()) == ["b", "a", "c"]

    def test_snake_case_alias(self):
        record = FileRecord(metadata={"preload_namespaces": ["foo"]})
        assert namespace_list(record, _opts()) == ["translations", "foo"]

    def test_camel_case_key_wins_over_alias(self):
        record = FileRecord(metadata={
            "preloadNamespaces": "foo",
            "preload_namespaces": "bar",
        })
        assert namespace_list(record, _opts()) == ["translations", "foo"]


class TestNamespacePath:
    def test_placeholders_substituted(self):
        assert namespace_path("./locales/__lng__/__ns__.json", "fr", "foo") == "./locales/fr/foo.json"


class TestFileNamespaceSource:
    @pytest.mark.asyncio
    async def test_reads_json(self, locales_dir):
        source = FileNamespaceSource(f"{locales_dir.as_posix()}/__lng__/__ns__.json")
        tree = await source.load("fr", "foo")
        assert tree == {"foo": {"bar": "Foobar!!"}}

    @pytest.mark.asyncio
    async def test_relative_template_uses_base_dir(self, locales_dir):
        source = FileNamespaceSource("locales/__lng__/__ns__.json", base_dir=locales_dir.parent)
        assert (await source.load("en", "foo")) == {"foo": {"bar": "Foobar"}}

    @pytest.mark.asyncio
    async def test_missing_file(self, locales_dir):
        source = FileNamespaceSource(f"{locales_dir.as_posix()}/__lng__/__ns__.json")
        with pytest.raises(ResourceLoadError) as exc_info:
            await source.load("de", "translations")
        assert exc_info.value.locale == "de"
        assert exc_info.value.namespace == "translations"
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_invalid_json(self, locales_dir):
        (locales_dir / "en" / "broken.json").write_text("{not json", encoding="utf-8")
        source = FileNamespaceSource(f"{locales_dir.as_posix()}/__lng__/__ns__.json")
        with pytest.raises(ResourceLoadError) as exc_info:
            await source.load("en", "broken")
        assert isinstance(exc_info.value.cause, json.JSONDecodeError)


class TestResourceLoader:
    @pytest.mark.asyncio
    async def test_builds_local_store(self, source):
        store = await ResourceLoader(source).load(["en"], ["translations", "foo"])
        assert list(store) == ["en"]
        assert list(store["en"]) == ["translations", "foo"]
        assert store["en"]["foo"] == {"foo": {"bar": "Foobar"}}

    @pytest.mark.asyncio
    async def test_registers_into_shared_registry(self, source):
        registry = BundleRegistry()
        await ResourceLoader(source, registry).load(["fr"], ["translations"])
        assert registry.has_bundle("fr", "translations")
        assert registry.get_bundle("fr", "translations")["common"]["foo"] == "Fou!!!"

    def test_registry_last_writer_wins(self):
        registry = BundleRegistry()
        registry.add_resource_bundle("en", "ns", {"a": "1"})
        registry.add_resource_bundle("en", "ns", {"a": "2"})
        assert registry.snapshot() == {"en": {"ns": {"a": "2"}}}

    @pytest.mark.asyncio
    async def test_payload_string_is_parsed(self):
        source = MappingNamespaceSource({"en": {"translations": '{"a": "A"}'}})
        store = await ResourceLoader(source).load(["en"], ["translations"])
        assert store == {"en": {"translations": {"a": "A"}}}

    @pytest.mark.asyncio
    async def test_unparseable_payload(self):
        source = MappingNamespaceSource({"en": {"translations": "{oops"}})
        with pytest.raises(ResourceLoadError):
            await ResourceLoader(source).load(["en"], ["translations"])

    @pytest.mark.asyncio
    async def test_missing_bundle_propagates(self, source):
        registry = BundleRegistry()
        with pytest.raises(ResourceLoadError) as exc_info:
            await ResourceLoader(source, registry).load(["en"], ["translations", "nope"])
        assert exc_info.value.namespace == "nope"
        # 실패한 호출은 공유 저장소에 아무것도 남기지 않는다
        assert registry.snapshot() == {}

    @pytest.mark.asyncio
    async def test_unexpected_source_error_is_wrapped(self):
        class Exploding:
            async def load(self, locale, namespace):
                raise RuntimeError("disk on fire")

        with pytest.raises(ResourceLoadError) as exc_info:
            await ResourceLoader(Exploding()).load(["en"], ["translations"])
        assert isinstance(exc_info.value.cause, RuntimeError)
