"""Tests for roost.resolver — script resolution and instantiation."""

import pytest

from roost.errors import ScriptResolutionError
from roost.resolver import ImportResolver, RegistryResolver, as_resolver, instantiate
from roost.testing import RecordingFactory, StubModule


class TestImportResolver:
    def test_module_attribute(self) -> None:
        assert ImportResolver().resolve("roost.testing:StubModule") is StubModule

    def test_module_only(self) -> None:
        import roost.testing

        assert ImportResolver().resolve("roost.testing") is roost.testing

    def test_dotted_attribute(self) -> None:
        resolved = ImportResolver().resolve("roost.testing:StubModule.count")
        assert resolved is StubModule.count

    def test_cached(self) -> None:
        resolver = ImportResolver()
        assert resolver.resolve("roost.testing:StubModule") is resolver.resolve(
            "roost.testing:StubModule"
        )

    def test_missing_module(self) -> None:
        with pytest.raises(ScriptResolutionError, match="Cannot import") as exc_info:
            ImportResolver().resolve("nonexistent_module_xyz:Page")
        assert exc_info.value.script == "nonexistent_module_xyz:Page"

    def test_missing_attribute(self) -> None:
        with pytest.raises(ScriptResolutionError, match="no attribute"):
            ImportResolver().resolve("roost.testing:DoesNotExist")


class TestRegistryResolver:
    def test_resolve_and_register(self) -> None:
        page = StubModule()
        resolver = RegistryResolver({"home": page})
        resolver.register("other", StubModule)
        assert resolver.resolve("home") is page
        assert resolver.resolve("other") is StubModule

    def test_unknown(self) -> None:
        with pytest.raises(ScriptResolutionError, match="No script registered"):
            RegistryResolver().resolve("missing")


class TestAsResolver:
    def test_none_is_import_resolver(self) -> None:
        assert isinstance(as_resolver(None), ImportResolver)

    def test_mapping_is_registry(self) -> None:
        assert isinstance(as_resolver({"a": StubModule}), RegistryResolver)

    def test_resolver_passed_through(self) -> None:
        resolver = RegistryResolver()
        assert as_resolver(resolver) is resolver


class TestInstantiate:
    def test_class_called_with_element_and_options(self) -> None:
        el = object()
        instance = instantiate(StubModule, el, {"data": 1})
        assert isinstance(instance, StubModule)
        assert instance.el is el
        assert instance.options == {"data": 1}

    def test_factory_callable(self) -> None:
        factory = RecordingFactory()
        instance = instantiate(factory, "el", {"a": 1})
        assert factory.calls == [("el", {"a": 1})]
        assert instance is factory.instances[0]

    def test_instance_returned_unchanged(self) -> None:
        page = StubModule()
        assert instantiate(page, "el", {}) is page
