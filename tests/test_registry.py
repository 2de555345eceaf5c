from typing import Any

import pytest

from graphql_annotations.connection import ListConnection
from graphql_annotations.exceptions import RegistryError
from graphql_annotations.registry import Registry, StrategyKind, create_default_registry, default_registry
from graphql_annotations.type_functions import ClassNameTypeResolver, DefaultTypeFunction


class Upper:
    def __call__(self, value: Any) -> str:
        return str(value).upper()


class TestRegistry:
    def test_default_strategies(self) -> None:
        registry = create_default_registry()
        assert registry.keys(StrategyKind.TYPE_FUNCTION) == ["default"]
        assert registry.keys(StrategyKind.CONNECTION) == ["list"]
        assert registry.keys(StrategyKind.TYPE_RESOLVER) == ["class_name"]
        assert registry.keys(StrategyKind.DATA_FETCHER) == []
        assert isinstance(registry.create(StrategyKind.TYPE_FUNCTION, "default"), DefaultTypeFunction)
        assert isinstance(registry.create(StrategyKind.TYPE_RESOLVER, "class_name"), ClassNameTypeResolver)

    def test_keys_are_looked_up_per_kind(self, registry: Registry) -> None:
        registry.register_data_fetcher("upper", Upper)
        assert isinstance(registry.create(StrategyKind.DATA_FETCHER, "upper"), Upper)
        with pytest.raises(RegistryError, match="No type_function strategy registered as 'upper' \\(known: default\\)"):
            registry.create(StrategyKind.TYPE_FUNCTION, "upper")

    def test_connection_factories_are_not_called(self, registry: Registry) -> None:
        assert registry.factory(StrategyKind.CONNECTION, "list") is ListConnection

    def test_references_that_are_not_keys(self, registry: Registry) -> None:
        def fetch(environment: Any) -> str:
            return "value"

        assert registry.create(StrategyKind.DATA_FETCHER, fetch) is fetch
        assert isinstance(registry.create(StrategyKind.DATA_FETCHER, Upper), Upper)
        assert registry.factory(StrategyKind.CONNECTION, ListConnection) is ListConnection

    def test_default_values(self, registry: Registry) -> None:
        registry.register_default_value("ten", lambda: 10)
        assert registry.default_value("ten") == 10
        assert registry.default_value(lambda: "inline") == "inline"

    def test_replacing_a_key(self, registry: Registry) -> None:
        registry.register_type_function("default", lambda: "replacement")
        assert registry.create(StrategyKind.TYPE_FUNCTION, "default") == "replacement"

    def test_copies_are_independent(self, registry: Registry) -> None:
        registry.register_connection("mine", ListConnection)
        assert "mine" in registry.keys(StrategyKind.CONNECTION)
        assert "mine" not in default_registry.keys(StrategyKind.CONNECTION)
