from collections.abc import Callable
from enum import Enum
from typing import Any

from graphql_annotations import log
from graphql_annotations.annotations import StrategyRef
from graphql_annotations.exceptions import RegistryError


class StrategyKind(str, Enum):
    TYPE_FUNCTION = "type_function"
    DATA_FETCHER = "data_fetcher"
    CONNECTION = "connection"
    DEFAULT_VALUE = "default_value"
    TYPE_RESOLVER = "type_resolver"


class Registry:
    """
    Factories for the pluggable strategies of a build, looked up by key.

    Every kind of strategy has its own namespace of keys. A reference in
    metadata is either such a key or the factory itself:

    - type functions, data fetchers and type resolvers are created by calling
      their factory with no arguments (a class is instantiated, a plain
      function is used as it is);
    - connection wrappers are called with the fetched collection;
    - default value suppliers are called with no arguments and return the value.
    """

    def __init__(self) -> None:
        self._factories: dict[StrategyKind, dict[str, Callable[..., Any]]] = {kind: {} for kind in StrategyKind}

    def register(self, kind: StrategyKind, key: str, factory: Callable[..., Any]) -> None:
        if key in self._factories[kind]:
            log.debug(f"Replacing {kind.value} strategy '{key}'")
        self._factories[kind][key] = factory

    def register_type_function(self, key: str, factory: Callable[..., Any]) -> None:
        self.register(StrategyKind.TYPE_FUNCTION, key, factory)

    def register_data_fetcher(self, key: str, factory: Callable[..., Any]) -> None:
        self.register(StrategyKind.DATA_FETCHER, key, factory)

    def register_connection(self, key: str, factory: Callable[..., Any]) -> None:
        self.register(StrategyKind.CONNECTION, key, factory)

    def register_default_value(self, key: str, supplier: Callable[[], Any]) -> None:
        self.register(StrategyKind.DEFAULT_VALUE, key, supplier)

    def register_type_resolver(self, key: str, factory: Callable[..., Any]) -> None:
        self.register(StrategyKind.TYPE_RESOLVER, key, factory)

    def keys(self, kind: StrategyKind) -> list[str]:
        return list(self._factories[kind])

    def factory(self, kind: StrategyKind, ref: StrategyRef) -> Callable[..., Any]:
        """Return the factory behind ``ref``."""
        if not isinstance(ref, str):
            return ref
        try:
            return self._factories[kind][ref]
        except KeyError:
            known = ", ".join(sorted(self._factories[kind])) or "none"
            raise RegistryError(f"No {kind.value} strategy registered as '{ref}' (known: {known})") from None

    def create(self, kind: StrategyKind, ref: StrategyRef) -> Any:
        """Create the strategy behind ``ref``."""
        if isinstance(ref, str) or isinstance(ref, type):
            return self.factory(kind, ref)()
        return ref

    def default_value(self, ref: StrategyRef) -> Any:
        return self.factory(StrategyKind.DEFAULT_VALUE, ref)()

    def copy(self) -> "Registry":
        registry = Registry()
        for kind, factories in self._factories.items():
            registry._factories[kind] = dict(factories)
        return registry


def create_default_registry() -> Registry:
    """A registry holding the built-in strategies."""
    from graphql_annotations.connection import ListConnection
    from graphql_annotations.type_functions import ClassNameTypeResolver, DefaultTypeFunction

    registry = Registry()
    registry.register_type_function("default", DefaultTypeFunction)
    registry.register_connection("list", ListConnection)
    registry.register_type_resolver("class_name", ClassNameTypeResolver)
    return registry


default_registry = create_default_registry()
