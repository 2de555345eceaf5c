"""Value-fetching strategies.

A data fetcher produces the value of one field from a
``DataFetchingEnvironment``. Fetchers are graphql-core resolvers as well:
calling one with ``(source, info, **arguments)`` builds the environment and
delegates to ``get``. Fetchers compose by wrapping, e.g. a connection
fetcher around a Relay mutation fetcher around a method fetcher.
"""

import inspect
import types
import typing
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Annotated, Any, get_args, get_origin

from graphql import GraphQLResolveInfo

from graphql_annotations.structure import is_structural_class


@dataclass(frozen=True)
class DataFetchingEnvironment:
    """What a fetcher sees of the field being resolved."""

    source: Any
    arguments: dict[str, Any] = field(default_factory=dict)
    info: GraphQLResolveInfo | None = None

    @property
    def context(self) -> Any:
        return self.info.context if self.info is not None else None

    def with_arguments(self, arguments: dict[str, Any]) -> "DataFetchingEnvironment":
        return replace(self, arguments=arguments)


class DataFetcher(ABC):
    @abstractmethod
    def get(self, environment: DataFetchingEnvironment) -> Any:
        """Fetch the value of the field."""

    def __call__(self, source: Any, info: GraphQLResolveInfo, **arguments: Any) -> Any:
        return self.get(DataFetchingEnvironment(source, arguments, info))


class CallableDataFetcher(DataFetcher):
    """Adapts a plain ``fetch(environment)`` function."""

    def __init__(self, function: Callable[[DataFetchingEnvironment], Any]) -> None:
        self.function = function

    def get(self, environment: DataFetchingEnvironment) -> Any:
        return self.function(environment)


def as_data_fetcher(strategy: Any) -> DataFetcher:
    if isinstance(strategy, DataFetcher):
        return strategy
    if callable(strategy):
        return CallableDataFetcher(strategy)
    raise TypeError(f"{strategy!r} is not a data fetcher")


class AttributeDataFetcher(DataFetcher):
    """Reads an attribute, or a key of a mapping, from the source object."""

    def __init__(self, name: str) -> None:
        self.name = name

    def get(self, environment: DataFetchingEnvironment) -> Any:
        source = environment.source
        if source is None:
            return None
        if isinstance(source, Mapping):
            return source.get(self.name)
        return getattr(source, self.name, None)


@dataclass(frozen=True)
class ParameterBinding:
    """How one method parameter is filled in.

    Attributes:
        parameter: Python parameter name.
        argument: GraphQL argument name; None for the injected environment.
        annotation: Parameter annotation, used to turn input objects back into instances.
    """

    parameter: str
    argument: str | None = None
    annotation: Any = None

    @property
    def injects_environment(self) -> bool:
        return self.argument is None


class MethodDataFetcher(DataFetcher):
    """Calls a method of the source object with the field arguments.

    Arguments missing from the request are left out of the call so the
    method's own defaults apply.
    """

    def __init__(self, name: str, bindings: list[ParameterBinding]) -> None:
        self.name = name
        self.bindings = bindings

    def get(self, environment: DataFetchingEnvironment) -> Any:
        source = environment.source
        if source is None:
            return None
        kwargs: dict[str, Any] = {}
        for binding in self.bindings:
            if binding.injects_environment:
                kwargs[binding.parameter] = environment
            elif binding.argument in environment.arguments:
                kwargs[binding.parameter] = to_python(environment.arguments[binding.argument], binding.annotation)
        return getattr(source, self.name)(**kwargs)


def to_python(value: Any, annotation: Any) -> Any:
    """Turn a coerced input value into what a parameter annotated with ``annotation`` expects.

    Input objects arrive as dictionaries; for a class annotation they are
    passed to the class as keyword arguments. Lists are converted element-wise.
    """
    if value is None:
        return None
    origin = get_origin(annotation)
    if origin is Annotated:
        return to_python(value, get_args(annotation)[0])
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return to_python(value, members[0]) if len(members) == 1 else value
    if isinstance(value, list):
        args = get_args(annotation)
        return [to_python(item, args[0]) for item in value] if args else value
    if isinstance(value, Mapping) and is_structural_class(annotation):
        hints = typing.get_type_hints(annotation, include_extras=True)
        return annotation(**{key: to_python(item, hints.get(key)) for key, item in value.items()})
    return value


class ConnectionDataFetcher(DataFetcher):
    """Fetches the underlying collection without arguments and wraps it in a connection."""

    def __init__(self, connection: Callable[[Any], Any], fetcher: DataFetcher) -> None:
        self.connection = connection
        self.fetcher = fetcher

    def get(self, environment: DataFetchingEnvironment) -> Any:
        collection = self.fetcher.get(environment.with_arguments({}))
        if inspect.isawaitable(collection):

            async def wrapper() -> Any:
                return self.connection(await collection).get(environment)

            return wrapper()
        return self.connection(collection).get(environment)


class RelayMutationDataFetcher(DataFetcher):
    """Unpacks the single ``input`` argument of a Relay mutation into the method's arguments."""

    def __init__(self, fetcher: DataFetcher, client_mutation_id: str = "clientMutationId") -> None:
        self.fetcher = fetcher
        self.client_mutation_id = client_mutation_id

    def get(self, environment: DataFetchingEnvironment) -> Any:
        mutation_input = environment.arguments.get("input") or {}
        arguments = {key: value for key, value in mutation_input.items() if key != self.client_mutation_id}
        return self.fetcher.get(environment.with_arguments(arguments))
