"""Metadata markers attached to classes, methods, attributes and parameters.

Methods are exposed with the ``graphql_field`` decorator, attributes with
``Annotated`` metadata::

    @graphql_object(description="A person")
    class Person:
        name: Annotated[str, graphql_field(non_null=True)]

        @graphql_field(description="Friends of this person", connection=True)
        def get_friends(self, limit: Annotated[int, graphql_argument(default_value="ten")]) -> list["Person"]:
            ...

Strategy references (``type_function``, ``data_fetcher``, ``connection``
wrappers, ``default_value`` suppliers and ``type_resolver``) are either a
key registered in a ``Registry`` or the strategy factory itself.
"""

from collections.abc import Callable
from typing import Annotated, Any, TypeVar, get_args, get_origin

from pydantic import BaseModel, ConfigDict

FIELD_OPTIONS_ATTR = "__graphql_field__"
TYPE_OPTIONS_ATTR = "__graphql_type__"

StrategyRef = str | Callable[..., Any]

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)


class ConnectionOptions(BaseModel):
    """Pagination of a list-of-objects field.

    Attributes:
        wrapper: Connection wrapper reference; the builder's default wrapper when None.
        name: Prefix of the synthesized ``<name>Edge``/``<name>Connection`` types;
            the element type name when None.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    wrapper: StrategyRef | None = None
    name: str | None = None


class FieldOptions(BaseModel):
    """Exposure and shape of one field.

    Instances decorate methods directly and are placed in ``Annotated``
    metadata for attributes.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    name: str | None = None
    description: str | None = None
    deprecate: str | None = None
    non_null: bool = False
    type_function: StrategyRef | None = None
    data_fetcher: StrategyRef | None = None
    connection: ConnectionOptions | None = None
    relay_mutation: bool = False

    def __call__(self, func: F) -> F:
        setattr(func, FIELD_OPTIONS_ATTR, self)
        return func


class ArgumentOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    name: str | None = None
    description: str | None = None
    non_null: bool = False
    default_value: StrategyRef | None = None


class TypeOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    name: str | None = None
    description: str | None = None
    interface: bool = False
    type_resolver: StrategyRef | None = None

    def __call__(self, cls: C) -> C:
        setattr(cls, TYPE_OPTIONS_ATTR, self)
        return cls


def graphql_field(
    *,
    name: str | None = None,
    description: str | None = None,
    deprecate: str | None = None,
    non_null: bool = False,
    type_function: StrategyRef | None = None,
    data_fetcher: StrategyRef | None = None,
    connection: "ConnectionOptions | bool" = False,
    relay_mutation: bool = False,
) -> FieldOptions:
    """Mark a method or attribute for exposure as a GraphQL field."""
    if connection is True:
        connection = ConnectionOptions()
    return FieldOptions(
        name=name,
        description=description,
        deprecate=deprecate,
        non_null=non_null,
        type_function=type_function,
        data_fetcher=data_fetcher,
        connection=connection or None,
        relay_mutation=relay_mutation,
    )


def graphql_connection(wrapper: StrategyRef | None = None, name: str | None = None) -> ConnectionOptions:
    return ConnectionOptions(wrapper=wrapper, name=name)


def graphql_argument(
    *,
    name: str | None = None,
    description: str | None = None,
    non_null: bool = False,
    default_value: StrategyRef | None = None,
) -> ArgumentOptions:
    return ArgumentOptions(name=name, description=description, non_null=non_null, default_value=default_value)


def graphql_object(*, name: str | None = None, description: str | None = None) -> TypeOptions:
    """Name or describe the GraphQL type derived from a class or enumeration."""
    return TypeOptions(name=name, description=description)


def graphql_interface(
    type_resolver: StrategyRef | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
) -> TypeOptions:
    """Mark a class as a GraphQL interface.

    The type resolver maps a runtime value to the name of its object type. An
    interface without one cannot be built.
    """
    return TypeOptions(name=name, description=description, interface=True, type_resolver=type_resolver)


def get_type_options(cls: type) -> TypeOptions | None:
    """Options declared on ``cls`` itself; markers are not inherited."""
    options = vars(cls).get(TYPE_OPTIONS_ATTR)
    return options if isinstance(options, TypeOptions) else None


def get_field_options(member: Any) -> FieldOptions | None:
    options = getattr(member, FIELD_OPTIONS_ATTR, None)
    return options if isinstance(options, FieldOptions) else None


def _annotated_metadata(annotation: Any) -> tuple[Any, ...]:
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[1:]
    return ()


def get_attribute_options(annotation: Any) -> FieldOptions | None:
    return next((m for m in _annotated_metadata(annotation) if isinstance(m, FieldOptions)), None)


def get_argument_options(annotation: Any) -> ArgumentOptions | None:
    return next((m for m in _annotated_metadata(annotation) if isinstance(m, ArgumentOptions)), None)


def get_legacy_deprecation(member: Any) -> str | None:
    """Reason from a PEP 702 ``@deprecated`` marker, ``"Deprecated"`` when it has none."""
    message = getattr(member, "__deprecated__", None)
    if message is None:
        return None
    return message or "Deprecated"
