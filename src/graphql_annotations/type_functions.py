import collections.abc
import types
import typing
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, NewType, Protocol, get_args, get_origin
from uuid import UUID

from graphql import (
    GraphQLAbstractType,
    GraphQLBoolean,
    GraphQLFloat,
    GraphQLID,
    GraphQLInt,
    GraphQLList,
    GraphQLResolveInfo,
    GraphQLString,
    GraphQLType,
)

from graphql_annotations.exceptions import UnresolvableTypeError
from graphql_annotations.optional import Maybe
from graphql_annotations.structure import StructuralType, is_interface, is_structural_class

if TYPE_CHECKING:
    from graphql_annotations.builder import TypeGraphBuilder

ID = NewType("ID", str)

SCALAR_TYPES: dict[Any, GraphQLType] = {
    str: GraphQLString,
    int: GraphQLInt,
    float: GraphQLFloat,
    bool: GraphQLBoolean,
    ID: GraphQLID,
    UUID: GraphQLID,
}

LIST_ORIGINS = {
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Collection,
    collections.abc.Iterable,
    collections.abc.Iterator,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
}


class TypeFunction(Protocol):
    """Maps a Python type annotation to a GraphQL type."""

    def __call__(self, annotation: Any, builder: "TypeGraphBuilder") -> GraphQLType: ...


class DefaultTypeFunction:
    """
    Resolves scalars, enumerations, collections, optionals and classes.

    - ``str``, ``int``, ``float``, ``bool`` map to the built-in scalars, ``ID`` and ``UUID`` to ``ID``;
    - ``Enum`` subclasses become enum types;
    - ``list[T]`` and the other collection shapes become ``[T]``;
    - ``Optional[T]``, ``T | None``, ``Maybe[T]`` and ``Annotated[T, ...]`` resolve as ``T``;
    - classes become object types, or interface types when marked as interfaces;
    - GraphQL types are returned as they are.
    """

    def __call__(self, annotation: Any, builder: "TypeGraphBuilder") -> GraphQLType:
        if isinstance(annotation, GraphQLType):
            return annotation

        origin = get_origin(annotation)
        if origin is Annotated:
            return self(get_args(annotation)[0], builder)
        if origin is typing.Union or origin is types.UnionType:
            members = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(members) != 1:
                raise UnresolvableTypeError(f"Cannot map union {annotation!r} to a GraphQL type")
            return self(members[0], builder)
        if origin is Maybe:
            return self(get_args(annotation)[0], builder)
        if origin in LIST_ORIGINS:
            return GraphQLList(self(self._element_type(annotation), builder))
        if origin is not None:
            raise UnresolvableTypeError(f"Cannot map {annotation!r} to a GraphQL type")

        if annotation in SCALAR_TYPES:
            return SCALAR_TYPES[annotation]
        if isinstance(annotation, type):
            if issubclass(annotation, Enum):
                return builder.enum_type(annotation)
            if issubclass(annotation, Maybe):
                raise UnresolvableTypeError("Maybe needs a type argument, e.g. Maybe[str]")
            if not is_structural_class(annotation):
                raise UnresolvableTypeError(f"Cannot map {annotation!r} to a GraphQL type")
            if is_interface(annotation):
                return builder.interface_type(annotation)
            return builder.object_type(annotation)

        raise UnresolvableTypeError(f"Cannot map {annotation!r} to a GraphQL type")

    @staticmethod
    def _element_type(annotation: Any) -> Any:
        args = get_args(annotation)
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if len(args) != 1:
            raise UnresolvableTypeError(f"Cannot map {annotation!r} to a GraphQL list: one element type is required")
        return args[0]


class ClassNameTypeResolver:
    """Resolves an interface value to the object type named after its class.

    The name comes from ``graphql_object(name=...)`` when the class carries
    one, else from the class name itself.
    """

    def __call__(self, value: Any, info: GraphQLResolveInfo, abstract_type: GraphQLAbstractType) -> str:
        return StructuralType.of(type(value)).name
