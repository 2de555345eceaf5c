"""Relay connections: synthesized edge/connection types and list slicing.

A paginated field of type ``[T]`` is rewritten to ``<Name>Connection``::

    type <Name>Connection { edges: [<Name>Edge], pageInfo: PageInfo! }
    type <Name>Edge { node: T, cursor: String! }

and takes the ``first``, ``after``, ``last`` and ``before`` arguments. The
slicing itself is done by a connection wrapper: a factory called with the
fetched collection whose result has ``get(environment)``.
"""

import base64
import binascii
import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from graphql import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLField,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLString,
    GraphQLType,
    is_list_type,
    is_object_type,
)

from graphql_annotations.exceptions import ConnectionWrapperError
from graphql_annotations.fetchers import DataFetchingEnvironment

PAGE_INFO_NAME = "PageInfo"
CURSOR_PREFIX = "arrayconnection:"


class Connection(ABC):
    """Adapts a fetched collection to the connection shape."""

    def __init__(self, collection: Iterable[Any] | None) -> None:
        self.collection = collection

    @abstractmethod
    def get(self, environment: DataFetchingEnvironment) -> Any:
        """Return the connection value: a mapping (or object) with ``edges`` and ``pageInfo``."""


class ListConnection(Connection):
    """Slices an in-memory collection with offset cursors."""

    def get(self, environment: DataFetchingEnvironment) -> dict[str, Any]:
        data = list(self.collection or [])
        arguments = environment.arguments
        after, before = arguments.get("after"), arguments.get("before")
        first, last = arguments.get("first"), arguments.get("last")

        length = len(data)
        after_offset = cursor_to_offset(after, -1)
        before_offset = cursor_to_offset(before, length)
        start = max(after_offset + 1, 0)
        end = min(before_offset, length)

        if first is not None:
            if first < 0:
                raise ValueError("Argument 'first' must be a non-negative integer.")
            end = min(end, start + first)
        if last is not None:
            if last < 0:
                raise ValueError("Argument 'last' must be a non-negative integer.")
            start = max(start, end - last)

        edges = [{"node": node, "cursor": offset_to_cursor(start + i)} for i, node in enumerate(data[start:end])]

        lower_bound = after_offset + 1 if after else 0
        upper_bound = before_offset if before else length
        page_info = {
            "startCursor": edges[0]["cursor"] if edges else None,
            "endCursor": edges[-1]["cursor"] if edges else None,
            "hasPreviousPage": start > lower_bound if last is not None else False,
            "hasNextPage": end < upper_bound if first is not None else False,
        }
        return {"edges": edges, "pageInfo": page_info}


def offset_to_cursor(offset: int) -> str:
    return base64.b64encode(f"{CURSOR_PREFIX}{offset}".encode()).decode("ascii")


def cursor_to_offset(cursor: str | None, default: int) -> int:
    """Offset encoded in ``cursor``; ``default`` for a missing or foreign cursor."""
    if not cursor:
        return default
    try:
        decoded = base64.b64decode(cursor, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return default
    if not decoded.startswith(CURSOR_PREFIX):
        return default
    try:
        return int(decoded[len(CURSOR_PREFIX) :])
    except ValueError:
        return default


@dataclass(frozen=True)
class ConnectionSpec:
    """The synthesized types of one paginated field."""

    wrapper: Callable[[Any], Any]
    node_type: GraphQLOutputType
    edge_type: GraphQLObjectType
    connection_type: GraphQLObjectType


def is_connection_candidate(type_: GraphQLType) -> bool:
    """Only a list of object types can be paginated."""
    return is_list_type(type_) and is_object_type(type_.of_type)  # type: ignore[attr-defined]


def check_connection_wrapper(wrapper: Callable[[Any], Any]) -> None:
    """Fail unless ``wrapper`` can be called with the fetched collection alone."""
    try:
        signature = inspect.signature(wrapper)
    except (TypeError, ValueError):
        return
    try:
        signature.bind(None)
    except TypeError:
        name = getattr(wrapper, "__qualname__", repr(wrapper))
        raise ConnectionWrapperError(f"{name} doesn't have a single argument constructor") from None


def page_info_type() -> GraphQLObjectType:
    return GraphQLObjectType(
        PAGE_INFO_NAME,
        {
            "hasNextPage": GraphQLField(
                GraphQLNonNull(GraphQLBoolean), description="When paginating forwards, are there more items?"
            ),
            "hasPreviousPage": GraphQLField(
                GraphQLNonNull(GraphQLBoolean), description="When paginating backwards, are there more items?"
            ),
            "startCursor": GraphQLField(GraphQLString, description="When paginating backwards, the cursor to continue."),
            "endCursor": GraphQLField(GraphQLString, description="When paginating forwards, the cursor to continue."),
        },
        description="Information about pagination in a connection.",
    )


def edge_type(name: str, node_type: GraphQLOutputType) -> GraphQLObjectType:
    return GraphQLObjectType(
        f"{name}Edge",
        {
            "node": GraphQLField(node_type, description="The item at the end of the edge"),
            "cursor": GraphQLField(GraphQLNonNull(GraphQLString), description="A cursor for use in pagination"),
        },
        description="An edge in a connection.",
    )


def connection_type(name: str, edge: GraphQLObjectType, page_info: GraphQLObjectType) -> GraphQLObjectType:
    return GraphQLObjectType(
        f"{name}Connection",
        {
            "edges": GraphQLField(GraphQLList(edge), description="A list of edges."),
            "pageInfo": GraphQLField(GraphQLNonNull(page_info), description="Information to aid in pagination."),
        },
        description="A connection to a list of items.",
    )


def connection_arguments() -> dict[str, GraphQLArgument]:
    return {
        "before": GraphQLArgument(GraphQLString),
        "after": GraphQLArgument(GraphQLString),
        "first": GraphQLArgument(GraphQLInt),
        "last": GraphQLArgument(GraphQLInt),
    }
