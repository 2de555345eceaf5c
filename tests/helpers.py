from typing import Any

from graphql import ExecutionResult, GraphQLNamedType, GraphQLSchema, graphql_sync, is_wrapping_type

from graphql_annotations.execution import EnhancedExecutionContext


def named(type_: Any) -> GraphQLNamedType:
    """Strip list and non-null wrappers."""
    while is_wrapping_type(type_):
        type_ = type_.of_type
    return type_  # type: ignore[no-any-return]


def run(
    schema: GraphQLSchema,
    source: str,
    root_value: Any = None,
    variable_values: dict[str, Any] | None = None,
    context_value: Any = None,
) -> ExecutionResult:
    """Execute ``source`` with the enhanced execution context."""
    return graphql_sync(
        schema,
        source,
        root_value=root_value,
        variable_values=variable_values,
        context_value=context_value,
        execution_context_class=EnhancedExecutionContext,
    )
