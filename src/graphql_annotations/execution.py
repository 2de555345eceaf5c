"""Execution hooks for schemas built from annotated classes.

Pass ``EnhancedExecutionContext`` as ``execution_context_class`` to
graphql-core's ``graphql``, ``graphql_sync`` or ``execute``::

    result = graphql_sync(schema, source, execution_context_class=EnhancedExecutionContext)
"""

from typing import Any

from graphql import ExecutionContext, FieldNode, GraphQLObjectType, GraphQLOutputType, GraphQLResolveInfo, located_error
from graphql.pyutils import AwaitableOrValue, Path

from graphql_annotations.optional import Maybe
from graphql_annotations.relay import CLIENT_MUTATION_ID, client_mutation_id_from_operation


class EnhancedExecutionContext(ExecutionContext):
    """
    Execution context that unwraps ``Maybe`` results and echoes client mutation ids.

    - Every resolved ``Maybe`` is replaced by its value, or None when empty,
      before the usual completion.
    - A field named ``clientMutationId`` is not resolved at all: its value is
      read from the ``input`` argument of the operation's first selection.
    """

    def execute_field(
        self,
        parent_type: GraphQLObjectType,
        source: Any,
        field_nodes: list[FieldNode],
        path: Path,
    ) -> AwaitableOrValue[Any]:
        field_def = parent_type.fields.get(field_nodes[0].name.value)
        if field_nodes[0].name.value != CLIENT_MUTATION_ID or field_def is None:
            return super().execute_field(parent_type, source, field_nodes, path)

        info = self.build_resolve_info(field_def, field_nodes, parent_type, path)
        try:
            client_mutation_id = client_mutation_id_from_operation(self.operation, self.variable_values)
            return self.complete_value(field_def.type, field_nodes, info, path, client_mutation_id)
        except Exception as raw_error:
            error = located_error(raw_error, field_nodes, path.as_list())
            self.handle_field_error(error, field_def.type)
            return None

    def complete_value(
        self,
        return_type: GraphQLOutputType,
        field_nodes: list[FieldNode],
        info: GraphQLResolveInfo,
        path: Path,
        result: Any,
    ) -> AwaitableOrValue[Any]:
        if isinstance(result, Maybe):
            result = result.or_else(None)
        return super().complete_value(return_type, field_nodes, info, path, result)
