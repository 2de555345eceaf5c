"""Relay mutations with a client mutation id.

A method marked with ``relay_mutation=True``, e.g. ``create_user(name, email) -> User``,
becomes::

    createUser(input: CreateUserInput!): CreateUserPayload

    input CreateUserInput { name: String, email: String, clientMutationId: String! }
    type CreateUserPayload { <fields of User>, clientMutationId: String! }

The ``clientMutationId`` of the payload echoes the one sent in the request.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from graphql import (
    FieldNode,
    GraphQLArgument,
    GraphQLField,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLResolveInfo,
    GraphQLString,
    ObjectValueNode,
    OperationDefinitionNode,
    StringValueNode,
    VariableNode,
)

from graphql_annotations.exceptions import ClientMutationIdError

CLIENT_MUTATION_ID = "clientMutationId"
INPUT_ARGUMENT = "input"


@dataclass(frozen=True)
class RelayMutationSpec:
    input_type: GraphQLInputObjectType
    payload_type: GraphQLObjectType
    arguments: dict[str, GraphQLArgument]


def mutation_title(method_name: str) -> str:
    """PascalCase prefix of the synthesized types: ``createUser`` and ``create_user`` give ``CreateUser``."""
    return "".join(part[:1].upper() + part[1:] for part in method_name.split("_") if part)


def mutation_with_client_mutation_id(
    title: str,
    arguments: dict[str, GraphQLArgument],
    output_type: GraphQLObjectType,
    description: str | None = None,
) -> RelayMutationSpec:
    """
    Wrap the arguments and the output of a mutation into an input and a payload type.

    Args:
        title: Prefix of the ``<title>Input`` and ``<title>Payload`` types.
        arguments: The mutation's original arguments, one input field each.
        output_type: The object type the mutation returns; its fields are copied into the payload.
        description: Description of the payload type.

    Returns:
        RelayMutationSpec: The input type, the payload type and the single ``input`` argument.
    """
    input_fields = {
        name: GraphQLInputField(argument.type, default_value=argument.default_value, description=argument.description)
        for name, argument in arguments.items()
    }
    input_fields[CLIENT_MUTATION_ID] = GraphQLInputField(GraphQLNonNull(GraphQLString))
    input_type = GraphQLInputObjectType(f"{title}Input", input_fields)

    def payload_fields() -> dict[str, GraphQLField]:
        fields = {name: GraphQLField(**field.to_kwargs()) for name, field in output_type.fields.items()}
        fields[CLIENT_MUTATION_ID] = GraphQLField(GraphQLNonNull(GraphQLString), resolve=resolve_client_mutation_id)
        return fields

    payload_type = GraphQLObjectType(
        f"{title}Payload",
        payload_fields,
        description=description or output_type.description,
    )
    return RelayMutationSpec(
        input_type=input_type,
        payload_type=payload_type,
        arguments={INPUT_ARGUMENT: GraphQLArgument(GraphQLNonNull(input_type))},
    )


def resolve_client_mutation_id(source: Any, info: GraphQLResolveInfo) -> str:
    return client_mutation_id_from_operation(info.operation, info.variable_values)


def client_mutation_id_from_operation(
    operation: OperationDefinitionNode, variable_values: Mapping[str, Any] | None = None
) -> str:
    """
    Read the client mutation id sent with a mutation request.

    The operation's first selection must be a field with an ``input``
    argument: an object literal with a ``clientMutationId`` string (or
    variable), or a variable holding such an object.

    Raises:
        ClientMutationIdError: If the request does not have that shape.
    """
    selections = operation.selection_set.selections
    if not selections or not isinstance(selections[0], FieldNode):
        raise ClientMutationIdError("The first selection of the operation must be a mutation field")
    field = selections[0]

    argument = next((arg for arg in field.arguments or () if arg.name.value == INPUT_ARGUMENT), None)
    if argument is None:
        raise ClientMutationIdError(f"Mutation field '{field.name.value}' has no '{INPUT_ARGUMENT}' argument")

    variables = variable_values or {}
    value = argument.value
    if isinstance(value, VariableNode):
        return _from_input_value(variables.get(value.name.value), field.name.value)
    if not isinstance(value, ObjectValueNode):
        raise ClientMutationIdError(f"The '{INPUT_ARGUMENT}' argument of '{field.name.value}' must be an object")

    token = next((f.value for f in value.fields if f.name.value == CLIENT_MUTATION_ID), None)
    if isinstance(token, StringValueNode):
        return token.value
    if isinstance(token, VariableNode) and isinstance(variables.get(token.name.value), str):
        return variables[token.name.value]
    raise ClientMutationIdError(f"The '{INPUT_ARGUMENT}' argument of '{field.name.value}' has no {CLIENT_MUTATION_ID}")


def _from_input_value(value: Any, field_name: str) -> str:
    token = value.get(CLIENT_MUTATION_ID) if isinstance(value, Mapping) else None
    if not isinstance(token, str):
        raise ClientMutationIdError(f"The '{INPUT_ARGUMENT}' variable of '{field_name}' has no {CLIENT_MUTATION_ID}")
    return token
