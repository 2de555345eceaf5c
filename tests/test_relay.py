from typing import Any

import pytest
from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLInt,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
    OperationDefinitionNode,
    parse,
)

from graphql_annotations.exceptions import ClientMutationIdError
from graphql_annotations.relay import (
    client_mutation_id_from_operation,
    mutation_title,
    mutation_with_client_mutation_id,
    resolve_client_mutation_id,
)

ACCOUNT = GraphQLObjectType(
    "Account",
    {
        "id": GraphQLField(GraphQLNonNull(GraphQLString)),
        "balance": GraphQLField(GraphQLInt, resolve=lambda source, info: 100),
    },
    description="A bank account",
)


def operation(source: str) -> OperationDefinitionNode:
    (definition,) = parse(source).definitions
    assert isinstance(definition, OperationDefinitionNode)
    return definition


class TestMutationTitle:
    @pytest.mark.parametrize(
        "method_name,title",
        [
            ("createUser", "CreateUser"),
            ("create_user", "CreateUser"),
            ("openBankAccount", "OpenBankAccount"),
            ("reset", "Reset"),
            ("_private_thing", "PrivateThing"),
        ],
    )
    def test_title(self, method_name: str, title: str) -> None:
        assert mutation_title(method_name) == title


class TestMutationWithClientMutationId:
    def test_input_and_payload(self) -> None:
        relay = mutation_with_client_mutation_id(
            "OpenAccount",
            {
                "owner": GraphQLArgument(GraphQLNonNull(GraphQLString), description="Account owner"),
                "deposit": GraphQLArgument(GraphQLInt, default_value=10),
            },
            ACCOUNT,
        )

        assert relay.input_type.name == "OpenAccountInput"
        assert list(relay.input_type.fields) == ["owner", "deposit", "clientMutationId"]
        assert relay.input_type.fields["owner"].description == "Account owner"
        assert relay.input_type.fields["deposit"].default_value == 10
        assert str(relay.input_type.fields["clientMutationId"].type) == "String!"

        assert relay.payload_type.name == "OpenAccountPayload"
        assert relay.payload_type.description == "A bank account"
        assert list(relay.payload_type.fields) == ["id", "balance", "clientMutationId"]
        assert relay.payload_type.fields["balance"].resolve is ACCOUNT.fields["balance"].resolve
        assert relay.payload_type.fields["clientMutationId"].resolve is resolve_client_mutation_id

        assert list(relay.arguments) == ["input"]
        assert relay.arguments["input"].type.of_type is relay.input_type  # type: ignore[attr-defined]

    def test_payload_fields_are_copies(self) -> None:
        relay = mutation_with_client_mutation_id("Touch", {}, ACCOUNT)
        assert relay.payload_type.fields["id"] is not ACCOUNT.fields["id"]
        assert "clientMutationId" not in ACCOUNT.fields


class TestClientMutationIdFromOperation:
    """Reading the token from the first selection's input argument."""

    def test_object_literal(self) -> None:
        mutation = operation('mutation { openAccount(input: {owner: "Ann", clientMutationId: "abc123"}) { id } }')
        assert client_mutation_id_from_operation(mutation) == "abc123"

    def test_variable_inside_the_literal(self) -> None:
        mutation = operation(
            'mutation ($token: String!) { openAccount(input: {owner: "Ann", clientMutationId: $token}) { id } }'
        )
        assert client_mutation_id_from_operation(mutation, {"token": "from-variable"}) == "from-variable"

    def test_input_variable(self) -> None:
        mutation = operation("mutation ($input: OpenAccountInput!) { openAccount(input: $input) { id } }")
        variables: dict[str, Any] = {"input": {"owner": "Ann", "clientMutationId": "xyz"}}
        assert client_mutation_id_from_operation(mutation, variables) == "xyz"

    @pytest.mark.parametrize(
        "source,variables,message",
        [
            ("mutation { ...Fragment }", None, "first selection of the operation must be a mutation field"),
            ("mutation { openAccount { id } }", None, "has no 'input' argument"),
            ('mutation { openAccount(owner: "Ann") { id } }', None, "has no 'input' argument"),
            ('mutation { openAccount(input: "abc") { id } }', None, "must be an object"),
            ('mutation { openAccount(input: {owner: "Ann"}) { id } }', None, "has no clientMutationId"),
            ("mutation { openAccount(input: {clientMutationId: 5}) { id } }", None, "has no clientMutationId"),
            ("mutation ($input: OpenAccountInput!) { openAccount(input: $input) { id } }", {}, "variable of"),
        ],
    )
    def test_unexpected_shapes(self, source: str, variables: dict[str, Any] | None, message: str) -> None:
        with pytest.raises(ClientMutationIdError, match=message):
            client_mutation_id_from_operation(operation(source), variables)
