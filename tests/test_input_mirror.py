import pytest
from graphql import (
    GraphQLField,
    GraphQLInputObjectType,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
)

from graphql_annotations.exceptions import ConfigurationError
from graphql_annotations.input_mirror import input_object, mirror_type

ADDRESS = GraphQLObjectType(
    "Address",
    {
        "street": GraphQLField(GraphQLString, description="Street and number"),
        "city": GraphQLField(GraphQLNonNull(GraphQLString)),
    },
    description="A postal address",
)

PERSON = GraphQLObjectType(
    "Person",
    lambda: {
        "name": GraphQLField(GraphQLNonNull(GraphQLString)),
        "addresses": GraphQLField(GraphQLList(GraphQLNonNull(ADDRESS))),
        "friends": GraphQLField(GraphQLList(PERSON)),
    },
)


def shape(input_type: GraphQLInputObjectType) -> dict[str, str]:
    return {name: str(field.type) for name, field in input_type.fields.items()}


class TestInputObject:
    def test_same_name_description_and_fields(self) -> None:
        address = input_object(ADDRESS)
        assert isinstance(address, GraphQLInputObjectType)
        assert address.name == "Address"
        assert address.description == "A postal address"
        assert shape(address) == {"street": "String", "city": "String!"}
        assert address.fields["street"].description == "Street and number"

    def test_mirroring_twice_gives_independent_equal_types(self) -> None:
        first = input_object(ADDRESS)
        second = input_object(ADDRESS)
        assert first is not second
        assert first.name == second.name
        assert shape(first) == shape(second)

    def test_nested_objects_are_mirrored(self) -> None:
        person = input_object(PERSON)
        addresses = person.fields["addresses"].type
        assert str(addresses) == "[Address!]"
        assert isinstance(addresses.of_type.of_type, GraphQLInputObjectType)

    def test_self_reference_terminates(self) -> None:
        person = input_object(PERSON)
        assert person.fields["friends"].type.of_type is person

    def test_suffix(self) -> None:
        person = input_object(PERSON, suffix="Input")
        assert person.name == "PersonInput"
        assert shape(person)["addresses"] == "[AddressInput!]"

    def test_shared_mirrors(self) -> None:
        mirrored: dict[str, GraphQLInputObjectType] = {}
        person = input_object(PERSON, mirrored=mirrored)
        _ = person.fields
        assert set(mirrored) == {"Person", "Address"}
        assert input_object(ADDRESS, mirrored=mirrored) is mirrored["Address"]

    def test_interface_fields_cannot_be_mirrored(self) -> None:
        named = GraphQLInterfaceType("Named", {"name": GraphQLField(GraphQLString)})
        owner = GraphQLObjectType("Owner", {"pet": GraphQLField(named)})
        mirror = input_object(owner)
        with pytest.raises(TypeError, match=r"Named cannot be used as an input type \(at Owner.pet\)"):
            _ = mirror.fields


class TestMirrorType:
    def test_wrappers_are_kept(self) -> None:
        mirrored = mirror_type(GraphQLNonNull(GraphQLList(GraphQLNonNull(ADDRESS))))
        assert str(mirrored) == "[Address!]!"

    def test_scalars_are_reused(self) -> None:
        assert mirror_type(GraphQLString) is GraphQLString

    def test_interfaces_are_rejected(self) -> None:
        named = GraphQLInterfaceType("Named", {"name": GraphQLField(GraphQLString)})
        with pytest.raises(ConfigurationError, match="Named cannot be used as an input type"):
            mirror_type(named)
