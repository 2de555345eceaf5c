from graphql import (
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInputType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLType,
    is_input_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
)

from graphql_annotations.exceptions import ConfigurationError


def input_object(
    output_type: GraphQLObjectType,
    *,
    suffix: str = "",
    mirrored: dict[str, GraphQLInputObjectType] | None = None,
) -> GraphQLInputObjectType:
    """
    Mirror an output object type as an input object type.

    The mirror has the same name (plus ``suffix``), description and field
    names. Object-typed fields are mirrored again, list and non-null wrappers
    are kept, every other field type is reused as it is.

    Every call mirrors afresh unless ``mirrored`` is given: a mapping of mirror
    names to mirrors that is consulted first and filled in as types are
    mirrored. Within one call, a type met again while its fields are being
    mirrored is reused, so self-referencing types terminate.

    Args:
        output_type: The object type to mirror.
        suffix: Appended to the names of all mirrors.
        mirrored: Mirrors to share, keyed by name.

    Returns:
        GraphQLInputObjectType: The mirror of ``output_type``.

    Raises:
        ConfigurationError: If a field has a type that cannot be used as an input, such as an interface.
    """
    cache: dict[str, GraphQLInputObjectType] = {} if mirrored is None else mirrored
    name = f"{output_type.name}{suffix}"
    existing = cache.get(name)
    if existing is not None:
        return existing

    def fields() -> dict[str, GraphQLInputField]:
        return {
            field_name: GraphQLInputField(
                mirror_type(field.type, suffix=suffix, mirrored=cache, location=f"{output_type.name}.{field_name}"),
                description=field.description,
            )
            for field_name, field in output_type.fields.items()
        }

    mirror = GraphQLInputObjectType(name, fields, description=output_type.description)
    cache[name] = mirror
    return mirror


def mirror_type(
    type_: GraphQLType,
    *,
    suffix: str = "",
    mirrored: dict[str, GraphQLInputObjectType] | None = None,
    location: str | None = None,
) -> GraphQLInputType:
    """Input counterpart of a (possibly wrapped) output type."""
    if is_non_null_type(type_):
        return GraphQLNonNull(mirror_type(type_.of_type, suffix=suffix, mirrored=mirrored, location=location))  # type: ignore[attr-defined]
    if is_list_type(type_):
        return GraphQLList(mirror_type(type_.of_type, suffix=suffix, mirrored=mirrored, location=location))  # type: ignore[attr-defined]
    if is_object_type(type_):
        return input_object(type_, suffix=suffix, mirrored=mirrored)  # type: ignore[arg-type]
    if not is_input_type(type_):
        where = f" (at {location})" if location else ""
        raise ConfigurationError(f"{type_} cannot be used as an input type{where}")
    return type_  # type: ignore[return-value]
