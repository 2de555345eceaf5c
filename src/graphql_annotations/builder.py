"""Build graphql-core types from annotated classes.

Example::

    @graphql_object(description="A person")
    class Person:
        name: Annotated[str, graphql_field(non_null=True)]

    person_type = object_type(Person)  # type Person { name: String! }
"""

import inspect
from collections.abc import Iterable
from enum import Enum
from typing import Annotated, Any, get_args, get_origin

from graphql import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLField,
    GraphQLInputObjectType,
    GraphQLInputType,
    GraphQLInterfaceType,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLSchema,
    GraphQLType,
    Undefined,
    get_nullable_type,
    is_input_type,
    is_object_type,
    is_output_type,
)

from graphql_annotations import log
from graphql_annotations.annotations import (
    ArgumentOptions,
    ConnectionOptions,
    FieldOptions,
    get_argument_options,
    get_type_options,
)
from graphql_annotations.connection import (
    PAGE_INFO_NAME,
    ConnectionSpec,
    check_connection_wrapper,
    connection_arguments,
    connection_type,
    edge_type,
    is_connection_candidate,
    page_info_type,
)
from graphql_annotations.exceptions import (
    ConfigurationError,
    MissingTypeResolverError,
    RelayMutationError,
    UnresolvableTypeError,
)
from graphql_annotations.fetchers import (
    AttributeDataFetcher,
    ConnectionDataFetcher,
    DataFetcher,
    DataFetchingEnvironment,
    MethodDataFetcher,
    ParameterBinding,
    RelayMutationDataFetcher,
    as_data_fetcher,
)
from graphql_annotations.input_mirror import mirror_type
from graphql_annotations.registry import Registry, StrategyKind, default_registry
from graphql_annotations.relay import CLIENT_MUTATION_ID, mutation_title, mutation_with_client_mutation_id
from graphql_annotations.settings import BuilderSettings, convert_name
from graphql_annotations.structure import MemberDescriptor, StructuralType
from graphql_annotations.type_functions import TypeFunction


class TypeGraphBuilder:
    """
    Builds the GraphQL types of annotated classes.

    One builder is one build. Named types are kept by name for the lifetime
    of the builder: a type is registered before its fields are built, so a
    type referenced twice is built once and self-referencing classes
    terminate. Separate builders share nothing.
    """

    def __init__(self, settings: BuilderSettings | None = None, registry: Registry | None = None) -> None:
        self.settings = settings or BuilderSettings()
        self.registry = registry or default_registry
        self.default_type_function: TypeFunction = self.registry.create(StrategyKind.TYPE_FUNCTION, "default")
        self._types: dict[str, GraphQLNamedType] = {}
        self._sources: dict[str, type] = {}
        self._input_types: dict[str, GraphQLInputObjectType] = {}

    @property
    def types(self) -> list[GraphQLNamedType]:
        """Every named output type built so far, in build order."""
        return list(self._types.values())

    def named_type(self, cls: type) -> GraphQLNamedType:
        if issubclass(cls, Enum):
            return self.enum_type(cls)
        if StructuralType.of(cls).is_interface:
            return self.interface_type(cls)
        return self.object_type(cls)

    def object_type(self, cls: type) -> GraphQLObjectType:
        """
        Build the object type of a class.

        Exposed methods come first, then exposed attributes. Interfaces the
        class implements directly are attached when they have a type resolver.

        Raises:
            ConfigurationError: If the class or one of its members cannot be mapped.
        """
        structural = StructuralType.of(cls)
        if structural.is_interface:
            raise ConfigurationError(f"{cls.__qualname__} is an interface, not an object type")
        existing = self._cached(structural)
        if existing is not None:
            return existing  # type: ignore[return-value]

        log.debug(f"Building object type {structural.name} from {cls.__qualname__}")
        fields: dict[str, GraphQLField] = {}
        object_type = GraphQLObjectType(
            structural.name,
            lambda: fields,
            interfaces=lambda: interfaces,
            description=structural.description,
        )
        self._register(object_type, cls)

        interfaces = [
            self.interface_type(interface.cls)
            for interface in structural.interfaces()
            if interface.type_resolver is not None
        ]
        fields.update(self._fields(structural))
        return object_type

    def interface_type(self, cls: type) -> GraphQLInterfaceType:
        """
        Build the interface type of a class marked with ``graphql_interface``.

        Raises:
            ConfigurationError: If the class is not an interface.
            MissingTypeResolverError: If the interface has no type resolver.
        """
        structural = StructuralType.of(cls)
        if not structural.is_interface:
            raise ConfigurationError(f"{cls.__qualname__} is not an interface")
        if structural.type_resolver is None:
            raise MissingTypeResolverError(
                f"Interface {cls.__qualname__} should have a type resolver, "
                "e.g. @graphql_interface(type_resolver=...)"
            )
        existing = self._cached(structural)
        if existing is not None:
            return existing  # type: ignore[return-value]

        log.debug(f"Building interface type {structural.name} from {cls.__qualname__}")
        fields: dict[str, GraphQLField] = {}
        interface_type = GraphQLInterfaceType(
            structural.name,
            lambda: fields,
            resolve_type=self.registry.create(StrategyKind.TYPE_RESOLVER, structural.type_resolver),
            description=structural.description,
        )
        self._register(interface_type, cls)
        fields.update(self._fields(structural))
        return interface_type

    def enum_type(self, cls: type[Enum]) -> GraphQLEnumType:
        options = get_type_options(cls)
        name = options.name if options is not None and options.name else cls.__name__
        existing = self._types.get(name)
        if existing is not None and self._sources.get(name) is cls:
            return existing  # type: ignore[return-value]
        enum_type = GraphQLEnumType(
            name,
            cls,
            names_as_values=None,
            description=options.description if options is not None else None,
        )
        self._register(enum_type, cls)
        return enum_type

    def input_type(self, type_: GraphQLType) -> GraphQLInputType:
        """Input counterpart of an argument type; object types are mirrored once per builder."""
        return mirror_type(type_, suffix=self.settings.input_type_suffix, mirrored=self._input_types)

    def field(self, member: MemberDescriptor) -> tuple[str, GraphQLField]:
        """
        Build the field of one exposed member.

        The output type is resolved by the member's type function, wrapped as
        non-null when asked, and replaced by a connection when the member is
        paginated. Methods get one argument per parameter; a Relay mutation
        collapses them into one ``input`` argument and returns a payload.

        Returns:
            tuple[str, GraphQLField]: The field name and the field.
        """
        options = member.options
        name = self.field_name(member)
        type_function = self.type_function(options)

        base_type = self._output_type(type_function, member.annotation, member)
        output_type: GraphQLOutputType = GraphQLNonNull(base_type) if options.non_null else base_type  # type: ignore[arg-type]

        arguments: dict[str, GraphQLArgument] = {}
        connection: ConnectionSpec | None = None
        if options.connection is not None:
            if is_connection_candidate(base_type):
                connection = self.connection(options.connection, base_type.of_type)  # type: ignore[attr-defined]
                output_type = connection.connection_type
                arguments.update(connection_arguments())
            else:
                log.warning(f"{member.location} is not a list of objects, ignoring its connection")

        fetcher: DataFetcher
        if member.is_method:
            method_arguments, bindings = self.arguments(member, type_function)
            fetcher = self.data_fetcher(options) or MethodDataFetcher(member.python_name, bindings)
            if options.relay_mutation:
                mutation_type = get_nullable_type(output_type)
                if not is_object_type(mutation_type):
                    raise RelayMutationError(
                        f"Relay mutation {member.location} should return an object type, not {output_type}"
                    )
                relay = mutation_with_client_mutation_id(
                    mutation_title(member.python_name), method_arguments, mutation_type
                )
                self._register(relay.payload_type)
                arguments.update(relay.arguments)
                output_type = relay.payload_type
                fetcher = RelayMutationDataFetcher(fetcher, CLIENT_MUTATION_ID)
            else:
                arguments.update(method_arguments)
        else:
            fetcher = self.data_fetcher(options) or AttributeDataFetcher(member.python_name)

        if connection is not None:
            fetcher = ConnectionDataFetcher(connection.wrapper, fetcher)

        log.debug(f"Built field {name} of {member.location}")
        return name, GraphQLField(
            output_type,
            arguments,
            fetcher,
            description=options.description,
            deprecation_reason=options.deprecate or member.deprecation,
        )

    def field_name(self, member: MemberDescriptor) -> str:
        if member.options.name:
            return member.options.name
        return convert_name(member.name, self.settings.field_case)

    def type_function(self, options: FieldOptions) -> TypeFunction:
        if options.type_function is None:
            return self.default_type_function
        return self.registry.create(StrategyKind.TYPE_FUNCTION, options.type_function)  # type: ignore[no-any-return]

    def data_fetcher(self, options: FieldOptions) -> DataFetcher | None:
        if options.data_fetcher is None:
            return None
        return as_data_fetcher(self.registry.create(StrategyKind.DATA_FETCHER, options.data_fetcher))

    def arguments(
        self, member: MemberDescriptor, type_function: TypeFunction
    ) -> tuple[dict[str, GraphQLArgument], list[ParameterBinding]]:
        """
        Build one argument per method parameter.

        A parameter annotated with ``DataFetchingEnvironment`` is injected at
        fetch time and gets no argument. Object types are mirrored as input types.

        Returns:
            tuple: The arguments by name and how each parameter is bound.
        """
        arguments: dict[str, GraphQLArgument] = {}
        bindings: list[ParameterBinding] = []
        hints = member.parameter_hints or {}
        for parameter in member.parameters():
            annotation = hints.get(parameter.name, inspect.Parameter.empty)
            if _strip_annotated(annotation) is DataFetchingEnvironment:
                bindings.append(ParameterBinding(parameter.name))
                continue
            if annotation is inspect.Parameter.empty:
                raise UnresolvableTypeError(f"Parameter '{parameter.name}' of {member.location} has no type annotation")

            options = get_argument_options(annotation) or ArgumentOptions()
            argument_type = self.input_type(type_function(annotation, self))
            if not is_input_type(argument_type):
                raise ConfigurationError(f"Parameter '{parameter.name}' of {member.location} is not an input type")
            if options.non_null:
                argument_type = GraphQLNonNull(argument_type)  # type: ignore[arg-type]

            if options.default_value is not None:
                default_value = self.registry.default_value(options.default_value)
            elif parameter.default is not inspect.Parameter.empty and parameter.default is not None:
                default_value = parameter.default
            else:
                default_value = Undefined

            name = options.name or parameter.name
            arguments[name] = GraphQLArgument(argument_type, default_value, options.description)
            bindings.append(ParameterBinding(parameter.name, name, annotation))
        return arguments, bindings

    def connection(self, options: ConnectionOptions, node_type: GraphQLObjectType) -> ConnectionSpec:
        """The edge and connection types of a paginated list of ``node_type``."""
        wrapper = self.registry.factory(StrategyKind.CONNECTION, options.wrapper or self.settings.default_connection)
        check_connection_wrapper(wrapper)

        name = options.name or node_type.name
        page_info = self._types.get(PAGE_INFO_NAME) or self._register(page_info_type())
        edge = self._types.get(f"{name}Edge") or self._register(edge_type(name, node_type))
        connection = self._types.get(f"{name}Connection") or self._register(
            connection_type(name, edge, page_info)  # type: ignore[arg-type]
        )
        return ConnectionSpec(wrapper, node_type, edge, connection)  # type: ignore[arg-type]

    def _output_type(self, type_function: TypeFunction, annotation: Any, member: MemberDescriptor) -> GraphQLType:
        if annotation is inspect.Signature.empty:
            raise UnresolvableTypeError(f"{member.location} has no return annotation")
        output_type = type_function(annotation, self)
        if not is_output_type(output_type):
            raise ConfigurationError(f"{member.location} resolves to {output_type}, which is not an output type")
        return output_type

    def _fields(self, structural: StructuralType) -> dict[str, GraphQLField]:
        fields: dict[str, GraphQLField] = {}
        try:
            members = structural.members()
        except ConfigurationError as error:
            log.error(f"Failed to read the members of {structural.cls.__qualname__}: {error}")
            raise
        for member in members:
            try:
                name, field = self.field(member)
                if name in fields:
                    raise ConfigurationError(f"Duplicate field name '{name}'")
            except ConfigurationError as error:
                log.error(f"Failed to build {member.location}: {error}")
                raise error.located(member.location) from error
            fields[name] = field
        return fields

    def _cached(self, structural: StructuralType) -> GraphQLNamedType | None:
        existing = self._types.get(structural.name)
        if existing is None:
            return None
        if self._sources.get(structural.name) is not structural.cls:
            raise ConfigurationError(
                f"Type name '{structural.name}' of {structural.cls.__qualname__} is already used by another type"
            )
        return existing

    def _register(self, named_type: GraphQLNamedType, source: type | None = None) -> GraphQLNamedType:
        if isinstance(named_type, GraphQLInputObjectType):
            return named_type
        existing = self._types.get(named_type.name)
        if existing is not None and existing is not named_type:
            raise ConfigurationError(f"Type name '{named_type.name}' is used by more than one type")
        self._types[named_type.name] = named_type
        if source is not None:
            self._sources[named_type.name] = source
        return named_type


def _strip_annotated(annotation: Any) -> Any:
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation


def object_type(
    cls: type, settings: BuilderSettings | None = None, registry: Registry | None = None
) -> GraphQLObjectType:
    """Build the object type of ``cls`` with a fresh builder."""
    return TypeGraphBuilder(settings, registry).object_type(cls)


def interface_type(
    cls: type, settings: BuilderSettings | None = None, registry: Registry | None = None
) -> GraphQLInterfaceType:
    """Build the interface type of ``cls`` with a fresh builder."""
    return TypeGraphBuilder(settings, registry).interface_type(cls)


def create_schema(
    query: type,
    mutation: type | None = None,
    types: Iterable[type] = (),
    settings: BuilderSettings | None = None,
    registry: Registry | None = None,
) -> GraphQLSchema:
    """
    Build a schema from root classes with one builder.

    Every type built along the way is added to the schema, so the object
    types implementing an interface are known even when no field returns
    them directly.

    Args:
        query: Class of the query root.
        mutation: Class of the mutation root.
        types: Further classes to build, e.g. implementations of interfaces.
        settings: Builder settings.
        registry: Strategy registry; the default registry when None.

    Returns:
        GraphQLSchema: The schema.
    """
    builder = TypeGraphBuilder(settings, registry)
    query_type = builder.object_type(query)
    mutation_type = builder.object_type(mutation) if mutation is not None else None
    for cls in types:
        builder.named_type(cls)
    log.info(f"Built {len(builder.types)} types")
    return GraphQLSchema(query_type, mutation_type, types=builder.types)
