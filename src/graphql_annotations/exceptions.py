"""Errors raised while building a type graph and while executing against it."""


class GraphQLAnnotationsError(Exception):
    """Base class for every error raised by graphql-annotations."""


class ConfigurationError(GraphQLAnnotationsError, ValueError):
    """Raised when class or member metadata cannot be turned into a GraphQL type.

    Configuration errors abort the whole build. The message names the
    offending class and member, prefixed with the path of members that led
    to it (e.g. ``Query.owner: Owner.pet: ...``).
    """

    def located(self, location: str) -> "ConfigurationError":
        """Return a copy of this error whose message is prefixed with ``location``."""
        return type(self)(f"{location}: {self}")


class MissingTypeResolverError(ConfigurationError):
    """Raised when an interface has no type resolver attached."""


class UnresolvableTypeError(ConfigurationError):
    """Raised when a type annotation has no GraphQL counterpart."""


class RelayMutationError(ConfigurationError):
    """Raised when a Relay mutation method does not return an object type."""


class ConnectionWrapperError(ConfigurationError):
    """Raised when a connection wrapper cannot be constructed from one collection argument."""


class RegistryError(ConfigurationError):
    """Raised when a strategy reference is not registered."""


class ClientMutationIdError(GraphQLAnnotationsError):
    """Raised when a request does not carry a ``clientMutationId`` where one is expected.

    The token is read from the first top-level selection of the operation,
    which must be a field with an ``input`` object argument holding a
    ``clientMutationId`` string.
    """
