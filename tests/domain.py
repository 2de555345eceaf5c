"""A small annotated domain shared by the execution and command line tests."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from graphql_annotations.annotations import (
    graphql_argument,
    graphql_field,
    graphql_interface,
    graphql_object,
)
from graphql_annotations.fetchers import DataFetchingEnvironment
from graphql_annotations.optional import Maybe
from graphql_annotations.type_functions import ID


class Role(Enum):
    ADMIN = "admin"
    MEMBER = "member"


@graphql_interface(type_resolver="class_name", description="Something with a name")
class Named:
    @graphql_field(non_null=True)
    def get_name(self) -> str:
        raise NotImplementedError


@graphql_object(description="A registered user")
class User(Named):
    id: Annotated[ID, graphql_field(non_null=True)]
    role: Annotated[Role, graphql_field()]
    friends: Annotated[list[User], graphql_field(connection=True, description="Friends of this user")]

    def __init__(self, id: str, name: str, role: Role = Role.MEMBER, friends: list[User] | None = None) -> None:
        self.id = ID(id)
        self._name = name
        self.role = role
        self.friends = friends or []

    def get_name(self):  # type: ignore[no-untyped-def]
        return self._name

    @graphql_field(description="Greets the user")
    def greet(
        self,
        env: DataFetchingEnvironment,
        greeting: Annotated[str, graphql_argument(description="Word to greet with")] = "Hello",
    ) -> str:
        punctuation = (env.context or {}).get("punctuation", "!")
        return f"{greeting}, {self._name}{punctuation}"


class Bot(Named):
    def __init__(self, name: str, version: int = 1) -> None:
        self._name = name
        self._version = version

    def get_name(self):  # type: ignore[no-untyped-def]
        return self._name

    @graphql_field()
    def get_version(self) -> int:
        return self._version


def sample_users() -> list[User]:
    ann = User("1", "Ann", Role.ADMIN)
    bob = User("2", "Bob")
    cid = User("3", "Cid")
    dee = User("4", "Dee")
    ann.friends = [bob, cid, dee]
    bob.friends = [ann]
    return [ann, bob, cid, dee]


class Query:
    def __init__(self, users: list[User] | None = None) -> None:
        self._users = sample_users() if users is None else users

    @graphql_field(connection=True, description="All users")
    def get_users(self) -> list[User]:
        return self._users

    @graphql_field()
    def get_user(self, id: Annotated[ID, graphql_argument(non_null=True)]) -> Maybe[User]:
        return Maybe.of_nullable(next((user for user in self._users if user.id == id), None))

    @graphql_field()
    def get_named(self) -> list[Named]:
        return [*self._users[:1], Bot("R2", 2)]


class Mutation:
    @graphql_field(name="createUser", relay_mutation=True, description="Registers a user")
    def create_user(
        self,
        name: Annotated[str, graphql_argument(non_null=True)],
        role: Role = Role.MEMBER,
    ) -> User:
        return User("99", name, role)
