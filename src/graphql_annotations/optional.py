"""A container for values that may be absent.

Resolvers may return ``Maybe`` values; the enhanced execution context
unwraps them before completion, and the default type function resolves
``Maybe[T]`` to the GraphQL type of ``T``.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    value: T | None = None
    is_present: bool = False

    @classmethod
    def of(cls, value: T) -> "Maybe[T]":
        return cls(value, True)

    @classmethod
    def empty(cls) -> "Maybe[T]":
        return cls()

    @classmethod
    def of_nullable(cls, value: T | None) -> "Maybe[T]":
        return cls.empty() if value is None else cls.of(value)

    def get(self) -> T:
        if not self.is_present:
            raise ValueError("No value present")
        return self.value  # type: ignore[return-value]

    def or_else(self, default: T | None) -> T | None:
        return self.value if self.is_present else default
