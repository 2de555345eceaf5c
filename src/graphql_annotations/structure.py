"""Read-only views over the classes and members that make up a type graph.

Nothing here knows about GraphQL types; it only answers which members of a
class are exposed, under which name, with which annotations.
"""

import inspect
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, get_origin, get_type_hints

from graphql_annotations.annotations import (
    FieldOptions,
    StrategyRef,
    TypeOptions,
    get_attribute_options,
    get_field_options,
    get_legacy_deprecation,
    get_type_options,
)
from graphql_annotations.exceptions import UnresolvableTypeError

# ``get``/``is``/``set`` followed by a word boundary: getName, get_name, isActive
ACCESSOR_PREFIX = re.compile(r"^(?:get|is|set)(?=[A-Z_])_?")


def derive_method_name(name: str) -> str:
    """Strip an accessor prefix from a method name and lower-case its first letter.

    ``getFoo`` and ``get_foo`` become ``foo``, ``isFoo`` becomes ``foo`` and
    ``setFoo`` becomes ``foo``. Names without such a prefix only get their
    first letter lower-cased.

    The rest of the name keeps its casing, so ``getFirstName`` becomes
    ``firstName`` while ``get_first_name`` becomes ``first_name``. Converting
    snake_case names to camelCase is left to ``BuilderSettings.field_case``.
    """
    stripped = ACCESSOR_PREFIX.sub("", name, count=1) or name
    return stripped[0].lower() + stripped[1:]


def furthest_declaring_type(
    cls: type,
    name: str,
    accept: Callable[[Any], bool] | None = None,
) -> type | None:
    """Return the most distant ancestor of ``cls`` that declares ``name`` itself.

    The walk goes up the method resolution order, so superclasses are visited
    before the interfaces they come after. ``object`` is never a declaring type.
    With ``accept``, only declarations for which it returns true count, and
    nearer ancestors are used when the more distant ones are rejected.
    """
    declaring = None
    for ancestor in cls.__mro__:
        if ancestor is object:
            continue
        if name in vars(ancestor) and (accept is None or accept(vars(ancestor)[name])):
            declaring = ancestor
    return declaring


def _is_marked_function(value: Any) -> bool:
    return inspect.isfunction(value) and get_field_options(value) is not None


def is_interface(cls: type) -> bool:
    options = get_type_options(cls)
    return options is not None and options.interface


def is_structural_class(annotation: Any) -> bool:
    """Whether ``annotation`` is a user class that can become an object or interface type."""
    return (
        isinstance(annotation, type)
        and not issubclass(annotation, Enum)
        and annotation.__module__ not in ("builtins", "typing", "collections.abc")
    )


@dataclass(frozen=True)
class StructuralType:
    """A class or interface under introspection."""

    cls: type
    options: TypeOptions | None

    @classmethod
    def of(cls, klass: type) -> "StructuralType":
        return cls(klass, get_type_options(klass))

    @property
    def name(self) -> str:
        if self.options is not None and self.options.name:
            return self.options.name
        return self.cls.__name__

    @property
    def description(self) -> str | None:
        return self.options.description if self.options is not None else None

    @property
    def is_interface(self) -> bool:
        return self.options is not None and self.options.interface

    @property
    def type_resolver(self) -> StrategyRef | None:
        return self.options.type_resolver if self.options is not None else None

    def interfaces(self) -> list["StructuralType"]:
        """Interfaces this class implements directly."""
        return [StructuralType.of(base) for base in self.cls.__bases__ if is_interface(base)]

    def methods(self) -> list["MemberDescriptor"]:
        """Exposed methods, in base-first definition order.

        A method of an interface is exposed when it is marked. A method of a
        class is exposed when it is marked, or when an ancestor declaring a
        method of the same name marked it there. The furthest such ancestor
        supplies the options.
        """
        members = []
        for name in _iter_member_names(self.cls):
            function = _lookup_function(self.cls, name)
            if function is None:
                continue
            options = get_field_options(function)
            origin = function
            if options is None and not self.is_interface:
                declaring = furthest_declaring_type(self.cls, name, _is_marked_function)
                if declaring is not None:
                    origin = vars(declaring)[name]
                    options = get_field_options(origin)
            if options is not None:
                members.append(MemberDescriptor.for_method(self.cls, name, function, origin, options))
        return members

    def attributes(self) -> list["MemberDescriptor"]:
        """Exposed attributes, in base-first definition order.

        Annotations are evaluated in the module of the class declaring them,
        including forward references nested in generics such as
        ``list["Tree"]``.
        """
        members: dict[str, MemberDescriptor] = {}
        for ancestor in reversed(self.cls.__mro__):
            if ancestor is object:
                continue
            hints = _type_hints(ancestor, self.cls.__qualname__)
            for name in inspect.get_annotations(ancestor):
                annotation = hints[name]
                if name.startswith("_") or get_origin(annotation) is ClassVar or annotation is ClassVar:
                    continue
                options = get_attribute_options(annotation)
                if options is not None:
                    members[name] = MemberDescriptor.for_attribute(self.cls, name, annotation, options)
                else:
                    members.pop(name, None)
        return list(members.values())

    def members(self) -> list["MemberDescriptor"]:
        """Methods first, then attributes."""
        return self.methods() + self.attributes()


@dataclass(frozen=True)
class MemberDescriptor:
    """A method or attribute selected for exposure.

    Attributes:
        owner: The class being built.
        python_name: Name of the member on the class.
        options: Field options, taken from the furthest declaration for inherited methods.
        annotation: Return annotation of a method or annotation of an attribute.
        function: The method resolved on ``owner`` (None for attributes).
        parameter_hints: Resolved parameter annotations of a method.
        deprecation: Reason from a ``@deprecated`` marker, if any.
    """

    owner: type
    python_name: str
    options: FieldOptions
    annotation: Any
    function: Callable[..., Any] | None = None
    parameter_hints: dict[str, Any] | None = None
    deprecation: str | None = None

    @classmethod
    def for_method(
        cls,
        owner: type,
        name: str,
        function: Callable[..., Any],
        origin: Callable[..., Any],
        options: FieldOptions,
    ) -> "MemberDescriptor":
        location = f"{owner.__qualname__}.{name}"
        hints = _type_hints(function, location)
        if "return" not in hints and origin is not function:
            hints = {**_type_hints(origin, location), **hints}
        annotation = hints.pop("return", inspect.Signature.empty)
        return cls(
            owner=owner,
            python_name=name,
            options=options,
            annotation=annotation,
            function=function,
            parameter_hints=hints,
            deprecation=get_legacy_deprecation(function) or get_legacy_deprecation(origin),
        )

    @classmethod
    def for_attribute(cls, owner: type, name: str, annotation: Any, options: FieldOptions) -> "MemberDescriptor":
        return cls(owner=owner, python_name=name, options=options, annotation=annotation)

    @property
    def is_method(self) -> bool:
        return self.function is not None

    @property
    def name(self) -> str:
        """The explicit name, else the name derived from the Python name."""
        if self.options.name:
            return self.options.name
        if self.is_method:
            return derive_method_name(self.python_name)
        return self.python_name

    @property
    def location(self) -> str:
        return f"{self.owner.__qualname__}.{self.python_name}"

    def parameters(self) -> list[inspect.Parameter]:
        """Parameters of a method that the caller supplies, without ``self``."""
        if self.function is None:
            return []
        parameters = list(inspect.signature(self.function).parameters.values())[1:]
        return [p for p in parameters if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)]


def _iter_member_names(cls: type) -> Iterator[str]:
    seen: set[str] = set()
    for ancestor in reversed(cls.__mro__):
        if ancestor is object:
            continue
        for name in vars(ancestor):
            if name not in seen and not name.startswith("_"):
                seen.add(name)
                yield name


def _lookup_function(cls: type, name: str) -> Callable[..., Any] | None:
    """The plain instance method ``name`` resolves to on ``cls``; static and class methods are skipped."""
    for ancestor in cls.__mro__:
        if name in vars(ancestor):
            raw = vars(ancestor)[name]
            return raw if inspect.isfunction(raw) else None
    return None


def _type_hints(obj: Any, location: str) -> dict[str, Any]:
    """Evaluated annotations of a function or class, with extras kept."""
    try:
        return get_type_hints(obj, include_extras=True)
    except (NameError, SyntaxError, TypeError) as error:
        raise UnresolvableTypeError(f"{location}: Cannot resolve annotations: {error}") from error
