"""Type registry.

Entity types are registered by name with a *thunk* producing their field
mapping. Reference fields name their target type instead of embedding it, so
``User`` and ``Company`` can point at each other regardless of registration
order: the mapping is only built on first access, when every name is known.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterator, Mapping, Optional, Union

from user_graph.errors import (
    ArgumentCoercionFailure,
    DuplicateType,
    RegistryFrozen,
    UnknownType,
)

# GraphQL Int is a signed 32-bit integer
MAX_INT = 2**31 - 1
MIN_INT = -(2**31)

Resolver = Callable[[Any, dict[str, Any]], Awaitable[Any]]
FieldsThunk = Callable[[], Mapping[str, "FieldSpec"]]


class ScalarKind(str, Enum):
    """Scalar kinds a field or argument can carry."""

    STRING = "String"
    INT = "Int"

    def coerce_input(self, name: str, value: Any) -> Any:
        """Coerce an argument value, raising ArgumentCoercionFailure."""
        if self is ScalarKind.STRING:
            if isinstance(value, str):
                return value
            if isinstance(value, int) and not isinstance(value, bool):
                return str(value)
            raise ArgumentCoercionFailure(name, value, self.value)

        if isinstance(value, bool):
            raise ArgumentCoercionFailure(name, value, self.value)
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                raise ArgumentCoercionFailure(name, value, self.value) from None
        elif isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or not MIN_INT <= value <= MAX_INT:
            raise ArgumentCoercionFailure(name, value, self.value)
        return value

    def serialize(self, value: Any) -> Any:
        """Serialize a resolved value, raising TypeError if it does not fit."""
        if self is ScalarKind.STRING:
            if isinstance(value, str):
                return value
            if isinstance(value, bool):
                return "true" if value else "false"
            if isinstance(value, (int, float)):
                return str(value)
            raise TypeError(f"String cannot represent value: {value!r}")

        if isinstance(value, bool):
            return int(value)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        elif isinstance(value, str):
            try:
                value = int(value)
            except ValueError:
                raise TypeError(f"Int cannot represent non-integer value: {value!r}") from None
        if not isinstance(value, int):
            raise TypeError(f"Int cannot represent non-integer value: {value!r}")
        if not MIN_INT <= value <= MAX_INT:
            raise TypeError(f"Int cannot represent non 32-bit signed integer value: {value}")
        return value


@dataclass(frozen=True)
class Argument:
    """Declared field argument."""

    kind: ScalarKind
    required: bool = False
    default: Any = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ScalarField:
    """Scalar field. Without a resolver it reads the parent's same-named key."""

    kind: ScalarKind
    resolve: Optional[Resolver] = None
    args: Mapping[str, Argument] = field(default_factory=dict)
    description: Optional[str] = None


@dataclass(frozen=True)
class ObjectField:
    """Single record of the entity type named ``target``, or null."""

    target: str
    resolve: Resolver
    args: Mapping[str, Argument] = field(default_factory=dict)
    description: Optional[str] = None


@dataclass(frozen=True)
class ListField:
    """Ordered list of records of the entity type named ``target``."""

    target: str
    resolve: Resolver
    args: Mapping[str, Argument] = field(default_factory=dict)
    description: Optional[str] = None


FieldSpec = Union[ScalarField, ObjectField, ListField]


class EntityType:
    """Named entity shape with a lazily built field mapping."""

    def __init__(self, name: str, fields: FieldsThunk, description: Optional[str] = None):
        self.name = name
        self.description = description
        self._thunk = fields
        self._fields: Optional[Mapping[str, FieldSpec]] = None

    @property
    def fields(self) -> Mapping[str, FieldSpec]:
        """Field mapping, built from the thunk on first access."""
        if self._fields is None:
            self._fields = MappingProxyType(dict(self._thunk()))
        return self._fields

    def field(self, name: str) -> Optional[FieldSpec]:
        """Get a field spec by name."""
        return self.fields.get(name)

    def __repr__(self) -> str:
        return f"EntityType({self.name!r})"


class TypeRegistry:
    """Process-wide registry of entity types, read-only once frozen."""

    def __init__(self, query_type: str = "RootQueryType"):
        self.query_type = query_type
        self._types: dict[str, EntityType] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        fields: FieldsThunk,
        description: Optional[str] = None,
    ) -> EntityType:
        """Register an entity type with a deferred field provider."""
        if self._frozen:
            raise RegistryFrozen(name)
        if name in self._types:
            raise DuplicateType(name)
        entity = EntityType(name, fields, description)
        self._types[name] = entity
        return entity

    def lookup(self, name: str) -> EntityType:
        """Get an entity type by name."""
        try:
            return self._types[name]
        except KeyError:
            raise UnknownType(name) from None

    @property
    def root(self) -> EntityType:
        """The designated root type."""
        return self.lookup(self.query_type)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "TypeRegistry":
        """Resolve every field mapping and reference, then forbid registration.

        Raises UnknownType for the root type or any dangling reference.
        """
        self.lookup(self.query_type)
        for entity in self._types.values():
            for spec in entity.fields.values():
                if isinstance(spec, (ObjectField, ListField)):
                    self.lookup(spec.target)
        self._frozen = True
        return self

    def names(self) -> list[str]:
        return list(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[EntityType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)
