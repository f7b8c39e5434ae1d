"""
The entity model adapter protocol.

GraphCloner never touches entities directly. Everything it needs to know
about types, fields and relationships, and every read or write it performs,
goes through an object implementing EntityModelAdapter. EntityStore is the
in-memory implementation shipped with kopy; a host backed by an ORM
provides its own.
"""

from typing import Any, Hashable, Protocol, Sequence, runtime_checkable

from kopy.core.relationship import RelationshipDescriptor


@runtime_checkable
class EntityModelAdapter(Protocol):
    def type_of(self, entity: Any) -> str: ...

    def identity_of(self, entity: Any) -> Hashable: ...

    def read_field(self, entity: Any, name: str) -> Any: ...

    def write_field(self, entity: Any, name: str, value: Any) -> None: ...

    def default_field_value(self, type_name: str, name: str) -> Any:
        """Schema default of a field; raises UnknownFieldError if undeclared."""
        ...

    def relationships_of(self, type_name: str) -> Sequence[RelationshipDescriptor]: ...

    def read_relationship(self, entity: Any, name: str) -> Any:
        """The related entity (or None) for to-one, an ordered sequence for to-many."""
        ...

    def write_relationship(self, entity: Any, name: str, value: Any) -> None: ...

    def shallow_clone(self, entity: Any) -> Any:
        """A new, unsaved entity of the same type with a fresh identity and copied fields."""
        ...
