"""
Collection: an entity type.

A Collection groups homogeneous entities and carries the static schema of
their type: the declared fields with their column defaults, and the declared
relationships. The cloner only ever reads this metadata.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Any, Optional, Iterable
from kopy.core.entity import Entity
from kopy.core.exceptions import ConfigurationError, ResolutionError, UnknownFieldError
from kopy.core.relationship import RelationshipDescriptor, RelationshipKind
import copy
import re

_TARGET_KEYED = (RelationshipKind.HAS_ONE, RelationshipKind.HAS_MANY)


def _underscore(type_name: str) -> str:
    """GoldPiece -> gold_piece"""
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", type_name).lower()


@dataclass(frozen=True)
class Field:
    """
    Declared field of an entity type.

    Attributes:
        python_type: Expected value type (documentation only, not enforced)
        default: Column default used for new records and field exceptions
    """

    python_type: type = object
    default: Any = None

    def default_value(self) -> Any:
        # Mutable defaults must not be shared between records.
        return copy.deepcopy(self.default)


class Collection:
    """
    A typed grouping of entities with table-like semantics.

    Think of this as a "table": every entity in it shares the same declared
    fields and relationships. Provides:

    - Field schema with column defaults
    - Relationship descriptors, looked up by name
    - Scans and filters over the member entities
    """

    def __init__(
        self,
        name: str,
        fields: Optional[Dict[str, Field]] = None,
        relationships: Optional[Iterable[RelationshipDescriptor]] = None,
    ):
        """
        Initialize a Collection.

        Args:
            name: Type name (e.g., "Pirate", "Parrot")
            fields: Declared fields {field_name: Field}
            relationships: Declared relationship descriptors
        """
        self.name = name
        self.fields: Dict[str, Field] = dict(fields or {})

        # Ordered by declaration (relationship name -> descriptor)
        self._relationships: Dict[str, RelationshipDescriptor] = {}
        for descriptor in relationships or ():
            self.add_relationship(descriptor)

        # Entity storage (entity_id -> Entity)
        self._entities: Dict[str, Entity] = {}

    # ========================================
    # Schema
    # ========================================

    def add_field(self, name: str, field: Optional[Field] = None) -> None:
        """Declare (or redeclare) a field."""
        self.fields[name] = field or Field()

    def default_value(self, name: str) -> Any:
        """
        Column default of a field.

        Raises:
            UnknownFieldError: if the field is not declared on this type
        """
        if name not in self.fields:
            raise UnknownFieldError(self.name, name)
        return self.fields[name].default_value()

    def defaults(self) -> Dict[str, Any]:
        """Column defaults for every declared field."""
        return {name: field.default_value() for name, field in self.fields.items()}

    def add_relationship(self, descriptor: RelationshipDescriptor) -> None:
        """
        Declare a relationship.

        HAS_ONE and HAS_MANY declared without a foreign key get the owner's
        default one, e.g. "gold_piece_id" for a GoldPiece owner.

        Raises:
            ConfigurationError: if the name is already declared on this type
        """
        if descriptor.name in self._relationships:
            raise ConfigurationError(
                self.name, f"relationship '{descriptor.name}' declared twice"
            )
        if descriptor.foreign_key is None and descriptor.kind in _TARGET_KEYED:
            descriptor = replace(descriptor, foreign_key=f"{_underscore(self.name)}_id")
        self._relationships[descriptor.name] = descriptor

    def relationship(self, name: str) -> RelationshipDescriptor:
        """
        Resolve a relationship by name.

        Raises:
            ResolutionError: if the type declares no such relationship
        """
        descriptor = self._relationships.get(name)
        if descriptor is None:
            raise ResolutionError(self.name, name)
        return descriptor

    def has_relationship(self, name: str) -> bool:
        return name in self._relationships

    @property
    def relationships(self) -> List[RelationshipDescriptor]:
        return list(self._relationships.values())

    # ========================================
    # Members
    # ========================================

    def add_entity(self, entity: Entity) -> None:
        """
        Add an entity to this collection.

        Args:
            entity: Entity to add (will update its type to match collection)
        """
        entity.type = self.name
        self._entities[entity.id] = entity

    def remove_entity(self, entity_id: str) -> Optional[Entity]:
        """Remove an entity from collection, returning it if present."""
        return self._entities.pop(entity_id, None)

    def get_entity(self, entity_id: str) -> Optional[Entity]:
        """Retrieve entity by ID."""
        return self._entities.get(entity_id)

    def scan(self) -> List[Entity]:
        """Return all entities."""
        return list(self._entities.values())

    def filter(self, predicate) -> List[Entity]:
        """
        Filter entities by predicate.

        Example:
            pirates.filter(lambda e: e.get_property('ship') == 'Black Pearl')
        """
        return [e for e in self._entities.values() if predicate(e)]

    def count(self) -> int:
        """Return number of entities in collection."""
        return len(self._entities)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize collection metadata."""
        return {
            'name': self.name,
            'fields': {
                k: {'type': v.python_type.__name__, 'default': v.default}
                for k, v in self.fields.items()
            },
            'relationships': [r.to_dict() for r in self.relationships],
            'entity_count': self.count(),
        }

    def __repr__(self) -> str:
        return (
            f"Collection(name={self.name}, count={self.count()}, "
            f"relationships={list(self._relationships.keys())})"
        )
