"""
Relationship: typed edges between entity types.

A RelationshipDescriptor is static metadata attached to a Collection
(entity type). It says how many targets the edge holds, which type they are,
which field carries the link, and what the reciprocal edge on the target
type is called.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class RelationshipKind(Enum):
    """
    Association macros.

    BELONGS_TO and HAS_ONE hold at most one target. HAS_MANY and
    HAS_AND_BELONGS_TO_MANY hold an ordered collection.
    """

    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    HAS_AND_BELONGS_TO_MANY = "has_and_belongs_to_many"

    @property
    def to_many(self) -> bool:
        return self in (RelationshipKind.HAS_MANY, RelationshipKind.HAS_AND_BELONGS_TO_MANY)

    @property
    def to_one(self) -> bool:
        return not self.to_many


@dataclass(frozen=True)
class RelationshipDescriptor:
    """
    Declared relationship of an entity type.

    Attributes:
        name: Relationship name on the owning type (e.g. "mateys")
        kind: Cardinality/macro of the relationship
        target: Name of the target entity type (e.g. "Matey")
        foreign_key: Field carrying the link. Lives on the owner for
            BELONGS_TO, on the target for HAS_ONE and HAS_MANY (the owning
            Collection fills in "<owner>_id" when left out), and is None
            for join-table relationships.
        inverse: Name of the reciprocal relationship on the target type.
            If None, the store derives it from a shared foreign key.
    """

    name: str
    kind: RelationshipKind
    target: str
    foreign_key: Optional[str] = None
    inverse: Optional[str] = None

    @property
    def to_many(self) -> bool:
        return self.kind.to_many

    @property
    def foreign_key_on_owner(self) -> bool:
        """True when the link field is stored on the owning entity."""
        return self.kind is RelationshipKind.BELONGS_TO

    def with_inverse(self, inverse: Optional[str]) -> "RelationshipDescriptor":
        """Return a copy of this descriptor with the reciprocal name set."""
        return RelationshipDescriptor(
            name=self.name,
            kind=self.kind,
            target=self.target,
            foreign_key=self.foreign_key,
            inverse=inverse,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize descriptor to dictionary."""
        return {
            'name': self.name,
            'kind': self.kind.value,
            'target': self.target,
            'foreign_key': self.foreign_key,
            'inverse': self.inverse,
        }

    def __repr__(self) -> str:
        arrow = "->>" if self.to_many else "->"
        return f"Relationship({self.name}: {arrow}{self.target}, fk={self.foreign_key})"


def belongs_to(name: str, target: str, foreign_key: Optional[str] = None,
               inverse: Optional[str] = None) -> RelationshipDescriptor:
    """Declare a to-one relationship whose foreign key lives on the owner."""
    return RelationshipDescriptor(name, RelationshipKind.BELONGS_TO, target,
                                  foreign_key or f"{name}_id", inverse)


def has_one(name: str, target: str, foreign_key: Optional[str] = None,
            inverse: Optional[str] = None) -> RelationshipDescriptor:
    """Declare a to-one relationship whose foreign key lives on the target."""
    return RelationshipDescriptor(name, RelationshipKind.HAS_ONE, target, foreign_key, inverse)


def has_many(name: str, target: str, foreign_key: Optional[str] = None,
             inverse: Optional[str] = None) -> RelationshipDescriptor:
    """Declare a to-many relationship whose foreign key lives on each target."""
    return RelationshipDescriptor(name, RelationshipKind.HAS_MANY, target, foreign_key, inverse)


def has_and_belongs_to_many(name: str, target: str,
                            inverse: Optional[str] = None) -> RelationshipDescriptor:
    """Declare a many-to-many relationship (no foreign key on either side)."""
    return RelationshipDescriptor(name, RelationshipKind.HAS_AND_BELONGS_TO_MANY, target,
                                  None, inverse)
