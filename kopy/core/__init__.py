"""
Core data structures for kopy.

Entities, entity types (collections) with their fields and relationships,
the adapter protocol the cloner reads through, and the in-memory store that
implements it.
"""

from kopy.core.exceptions import (
    KopyException,
    ResolutionError,
    ConfigurationError,
    UnknownFieldError,
)
from kopy.core.entity import Entity
from kopy.core.relationship import (
    RelationshipKind,
    RelationshipDescriptor,
    belongs_to,
    has_one,
    has_many,
    has_and_belongs_to_many,
)
from kopy.core.collection import Collection, Field
from kopy.core.adapter import EntityModelAdapter
from kopy.core.store import EntityStore

__all__ = [
    'KopyException',
    'ResolutionError',
    'ConfigurationError',
    'UnknownFieldError',
    'Entity',
    'RelationshipKind',
    'RelationshipDescriptor',
    'belongs_to',
    'has_one',
    'has_many',
    'has_and_belongs_to_many',
    'Collection',
    'Field',
    'EntityModelAdapter',
    'EntityStore',
]
