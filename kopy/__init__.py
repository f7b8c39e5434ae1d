"""
kopy: deep, cycle-safe cloning of entity graphs.

Clones an entity together with the relationships a declarative spec names,
resetting or omitting fields along the way, and never cloning the same
original twice within a session when a clone dictionary is used.
"""

__version__ = "0.1.0"
__author__ = "kopy Project"

from kopy.core import (
    Entity,
    EntityStore,
    Collection,
    Field,
    EntityModelAdapter,
    RelationshipKind,
    RelationshipDescriptor,
    belongs_to,
    has_one,
    has_many,
    has_and_belongs_to_many,
    KopyException,
    ResolutionError,
    ConfigurationError,
    UnknownFieldError,
)
from kopy.cloning import (
    CloneOptions,
    CloneRegistry,
    GraphCloner,
    declare_always_included,
    deep_clone,
)

__all__ = [
    'Entity',
    'EntityStore',
    'Collection',
    'Field',
    'EntityModelAdapter',
    'RelationshipKind',
    'RelationshipDescriptor',
    'belongs_to',
    'has_one',
    'has_many',
    'has_and_belongs_to_many',
    'KopyException',
    'ResolutionError',
    'ConfigurationError',
    'UnknownFieldError',
    'CloneOptions',
    'CloneRegistry',
    'GraphCloner',
    'declare_always_included',
    'deep_clone',
]
