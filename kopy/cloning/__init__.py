"""
Cloning layer for kopy.

Parses clone specifications, tracks clones per session and walks entity
graphs to produce identity-distinct copies.
"""

from kopy.cloning.registry import CloneRegistry
from kopy.cloning.spec_parser import CloneOptions, CloneSpec, CloneSpecParser
from kopy.cloning.policy import (
    RelationshipPolicyRegistry,
    declare_always_included,
    default_policies,
)
from kopy.cloning.cloner import GraphCloner
from kopy.cloning.interface import deep_clone

__all__ = [
    'CloneRegistry',
    'CloneOptions',
    'CloneSpec',
    'CloneSpecParser',
    'RelationshipPolicyRegistry',
    'declare_always_included',
    'default_policies',
    'GraphCloner',
    'deep_clone',
]
