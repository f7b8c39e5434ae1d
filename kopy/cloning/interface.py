"""
Single entry point for deep cloning.

Wraps GraphCloner for callers that clone once and do not need to keep a
cloner around.
"""

from typing import Any, Mapping, Optional, Union

from kopy.core.adapter import EntityModelAdapter
from kopy.cloning.cloner import GraphCloner
from kopy.cloning.policy import RelationshipPolicyRegistry
from kopy.cloning.spec_parser import CloneOptions


def deep_clone(
    entity: Any,
    adapter: EntityModelAdapter,
    options: Union[CloneOptions, Mapping[str, Any], None] = None,
    policies: Optional[RelationshipPolicyRegistry] = None,
    strict_exceptions: bool = True,
    **kwargs,
) -> Any:
    """
    Deep clone an entity through an adapter.

    Args:
        entity: Root of the graph to clone
        adapter: Host data access (an EntityStore, or any EntityModelAdapter)
        options: CloneOptions or an options mapping
        policies: Always-included relationships (process-wide by default)
        strict_exceptions: Fail on except entries naming undeclared fields
        **kwargs: include, except_, dictionary, use_dictionary

    Example:
        from kopy import deep_clone

        kopy = deep_clone(pirate, store, include='parrot',
                          except_=[{'parrot': ['name']}])
    """
    if not isinstance(adapter, EntityModelAdapter):
        raise TypeError(f"{type(adapter).__name__} does not implement EntityModelAdapter")

    cloner = GraphCloner(adapter, policies=policies, strict_exceptions=strict_exceptions)
    return cloner.clone(entity, options, **kwargs)
