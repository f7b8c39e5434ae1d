"""
networkx view of an entity graph.

Builds a directed multigraph of everything reachable from a root entity
through its loaded relationships. Useful for checking that a clone is
structurally equivalent to its original:

    import networkx as nx
    nx.is_isomorphic(to_networkx(jack, store), to_networkx(kopy, store),
                     node_match=same_type, edge_match=same_relationship)
"""

from collections import deque
from typing import Any, Dict, Set

import networkx as nx

from kopy.core.adapter import EntityModelAdapter


def to_networkx(root: Any, adapter: EntityModelAdapter) -> nx.MultiDiGraph:
    """
    Build the graph reachable from root.

    Nodes are keyed by (type, identity) and carry 'type' and 'fields'
    attributes. Edges carry the relationship name in 'relationship'.
    """
    graph = nx.MultiDiGraph()
    visited: Set[Any] = set()
    queue: deque = deque([root])

    while queue:
        entity = queue.popleft()
        type_name = adapter.type_of(entity)
        key = (type_name, adapter.identity_of(entity))
        if key in visited:
            continue
        visited.add(key)

        graph.add_node(key, type=type_name, fields=_fields(entity))

        for descriptor in adapter.relationships_of(type_name):
            value = adapter.read_relationship(entity, descriptor.name)
            related = value if descriptor.to_many else ([value] if value is not None else [])
            for member in related:
                member_key = (adapter.type_of(member), adapter.identity_of(member))
                graph.add_edge(key, member_key, relationship=descriptor.name)
                queue.append(member)

    return graph


def same_type(a: Dict[str, Any], b: Dict[str, Any]) -> bool:
    """Node matcher for nx.is_isomorphic."""
    return a.get('type') == b.get('type')


def same_relationship(a: Dict[Any, Dict[str, Any]], b: Dict[Any, Dict[str, Any]]) -> bool:
    """Edge matcher for nx.is_isomorphic on multigraphs."""
    return sorted(d.get('relationship') for d in a.values()) == \
        sorted(d.get('relationship') for d in b.values())


def _fields(entity: Any) -> Dict[str, Any]:
    return dict(getattr(entity, 'properties', {}))
