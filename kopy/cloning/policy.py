"""
Type-level cloning policy.

A type can declare relationships that are always cloned with it, whatever
the caller asks for:

    declare_always_included('Bottle', 'drinkers')
    store.clone(bottle)            # drinkers are cloned too

Declarations accumulate per type. They are meant to be made while the
types are set up and only read while cloning.
"""

from typing import Dict, List, Optional, Tuple

from kopy.core.exceptions import ConfigurationError


class RelationshipPolicyRegistry:
    """
    Always-included relationship names, per entity type.
    """

    def __init__(self):
        self._always: Dict[str, List[str]] = {}

    def declare(self, type_name: str, *names: str) -> Tuple[str, ...]:
        """
        Append relationships to the always-included list of a type.

        Returns:
            The type's full list after the declaration
        """
        declared = self._always.setdefault(type_name, [])
        for name in names:
            if name not in declared:
                declared.append(name)
        return tuple(declared)

    def always_include(self, type_name: str) -> Tuple[str, ...]:
        """
        Relationships always cloned with entities of type_name.

        Raises:
            ConfigurationError: if the declarations for the type cannot be read
        """
        try:
            declared = self._always.get(type_name, ())
            names = tuple(declared)
        except Exception as exc:
            raise ConfigurationError(
                str(type_name), f"always-included relationships unreadable ({exc})"
            ) from exc

        for name in names:
            if not isinstance(name, str):
                raise ConfigurationError(
                    type_name, f"always-included relationship {name!r} is not a name"
                )
        return names

    def clear(self, type_name: Optional[str] = None) -> None:
        """Forget the declarations of one type, or of every type."""
        if type_name is None:
            self._always.clear()
        else:
            self._always.pop(type_name, None)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._always

    def __repr__(self) -> str:
        return f"RelationshipPolicyRegistry(types={sorted(self._always)})"


# Process-wide policies, used by GraphCloner unless it is given its own.
default_policies = RelationshipPolicyRegistry()


def declare_always_included(type_name: str, *names: str) -> Tuple[str, ...]:
    """Declare relationships always cloned with type_name (process-wide)."""
    return default_policies.declare(type_name, *names)
