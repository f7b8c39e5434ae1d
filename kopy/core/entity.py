"""
Entity: a node in the object graph.

An Entity is a record-like object: a type tag, an identity unique within
that type, field values, and the currently loaded values of its named
relationships.
"""

from typing import Dict, Any, Optional
from uuid import uuid4
from datetime import datetime


class Entity:
    """
    Host-side node of an entity graph.

    Combines:
    - Properties (field name -> value, like table columns)
    - Type membership (the Collection it belongs to)
    - Loaded relationships (relationship name -> Entity, None or list of Entity)
    - Persistence flag (whether a store has saved it)

    Relationship values are only what has been loaded or assigned; the
    declaration of which relationships exist lives on the Collection.
    """

    def __init__(
        self,
        entity_id: Optional[str] = None,
        entity_type: Optional[str] = None,
        properties: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize an Entity.

        Args:
            entity_id: Unique identifier (auto-generated if not provided)
            entity_type: Collection name (e.g., "Pirate", "Treasure")
            properties: Field values
        """
        self.id = entity_id or str(uuid4())
        self.type = entity_type or "Unknown"
        self.properties = properties or {}

        # relationship name -> Entity | None | List[Entity]
        self.relations: Dict[str, Any] = {}

        self.persisted = False
        self.created_at = datetime.now()
        self.updated_at = datetime.now()

    @property
    def new_record(self) -> bool:
        return not self.persisted

    def set_property(self, key: str, value: Any) -> None:
        """Set or update a property value."""
        self.properties[key] = value
        self.updated_at = datetime.now()

    def get_property(self, key: str, default: Any = None) -> Any:
        """Get a property value."""
        return self.properties.get(key, default)

    def has_property(self, key: str) -> bool:
        """Check if property exists."""
        return key in self.properties

    def set_relation(self, name: str, value: Any) -> None:
        """Assign the loaded value of a relationship."""
        self.relations[name] = value
        self.updated_at = datetime.now()

    def get_relation(self, name: str, default: Any = None) -> Any:
        """Get the loaded value of a relationship."""
        return self.relations.get(name, default)

    def has_relation(self, name: str) -> bool:
        """Check if a relationship value has been loaded or assigned."""
        return name in self.relations

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: expose fields and relations
        # as attributes, e.g. pirate.name or pirate.mateys.
        if name.startswith('_') or name in ('properties', 'relations'):
            raise AttributeError(name)
        if name in self.relations:
            return self.relations[name]
        if name in self.properties:
            return self.properties[name]
        raise AttributeError(f"{self.type} entity has no field or relation '{name}'")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize entity to dictionary (relations by id)."""
        relations: Dict[str, Any] = {}
        for name, value in self.relations.items():
            if isinstance(value, list):
                relations[name] = [e.id for e in value]
            else:
                relations[name] = value.id if value is not None else None

        return {
            'id': self.id,
            'type': self.type,
            'properties': self.properties,
            'relations': relations,
            'persisted': self.persisted,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }

    def __repr__(self) -> str:
        props = ', '.join(f"{k}={v}" for k, v in list(self.properties.items())[:3])
        if len(self.properties) > 3:
            props += '...'
        return f"Entity(id={self.id[:8]}, type={self.type}, {props})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Entity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
