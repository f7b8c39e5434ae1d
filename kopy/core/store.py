"""
EntityStore: the in-memory host store.

This is the reference implementation of EntityModelAdapter. It manages
entity types (collections), the entities themselves and the links between
them, and it is what the cloner reads from and what clones are saved into.
"""

from typing import Dict, List, Set, Optional, Any, Iterable, Sequence
from kopy.core.entity import Entity
from kopy.core.collection import Collection, Field
from kopy.core.exceptions import ConfigurationError
from kopy.core.relationship import RelationshipDescriptor
from kopy.core.logging_config import get_logger
import copy

logger = get_logger("store")


class EntityStore:
    """
    In-memory entity store.

    Supports:
    - Type declarations (collections with field defaults and relationships)
    - Entity creation, lookup and removal
    - Linking entities through declared relationships, keeping foreign keys
      and reciprocal references in sync
    - Saving new entity graphs (such as clones), re-deriving foreign keys
    - Deep cloning through GraphCloner
    """

    def __init__(self, store_id: str = "kopy_store", policies=None):
        """
        Initialize a store.

        Args:
            store_id: Identifier for this store instance
            policies: RelationshipPolicyRegistry used by clone() (the
                process-wide one if None)
        """
        self.store_id = store_id
        self.policies = policies

        # Entity storage
        self._entities: Dict[str, Entity] = {}

        # Types (collection name -> Collection)
        self._collections: Dict[str, Collection] = {}

        self.stats = {
            'total_entities': 0,
            'total_collections': 0,
            'clones_created': 0,
        }

    # ========================================
    # Collection Operations (Types)
    # ========================================

    def create_collection(
        self,
        name: str,
        fields: Optional[Dict[str, Field]] = None,
        relationships: Optional[Iterable[RelationshipDescriptor]] = None,
    ) -> Collection:
        """
        Declare a new entity type.

        Args:
            name: Type name
            fields: Declared fields with their column defaults
            relationships: Declared relationships

        Returns:
            Created Collection

        Example:
            store.create_collection("Pirate", fields={
                'name': Field(str),
                'ship': Field(str, default='Black Pearl'),
            }, relationships=[has_many('mateys', 'Matey', foreign_key='pirate_id')])
        """
        if name in self._collections:
            raise ConfigurationError(name, "type declared twice")

        collection = Collection(name, fields, relationships)
        self._collections[name] = collection
        self.stats['total_collections'] += 1
        return collection

    def get_collection(self, name: str) -> Optional[Collection]:
        """Retrieve collection by name."""
        return self._collections.get(name)

    def collection(self, name: str) -> Collection:
        """
        Retrieve collection by name.

        Raises:
            ConfigurationError: if no such type has been declared
        """
        collection = self._collections.get(name)
        if collection is None:
            raise ConfigurationError(name, "unknown entity type")
        return collection

    def add_relationship(self, type_name: str, descriptor: RelationshipDescriptor) -> None:
        """Declare a relationship on an existing type."""
        self.collection(type_name).add_relationship(descriptor)

    def relationship(self, type_name: str, name: str) -> RelationshipDescriptor:
        """
        Resolve a relationship, deriving its reciprocal when undeclared.

        The reciprocal is the relationship on the target type that points
        back at type_name through the same foreign key.

        Raises:
            ResolutionError: if type_name declares no such relationship
        """
        descriptor = self.collection(type_name).relationship(name)
        if descriptor.inverse is not None or descriptor.foreign_key is None:
            return descriptor

        target = self._collections.get(descriptor.target)
        if target is None:
            return descriptor

        for candidate in target.relationships:
            if candidate.foreign_key != descriptor.foreign_key:
                continue
            if candidate.target != type_name:
                continue
            if target.name == type_name and candidate.name == name:
                continue
            return descriptor.with_inverse(candidate.name)

        return descriptor

    # ========================================
    # Entity Operations
    # ========================================

    def add_entity(
        self,
        collection_name: str,
        properties: Optional[Dict[str, Any]] = None,
        entity_id: Optional[str] = None,
    ) -> Entity:
        """
        Create and persist a new entity.

        Fields missing from properties get their column default.

        Args:
            collection_name: Type of the new entity
            properties: Field values
            entity_id: Specific ID (auto-generated if None)

        Returns:
            Created Entity

        Example:
            jack = store.add_entity('Pirate', {'name': 'Jack'})
        """
        collection = self.collection(collection_name)
        values = collection.defaults()
        values.update(properties or {})

        entity = Entity(
            entity_id=entity_id,
            entity_type=collection_name,
            properties=values,
        )
        self._persist(entity, collection)
        return entity

    def get_entity(self, entity_id: str) -> Optional[Entity]:
        """Retrieve entity by ID."""
        return self._entities.get(entity_id)

    def remove_entity(self, entity_id: str) -> bool:
        """
        Remove an entity from the store.

        Links held by other entities are left as they are.

        Returns:
            True if removed, False if not found
        """
        entity = self._entities.pop(entity_id, None)
        if entity is None:
            return False

        collection = self._collections.get(entity.type)
        if collection is not None:
            collection.remove_entity(entity_id)

        entity.persisted = False
        self.stats['total_entities'] -= 1
        return True

    def _persist(self, entity: Entity, collection: Collection) -> None:
        if entity.id not in self._entities:
            self.stats['total_entities'] += 1
        self._entities[entity.id] = entity
        collection.add_entity(entity)
        entity.persisted = True

    # ========================================
    # Linking
    # ========================================

    def relate(self, source: Entity, name: str, target: Entity) -> None:
        """
        Link target to source through the relationship `name`.

        To-one relationships are assigned, to-many relationships appended
        to. The foreign key and, when there is one, the reciprocal
        relationship on the target are updated to match.

        Example:
            store.relate(jack, 'mateys', gibbs)
            # gibbs.pirate is jack, gibbs.pirate_id == jack.id
        """
        descriptor = self.relationship(source.type, name)
        if target.type != descriptor.target:
            raise ConfigurationError(
                source.type,
                f"relationship '{name}' expects {descriptor.target}, got {target.type}",
            )

        if descriptor.to_many:
            members = source.relations.setdefault(name, [])
            if target not in members:
                members.append(target)
        else:
            source.set_relation(name, target)

        if descriptor.foreign_key:
            if descriptor.foreign_key_on_owner:
                source.set_property(descriptor.foreign_key, target.id)
            else:
                target.set_property(descriptor.foreign_key, source.id)

        if descriptor.inverse:
            inverse = self.collection(target.type).relationship(descriptor.inverse)
            if inverse.to_many:
                back = target.relations.setdefault(inverse.name, [])
                if source not in back:
                    back.append(source)
            else:
                target.set_relation(inverse.name, source)

    def save(self, entity: Entity) -> Entity:
        """
        Persist an entity and every entity reachable through its loaded
        relationships.

        Foreign keys are re-derived from the loaded relationships, so a
        clone whose foreign keys were reset ends up pointing at its new
        related entities.

        Returns:
            The saved entity
        """
        visited: Set[str] = set()
        stack: List[Entity] = [entity]

        while stack:
            current = stack.pop()
            if current.id in visited:
                continue
            visited.add(current.id)

            self._persist(current, self.collection(current.type))

            for name, value in current.relations.items():
                descriptor = self.relationship(current.type, name)
                related = value if descriptor.to_many else ([value] if value is not None else [])

                if descriptor.foreign_key:
                    if descriptor.foreign_key_on_owner:
                        current.set_property(
                            descriptor.foreign_key, value.id if value is not None else None
                        )
                    else:
                        for member in related:
                            member.set_property(descriptor.foreign_key, current.id)

                stack.extend(member for member in related if member.id not in visited)

        logger.debug("saved %d entities starting at %s", len(visited), entity)
        return entity

    # ========================================
    # Entity Model Adapter
    # ========================================

    def type_of(self, entity: Entity) -> str:
        return entity.type

    def identity_of(self, entity: Entity) -> str:
        return entity.id

    def read_field(self, entity: Entity, name: str) -> Any:
        return entity.get_property(name)

    def write_field(self, entity: Entity, name: str, value: Any) -> None:
        entity.set_property(name, value)

    def default_field_value(self, type_name: str, name: str) -> Any:
        return self.collection(type_name).default_value(name)

    def relationships_of(self, type_name: str) -> Sequence[RelationshipDescriptor]:
        return [
            self.relationship(type_name, descriptor.name)
            for descriptor in self.collection(type_name).relationships
        ]

    def read_relationship(self, entity: Entity, name: str) -> Any:
        descriptor = self.relationship(entity.type, name)
        if descriptor.to_many:
            return list(entity.get_relation(name, []))
        return entity.get_relation(name)

    def write_relationship(self, entity: Entity, name: str, value: Any) -> None:
        descriptor = self.relationship(entity.type, name)
        if descriptor.to_many:
            entity.set_relation(name, list(value or []))
        else:
            entity.set_relation(name, value)

    def shallow_clone(self, entity: Entity) -> Entity:
        self.stats['clones_created'] += 1
        return Entity(
            entity_type=entity.type,
            properties=copy.deepcopy(entity.properties),
        )

    # ========================================
    # Cloning
    # ========================================

    def clone(self, entity: Entity, options: Optional[Dict[str, Any]] = None, **kwargs) -> Entity:
        """
        Deep clone an entity stored here.

        Accepts the same options as GraphCloner.clone.

        Example:
            kopy = store.clone(jack, include=['mateys', {'treasures': 'gold_pieces'}])
            store.save(kopy)
        """
        # kopy.core never imports kopy.cloning at module level
        from kopy.cloning.cloner import GraphCloner

        return GraphCloner(self, policies=self.policies).clone(entity, options, **kwargs)

    # ========================================
    # Utility & Statistics
    # ========================================

    def get_stats(self) -> Dict[str, Any]:
        """Get store statistics."""
        return dict(self.stats)

    def __contains__(self, entity: Entity) -> bool:
        return isinstance(entity, Entity) and self._entities.get(entity.id) is entity

    def __repr__(self) -> str:
        return (
            f"EntityStore(id={self.store_id}, "
            f"entities={self.stats['total_entities']}, "
            f"collections={self.stats['total_collections']})"
        )
