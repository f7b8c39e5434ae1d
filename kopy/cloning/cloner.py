"""
GraphCloner: deep cloning of entity graphs.

Clones an entity, then follows the relationships named in the clone spec,
cloning what it finds there and wiring the clones into the new graph:

- to-one relationships get the clone of the related entity (or stay empty)
- to-many relationships get the clones of every member, in order, each
  pointed back at the new parent and with its old foreign key cleared

The original graph is only read. A failure anywhere aborts the whole clone,
and entries the failed call added to a clone dictionary are dropped again.

Every level of the include spec adds a few Python frames, so the
interpreter recursion limit (sys.getrecursionlimit()) is the effective depth
ceiling. Specs are expected to be a handful of levels deep.
"""

from typing import Any, Dict, Mapping, Optional, Union

from kopy.core.adapter import EntityModelAdapter
from kopy.core.exceptions import ConfigurationError, ResolutionError, UnknownFieldError
from kopy.core.logging_config import get_logger
from kopy.core.relationship import RelationshipDescriptor
from kopy.cloning.policy import RelationshipPolicyRegistry, default_policies
from kopy.cloning.spec_parser import CloneOptions, CloneSpec, CloneSpecParser

logger = get_logger("cloning")


class GraphCloner:
    """
    Deep cloner working through an EntityModelAdapter.

    Example:
        cloner = GraphCloner(store)
        kopy = cloner.clone(
            jack,
            include=['mateys', {'treasures': 'gold_pieces'}],
            except_=['name', {'mateys': ['name']}],
            use_dictionary=True,
        )
    """

    def __init__(
        self,
        adapter: EntityModelAdapter,
        policies: Optional[RelationshipPolicyRegistry] = None,
        strict_exceptions: bool = True,
    ):
        """
        Initialize a cloner.

        Args:
            adapter: Access to entity types, fields and relationships
            policies: Always-included relationships per type (defaults to the
                process-wide registry)
            strict_exceptions: Raise UnknownFieldError for except entries naming
                undeclared fields. When False they are logged and skipped.
        """
        self.adapter = adapter
        self.policies = policies if policies is not None else default_policies
        self.strict_exceptions = strict_exceptions
        self.parser = CloneSpecParser()

    def clone(
        self,
        entity: Any,
        options: Union[CloneOptions, Mapping[str, Any], None] = None,
        **kwargs,
    ) -> Any:
        """
        Deep clone an entity.

        Args:
            entity: Root of the graph to clone
            options: CloneOptions, or a mapping with the keys 'include',
                'except', 'dictionary' and 'use_dictionary'
            **kwargs: The same keys as keyword arguments ('except_' for 'except')

        Returns:
            The clone of entity

        Raises:
            ResolutionError: an included relationship is not declared on its type
            ConfigurationError: malformed options or a misconfigured type policy
            UnknownFieldError: an except entry names an undeclared field
        """
        spec = self.parser.parse(self._options(options, kwargs))
        registry = spec.registry
        if registry is None:
            return self.clone_with_spec(entity, spec)

        mark = registry.checkpoint()
        try:
            return self.clone_with_spec(entity, spec)
        except Exception:
            dropped = registry.rollback(mark)
            logger.debug("clone failed, dropped %d registry entries", len(dropped))
            raise

    def clone_with_spec(self, entity: Any, spec: CloneSpec) -> Any:
        """Clone an entity with an already normalized spec."""
        adapter = self.adapter
        type_name = adapter.type_of(entity)
        descriptors = self._descriptors(type_name)
        spec = self._merge_policy(type_name, spec, descriptors)

        registry = spec.registry
        identity = None
        if registry is None:
            kopy = adapter.shallow_clone(entity)
        else:
            identity = adapter.identity_of(entity)
            kopy = registry.get_or_create(
                type_name, identity, lambda: adapter.shallow_clone(entity)
            )
            if not registry.begin(type_name, identity):
                logger.debug("cycle back to %s %s, reusing its clone", type_name, identity)
                return kopy

        logger.debug("cloning %s %s", type_name, adapter.identity_of(entity))
        try:
            self._apply_exceptions(type_name, kopy, spec)
            for name in spec.include:
                descriptor = descriptors.get(name)
                if descriptor is None:
                    raise ResolutionError(type_name, name)
                self._clone_relationship(entity, kopy, descriptor, spec)
        finally:
            if registry is not None:
                registry.finish(type_name, identity)

        return kopy

    def _clone_relationship(
        self,
        entity: Any,
        kopy: Any,
        descriptor: RelationshipDescriptor,
        spec: CloneSpec,
    ) -> None:
        adapter = self.adapter
        name = descriptor.name
        child_spec = spec.child(name, self.parser)
        current = adapter.read_relationship(entity, name)

        if not descriptor.to_many:
            cloned = self.clone_with_spec(current, child_spec) if current is not None else None
            adapter.write_relationship(kopy, name, cloned)
            return

        members = []
        for member in current or ():
            member_kopy = self.clone_with_spec(member, child_spec)
            if descriptor.inverse:
                inverse = self._descriptors(adapter.type_of(member)).get(descriptor.inverse)
                if inverse is None:
                    raise ResolutionError(adapter.type_of(member), descriptor.inverse)
                if not inverse.to_many:
                    adapter.write_relationship(member_kopy, inverse.name, kopy)
            if descriptor.foreign_key:
                adapter.write_field(member_kopy, descriptor.foreign_key, None)
            members.append(member_kopy)

        logger.debug("cloned %d members of %s", len(members), name)
        adapter.write_relationship(kopy, name, members)

    def _apply_exceptions(self, type_name: str, kopy: Any, spec: CloneSpec) -> None:
        for field in spec.except_fields:
            try:
                default = self.adapter.default_field_value(type_name, field)
            except UnknownFieldError:
                if self.strict_exceptions:
                    raise
                logger.warning("%s has no field '%s', except entry skipped", type_name, field)
                continue
            self.adapter.write_field(kopy, field, default)

    def _merge_policy(
        self,
        type_name: str,
        spec: CloneSpec,
        descriptors: Dict[str, RelationshipDescriptor],
    ) -> CloneSpec:
        names = self.policies.always_include(type_name)
        if not names:
            return spec

        for name in names:
            if name not in descriptors:
                raise ConfigurationError(
                    type_name, f"always-included relationship '{name}' is not declared"
                )
        return spec.with_always_included(names)

    def _descriptors(self, type_name: str) -> Dict[str, RelationshipDescriptor]:
        return {d.name: d for d in self.adapter.relationships_of(type_name)}

    @staticmethod
    def _options(options: Any, kwargs: Dict[str, Any]) -> CloneOptions:
        if isinstance(options, CloneOptions):
            if kwargs:
                raise ConfigurationError(
                    None, "pass either CloneOptions or keyword options, not both"
                )
            return options

        merged = dict(options or {})
        merged.update(kwargs)
        return CloneOptions.from_mapping(merged)
