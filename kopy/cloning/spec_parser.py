"""
Clone specification parsing.

Callers describe a clone with loose, nested include/except structures:

    include='mateys'
    include=['mateys', 'treasures']
    include={'treasures': 'gold_pieces'}
    include=['mateys', {'treasures': ['matey', 'gold_pieces']}]
    except_='name'
    except_=['name', {'parrot': ['name']}]

CloneSpecParser turns these into CloneSpec values once, at the entry point,
so the cloner never has to branch on shape.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from kopy.core.exceptions import ConfigurationError
from kopy.cloning.registry import CloneRegistry

# Keys inside an include mapping that act as modifiers, not relationships
USE_DICTIONARY = 'use_dictionary'
DICTIONARY = 'dictionary'
MODIFIER_KEYS = (USE_DICTIONARY, DICTIONARY)


@dataclass
class CloneOptions:
    """
    Options accepted by GraphCloner.clone.

    Attributes:
        include: Relationships to follow (any accepted include shape)
        except_: Fields to reset and nested per-relationship exceptions
        dictionary: Registry to reuse or share between clone calls
        use_dictionary: Create a fresh registry for this call when no
            dictionary is given
    """

    include: Any = None
    except_: Any = None
    dictionary: Optional[CloneRegistry] = None
    use_dictionary: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "CloneOptions":
        """
        Build options from a plain mapping.

        Accepts 'except' as well as 'except_'.

        Raises:
            ConfigurationError: for unknown option keys
        """
        known = {'include', 'except', 'except_', 'dictionary', 'use_dictionary'}
        unknown = set(options) - known
        if unknown:
            raise ConfigurationError(None, f"unknown clone options: {sorted(unknown)}")

        return cls(
            include=options.get('include'),
            except_=options.get('except', options.get('except_')),
            dictionary=options.get('dictionary'),
            use_dictionary=bool(options.get('use_dictionary', False)),
        )


@dataclass
class CloneSpec:
    """
    Canonical clone specification for one level of the traversal.

    Attributes:
        include: Ordered relationship name -> nested spec (None for no deeper
            traversal)
        except_fields: Field names to reset to their column default
        nested_exceptions: Relationship name -> raw exception spec handed to
            that relationship's child spec
        registry: Registry shared by the whole traversal, if any
    """

    include: Dict[str, Optional["CloneSpec"]] = field(default_factory=dict)
    except_fields: List[str] = field(default_factory=list)
    nested_exceptions: Dict[str, Any] = field(default_factory=dict)
    registry: Optional[CloneRegistry] = None

    @property
    def use_registry(self) -> bool:
        return self.registry is not None

    def add_include(self, name: str, nested: Optional["CloneSpec"] = None) -> None:
        """
        Add a relationship to follow.

        A name already present keeps its position; nested specs are merged.
        """
        if name not in self.include:
            self.include[name] = nested
            return

        existing = self.include[name]
        if existing is None:
            self.include[name] = nested
        elif nested is not None:
            for child_name, child_nested in nested.include.items():
                existing.add_include(child_name, child_nested)

    def exceptions_for(self, relationship: str) -> Any:
        """Raw exception spec for a relationship's children, or None."""
        return self.nested_exceptions.get(relationship)

    def child(self, relationship: str, parser: "CloneSpecParser") -> "CloneSpec":
        """
        Build the spec used to clone the members of `relationship`.

        The child includes what was nested under the relationship, takes the
        exceptions keyed under it, and shares this spec's registry.
        """
        nested = self.include.get(relationship)
        child = CloneSpec(registry=self.registry)
        if nested is not None:
            for name, deeper in nested.include.items():
                child.add_include(name, deeper)

        fields, deeper_exceptions = parser.parse_except(self.exceptions_for(relationship))
        child.except_fields = fields
        child.nested_exceptions = deeper_exceptions
        return child

    def with_always_included(self, names: Tuple[str, ...]) -> "CloneSpec":
        """Return a copy with type-level relationships appended as bare names."""
        merged = CloneSpec(
            except_fields=list(self.except_fields),
            nested_exceptions=dict(self.nested_exceptions),
            registry=self.registry,
        )
        for name, nested in self.include.items():
            merged.include[name] = nested
        for name in names:
            merged.add_include(name)
        return merged


class CloneSpecParser:
    """
    Normalizes raw include/except structures into CloneSpec.

    Relationship names are not checked here: the parser does not know the
    entity types. The cloner resolves them when it traverses.
    """

    def parse(self, options: CloneOptions) -> CloneSpec:
        """
        Parse clone options into the root CloneSpec.

        A registry is attached when options.dictionary is given, or created
        fresh when use_dictionary (or a use_dictionary modifier inside the
        include spec) is set.

        Example:
            spec = parser.parse(CloneOptions(
                include=['mateys', {'treasures': 'gold_pieces'}],
                except_=['name', {'mateys': ['name']}],
            ))
            # spec.include == {'mateys': None, 'treasures': CloneSpec({'gold_pieces': None})}
            # spec.except_fields == ['name']
            # spec.nested_exceptions == {'mateys': ['name']}
        """
        modifiers: Dict[str, Any] = {}
        spec = self.parse_include(options.include, modifiers)

        dictionary = options.dictionary if options.dictionary is not None else modifiers.get(DICTIONARY)
        if dictionary is not None and not isinstance(dictionary, CloneRegistry):
            raise ConfigurationError(
                None, f"dictionary must be a CloneRegistry, got {type(dictionary).__name__}"
            )
        if dictionary is None and (options.use_dictionary or modifiers.get(USE_DICTIONARY)):
            dictionary = CloneRegistry()
        spec.registry = dictionary

        spec.except_fields, spec.nested_exceptions = self.parse_except(options.except_)
        return spec

    def parse_include(self, raw: Any, modifiers: Optional[Dict[str, Any]] = None) -> CloneSpec:
        """
        Normalize an include spec.

        Args:
            raw: None, a name, a sequence of names and mappings, or a mapping
                {name: nested include}
            modifiers: Collects modifier flags found inside mappings

        Raises:
            ConfigurationError: for values that are not an accepted shape
        """
        spec = CloneSpec()
        if modifiers is None:
            modifiers = {}
        self._collect_include(raw, spec, modifiers)
        return spec

    def _collect_include(self, raw: Any, spec: CloneSpec, modifiers: Dict[str, Any]) -> None:
        if raw is None:
            return

        if isinstance(raw, str):
            spec.add_include(raw)
        elif isinstance(raw, Mapping):
            for key, value in raw.items():
                if key in MODIFIER_KEYS:
                    modifiers[key] = value
                    continue
                if not isinstance(key, str):
                    raise ConfigurationError(None, f"relationship names must be strings, got {key!r}")
                nested = self.parse_include(value, modifiers) if value is not None else None
                if nested is not None and not nested.include:
                    nested = None
                spec.add_include(key, nested)
        elif isinstance(raw, (list, tuple)):
            for item in raw:
                self._collect_include(item, spec, modifiers)
        else:
            raise ConfigurationError(None, f"unsupported include spec: {raw!r}")

    def parse_except(self, raw: Any) -> Tuple[List[str], Dict[str, Any]]:
        """
        Normalize an except spec.

        Returns:
            (field names, relationship name -> nested raw except spec).
            Several mappings are merged, later keys win.

        Raises:
            ConfigurationError: for values that are not an accepted shape
        """
        fields: List[str] = []
        nested: Dict[str, Any] = {}

        if raw is None:
            return fields, nested

        for item in _flatten(raw):
            if isinstance(item, str):
                if item not in fields:
                    fields.append(item)
            elif isinstance(item, Mapping):
                for key, value in item.items():
                    if not isinstance(key, str):
                        raise ConfigurationError(
                            None, f"relationship names must be strings, got {key!r}"
                        )
                    nested[key] = value
            else:
                raise ConfigurationError(None, f"unsupported except spec: {item!r}")

        return fields, nested


def _flatten(raw: Any) -> List[Any]:
    if not isinstance(raw, (list, tuple)):
        return [raw]
    items: List[Any] = []
    for item in raw:
        items.extend(_flatten(item))
    return items
