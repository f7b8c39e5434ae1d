"""
CloneRegistry: the clone dictionary.

Within one clone session every original entity is cloned at most once: the
first clone produced for a (type, identity) key is stored and handed out for
every later lookup of the same key. This keeps shared nodes shared in the
copy and makes cycles terminate.

Not thread-safe. Hosts that reuse one registry across concurrent clone calls
must serialize access themselves.
"""

from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Set, Tuple

RegistryKey = Tuple[str, Hashable]


class CloneRegistry:
    """
    Mapping of (type name, original identity) -> clone.

    Entries are never overwritten. They are only removed by rolling back to
    a checkpoint, which the cloner does when a clone call fails. Besides the
    clones themselves the registry remembers which keys are still being
    populated, so a cycle that reaches an in-progress entity can stop there.

    Example:
        registry = CloneRegistry()
        for matey in jack.mateys:
            registry.seed('Matey', matey.id, store.shallow_clone(matey))
        store.clone(jack, include=['mateys', {'treasures': 'matey'}], dictionary=registry)
    """

    def __init__(self):
        self._clones: Dict[RegistryKey, Any] = {}
        self._in_progress: Set[RegistryKey] = set()

        self.stats = {
            'hits': 0,
            'misses': 0,
        }

    def get_or_create(self, type_name: str, identity: Hashable, produce: Callable[[], Any]) -> Any:
        """
        Return the clone stored under (type_name, identity), producing and
        storing it first if there is none.

        Args:
            type_name: Entity type of the original
            identity: Identity of the original, unique within its type
            produce: Builds the clone; called at most once per key
        """
        key = (type_name, identity)
        if key in self._clones:
            self.stats['hits'] += 1
            return self._clones[key]

        self.stats['misses'] += 1
        clone = produce()
        self._clones[key] = clone
        return clone

    def get(self, type_name: str, identity: Hashable) -> Optional[Any]:
        """Clone stored for an original, or None."""
        return self._clones.get((type_name, identity))

    def seed(self, type_name: str, identity: Hashable, clone: Any) -> None:
        """
        Pre-populate the registry with a clone made outside the cloner.

        Raises:
            KeyError: if the key already has a clone
        """
        key = (type_name, identity)
        if key in self._clones:
            raise KeyError(f"registry already holds a clone for {key}")
        self._clones[key] = clone

    def begin(self, type_name: str, identity: Hashable) -> bool:
        """
        Mark a key as being populated.

        Returns:
            False if it already was (the caller has come back around a cycle)
        """
        key = (type_name, identity)
        if key in self._in_progress:
            return False
        self._in_progress.add(key)
        return True

    def finish(self, type_name: str, identity: Hashable) -> None:
        """Mark a key as fully populated."""
        self._in_progress.discard((type_name, identity))

    def checkpoint(self) -> int:
        """Mark the current contents, for a later rollback()."""
        return len(self._clones)

    def rollback(self, mark: int) -> List[RegistryKey]:
        """
        Drop every entry stored after checkpoint() returned mark.

        Entries present at the checkpoint, seeded ones included, are kept.

        Returns:
            The keys that were dropped
        """
        dropped = list(self._clones)[mark:]
        for key in dropped:
            del self._clones[key]
            self._in_progress.discard(key)
        return dropped

    def clones(self, type_name: Optional[str] = None) -> List[Any]:
        """All clones, or the clones of one type, in insertion order."""
        return [
            clone for (kind, _), clone in self._clones.items()
            if type_name is None or kind == type_name
        ]

    def get_stats(self) -> Dict[str, Any]:
        """Lookup statistics."""
        lookups = self.stats['hits'] + self.stats['misses']
        return {
            **self.stats,
            'entries': len(self._clones),
            'hit_rate': self.stats['hits'] / lookups if lookups > 0 else 0.0,
        }

    def __contains__(self, key: RegistryKey) -> bool:
        return key in self._clones

    def __len__(self) -> int:
        return len(self._clones)

    def __iter__(self) -> Iterator[RegistryKey]:
        return iter(self._clones)

    def __repr__(self) -> str:
        return f"CloneRegistry(entries={len(self)}, in_progress={len(self._in_progress)})"
