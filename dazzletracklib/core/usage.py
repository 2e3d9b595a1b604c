"""Usage records: what kind of access touched which keys of which node.

A UsageRegistry is created fresh for every tracking session. Wrappers bound
to the session write into it as reads happen; the change detector and the
path-list reconstructor only read from it.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Optional

from .._common import _IdentityStore


class UsageKind(Enum):
    """Kinds of access recorded per node."""
    HAS_KEY = "has"              # Key existence, may see inherited keys
    HAS_OWN_KEY = "has_own"      # Own key existence
    ALL_OWN_KEYS = "own_keys"    # Ordered own key list enumerated
    KEYS = "keys"                # Value read


class UsageRecord:
    """
    Observations made on one source node.

    Keeps four independent observations so comparisons can be precise:
    - has_keys: keys whose existence was checked
    - has_own_keys: keys whose own existence was checked
    - all_own_keys: whether the full own key list was enumerated
    - keys: keys whose value was read

    Key collections are insertion-ordered dicts used as ordered sets.
    """

    __slots__ = ['has_keys', 'has_own_keys', 'all_own_keys', 'keys']

    def __init__(self):
        self.has_keys: Dict[Any, None] = {}
        self.has_own_keys: Dict[Any, None] = {}
        self.all_own_keys = False
        self.keys: Dict[Any, None] = {}

    def add(self, kind: UsageKind, key: Any = None) -> None:
        """Record one access of the given kind."""
        if kind is UsageKind.ALL_OWN_KEYS:
            self.all_own_keys = True
        elif kind is UsageKind.HAS_KEY:
            self.has_keys[key] = None
        elif kind is UsageKind.HAS_OWN_KEY:
            self.has_own_keys[key] = None
        else:
            self.keys[key] = None

    def is_empty(self) -> bool:
        return not (self.has_keys or self.has_own_keys or self.all_own_keys or self.keys)

    def __repr__(self) -> str:
        return (
            f"UsageRecord(has_keys={list(self.has_keys)!r}, "
            f"has_own_keys={list(self.has_own_keys)!r}, "
            f"all_own_keys={self.all_own_keys!r}, keys={list(self.keys)!r})"
        )


class UsageRegistry:
    """
    Per-session mapping from source node to its UsageRecord.

    Keyed by node identity. Plain containers are held strongly for the
    lifetime of the registry, so a registry should be discarded together
    with the session it belongs to.
    """

    def __init__(self):
        self._records = _IdentityStore()
        self._fully_used = _IdentityStore()

    def get(self, node: Any) -> Optional[UsageRecord]:
        """Get the usage record for ``node``, or None if it was never touched."""
        return self._records.get(node)

    def record(self, node: Any, kind: UsageKind, key: Any = None) -> Optional[UsageRecord]:
        """Record an access on ``node``, creating its record when needed.

        Nothing is recorded for a node marked fully used.
        """
        if node in self._fully_used:
            return None
        used = self._records.get(node)
        if used is None:
            used = UsageRecord()
            self._records.set(node, used)
        used.add(kind, key)
        return used

    def discard(self, node: Any) -> bool:
        """Drop all usage recorded for ``node``."""
        return self._records.discard(node)

    def mark_fully_used(self, node: Any) -> None:
        """Drop usage recorded for ``node`` and stop recording it."""
        self._fully_used.set(node, True)
        self._records.discard(node)

    def is_fully_used(self, node: Any) -> bool:
        return node in self._fully_used

    def nodes(self) -> Iterable[Any]:
        """Iterate over nodes with a usage record, in first-touch order."""
        return self._records.keys()

    def __contains__(self, node: Any) -> bool:
        return node in self._records

    def __len__(self) -> int:
        return len(self._records)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get registry statistics.

        Returns:
            Dictionary with node and key counts per access kind
        """
        stats = {
            'nodes': 0,
            'has_keys': 0,
            'has_own_keys': 0,
            'own_key_enumerations': 0,
            'value_reads': 0,
        }
        for node in self.nodes():
            used = self._records.get(node)
            if used is None:
                continue
            stats['nodes'] += 1
            stats['has_keys'] += len(used.has_keys)
            stats['has_own_keys'] += len(used.has_own_keys)
            stats['own_key_enumerations'] += int(used.all_own_keys)
            stats['value_reads'] += len(used.keys)
        return stats
