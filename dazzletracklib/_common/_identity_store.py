"""
Private identity-keyed storage with weak references where the host allows.

Plain ``dict``, ``list`` and ``tuple`` objects cannot be weakly referenced and
are not hashable, so none of the tracking tables can be a WeakKeyDictionary.
This store keys entries by ``id()`` and keeps each key reachable in one of
two ways:

- Weak mode: keys that support weak references are held through a
  ``weakref.ref`` whose callback drops the entry once the key is collected.
- Strong mode: all other keys are held directly, which keeps the ``id()``
  from being reused while the entry exists.

An optional ``max_entries`` bound turns the store into an LRU, evicting the
least recently used entries first. With ``weak_values`` the values are held
weakly too, and an entry disappears as soon as its value is collected.
"""

import weakref
from collections import OrderedDict
from typing import Any, Dict, Iterator, Optional


class _Entry:
    """One stored key/value pair."""

    __slots__ = ['ref', 'value', 'weak', 'weak_value']

    def __init__(self, ref: Any, value: Any, weak: bool, weak_value: bool = False):
        self.ref = ref
        self.value = value
        self.weak = weak
        self.weak_value = weak_value

    def referent(self) -> Any:
        return self.ref() if self.weak else self.ref

    def held_value(self) -> Any:
        return self.value() if self.weak_value else self.value


class _IdentityStore:
    """
    Private identity-keyed mapping.

    Lookups compare keys by identity only, so unhashable containers can be
    used as keys and equal-but-distinct objects never collide.
    """

    def __init__(self, max_entries: Optional[int] = None, weak_values: bool = False):
        """
        Initialize an empty store.

        Args:
            max_entries: Maximum number of entries kept (None = unbounded).
                When set, the least recently used entry is evicted first.
            weak_values: Hold values through weak references where they
                support them, dropping the entry when the value is collected
        """
        if max_entries is not None and max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")

        self.max_entries = max_entries
        self.weak_values = weak_values
        self._entries: "OrderedDict[int, _Entry]" = OrderedDict()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: Any, default: Any = None) -> Any:
        """
        Get the value stored for ``key``.

        Args:
            key: Object whose identity is looked up

        Returns:
            Stored value, or ``default`` when the key is absent
        """
        entry = self._lookup(key)
        value = entry.held_value() if entry is not None else None
        if entry is None or (entry.weak_value and value is None):
            self.misses += 1
            return default

        self.hits += 1
        if self.max_entries is not None:
            self._entries.move_to_end(id(key))
        return value

    def set(self, key: Any, value: Any) -> None:
        """
        Store ``value`` for ``key``, replacing any previous value.

        Args:
            key: Object whose identity becomes the key
            value: Value to store
        """
        key_id = id(key)
        entry = self._lookup(key)
        if entry is not None:
            entry.value, entry.weak_value = self._hold_value(key_id, value)
            if self.max_entries is not None:
                self._entries.move_to_end(key_id)
            return

        try:
            ref = weakref.ref(key, self._make_evictor(key_id))
            weak = True
        except TypeError:
            ref = key
            weak = False

        held, weak_value = self._hold_value(key_id, value)
        self._entries[key_id] = _Entry(ref, held, weak, weak_value)

        if self.max_entries is not None and len(self._entries) > self.max_entries:
            self._evict_oldest()

    def discard(self, key: Any) -> bool:
        """
        Remove ``key`` if present.

        Returns:
            True if an entry was removed
        """
        if self._lookup(key) is None:
            return False
        del self._entries[id(key)]
        return True

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def keys(self) -> Iterator[Any]:
        """Iterate over live keys, oldest first."""
        for entry in list(self._entries.values()):
            referent = entry.referent()
            if referent is not None or not entry.weak:
                yield referent

    def __contains__(self, key: Any) -> bool:
        return self._lookup(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get store statistics.

        Returns:
            Dictionary with entry counts and hit metrics
        """
        stats = {
            'entries': len(self._entries),
            'weak_entries': sum(1 for e in self._entries.values() if e.weak),
            'strong_entries': sum(1 for e in self._entries.values() if not e.weak),
            'evictions': self.evictions,
        }

        total_attempts = self.hits + self.misses
        if total_attempts > 0:
            stats['hit_rate'] = self.hits / total_attempts

        return stats

    def _lookup(self, key: Any) -> Optional[_Entry]:
        entry = self._entries.get(id(key))
        if entry is None or entry.referent() is not key:
            return None
        if entry.weak_value and entry.value() is None:
            return None
        return entry

    def _hold_value(self, key_id: int, value: Any):
        if not self.weak_values:
            return value, False
        try:
            return weakref.ref(value, self._make_evictor(key_id, field='value')), True
        except TypeError:
            return value, False

    def _evict_oldest(self) -> None:
        """Evict the least recently used entry."""
        if len(self._entries) == 0:
            return
        self._entries.popitem(last=False)
        self.evictions += 1

    def _make_evictor(self, key_id: int, field: str = 'ref'):
        # Captures the entry table rather than the store so a dead store is
        # never kept alive by the references it handed out.
        entries = self._entries

        def evict(ref):
            entry = entries.get(key_id)
            if entry is not None and getattr(entry, field) is ref:
                del entries[key_id]

        return evict
