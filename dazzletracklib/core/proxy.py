"""
Wrapper factory and tracking handlers.

``wrap`` turns a trackable source node into a read-tracking wrapper bound to
a UsageRegistry. Every read made through the wrapper is recorded against the
source node, and composite children are wrapped lazily the first time they
are read.

A TrackingHandler holds the per-source state behind a wrapper. When a
WrapperCache is passed, handlers (and therefore wrapper identities) are
reused across calls and across sessions; only the bound registry changes.
"""

import sys
from types import MethodType
from typing import Any, Dict, List, Optional

from .._common import _IdentityStore
from ..errors import ImmutableSourceError
from . import reflect
from .classifier import TrackableRegistry, is_trackable
from .frozen import is_effectively_frozen, writable_copy_of
from .usage import UsageKind, UsageRegistry
from .wrappers import TrackedDict, TrackedList, TrackedObject, handler_of


class _TrackMemoMarker:
    __slots__ = ()

    def __repr__(self) -> str:
        return 'TRACK_MEMO'


# Existence-checking this key on a wrapper marks its node as fully used.
TRACK_MEMO = _TrackMemoMarker()


_FACADES = {
    reflect.NodeKind.MAPPING: TrackedDict,
    reflect.NodeKind.SEQUENCE: TrackedList,
    reflect.NodeKind.OBJECT: TrackedObject,
}


class TrackingHandler:
    """
    Per-source state behind a wrapper.

    Attributes:
        origin: The source node the wrapper stands for
        target: Object reads and writes go to (origin, or a writable copy
            of it when the origin was frozen at construction)
        frozen: Whether the origin was frozen at construction
        proxy: The wrapper façade
        registry: UsageRegistry currently bound (rebound on every wrap)
        cache: WrapperCache used when wrapping children
        trackables: Override table used when wrapping children
    """

    __slots__ = ['origin', 'target', 'frozen', 'kind', 'proxy',
                 'registry', 'cache', 'trackables', '__weakref__']

    def __init__(self, origin: Any, frozen: bool):
        self.origin = origin
        self.frozen = frozen
        self.target = writable_copy_of(origin) if frozen else origin
        self.kind = reflect.node_kind(origin)
        self.proxy = _FACADES[self.kind](self)
        self.registry: Optional[UsageRegistry] = None
        self.cache: Optional['WrapperCache'] = None
        self.trackables: Optional[TrackableRegistry] = None

    # Recording

    def _record(self, kind: UsageKind, key: Any = None) -> None:
        self.registry.record(self.origin, kind, key)

    def mark_fully_used(self) -> None:
        """Discard recorded usage and stop recording for the bound registry."""
        self.registry.mark_fully_used(self.origin)

    def _wrap_child(self, value: Any) -> Any:
        return wrap(value, self.registry, self.cache, self.trackables)

    # Read traps

    def has(self, key: Any) -> bool:
        if key is TRACK_MEMO:
            self.mark_fully_used()
            return True
        self._record(UsageKind.HAS_KEY, key)
        return reflect.has_key(self.target, key)

    def has_own(self, key: Any) -> bool:
        self._record(UsageKind.HAS_OWN_KEY, key)
        return reflect.has_own_key(self.target, key)

    def own_keys(self) -> List[Any]:
        self._record(UsageKind.ALL_OWN_KEYS)
        return reflect.own_keys(self.target)

    def length(self) -> int:
        self._record(UsageKind.ALL_OWN_KEYS)
        return len(self.target)

    def get(self, key: Any) -> Any:
        self._record(UsageKind.KEYS, key)
        return self._wrap_child(self.target[key])

    def get_slice(self, index: slice) -> List[Any]:
        self._record(UsageKind.ALL_OWN_KEYS)
        return [self.get(i) for i in range(*index.indices(len(self.target)))]

    def get_attribute(self, name: str) -> Any:
        if name.startswith('__') and name.endswith('__'):
            if name == '__class__':
                return type(self.origin)
            return getattr(self.target, name)

        self._record(UsageKind.KEYS, name)
        method = reflect.class_function(self.target, name)
        if method is not None:
            return MethodType(method, self.proxy)
        return self._wrap_child(getattr(self.target, name))

    # Write traps

    def _check_writable(self, operation: str, key: Any) -> None:
        if self.frozen:
            raise ImmutableSourceError(operation, key, type(self.origin))

    def set(self, key: Any, value: Any) -> None:
        self._check_writable('set', key)
        self.target[key] = value

    def delete(self, key: Any) -> None:
        self._check_writable('delete', key)
        del self.target[key]

    def insert(self, index: int, value: Any) -> None:
        self._check_writable('insert', index)
        self.target.insert(index, value)

    def set_attribute(self, name: str, value: Any) -> None:
        self._check_writable('set', name)
        setattr(self.target, name, value)

    def delete_attribute(self, name: str) -> None:
        self._check_writable('delete', name)
        delattr(self.target, name)

    def __repr__(self) -> str:
        return (f"TrackingHandler(origin={type(self.origin).__name__}, "
                f"frozen={self.frozen})")


class WrapperCache:
    """
    Identity-keyed store from source node to its TrackingHandler.

    Sharing one cache between sessions makes ``wrap(x, r1, cache) is
    wrap(x, r2, cache)`` hold for any two registries while the wrapper is
    alive. Handlers are held weakly: once nothing references a wrapper its
    entry is dropped, so the cache never keeps a source alive.

    Example:
        cache = WrapperCache()
        first = wrap(state, UsageRegistry(), cache)
        second = wrap(state, UsageRegistry(), cache)
        assert first is second
    """

    def __init__(self, max_entries: Optional[int] = None, verbose: bool = False):
        """
        Initialize the cache.

        Args:
            max_entries: Maximum handlers kept, least recently used evicted
                first (None for unbounded)
            verbose: Print a warning to stderr when a handler is rebuilt
        """
        self._handlers = _IdentityStore(max_entries=max_entries, weak_values=True)
        self.verbose = verbose
        self.rebuilds = 0

    def lookup(self, node: Any) -> Optional[TrackingHandler]:
        """Get the cached handler for ``node``, or None."""
        return self._handlers.get(node)

    def store(self, node: Any, handler: TrackingHandler) -> None:
        """Store ``handler`` for ``node``, replacing any previous one."""
        self._handlers.set(node, handler)

    def replace(self, node: Any, handler: TrackingHandler) -> None:
        """Replace a stale handler for ``node`` and count the rebuild."""
        self.rebuilds += 1
        if self.verbose:
            print(f"WARNING: Rebuilding wrapper for {type(node).__name__} "
                  f"at 0x{id(node):x} (frozen={handler.frozen})",
                  file=sys.stderr)
        self.store(node, handler)

    def clear(self) -> None:
        self._handlers.clear()
        self.rebuilds = 0

    def __contains__(self, node: Any) -> bool:
        return node in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with entries, hits, misses, rebuilds and hit_rate
        """
        stats = self._handlers.get_stats()
        return {
            'entries': stats['entries'],
            'hits': stats['hits'],
            'misses': stats['misses'],
            'hit_rate': stats['hit_rate'],
            'evictions': stats['evictions'],
            'rebuilds': self.rebuilds,
        }


def wrap(node: Any, registry: UsageRegistry, cache: Optional[WrapperCache] = None,
         trackables: Optional[TrackableRegistry] = None) -> Any:
    """
    Wrap a trackable node so reads through it are recorded in ``registry``.

    Non-trackable values are returned unchanged. Wrapping a wrapper wraps its
    source instead. With a cache, the same wrapper object is returned for the
    same source for as long as its frozen state is unchanged.

    Args:
        node: Value to wrap
        registry: Registry that receives usage records
        cache: Optional WrapperCache for stable wrapper identity
        trackables: Override table (default: the shared table)

    Returns:
        The wrapper, or ``node`` itself if it is not trackable
    """
    if registry is None:
        raise ValueError("wrap() requires a UsageRegistry")
    if not is_trackable(node, trackables):
        return node

    origin = get_original(node)
    frozen = is_effectively_frozen(origin)

    handler = cache.lookup(origin) if cache is not None else None
    if handler is None or _is_stale(handler, origin, frozen):
        stale = handler
        handler = TrackingHandler(origin, frozen)
        if cache is not None:
            if stale is None:
                cache.store(origin, handler)
            else:
                cache.replace(origin, handler)

    handler.registry = registry
    handler.cache = cache
    handler.trackables = trackables
    return handler.proxy


def _is_stale(handler: TrackingHandler, origin: Any, frozen: bool) -> bool:
    if handler.frozen != frozen:
        return True
    # The memoized copy is replaced when the source is unmarked and marked again.
    return frozen and handler.target is not writable_copy_of(origin)


def get_untracked(obj: Any) -> Any:
    """Return the source node behind a wrapper, or None if ``obj`` is not one."""
    handler = handler_of(obj)
    if handler is None:
        return None
    return handler.origin


def get_original(obj: Any) -> Any:
    """Return the source node behind a wrapper, or ``obj`` itself."""
    handler = handler_of(obj)
    if handler is None:
        return obj
    return handler.origin


def has(obj: Any, key: Any) -> bool:
    """Check key existence, recording it when ``obj`` is a wrapper."""
    handler = handler_of(obj)
    if handler is None:
        return reflect.has_key(obj, key)
    return handler.has(key)


def has_own(obj: Any, key: Any) -> bool:
    """Check own-key existence, recording it when ``obj`` is a wrapper."""
    handler = handler_of(obj)
    if handler is None:
        return reflect.has_own_key(obj, key)
    return handler.has_own(key)


def own_keys(obj: Any) -> List[Any]:
    """List own keys, recording the enumeration when ``obj`` is a wrapper."""
    handler = handler_of(obj)
    if handler is None:
        return reflect.own_keys(obj)
    return handler.own_keys()


def track_memo(obj: Any) -> bool:
    """
    Mark a wrapped node as fully used.

    Usage recorded so far for the node is dropped and nothing more is
    recorded for it in the current session, so any later difference in the
    node counts as a change.

    Returns:
        True if ``obj`` is a wrapper (and was marked), False otherwise
    """
    return has(obj, TRACK_MEMO)
