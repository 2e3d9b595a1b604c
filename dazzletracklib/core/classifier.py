"""Trackability classification.

Decides whether a value is a trackable composite (wrapped and tracked key by
key) or an opaque leaf (passed through and compared by reference). Plain
containers are trackable by default; anything else can opt in, and plain
containers can opt out, through a TrackableRegistry.
"""

from types import MappingProxyType
from typing import Any, Optional

from .._common import _IdentityStore
from .reflect import MISSING, is_scalar
from .wrappers import handler_of


# Exact types tracked without an override. Subclasses are opaque by default.
PLAIN_TYPES = (dict, list, tuple, MappingProxyType)


class TrackableRegistry:
    """Per-object trackability overrides.

    Overrides are keyed by identity. Objects that support weak references
    drop out of the registry when collected; plain containers are held until
    ``clear`` is called for them.

    Example:
        registry = TrackableRegistry()
        registry.mark(settings_instance)        # opt a class instance in
        registry.mark(huge_lookup_table, False) # treat a dict as opaque
    """

    def __init__(self):
        self._overrides = _IdentityStore()

    def mark(self, node: Any, trackable: bool = True) -> None:
        """Record an explicit override for ``node``. Scalars are ignored.

        A wrapper is marked through its source.
        """
        if is_scalar(node):
            return
        self._overrides.set(_source_of(node), bool(trackable))

    def clear(self, node: Any) -> bool:
        """Remove the override for ``node``.

        Returns:
            True if an override was removed
        """
        return self._overrides.discard(_source_of(node))

    def get_override(self, node: Any) -> Optional[bool]:
        """Return the override for ``node``, or None if none is registered."""
        return self._overrides.get(_source_of(node))

    def is_trackable(self, node: Any) -> bool:
        """Check if ``node`` should be wrapped and tracked key by key."""
        if is_scalar(node) or node is MISSING:
            return False
        node = _source_of(node)
        override = self._overrides.get(node)
        if override is not None:
            return override
        return type(node) in PLAIN_TYPES

    def __len__(self) -> int:
        return len(self._overrides)


def _source_of(node: Any) -> Any:
    handler = handler_of(node)
    return node if handler is None else handler.origin


DEFAULT_TRACKABLES = TrackableRegistry()


def _resolve(registry: Optional[TrackableRegistry]) -> TrackableRegistry:
    return DEFAULT_TRACKABLES if registry is None else registry


def mark_trackable(node: Any, trackable: bool = True,
                   registry: Optional[TrackableRegistry] = None) -> None:
    """Mark an object to be tracked or not.

    By default only plain dicts, lists, tuples and mapping proxies are
    tracked. Use this to track a class instance, or to treat a plain
    container as an opaque leaf.

    Args:
        node: Object to mark
        trackable: Whether the object should be tracked
        registry: Override table to use (default: the shared table)
    """
    _resolve(registry).mark(node, trackable)


def clear_trackable(node: Any, registry: Optional[TrackableRegistry] = None) -> bool:
    """Remove an override registered with ``mark_trackable``."""
    return _resolve(registry).clear(node)


def is_trackable(node: Any, registry: Optional[TrackableRegistry] = None) -> bool:
    """Check if ``node`` is a trackable composite."""
    return _resolve(registry).is_trackable(node)


def is_object(value: Any) -> bool:
    """Check if a value is a composite for comparison purposes."""
    return value is not MISSING and not is_scalar(value)
