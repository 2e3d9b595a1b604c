"""Wrapper façades that route ordinary Python access to a tracking handler.

Each wrapper holds a single handler (see ``proxy.TrackingHandler``) and turns
container protocol calls into the handler's traps:

- ``TrackedDict`` presents mappings as a MutableMapping
- ``TrackedList`` presents sequences as a MutableSequence
- ``TrackedObject`` presents class instances through attribute access

Wrappers are not subclasses of ``dict`` or ``list``: the built-in types'
C-level fast paths would bypass interception. Code that needs the original
object can unwrap with ``get_untracked``.
"""

from collections.abc import MutableMapping, MutableSequence
from typing import Any


class TrackedDict(MutableMapping):
    """Read-tracking view of a mapping."""

    __slots__ = ('_handler',)

    def __init__(self, handler):
        self._handler = handler

    def __getitem__(self, key):
        return self._handler.get(key)

    def __setitem__(self, key, value):
        self._handler.set(key, value)

    def __delitem__(self, key):
        self._handler.delete(key)

    def __contains__(self, key):
        return self._handler.has(key)

    def __iter__(self):
        return iter(self._handler.own_keys())

    def __len__(self):
        return self._handler.length()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._handler.target!r})"


class TrackedList(MutableSequence):
    """Read-tracking view of a sequence."""

    __slots__ = ('_handler',)

    def __init__(self, handler):
        self._handler = handler

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._handler.get_slice(index)
        return self._handler.get(index)

    def __setitem__(self, index, value):
        self._handler.set(index, value)

    def __delitem__(self, index):
        self._handler.delete(index)

    def insert(self, index, value):
        self._handler.insert(index, value)

    def __len__(self):
        return self._handler.length()

    def __iter__(self):
        # Length is re-read every step, like iterating a list being mutated.
        handler = self._handler
        index = 0
        while index < handler.length():
            yield handler.get(index)
            index += 1

    def __eq__(self, other):
        if isinstance(other, (list, tuple, TrackedList)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._handler.target!r})"


class TrackedObject:
    """Read-tracking view of a class instance.

    Every attribute lookup goes to the handler, so instance attributes,
    class attributes and methods are all tracked as value reads. Dunder
    names are forwarded untracked; ``__class__`` reports the source's class
    so ``isinstance`` checks keep working.
    """

    __slots__ = ('_handler',)

    def __init__(self, handler):
        object.__setattr__(self, '_handler', handler)

    def __getattribute__(self, name: str) -> Any:
        return object.__getattribute__(self, '_handler').get_attribute(name)

    def __setattr__(self, name: str, value: Any) -> None:
        object.__getattribute__(self, '_handler').set_attribute(name, value)

    def __delattr__(self, name: str) -> None:
        object.__getattribute__(self, '_handler').delete_attribute(name)

    def __repr__(self) -> str:
        target = object.__getattribute__(self, '_handler').target
        return f"TrackedObject({target!r})"


_WRAPPER_TYPES = (TrackedDict, TrackedList, TrackedObject)


def handler_of(value: Any):
    """Return the handler behind a wrapper, or None for any other value."""
    if type(value) in _WRAPPER_TYPES:
        return object.__getattribute__(value, '_handler')
    return None
