"""Frozen-source adapter.

A wrapper over a frozen source reads from a writable copy of it and rejects
writes. Two freezing mechanisms are detected:

- Whole-object immutability: ``tuple``, ``types.MappingProxyType``, or any
  object registered with ``mark_frozen`` (Python has no way to freeze an
  existing dict or list in place, so the mark stands in for it).
- Per-field immutability: instances of frozen dataclasses. Their fields
  reject assignment through the class without any per-instance flag.

Copies are memoized by source identity so repeated wraps of one frozen
source always read from the same copy.
"""

import copy
import dataclasses
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from .._common import _IdentityStore
from .reflect import is_scalar


# Frozen marks live as long as the marked object (or until unmarked).
_frozen_marks = _IdentityStore()

# Copies are only a referential-stability optimization, so the table is bounded.
_writable_copies = _IdentityStore(max_entries=10000)


def mark_frozen(node: Any, frozen: bool = True) -> None:
    """Mark an existing object as frozen, or remove the mark.

    Wrappers created afterwards treat the object as immutable: they read
    from a writable copy and reject writes. Scalars are ignored.

    Args:
        node: Object to mark
        frozen: False removes a previous mark and forgets the memoized
            writable copy, so a later mark copies the current contents
    """
    if is_scalar(node):
        return
    if frozen:
        _frozen_marks.set(node, True)
    else:
        _frozen_marks.discard(node)
        _writable_copies.discard(node)


def is_effectively_frozen(node: Any) -> bool:
    """Check if ``node`` is immutable as a whole or has read-only fields."""
    if isinstance(node, (tuple, MappingProxyType)):
        return True
    if node in _frozen_marks:
        return True
    return _has_read_only_fields(node)


def writable_copy_of(node: Any) -> Any:
    """Return a shallow writable copy of ``node``, memoized by identity.

    Sequences are copied element by element into a list and mapping proxies
    into a dict. Other objects are copied with ``copy.copy``, which keeps
    their class and bypasses custom ``__setattr__`` hooks. A copy of a frozen
    dataclass instance keeps its class and therefore stays read-only.
    """
    unfrozen = _writable_copies.get(node)
    if unfrozen is None:
        if isinstance(node, (tuple, list)):
            unfrozen = list(node)
        elif isinstance(node, MappingProxyType):
            unfrozen = dict(node)
        elif isinstance(node, Mapping):
            unfrozen = copy.copy(node)
        elif isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
            unfrozen = list(node)
        else:
            unfrozen = copy.copy(node)
        _writable_copies.set(node, unfrozen)
    return unfrozen


def _has_read_only_fields(node: Any) -> bool:
    if isinstance(node, type) or not dataclasses.is_dataclass(node):
        return False
    params = getattr(type(node), '__dataclass_params__', None)
    return bool(params is not None and params.frozen)
