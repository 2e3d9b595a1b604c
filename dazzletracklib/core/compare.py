"""
Selective change detection.

``is_changed`` decides whether a candidate state differs from a previous
state in any way that matters to the reads recorded in a UsageRegistry.
Only recorded observations are replayed: keys that were never read may
change freely without the candidate being reported as changed.
"""

import math
from types import MethodType
from typing import Any, Optional

from .._common import _IdentityStore
from ..config import CompareMode
from ..errors import CycleWithoutMemoError
from . import reflect
from .classifier import is_object
from .proxy import get_original
from .usage import UsageRegistry


class ChangeMemo:
    """
    Verdicts of previous comparisons, keyed by the previous node.

    Each entry remembers the candidate it was computed against, so a lookup
    only hits when both sides are the same objects. Entries are seeded with
    "unchanged" before recursing, which makes cyclic graphs terminate.
    """

    def __init__(self):
        self._verdicts = _IdentityStore()

    def lookup(self, previous: Any, candidate: Any) -> Optional[bool]:
        """Return the stored verdict for this pair, or None."""
        hit = self._verdicts.get(previous)
        if hit is not None and hit[0] is candidate:
            return hit[1]
        return None

    def store(self, previous: Any, candidate: Any, changed: bool) -> None:
        self._verdicts.set(previous, (candidate, changed))

    def clear(self) -> None:
        self._verdicts.clear()

    def __len__(self) -> int:
        return len(self._verdicts)


def nested_mode(mode: int) -> int:
    """Mode used for recursive calls: deep flags apply at both levels."""
    deep = mode >> 2
    return (deep << 2) | deep


def is_changed(previous: Any, candidate: Any, registry: UsageRegistry,
               memo: Optional[ChangeMemo] = None,
               mode: int = CompareMode.NONE) -> bool:
    """
    Check if ``candidate`` differs from ``previous`` in any recorded way.

    Args:
        previous: The state that was read through wrappers (or a wrapper)
        candidate: The state to compare against
        registry: UsageRegistry holding the reads made on ``previous``
        memo: Optional ChangeMemo; required for cyclic graphs
        mode: CompareMode flags

    Returns:
        True if any recorded observation gives a different answer on
        ``candidate``

    Raises:
        CycleWithoutMemoError: If the recursion limit was hit without a memo,
            usually because a cyclic graph was compared
    """
    try:
        return _is_changed(previous, candidate, registry, memo, int(mode))
    except RecursionError as error:
        if memo is not None or isinstance(error, CycleWithoutMemoError):
            raise
        raise CycleWithoutMemoError(
            "Comparison exceeded the recursion limit without a ChangeMemo; "
            "the state is cyclic or nested too deeply (pass a ChangeMemo for "
            "cyclic state)"
        ) from error


def _is_changed(previous: Any, candidate: Any, registry: UsageRegistry,
                memo: Optional[ChangeMemo], mode: int) -> bool:
    previous = get_original(previous)
    candidate = get_original(candidate)

    if _is_same(previous, candidate):
        if not (mode & CompareMode.IGNORE_REF_EQUALITY and is_object(previous)):
            return False
    if not is_object(previous) or not is_object(candidate):
        return True

    unaffected_verdict = not (mode & CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED)
    used = registry.get(previous)
    if used is None:
        return unaffected_verdict

    if memo is not None:
        hit = memo.lookup(previous, candidate)
        if hit is not None:
            return hit
        memo.store(previous, candidate, False)

    changed = None
    for key in used.has_keys:
        changed = reflect.has_key(previous, key) != reflect.has_key(candidate, key)
        if changed:
            break

    if not changed:
        if used.all_own_keys:
            changed = reflect.own_keys(previous) != reflect.own_keys(candidate)
        else:
            for key in used.has_own_keys:
                changed = (reflect.has_own_key(previous, key)
                           != reflect.has_own_key(candidate, key))
                if changed:
                    break

    if not changed:
        deep = nested_mode(mode)
        for key in used.keys:
            changed = _is_changed(
                reflect.read_value(previous, key),
                reflect.read_value(candidate, key),
                registry, memo, deep,
            )
            if changed:
                break

    if changed is None:
        changed = unaffected_verdict

    if memo is not None:
        memo.store(previous, candidate, changed)
    return changed


def _is_same(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        if math.isnan(a):
            return math.isnan(b)
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    if reflect.is_scalar(a):
        return a == b
    if isinstance(a, MethodType):
        return a.__func__ is b.__func__ and a.__self__ is b.__self__
    return False
