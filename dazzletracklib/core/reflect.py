"""Reflection over raw source nodes.

These functions define what "key exists", "own key exists", "own key list"
and "value of key" mean for each kind of node. Wrappers use them when
answering reads and the change detector uses them when replaying recorded
usage, so both sides always agree on the semantics.

Three node kinds are distinguished:

- MAPPING: keys are mapping keys (dict, mappingproxy, other Mappings)
- SEQUENCE: keys are non-negative indices (list, tuple, other Sequences)
- OBJECT: keys are attribute names (class instances)

For objects, existence follows the class hierarchy (like ``hasattr`` but
without running property getters) while own keys are the instance's own
attributes.
"""

import inspect
from collections.abc import Mapping, Sequence
from enum import Enum
from types import FunctionType
from typing import Any, Dict, List


SCALAR_TYPES = (type(None), bool, int, float, complex, str, bytes)


class _Missing:
    """Sentinel for values that are absent from a node."""

    __slots__ = ()

    def __repr__(self) -> str:
        return '<missing>'

    def __reduce__(self):
        return 'MISSING'


MISSING = _Missing()


class NodeKind(Enum):
    """How keys of a node are addressed."""
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    OBJECT = "object"


def is_scalar(value: Any) -> bool:
    """Check if a value is a scalar that compares by value."""
    return isinstance(value, SCALAR_TYPES)


def node_kind(node: Any) -> NodeKind:
    """Classify how the keys of ``node`` are addressed."""
    if isinstance(node, Mapping):
        return NodeKind.MAPPING
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray)):
        return NodeKind.SEQUENCE
    return NodeKind.OBJECT


def has_key(node: Any, key: Any) -> bool:
    """Check if ``key`` exists on ``node``, including inherited attributes."""
    kind = node_kind(node)
    if kind is NodeKind.MAPPING:
        return _mapping_contains(node, key)
    if kind is NodeKind.SEQUENCE:
        return _is_index(node, key)
    if not isinstance(key, str):
        return False
    return inspect.getattr_static(node, key, MISSING) is not MISSING


def has_own_key(node: Any, key: Any) -> bool:
    """Check if ``key`` is an own key of ``node``."""
    kind = node_kind(node)
    if kind is NodeKind.MAPPING:
        return _mapping_contains(node, key)
    if kind is NodeKind.SEQUENCE:
        return _is_index(node, key)
    return isinstance(key, str) and key in own_attributes(node)


def own_keys(node: Any) -> List[Any]:
    """Return the ordered list of own keys of ``node``."""
    kind = node_kind(node)
    if kind is NodeKind.MAPPING:
        return list(node)
    if kind is NodeKind.SEQUENCE:
        return list(range(len(node)))
    return list(own_attributes(node))


def read_value(node: Any, key: Any) -> Any:
    """Read the value stored under ``key``.

    Plain functions found on an object's class are returned unbound, so two
    instances of the same class report the same method.

    Returns:
        The value, or MISSING if the key is absent
    """
    kind = node_kind(node)
    if kind is NodeKind.MAPPING:
        # Membership first: indexing would run __missing__ on defaultdicts.
        if not _mapping_contains(node, key):
            return MISSING
        try:
            return node[key]
        except KeyError:
            return MISSING
    if kind is NodeKind.SEQUENCE:
        try:
            return node[key]
        except (IndexError, TypeError):
            return MISSING

    if not isinstance(key, str):
        return MISSING
    method = class_function(node, key)
    if method is not None:
        return method
    try:
        return getattr(node, key)
    except AttributeError:
        return MISSING


def class_function(node: Any, key: str):
    """Return the plain function ``key`` resolves to on the node's class.

    Returns None when the attribute is an own attribute, a descriptor other
    than a plain function, or absent.
    """
    if key in own_attributes(node):
        return None
    static = inspect.getattr_static(node, key, MISSING)
    if isinstance(static, FunctionType):
        return static
    return None


def own_attributes(node: Any) -> Dict[str, Any]:
    """Return the instance attribute dictionary (empty if there is none)."""
    try:
        return vars(node)
    except TypeError:
        return {}


def _mapping_contains(node: Any, key: Any) -> bool:
    try:
        return key in node
    except TypeError:
        return False


def _is_index(node: Any, key: Any) -> bool:
    if not isinstance(key, int) or isinstance(key, bool):
        return False
    return 0 <= key < len(node)
