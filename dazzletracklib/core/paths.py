"""Reconstruct the paths that were read from a usage registry.

Intended for debugging and test assertions; nothing in change detection
depends on it.
"""

from typing import Any, Dict, List, Optional

from . import reflect
from .classifier import is_object
from .proxy import get_original
from .usage import UsageRegistry


OWN_KEYS_MARKER = ':ownKeys'


def has_marker(key: Any) -> str:
    """Path segment for an existence check of ``key``."""
    return f':has({key})'


def has_own_marker(key: Any) -> str:
    """Path segment for an own-key check of ``key``."""
    return f':hasOwn({key})'


def path_list(root: Any, registry: UsageRegistry,
              only_with_values: bool = False) -> List[List[Any]]:
    """
    List every path read below ``root``.

    Each value read becomes a path of keys from the root down to a node with
    no further usage. Existence checks, own-key checks and own-key
    enumerations become paths ending in a marker segment (``:has(key)``,
    ``:hasOwn(key)``, ``:ownKeys``). Markers of a node come before the
    paths of its children, and children follow the order of their first
    read.

    Args:
        root: State (or wrapper) the reads were made on
        registry: UsageRegistry holding the reads
        only_with_values: Skip keys that are not own data values, such as
            properties and methods of class instances

    Returns:
        List of paths, each a list of keys and markers

    Example:
        >>> registry = UsageRegistry()
        >>> state = wrap({'a': {'b': 1}, 'c': 2}, registry)
        >>> state['a']['b']
        1
        >>> path_list(state, registry)
        [['a', 'b']]
    """
    paths: List[List[Any]] = []
    seen: Dict[int, Any] = {}

    def walk(node: Any, path: Optional[List[Any]]) -> None:
        node = get_original(node)
        if is_object(node):
            if id(node) in seen:
                return
            seen[id(node)] = node

        used = registry.get(node) if is_object(node) else None
        if used is None:
            if path:
                paths.append(path)
            return

        prefix = path or []
        for key in used.has_keys:
            paths.append(prefix + [has_marker(key)])
        if used.all_own_keys:
            paths.append(prefix + [OWN_KEYS_MARKER])
        else:
            for key in used.has_own_keys:
                paths.append(prefix + [has_own_marker(key)])

        for key in used.keys:
            if only_with_values and not reflect.has_own_key(node, key):
                continue
            walk(reflect.read_value(node, key), prefix + [key])

    walk(root, None)
    return paths
