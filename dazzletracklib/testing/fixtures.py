"""Test fixtures for DazzleTrackLib consumers.

These fixtures provide controlled access to recorded usage for testing
purposes without exposing the registry's storage as part of the public API.
"""

from typing import Any, Dict, List, Optional

from ..core.paths import path_list
from ..core.proxy import get_original
from ..core.usage import UsageRecord


class UsageTestHelper:
    """Public test fixture for usage verification.

    Wraps a UsageRegistry (or a TrackingSession) and answers questions about
    what was read, so consumer test suites can assert on selectors without
    reaching into internals.

    Example:
        _, session = track_reads(state, select_visible_todos)
        helper = UsageTestHelper(session)

        assert helper.was_read(state, 'todos')
        assert not helper.was_read(state, 'filter_text')
        assert helper.get_summary()['value_reads'] > 0
    """

    def __init__(self, source):
        """Initialize with a usage registry or a tracking session.

        Args:
            source: UsageRegistry, or any object with a ``registry`` attribute
        """
        self._registry = getattr(source, 'registry', source)

    def _record(self, node: Any) -> Optional[UsageRecord]:
        return self._registry.get(get_original(node))

    def get_summary(self) -> Dict[str, Any]:
        """Returns high-level usage state for testing.

        Returns:
            Dictionary containing:
            - nodes: Number of nodes with recorded usage
            - has_keys: Existence checks recorded
            - has_own_keys: Own-key checks recorded
            - own_key_enumerations: Nodes whose keys were enumerated
            - value_reads: Value reads recorded
        """
        return self._registry.get_stats()

    def was_touched(self, node: Any) -> bool:
        """Check if any usage was recorded for ``node``."""
        return self._record(node) is not None

    def was_read(self, node: Any, key: Any) -> bool:
        """Check if the value under ``key`` was read on ``node``."""
        used = self._record(node)
        return used is not None and key in used.keys

    def was_checked(self, node: Any, key: Any) -> bool:
        """Check if the existence of ``key`` was tested on ``node``."""
        used = self._record(node)
        return used is not None and key in used.has_keys

    def was_own_checked(self, node: Any, key: Any) -> bool:
        """Check if the own existence of ``key`` was tested on ``node``."""
        used = self._record(node)
        return used is not None and key in used.has_own_keys

    def were_keys_enumerated(self, node: Any) -> bool:
        """Check if the full key list of ``node`` was read."""
        used = self._record(node)
        return used is not None and used.all_own_keys

    def read_keys(self, node: Any) -> List[Any]:
        """List the keys whose values were read on ``node``, in read order."""
        used = self._record(node)
        if used is None:
            return []
        return list(used.keys)

    def paths(self, root: Any, only_with_values: bool = False) -> List[List[Any]]:
        """List the paths read below ``root`` (see ``path_list``)."""
        return path_list(root, self._registry, only_with_values)
