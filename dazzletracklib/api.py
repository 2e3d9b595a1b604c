"""High-level API for DazzleTrackLib.

This module provides a session object and a one-call helper for the common
cycle of "read state through a wrapper, then ask whether new state changed
anything that was read". They wrap the lower-level ``wrap`` / ``is_changed``
functions for ease of use in simple cases.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import TrackingConfig
from .core.compare import ChangeMemo, is_changed
from .core.paths import path_list
from .core.proxy import WrapperCache, wrap
from .core.usage import UsageRegistry
from .errors import ConfigurationError


class TrackingSession:
    """One round of tracked reads over a state.

    A session owns a fresh UsageRegistry and a wrapper of ``state`` bound to
    it. Reads made through ``proxy`` are recorded; ``is_changed`` then tells
    whether a candidate state differs in anything that was read.

    Example:
        >>> session = TrackingSession({'user': {'name': 'Ada'}, 'count': 1})
        >>> session.proxy['user']['name']
        'Ada'
        >>> session.is_changed({'user': {'name': 'Ada'}, 'count': 2})
        False
    """

    def __init__(self, state: Any, cache: Optional[WrapperCache] = None,
                 config: Optional[TrackingConfig] = None):
        """Start a session over ``state``.

        Args:
            state: State to track reads on
            cache: WrapperCache to share with other sessions. When None and
                the config enables ``share_wrappers``, a new cache is created
            config: Session configuration (default: TrackingConfig())

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = TrackingConfig() if config is None else config

        config_errors = self.config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        if cache is None and self.config.share_wrappers:
            cache = WrapperCache(
                max_entries=self.config.max_cached_wrappers,
                verbose=self.config.verbose,
            )

        self.state = state
        self.cache = cache
        self.registry = UsageRegistry()
        self.proxy = wrap(state, self.registry, cache, self.config.trackables)
        self.comparisons = 0

    def is_changed(self, candidate: Any, memo: Optional[ChangeMemo] = None) -> bool:
        """Check if ``candidate`` differs from the state in anything read.

        Args:
            candidate: New state to compare against
            memo: ChangeMemo to use. When None and the config enables
                ``use_memo``, a fresh memo is used for this call

        Returns:
            True if a recorded read gives a different answer on ``candidate``
        """
        compare = self.config.compare
        if memo is None and compare.use_memo:
            memo = ChangeMemo()
        self.comparisons += 1
        return is_changed(self.state, candidate, self.registry, memo, compare.to_mode())

    def path_list(self, only_with_values: bool = False) -> List[List[Any]]:
        """List the paths read so far (see ``path_list``)."""
        return path_list(self.state, self.registry, only_with_values)

    def next_session(self, state: Any) -> 'TrackingSession':
        """Start a new session over ``state`` sharing this session's cache and config."""
        return TrackingSession(state, cache=self.cache, config=self.config)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get session statistics.

        Returns:
            Dictionary with usage statistics, comparison count and, when a
            wrapper cache is in use, its statistics under 'cache'
        """
        stats = {
            'usage': self.registry.get_stats(),
            'comparisons': self.comparisons,
        }
        if self.cache is not None:
            stats['cache'] = self.cache.get_stats()
        return stats


def track_reads(
    state: Any,
    reader: Callable[[Any], Any],
    cache: Optional[WrapperCache] = None,
    config: Optional[TrackingConfig] = None,
) -> Tuple[Any, TrackingSession]:
    """Run ``reader`` over a tracked view of ``state``.

    Args:
        state: State to read
        reader: Function called with the wrapper of ``state``
        cache: Optional WrapperCache shared across calls
        config: Optional session configuration

    Returns:
        Tuple of (reader result, session holding the recorded reads)

    Example:
        >>> total, session = track_reads(state, lambda s: s['a'] + s['b'])
        >>> session.is_changed(new_state)
    """
    session = TrackingSession(state, cache=cache, config=config)
    return reader(session.proxy), session
