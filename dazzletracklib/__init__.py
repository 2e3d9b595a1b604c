"""DazzleTrackLib - Read Tracking and Selective Change Detection.

DazzleTrackLib wraps plain Python state (dicts, lists, tuples and opted-in
objects) so that every read made through the wrapper is recorded. Given new
state, it then answers one question cheaply: did anything that was actually
read change?

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Session API:
    from dazzletracklib import TrackingSession

    session = TrackingSession(state)
    render(session.proxy)
    if session.is_changed(new_state):
        ...

Low-level API:
    from dazzletracklib import UsageRegistry, wrap, is_changed

    registry = UsageRegistry()
    render(wrap(state, registry))
    is_changed(state, new_state, registry)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .core import (
    TrackableRegistry,
    DEFAULT_TRACKABLES,
    mark_trackable,
    clear_trackable,
    is_trackable,
    mark_frozen,
    is_effectively_frozen,
    writable_copy_of,
    UsageKind,
    UsageRecord,
    UsageRegistry,
    TrackedDict,
    TrackedList,
    TrackedObject,
    TRACK_MEMO,
    WrapperCache,
    wrap,
    get_untracked,
    get_original,
    has,
    has_own,
    own_keys,
    track_memo,
    ChangeMemo,
    is_changed,
    path_list,
)
from .config import CompareMode, CompareConfig, TrackingConfig
from .errors import (
    TrackingError,
    ImmutableSourceError,
    CycleWithoutMemoError,
    ConfigurationError,
)
from .api import TrackingSession, track_reads

__all__ = [
    "__version__",
    # Classification
    "TrackableRegistry",
    "DEFAULT_TRACKABLES",
    "mark_trackable",
    "clear_trackable",
    "is_trackable",
    # Frozen sources
    "mark_frozen",
    "is_effectively_frozen",
    "writable_copy_of",
    # Usage tracking
    "UsageKind",
    "UsageRecord",
    "UsageRegistry",
    "TrackedDict",
    "TrackedList",
    "TrackedObject",
    "TRACK_MEMO",
    "WrapperCache",
    "wrap",
    "get_untracked",
    "get_original",
    "has",
    "has_own",
    "own_keys",
    "track_memo",
    # Change detection
    "ChangeMemo",
    "is_changed",
    "path_list",
    # Configuration
    "CompareMode",
    "CompareConfig",
    "TrackingConfig",
    # Errors
    "TrackingError",
    "ImmutableSourceError",
    "CycleWithoutMemoError",
    "ConfigurationError",
    # High-level API
    "TrackingSession",
    "track_reads",
]
