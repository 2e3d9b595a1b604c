"""Core tracking engine for DazzleTrackLib.

This module contains the wrapper factory, the usage registry, the selective
change detector and the path-list reconstructor.
"""

from .classifier import (
    TrackableRegistry,
    DEFAULT_TRACKABLES,
    mark_trackable,
    clear_trackable,
    is_trackable,
)
from .frozen import mark_frozen, is_effectively_frozen, writable_copy_of
from .usage import UsageKind, UsageRecord, UsageRegistry
from .wrappers import TrackedDict, TrackedList, TrackedObject
from .proxy import (
    TRACK_MEMO,
    TrackingHandler,
    WrapperCache,
    wrap,
    get_untracked,
    get_original,
    has,
    has_own,
    own_keys,
    track_memo,
)
from .compare import ChangeMemo, is_changed
from .paths import path_list

__all__ = [
    "TrackableRegistry",
    "DEFAULT_TRACKABLES",
    "mark_trackable",
    "clear_trackable",
    "is_trackable",
    "mark_frozen",
    "is_effectively_frozen",
    "writable_copy_of",
    "UsageKind",
    "UsageRecord",
    "UsageRegistry",
    "TrackedDict",
    "TrackedList",
    "TrackedObject",
    "TRACK_MEMO",
    "TrackingHandler",
    "WrapperCache",
    "wrap",
    "get_untracked",
    "get_original",
    "has",
    "has_own",
    "own_keys",
    "track_memo",
    "ChangeMemo",
    "is_changed",
    "path_list",
]
