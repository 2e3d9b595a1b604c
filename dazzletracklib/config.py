"""Configuration system for DazzleTrackLib.

This module defines how users specify comparison behavior and how tracking
sessions wrap their state.
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .core.classifier import TrackableRegistry


class CompareMode(IntFlag):
    """Bit flags that adjust ``is_changed``.

    The plain flags apply to the top-level call. The ``_IN_DEEP`` variants
    apply to every nested call (as both top-level and deep flags there).
    """
    NONE = 0
    ASSUME_UNCHANGED_IF_UNAFFECTED = 1   # Unread nodes count as unchanged
    IGNORE_REF_EQUALITY = 2              # Recurse even into identical composites
    ASSUME_UNCHANGED_IF_UNAFFECTED_IN_DEEP = 1 << 2
    IGNORE_REF_EQUALITY_IN_DEEP = 2 << 2


@dataclass
class CompareConfig:
    """Configuration for change detection."""

    assume_unchanged_if_unaffected: bool = False
    ignore_ref_equality: bool = False
    assume_unchanged_if_unaffected_in_deep: bool = False
    ignore_ref_equality_in_deep: bool = False
    use_memo: bool = True   # Fresh memo per comparison (required for cycles)

    def to_mode(self) -> CompareMode:
        """Combine the flags into a CompareMode value."""
        mode = CompareMode.NONE
        if self.assume_unchanged_if_unaffected:
            mode |= CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED
        if self.ignore_ref_equality:
            mode |= CompareMode.IGNORE_REF_EQUALITY
        if self.assume_unchanged_if_unaffected_in_deep:
            mode |= CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED_IN_DEEP
        if self.ignore_ref_equality_in_deep:
            mode |= CompareMode.IGNORE_REF_EQUALITY_IN_DEEP
        return mode

    @classmethod
    def strict(cls) -> 'CompareConfig':
        """Unread nodes and replaced references always count as changes."""
        return cls()

    @classmethod
    def lenient(cls) -> 'CompareConfig':
        """Only differences in what was actually read count as changes."""
        return cls(
            assume_unchanged_if_unaffected=True,
            assume_unchanged_if_unaffected_in_deep=True,
        )

    @classmethod
    def for_mutable_state(cls) -> 'CompareConfig':
        """Compare state that is mutated in place.

        Identical references are recursed into, since the same object may
        hold different values than when it was read.
        """
        return cls(
            ignore_ref_equality=True,
            ignore_ref_equality_in_deep=True,
            use_memo=True,
        )

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.ignore_ref_equality_in_deep and not self.use_memo:
            errors.append("ignore_ref_equality_in_deep requires use_memo "
                          "(self-references would recurse forever)")
        return errors


@dataclass
class TrackingConfig:
    """Complete configuration for a tracking session."""

    compare: CompareConfig = field(default_factory=CompareConfig)

    # Override table for trackability (None uses the shared table)
    trackables: Optional['TrackableRegistry'] = None

    # Create a WrapperCache when the session is not given one
    share_wrappers: bool = True

    # Print warnings to stderr (wrapper rebuilds)
    verbose: bool = False

    # Bound on cached wrappers (None for unbounded)
    max_cached_wrappers: Optional[int] = None

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = list(self.compare.validate())
        if self.max_cached_wrappers is not None and self.max_cached_wrappers <= 0:
            errors.append("max_cached_wrappers must be positive")
        if self.max_cached_wrappers is not None and not self.share_wrappers:
            errors.append("max_cached_wrappers has no effect without share_wrappers")
        return errors
