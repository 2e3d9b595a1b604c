"""Testing utilities for DazzleTrackLib consumers."""

from .fixtures import UsageTestHelper

__all__ = ['UsageTestHelper']
