"""
Tests for the configuration dataclasses and compare modes.
"""

from dazzletracklib import CompareConfig, CompareMode, TrackableRegistry, TrackingConfig


class TestCompareMode:
    """Test the flag values."""

    def test_flag_values(self):
        """Test that deep flags are the top-level flags shifted by two."""
        assert CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED == 1
        assert CompareMode.IGNORE_REF_EQUALITY == 2
        assert CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED_IN_DEEP == 1 << 2
        assert CompareMode.IGNORE_REF_EQUALITY_IN_DEEP == 2 << 2

    def test_flags_combine(self):
        """Test combining flags."""
        mode = CompareMode.IGNORE_REF_EQUALITY | CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED
        assert mode & CompareMode.IGNORE_REF_EQUALITY
        assert not mode & CompareMode.IGNORE_REF_EQUALITY_IN_DEEP


class TestCompareConfig:
    """Test CompareConfig."""

    def test_defaults(self):
        """Test that the default configuration is strict and memoized."""
        config = CompareConfig()

        assert config.to_mode() == CompareMode.NONE
        assert config.use_memo is True
        assert config.validate() == []

    def test_to_mode(self):
        """Test that each flag maps to its mode bit."""
        config = CompareConfig(
            assume_unchanged_if_unaffected=True,
            ignore_ref_equality_in_deep=True,
        )

        assert config.to_mode() == (
            CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED
            | CompareMode.IGNORE_REF_EQUALITY_IN_DEEP
        )

    def test_strict(self):
        """Test the strict preset."""
        assert CompareConfig.strict().to_mode() == CompareMode.NONE

    def test_lenient(self):
        """Test the lenient preset."""
        mode = CompareConfig.lenient().to_mode()

        assert mode & CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED
        assert mode & CompareMode.ASSUME_UNCHANGED_IF_UNAFFECTED_IN_DEEP
        assert not mode & CompareMode.IGNORE_REF_EQUALITY

    def test_for_mutable_state(self):
        """Test the preset for state mutated in place."""
        config = CompareConfig.for_mutable_state()

        assert config.use_memo is True
        assert config.to_mode() == (
            CompareMode.IGNORE_REF_EQUALITY | CompareMode.IGNORE_REF_EQUALITY_IN_DEEP
        )
        assert config.validate() == []

    def test_deep_ref_recursion_requires_memo(self):
        """Test that recursing into identical nodes without a memo is rejected."""
        config = CompareConfig(ignore_ref_equality_in_deep=True, use_memo=False)

        errors = config.validate()

        assert len(errors) == 1
        assert 'use_memo' in errors[0]


class TestTrackingConfig:
    """Test TrackingConfig."""

    def test_defaults(self):
        """Test default session configuration."""
        config = TrackingConfig()

        assert config.share_wrappers is True
        assert config.verbose is False
        assert config.trackables is None
        assert config.validate() == []

    def test_compare_errors_propagate(self):
        """Test that nested compare errors are reported."""
        config = TrackingConfig(
            compare=CompareConfig(ignore_ref_equality_in_deep=True, use_memo=False)
        )

        assert len(config.validate()) == 1

    def test_cache_bound(self):
        """Test validation of the wrapper cache bound."""
        assert TrackingConfig(max_cached_wrappers=0).validate() == [
            "max_cached_wrappers must be positive"
        ]
        assert TrackingConfig(max_cached_wrappers=10, share_wrappers=False).validate() == [
            "max_cached_wrappers has no effect without share_wrappers"
        ]
        assert TrackingConfig(max_cached_wrappers=10).validate() == []

    def test_custom_trackables(self):
        """Test that an override table can be attached."""
        trackables = TrackableRegistry()
        config = TrackingConfig(trackables=trackables)

        assert config.trackables is trackables
