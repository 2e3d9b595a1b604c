"""
Tests for the high-level session API.
"""

import pytest

from dazzletracklib import (
    CompareConfig,
    ConfigurationError,
    TrackableRegistry,
    TrackedDict,
    TrackingConfig,
    TrackingSession,
    WrapperCache,
    track_reads,
)


class Todo:
    def __init__(self, title, done=False):
        self.title = title
        self.done = done


def visible_titles(state):
    return [todo['title'] for todo in state['todos'] if not todo['done']]


class TestTrackingSession:
    """Test TrackingSession."""

    def test_proxy_records_into_session(self):
        """Test that reads through the session proxy land in its registry."""
        state = {'a': 1, 'b': 2}
        session = TrackingSession(state)

        assert isinstance(session.proxy, TrackedDict)
        assert session.proxy['a'] == 1
        assert list(session.registry.get(state).keys) == ['a']

    def test_is_changed(self):
        """Test change detection against what the session read."""
        state = {'a': 1, 'b': 2}
        session = TrackingSession(state)
        session.proxy['a']

        assert session.is_changed({'a': 1, 'b': 3}) is False
        assert session.is_changed({'a': 2, 'b': 2}) is True
        assert session.comparisons == 2

    def test_cycles_use_memo_by_default(self):
        """Test that the default config compares cycles safely."""
        state = {'a': 'a'}
        state['self'] = state
        other = {'a': 'a'}
        other['self'] = other
        session = TrackingSession(state)
        session.proxy['self']['a']

        assert session.is_changed(other) is False

    def test_compare_config_applied(self):
        """Test that the configured compare mode is used."""
        state = {'a': {'b': 1}}
        config = TrackingConfig(compare=CompareConfig.lenient())
        session = TrackingSession(state, config=config)
        session.proxy['a']

        assert session.is_changed({'a': {'b': 2}}) is False

    def test_shares_wrappers_by_default(self):
        """Test that a cache is created unless disabled."""
        assert isinstance(TrackingSession({}).cache, WrapperCache)

        config = TrackingConfig(share_wrappers=False)
        assert TrackingSession({}, config=config).cache is None

    def test_trackables_from_config(self):
        """Test that the override table from the config is used."""
        trackables = TrackableRegistry()
        todo = Todo('write tests')
        trackables.mark(todo)
        session = TrackingSession(todo, config=TrackingConfig(trackables=trackables))

        assert session.proxy.title == 'write tests'
        assert session.is_changed(Todo('write tests', done=True)) is False
        assert session.is_changed(Todo('ship it')) is True

    def test_invalid_config(self):
        """Test that an invalid configuration is rejected up front."""
        config = TrackingConfig(max_cached_wrappers=-1)

        with pytest.raises(ConfigurationError) as exc_info:
            TrackingSession({}, config=config)
        assert "Invalid configuration" in str(exc_info.value)
        with pytest.raises(ValueError):
            TrackingSession({}, config=config)

    def test_next_session_shares_cache(self):
        """Test that consecutive sessions reuse wrappers but not usage."""
        child = {'x': 1}
        first = TrackingSession({'child': child, 'y': 2})
        first_child = first.proxy['child']
        first_child['x']

        second = first.next_session({'child': child, 'y': 3})

        assert second.cache is first.cache
        assert second.config is first.config
        assert second.proxy['child'] is first_child
        assert second.registry.get(child) is None

    def test_path_list(self):
        """Test the session's path list."""
        session = TrackingSession({'a': {'b': 1}, 'c': 2})
        session.proxy['a']['b']

        assert session.path_list() == [['a', 'b']]

    def test_stats(self):
        """Test session statistics."""
        session = TrackingSession({'a': 1})
        session.proxy['a']
        session.is_changed({'a': 1})

        stats = session.get_stats()

        assert stats['comparisons'] == 1
        assert stats['usage']['value_reads'] == 1
        assert stats['cache']['entries'] == 1

    def test_stats_without_cache(self):
        """Test that cache statistics are omitted without a cache."""
        session = TrackingSession({}, config=TrackingConfig(share_wrappers=False))
        assert 'cache' not in session.get_stats()


class TestTrackReads:
    """Test track_reads."""

    def test_returns_result_and_session(self):
        """Test that the reader's result comes back with the session."""
        state = {
            'todos': [
                {'title': 'a', 'done': False},
                {'title': 'b', 'done': True},
            ],
            'filter': 'all',
        }

        titles, session = track_reads(state, visible_titles)

        assert titles == ['a']
        assert session.is_changed({**state, 'filter': 'done'}) is False

    def test_detects_relevant_change(self):
        """Test that a change in read data is detected."""
        todos = [{'title': 'a', 'done': False}]
        state = {'todos': todos}

        _, session = track_reads(state, visible_titles)

        assert session.is_changed({'todos': [{'title': 'a', 'done': True}]}) is True
        assert session.is_changed({'todos': todos + [{'title': 'c', 'done': False}]}) is True
        assert session.is_changed({'todos': todos}) is False

    def test_shared_cache(self):
        """Test passing a cache explicitly."""
        cache = WrapperCache()
        state = {'a': {'b': 1}}

        first, _ = track_reads(state, lambda s: s['a'], cache=cache)
        second, _ = track_reads(state, lambda s: s['a'], cache=cache)

        assert first is second
