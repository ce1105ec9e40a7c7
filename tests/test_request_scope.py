# tests/test_request_scope.py - Tests for connection registry and request scope
"""
Unit tests for the ConnectionRegistry and RequestScope classes.
"""

import pytest
from unittest.mock import patch
from querybar.collector.events import ConnectionInfo, QueryEvent
from querybar.collector.registry import ConnectionRegistry
from querybar.collector.request_scope import RequestScope
from querybar.utils.config import Config


class TestConnectionRegistry:
    """Test cases for ConnectionRegistry"""

    def test_registry_initialization(self):
        registry = ConnectionRegistry()
        assert len(registry) == 0
        assert registry.as_mapping() == {}

    def test_add(self):
        registry = ConnectionRegistry()
        info = registry.add('default', 100.0, 0.25)

        assert info == ConnectionInfo('default', 100.0, 0.25)
        assert 'default' in registry
        assert registry.get('default') == info
        assert registry.get('missing') is None

    def test_registration_order(self):
        registry = ConnectionRegistry()
        for alias in ['replica', 'default', 'analytics']:
            registry.add(alias, 0.0, 0.0)

        assert list(registry) == ['replica', 'default', 'analytics']
        assert list(registry.as_mapping()) == ['replica', 'default', 'analytics']

    def test_readd_replaces(self):
        registry = ConnectionRegistry()
        registry.add('default', 1.0, 0.1)
        registry.add('default', 2.0, 0.2)

        assert len(registry) == 1
        assert registry.get('default').connect_start == 2.0

    def test_as_mapping_is_a_copy(self):
        registry = ConnectionRegistry()
        registry.add('default', 1.0, 0.1)

        mapping = registry.as_mapping()
        mapping.clear()

        assert len(registry) == 1

    @patch('querybar.collector.registry.time')
    def test_connect_measures_attempt(self, mock_time):
        mock_time.time.return_value = 500.0
        mock_time.perf_counter.side_effect = [10.0, 10.25]

        registry = ConnectionRegistry()
        with registry.connect('default'):
            pass

        assert registry.get('default') == ConnectionInfo('default', 500.0, 0.25)

    def test_connect_registers_on_failure(self):
        registry = ConnectionRegistry()

        with pytest.raises(ConnectionError):
            with registry.connect('default'):
                raise ConnectionError("refused")

        info = registry.get('default')
        assert info is not None
        assert info.connect_duration >= 0


class TestRequestScope:
    """Test cases for RequestScope"""

    def test_scope_initialization(self):
        scope = RequestScope()

        assert scope.request_id.startswith('req_')
        assert scope.collector.max_queries == 100
        assert scope.collector.is_empty()
        assert len(scope.connections) == 0
        assert scope.redact_bindings is False

    def test_scopes_are_isolated(self):
        """Test that each request gets its own collector"""
        first = RequestScope()
        second = RequestScope()

        first.record(QueryEvent("SELECT 1", 'default', 1.0, 0.001))

        assert first.request_id != second.request_id
        assert first.collector is not second.collector
        assert first.collector.badge_count() == 1
        assert second.collector.is_empty()

    def test_scope_from_config(self):
        config = Config()
        config.set('toolbar.max_queries', 2)
        config.set('toolbar.display_precision', 3)
        config.set('toolbar.redact_bindings', True)

        scope = RequestScope(config, request_id='abc')

        assert scope.request_id == 'abc'
        assert scope.collector.max_queries == 2
        assert scope.collector.display_precision == 3
        assert scope.redact_bindings is True

    def test_explicit_overrides(self):
        scope = RequestScope(max_queries=5, display_precision=2)

        assert scope.collector.max_queries == 5
        assert scope.collector.display_precision == 2

    def test_non_positive_override_keeps_configured_cap(self):
        config = Config()
        config.set('toolbar.max_queries', 4)

        assert RequestScope(config, max_queries=0).collector.max_queries == 4
        assert RequestScope(config, max_queries=-3).collector.max_queries == 4

    def test_track_query(self):
        scope = RequestScope()

        with scope.track_query("SELECT * FROM users WHERE id = ?", 'default', (7,)):
            pass

        record = scope.collector.records[0]
        assert record.sql == "SELECT * FROM users WHERE id = 7"
        assert record.connection_alias == 'default'
        assert record.duration >= 0

    def test_track_query_redacts(self):
        config = Config()
        config.set('toolbar.redact_bindings', True)
        scope = RequestScope(config)

        with scope.track_query("SELECT * FROM users WHERE token = ?", 'default', ('secret',)):
            pass

        assert scope.collector.records[0].sql == "SELECT * FROM users WHERE token = ***"

    def test_track_query_records_on_failure(self):
        scope = RequestScope()

        with pytest.raises(RuntimeError):
            with scope.track_query("SELECT broken", 'default'):
                raise RuntimeError("syntax error")

        assert scope.collector.badge_count() == 1
        assert scope.collector.records[0].sql == "SELECT broken"

    def test_timeline_uses_registry(self):
        scope = RequestScope()
        scope.connections.add('default', 1.0, 0.1)
        scope.record(QueryEvent("SELECT 1", 'default', 2.0, 0.01))

        labels = [entry.label for entry in scope.timeline()]
        assert labels == ["Connecting to Database: default", "Query"]

    def test_summary(self):
        scope = RequestScope(request_id='r1', max_queries=1)
        scope.record(QueryEvent("SELECT 1", 'default', 1.0, 0.01))
        scope.record(QueryEvent("SELECT 2", 'default', 2.0, 0.01))

        assert scope.summary() == {
            'request_id': 'r1',
            'query_count': 1,
            'connection_count': 1,
            'dropped_count': 1,
            'title_details': "(1 Query across 1 Connection)",
        }
