# tests/test_exporters.py - Tests for exporters
"""
Unit tests for the stdout, JSON and Prometheus exporters.
"""

import json

import pytest
from unittest.mock import patch
from prometheus_client import CollectorRegistry
from querybar.collector.database import DatabaseCollector
from querybar.collector.events import ConnectionInfo, QueryEvent
from querybar.exporters.json_exporter import JSONExporter
from querybar.exporters.prometheus import PrometheusExporter
from querybar.exporters.stdout import StdoutExporter
from querybar.toolbar import Toolbar


@pytest.fixture
def collector():
    collector = DatabaseCollector(max_queries=3)
    collector.record_query(QueryEvent("SELECT * FROM users", 'default', 10.0, 0.0023456))
    collector.record_query(QueryEvent("SELECT * FROM orders", 'default', 10.1, 0.25))
    collector.record_query(QueryEvent("SELECT 1", 'replica', 10.2, 0.0001))
    collector.record_query(QueryEvent("SELECT 2", 'replica', 10.3, 0.0001))
    return collector


@pytest.fixture
def report(collector):
    connections = {'default': ConnectionInfo('default', 9.9, 0.05)}
    return Toolbar([collector], connections, request_id='req_test').report()


class TestStdoutExporter:
    """Test cases for StdoutExporter"""

    def test_print_report(self, report, capsys):
        StdoutExporter(use_colors=False).print_report(report)
        out = capsys.readouterr().out

        assert "Database (3 Queries across 2 Connections)" in out
        assert "2.35 ms" in out
        assert "SELECT * FROM orders" in out
        assert "Connecting to Database: default" in out
        assert "\x1b[" not in out

    def test_print_empty_panel(self, capsys):
        report = Toolbar([DatabaseCollector()]).report()
        StdoutExporter(use_colors=False).print_report(report)

        assert "No data collected" in capsys.readouterr().out

    def test_duration_colors(self):
        from colorama import Fore

        exporter = StdoutExporter(slow_threshold_ms=10, very_slow_threshold_ms=100)

        assert exporter._get_color_for_duration("2.35 ms") == Fore.GREEN
        assert exporter._get_color_for_duration("50 ms") == Fore.YELLOW
        assert exporter._get_color_for_duration("250 ms") == Fore.RED
        assert exporter._get_color_for_duration("garbage") == ""
        assert StdoutExporter(use_colors=False)._get_color_for_duration("250 ms") == ""


class TestJSONExporter:
    """Test cases for JSONExporter"""

    def test_export_report(self, report, tmp_path):
        exporter = JSONExporter(str(tmp_path / 'reports'))
        path = exporter.export_report(report, 'out.json')

        with open(path) as f:
            data = json.load(f)

        assert data['request_id'] == 'req_test'
        panel = data['collectors'][0]
        assert panel['badge_value'] == 3
        assert panel['display']['queries'][0] == {'duration': '2.35 ms', 'sql': 'SELECT * FROM users'}
        assert len(data['timeline']) == 4

    def test_default_filename(self, report, tmp_path):
        path = JSONExporter(str(tmp_path)).export_report(report)

        assert 'toolbar_req_test_' in path
        assert path.endswith('.json')


class TestPrometheusExporter:
    """Test cases for PrometheusExporter"""

    def test_record_collector(self, collector):
        registry = CollectorRegistry()
        exporter = PrometheusExporter(registry=registry)
        exporter.record_collector(collector)

        assert registry.get_sample_value('querybar_query_count_total', {'connection': 'default'}) == 2.0
        assert registry.get_sample_value('querybar_query_count_total', {'connection': 'replica'}) == 1.0
        assert registry.get_sample_value('querybar_dropped_queries_total') == 1.0
        assert registry.get_sample_value('querybar_request_count_total') == 1.0
        assert registry.get_sample_value('querybar_active_connections') == 2.0
        assert registry.get_sample_value(
            'querybar_query_duration_milliseconds_count', {'connection': 'default'}) == 2.0

    def test_metrics_text(self, collector):
        exporter = PrometheusExporter(registry=CollectorRegistry())
        exporter.record_collector(collector)

        text = exporter.get_metrics_text()
        assert 'querybar_query_count_total{connection="default"} 2.0' in text

    @patch('querybar.exporters.prometheus.start_http_server')
    def test_start(self, mock_server):
        registry = CollectorRegistry()
        exporter = PrometheusExporter(port=9123, registry=registry)
        exporter.start()

        mock_server.assert_called_once_with(9123, registry=registry)

    @patch('querybar.exporters.prometheus.start_http_server', side_effect=OSError("address in use"))
    def test_start_failure_propagates(self, mock_server):
        exporter = PrometheusExporter(registry=CollectorRegistry())

        with pytest.raises(OSError):
            exporter.start()
