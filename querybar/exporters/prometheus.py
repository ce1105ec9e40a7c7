# querybar/exporters/prometheus.py - Prometheus metrics exporter
"""
Publishes per-request query metrics in Prometheus format.
Provides HTTP endpoint for Prometheus to scrape.
"""

from prometheus_client import Counter, Histogram, Gauge, start_http_server, generate_latest, REGISTRY
import logging


class PrometheusExporter:
    """
    Exports collected query metrics to Prometheus.

    Feed it each finished request's DatabaseCollector.
    """

    def __init__(self, port: int = 9090, registry=REGISTRY):
        """
        Initialize the Prometheus exporter.

        Args:
            port: Port to expose metrics on
            registry: prometheus_client CollectorRegistry to register metrics in
        """
        self.port = port
        self.registry = registry
        self.logger = logging.getLogger(__name__)

        self.query_duration = Histogram(
            'querybar_query_duration_milliseconds',
            'Duration of collected queries in milliseconds',
            ['connection'],
            buckets=[0.1, 0.5, 1, 5, 10, 50, 100, 500, 1000],
            registry=registry
        )

        self.query_count = Counter(
            'querybar_query_count_total',
            'Total number of collected queries',
            ['connection'],
            registry=registry
        )

        self.dropped_queries = Counter(
            'querybar_dropped_queries_total',
            'Queries dropped because the per-request cap was reached',
            registry=registry
        )

        self.request_count = Counter(
            'querybar_request_count_total',
            'Total number of requests reported',
            registry=registry
        )

        self.active_connections = Gauge(
            'querybar_active_connections',
            'Distinct connections used by the last reported request',
            registry=registry
        )

        self.logger.info(f"Prometheus exporter initialized on port {port}")

    def start(self):
        """
        Start the Prometheus HTTP server.
        """
        try:
            start_http_server(self.port, registry=self.registry)
            self.logger.info(f"Prometheus metrics available at http://localhost:{self.port}/metrics")
        except Exception as e:
            self.logger.error(f"Failed to start Prometheus server: {e}")
            raise

    def record_collector(self, collector):
        """
        Record everything a request's DatabaseCollector retained.

        Args:
            collector: DatabaseCollector
        """
        for record in collector.records:
            connection = record.connection_alias
            self.query_duration.labels(connection=connection).observe(record.duration_ms)
            self.query_count.labels(connection=connection).inc()

        if collector.dropped_count:
            self.dropped_queries.inc(collector.dropped_count)

        self.request_count.inc()
        self.active_connections.set(len(collector.active_connection_aliases))

    def get_metrics_text(self) -> str:
        """
        Get current metrics in Prometheus text format.

        Returns:
            Metrics as text
        """
        return generate_latest(self.registry).decode('utf-8')
