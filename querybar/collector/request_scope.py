# querybar/collector/request_scope.py - Per-request collection scope
"""
Owns the collectors of a single request.

Each request gets its own RequestScope, so nothing collected for one
request is visible to another. The query path calls into the scope
directly; there is no process-wide collector.
"""

from contextlib import contextmanager
from typing import Any, Dict, Optional
import itertools
import logging
import time

from querybar.collector.database import DatabaseCollector
from querybar.collector.events import QueryEvent
from querybar.collector.registry import ConnectionRegistry
from querybar.utils.helpers import substitute_bindings


_request_counter = itertools.count()


class RequestScope:
    """
    Per-request owner of a DatabaseCollector and a ConnectionRegistry.
    """

    def __init__(self, config=None, request_id: Optional[str] = None,
                 max_queries: Optional[int] = None,
                 display_precision: Optional[int] = None):
        """
        Initialize the scope.

        Args:
            config: Optional Config; supplies toolbar.* settings
            request_id: Identifier for this request (generated if not provided)
            max_queries: Overrides toolbar.max_queries
            display_precision: Overrides toolbar.display_precision
        """
        self.request_id = request_id or f"req_{next(_request_counter):08d}"

        if config is not None:
            self.collector = DatabaseCollector.from_config(config)
            self.redact_bindings = bool(config.get('toolbar.redact_bindings', False))
        else:
            self.collector = DatabaseCollector()
            self.redact_bindings = False

        if max_queries is not None and max_queries > 0:
            self.collector.max_queries = max_queries
        if display_precision is not None:
            self.collector.display_precision = display_precision

        self.connections = ConnectionRegistry()
        self.logger = logging.getLogger(__name__)
        self.logger.debug(f"Opened request scope {self.request_id} "
                          f"(max_queries={self.collector.max_queries})")

    def record(self, event):
        """
        Forward a completed query to the collector.

        Args:
            event: QueryEvent
        """
        self.collector.record_query(event)

    @contextmanager
    def track_query(self, sql: str, connection_alias: str, params: Any = None):
        """
        Time the body as one query and record it.

        The query is recorded even if the body raises.

        Example:
            with scope.track_query("SELECT * FROM users WHERE id = ?", 'default', (1,)):
                cursor.execute("SELECT * FROM users WHERE id = ?", (1,))
        """
        start = time.time()
        started = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - started
            self.record(QueryEvent(
                sql=substitute_bindings(sql, params, redact=self.redact_bindings),
                connection_alias=connection_alias,
                start_time=start,
                duration=duration
            ))

    def timeline(self):
        """Timeline entries for this request's queries and connections"""
        return self.collector.build_timeline(self.connections.as_mapping())

    def summary(self) -> Dict[str, Any]:
        """
        Get summary of what was collected.

        Returns:
            Dictionary with counts and title sentence
        """
        return {
            'request_id': self.request_id,
            'query_count': self.collector.badge_count(),
            'connection_count': len(self.collector.active_connection_aliases),
            'dropped_count': self.collector.dropped_count,
            'title_details': self.collector.title_detail(),
        }
