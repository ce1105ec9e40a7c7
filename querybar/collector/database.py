# querybar/collector/database.py - Database tab collector
"""
Collects the queries executed during one request for the Database tab.

Queries past the configured cap are dropped silently so a runaway request
cannot blow up the toolbar. Collection never raises into the query path.
"""

from typing import Dict, List, Mapping, Optional, Tuple
import logging
import threading

from querybar.collector.base import BaseCollector
from querybar.collector.events import DisplayRow, QueryRecord, TimelineEntry
from querybar.utils.helpers import format_duration_ms, pluralize


DEFAULT_MAX_QUERIES = 100
DEFAULT_DISPLAY_PRECISION = 5

# Icon from https://icons8.com - 1em package
ICON = (
    'data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAABgAAAAYCAYAAADgdz34AAAAAXNSR0IArs4c6QAAAARnQU1BAACxjwv8YQUAAAAJcEhZcwAADsMAAA7DAcdvqGQAAADMSURBVEhLY6A3YExLSwsA4nIycQDIDIhRWEBqamo/UNF/SjDQjF6ocZgAKPkRiFeEhoYyQ4WIBiA9QAuWAPEHqBAmgLqgHcolGQD1V4DMgHIxwbCxYD+QBqcKINseKo6eWrBioPrtQBq/BcgY5ht0cUIYbBg2AJKkRxCNWkDQgtFUNJwtABr+F6igE8olGQD114HMgHIxAVDyAhA/AlpSA8RYUwoeXAPVex5qHCbIyMgwBCkAuQJIY00huDBUz/mUlBQDqHGjgBjAwAAACexpph6oHSQAAAAASUVORK5CYII='
)


class DatabaseCollector(BaseCollector):
    """
    Request-scoped collector for executed database queries.

    Keeps the first `max_queries` queries in execution order and the set of
    connection aliases they ran on. Create one instance per request.
    """

    has_timeline = True
    has_tab_content = True
    has_var_data = False
    title = 'Database'

    def __init__(self, max_queries: Optional[int] = DEFAULT_MAX_QUERIES,
                 display_precision: int = DEFAULT_DISPLAY_PRECISION):
        """
        Initialize the collector.

        Args:
            max_queries: Maximum number of queries retained (None or <= 0 means the default)
            display_precision: Fractional digits kept on durations (in seconds)
        """
        self.max_queries = max_queries if max_queries and max_queries > 0 else DEFAULT_MAX_QUERIES
        self.display_precision = display_precision

        self._records: List[QueryRecord] = []
        # dict keeps insertion order and gives O(1) membership
        self._active_connections: Dict[str, None] = {}
        self._dropped = 0
        self._lock = threading.Lock()

        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config) -> 'DatabaseCollector':
        """
        Build a collector from a Config.

        Args:
            config: Config instance

        Returns:
            DatabaseCollector
        """
        return cls(
            max_queries=config.get('toolbar.max_queries', DEFAULT_MAX_QUERIES),
            display_precision=config.get('toolbar.display_precision', DEFAULT_DISPLAY_PRECISION)
        )

    @property
    def records(self) -> Tuple[QueryRecord, ...]:
        """Retained queries in execution order"""
        return tuple(self._records)

    @property
    def active_connection_aliases(self) -> Tuple[str, ...]:
        """Distinct connection aliases among the retained queries"""
        return tuple(self._active_connections)

    @property
    def dropped_count(self) -> int:
        """Number of queries dropped because the cap was reached"""
        return self._dropped

    def record_query(self, event):
        """
        Record a completed query.

        Args:
            event: QueryEvent (or any object with sql, connection_alias,
                start_time and duration attributes)
        """
        try:
            with self._lock:
                if len(self._records) >= self.max_queries:
                    self._dropped += 1
                    if self._dropped == 1:
                        self.logger.info(f"Query cap of {self.max_queries} reached, dropping further queries")
                    return

                record = QueryRecord.from_event(event)
                self._records.append(record)

                if record.connection_alias not in self._active_connections:
                    self._active_connections[record.connection_alias] = None

            self.logger.debug(f"Collected query #{len(self._records)} on '{record.connection_alias}'")

        except Exception as e:
            self.logger.warning(f"Dropping query event that could not be recorded: {e}")

    def collect(self, event):
        """Alias of record_query for event-bus style wiring"""
        self.record_query(event)

    def build_timeline(self, connections: Mapping) -> List[TimelineEntry]:
        """
        Build waterfall entries: connection attempts first, then queries.

        Args:
            connections: Mapping of alias to ConnectionInfo

        Returns:
            List of TimelineEntry
        """
        entries = []

        for alias, connection in connections.items():
            entries.append(TimelineEntry(
                label=f"Connecting to Database: {alias}",
                category='Database',
                start=connection.connect_start,
                duration=connection.connect_duration
            ))

        for record in self.records:
            entries.append(TimelineEntry(
                label='Query',
                category='Database',
                start=record.start_time,
                duration=record.duration
            ))

        return entries

    def format_timeline_data(self, connections: Mapping) -> List[TimelineEntry]:
        return self.build_timeline(connections)

    def build_display_rows(self) -> List[DisplayRow]:
        """
        Build one display row per retained query.

        Returns:
            List of DisplayRow in execution order
        """
        return [
            DisplayRow(
                duration_text=format_duration_ms(record.duration, self.display_precision),
                sql=record.sql
            )
            for record in self.records
        ]

    def display(self) -> Dict[str, List[Dict[str, str]]]:
        return {'queries': [row.to_dict() for row in self.build_display_rows()]}

    def badge_count(self) -> int:
        return len(self._records)

    def get_badge_value(self) -> int:
        return self.badge_count()

    def title_detail(self) -> str:
        """
        Sentence shown next to the title, e.g. "(2 Queries across 1 Connection)".
        """
        query_count = len(self._records)
        connection_count = len(self._active_connections)

        return (
            f"({query_count} {pluralize(query_count, 'Query', 'Queries')} "
            f"across {connection_count} {pluralize(connection_count, 'Connection', 'Connections')})"
        )

    def get_title_details(self) -> str:
        return self.title_detail()

    def is_empty(self) -> bool:
        return len(self._records) == 0

    def icon(self) -> str:
        return ICON
