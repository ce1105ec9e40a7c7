# querybar/collector/events.py - Query and connection value types
"""
Value types passed between the query path, the collectors and the renderers.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping


@dataclass
class QueryEvent:
    """
    Describes a just-completed query, as reported by the query path.
    """
    sql: str
    connection_alias: str
    start_time: float
    duration: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'QueryEvent':
        """
        Build an event from a mapping (e.g. one entry of a query log).

        Args:
            data: Mapping with sql, connection_alias, start_time and duration keys

        Returns:
            QueryEvent
        """
        return cls(
            sql=str(data['sql']),
            connection_alias=str(data['connection_alias']),
            start_time=float(data['start_time']),
            duration=float(data['duration'])
        )


@dataclass(frozen=True)
class QueryRecord:
    """
    A query retained by a collector. Immutable once created.
    """
    sql: str
    connection_alias: str
    start_time: float
    duration: float

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds"""
        return self.duration * 1000

    @classmethod
    def from_event(cls, event) -> 'QueryRecord':
        return cls(
            sql=event.sql,
            connection_alias=event.connection_alias,
            start_time=event.start_time,
            duration=event.duration
        )


@dataclass(frozen=True)
class ConnectionInfo:
    """
    Timing of one logical database connection.
    """
    alias: str
    connect_start: float
    connect_duration: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ConnectionInfo':
        return cls(
            alias=str(data['alias']),
            connect_start=float(data['connect_start']),
            connect_duration=float(data['connect_duration'])
        )


@dataclass(frozen=True)
class TimelineEntry:
    """
    One bar of the toolbar waterfall view.
    """
    label: str
    category: str
    start: float
    duration: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DisplayRow:
    """
    One row of the Database tab.
    """
    duration_text: str
    sql: str

    def to_dict(self) -> Dict[str, str]:
        return {'duration': self.duration_text, 'sql': self.sql}
