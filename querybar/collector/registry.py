# querybar/collector/registry.py - Database connection registry
"""
Tracks the logical database connections opened during a request and how
long each took to establish.
"""

from contextlib import contextmanager
from typing import Dict, Iterator, Optional
import logging
import time

from querybar.collector.events import ConnectionInfo


class ConnectionRegistry:
    """
    Mapping of connection alias to ConnectionInfo, in registration order.

    The collectors only read it, when building the timeline.
    """

    def __init__(self):
        """
        Initialize an empty registry.
        """
        self._connections: Dict[str, ConnectionInfo] = {}
        self.logger = logging.getLogger(__name__)

    def add(self, alias: str, connect_start: float, connect_duration: float) -> ConnectionInfo:
        """
        Register an already measured connection.

        Args:
            alias: Logical connection name
            connect_start: Epoch timestamp the connection attempt began
            connect_duration: Seconds taken to connect

        Returns:
            The registered ConnectionInfo
        """
        if alias in self._connections:
            self.logger.debug(f"Replacing connection info for '{alias}'")

        info = ConnectionInfo(alias=alias, connect_start=connect_start,
                              connect_duration=connect_duration)
        self._connections[alias] = info
        return info

    @contextmanager
    def connect(self, alias: str):
        """
        Measure a connection attempt and register it on exit.

        The connection is registered even if the body raises.

        Example:
            with registry.connect('default'):
                conn = sqlite3.connect(path)
        """
        start = time.time()
        started = time.perf_counter()
        try:
            yield
        finally:
            info = self.add(alias, start, time.perf_counter() - started)
            self.logger.debug(f"Connected to '{alias}' in {info.connect_duration * 1000:.2f}ms")

    def get(self, alias: str) -> Optional[ConnectionInfo]:
        return self._connections.get(alias)

    def as_mapping(self) -> Dict[str, ConnectionInfo]:
        """Copy of the alias to ConnectionInfo mapping"""
        return dict(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._connections))

    def __contains__(self, alias) -> bool:
        return alias in self._connections
