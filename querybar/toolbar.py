# querybar/toolbar.py - Toolbar report assembly
"""
Assembles the panels of a request's collectors into one report that the
exporters render.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional
import logging


class Toolbar:
    """
    Combines collectors into a single report with a merged timeline.
    """

    def __init__(self, collectors: List, connections: Optional[Mapping] = None,
                 request_id: Optional[str] = None):
        """
        Initialize the toolbar.

        Args:
            collectors: List of BaseCollector instances
            connections: Mapping of alias to ConnectionInfo for the timeline
            request_id: Identifier of the request being reported
        """
        self.collectors = list(collectors)
        self.connections = connections or {}
        self.request_id = request_id
        self.logger = logging.getLogger(__name__)

    @classmethod
    def for_scope(cls, scope) -> 'Toolbar':
        """
        Build a toolbar for a RequestScope.

        Args:
            scope: RequestScope

        Returns:
            Toolbar
        """
        return cls([scope.collector], scope.connections.as_mapping(), scope.request_id)

    def report(self) -> Dict[str, Any]:
        """
        Build the report of every collector.

        Returns:
            Dictionary with panels and the merged timeline sorted by start
        """
        panels = []
        timeline = []

        for collector in self.collectors:
            panel = collector.get_as_dict(self.connections)
            panels.append(panel)
            timeline.extend(panel['timeline'])

        timeline.sort(key=lambda entry: entry['start'])

        self.logger.debug(f"Built toolbar report with {len(panels)} panels "
                          f"and {len(timeline)} timeline entries")

        return {
            'request_id': self.request_id,
            'generated_at': datetime.now().isoformat(),
            'collectors': panels,
            'timeline': timeline,
        }
