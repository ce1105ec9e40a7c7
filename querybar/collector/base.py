# querybar/collector/base.py - Toolbar collector contract
"""
Base class for toolbar collectors.

A collector gathers data for one toolbar panel during a request and
exposes it to the renderer after the request completes.
"""

from typing import Any, Dict, List, Mapping, Optional
import re


class BaseCollector:
    """
    Common surface of every toolbar panel.

    Subclasses set the class flags and override the formatting hooks.
    """

    # Whether this collector contributes timeline entries
    has_timeline = False

    # Whether this collector renders its own tab
    has_tab_content = False

    # Whether this collector has data for the Vars tab
    has_var_data = False

    # Name shown on the toolbar button
    title = ''

    def get_title(self, safe: bool = False) -> str:
        """
        Get the collector title.

        Args:
            safe: Return a lowercase slug usable as an HTML id or file name

        Returns:
            Title string
        """
        if safe:
            return re.sub(r'\W+', '_', self.title.strip()).strip('_').lower()

        return self.title

    def get_title_details(self) -> str:
        """Text shown next to the title"""
        return ''

    def get_badge_value(self) -> Optional[int]:
        """Compact value shown on the toolbar button"""
        return None

    def is_empty(self) -> bool:
        return False

    def display(self) -> Dict[str, Any]:
        return {}

    def icon(self) -> str:
        return ''

    def format_timeline_data(self, connections: Mapping) -> List:
        """
        Build timeline entries. Only called when has_timeline is set.
        """
        return []

    def get_timeline_data(self, connections: Optional[Mapping] = None) -> List[Dict[str, Any]]:
        """
        Get this collector's timeline entries as dictionaries.

        Args:
            connections: Mapping of alias to ConnectionInfo

        Returns:
            List of timeline entry dictionaries (empty without a timeline)
        """
        if not self.has_timeline:
            return []

        entries = self.format_timeline_data(connections or {})
        return [entry.to_dict() for entry in entries]

    def get_as_dict(self, connections: Optional[Mapping] = None) -> Dict[str, Any]:
        """
        Bundle everything a renderer needs for this panel.

        Args:
            connections: Mapping of alias to ConnectionInfo

        Returns:
            Panel dictionary
        """
        data = {
            'title': self.get_title(),
            'title_safe': self.get_title(safe=True),
            'title_details': self.get_title_details(),
            'badge_value': self.get_badge_value(),
            'is_empty': self.is_empty(),
            'has_tab_content': self.has_tab_content,
            'has_var_data': self.has_var_data,
            'icon': self.icon(),
            'timeline': self.get_timeline_data(connections),
        }

        if self.has_tab_content:
            data['display'] = self.display()

        return data
