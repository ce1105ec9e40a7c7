# querybar/exporters/stdout.py - Console output exporter
"""
Renders toolbar reports to stdout in human-readable format.
"""

from typing import Dict, List
from colorama import Fore, Style, init
import logging


# Initialize colorama
init(autoreset=True)


class StdoutExporter:
    """
    Renders toolbar reports to stdout with colored output.
    """

    def __init__(self, use_colors: bool = True, slow_threshold_ms: float = 10.0,
                 very_slow_threshold_ms: float = 100.0):
        """
        Initialize the stdout exporter.

        Args:
            use_colors: Whether to use colored output
            slow_threshold_ms: Queries slower than this are shown in yellow
            very_slow_threshold_ms: Queries slower than this are shown in red
        """
        self.use_colors = use_colors
        self.slow_threshold_ms = slow_threshold_ms
        self.very_slow_threshold_ms = very_slow_threshold_ms
        self.logger = logging.getLogger(__name__)

    def print_report(self, report: Dict):
        """
        Print a complete toolbar report.

        Args:
            report: Report dictionary from Toolbar.report()
        """
        for panel in report.get('collectors', []):
            self.print_panel(panel)

        self.print_timeline(report.get('timeline', []))
        print()

    def print_panel(self, panel: Dict):
        """
        Print one collector panel.

        Args:
            panel: Panel dictionary from BaseCollector.get_as_dict()
        """
        header = f"{panel['title']} {panel.get('title_details', '')}".strip()

        print(f"\n{self._c(Fore.CYAN)}{'='*80}{self._reset()}")
        print(f"{self._c(Fore.CYAN)}{header}{self._reset()}")
        print(f"{self._c(Fore.CYAN)}{'='*80}{self._reset()}\n")

        if panel.get('is_empty'):
            print(f"{self._c(Fore.YELLOW)}No data collected{self._reset()}")
            return

        rows = panel.get('display', {}).get('queries', [])
        self.print_queries(rows)

    def print_queries(self, rows: List[Dict]):
        """
        Print query display rows.

        Args:
            rows: List of {'duration': ..., 'sql': ...} dictionaries
        """
        print(f"{'#':<5} {'Duration':<16} SQL")
        print(f"{'-'*80}")

        for i, row in enumerate(rows, 1):
            color = self._get_color_for_duration(row['duration'])
            print(f"{i:<5} {color}{row['duration']:<16}{self._reset()} {row['sql']}")

    def print_timeline(self, entries: List[Dict]):
        """
        Print timeline entries, offsets relative to the earliest start.

        Args:
            entries: List of timeline entry dictionaries
        """
        if not entries:
            return

        origin = min(entry['start'] for entry in entries)

        print(f"\n{self._c(Fore.CYAN)}Timeline{self._reset()}")
        print(f"{'-'*80}")

        for entry in entries:
            offset_ms = (entry['start'] - origin) * 1000
            duration_ms = entry['duration'] * 1000
            print(f"  +{offset_ms:>10.3f}ms {duration_ms:>10.3f}ms  "
                  f"[{entry['category']}] {entry['label']}")

    def _get_color_for_duration(self, duration_text: str) -> str:
        """
        Get color based on duration threshold.

        Args:
            duration_text: Duration as rendered by format_duration_ms ("2.35 ms")

        Returns:
            Color code
        """
        if not self.use_colors:
            return ""

        try:
            duration_ms = float(duration_text.split()[0])
        except (ValueError, IndexError):
            return ""

        if duration_ms > self.very_slow_threshold_ms:
            return Fore.RED
        elif duration_ms > self.slow_threshold_ms:
            return Fore.YELLOW
        else:
            return Fore.GREEN

    def _c(self, color: str) -> str:
        return color if self.use_colors else ""

    def _reset(self) -> str:
        return Style.RESET_ALL if self.use_colors else ""
