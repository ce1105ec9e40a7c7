# querybar/exporters/json_exporter.py - JSON format exporter
"""
Exports toolbar reports as JSON files.
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Dict, Optional
import logging


class JSONExporter:
    """
    Exports toolbar reports to JSON format.
    """

    def __init__(self, output_dir: Optional[str] = None):
        """
        Initialize the JSON exporter.

        Args:
            output_dir: Directory to save JSON files (default: current directory)
        """
        self.output_dir = Path(output_dir) if output_dir else Path('.')
        self.logger = logging.getLogger(__name__)

        # Create output directory if it doesn't exist
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_report(self, report: Dict, filename: Optional[str] = None) -> str:
        """
        Export a toolbar report to JSON file.

        Args:
            report: Report dictionary from Toolbar.report()
            filename: Output filename (auto-generated if not provided)

        Returns:
            Path to output file
        """
        if not filename:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            request_id = report.get('request_id') or 'request'
            filename = f'toolbar_{request_id}_{timestamp}.json'

        output_path = self.output_dir / filename

        try:
            with open(output_path, 'w') as f:
                json.dump(report, f, indent=2)
        except (OSError, TypeError) as e:
            self.logger.error(f"Failed to export report to {output_path}: {e}")
            raise

        self.logger.info(f"Exported toolbar report to {output_path}")
        return str(output_path)
