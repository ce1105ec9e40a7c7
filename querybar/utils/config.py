# querybar/utils/config.py - Configuration management
"""
YAML configuration for querybar.

Settings are addressed with dotted keys such as 'toolbar.max_queries'.
Values read from a file are layered over DEFAULT_CONFIG section by section.
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging


logger = logging.getLogger(__name__)

_MISSING = object()


def _deep_merge(target: Dict, overrides: Dict) -> Dict:
    """
    Layer `overrides` onto `target` in place; nested sections merge, other values replace.
    """
    for name, value in overrides.items():
        current = target.get(name)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            target[name] = value
    return target


class Config:
    """
    Toolbar settings with defaults, optionally overlaid from a YAML file.
    """

    DEFAULT_CONFIG = {
        'toolbar': {
            'max_queries': 100,
            'display_precision': 5,
            'redact_bindings': False,
        },
        'output': {
            'format': 'stdout',
            'output_dir': '.',
            'prometheus_port': 9090,
        },
        'display': {
            'slow_threshold_ms': 10.0,
            'very_slow_threshold_ms': 100.0,
        }
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Args:
            config_file: Optional YAML file layered over the defaults
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str):
        """
        Overlay settings from a YAML file.

        A missing file is only warned about. A file that cannot be read or
        does not hold a mapping is logged and the error re-raised.
        """
        path = Path(config_file)

        if not path.exists():
            logger.warning(f"Config file not found: {config_file}, using defaults")
            return

        try:
            loaded = yaml.safe_load(path.read_text()) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Config file must contain a mapping, got {type(loaded).__name__}")
        except Exception as e:
            logger.error(f"Failed to load config {config_file}: {e}")
            raise

        _deep_merge(self.config, loaded)
        logger.info(f"Loaded configuration from {config_file}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dotted key, e.g. config.get('toolbar.max_queries', 100).
        """
        node = self.config
        for part in key.split('.'):
            node = node.get(part, _MISSING) if isinstance(node, dict) else _MISSING
            if node is _MISSING:
                return default
        return node

    def set(self, key: str, value: Any):
        """
        Assign a dotted key, creating intermediate sections as needed.
        """
        *sections, leaf = key.split('.')
        node = self.config
        for part in sections:
            node = node.setdefault(part, {})
        node[leaf] = value

    def to_dict(self) -> Dict:
        return copy.deepcopy(self.config)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.config, default_flow_style=False, sort_keys=False)

    def save_to_file(self, config_file: str):
        """
        Write the current settings to a YAML file.

        Args:
            config_file: Destination path
        """
        try:
            Path(config_file).write_text(self.to_yaml())
        except OSError as e:
            logger.error(f"Failed to save config to {config_file}: {e}")
            raise

        logger.info(f"Saved configuration to {config_file}")
