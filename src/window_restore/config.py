"""
Configuration management for window-restore
"""

import copy
import logging
import yaml
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for the application"""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".window-restore"
        self.config_file = self.config_dir / "config.yaml"

        # Ensure config directory exists
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configuration
        self.defaults = {
            "snapshot": {
                "path": "~/.window-positions.json",
            },
            "restore": {
                "pacing_delay": 0.1,
                "command_timeout": 10,
                "settle_delay": 0.2,
            },
            "capture": {
                "use_fast_enumeration": True,
                "title_query_timeout": 5,
                "enumeration_timeout": 10,
            },
            "matching": {
                "multi_window_apps": [
                    "Google Chrome",
                    "Code",
                    "Visual Studio Code",
                    "Finder",
                    "Terminal",
                ],
                "title_strategies": {
                    "Google Chrome": "prefix",
                    "Code": "prefix",
                    "Visual Studio Code": "prefix",
                },
            },
            "permissions": {
                "reference_app": "Finder",
                "probe_timeout": 5,
            },
            "logging": {
                "level": "INFO",
            },
        }

        self.config = self.load_config()

    def load_config(self) -> dict[str, Any]:
        """Load configuration from file or create default"""
        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    config = yaml.safe_load(f)
                if config is not None and not isinstance(config, dict):
                    logger.warning("Ignoring %s: expected a mapping", self.config_file)
                    config = None
                # Merge with defaults to ensure all keys exist
                return self._merge_config(self.defaults, config or {})
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Error loading config %s: %s", self.config_file, e)
                return copy.deepcopy(self.defaults)
        else:
            # Create default config file
            self.save_config(self.defaults)
            return copy.deepcopy(self.defaults)

    def save_config(self, config: dict[str, Any] | None = None) -> None:
        """Save configuration to file"""
        if config is None:
            config = self.config

        try:
            with open(self.config_file, "w") as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        except OSError as e:
            logger.warning("Error saving config %s: %s", self.config_file, e)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def _merge_config(
        self, defaults: dict[str, Any], user_config: dict[str, Any]
    ) -> dict[str, Any]:
        """Recursively merge user config with defaults"""
        result = copy.deepcopy(defaults)

        for key, value in user_config.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result

    @property
    def snapshot_path(self) -> Path:
        """Get the path to the saved window positions file"""
        return Path(self.get("snapshot.path")).expanduser()

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "INFO")).upper()
