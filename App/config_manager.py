"""Application configuration loader for PixelArt Studio.

This module loads application-level settings (scheduling intervals, export
directory, AI advisor model) from an optional JSON file. Filter settings and
media are never persisted between sessions.
"""

import json
import os
from dataclasses import replace
from pathlib import Path

from models import CONFIG_FILE, AppConfig

API_KEY_ENV = "GEMINI_API_KEY"


class ConfigManager:
    """Handles loading of application configuration."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.pixelart_config.json)
        """
        self.config_path = config_path

    def load(self) -> AppConfig:
        """Load configuration from file, returning defaults if not found.

        A file that is unreadable, not a JSON object, or holds a bad value
        is ignored as a whole; defaults are never partially overridden.

        Returns:
            AppConfig with loaded or default values
        """
        config = AppConfig()

        try:
            if self.config_path.exists():
                with open(self.config_path, "r") as f:
                    data = json.load(f)
                config = self._from_dict(data)
                print(f"✓ Loaded configuration from {self.config_path}")
        except (OSError, ValueError, TypeError) as e:
            print(f"Warning: Could not load config file: {e}")

        config.gemini_api_key = os.getenv(API_KEY_ENV) or None
        return config

    @staticmethod
    def _from_dict(data) -> AppConfig:
        """Build an AppConfig from parsed JSON (fallback to defaults per key)."""
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")

        defaults = AppConfig()
        export_dir = defaults.export_dir
        if "export_dir" in data:
            export_dir = Path(data["export_dir"]).expanduser()
        return replace(
            defaults,
            debounce_ms=int(data.get("debounce_ms", defaults.debounce_ms)),
            refresh_interval_ms=int(
                data.get("refresh_interval_ms", defaults.refresh_interval_ms)
            ),
            capture_fps=int(data.get("capture_fps", defaults.capture_fps)),
            progress_interval_ms=int(
                data.get("progress_interval_ms", defaults.progress_interval_ms)
            ),
            export_dir=export_dir,
            gemini_model=str(data.get("gemini_model", defaults.gemini_model)),
        )
