"""
Configuration management for the plan alerts CLI.

Updates: v0.1.0 - 2026-10-12 - Added alert timing and logging settings.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class Config:
    """Load configuration with Env → .env → config.json → defaults precedence."""

    _CONFIG_KEY_MAPPING: Dict[str, tuple[str, ...]] = {
        "PLAN_ALERTS_LOG_LEVEL": ("PLAN_ALERTS_LOG_LEVEL", "LOG_LEVEL", "log_level"),
        "PLAN_ALERTS_LOG_FILE": ("PLAN_ALERTS_LOG_FILE", "log_file"),
        "PLAN_ALERTS_DEFAULT_COLLAPSE_DELAY_MS": ("PLAN_ALERTS_DEFAULT_COLLAPSE_DELAY_MS", "default_collapse_delay_ms"),
        "PLAN_ALERTS_UNSAVED_COLLAPSE_DELAY_MS": ("PLAN_ALERTS_UNSAVED_COLLAPSE_DELAY_MS", "unsaved_collapse_delay_ms"),
        "PLAN_ALERTS_INFO_AUTO_CLOSE_MS": ("PLAN_ALERTS_INFO_AUTO_CLOSE_MS", "info_auto_close_ms"),
        "PLAN_ALERTS_POLL_INTERVAL_MS": ("PLAN_ALERTS_POLL_INTERVAL_MS", "poll_interval_ms"),
    }

    _DEFAULTS: Dict[str, Any] = {
        "PLAN_ALERTS_LOG_LEVEL": "INFO",
        "PLAN_ALERTS_LOG_FILE": "plan_alerts.log",
        "PLAN_ALERTS_DEFAULT_COLLAPSE_DELAY_MS": 3000,
        "PLAN_ALERTS_UNSAVED_COLLAPSE_DELAY_MS": 4000,
        "PLAN_ALERTS_INFO_AUTO_CLOSE_MS": 5000,
        "PLAN_ALERTS_POLL_INTERVAL_MS": 100,
    }

    def __init__(self, config_file: Optional[Path] = None, load_env: bool = True) -> None:
        if load_env:
            load_dotenv()
        self.config_file: Path = config_file or Path(__file__).parent / "config.json"
        self._config_data: Dict[str, Any] = self._load_config_file()

        log_level_value = self._get_setting("PLAN_ALERTS_LOG_LEVEL")
        log_file_value = self._get_setting("PLAN_ALERTS_LOG_FILE")

        self.log_level: str = str(log_level_value or self._DEFAULTS["PLAN_ALERTS_LOG_LEVEL"]).upper()
        self.log_file: str = str(log_file_value or self._DEFAULTS["PLAN_ALERTS_LOG_FILE"])
        self.default_collapse_delay_ms: float = self._to_delay("PLAN_ALERTS_DEFAULT_COLLAPSE_DELAY_MS")
        self.unsaved_collapse_delay_ms: float = self._to_delay("PLAN_ALERTS_UNSAVED_COLLAPSE_DELAY_MS")
        self.info_auto_close_ms: float = self._to_delay("PLAN_ALERTS_INFO_AUTO_CLOSE_MS")
        self.poll_interval_ms: float = self._to_delay("PLAN_ALERTS_POLL_INTERVAL_MS")

    def _load_config_file(self) -> Dict[str, Any]:
        """Load configuration values from config.json if available."""
        if not self.config_file.exists():
            return {}
        try:
            with self.config_file.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
                if isinstance(data, dict):
                    return data
                logger.warning("config.json must contain a JSON object; ignoring content.")
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read config.json: %s", exc)
        return {}

    def _get_setting(self, env_key: str) -> Any:
        """Resolve a configuration value using the configured precedence."""
        env_value = os.getenv(env_key)
        if env_value not in (None, ""):
            return env_value

        keys_to_check = self._CONFIG_KEY_MAPPING.get(env_key, (env_key,))
        for key in keys_to_check:
            config_value = self._config_data.get(key)
            if config_value not in (None, ""):
                return config_value

        return self._DEFAULTS.get(env_key)

    def _to_delay(self, env_key: str) -> float:
        """Resolve a millisecond setting; negative or malformed values use the default."""
        default = float(self._DEFAULTS[env_key])
        value = self._to_float(self._get_setting(env_key), default)
        if value < 0:
            logger.warning("%s must not be negative; using %s", env_key, default)
            return default
        return value

    @staticmethod
    def _to_float(value: Any, default: float) -> float:
        """Convert a configuration value to float with fallback."""
        try:
            if value is None or value == "" or isinstance(value, bool):
                return default
            return float(value)
        except (TypeError, ValueError):
            return default

    def summary(self) -> Dict[str, Any]:
        """Return resolved settings for display."""
        return {
            "log_level": self.log_level,
            "log_file": self.log_file,
            "default_collapse_delay_ms": self.default_collapse_delay_ms,
            "unsaved_collapse_delay_ms": self.unsaved_collapse_delay_ms,
            "info_auto_close_ms": self.info_auto_close_ms,
            "poll_interval_ms": self.poll_interval_ms,
            "config_file": str(self.config_file),
        }
