"""
Centralized configuration management for CueTimer
Handles environment-specific settings files, .env overrides and validation
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .config_schema import CueTimerConfig, validate_config_dict

load_dotenv()

logger = logging.getLogger(__name__)

# Environment variable -> (setting, converter)
ENV_OVERRIDES = {
    "CUETIMER_COUNTDOWN_SECONDS": ("countdown_seconds", int),
    "CUETIMER_TICK_INTERVAL_MS": ("tick_interval_ms", int),
    "CUETIMER_TRIGGER_DIR": ("trigger_config_dir", str),
    "CUETIMER_CUE_DIR": ("cue_base_dir", str),
    "CUETIMER_LOG_LEVEL": ("log_level", str.upper),
    "CUETIMER_HOST": ("host", str),
    "PORT": ("port", int),
}


class ConfigManager:
    """Manages settings loading and validation"""

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = Path(base_path) if base_path else Path(__file__).parent.parent
        self.config_dir = self.base_path / "config"
        self.environment = os.getenv("CUETIMER_ENV", "development")

    def _read_json(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not load settings file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {path}: top level is not an object")
            return {}
        return data

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        for env_name, (key, convert) in ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw is None or raw == "":
                continue
            try:
                config[key] = convert(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid {env_name}={raw!r}")
        return config

    def load_config(self, config_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Load settings for the current environment

        ``default_config.json`` is read first, then ``<environment>.json``
        overrides it, then environment variables override both.

        Args:
            config_name: Specific settings file name (without .json)

        Returns:
            Validated settings dictionary
        """
        if config_name is None:
            config_name = self.environment

        config_file = self.config_dir / f"{config_name}.json"
        default_config = self._read_json(self.config_dir / "default_config.json")
        env_config = self._read_json(config_file)

        config = self._apply_env_overrides({**default_config, **env_config})
        config.setdefault("environment", self.environment)

        validated = self.validate_config(config)
        validated["_runtime"] = {
            "environment": self.environment,
            "config_file": str(config_file),
            "base_path": str(self.base_path)
        }
        return validated

    def validate_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Validate settings, replacing invalid values with their defaults."""
        config = {k: v for k, v in config.items() if not k.startswith("_")}
        try:
            validated_model, warnings = validate_config_dict(config)
        except ValueError:
            validated_model, warnings = self._validate_dropping_invalid(config)

        for warning in warnings:
            logger.warning(f"Config validation warning: {warning}")
        return validated_model.to_dict()

    def _validate_dropping_invalid(self, config: Dict[str, Any]) -> tuple[CueTimerConfig, list[str]]:
        try:
            CueTimerConfig(**config)
        except ValidationError as e:
            bad_keys = {err["loc"][0] for err in e.errors() if err["loc"]}
        else:
            bad_keys = set()

        warnings = [
            f"Invalid value for '{key}' ({config.get(key)!r}), using default"
            for key in sorted(bad_keys, key=str)
        ]
        cleaned = {k: v for k, v in config.items() if k not in bad_keys}
        validated, extra_warnings = validate_config_dict(cleaned)
        return validated, warnings + extra_warnings


# Global config manager instance
config_manager = ConfigManager()


def load_config() -> Dict[str, Any]:
    """Load current environment settings"""
    return config_manager.load_config()

