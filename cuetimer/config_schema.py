"""
Pydantic models for CueTimer configuration validation

Two schemas live here:
- ``CueTimerConfig`` validates the application settings (JSON files under
  ``config/``)
- ``TriggerFileConfig`` validates a trigger file (YAML mapping of elapsed
  seconds to audio cues)
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, StrictInt, field_validator

from .constants import MAX_TRIGGER_OFFSET, TRIGGER_FILE_EXTENSIONS


class CueTimerConfig(BaseModel):
    """Complete CueTimer application settings schema.

    Example:
        >>> validated = CueTimerConfig(**{"countdown_seconds": 90})
        >>> validated.tick_interval_ms
        10
    """

    # Timer settings
    countdown_seconds: int = Field(default=60, ge=1, le=3600, description="Preparation countdown length in seconds")
    tick_interval_ms: int = Field(default=10, ge=1, le=1000, description="Tick cadence while the timer runs")

    # Trigger files and audio
    trigger_config_dir: str = Field(default=".", description="Directory scanned for trigger files")
    trigger_config_extensions: list[str] = Field(default_factory=lambda: list(TRIGGER_FILE_EXTENSIONS), description="Accepted trigger file extensions")
    cue_base_dir: str = Field(default=".", description="Base directory for relative cue paths")
    audio_enabled: bool = Field(default=True, description="Play cues through the audio backend")
    volume: int = Field(default=100, ge=0, le=100, description="Cue playback volume (0-100)")

    # Runtime settings
    environment: str = Field(default="development", description="Runtime environment")
    host: str = Field(default="127.0.0.1", description="HTTP bind address")
    port: int = Field(default=5055, ge=1, le=65535, description="HTTP port")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$", description="Logging level")

    model_config = {
        "extra": "allow",
        "str_strip_whitespace": True,
    }

    @field_validator('trigger_config_extensions')
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case extensions and make sure each starts with a dot."""
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in normalized:
                normalized.append(ext)
        if not normalized:
            raise ValueError("trigger_config_extensions must name at least one extension")
        return normalized

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json')


class TriggerFileConfig(BaseModel):
    """Schema of a trigger file.

    ``audio`` maps an elapsed second offset to the cue that should play when
    the running timer first reaches that second.
    """

    audio: Dict[StrictInt, str] = Field(default_factory=dict, description="Elapsed second -> cue identifier")

    model_config = {"extra": "ignore"}

    @field_validator('audio')
    @classmethod
    def validate_audio(cls, v: Dict[int, str]) -> Dict[int, str]:
        for second, cue in v.items():
            if second < 0 or second > MAX_TRIGGER_OFFSET:
                raise ValueError(f"Invalid offset {second}. Must be 0-{MAX_TRIGGER_OFFSET}")
            if not cue.strip():
                raise ValueError(f"Empty cue for offset {second}")
        return {second: cue.strip() for second, cue in v.items()}


def validate_config_dict(config_dict: Dict[str, Any]) -> tuple[CueTimerConfig, list[str]]:
    """Validate a settings dictionary against the schema.

    Returns:
        Tuple of (validated_config, warnings_list)

    Raises:
        ValueError: If config is invalid with detailed error messages
    """
    warnings = []

    unknown = sorted(k for k in config_dict if not k.startswith("_") and k not in CueTimerConfig.model_fields)
    if unknown:
        warnings.append(f"Unknown settings ignored: {', '.join(unknown)}")

    try:
        validated = CueTimerConfig(**config_dict)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {str(e)}")

    return validated, warnings
