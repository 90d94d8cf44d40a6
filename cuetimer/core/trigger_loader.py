"""
📄 Trigger file loading.

A trigger file is YAML shaped like::

    audio:
      0: sounds/horn.mp3
      300: sounds/rune.mp3

Any failure (unreadable file, YAML syntax, schema violation) is reported as
:class:`ConfigParseError`; nothing is returned partially.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from ..config_schema import TriggerFileConfig
from .errors import ConfigParseError
from .triggers import TriggerMap

logger = logging.getLogger(__name__)


def parse_trigger_text(text: str, source: str = "<string>") -> TriggerMap:
    """Parse YAML trigger text into a second -> cue mapping."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(source, f"invalid YAML: {e}")

    if data is None:
        raise ConfigParseError(source, "file is empty")
    if not isinstance(data, dict):
        raise ConfigParseError(source, "top level must be a mapping with an 'audio' section")
    if "audio" not in data:
        raise ConfigParseError(source, "missing 'audio' section")

    try:
        validated = TriggerFileConfig(**data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigParseError(source, errors)

    return dict(validated.audio)


def load_trigger_file(path: Union[str, Path]) -> TriggerMap:
    """Read and parse the trigger file at ``path``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(str(path), f"cannot read file: {e}")

    trigger_map = parse_trigger_text(text, source=str(path))
    logger.debug(f"Parsed {len(trigger_map)} trigger(s) from {path}")
    return trigger_map
