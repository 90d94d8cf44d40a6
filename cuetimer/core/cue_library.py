"""
📚 Trigger file discovery.

Lists the selectable trigger files in one directory and resolves a
selected name back to a path inside that directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Union

from ..constants import TRIGGER_FILE_EXTENSIONS
from .errors import ConfigParseError
from .trigger_loader import load_trigger_file
from .triggers import TriggerMap

logger = logging.getLogger(__name__)


class CueLibrary:
    """Enumerates trigger files and loads them by name."""

    def __init__(self, directory: Union[str, Path], extensions: Iterable[str] = TRIGGER_FILE_EXTENSIONS):
        self.directory = Path(directory)
        self.extensions = tuple(ext.lower() for ext in extensions)

    def list_configs(self) -> List[str]:
        """Return the file names of all trigger files, sorted."""
        if not self.directory.is_dir():
            logger.warning(f"Trigger directory {self.directory} does not exist")
            return []
        return sorted(
            entry.name
            for entry in self.directory.iterdir()
            if entry.is_file() and entry.suffix.lower() in self.extensions
        )

    def resolve(self, config_id: str) -> Path:
        """Map a listed name to its path, refusing anything outside the directory."""
        candidate = Path(config_id)
        if candidate.name != config_id or candidate.suffix.lower() not in self.extensions:
            raise ConfigParseError(config_id, "not a selectable trigger file")
        path = self.directory / candidate.name
        if not path.is_file():
            raise ConfigParseError(config_id, "file not found")
        return path

    def load(self, config_id: str) -> TriggerMap:
        return load_trigger_file(self.resolve(config_id))
