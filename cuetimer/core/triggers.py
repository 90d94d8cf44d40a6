"""
🔔 Edge-triggered cue scheduler.

Cues key off the floor of the displayed seconds, not off tick identity: the
tick cadence is far finer than the cue resolution, so each offset fires
once per cycle and is then remembered in the fired set until the next
reset or configuration load.
"""

from __future__ import annotations

import math
from typing import Dict, FrozenSet, List, Mapping, Set

from ..constants import MAX_TRIGGER_OFFSET
from .errors import ConfigParseError

TriggerMap = Dict[int, str]


def validate_trigger_map(trigger_map: Mapping, source: str = "trigger map") -> TriggerMap:
    """Return a clean copy of ``trigger_map`` or raise ConfigParseError."""
    if not isinstance(trigger_map, Mapping):
        raise ConfigParseError(source, "expected a mapping of second offsets to cues")

    cleaned: TriggerMap = {}
    for second, cue in trigger_map.items():
        # bool is an int subclass but never a meaningful offset
        if isinstance(second, bool) or not isinstance(second, int):
            raise ConfigParseError(source, f"offset {second!r} is not an integer")
        if second < 0 or second > MAX_TRIGGER_OFFSET:
            raise ConfigParseError(source, f"offset {second} is outside 0-{MAX_TRIGGER_OFFSET}")
        if not isinstance(cue, str) or not cue.strip():
            raise ConfigParseError(source, f"cue for offset {second} must be a non-empty string")
        cleaned[second] = cue.strip()
    return cleaned


class TriggerScheduler:
    """Maps whole elapsed seconds to cue identifiers and fires each once."""

    def __init__(self) -> None:
        self._map: TriggerMap = {}
        self._fired: Set[int] = set()

    @property
    def trigger_map(self) -> TriggerMap:
        return dict(self._map)

    @property
    def fired(self) -> FrozenSet[int]:
        return frozenset(self._fired)

    def __len__(self) -> int:
        return len(self._map)

    def load(self, trigger_map: Mapping, source: str = "trigger map") -> None:
        """Replace the active map and clear the fired set.

        The new map is validated in full first; on failure the previous
        map and fired set are left untouched.
        """
        cleaned = validate_trigger_map(trigger_map, source)
        self._map = cleaned
        self._fired.clear()

    def poll(self, displayed: float) -> List[str]:
        """Return the cue due at ``displayed`` seconds, at most once per cycle."""
        second = math.floor(displayed)
        cue = self._map.get(second)
        if cue is None or second in self._fired:
            return []
        self._fired.add(second)
        return [cue]

    def reset(self) -> None:
        self._fired.clear()
