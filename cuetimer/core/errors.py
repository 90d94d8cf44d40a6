"""
Error taxonomy for the timer core.

None of these errors is fatal: the state machine stays usable after any of
them is reported.
"""

from typing import Any


class CueTimerError(Exception):
    """Base class for all CueTimer errors."""


class ConfigParseError(CueTimerError):
    """A trigger configuration could not be read or validated."""

    def __init__(self, source: Any, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class ClockViolation(CueTimerError):
    """A timestamp arrived earlier than the last one observed."""

    def __init__(self, previous: float, now: float):
        self.previous = previous
        self.now = now
        super().__init__(
            f"tick at {now:.6f} is earlier than last observed {previous:.6f}"
        )
