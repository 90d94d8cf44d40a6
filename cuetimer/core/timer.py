"""
⏱️ Timer phase state machine.

The engine never reads the clock itself: every operation that depends on
time receives ``now`` from the caller as a monotonic reading in seconds
(``time.monotonic()``).  Readings are only ever used as deltas against a
reference point stored in the current phase.

Precondition: timestamps passed to :meth:`TimerEngine.advance` and
:meth:`TimerEngine.pause_or_resume` must be non-decreasing between two
restarts.  A violation raises :class:`ClockViolation` and leaves the phase
untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..constants import DEFAULT_COUNTDOWN_SECONDS
from .errors import ClockViolation


@dataclass(frozen=True)
class Idle:
    """No active timer."""


@dataclass(frozen=True)
class CountingDown:
    """The preparation interval is running down from ``anchor``."""
    anchor: float


@dataclass(frozen=True)
class Running:
    """Elapsed time is ``base + (now - last_start)``."""
    base: float
    last_start: float


@dataclass(frozen=True)
class Paused:
    """Elapsed time is frozen."""
    frozen: float


Phase = Union[Idle, CountingDown, Running, Paused]

PHASE_NAMES = {
    Idle: "idle",
    CountingDown: "counting_down",
    Running: "running",
    Paused: "paused",
}


class TimerEngine:
    """Owns the current phase and does all time accounting."""

    def __init__(self, countdown_seconds: float = DEFAULT_COUNTDOWN_SECONDS):
        if countdown_seconds <= 0:
            raise ValueError("countdown_seconds must be positive")
        self._countdown = float(countdown_seconds)
        self._phase: Phase = Idle()
        self._last_seen: Optional[float] = None

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def phase_name(self) -> str:
        return PHASE_NAMES[type(self._phase)]

    @property
    def countdown_seconds(self) -> float:
        return self._countdown

    def wants_ticks(self) -> bool:
        """True while the tick source should keep delivering timestamps."""
        return isinstance(self._phase, (CountingDown, Running))

    def _observe(self, now: float) -> None:
        if self._last_seen is not None and now < self._last_seen:
            raise ClockViolation(self._last_seen, now)
        self._last_seen = now

    def start_or_restart(self, now: float) -> None:
        """Begin a fresh countdown from any phase.

        Accounting restarts from zero; the owner is responsible for
        clearing the fired-cue history of the scheduler.
        """
        self._phase = CountingDown(anchor=now)
        self._last_seen = now

    def pause_or_resume(self, now: float) -> None:
        """Toggle between Running and Paused; no-op in other phases."""
        phase = self._phase
        if isinstance(phase, Running):
            self._observe(now)
            self._phase = Paused(frozen=phase.base + (now - phase.last_start))
        elif isinstance(phase, Paused):
            self._observe(now)
            self._phase = Running(base=phase.frozen, last_start=now)

    def cancel(self) -> None:
        """Abandon the current cycle and return to Idle."""
        self._phase = Idle()
        self._last_seen = None

    def advance(self, now: float) -> float:
        """Account for a tick at ``now`` and return the displayed seconds.

        During the countdown the displayed value is the remaining time.  On
        the tick where it reaches zero the engine switches to Running with
        ``base = 0`` and still returns the pre-transition value (``0``).
        Calling again with the same ``now`` returns the same value and
        performs no further transition.
        """
        self._observe(now)
        phase = self._phase
        if isinstance(phase, CountingDown):
            remaining = max(0.0, self._countdown - (now - phase.anchor))
            if remaining == 0.0:
                self._phase = Running(base=0.0, last_start=now)
            return remaining
        if isinstance(phase, Running):
            return phase.base + (now - phase.last_start)
        if isinstance(phase, Paused):
            return phase.frozen
        return 0.0

    def displayed(self, now: float) -> float:
        """Read-only variant of :meth:`advance` for status queries."""
        phase = self._phase
        if isinstance(phase, CountingDown):
            return max(0.0, self._countdown - (now - phase.anchor))
        if isinstance(phase, Running):
            return phase.base + max(0.0, now - phase.last_start)
        if isinstance(phase, Paused):
            return phase.frozen
        return 0.0
