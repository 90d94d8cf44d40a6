"""
Command dispatch for the timer.

All state changes go through :func:`dispatch`, which consumes one command
and returns an :class:`Outcome` listing the side effects the owner has to
carry out (cues to play).  The transition itself never touches audio.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, Union

from ..constants import DEFAULT_COUNTDOWN_SECONDS
from .errors import ClockViolation, ConfigParseError, CueTimerError
from .timer import Running, TimerEngine
from .triggers import TriggerScheduler

logger = logging.getLogger(__name__)

TriggerLoader = Callable[[str], Mapping[int, str]]


@dataclass(frozen=True)
class Start:
    now: float


@dataclass(frozen=True)
class PauseResume:
    now: float


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class LoadConfig:
    config_id: str


@dataclass(frozen=True)
class Tick:
    now: float


Command = Union[Start, PauseResume, Cancel, LoadConfig, Tick]


@dataclass(frozen=True)
class PlayCue:
    """Request to hand ``cue`` to the playback worker."""
    cue: str


Effect = PlayCue


@dataclass
class Outcome:
    displayed: Optional[float] = None
    effects: List[Effect] = field(default_factory=list)
    error: Optional[CueTimerError] = None


@dataclass
class TimerState:
    """The single application state value, owned by whoever dispatches."""
    engine: TimerEngine
    scheduler: TriggerScheduler
    selected_config: Optional[str] = None

    @classmethod
    def create(cls, countdown_seconds: float = DEFAULT_COUNTDOWN_SECONDS) -> "TimerState":
        return cls(engine=TimerEngine(countdown_seconds), scheduler=TriggerScheduler())

    def wants_ticks(self) -> bool:
        return self.engine.wants_ticks()


def dispatch(state: TimerState, command: Command, *, loader: Optional[TriggerLoader] = None) -> Outcome:
    """Apply ``command`` to ``state`` and return the resulting outcome."""
    if isinstance(command, Tick):
        return _on_tick(state, command.now)

    if isinstance(command, Start):
        state.engine.start_or_restart(command.now)
        state.scheduler.reset()
        logger.info(f"Countdown started ({state.engine.countdown_seconds:.0f}s)")
        return Outcome()

    if isinstance(command, PauseResume):
        try:
            state.engine.pause_or_resume(command.now)
        except ClockViolation as e:
            logger.warning(f"Ignoring pause/resume: {e}")
            return Outcome(error=e)
        logger.info(f"Timer is now {state.engine.phase_name}")
        return Outcome()

    if isinstance(command, Cancel):
        state.engine.cancel()
        logger.info("Timer cancelled")
        return Outcome()

    if isinstance(command, LoadConfig):
        return _on_load(state, command.config_id, loader)

    raise TypeError(f"Unknown command: {command!r}")


def _on_tick(state: TimerState, now: float) -> Outcome:
    was_running = isinstance(state.engine.phase, Running)
    try:
        displayed = state.engine.advance(now)
    except ClockViolation as e:
        logger.warning(f"Dropping out-of-order tick: {e}")
        return Outcome(error=e)

    if not was_running:
        return Outcome(displayed=displayed)

    effects = [PlayCue(cue) for cue in state.scheduler.poll(displayed)]
    for effect in effects:
        logger.info(f"Cue due at {int(displayed)}s: {effect.cue}")
    return Outcome(displayed=displayed, effects=effects)


def _on_load(state: TimerState, config_id: str, loader: Optional[TriggerLoader]) -> Outcome:
    if loader is None:
        raise ValueError("LoadConfig requires a trigger loader")
    try:
        trigger_map = loader(config_id)
        state.scheduler.load(trigger_map, source=config_id)
    except ConfigParseError as e:
        logger.error(f"❌ Failed to load trigger config {config_id}: {e.reason}")
        return Outcome(error=e)

    state.selected_config = config_id
    logger.info(f"🔔 Loaded {len(state.scheduler)} cue(s) from {config_id}")
    return Outcome()
