"""
⏱️ Timer Service - Owner of the timer state
==========================================

Holds the one ``TimerState`` of the application and serializes every
command and tick through a single lock, so the core always runs as if on
one control thread even though commands arrive from HTTP request threads
and ticks from the ticker thread.  Cue effects are handed to the playback
worker after the lock has been released.
"""

import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from . import BaseService, ServiceResult
from ..constants import (DEFAULT_COUNTDOWN_SECONDS, DEFAULT_TICK_INTERVAL_MS, PRIMARY_ACTIONS,
                         TRIGGER_FILE_EXTENSIONS)
from ..core.commands import (Cancel, Command, LoadConfig, Outcome, PauseResume,
                             Start, Tick, TimerState, dispatch)
from ..core.cue_library import CueLibrary
from ..core.errors import ConfigParseError
from ..core.playback import LoggingBackend, PlaybackWorker, PygameBackend
from ..core.ticker import Ticker
from ..utils.time_format import format_clock


class TimerService(BaseService):
    """Service wrapping the timer core and its collaborators."""

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        *,
        playback: Optional[PlaybackWorker] = None,
        library: Optional[CueLibrary] = None,
        clock: Callable[[], float] = time.monotonic,
        start_background: bool = True,
    ):
        super().__init__("timer")
        settings = settings or {}
        self.settings = settings
        self._clock = clock
        self._lock = threading.RLock()
        self._start_background = start_background
        self._state = TimerState.create(settings.get("countdown_seconds", DEFAULT_COUNTDOWN_SECONDS))

        self.library = library or CueLibrary(
            Path(settings.get("trigger_config_dir", ".")),
            settings.get("trigger_config_extensions", TRIGGER_FILE_EXTENSIONS),
        )

        if playback is None:
            if settings.get("audio_enabled", True):
                backend = PygameBackend(volume=settings.get("volume", 100))
            else:
                backend = LoggingBackend()
            playback = PlaybackWorker(backend, base_dir=settings.get("cue_base_dir", "."))
        self.playback = playback

        interval_ms = settings.get("tick_interval_ms", DEFAULT_TICK_INTERVAL_MS)
        self.ticker = Ticker(
            on_tick=lambda _delivered: self.tick(),
            wants_ticks=self.wants_ticks,
            interval=interval_ms / 1000.0,
        )
        self.cues_played = 0

    def initialize(self) -> ServiceResult:
        if self._start_background:
            self.playback.start()
            self.ticker.start()
        return super().initialize()

    def shutdown(self) -> None:
        self.ticker.stop()
        self.playback.stop()
        super().shutdown()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, build: Callable[[float], Command]) -> Outcome:
        with self._lock:
            # Read the clock under the lock so timestamps stay ordered
            outcome = dispatch(self._state, build(self._clock()), loader=self.library.load)
            wants_ticks = self._state.wants_ticks()

        for effect in outcome.effects:
            self.playback.play(effect.cue)
            self.cues_played += 1
        if wants_ticks:
            self.ticker.wake()
        return outcome

    def wants_ticks(self) -> bool:
        with self._lock:
            return self._state.wants_ticks()

    def tick(self, now: Optional[float] = None) -> Outcome:
        """Advance the timer; ``now`` defaults to the service clock."""
        if now is None:
            return self._dispatch(Tick)
        return self._dispatch(lambda _clock_now: Tick(now))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> ServiceResult:
        """Start or restart the countdown."""
        try:
            self._dispatch(Start)
            return self._success_result(data=self.snapshot(), message="Countdown started")
        except Exception as e:
            return self._handle_error(e, "start")

    def toggle(self) -> ServiceResult:
        """Pause a running timer or resume a paused one."""
        try:
            outcome = self._dispatch(PauseResume)
            if outcome.error is not None:
                return self._error_result(str(outcome.error), error_code="clock_violation", data=self.snapshot())
            return self._success_result(data=self.snapshot())
        except Exception as e:
            return self._handle_error(e, "toggle")

    def cancel(self) -> ServiceResult:
        try:
            self._dispatch(lambda _now: Cancel())
            return self._success_result(data=self.snapshot(), message="Timer cancelled")
        except Exception as e:
            return self._handle_error(e, "cancel")

    def load_trigger_config(self, config_id: str) -> ServiceResult:
        """Replace the active cue map with the one in ``config_id``.

        On failure the previously loaded cues stay active.
        """
        if not config_id:
            return self._error_result("No trigger file selected", error_code="missing_config")
        try:
            outcome = self._dispatch(lambda _now: LoadConfig(config_id))
        except Exception as e:
            return self._handle_error(e, "load_trigger_config")

        if isinstance(outcome.error, ConfigParseError):
            return self._error_result(
                f"Could not load {config_id}: {outcome.error.reason}",
                error_code="config_parse_error",
                data=self.snapshot(),
            )
        return self._success_result(data=self.snapshot(), message=f"Loaded {config_id}")

    def list_trigger_configs(self) -> ServiceResult:
        try:
            with self._lock:
                selected = self._state.selected_config
            return self._success_result(data={
                "configs": self.library.list_configs(),
                "selected": selected,
                "directory": str(self.library.directory),
            })
        except Exception as e:
            return self._handle_error(e, "list_trigger_configs")

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Return a read-only view of the timer for status displays."""
        with self._lock:
            engine = self._state.engine
            scheduler = self._state.scheduler
            displayed = engine.displayed(self._clock())
            phase = engine.phase_name
            return {
                "phase": phase,
                "displayed_seconds": round(displayed, 3),
                "display": format_clock(displayed),
                "primary_action": PRIMARY_ACTIONS[phase],
                "wants_ticks": engine.wants_ticks(),
                "countdown_seconds": engine.countdown_seconds,
                "selected_config": self._state.selected_config,
                "trigger_count": len(scheduler),
                "fired": sorted(scheduler.fired),
            }

    def get_status(self) -> ServiceResult:
        try:
            return self._success_result(data=self.snapshot())
        except Exception as e:
            return self._handle_error(e, "get_status")

    def health_check(self) -> ServiceResult:
        base_health = super().health_check()
        if not base_health.success:
            return base_health

        background_ok = (not self._start_background) or (self.ticker.running and self.playback.running)
        audio_ok = (not self._start_background) or self.playback.available
        return self._success_result(data={
            "service": "timer",
            "status": "healthy" if background_ok and audio_ok else "degraded",
            "uptime_seconds": self.uptime_seconds(),
            "last_error": self.last_error,
            "components": {
                "ticker": "ok" if self.ticker.running else "stopped",
                "playback": "ok" if self.playback.available else "unavailable",
            },
            "cues_played": self.cues_played,
            "playback_failures": self.playback.failures,
            "playback_pending": self.playback.pending,
        })
