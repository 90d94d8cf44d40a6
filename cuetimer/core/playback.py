"""
🔊 Audio cue playback worker.

One daemon thread owns the audio device for the lifetime of the worker and
consumes cue requests from a queue.  ``play()`` only enqueues, so the tick
loop is never blocked by audio I/O, and playback failures (missing file,
decode error, no audio device) are logged here and never reach the timer.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

logger = logging.getLogger(__name__)

_STOP = object()


class PygameBackend:
    """Plays cues through ``pygame.mixer`` without blocking."""

    def __init__(self, volume: int = 100):
        self._volume = max(0, min(100, volume)) / 100.0
        # Sounds are cached so pygame keeps them alive while playing
        self._sounds: Dict[str, pygame.mixer.Sound] = {}

    def open(self) -> None:
        pygame.mixer.init()
        logger.info(f"🔈 Audio mixer initialized: {pygame.mixer.get_init()}")

    def play(self, path: Path) -> None:
        key = str(path)
        sound = self._sounds.get(key)
        if sound is None:
            sound = pygame.mixer.Sound(key)
            sound.set_volume(self._volume)
            self._sounds[key] = sound
        sound.play()

    def close(self) -> None:
        self._sounds.clear()
        if pygame.mixer.get_init():
            pygame.mixer.quit()


class LoggingBackend:
    """Backend used when audio is disabled: records and logs cues only."""

    def __init__(self) -> None:
        self.played: List[Path] = []

    def open(self) -> None:
        logger.info("🔇 Audio disabled, cues will only be logged")

    def play(self, path: Path) -> None:
        self.played.append(path)
        logger.info(f"🔔 Cue (muted): {path}")

    def close(self) -> None:
        pass


class PlaybackWorker:
    """Queue-fed playback thread."""

    def __init__(self, backend=None, base_dir: Union[str, Path] = "."):
        self.backend = backend if backend is not None else PygameBackend()
        self.base_dir = Path(base_dir)
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._running = False
        self._available = False
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def available(self) -> bool:
        """True once the backend opened successfully."""
        return self._available

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._thread = threading.Thread(target=self._run_loop, name="CuePlayback", daemon=True)
            self._running = True
            self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._queue.put(_STOP)
            thread = self._thread
        if thread is not None:
            thread.join(timeout)

    @property
    def pending(self) -> int:
        """Cues queued but not yet handled."""
        return self._queue.qsize()

    def play(self, cue: str) -> None:
        """Request playback of ``cue``; returns immediately.

        Requests made while the worker is stopped are dropped.
        """
        if not self._running:
            logger.warning(f"Dropping cue {cue}: playback worker is not running")
            return
        self._queue.put(cue)

    def join(self) -> None:
        """Block until every queued cue has been handled."""
        self._queue.join()

    def resolve(self, cue: str) -> Path:
        path = Path(cue).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    def _run_loop(self) -> None:
        try:
            self.backend.open()
            self._available = True
        except Exception as e:
            logger.error(f"❌ Audio backend unavailable, cues will be dropped: {e}")

        try:
            while True:
                item = self._queue.get()
                try:
                    if item is _STOP:
                        return
                    self._play_one(item)
                finally:
                    self._queue.task_done()
        finally:
            if self._available:
                try:
                    self.backend.close()
                except Exception as e:
                    logger.warning(f"⚠️ Error closing audio backend: {e}")
                self._available = False

    def _play_one(self, cue: str) -> None:
        if not self._available:
            logger.warning(f"Dropping cue {cue}: no audio backend")
            self.failures += 1
            return
        path = self.resolve(cue)
        if not path.is_file():
            logger.warning(f"⚠️ Cue file not found: {path}")
            self.failures += 1
            return
        try:
            self.backend.play(path)
            logger.debug(f"Playing cue {path}")
        except Exception as e:
            logger.error(f"❌ Failed to play cue {path}: {e}")
            self.failures += 1
