"""Shared pytest fixtures for the CueTimer test suite."""

from __future__ import annotations

import os

# Keep test runs from writing into ~/.cuetimer/logs
os.environ.setdefault("CUETIMER_FILE_LOGS", "0")
os.environ.setdefault("CUETIMER_SYSTEM_INFO", "0")

from pathlib import Path  # noqa: E402
from typing import List  # noqa: E402

import pytest  # noqa: E402

from cuetimer.app import create_app  # noqa: E402
from cuetimer.config_schema import CueTimerConfig  # noqa: E402
from cuetimer.core.cue_library import CueLibrary  # noqa: E402
from cuetimer.core.playback import PlaybackWorker  # noqa: E402
from cuetimer.services.service_manager import ServiceManager  # noqa: E402
from cuetimer.services.timer_service import TimerService  # noqa: E402

ROUND_YAML = """\
audio:
  0: horn.wav
  4: rune.wav
"""


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class RecordingBackend:
    """Audio backend double that records what it was asked to play."""

    def __init__(self) -> None:
        self.opened = False
        self.closed = False
        self.played: List[Path] = []

    def open(self) -> None:
        self.opened = True

    def play(self, path: Path) -> None:
        self.played.append(path)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def trigger_dir(tmp_path: Path) -> Path:
    """Directory with one valid and one broken trigger file plus cue files."""
    (tmp_path / "round.yaml").write_text(ROUND_YAML, encoding="utf-8")
    (tmp_path / "broken.yaml").write_text("audio: [unclosed\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not a trigger file", encoding="utf-8")
    (tmp_path / "horn.wav").write_bytes(b"RIFF")
    (tmp_path / "rune.wav").write_bytes(b"RIFF")
    return tmp_path


@pytest.fixture
def settings(trigger_dir: Path) -> dict:
    return CueTimerConfig(
        countdown_seconds=60,
        trigger_config_dir=str(trigger_dir),
        cue_base_dir=str(trigger_dir),
        audio_enabled=False,
    ).to_dict()


@pytest.fixture
def playback(backend: RecordingBackend, trigger_dir: Path):
    worker = PlaybackWorker(backend, base_dir=trigger_dir)
    worker.start()
    yield worker
    worker.stop()


@pytest.fixture
def timer_service(settings: dict, playback: PlaybackWorker, clock: FakeClock, trigger_dir: Path) -> TimerService:
    """Timer service driven by the fake clock, without the ticker thread."""
    return TimerService(
        settings,
        playback=playback,
        library=CueLibrary(trigger_dir),
        clock=clock,
        start_background=False,
    )


@pytest.fixture
def app(settings: dict, timer_service: TimerService):
    flask_app = create_app(settings, service_manager=ServiceManager(settings, timer=timer_service))
    flask_app.config.update({"TESTING": True})
    return flask_app


@pytest.fixture
def client(app):
    """Provide a fresh Flask test client for each test."""
    with app.test_client() as test_client:
        yield test_client
