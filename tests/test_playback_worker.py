"""Tests for the queue-fed cue playback worker."""

from pathlib import Path

from cuetimer.core.playback import LoggingBackend, PlaybackWorker


class ExplodingBackend:
    def __init__(self, fail_on: str):
        self.fail_on = fail_on
        self.played = []
        self.closed = False

    def open(self):
        pass

    def play(self, path: Path):
        if path.name == self.fail_on:
            raise RuntimeError("decoder error")
        self.played.append(path)

    def close(self):
        self.closed = True


class NoDeviceBackend:
    def __init__(self):
        self.played = []

    def open(self):
        raise RuntimeError("No available audio device")

    def play(self, path: Path):
        self.played.append(path)

    def close(self):
        raise AssertionError("close must not be called when open failed")


def test_relative_cue_resolved_against_base_dir(playback, backend, trigger_dir):
    playback.play("horn.wav")
    playback.join()

    assert backend.opened is True
    assert backend.played == [trigger_dir / "horn.wav"]
    assert playback.failures == 0


def test_absolute_cue_path_is_kept(playback, backend, trigger_dir):
    absolute = str(trigger_dir / "rune.wav")
    assert playback.resolve(absolute) == Path(absolute)

    playback.play(absolute)
    playback.join()
    assert backend.played == [Path(absolute)]


def test_missing_file_is_counted_not_raised(playback, backend):
    playback.play("missing.wav")
    playback.play("horn.wav")
    playback.join()

    assert playback.failures == 1
    assert [p.name for p in backend.played] == ["horn.wav"]


def test_backend_error_does_not_stop_worker(trigger_dir):
    backend = ExplodingBackend(fail_on="horn.wav")
    worker = PlaybackWorker(backend, base_dir=trigger_dir)
    worker.start()
    try:
        worker.play("horn.wav")
        worker.play("rune.wav")
        worker.join()
        assert worker.failures == 1
        assert [p.name for p in backend.played] == ["rune.wav"]
        assert worker.running is True
    finally:
        worker.stop()
    assert backend.closed is True


def test_unavailable_device_drops_cues(trigger_dir):
    backend = NoDeviceBackend()
    worker = PlaybackWorker(backend, base_dir=trigger_dir)
    worker.start()
    try:
        worker.play("horn.wav")
        worker.play("rune.wav")
        worker.join()
        assert worker.available is False
        assert worker.failures == 2
        assert backend.played == []
    finally:
        worker.stop()


def test_stop_closes_backend(backend, trigger_dir):
    worker = PlaybackWorker(backend, base_dir=trigger_dir)
    worker.start()
    worker.play("horn.wav")
    worker.join()
    assert worker.available is True

    worker.stop()
    assert worker.running is False
    assert worker.available is False
    assert backend.closed is True


def test_start_and_stop_are_idempotent(backend, trigger_dir):
    worker = PlaybackWorker(backend, base_dir=trigger_dir)
    worker.stop()
    worker.start()
    worker.start()
    worker.stop()
    worker.stop()
    assert backend.closed is True


def test_logging_backend_records_cues(trigger_dir):
    backend = LoggingBackend()
    worker = PlaybackWorker(backend, base_dir=trigger_dir)
    worker.start()
    try:
        worker.play("rune.wav")
        worker.join()
    finally:
        worker.stop()
    assert backend.played == [trigger_dir / "rune.wav"]


def test_play_after_stop_is_dropped(backend, trigger_dir):
    worker = PlaybackWorker(backend, base_dir=trigger_dir)
    worker.start()
    worker.stop()

    for _ in range(3):
        worker.play("horn.wav")
    assert worker.pending == 0
    assert backend.played == []


def test_play_before_start_is_dropped(backend, trigger_dir):
    worker = PlaybackWorker(backend, base_dir=trigger_dir)
    worker.play("horn.wav")
    assert worker.pending == 0
