"""Time accounting properties of the timer phase state machine."""

import pytest

from cuetimer.core.errors import ClockViolation
from cuetimer.core.timer import CountingDown, Idle, Paused, Running, TimerEngine


def _running_engine(start: float = 0.0, countdown: float = 60.0) -> TimerEngine:
    engine = TimerEngine(countdown)
    engine.start_or_restart(start)
    engine.advance(start + countdown)
    assert isinstance(engine.phase, Running)
    return engine


def test_initial_phase_is_idle():
    engine = TimerEngine()
    assert engine.phase == Idle()
    assert engine.advance(5.0) == 0.0
    assert engine.wants_ticks() is False


def test_countdown_reports_remaining_time():
    engine = TimerEngine(60)
    engine.start_or_restart(100.0)
    assert engine.phase == CountingDown(anchor=100.0)
    assert engine.advance(100.0) == pytest.approx(60.0)
    assert engine.advance(115.5) == pytest.approx(44.5)
    assert isinstance(engine.phase, CountingDown)


def test_countdown_zero_crossing_transitions_on_that_tick_only():
    engine = TimerEngine(60)
    engine.start_or_restart(100.0)

    assert engine.advance(159.999) > 0.0
    assert isinstance(engine.phase, CountingDown)

    assert engine.advance(160.001) == 0.0
    assert engine.phase == Running(base=0.0, last_start=160.001)


def test_advance_is_idempotent_for_the_same_timestamp():
    engine = TimerEngine(60)
    engine.start_or_restart(0.0)

    first = engine.advance(60.0)
    phase_after_first = engine.phase
    second = engine.advance(60.0)

    assert first == second == 0.0
    assert engine.phase == phase_after_first == Running(base=0.0, last_start=60.0)


def test_running_accumulates_elapsed_time():
    engine = _running_engine(start=0.0)
    assert engine.advance(61.25) == pytest.approx(1.25)
    assert engine.advance(70.0) == pytest.approx(10.0)


def test_pause_preserves_elapsed_until_resume():
    engine = _running_engine(start=0.0)
    assert engine.advance(70.0) == pytest.approx(10.0)

    # five more seconds of real time, then pause
    engine.pause_or_resume(75.0)
    assert engine.phase == Paused(frozen=pytest.approx(15.0))
    assert engine.advance(500.0) == pytest.approx(15.0)
    assert engine.advance(1000.0) == pytest.approx(15.0)
    assert engine.wants_ticks() is False

    engine.pause_or_resume(1000.0)
    assert engine.phase == Running(base=pytest.approx(15.0), last_start=1000.0)
    assert engine.advance(1003.0) == pytest.approx(18.0)


def test_pause_or_resume_is_noop_outside_running_and_paused():
    engine = TimerEngine(60)
    engine.pause_or_resume(1.0)
    assert engine.phase == Idle()

    engine.start_or_restart(2.0)
    engine.pause_or_resume(3.0)
    assert engine.phase == CountingDown(anchor=2.0)


@pytest.mark.parametrize("setup", ["idle", "counting_down", "running", "paused"])
def test_start_restarts_from_every_phase(setup):
    engine = TimerEngine(60)
    if setup != "idle":
        engine.start_or_restart(0.0)
    if setup in ("running", "paused"):
        engine.advance(60.0)
        engine.advance(70.0)
    if setup == "paused":
        engine.pause_or_resume(71.0)
    assert engine.phase_name == setup

    engine.start_or_restart(200.0)
    assert engine.phase == CountingDown(anchor=200.0)
    assert engine.advance(200.0) == pytest.approx(60.0)


def test_cancel_returns_to_idle():
    engine = TimerEngine(60)
    engine.start_or_restart(0.0)
    engine.cancel()
    assert engine.phase == Idle()
    assert engine.wants_ticks() is False


def test_wants_ticks_follows_phase():
    engine = TimerEngine(60)
    engine.start_or_restart(0.0)
    assert engine.wants_ticks() is True
    engine.advance(60.0)
    assert engine.wants_ticks() is True
    engine.pause_or_resume(61.0)
    assert engine.wants_ticks() is False


def test_out_of_order_tick_raises_and_leaves_phase_untouched():
    engine = _running_engine(start=10.0)
    engine.advance(80.0)
    before = engine.phase

    with pytest.raises(ClockViolation) as excinfo:
        engine.advance(79.0)

    assert excinfo.value.previous == 80.0
    assert excinfo.value.now == 79.0
    assert engine.phase == before
    assert engine.advance(81.0) == pytest.approx(11.0)


def test_restart_resets_the_clock_reference():
    engine = _running_engine(start=500.0)
    engine.advance(600.0)

    # a restart may use any reference point, even an earlier one
    engine.start_or_restart(5.0)
    assert engine.advance(6.0) == pytest.approx(59.0)


def test_phase_sequence_is_independent_of_absolute_clock_values():
    deltas = [("start", 0.0), ("tick", 30.0), ("tick", 30.0), ("tick", 12.5),
              ("toggle", 2.0), ("tick", 40.0), ("toggle", 1.0), ("tick", 3.5)]

    def replay(origin: float):
        engine = TimerEngine(60)
        now = origin
        displayed = None
        for event, delta in deltas:
            now += delta
            if event == "start":
                engine.start_or_restart(now)
            elif event == "toggle":
                engine.pause_or_resume(now)
            else:
                displayed = engine.advance(now)
        return engine.phase_name, displayed

    phase_a, displayed_a = replay(0.0)
    phase_b, displayed_b = replay(123456.0)

    assert phase_a == phase_b == "running"
    assert displayed_a == pytest.approx(displayed_b, abs=1e-6)
    assert displayed_a == pytest.approx(18.0)


def test_countdown_must_be_positive():
    with pytest.raises(ValueError):
        TimerEngine(0)
