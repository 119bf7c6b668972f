import pytest

from agrifly.timers import BaseTimer, HardwareTimer, ManualTimer, Timer


def test_base_timer_is_abstract():
    with pytest.raises(TypeError):
        BaseTimer()


def test_manual_timer_starts_at_zero_and_advances():
    clock = ManualTimer()
    assert clock.microseconds() == 0
    clock.advance_microseconds(1500)
    clock.advance_microseconds(500)
    assert clock.microseconds() == 2000
    assert clock.seconds() == pytest.approx(2000e-6)


def test_manual_timer_reset():
    clock = ManualTimer()
    clock.advance_microseconds(42)
    clock.reset_microseconds(7)
    assert clock.microseconds() == 7


def test_manual_timer_rejects_negative():
    clock = ManualTimer()
    with pytest.raises(ValueError):
        clock.advance_microseconds(-1)
    with pytest.raises(ValueError):
        clock.reset_microseconds(-5)


def test_timer_measures_since_reset():
    clock = ManualTimer()
    clock.advance_microseconds(1000)
    timer = Timer(clock)
    assert timer.microseconds() == 0
    clock.advance_microseconds(2500)
    assert timer.microseconds() == 2500
    assert timer.seconds() == pytest.approx(2500e-6)
    timer.reset()
    assert timer.microseconds() == 0
    assert timer.master is clock


def test_timer_adjust_forward_and_back():
    clock = ManualTimer()
    timer = Timer(clock)
    timer.adjust_time_by_seconds(0.25)
    assert timer.microseconds() == 250_000
    timer.adjust_time_by_seconds(-0.25)
    assert timer.microseconds() == 0


def test_two_timers_share_master_independently():
    clock = ManualTimer()
    first = Timer(clock)
    clock.advance_microseconds(300)
    second = Timer(clock)
    clock.advance_microseconds(200)
    assert first.microseconds() == 500
    assert second.microseconds() == 200


def test_hardware_timer_is_monotonic():
    clock = HardwareTimer()
    readings = [clock.microseconds() for _ in range(50)]
    assert readings[0] >= 0
    assert readings == sorted(readings)


def test_timer_on_hardware_clock_nonnegative():
    timer = Timer(HardwareTimer())
    assert timer.seconds() >= 0.0