import io

import pytest

from agrifly.telemetry_packet import TelemetryWarnings
from agrifly.terminal_colors import Color
from agrifly.timers import ManualTimer
from agrifly.vehicle_monitor import (
    JoystickMonitor,
    MsgType,
    VehicleMonitor,
    is_rate_ok,
    rate_bounds,
)

G = Color.GREEN.value
R = Color.RED.value
Y = Color.YELLOW.value
RST = Color.RESET.value


def _feed(monitor, mocap=0, cmd=0, tel=0, batt=12.0, panic=0, warnings=0):
    for _ in range(mocap):
        monitor.on_mocap()
    for _ in range(cmd):
        monitor.on_command()
    for _ in range(tel):
        monitor.on_telemetry(batt, panic, warnings)


def test_rate_bounds_from_source():
    assert rate_bounds(MsgType.MOCAP) == (195, 205)
    assert rate_bounds(MsgType.CMD) == (45, 55)
    assert rate_bounds(MsgType.JOYSTICK) == (95, 105)
    assert rate_bounds(MsgType.TELEMETRY) == (50, 170)


@pytest.mark.parametrize("msg_type", list(MsgType))
def test_is_rate_ok_bounds_inclusive(msg_type):
    lower, upper = rate_bounds(msg_type)
    assert is_rate_ok(lower, msg_type)
    assert is_rate_ok(upper, msg_type)
    assert is_rate_ok((lower + upper) / 2, msg_type)
    assert not is_rate_ok(lower - 0.1, msg_type)
    assert not is_rate_ok(upper + 0.1, msg_type)


def test_vehicle_not_seen_writes_nothing():
    clock = ManualTimer()
    monitor = VehicleMonitor(3, clock)
    clock.advance_microseconds(1_000_000)
    out = io.StringIO()
    assert monitor.run_and_print(out) is False
    assert out.getvalue() == ""


def test_all_rates_ok_line():
    clock = ManualTimer()
    monitor = VehicleMonitor(7, clock)
    clock.advance_microseconds(1_000_000)
    _feed(monitor, mocap=200, cmd=50, tel=100, batt=12.0)
    out = io.StringIO()
    assert monitor.run_and_print(out) is True
    expected = (
        "|" + G + "  7" + RST + "|" + G + "  200" + RST + "|"
        + G + " 50" + RST + "|" + G + "100" + RST + "|"
        + "12.0|" + Y + RST + "\n"
    )
    assert out.getvalue() == expected


def test_bad_rate_marks_vehicle_red():
    clock = ManualTimer()
    monitor = VehicleMonitor(4, clock)
    clock.advance_microseconds(1_000_000)
    _feed(monitor, mocap=10, cmd=50, tel=100)
    out = io.StringIO()
    monitor.run_and_print(out)
    text = out.getvalue()
    assert text.startswith("|" + R + "  4" + RST + "|" + R + "   10" + RST)
    assert G + " 50" + RST in text


def test_no_telemetry_shows_placeholder():
    clock = ManualTimer()
    monitor = VehicleMonitor(2, clock)
    clock.advance_microseconds(1_000_000)
    _feed(monitor, mocap=200)
    out = io.StringIO()
    monitor.run_and_print(out)
    assert out.getvalue().endswith("|" + Y + " -- " + RST + "|\n")


def test_warnings_accumulate_and_reset():
    clock = ManualTimer()
    monitor = VehicleMonitor(5, clock)
    clock.advance_microseconds(1_000_000)
    monitor.on_telemetry(11.0, 0, TelemetryWarnings.LOW_BATT)
    monitor.on_telemetry(11.0, 0, TelemetryWarnings.UWB_RESET)
    out = io.StringIO()
    monitor.run_and_print(out)
    assert " WARN_LOW_BATT WARN_UWB_RESET" in out.getvalue()

    clock.advance_microseconds(1_000_000)
    monitor.on_telemetry(11.0, 0, 0)
    out2 = io.StringIO()
    monitor.run_and_print(out2)
    assert "WARN_" not in out2.getvalue()


def test_panic_reason_shown_in_red():
    clock = ManualTimer()
    monitor = VehicleMonitor(6, clock)
    clock.advance_microseconds(1_000_000)
    monitor.on_telemetry(10.0, 3, 0)
    out = io.StringIO()
    monitor.run_and_print(out)
    text = out.getvalue()
    assert "10.0|" + R in text
    assert "3" in text.split("10.0|" + R, 1)[1]


def test_counters_reset_after_run():
    clock = ManualTimer()
    monitor = VehicleMonitor(1, clock)
    clock.advance_microseconds(1_000_000)
    _feed(monitor, mocap=200, cmd=50, tel=100)
    assert monitor.run_and_print(io.StringIO()) is True
    clock.advance_microseconds(1_000_000)
    out = io.StringIO()
    assert monitor.run_and_print(out) is False
    assert out.getvalue() == ""


def test_print_titles():
    out = io.StringIO()
    VehicleMonitor.print_titles(out)
    lines = out.getvalue().splitlines()
    assert lines[0] == "  all rates in [Hz], batt in [V]"
    assert lines[2] == "|ID |Mocap|Cmd|Tel|Batt|Info"
    assert lines[1] == lines[3]


def test_joystick_missing():
    clock = ManualTimer()
    monitor = JoystickMonitor(clock)
    clock.advance_microseconds(1_000_000)
    out = io.StringIO()
    monitor.run_and_print(out)
    assert out.getvalue() == R + "  No joystick!\n" + RST


def test_joystick_rate_ok_then_reset():
    clock = ManualTimer()
    monitor = JoystickMonitor(clock)
    clock.advance_microseconds(1_000_000)
    for _ in range(100):
        monitor.on_joystick()
    out = io.StringIO()
    monitor.run_and_print(out)
    assert out.getvalue() == "  JS @" + G + "100" + RST + "Hz\n"

    clock.advance_microseconds(1_000_000)
    out2 = io.StringIO()
    monitor.run_and_print(out2)
    assert "No joystick!" in out2.getvalue()


def test_joystick_rate_low_is_red():
    clock = ManualTimer()
    monitor = JoystickMonitor(clock)
    clock.advance_microseconds(2_000_000)
    for _ in range(20):
        monitor.on_joystick()
    out = io.StringIO()
    monitor.run_and_print(out)
    assert out.getvalue() == "  JS @" + R + " 10" + RST + "Hz\n"