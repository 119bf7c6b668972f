"""Monitors for the message rates and health reported by vehicles and joysticks.

Each monitor counts incoming messages between calls to ``run_and_print``.
Each call then writes one status line with the measured rates, coloured by
whether they lie within the expected bounds.
"""

from __future__ import annotations

import math
import sys
import threading
from enum import Enum
from typing import TextIO

from .telemetry_packet import TelemetryWarnings
from .terminal_colors import Color, reset_terminal_color, set_terminal_color
from .timers import BaseTimer, Timer


class MsgType(Enum):
    MOCAP = "mocap"
    CMD = "cmd"
    JOYSTICK = "joystick"
    TELEMETRY = "telemetry"


_RATE_BOUNDS: dict[MsgType, tuple[float, float]] = {
    MsgType.MOCAP: (195.0, 205.0),
    MsgType.CMD: (45.0, 55.0),
    MsgType.JOYSTICK: (95.0, 105.0),
    MsgType.TELEMETRY: (50.0, 170.0),
}


def rate_bounds(msg_type: MsgType) -> tuple[float, float]:
    """The acceptable (lower, upper) message rate in Hz for a message type."""
    return _RATE_BOUNDS[MsgType(msg_type)]


def is_rate_ok(rate: float, msg_type: MsgType) -> bool:
    """True when the rate lies within the bounds for the message type."""
    lower, upper = rate_bounds(msg_type)
    return lower <= rate <= upper


def _rate(count: int, dt: float) -> float:
    if dt > 0:
        return count / dt
    return math.inf if count else 0.0


def _rounded(rate: float) -> str:
    if math.isfinite(rate):
        return str(int(0.5 + rate))
    return "inf"


def _ok_color(ok: bool) -> Color:
    return Color.GREEN if ok else Color.RED


def _panic_text(reason: int) -> str:
    return f"panic reason {reason}"


def _stream(stream: TextIO | None) -> TextIO:
    return stream if stream is not None else sys.stdout


class VehicleMonitor:
    """Tracks mocap, command and telemetry rates for one vehicle."""

    def __init__(self, vehicle_id: int, timer: BaseTimer) -> None:
        self._id = int(vehicle_id)
        self._since_last_run = Timer(timer)
        self._lock = threading.Lock()
        self._num_mocap = 0
        self._num_telemetry = 0
        self._num_cmd = 0
        self._last_batt_voltage = 0.0
        self._last_panic_reason = 0
        self._last_warnings = 0

    @property
    def vehicle_id(self) -> int:
        return self._id

    def on_mocap(self) -> None:
        """Record one motion-capture message."""
        with self._lock:
            self._num_mocap += 1

    def on_telemetry(
        self, battery_voltage: float, panic_reason: int, warnings: int
    ) -> None:
        """Record one telemetry message; warnings accumulate until the next run."""
        with self._lock:
            self._num_telemetry += 1
            self._last_batt_voltage = float(battery_voltage)
            self._last_panic_reason = int(panic_reason)
            self._last_warnings = (self._last_warnings | int(warnings)) & 0xFF

    def on_command(self) -> None:
        """Record one radio command."""
        with self._lock:
            self._num_cmd += 1

    def run_and_print(self, stream: TextIO | None = None) -> bool:
        """Write this vehicle's status line and start a new counting period.

        Returns False, writing nothing, if no message was seen since the last run.
        """
        out = _stream(stream)
        dt = self._since_last_run.seconds()
        self._since_last_run.reset()

        with self._lock:
            num_mocap = self._num_mocap
            num_tel = self._num_telemetry
            num_cmd = self._num_cmd
            if not (num_mocap or num_tel or num_cmd):
                return False
            batt = self._last_batt_voltage
            panic = self._last_panic_reason
            warnings = self._last_warnings
            self._last_warnings = 0
            self._num_mocap = 0
            self._num_telemetry = 0
            self._num_cmd = 0

        rate_mocap = _rate(num_mocap, dt)
        rate_tel = _rate(num_tel, dt)
        rate_cmd = _rate(num_cmd, dt)

        ok_mocap = is_rate_ok(rate_mocap, MsgType.MOCAP)
        ok_tel = is_rate_ok(rate_tel, MsgType.TELEMETRY)
        ok_cmd = is_rate_ok(rate_cmd, MsgType.CMD)
        all_ok = ok_mocap and ok_tel and ok_cmd

        cells = (
            (all_ok, f"{self._id:>3}"),
            (ok_mocap, f"{_rounded(rate_mocap):>5}"),
            (ok_cmd, f"{_rounded(rate_cmd):>3}"),
            (ok_tel, f"{_rounded(rate_tel):>3}"),
        )
        out.write("|")
        for ok, text in cells:
            set_terminal_color(_ok_color(ok), out)
            out.write(text)
            reset_terminal_color(out)
            out.write("|")

        if not num_tel:
            set_terminal_color(Color.YELLOW, out)
            out.write(" -- ")
            reset_terminal_color(out)
            out.write("|")
        else:
            out.write(f"{batt:4.1f}|")
            if panic:
                set_terminal_color(Color.RED, out)
                out.write(_panic_text(panic))
            set_terminal_color(Color.YELLOW, out)
            for flag in TelemetryWarnings:
                if warnings & flag:
                    out.write(f" WARN_{flag.name}")
            reset_terminal_color(out)

        out.write("\n")
        return True

    @staticmethod
    def print_titles(stream: TextIO | None = None) -> None:
        """Write the table header for the vehicle status lines."""
        out = _stream(stream)
        out.write("  all rates in [Hz], batt in [V]\n")
        out.write("+---+-----+---+---+----+---------------------\n")
        out.write("|ID |Mocap|Cmd|Tel|Batt|Info\n")
        out.write("+---+-----+---+---+----+---------------------\n")


class JoystickMonitor:
    """Tracks the rate of joystick messages."""

    def __init__(self, timer: BaseTimer) -> None:
        self._since_last_run = Timer(timer)
        self._lock = threading.Lock()
        self._num_js = 0

    def on_joystick(self) -> None:
        """Record one joystick message."""
        with self._lock:
            self._num_js += 1

    def run_and_print(self, stream: TextIO | None = None) -> None:
        """Write the joystick status line and start a new counting period."""
        out = _stream(stream)
        dt = self._since_last_run.seconds()
        self._since_last_run.reset()

        with self._lock:
            num_js = self._num_js
            self._num_js = 0

        if not num_js:
            set_terminal_color(Color.RED, out)
            out.write("  No joystick!\n")
            reset_terminal_color(out)
            return

        rate = _rate(num_js, dt)
        out.write("  JS @")
        set_terminal_color(_ok_color(is_rate_ok(rate, MsgType.JOYSTICK)), out)
        out.write(f"{_rounded(rate):>3}")
        reset_terminal_color(out)
        out.write("Hz\n")