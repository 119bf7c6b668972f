# agrifly

Building blocks for quadcopter flight and simulation software: vector and
rotation maths, polynomial trajectories, root finding, low-pass filters, radio
and telemetry packet encoding, clocks, performance counters and message-rate
monitors.

## Modules

- `agrifly.vec3`: `Vec3`, a 3D vector with `dot`, `cross`, `norm2`,
  `norm2_squared`, `unit_vector`, arithmetic with vectors and scalars,
  indexing and iteration. Components default to NaN.
- `agrifly.matrix`: numpy-based helpers `zero_matrix`, `identity_matrix`,
  `matrix_inverse`, `matrix_determinant`, `matrix_all_finite` and
  `matrix_times_vec`. The last multiplies a 3x3 matrix by a `Vec3`.
- `agrifly.rotation`: `Rotation` stores an attitude as a unit quaternion.
  It builds one with `identity`, `from_rotation_vector`, `from_axis_angle`,
  `from_euler_ypr` (3-2-1 yaw, pitch, roll) and
  `from_vector_part_of_quaternion`.
  It converts to other forms with `angle`, `to_rotation_vector`,
  `to_vector_part_of_quaternion`, `to_euler_ypr`, `rotation_matrix` and
  `format_rotation_matrix`.
  `inverse` and `normalise` are also available.
  `r2 * r1` composes two rotations, and `r * v` rotates a vector.
- `agrifly.trajectory`: `Trajectory`, a quintic 3D polynomial that is defined
  between a start time and an end time.
  - `value` and `axis_value` evaluate it, and both raise `ValueError` outside
    that window.
  - `derivative_coeffs` gives the coefficients of its time derivative.
  - Subtracting one trajectory from another gives the relative trajectory over
    the window where both are defined.
- `agrifly.root_finder`: closed-form solvers.
  - `solve_cubic(a, b, c)` solves x³ + ax² + bx + c. It returns real roots, or
    one real root and a complex-conjugate pair.
  - `solve_quartic(a, b, c, d)` returns the real roots of x⁴ + ax³ + bx² + cx + d.
- `agrifly.filters`: `LowPassFilterFirstOrder` and `LowPassFilterSecondOrder`.
  - `initialise(sampling_period, cutoff_frequency, init_value)` sets them up.
    The cut-off frequency is in rad/s.
  - `apply(value)` filters one sample, and the `value` property holds the
    latest output.
  - A filter that has not been initialised passes its input through.
- `agrifly.radio_types`: fixed-size radio command packets.
  - `create_kill_command`, `create_idle_command`, `create_position_command`,
    `create_rates_command` and `create_acceleration_command` build packets.
  - `RadioMessageDecoded.from_raw` decodes a packet.
  - `encode_value` and `decode_value` handle the two-byte float scaling.
  - `MessageType` and `ReservedFlags` name the packet types and flag bits.
- `agrifly.telemetry_packet`: `TelemetryPacket` holds the two-part
  telemetry.
  - `encode_telemetry_packet` and `decode_telemetry_packet` convert it to and
    from `DataPacket`.
  - `DataPacket.to_bytes` and `DataPacket.from_bytes` give the 30-byte
    little-endian wire form.
  - Generic float packets use `encode_float_packet` and `decode_float_packet`.
  - `PacketType` and `TelemetryWarnings` name the packet types and warning bits.
- `agrifly.timers`: clocks.
  - `BaseTimer` is the abstract microsecond clock.
  - `HardwareTimer` is a monotonic clock that counts from its creation.
  - `ManualTimer` is a clock that you advance yourself.
  - `Timer` is a stopwatch over a master clock, with `reset`, `seconds`,
    `microseconds` and `adjust_time_by_seconds`.
- `agrifly.perf_counter`: `PerfCounter` has three kinds, set by
  `CounterType`.
  - `COUNT` counts events, and `INTERVAL` measures the time between
    successive events.
  - `ELAPSED` measures elapsed time: use `begin`/`end`, use the counter as a
    context manager, or call `set_elapsed`.
  - `format` returns a one-line summary.
  - `PerfRegistry` keeps counters, newest first. It provides `alloc` and
    `alloc_once`, `free`, `reset_all`, `print_all` and `print_all_ordered`.
    `alloc_once` raises `ValueError` when the name is already taken by
    another kind.
- `agrifly.vehicle_monitor`: `VehicleMonitor` and `JoystickMonitor` count
  messages that you report to them (`on_mocap`, `on_telemetry`, `on_command`,
  `on_joystick`).
  - `run_and_print` writes one coloured status line with the rate of each
    message kind since the previous run.
  - `VehicleMonitor.print_titles` writes the table header.
  - `rate_bounds` and `is_rate_ok` give the expected rate ranges for each
    `MsgType`.
  - A non-zero panic reason is printed as `panic reason <n>`.
- `agrifly.terminal_colors`: `Color`, `color_code`, `set_terminal_color` and
  `reset_terminal_color` provide ANSI colour escapes.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Rotate a vector:

```python
import math
from agrifly.rotation import Rotation
from agrifly.vec3 import Vec3

rot = Rotation.from_euler_ypr(math.pi / 2, 0.0, 0.0)
print(rot * Vec3(1.0, 0.0, 0.0))   # approximately (0, 1, 0)
```

Build and decode a radio command:

```python
from agrifly.radio_types import RadioMessageDecoded, create_rates_command
from agrifly.vec3 import Vec3

raw = create_rates_command(0, 9.81, Vec3(0.0, 0.0, 1.0))
msg = RadioMessageDecoded.from_raw(raw)
print(msg.type, msg.floats[:4])
```

Filter a signal:

```python
from agrifly.filters import LowPassFilterFirstOrder

lpf = LowPassFilterFirstOrder()
lpf.initialise(0.002, 10.0, 0.0)
for sample in (1.0, 1.0, 1.0):
    print(lpf.apply(sample))
```

Drive timing from a simulation clock:

```python
from agrifly.timers import ManualTimer, Timer

clock = ManualTimer()
timer = Timer(clock)
clock.advance_microseconds(2000)
print(timer.microseconds())   # 2000
```

Measure code sections:

```python
import sys
from agrifly.perf_counter import CounterType, PerfRegistry

registry = PerfRegistry()
loop = registry.alloc(CounterType.ELAPSED, "main_loop")
with loop:
    sum(range(1000))
registry.print_all(sys.stdout)
```

Monitor message rates:

```python
import sys
from agrifly.timers import ManualTimer
from agrifly.vehicle_monitor import VehicleMonitor

clock = ManualTimer()
monitor = VehicleMonitor(7, clock)
for _ in range(200):
    monitor.on_mocap()
clock.advance_microseconds(1_000_000)
VehicleMonitor.print_titles(sys.stdout)
monitor.run_and_print(sys.stdout)
```

## What it does not do

- The package has no vehicle dynamics simulator.
- It has no messaging or network layer, and no command-line program.
- The monitors do not subscribe to any message source. Your code calls their
  `on_*` methods and `run_and_print` at the rate it chooses.
- Panic reasons are shown only as numbers.