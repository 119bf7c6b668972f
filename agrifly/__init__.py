"""Vector, rotation and trajectory maths, filters, radio and telemetry packets, clocks, performance counters and message-rate monitors for quadcopter software."""

__version__ = "0.1.0"