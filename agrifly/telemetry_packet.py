"""Telemetry packets and their compact 16-bit encoding."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Sequence

NUM_DATA_WORDS = 14
NUM_DEBUG_FLOATS = 6

TEL_RANGE_ACC_MAX = 30
TEL_RANGE_ACC_MIN = -TEL_RANGE_ACC_MAX
TEL_RANGE_GYRO_MAX = 35
TEL_RANGE_GYRO_MIN = -TEL_RANGE_GYRO_MAX
TEL_RANGE_FORCE_MAX = 10
TEL_RANGE_FORCE_MIN = 0
TEL_RANGE_BATTVOLTAGE_MAX = 15
TEL_RANGE_BATTVOLTAGE_MIN = 0
TEL_RANGE_POS_MAX = 30
TEL_RANGE_POS_MIN = -TEL_RANGE_POS_MAX
TEL_RANGE_VEL_MAX = 30
TEL_RANGE_VEL_MIN = -TEL_RANGE_VEL_MAX
TEL_RANGE_ATT_MAX = 1
TEL_RANGE_ATT_MIN = -TEL_RANGE_ATT_MAX
TEL_RANGE_GENERIC_MAX = 100
TEL_RANGE_GENERIC_MIN = -TEL_RANGE_GENERIC_MAX

_WIRE_FORMAT = struct.Struct(f"<BB{NUM_DATA_WORDS}H")


class PacketType(IntEnum):
    QUAD_TELEMETRY_PT1 = 0
    QUAD_TELEMETRY_PT2 = 1
    GENERIC_FLOAT = 100


class TelemetryWarnings(IntFlag):
    LOW_BATT = 0x01
    CMD_RATE = 0x02
    UWB_RESET = 0x04
    ONBOARD_FREQ = 0x08
    CMD_BATCH_DROP = 0x10
    RESERVED_6 = 0x20
    RESERVED_CUSTOM_1 = 0x40
    RESERVED_CUSTOM_2 = 0x80


def map_to_ones_range(x: float, a: float, b: float) -> float:
    """Map x from [a, b] to [-1, 1]."""
    return ((x - a) / (b - a)) * 2 - 1


def map_to_ab(x: float, a: float, b: float) -> float:
    """Map x from [-1, 1] to [a, b]."""
    return ((x + 1) / 2) * (b - a) + a


def encode_ones_range(t: float) -> int:
    """Encode t in [-1, 1] as a 16-bit word; anything outside (or NaN) becomes 0."""
    if not -1 <= t <= 1:
        return 0
    return int(32768 + 32767 * t)


def decode_ones_range(t: int) -> float:
    """Inverse of encode_ones_range; 0 decodes to NaN."""
    if t == 0:
        return math.nan
    return (t - 32768) / 32768.0


@dataclass
class DataPacket:
    """The packed form sent over the radio: type, packet number, 14 words."""

    type: int = 0
    packet_number: int = 0
    data: list[int] = field(default_factory=lambda: [0] * NUM_DATA_WORDS)

    def to_bytes(self) -> bytes:
        if len(self.data) != NUM_DATA_WORDS:
            raise ValueError(f"data must hold {NUM_DATA_WORDS} words, got {len(self.data)}")
        return _WIRE_FORMAT.pack(self.type, self.packet_number, *self.data)

    @classmethod
    def from_bytes(cls, raw: bytes) -> DataPacket:
        if len(raw) != _WIRE_FORMAT.size:
            raise ValueError(f"packet must be {_WIRE_FORMAT.size} bytes, got {len(raw)}")
        packet_type, number, *data = _WIRE_FORMAT.unpack(raw)
        return cls(packet_type, number, list(data))


def _nans(n: int) -> list[float]:
    return [math.nan] * n


@dataclass
class TelemetryPacket:
    """Decoded telemetry; type PT1 carries the first group, PT2 the second."""

    type: int = PacketType.QUAD_TELEMETRY_PT1
    packet_number: int = 0
    accel: list[float] = field(default_factory=lambda: _nans(3))
    gyro: list[float] = field(default_factory=lambda: _nans(3))
    motor_forces: list[float] = field(default_factory=lambda: _nans(4))
    position: list[float] = field(default_factory=lambda: _nans(3))
    batt_voltage: float = math.nan
    velocity: list[float] = field(default_factory=lambda: _nans(3))
    attitude: list[float] = field(default_factory=lambda: _nans(3))
    debug_vals: list[float] = field(default_factory=lambda: _nans(NUM_DEBUG_FLOATS))
    panic_reason: int = 0
    warnings: int = 0


def _enc(x: float, lo: float, hi: float) -> int:
    return encode_ones_range(map_to_ones_range(x, lo, hi))


def _dec(word: int, lo: float, hi: float) -> float:
    return map_to_ab(decode_ones_range(word), lo, hi)


def encode_telemetry_packet(packet: TelemetryPacket) -> DataPacket:
    """Pack a TelemetryPacket into its radio form."""
    out = DataPacket(packet.type, packet.packet_number)
    data = out.data
    if packet.type == PacketType.QUAD_TELEMETRY_PT1:
        for i in range(3):
            data[i] = _enc(packet.accel[i], TEL_RANGE_ACC_MIN, TEL_RANGE_ACC_MAX)
            data[i + 3] = _enc(packet.gyro[i], TEL_RANGE_GYRO_MIN, TEL_RANGE_GYRO_MAX)
        for i in range(4):
            data[i + 6] = _enc(
                packet.motor_forces[i], TEL_RANGE_FORCE_MIN, TEL_RANGE_FORCE_MAX
            )
        for i in range(3):
            data[i + 10] = _enc(packet.position[i], TEL_RANGE_POS_MIN, TEL_RANGE_POS_MAX)
        data[13] = _enc(
            packet.batt_voltage, TEL_RANGE_BATTVOLTAGE_MIN, TEL_RANGE_BATTVOLTAGE_MAX
        )
    elif packet.type == PacketType.QUAD_TELEMETRY_PT2:
        for i in range(3):
            data[i] = _enc(packet.velocity[i], TEL_RANGE_VEL_MIN, TEL_RANGE_VEL_MAX)
            data[i + 3] = _enc(packet.attitude[i], TEL_RANGE_ATT_MIN, TEL_RANGE_ATT_MAX)
        for i in range(NUM_DEBUG_FLOATS):
            data[i + 6] = _enc(
                packet.debug_vals[i], TEL_RANGE_GENERIC_MIN, TEL_RANGE_GENERIC_MAX
            )
        data[12] = packet.panic_reason & 0xFF
        data[13] = packet.warnings & 0xFF
    return out


def decode_telemetry_packet(data_packet: DataPacket) -> TelemetryPacket:
    """Unpack a radio packet into a TelemetryPacket."""
    out = TelemetryPacket(type=data_packet.type, packet_number=data_packet.packet_number)
    data = data_packet.data
    if data_packet.type == PacketType.QUAD_TELEMETRY_PT1:
        out.accel = [_dec(data[i], TEL_RANGE_ACC_MIN, TEL_RANGE_ACC_MAX) for i in range(3)]
        out.gyro = [
            _dec(data[i + 3], TEL_RANGE_GYRO_MIN, TEL_RANGE_GYRO_MAX) for i in range(3)
        ]
        out.motor_forces = [
            _dec(data[i + 6], TEL_RANGE_FORCE_MIN, TEL_RANGE_FORCE_MAX) for i in range(4)
        ]
        out.position = [
            _dec(data[i + 10], TEL_RANGE_POS_MIN, TEL_RANGE_POS_MAX) for i in range(3)
        ]
        out.batt_voltage = _dec(
            data[13], TEL_RANGE_BATTVOLTAGE_MIN, TEL_RANGE_BATTVOLTAGE_MAX
        )
    elif data_packet.type == PacketType.QUAD_TELEMETRY_PT2:
        out.velocity = [_dec(data[i], TEL_RANGE_VEL_MIN, TEL_RANGE_VEL_MAX) for i in range(3)]
        out.attitude = [
            _dec(data[i + 3], TEL_RANGE_ATT_MIN, TEL_RANGE_ATT_MAX) for i in range(3)
        ]
        out.debug_vals = [
            _dec(data[i + 6], TEL_RANGE_GENERIC_MIN, TEL_RANGE_GENERIC_MAX)
            for i in range(NUM_DEBUG_FLOATS)
        ]
        out.panic_reason = data[12] & 0xFF
        out.warnings = data[13] & 0xFF
    return out


def encode_float_packet(floats: Sequence[float]) -> DataPacket:
    """Pack up to 14 floats in [-1, 1]; unused words encode zero."""
    values = list(floats[:NUM_DATA_WORDS])
    values += [0.0] * (NUM_DATA_WORDS - len(values))
    return DataPacket(PacketType.GENERIC_FLOAT, 0, [encode_ones_range(v) for v in values])


def decode_float_packet(data_packet: DataPacket, count: int) -> list[float]:
    """Decode the first count floats (at most 14) of a float packet."""
    return [decode_ones_range(w) for w in data_packet.data[:max(0, min(count, NUM_DATA_WORDS))]]