"""Fixed-size radio command packets and their float encoding.

A packet is laid out as: message type, a reserved byte, a flags byte, then
ten floats, each scaled into two big-endian bytes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Sequence

from .vec3 import Vec3

IDX_TYPE = 0
IDX_RESERVED = IDX_TYPE + 1
IDX_FLAGS = IDX_RESERVED + 1
IDX_FLOATS = IDX_FLAGS + 1
RADIO_FLOAT_ENCODED_SIZE = 2
RADIO_FLOAT_ENCODED_MAX = 1 << (RADIO_FLOAT_ENCODED_SIZE * 8)
RADIO_FLOAT_ENCODED_HALF = RADIO_FLOAT_ENCODED_MAX // 2
NUM_RADIO_FLOAT_FIELDS = 10
RAW_PACKET_SIZE = IDX_FLOATS + RADIO_FLOAT_ENCODED_SIZE * NUM_RADIO_FLOAT_FIELDS

MAX_VAL_CMD_THRUST = 35
MAX_VAL_CMD_ANG_RATES = 35
MAX_VAL_CMD_POS = 20
MAX_VAL_CMD_VEL = 10
MAX_VAL_CMD_ACCELERATION = 30
MAX_VAL_DEFAULT = 1

I_POS = 0
I_VEL = 3
I_ACC = 6


class MessageType(IntEnum):
    INVALID = 0
    RESERVED_FUTURE = 1
    EMERGENCY_KILL = 2
    POSITION_COMMAND = 3
    EXTERNAL_ACCELERATION_CMD = 4
    EXTERNAL_RATES_CMD = 5
    IDLE_COMMAND = 6


class ReservedFlags(IntFlag):
    CALIBRATE_MOTORS = 0x01
    DISABLE_ONBOARD_STATE_SAFETY_CHECKS = 0x02
    FLAG_NO3 = 0x04
    FLAG_NO4 = 0x08
    FLAG_NO5 = 0x10
    FLAG_NO6 = 0x20
    FLAG_NO7 = 0x40
    FLAG_NO8 = 0x80


def encode_value(value: float, limit: float) -> bytes:
    """Scale value from (-limit, limit) into two big-endian bytes.

    Values beyond the limit saturate; NaN encodes as zero.
    """
    if -limit < value < limit:
        out = int(value * RADIO_FLOAT_ENCODED_HALF / limit + 0.5) + RADIO_FLOAT_ENCODED_HALF
    elif value > -limit:
        out = RADIO_FLOAT_ENCODED_MAX - 1
    else:
        out = 0
    return bytes(
        (out >> ((RADIO_FLOAT_ENCODED_SIZE - i - 1) * 8)) % 256
        for i in range(RADIO_FLOAT_ENCODED_SIZE)
    )


def decode_value(data: Sequence[int], limit: float) -> float:
    """Inverse of encode_value for two bytes."""
    if len(data) != RADIO_FLOAT_ENCODED_SIZE:
        raise ValueError(
            f"expected {RADIO_FLOAT_ENCODED_SIZE} bytes, got {len(data)}"
        )
    out = int.from_bytes(bytes(data), "big")
    return limit * (out - RADIO_FLOAT_ENCODED_HALF) / float(RADIO_FLOAT_ENCODED_HALF)


def _header(message_type: MessageType, flags: int) -> bytearray:
    raw = bytearray(RAW_PACKET_SIZE)
    raw[IDX_TYPE] = message_type
    raw[IDX_RESERVED] = 0
    raw[IDX_FLAGS] = int(flags)
    return raw


def _put(raw: bytearray, field_index: int, value: float, limit: float) -> None:
    start = IDX_FLOATS + field_index * RADIO_FLOAT_ENCODED_SIZE
    raw[start:start + RADIO_FLOAT_ENCODED_SIZE] = encode_value(value, limit)


def _get(raw: bytes, field_index: int, limit: float) -> float:
    start = IDX_FLOATS + field_index * RADIO_FLOAT_ENCODED_SIZE
    return decode_value(raw[start:start + RADIO_FLOAT_ENCODED_SIZE], limit)


def create_kill_command(flags: int) -> bytes:
    """A packet ordering an emergency motor kill."""
    return bytes(_header(MessageType.EMERGENCY_KILL, flags))


def create_idle_command(flags: int) -> bytes:
    """A packet ordering the vehicle to idle."""
    return bytes(_header(MessageType.IDLE_COMMAND, flags))


def create_position_command(
    flags: int, position: Vec3, velocity: Vec3, acceleration: Vec3
) -> bytes:
    """A packet carrying desired position, velocity and acceleration."""
    raw = _header(MessageType.POSITION_COMMAND, flags)
    for i in range(3):
        _put(raw, I_POS + i, position[i], MAX_VAL_CMD_POS)
        _put(raw, I_VEL + i, velocity[i], MAX_VAL_CMD_VEL)
        _put(raw, I_ACC + i, acceleration[i], MAX_VAL_CMD_ACCELERATION)
    return bytes(raw)


def create_rates_command(
    flags: int, total_thrust: float, angular_velocity: Vec3
) -> bytes:
    """A packet carrying total thrust and desired body rates."""
    raw = _header(MessageType.EXTERNAL_RATES_CMD, flags)
    _put(raw, 0, total_thrust, MAX_VAL_CMD_THRUST)
    for i in range(3):
        _put(raw, i + 1, angular_velocity[i], MAX_VAL_CMD_ANG_RATES)
    return bytes(raw)


def create_acceleration_command(
    flags: int, acceleration: Vec3, yaw_rate: float
) -> bytes:
    """A packet carrying a desired acceleration and yaw rate."""
    raw = _header(MessageType.EXTERNAL_ACCELERATION_CMD, flags)
    _put(raw, 0, acceleration.x, MAX_VAL_CMD_ACCELERATION)
    _put(raw, 1, acceleration.y, MAX_VAL_CMD_ACCELERATION)
    _put(raw, 2, acceleration.z, MAX_VAL_CMD_ACCELERATION)
    _put(raw, 3, yaw_rate, MAX_VAL_CMD_ANG_RATES)
    return bytes(raw)


@dataclass
class RadioMessageDecoded:
    """A radio packet decoded into its type, flags and float fields.

    Fields that the message type does not carry are NaN.
    """

    type: int = MessageType.INVALID
    flags: int = 0
    floats: list[float] = field(
        default_factory=lambda: [math.nan] * NUM_RADIO_FLOAT_FIELDS
    )

    @classmethod
    def from_raw(cls, raw: Sequence[int]) -> RadioMessageDecoded:
        data = bytes(raw)
        if len(data) != RAW_PACKET_SIZE:
            raise ValueError(
                f"radio packet must be {RAW_PACKET_SIZE} bytes, got {len(data)}"
            )
        msg_type = data[IDX_TYPE]
        floats = [math.nan] * NUM_RADIO_FLOAT_FIELDS
        if msg_type == MessageType.POSITION_COMMAND:
            for i in range(I_POS, I_POS + 3):
                floats[i] = _get(data, i, MAX_VAL_CMD_POS)
            for i in range(I_VEL, I_VEL + 3):
                floats[i] = _get(data, i, MAX_VAL_CMD_VEL)
            for i in range(I_ACC, I_ACC + 3):
                floats[i] = _get(data, i, MAX_VAL_CMD_ACCELERATION)
        elif msg_type == MessageType.EXTERNAL_RATES_CMD:
            floats[0] = _get(data, 0, MAX_VAL_CMD_THRUST)
            for i in range(1, NUM_RADIO_FLOAT_FIELDS):
                floats[i] = _get(data, i, MAX_VAL_CMD_ANG_RATES)
        elif msg_type == MessageType.EXTERNAL_ACCELERATION_CMD:
            for i in range(3):
                floats[i] = _get(data, i, MAX_VAL_CMD_ACCELERATION)
            floats[3] = _get(data, 3, MAX_VAL_CMD_ANG_RATES)
        else:
            floats = [_get(data, i, MAX_VAL_DEFAULT) for i in range(NUM_RADIO_FLOAT_FIELDS)]
        return cls(type=msg_type, flags=data[IDX_FLAGS], floats=floats)