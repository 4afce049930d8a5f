"""Command frame encoding and sensor advertisement decoding.

Every command frame is six bytes: five payload bytes followed by the XOR of
those five bytes. The light accepts frames only over a write-without-response
characteristic and never answers, so nothing here decodes incoming frames.
"""

from __future__ import annotations

from functools import reduce
from operator import xor

PACKET_LENGTH = 6
SENSOR_PAYLOAD_MIN_LENGTH = 10
LEVEL_MAX = 100

OP_MODE_SWITCH = 0x01
OP_CHANNEL_HEADER = 0x02
OP_WORD_VALUE = 0x03
OP_LEVEL_VALUE = 0x05

MODE_COLOR_TEMPERATURE = 0x00
MODE_HUE_SATURATION = 0x01
CHANNEL_A = 0x01


def build_packet(b0: int, b1: int, b2: int, b3: int, b4: int) -> bytes:
    payload = bytes((b0, b1, b2, b3, b4))
    return payload + bytes((reduce(xor, payload),))


def verify_packet(packet: bytes) -> bool:
    if len(packet) != PACKET_LENGTH:
        return False
    return reduce(xor, packet[:5]) == packet[5]


def mode_switch_color_temperature() -> bytes:
    return build_packet(OP_MODE_SWITCH, MODE_COLOR_TEMPERATURE, 0x00, 0x00, 0x00)


def mode_switch_hue_saturation() -> bytes:
    return build_packet(OP_MODE_SWITCH, MODE_HUE_SATURATION, 0x00, 0x00, 0x00)


def channel_a_header() -> bytes:
    return build_packet(OP_CHANNEL_HEADER, CHANNEL_A, 0x00, 0x00, 0x00)


def word_value(value: int) -> bytes:
    """Encode a 16-bit value little-endian across bytes 1-2."""
    return build_packet(OP_WORD_VALUE, value & 0xFF, (value >> 8) & 0xFF, 0x00, 0x00)


def level_value(value: int) -> bytes:
    """Encode a level (brightness) command, clamped to 0-100."""
    return build_packet(OP_LEVEL_VALUE, max(0, min(value, LEVEL_MAX)), 0x00, 0x00, 0x00)


def decode_sensor_payload(data: bytes) -> tuple[float, int, int] | None:
    """Decode temperature, humidity and battery from a service-data payload.

    Bytes 6-7 hold a big-endian signed temperature in tenths of a degree,
    byte 8 the humidity and byte 9 the battery percentage. Anything shorter
    than ten bytes is not decodable and yields ``None``.
    """
    if len(data) < SENSOR_PAYLOAD_MIN_LENGTH:
        return None
    raw_temperature = int.from_bytes(data[6:8], "big", signed=True)
    return raw_temperature / 10, data[8], data[9]
