"""Decoding of Gorilla-style XOR-compressed float blocks."""

import struct
from typing import Union

from tsmkit.float_bits import BitReader, FloatCodecError

SENTINEL = 0x7FF8_0000_0000_00FF
"""Bit pattern, in the quiet NaN range, that terminates a float block."""

SENTINEL_INFLUXDB = 0x7FF8_0000_0000_0001
"""Legacy terminating bit pattern used by InfluxDB's encoder."""

_U64 = struct.Struct(">Q")
_F64 = struct.Struct(">d")

_BytesLike = Union[bytes, bytearray, memoryview]


def _to_float(bits: int) -> float:
    return _F64.unpack(_U64.pack(bits))[0]


def decode_with_sentinel(data: _BytesLike, sentinel: int) -> list[float]:
    """Decode a float block that ends with the value whose bits are ``sentinel``.

    Blocks shorter than a header byte plus one value decode to an empty list.
    """
    data = bytes(data)
    if len(data) < 9:
        return []

    # The first byte names the encoding, which is always the XOR scheme.
    value = _U64.unpack_from(data, 1)[0]
    out = [_to_float(value)]
    reader = BitReader(data[9:])

    trailing = 0
    meaningful = 64
    while True:
        if not reader.read_bit():
            # Same value as the previous one.
            out.append(_to_float(value))
            continue

        if reader.read_bit():
            # A new window: 5 bits of leading zeros, 6 bits of meaningful bits.
            leading = reader.read_bits(5)
            meaningful = reader.read_bits(6)
            if meaningful == 0:
                # Zero stands for all 64 bits being meaningful.
                meaningful = 64
                trailing = 0
            else:
                trailing = 64 - leading - meaningful
                if trailing < 0:
                    raise FloatCodecError(
                        f"invalid window: {leading} leading and {meaningful} meaningful bits"
                    )

        value ^= reader.read_bits(meaningful) << trailing
        if value == sentinel:
            break
        out.append(_to_float(value))
    return out


def decode(data: _BytesLike) -> list[float]:
    """Decode a float block terminated by :data:`SENTINEL`."""
    return decode_with_sentinel(data, SENTINEL)


def decode_influxdb(data: _BytesLike) -> list[float]:
    """Decode a float block written by InfluxDB's encoder."""
    return decode_with_sentinel(data, SENTINEL_INFLUXDB)