"""Encoding of float blocks with Gorilla-style XOR compression."""

import struct
from itertools import chain
from typing import Iterable

from tsmkit.float_bits import BitWriter, FloatCodecError
from tsmkit.float_decoder import SENTINEL

_F64 = struct.Struct(">d")
_U64 = struct.Struct(">Q")
_HEADER = 1 << 4


def _to_bits(value: float) -> int:
    return _U64.unpack(_F64.pack(value))[0]


def _trailing_zeros(value: int) -> int:
    return (value & -value).bit_length() - 1


def encode(values: Iterable[float]) -> bytes:
    """Encode floats by XOR-ing each value with the one before it.

    The first value is stored whole; each later value stores only the bits
    that differ from its predecessor, and the block ends with
    :data:`~tsmkit.float_decoder.SENTINEL`. A value whose bits equal the
    sentinel cannot be stored after the first position.
    """
    bits = [_to_bits(float(v)) for v in values]
    if not bits:
        return b""
    if any(b == SENTINEL for b in bits[1:]):
        raise FloatCodecError("unsupported value")

    writer = BitWriter()
    writer.write_bits(_HEADER, 8)
    writer.write_bits(bits[0], 64)

    prev = bits[0]
    prev_leading = None
    prev_trailing = 0
    for cur in chain(bits[1:], [SENTINEL]):
        delta = cur ^ prev
        prev = cur
        if not delta:
            writer.write_bit(0)
            continue
        writer.write_bit(1)

        # Only five bits are available to store the leading zero count.
        leading = (64 - delta.bit_length()) & 0x1F
        trailing = _trailing_zeros(delta)

        if (
            prev_leading is not None
            and leading >= prev_leading
            and trailing >= prev_trailing
        ):
            # The value fits in the previous window.
            writer.write_bit(0)
            width = 64 - prev_leading - prev_trailing
            writer.write_bits(delta >> prev_trailing, width)
        else:
            prev_leading, prev_trailing = leading, trailing
            writer.write_bit(1)
            writer.write_bits(leading, 5)
            significant = 64 - leading - trailing
            # 64 significant bits is stored as 0; the decoder maps it back.
            writer.write_bits(significant & 0x3F, 6)
            writer.write_bits(delta >> trailing, significant)

    return writer.to_bytes()