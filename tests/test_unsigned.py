import pytest

from tsmkit import simple8b, unsigned
from tsmkit.integer import DecodeError, Encoding


def test_encode_no_values():
    assert unsigned.encode([]) == b""


def test_decode_no_values():
    assert unsigned.decode(b"") == []


def test_encode_uncompressed():
    src = [1000, 0, simple8b.MAX_VALUE, 213123421]
    dst = unsigned.encode(src)
    assert dst[0] >> 4 == Encoding.UNCOMPRESSED
    assert unsigned.decode(dst) == src


@pytest.mark.parametrize(
    "name, values",
    [
        ("no delta", [123] * 8),
        ("delta increasing", list(range(1, 13))),
        ("delta decreasing", [350, 200, 50]),
    ],
)
def test_encode_rle(name, values):
    dst = unsigned.encode(values)
    assert dst[0] >> 4 == Encoding.RLE, name
    assert unsigned.decode(dst) == values, name


def test_encode_rle_byte_for_byte():
    src = [1232342341234] * 1000
    dst = unsigned.encode(src)
    assert dst == bytes([32, 0, 0, 2, 61, 218, 167, 172, 228, 0, 231, 7])
    assert dst[0] >> 4 == Encoding.RLE
    assert unsigned.decode(dst) == src


def test_encode_simple8b():
    src = [1, 11, 3124, 123543256, 98765432100]
    dst = unsigned.encode(src)
    assert dst[0] >> 4 == Encoding.SIMPLE8B
    assert unsigned.decode(dst) == src


def test_rle_regression():
    values = [809201799168] * 509
    enc = unsigned.encode(values)
    assert enc == bytes([32, 0, 0, 1, 120, 208, 95, 32, 0, 0, 252, 3])
    dec = unsigned.decode(enc)
    assert len(dec) == len(values)
    assert dec == values


def test_values_above_signed_range_round_trip():
    values = [(1 << 64) - 1, 1 << 63, 0, 5]
    assert unsigned.decode(unsigned.encode(values)) == values


def test_encode_rejects_negative():
    with pytest.raises(ValueError):
        unsigned.encode([-1])


def test_encode_rejects_too_large():
    with pytest.raises(ValueError):
        unsigned.encode([1 << 64])


def test_decode_invalid_encoding():
    with pytest.raises(DecodeError):
        unsigned.decode(bytes([0xF0, 0]))