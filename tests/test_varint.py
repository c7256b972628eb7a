import pytest

from tsmkit.varint import (
    MAX_VAR_INT_64,
    VarintError,
    decode_varint,
    encode_varint,
)


def test_encode_small_values_are_single_byte():
    assert encode_varint(0) == b"\x00"
    assert encode_varint(127) == bytes([127])


def test_encode_multi_byte_value():
    assert encode_varint(300) == b"\xac\x02"


def test_max_u64_uses_max_length():
    encoded = encode_varint(2**64 - 1)
    assert len(encoded) == MAX_VAR_INT_64
    assert decode_varint(encoded) == (2**64 - 1, MAX_VAR_INT_64)


@pytest.mark.parametrize("value", [0, 1, 127, 128, 255, 16384, 2**32, 2**60 - 1, 2**63])
def test_round_trip(value):
    encoded = encode_varint(value)
    assert decode_varint(encoded, 0) == (value, len(encoded))


def test_decode_at_offset_returns_next_position():
    data = b"\xff\xff" + encode_varint(300) + encode_varint(5)
    value, pos = decode_varint(data, 2)
    assert value == 300
    second, end = decode_varint(data, pos)
    assert second == 5
    assert end == len(data)


def test_decode_truncated_raises():
    with pytest.raises(VarintError):
        decode_varint(b"\x80\x80")


def test_decode_empty_raises():
    with pytest.raises(VarintError):
        decode_varint(b"")


def test_decode_too_long_raises():
    with pytest.raises(VarintError):
        decode_varint(b"\x80" * 11 + b"\x01")


def test_decode_overflow_raises():
    with pytest.raises(VarintError):
        decode_varint(b"\xff" * 9 + b"\x7f")


@pytest.mark.parametrize("value", [-1, 2**64])
def test_encode_out_of_range_raises(value):
    with pytest.raises(VarintError):
        encode_varint(value)