"""Codecs for time-series storage value blocks, with varint, Snappy and bit-stream helpers."""

__version__ = "0.1.0"
__all__ = [
    "boolean",
    "float_bits",
    "float_decoder",
    "float_encoder",
    "integer",
    "simple8b",
    "snappy",
    "string",
    "timestamp",
    "unsigned",
    "varint",
]