"""
Canonical byte encoding of public protocol values.

    point  → x-coordinate (32 B, big-endian) ‖ y-parity (1 B, 0 or 1)
    scalar → 32 B big-endian

Composite types concatenate their fields in the order documented on
their ``to_bytes`` method.  The encoding exists to measure how many
bytes each role sends; transcripts hash points through
:class:`~sigswap.hash.Transcript`, never through this module.
"""

from __future__ import annotations

from typing import Iterable, Union

from .curve import Scalar, Point, SCALAR_BYTES

POINT_BYTES = SCALAR_BYTES + 1


def encode_point(p: Point) -> bytes:
    return p.x_bytes() + (b"\x01" if p.y_is_odd else b"\x00")


def decode_point(data: bytes) -> Point:
    if len(data) != POINT_BYTES:
        raise ValueError(f"need {POINT_BYTES} bytes, got {len(data)}")
    if data[SCALAR_BYTES] not in (0, 1):
        raise ValueError("parity byte must be 0 or 1")
    if data == b"\x00" * POINT_BYTES:
        return Point.identity()
    prefix = b"\x03" if data[SCALAR_BYTES] else b"\x02"
    return Point.from_bytes(prefix + data[:SCALAR_BYTES])


def encode_scalar(s: Scalar) -> bytes:
    return s.to_bytes()


def decode_scalar(data: bytes) -> Scalar:
    return Scalar.from_bytes(data)


def encode_all(items: Iterable[Union[Point, Scalar, bytes]]) -> bytes:
    """Concatenate the canonical encodings of *items* (bytes are raw)."""
    out = bytearray()
    for item in items:
        if isinstance(item, Point):
            out += encode_point(item)
        elif isinstance(item, Scalar):
            out += encode_scalar(item)
        elif isinstance(item, (bytes, bytearray)):
            out += item
        else:
            raise TypeError(f"cannot encode {type(item).__name__}")
    return bytes(out)
