"""Encoding of the D-Star radio header for transmission.

The 41-byte header is convolutionally encoded at rate 1/2, interleaved and
scrambled into the 83 bytes that follow the two leading frame-sync bytes on
air. Output bytes are sent least significant bit first. The first four bits
of the result are zero: they carry the tail of the frame sync pattern.
"""

from __future__ import annotations

from collections.abc import Sequence

from .dstar_decode import INTERLEAVE_TABLE_RX
from .dstar_defines import (
    DSTAR_FEC_SECTION_LENGTH_BITS,
    DSTAR_FEC_SECTION_LENGTH_BYTES,
    DSTAR_HEADER_LENGTH_BYTES,
)

SCRAMBLE_TABLE_TX = bytes((
    0x00, 0xF7, 0x34, 0x09, 0x44, 0x46, 0xD7, 0x06, 0xB3, 0x72,
    0xDE, 0x42, 0xF5, 0xA5, 0xD8, 0xF1, 0x87, 0x7B, 0x9A, 0x04,
    0x22, 0xA3, 0x6B, 0x83, 0x59, 0x39, 0x6F, 0xA1, 0xFA, 0x52,
    0xEC, 0xF8, 0xC3, 0x3D, 0x4D, 0x02, 0x91, 0xD1, 0xB5, 0xC1,
    0xAC, 0x9C, 0xB7, 0x50, 0x7D, 0x29, 0x76, 0xFC, 0xE1, 0x9E,
    0x26, 0x81, 0xC8, 0xE8, 0xDA, 0x60, 0x56, 0xCE, 0x5B, 0xA8,
    0xBE, 0x14, 0x3B, 0xFE, 0x70, 0x4F, 0x93, 0x40, 0x64, 0x74,
    0x6D, 0x30, 0x2B, 0xE7, 0x2D, 0x54, 0x5F, 0x8A, 0x1D, 0x7F,
    0xB8, 0xA7, 0x49, 0x20, 0x32, 0xBA, 0x36, 0x98, 0x95, 0xF3,
    0x06,
))

# The section sits four bits later on air than the receiver's bit numbering,
# behind the last nibble of the frame sync.
_SYNC_TAIL_BITS = 4

_RX_POSITION = {byte * 8 + bit: position for position, (byte, bit) in enumerate(INTERLEAVE_TABLE_RX)}

# Coded bit c is sent at this bit position (LSB-first numbering over the section).
INTERLEAVE_POSITIONS_TX: tuple[int, ...] = tuple(
    _RX_POSITION[coded] + _SYNC_TAIL_BITS for coded in range(DSTAR_FEC_SECTION_LENGTH_BITS)
)


def _convolve(data: bytes) -> list[int]:
    """Rate-1/2, constraint-length-3 convolutional code, input bits LSB first."""
    coded: list[int] = []
    d1 = d2 = 0
    for byte in data:
        for j in range(8):
            d = (byte >> j) & 1
            coded.append((d + d1 + d2) & 1)
            coded.append((d + d2) & 1)
            d2, d1 = d1, d
    return coded


def encode_header(header: bytes | Sequence[int]) -> bytes:
    """Encode a 41-byte header into the 83-byte scrambled FEC section sent on air.

    Raises ValueError when the header is not 41 bytes long.
    """
    data = bytes(header)
    if len(data) != DSTAR_HEADER_LENGTH_BYTES:
        raise ValueError(f"a D-Star header is {DSTAR_HEADER_LENGTH_BYTES} bytes, got {len(data)}")

    # A trailing zero byte flushes the encoder back to the zero state.
    coded = _convolve(data + b"\x00")

    value = 0
    for bit, position in zip(coded[:DSTAR_FEC_SECTION_LENGTH_BITS], INTERLEAVE_POSITIONS_TX):
        if bit:
            value |= 1 << position

    section = value.to_bytes(DSTAR_FEC_SECTION_LENGTH_BYTES, "little")
    return bytes(a ^ b for a, b in zip(section, SCRAMBLE_TABLE_TX))