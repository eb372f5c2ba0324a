"""Decoding of the FEC-protected D-Star radio header.

The 660-bit section is descrambled, deinterleaved and passed through a
rate-1/2 Viterbi decoder; the resulting 41-byte header is accepted only when
its CRC-CCITT checksum matches.
"""

from __future__ import annotations

from collections.abc import Sequence

from .dstar_defines import (
    DSTAR_FEC_SECTION_LENGTH_BITS,
    DSTAR_FEC_SECTION_LENGTH_BYTES,
    DSTAR_HEADER_LENGTH_BYTES,
)

SCRAMBLE_TABLE_RX = bytes((
    0x70, 0x4F, 0x93, 0x40, 0x64, 0x74, 0x6D, 0x30, 0x2B, 0xE7,
    0x2D, 0x54, 0x5F, 0x8A, 0x1D, 0x7F, 0xB8, 0xA7, 0x49, 0x20,
    0x32, 0xBA, 0x36, 0x98, 0x95, 0xF3, 0x16, 0xAA, 0x2F, 0xC5,
    0x8E, 0x3F, 0xDC, 0xD3, 0x24, 0x10, 0x19, 0x5D, 0x1B, 0xCC,
    0xCA, 0x79, 0x0B, 0xD5, 0x97, 0x62, 0xC7, 0x1F, 0xEE, 0x69,
    0x12, 0x88, 0x8C, 0xAE, 0x0D, 0x66, 0xE5, 0xBC, 0x85, 0xEA,
    0x4B, 0xB1, 0xE3, 0x0F, 0xF7, 0x34, 0x09, 0x44, 0x46, 0xD7,
    0x06, 0xB3, 0x72, 0xDE, 0x42, 0xF5, 0xA5, 0xD8, 0xF1, 0x87,
    0x7B, 0x9A, 0x04, 0x22, 0xA3, 0x6B, 0x83, 0x59, 0x39, 0x6F,
    0x00,
))

# Received bit i lands at this (byte, bit-from-MSB) of the deinterleaved block:
# a block interleaver taking every third byte, one bit column at a time.
INTERLEAVE_TABLE_RX: tuple[tuple[int, int], ...] = tuple(
    (byte, bit)
    for residue in range(3)
    for bit in range(8)
    for byte in range(residue, DSTAR_FEC_SECTION_LENGTH_BYTES, 3)
    if byte * 8 + bit < DSTAR_FEC_SECTION_LENGTH_BITS
)

_DECODED_BITS = DSTAR_FEC_SECTION_LENGTH_BITS // 2


def _make_ccitt_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        crc = n
        for _ in range(8):
            crc = (crc >> 1) ^ 0x8408 if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


CCITT_TABLE = _make_ccitt_table()


def compute_crc(data: bytes | Sequence[int]) -> int:
    """Return the CRC-CCITT (reflected, initial 0xFFFF, inverted) of ``data``."""
    crc = 0xFFFF
    for byte in data:
        crc = (crc >> 8) ^ CCITT_TABLE[(crc ^ byte) & 0xFF]
    return ~crc & 0xFFFF


def header_checksum_ok(header: bytes | Sequence[int]) -> bool:
    """Check the little-endian CRC held in the last two bytes of a 41-byte header."""
    if len(header) != DSTAR_HEADER_LENGTH_BYTES:
        raise ValueError(f"a D-Star header is {DSTAR_HEADER_LENGTH_BYTES} bytes, got {len(header)}")
    crc = compute_crc(header[:-2])
    return (crc & 0xFF) == header[-2] and (crc >> 8) == header[-1]


def _deinterleave(section: bytes) -> list[int]:
    """Descramble and deinterleave into a list of 660 coded bits."""
    coded = [0] * DSTAR_FEC_SECTION_LENGTH_BITS
    for i, (byte, bit) in enumerate(INTERLEAVE_TABLE_RX):
        received = section[i // 8] ^ SCRAMBLE_TABLE_RX[i // 8]
        if received & (1 << (i % 8)):
            coded[byte * 8 + bit] = 1
    return coded


# For each present state: (metric index, previous state) for the two candidates.
_TRANSITIONS = (
    ((0, 0), (4, 2)),
    ((1, 0), (5, 2)),
    ((2, 1), (6, 3)),
    ((3, 1), (7, 3)),
)


def _viterbi(coded: list[int]) -> list[int]:
    """Decode 330 input bits from 660 coded bits with hard-decision Viterbi."""
    path_metric = [0, 0, 0, 0]
    decisions: list[tuple[bool, ...]] = []

    for t in range(_DECODED_BITS):
        d1 = coded[2 * t]
        d0 = coded[2 * t + 1]
        metric = (
            d1 + d0,
            (d1 ^ 1) + (d0 ^ 1),
            (d1 ^ 1) + d0,
            d1 + (d0 ^ 1),
            (d1 ^ 1) + (d0 ^ 1),
            d1 + d0,
            d1 + (d0 ^ 1),
            (d1 ^ 1) + d0,
        )
        new_metric = []
        step = []
        for (ma, pa), (mb, pb) in _TRANSITIONS:
            first = metric[ma] + path_metric[pa]
            second = metric[mb] + path_metric[pb]
            new_metric.append(min(first, second))
            step.append(not first < second)
        path_metric = new_metric
        decisions.append(tuple(step))

    bits = [0] * _DECODED_BITS
    state = 0
    for t in reversed(range(_DECODED_BITS)):
        bits[t] = state & 1
        took_second = decisions[t][state]
        if state < 2:
            state = 2 if took_second else 0
        else:
            state = 3 if took_second else 1
    return bits


def decode_header(fec_section: bytes | Sequence[int]) -> bytes | None:
    """Decode a received 83-byte FEC section into a 41-byte header.

    Returns None when the decoded header fails its checksum. Raises
    ValueError when fewer than 83 bytes are given.
    """
    section = bytes(fec_section)
    if len(section) < DSTAR_FEC_SECTION_LENGTH_BYTES:
        raise ValueError(
            f"a D-Star FEC section is {DSTAR_FEC_SECTION_LENGTH_BYTES} bytes, got {len(section)}"
        )

    bits = _viterbi(_deinterleave(section))

    header = bytearray(DSTAR_HEADER_LENGTH_BYTES)
    for j in range(DSTAR_HEADER_LENGTH_BYTES * 8):
        if bits[j]:
            header[j >> 3] |= 1 << (j & 7)

    return bytes(header) if header_checksum_ok(header) else None