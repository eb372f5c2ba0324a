"""Frame sizes, sync patterns and other fixed values of the D-Star air interface."""

from __future__ import annotations

from collections.abc import Iterable

DSTAR_RADIO_BIT_LENGTH = 5  # samples per bit at 24 kHz

DSTAR_HEADER_LENGTH_BYTES = 41
DSTAR_HEADER_LENGTH_BITS = DSTAR_HEADER_LENGTH_BYTES * 8

DSTAR_FEC_SECTION_LENGTH_BYTES = 83
DSTAR_FEC_SECTION_LENGTH_BITS = 660

DSTAR_DATA_LENGTH_BYTES = 12
DSTAR_DATA_LENGTH_BITS = DSTAR_DATA_LENGTH_BYTES * 8

DSTAR_EOT_BYTES = bytes(
    (0x55, 0x55, 0x55, 0x55, 0xC8, 0x7A, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00)
)
DSTAR_EOT_LENGTH_BYTES = 6
DSTAR_EOT_LENGTH_BITS = DSTAR_EOT_LENGTH_BYTES * 8

DSTAR_DATA_SYNC_LENGTH_BYTES = 3
DSTAR_DATA_SYNC_LENGTH_BITS = DSTAR_DATA_SYNC_LENGTH_BYTES * 8

DSTAR_DATA_SYNC_BYTES = bytes(
    (0x9E, 0x8D, 0x32, 0x88, 0x26, 0x1A, 0x3F, 0x61, 0xE8, 0x55, 0x2D, 0x16)
)

DSTAR_SLOW_DATA_TYPE_TEXT = 0x40
DSTAR_SLOW_DATA_TYPE_HEADER = 0x50

DSTAR_SCRAMBLER_BYTES = bytes((0x70, 0x4F, 0x93))


def bits_to_byte_lsb_first(bits: Iterable[object]) -> int:
    """Pack up to eight bits, first bit least significant, into a byte value.

    Each item counts as a one when it is truthy. Raises ValueError when more
    than eight bits are given.
    """
    value = 0
    for position, bit in enumerate(bits):
        if position >= 8:
            raise ValueError("a byte holds at most eight bits")
        if bit:
            value |= 1 << position
    return value