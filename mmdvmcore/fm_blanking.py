"""Replaces over-deviating received audio with a warning bleep."""

from __future__ import annotations

# 2000 Hz sine wave at 24000 Hz sample rate
TONE = (0, 16384, 28378, 32767, 28378, 16384, 0, -16383, -28377, -32767, -28377, -16383)

BLEEP_LEN = 2400  # 100 ms
_BLANK_LEN = 12000  # 500 ms


def _ssat16(value: int) -> int:
    return max(-32768, min(32767, value))


class FMBlanking:
    """On a sample beyond the deviation limit, emits a bleep then silence for 500 ms."""

    def __init__(self) -> None:
        self._pos_value = 0
        self._neg_value = 0
        self._level = 128 * 128
        self._running = False
        self._pos = 0
        self._n = 0

    def set_params(self, value: int, level: int) -> None:
        """Set the deviation limit and bleep level; a limit of zero disables blanking."""
        self._pos_value = value * 128
        self._neg_value = -self._pos_value
        self._level = level * 128

    def process(self, sample: int) -> int:
        if self._pos_value == 0:
            return sample

        if not self._running and (sample >= self._pos_value or sample <= self._neg_value):
            self._running = True
            self._pos = 0
            self._n = 0

        if not self._running:
            return sample

        if self._pos <= BLEEP_LEN:
            sample = _ssat16((TONE[self._n] * self._level) >> 15)
            self._n = (self._n + 1) % len(TONE)
        else:
            sample = 0

        self._pos += 1
        if self._pos >= _BLANK_LEN:
            self._running = False

        return sample