"""The intermittent busy tone sent after a transmission time-out."""

from __future__ import annotations

# 400 Hz sine wave at 24000 Hz sample rate
BUSY_AUDIO = (
    0, 3426, 6813, 10126, 13328, 16384, 19261, 21926, 24351, 26510, 28378, 29935, 31164, 32052,
    32588, 32767, 32588, 32052, 31164, 29935, 28378, 26510, 24351, 21926, 19261, 16384, 13328,
    10126, 6813, 3425, 0, -3425, -6813, -10126, -13328, -16384, -19261, -21926, -24351, -26510,
    -28378, -29935, -31164, -32052, -32588, -32768, -32588, -32052, -31164, -29935, -28378,
    -26510, -24351, -21926, -19261, -16384, -13328, -10126, -6813, -3425,
)

_SILENCE_SAMPLES = 12000
_CYCLE_SAMPLES = 24000


def _ssat16(value: int) -> int:
    return max(-32768, min(32767, value))


class FMTimeout:
    """Half a second of silence followed by half a second of 400 Hz tone, repeating."""

    def __init__(self) -> None:
        self._level = 128 * 128
        self._running = False
        self._pos = 0
        self._n = 0

    def set_params(self, level: int) -> None:
        self._level = level * 5

    def start(self) -> None:
        self._running = True
        self._pos = 0
        self._n = 0

    def stop(self) -> None:
        self._running = False

    def get_audio(self) -> int:
        """Return the next output sample (zero when stopped)."""
        if not self._running:
            return 0

        sample = 0
        if self._pos >= _SILENCE_SAMPLES:
            sample = _ssat16((BUSY_AUDIO[self._n] * self._level) >> 15)
            self._n = (self._n + 1) % len(BUSY_AUDIO)

        self._pos += 1
        if self._pos >= _CYCLE_SAMPLES:
            self._pos = 0

        return sample