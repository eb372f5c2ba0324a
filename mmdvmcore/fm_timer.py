"""A timer counted in 24 kHz audio samples."""

from __future__ import annotations

SAMPLE_RATE = 24000
_SAMPLES_PER_MS = SAMPLE_RATE // 1000


class FMTimer:
    """A sample-clocked timer; it starts counting at 1 and expires past its timeout."""

    def __init__(self) -> None:
        self._timeout = 0
        self._timer = 0

    def set_timeout(self, secs: int, msecs: int) -> None:
        """Set the timeout from seconds plus milliseconds."""
        self._timeout = secs * SAMPLE_RATE + msecs * _SAMPLES_PER_MS

    @property
    def timeout(self) -> int:
        """The configured timeout in milliseconds."""
        return self._timeout // _SAMPLES_PER_MS

    def start(self) -> None:
        """Start (or restart) the timer; does nothing when no timeout is set."""
        if self._timeout > 0:
            self._timer = 1

    def stop(self) -> None:
        self._timer = 0

    def clock(self, length: int) -> None:
        """Advance a running timer by ``length`` samples."""
        if self._timer > 0 and self._timeout > 0:
            self._timer += length

    def is_running(self) -> bool:
        return self._timer > 0

    def has_expired(self) -> bool:
        if self._timeout == 0 or self._timer == 0:
            return False
        return self._timer > self._timeout