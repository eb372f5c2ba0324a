"""A polyphase FIR interpolator working on Q15 samples."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence


def _ssat16(value: int) -> int:
    return max(-32768, min(32767, value))


class FirInterpolator:
    """Upsamples by an integer factor through a FIR filter, keeping state between blocks.

    The coefficients are stored in time-reversed order. Their count must be a
    multiple of the factor. Each output sample is the Q15 product sum,
    shifted down by 15 bits and saturated to 16 bits.
    """

    def __init__(self, factor: int, coefficients: Sequence[int]) -> None:
        if factor < 1:
            raise ValueError("interpolation factor must be positive")
        coeffs = tuple(coefficients)
        if not coeffs or len(coeffs) % factor != 0:
            raise ValueError("coefficient count must be a non-zero multiple of the factor")
        self._factor = factor
        self._coefficients = coeffs
        self._phase_length = len(coeffs) // factor
        self._history: deque[int] = deque(
            [0] * (self._phase_length - 1), maxlen=self._phase_length - 1
        )

    @property
    def factor(self) -> int:
        return self._factor

    @property
    def phase_length(self) -> int:
        return self._phase_length

    def process(self, samples: Sequence[int]) -> list[int]:
        """Return ``factor`` output samples for every input sample."""
        output: list[int] = []
        factor = self._factor
        coeffs = self._coefficients
        for sample in samples:
            window = [*self._history, sample]
            for j in range(1, factor + 1):
                phase = coeffs[factor - j :: factor]
                acc = sum(x * c for x, c in zip(window, phase))
                output.append(_ssat16(acc >> 15))
            if self._history.maxlen:
                self._history.append(sample)
        return output

    def reset(self) -> None:
        """Clear the filter history."""
        self._history = deque(
            [0] * (self._phase_length - 1), maxlen=self._phase_length - 1
        )