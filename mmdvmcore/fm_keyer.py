"""A Morse keyer producing square-wave audio for callsigns and acknowledgements."""

from __future__ import annotations

from .fm_timer import SAMPLE_RATE

# Each symbol: keyed bit pattern (MSB first) and its length in dot periods,
# including the trailing inter-character gap.
SYMBOLS: dict[str, tuple[int, int]] = {
    "A": (0xB8000000, 8),
    "B": (0xEA800000, 12),
    "C": (0xEBA00000, 14),
    "D": (0xEA000000, 10),
    "E": (0x80000000, 4),
    "F": (0xAE800000, 12),
    "G": (0xEE800000, 12),
    "H": (0xAA000000, 10),
    "I": (0xA0000000, 6),
    "J": (0xBBB80000, 16),
    "K": (0xEB800000, 12),
    "L": (0xBA800000, 12),
    "M": (0xEE000000, 10),
    "N": (0xE8000000, 8),
    "O": (0xEEE00000, 14),
    "P": (0xBBA00000, 14),
    "Q": (0xEEB80000, 16),
    "R": (0xBA000000, 10),
    "S": (0xA8000000, 8),
    "T": (0xE0000000, 6),
    "U": (0xAE000000, 10),
    "V": (0xAB800000, 12),
    "W": (0xBB800000, 12),
    "X": (0xEAE00000, 14),
    "Y": (0xEBB80000, 16),
    "Z": (0xEEA00000, 14),
    "1": (0xBBBB8000, 20),
    "2": (0xAEEE0000, 18),
    "3": (0xABB80000, 16),
    "4": (0xAAE00000, 14),
    "5": (0xAA800000, 12),
    "6": (0xEAA00000, 14),
    "7": (0xEEA80000, 16),
    "8": (0xEEEA0000, 18),
    "9": (0xEEEE8000, 20),
    "0": (0xEEEEE000, 22),
    "/": (0xEAE80000, 16),
    "?": (0xAEEA0000, 18),
    ",": (0xEEAEE000, 22),
    "-": (0xEAAE0000, 18),
    "=": (0xEAB80000, 16),
    ".": (0xBAEB8000, 20),
    " ": (0x00000000, 4),
}

MAX_BITS = 995


class FMKeyer:
    """Sends a text as Morse code, one audio sample at a time."""

    def __init__(self) -> None:
        self._wanted = False
        self._bits: list[bool] = []
        self._po_pos = 0
        self._dot_len = 0
        self._dot_pos = 0
        self._audio: list[bool] = []
        self._audio_pos = 0
        self._high_level = 0
        self._low_level = 0

    def set_params(self, text: str, speed: int, frequency: int, high_level: int, low_level: int) -> None:
        """Set the message, speed in dots per second-ish units, tone frequency and levels.

        Raises ValueError if the message is too long or the speed/frequency is unusable.
        Characters without a Morse symbol are skipped.
        """
        if speed <= 0:
            raise ValueError("keyer speed must be positive")
        if frequency <= 0 or SAMPLE_RATE // frequency == 0:
            raise ValueError(f"keyer frequency out of range: {frequency}")

        bits: list[bool] = []
        for ch in text:
            symbol = SYMBOLS.get(ch)
            if symbol is None:
                continue
            pattern, length = symbol
            for k in range(length):
                if len(bits) >= MAX_BITS:
                    self._bits = []
                    raise ValueError("keyer text is too long")
                bits.append(bool(pattern & (0x80000000 >> k)))
        self._bits = bits

        self._high_level = high_level
        self._low_level = low_level

        self._dot_len = SAMPLE_RATE // speed

        audio_len = SAMPLE_RATE // frequency
        self._audio = [i < audio_len // 2 for i in range(audio_len)]

    def _next_sample(self, level: int) -> int:
        if not self._wanted:
            return 0

        output = 0
        keyed = self._po_pos < len(self._bits) and self._bits[self._po_pos]
        if keyed and self._audio:
            output = level if self._audio[self._audio_pos] else -level

        self._audio_pos += 1
        if self._audio_pos >= len(self._audio):
            self._audio_pos = 0
        self._dot_pos += 1
        if self._dot_pos >= self._dot_len:
            self._dot_pos = 0
            self._po_pos += 1
            if self._po_pos >= len(self._bits):
                self.stop()

        return output

    def get_high_audio(self) -> int:
        """Return the next sample at the high level."""
        return self._next_sample(self._high_level)

    def get_low_audio(self) -> int:
        """Return the next sample at the low level."""
        return self._next_sample(self._low_level)

    def start(self) -> None:
        """Begin sending from the start, unless already part-way through."""
        if self.is_running():
            return
        self._wanted = True
        self._po_pos = 0
        self._dot_pos = 0
        self._audio_pos = 0

    def stop(self) -> None:
        self._wanted = False
        self._po_pos = 0
        self._dot_pos = 0
        self._audio_pos = 0

    def is_running(self) -> bool:
        """True once at least one sample of the message has been produced."""
        return self._po_pos > 0 or self._dot_pos > 0 or self._audio_pos > 0

    def is_wanted(self) -> bool:
        return self._wanted