"""Decimation by three and packing of audio samples into bytes."""

from __future__ import annotations

from .fm_ring_buffer import RingBuffer

_MASK32 = 0xFFFFFFFF


class FMDownsampler:
    """Keeps one sample in three and packs pairs of kept samples into three bytes."""

    def __init__(self, length: int) -> None:
        self._ring_buffer: RingBuffer[int] = RingBuffer(length)
        self._sample_pack = 0
        self._pack_index = 0
        self._down_sample_index = 0

    def add_sample(self, sample: int) -> None:
        if self._down_sample_index == 0:
            if self._pack_index == 0:
                self._sample_pack = (sample << 12) & _MASK32
            else:
                self._sample_pack |= sample & _MASK32
                # Bytes 1..3 of the little-endian 32-bit word.
                for byte in self._sample_pack.to_bytes(4, "little")[1:]:
                    self._ring_buffer.put(byte)
                self._sample_pack = 0
            self._pack_index = (self._pack_index + 1) % 2
        self._down_sample_index = (self._down_sample_index + 1) % 3

    def get_packed_data(self) -> int | None:
        """Return the next packed byte, or None when none is waiting."""
        return self._ring_buffer.get()

    def has_overflowed(self) -> bool:
        return self._ring_buffer.has_overflowed()