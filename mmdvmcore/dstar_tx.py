"""The D-Star transmitter: queues frames from the host and modulates them as GMSK."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from enum import Enum

from .dstar_defines import (
    DSTAR_DATA_LENGTH_BYTES,
    DSTAR_EOT_BYTES,
    DSTAR_EOT_LENGTH_BYTES,
    DSTAR_HEADER_LENGTH_BYTES,
    DSTAR_RADIO_BIT_LENGTH,
)
from .dstar_encode import encode_header
from .fir import FirInterpolator
from .host import ModemIO

MODE = "dstar"

BIT_SYNC = 0xAA
FRAME_SYNC = bytes((0xEA, 0xA6, 0x00))

# Generated using gaussfir(0.35, 1, 5); numTaps = 15, L = 5
GAUSSIAN_0_35_FILTER = (0, 0, 0, 0, 1001, 3514, 9333, 18751, 28499, 32767, 28499, 18751, 9333, 3514, 1001)

DSTAR_LEVEL0 = -841
DSTAR_LEVEL1 = 841

DEFAULT_BUFFER_SIZE = 2000
_MAX_OUTPUT = 600
_SAMPLES_PER_BYTE = 8 * DSTAR_RADIO_BIT_LENGTH


class _FrameType(Enum):
    HEADER = 0x00
    DATA = 0x01
    EOT = 0x02


class DStarTransmitter:
    """Turns host headers, data frames and end markers into modulated samples."""

    def __init__(self, io: ModemIO, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size < 1:
            raise ValueError("buffer size must be positive")
        self._io = io
        self._buffer_size = buffer_size
        self._frames: deque[tuple[_FrameType, bytes]] = deque()
        self._used = 0
        self._filter = FirInterpolator(DSTAR_RADIO_BIT_LENGTH, GAUSSIAN_0_35_FILTER)
        self._output = b""
        self._output_pos = 0
        self._tx_delay = 60  # in bytes

    @property
    def tx_delay(self) -> int:
        """The preamble length in bytes."""
        return self._tx_delay

    def _free(self) -> int:
        return self._buffer_size - self._used

    def _queue(self, kind: _FrameType, payload: bytes) -> None:
        needed = 1 + len(payload)
        if self._free() < needed:
            raise BufferError(f"D-Star buffer full: {self._free()} bytes free")
        self._frames.append((kind, payload))
        self._used += needed

    def _pop(self) -> bytes:
        kind, payload = self._frames.popleft()
        self._used -= 1 + len(payload)
        return payload

    def write_header(self, header: bytes | Sequence[int]) -> None:
        """Queue a 41-byte header; raises ValueError or BufferError."""
        data = bytes(header)
        if len(data) != DSTAR_HEADER_LENGTH_BYTES:
            raise ValueError(f"a D-Star header is {DSTAR_HEADER_LENGTH_BYTES} bytes, got {len(data)}")
        self._queue(_FrameType.HEADER, data)

    def write_data(self, data: bytes | Sequence[int]) -> None:
        """Queue a 12-byte data frame; raises ValueError or BufferError."""
        frame = bytes(data)
        if len(frame) != DSTAR_DATA_LENGTH_BYTES:
            raise ValueError(f"a D-Star data frame is {DSTAR_DATA_LENGTH_BYTES} bytes, got {len(frame)}")
        self._queue(_FrameType.DATA, frame)

    def write_eot(self) -> None:
        """Queue an end of transmission; raises BufferError when full."""
        self._queue(_FrameType.EOT, b"")

    def _fill_output(self) -> None:
        kind = self._frames[0][0]
        if kind is _FrameType.HEADER:
            if not self._io.is_transmitting():
                self._output = bytes([BIT_SYNC]) * self._tx_delay
            else:
                encoded = encode_header(self._pop())
                self._output = FRAME_SYNC[:2] + encoded
        elif kind is _FrameType.DATA:
            self._output = self._pop()
        else:
            self._pop()
            self._output = DSTAR_EOT_BYTES[:DSTAR_EOT_LENGTH_BYTES] * 3
        self._output_pos = 0

    def process(self) -> None:
        """Modulate queued output as far as the modem's free space allows."""
        if not self._output and not self._frames:
            return

        if not self._output:
            self._fill_output()

        if not self._output:
            return

        space = self._io.get_space()
        while space > _SAMPLES_PER_BYTE:
            byte = self._output[self._output_pos]
            self._output_pos += 1
            self._write_byte(byte)
            space -= _SAMPLES_PER_BYTE
            if self._output_pos >= len(self._output):
                self._output = b""
                self._output_pos = 0
                return

    def _write_byte(self, byte: int) -> None:
        levels = [DSTAR_LEVEL0 if byte & (1 << i) else DSTAR_LEVEL1 for i in range(8)]
        self._io.write(MODE, self._filter.process(levels))

    def set_tx_delay(self, delay: int) -> None:
        """Set the preamble: 250 ms plus ``delay`` units, capped at 600 bytes."""
        self._tx_delay = min(300 + delay * 6, _MAX_OUTPUT)

    def space(self) -> int:
        """Number of data frames that still fit in the queue."""
        return self._free() // (DSTAR_DATA_LENGTH_BYTES + 1)