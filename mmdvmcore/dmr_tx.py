"""The DMR base-station transmitter: two TDMA slots, CACH and calibration patterns."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum, IntEnum

from .fir import FirInterpolator
from .fm_ring_buffer import RingBuffer
from .host import ModemIO

MODE = "dmr"

DMR_FRAME_LENGTH_BYTES = 33
DMR_CACH_LENGTH_BYTES = 3
DMR_RADIO_SYMBOL_LENGTH = 5  # samples per symbol at 24 kHz

# Generated using rcosdesign(0.2, 8, 5, 'sqrt'); numTaps = 45, L = 5
RRC_0_2_FILTER = (
    0, 0, 0, 0, 850, 219, -720, -1548, -1795, -1172, 237, 1927, 3120, 3073, 1447, -1431, -4544,
    -6442, -5735, -1633, 5651, 14822, 23810, 30367, 32767, 30367, 23810, 14822, 5651, -1633,
    -5735, -6442, -4544, -1431, 1447, 3073, 3120, 1927, 237, -1172, -1795, -1548, -720, 219, 850,
)

DMR_LEVELA = 1362
DMR_LEVELB = 454
DMR_LEVELC = -454
DMR_LEVELD = -1362

_LEVELS = {0xC0: DMR_LEVELA, 0x80: DMR_LEVELB, 0x00: DMR_LEVELC, 0x40: DMR_LEVELD}

# The PR FILL and BS Data Sync pattern.
IDLE_DATA = bytes((
    0x53, 0xC2, 0x5E, 0xAB, 0xA8, 0x67, 0x1D, 0xC7, 0x38, 0x3B, 0xD9,
    0x36, 0x00, 0x0D, 0xFF, 0x57, 0xD7, 0x5D, 0xF5, 0xD0, 0x03, 0xF6,
    0xE4, 0x65, 0x17, 0x1B, 0x48, 0xCA, 0x6D, 0x4F, 0xC6, 0x10, 0xB4,
))

CACH_INTERLEAVE = (
    1, 2, 3, 5, 6, 7, 9, 10, 11, 13, 15, 16, 17, 19, 20, 21, 23,
    25, 26, 27, 29, 30, 31, 33, 34, 35, 37, 39, 40, 41, 43, 44, 45, 47,
    49, 50, 51, 53, 54, 55, 57, 58, 59, 61, 63, 64, 65, 67, 68, 69, 71,
    73, 74, 75, 77, 78, 79, 81, 82, 83, 85, 87, 88, 89, 91, 92, 93, 95,
)

EMPTY_SHORT_LC = bytes(12)

STARTUP_COUNT = 20
ABORT_COUNT = 6

DEFAULT_FIFO_SIZE = 1000
_SAMPLES_PER_BYTE = 4 * DMR_RADIO_SYMBOL_LENGTH


class Mark(IntEnum):
    """Slot-timing marks attached to output samples."""

    NONE = 0x00
    SLOT1 = 0x01
    SLOT2 = 0x02


class DMRTXState(Enum):
    IDLE = 0
    SLOT1 = 1
    CACH1 = 2
    SLOT2 = 3
    CACH2 = 4
    CAL = 5


class CalibrationMode(Enum):
    DMR = "dmr"  # 1.2 kHz deviation pattern
    LF = "lf"  # 80 Hz square wave


class DMRTransmitter:
    """Interleaves two slot FIFOs with CACH bursts into a continuous DMR carrier."""

    def __init__(self, io: ModemIO, fifo_size: int = DEFAULT_FIFO_SIZE) -> None:
        self._io = io
        self._fifos: tuple[RingBuffer[int], RingBuffer[int]] = (RingBuffer(fifo_size), RingBuffer(fifo_size))
        self._filter = FirInterpolator(DMR_RADIO_SYMBOL_LENGTH, RRC_0_2_FILTER)
        self._state = DMRTXState.IDLE
        self._cal_mode = CalibrationMode.DMR
        self._idle = bytes(DMR_FRAME_LENGTH_BYTES)
        self._cach_ptr = 0
        self._short_lc = bytearray(EMPTY_SHORT_LC)
        self._new_short_lc = bytearray(EMPTY_SHORT_LC)
        self._output: list[int] = []
        self._marks: list[int] = []
        self._output_pos = 0
        self._frame_count = 0
        self._abort_count = [0, 0]
        self._abort = [False, False]

    @property
    def state(self) -> DMRTXState:
        return self._state

    def _write_data(self, slot: int, data: bytes | Sequence[int]) -> None:
        frame = bytes(data)
        if len(frame) != DMR_FRAME_LENGTH_BYTES + 1:
            raise ValueError(f"a DMR slot frame is {DMR_FRAME_LENGTH_BYTES + 1} bytes, got {len(frame)}")
        fifo = self._fifos[slot]
        if fifo.space() < DMR_FRAME_LENGTH_BYTES:
            raise BufferError(f"DMR slot {slot + 1} buffer full")
        if self._abort[slot]:
            fifo.reset()
            self._abort[slot] = False
        for byte in frame[1:]:
            fifo.put(byte)
        if not self._io.is_transmitting():
            self._state = DMRTXState.SLOT1

    def write_data1(self, data: bytes | Sequence[int]) -> None:
        """Queue a slot 1 frame (a leading byte then 33 bytes); raises ValueError or BufferError."""
        self._write_data(0, data)

    def write_data2(self, data: bytes | Sequence[int]) -> None:
        """Queue a slot 2 frame (a leading byte then 33 bytes); raises ValueError or BufferError."""
        self._write_data(1, data)

    def write_short_lc(self, data: bytes | Sequence[int]) -> None:
        """Set the 68-bit short LC carried in the CACH, from nine bytes."""
        raw = bytes(data)
        if len(raw) != 9:
            raise ValueError(f"a short LC is 9 bytes, got {len(raw)}")
        new = bytearray(12)
        for i, n in enumerate(CACH_INTERLEAVE):
            if raw[i >> 3] & (0x80 >> (i & 7)):
                new[n >> 3] |= 0x80 >> (n & 7)
        self._new_short_lc = new

    def write_abort(self, data: bytes | Sequence[int]) -> None:
        """Abort slot 1 or 2, given as a single byte holding 1 or 2."""
        raw = bytes(data)
        if len(raw) != 1:
            raise ValueError("an abort request is 1 byte")
        if raw[0] not in (1, 2):
            raise ValueError(f"invalid DMR slot: {raw[0]}")
        slot = raw[0] - 1
        self._abort_count[slot] = 0
        self._abort[slot] = True

    def set_start(self, start: bool) -> None:
        self._state = DMRTXState.SLOT1 if start else DMRTXState.IDLE
        self._frame_count = 0
        self._abort_count = [0, 0]
        self._abort = [False, False]

    def set_cal(self, start: bool, mode: CalibrationMode = CalibrationMode.DMR) -> None:
        """Start or stop sending a calibration pattern."""
        self._state = DMRTXState.CAL if start else DMRTXState.IDLE
        self._cal_mode = mode

    def set_idle_data(self, data: bytes | Sequence[int]) -> None:
        """Set the 33-byte frame sent in a slot with nothing queued."""
        frame = bytes(data)
        if len(frame) != DMR_FRAME_LENGTH_BYTES:
            raise ValueError(f"idle data is {DMR_FRAME_LENGTH_BYTES} bytes, got {len(frame)}")
        self._idle = frame

    def process(self) -> None:
        """Produce output as far as the modem's free space allows."""
        if self._state is DMRTXState.IDLE:
            return

        if not self._output:
            if self._state is DMRTXState.SLOT1:
                self._create_data(0)
                self._state = DMRTXState.CACH2
            elif self._state is DMRTXState.CACH2:
                self._create_cach(1, 0)
                self._state = DMRTXState.SLOT2
            elif self._state is DMRTXState.SLOT2:
                self._create_data(1)
                self._state = DMRTXState.CACH1
            elif self._state is DMRTXState.CAL:
                self._create_cal()
            else:
                self._create_cach(0, 1)
                self._state = DMRTXState.SLOT1

        if not self._output:
            return

        space = self._io.get_space()
        while space > _SAMPLES_PER_BYTE:
            byte = self._output[self._output_pos]
            mark = self._marks[self._output_pos]
            self._output_pos += 1
            self._write_byte(byte, mark)
            space -= _SAMPLES_PER_BYTE
            if self._output_pos >= len(self._output):
                self._output = []
                self._marks = []
                self._output_pos = 0
                return

    def _write_byte(self, byte: int, control: int) -> None:
        symbols = [_LEVELS[(byte << (2 * i)) & 0xC0] for i in range(4)]
        marks = [int(Mark.NONE)] * _SAMPLES_PER_BYTE
        marks[DMR_RADIO_SYMBOL_LENGTH * 2] = int(control)
        self._io.write(MODE, self._filter.process(symbols), marks)

    def _create_data(self, slot: int) -> None:
        fifo = self._fifos[slot]
        if (
            len(fifo) >= DMR_FRAME_LENGTH_BYTES
            and self._frame_count >= STARTUP_COUNT
            and self._abort_count[slot] >= ABORT_COUNT
        ):
            self._output = [fifo.get() for _ in range(DMR_FRAME_LENGTH_BYTES)]
        else:
            self._abort[slot] = False
            self._output = list(self._idle)
        self._marks = [Mark.NONE] * DMR_FRAME_LENGTH_BYTES
        self._output_pos = 0

    def _create_cal(self) -> None:
        if self._cal_mode is CalibrationMode.DMR:
            # +3, +3, -3, -3 pattern for deviation cal.
            self._output = [0x5F] * DMR_FRAME_LENGTH_BYTES
        else:
            # +3 run, one +3 +3 -3 -3 byte, then a -3 run
            self._output = [0x55] * 7 + [0x5F] + [0xFF] * 7
        self._marks = [Mark.NONE] * len(self._output)
        self._output_pos = 0

    def _create_cach(self, tx_slot: int, rx_slot: int) -> None:
        self._frame_count += 1
        self._abort_count[0] += 1
        self._abort_count[1] += 1

        if self._cach_ptr >= 12:
            self._cach_ptr = 0

        if self._cach_ptr == 0:
            if len(self._fifos[0]) == 0 and len(self._fifos[1]) == 0:
                self._short_lc = bytearray(EMPTY_SHORT_LC)
            else:
                self._short_lc = bytearray(self._new_short_lc)

        out = list(self._short_lc[self._cach_ptr : self._cach_ptr + 3])
        self._marks = [Mark.NONE, Mark.NONE, Mark.SLOT1 if rx_slot == 1 else Mark.SLOT2]

        at = self._frame_count >= STARTUP_COUNT and len(self._fifos[rx_slot]) > 0
        tc = tx_slot == 1
        ls0 = self._cach_ptr != 9
        ls1 = self._cach_ptr != 0

        h0 = at ^ tc ^ ls1
        h1 = tc ^ ls1 ^ ls0
        h2 = at ^ tc ^ ls0

        out[0] |= (0x80 if at else 0) | (0x08 if tc else 0)
        out[1] |= (0x80 if ls1 else 0) | (0x08 if ls0 else 0) | (0x02 if h0 else 0)
        out[2] |= (0x20 if h1 else 0) | (0x02 if h2 else 0)

        self._output = out
        self._output_pos = 0
        self._cach_ptr += 3

    def reset_fifo1(self) -> None:
        self._fifos[0].reset()

    def reset_fifo2(self) -> None:
        self._fifos[1].reset()

    def frame_count(self) -> int:
        """Number of CACH bursts sent since the last start."""
        return self._frame_count

    def space1(self) -> int:
        """Number of frames that still fit in the slot 1 FIFO."""
        return self._fifos[0].space() // (DMR_FRAME_LENGTH_BYTES + 2)

    def space2(self) -> int:
        """Number of frames that still fit in the slot 2 FIFO."""
        return self._fifos[1].space() // (DMR_FRAME_LENGTH_BYTES + 2)