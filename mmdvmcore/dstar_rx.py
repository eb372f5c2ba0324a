"""The D-Star receiver: bit recovery, sync detection and frame extraction."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from .dstar_decode import decode_header
from .dstar_defines import (
    DSTAR_DATA_LENGTH_BITS,
    DSTAR_DATA_LENGTH_BYTES,
    DSTAR_DATA_SYNC_BYTES,
    DSTAR_FEC_SECTION_LENGTH_BITS,
    DSTAR_FEC_SECTION_LENGTH_BYTES,
    DSTAR_RADIO_BIT_LENGTH,
)
from .host import HostPort, ModemIO

PLLMAX = 0x10000
PLLINC = PLLMAX // DSTAR_RADIO_BIT_LENGTH
INC = PLLINC // 32

MAX_SYNC_BITS = 100 * DSTAR_DATA_LENGTH_BITS

# D-Star bit order version of 0x55 0x55 0x6E 0x0A
FRAME_SYNC_DATA = 0x557650
FRAME_SYNC_MASK = 0xFFFFFF
FRAME_SYNC_ERRS = 2

# D-Star bit order version of 0x55 0x2D 0x16
DATA_SYNC_DATA = 0xAAB468
DATA_SYNC_MASK = 0xFFFFFF
DATA_SYNC_ERRS = 2

# D-Star bit order version of 0x55 0x55 0xC8 0x7A
END_SYNC_DATA = 0xAAAAAAAA135E
END_SYNC_MASK = 0xFFFFFFFFFFFF
END_SYNC_ERRS = 1

_MASK64 = (1 << 64) - 1
_BUFFER_LENGTH = 100


class DStarRXState(Enum):
    NONE = "none"
    HEADER = "header"
    DATA = "data"


def _errors(pattern: int, mask: int, expected: int) -> int:
    return ((pattern & mask) ^ expected).bit_count()


class DStarReceiver:
    """Turns demodulated GMSK samples into D-Star headers and data frames for the host."""

    def __init__(self, io: ModemIO, host: HostPort, send_rssi: bool = False) -> None:
        self._io = io
        self._host = host
        self._send_rssi = send_rssi
        self._buffer = bytearray(_BUFFER_LENGTH)
        self.reset()

    @property
    def state(self) -> DStarRXState:
        return self._state

    def reset(self) -> None:
        self._pll = 0
        self._prev = False
        self._state = DStarRXState.NONE
        self._pattern = 0
        self._bits = 0
        self._data_bits = 0
        self._rssi_accum = 0
        self._rssi_count = 0

    def samples(self, samples: Sequence[int], rssi: Sequence[int]) -> None:
        """Process a block of samples with their matching RSSI readings."""
        if len(samples) != len(rssi):
            raise ValueError("samples and rssi must have the same length")

        for sample, level in zip(samples, rssi):
            self._rssi_accum = (self._rssi_accum + level) & 0xFFFFFFFF
            self._rssi_count = (self._rssi_count + 1) & 0xFFFF

            bit = sample < 0

            if bit != self._prev:
                if self._pll < PLLMAX // 2:
                    self._pll += INC
                else:
                    self._pll -= INC
            self._prev = bit

            self._pll += PLLINC
            if self._pll >= PLLMAX:
                self._pll -= PLLMAX
                if self._state is DStarRXState.NONE:
                    self._process_none(bit)
                elif self._state is DStarRXState.HEADER:
                    self._process_header(bit)
                else:
                    self._process_data(bit)

    def _shift_in(self, bit: bool) -> None:
        self._pattern = ((self._pattern << 1) | int(bit)) & _MASK64

    def _store(self, bit: bool) -> None:
        index, offset = divmod(self._bits, 8)
        if bit:
            self._buffer[index] |= 1 << offset
        else:
            self._buffer[index] &= ~(1 << offset) & 0xFF
        self._bits += 1

    def _clear_frame(self, length: int) -> None:
        self._buffer[:length] = bytes(length)
        self._bits = 0

    def _set_receiving(self, receiving: bool) -> None:
        self._io.set_decode(receiving)
        self._io.set_adc_detection(receiving)

    def _process_none(self, bit: bool) -> None:
        self._shift_in(bit)

        if _errors(self._pattern, FRAME_SYNC_MASK, FRAME_SYNC_DATA) <= FRAME_SYNC_ERRS:
            self._host.write_debug("DStarRX: found frame sync in None")
            self._clear_frame(DSTAR_FEC_SECTION_LENGTH_BYTES)
            self._rssi_accum = 0
            self._rssi_count = 0
            self._state = DStarRXState.HEADER
            return

        if _errors(self._pattern, DATA_SYNC_MASK, DATA_SYNC_DATA) == 0:
            self._host.write_debug("DStarRX: found data sync in None")
            self._set_receiving(True)

            # Suppress RSSI on the dummy sync message
            self._rssi_accum = 0
            self._rssi_count = 0
            self._write_rssi_data(bytearray(DSTAR_DATA_SYNC_BYTES))

            self._clear_frame(DSTAR_DATA_LENGTH_BYTES + 2)
            self._data_bits = MAX_SYNC_BITS
            self._state = DStarRXState.DATA

    def _process_header(self, bit: bool) -> None:
        self._shift_in(bit)
        self._store(bit)

        if self._bits != DSTAR_FEC_SECTION_LENGTH_BITS:
            return

        header = decode_header(self._buffer[:DSTAR_FEC_SECTION_LENGTH_BYTES])
        if header is None:
            self._state = DStarRXState.NONE
            return

        self._set_receiving(True)
        self._write_rssi_header(bytearray(header))
        self._clear_frame(DSTAR_DATA_LENGTH_BYTES + 2)
        self._state = DStarRXState.DATA
        self._data_bits = MAX_SYNC_BITS

    def _process_data(self, bit: bool) -> None:
        self._shift_in(bit)
        self._store(bit)

        if _errors(self._pattern, END_SYNC_MASK, END_SYNC_DATA) <= END_SYNC_ERRS:
            self._host.write_debug("DStarRX: Found end sync in Data")
            self._set_receiving(False)
            self._host.write_dstar_eot()
            self._state = DStarRXState.NONE
            return

        sync_seen = False
        if self._bits >= DSTAR_DATA_LENGTH_BITS - 3:
            if _errors(self._pattern, DATA_SYNC_MASK, DATA_SYNC_DATA) <= DATA_SYNC_ERRS:
                self._bits = DSTAR_DATA_LENGTH_BITS
                self._data_bits = MAX_SYNC_BITS
                sync_seen = True

        # A sync arriving a little late pulls the frame boundary back.
        if self._bits == DSTAR_DATA_LENGTH_BITS and not sync_seen:
            for shift in range(1, 4):
                if _errors(self._pattern, DATA_SYNC_MASK >> shift, DATA_SYNC_DATA >> shift) <= DATA_SYNC_ERRS:
                    self._bits -= shift
                    break

        self._data_bits -= 1
        if self._data_bits == 0:
            self._host.write_debug("DStarRX: data sync timed out, lost lock")
            self._set_receiving(False)
            self._host.write_dstar_lost()
            self._state = DStarRXState.NONE
            return

        if self._bits == DSTAR_DATA_LENGTH_BITS:
            if sync_seen:
                self._buffer[9:12] = DSTAR_DATA_SYNC_BYTES[9:12]
                self._write_rssi_data(self._buffer)
            else:
                self._host.write_dstar_data(bytes(self._buffer[:DSTAR_DATA_LENGTH_BYTES]))
            self._clear_frame(DSTAR_DATA_LENGTH_BYTES + 2)

    def _average_rssi(self) -> int | None:
        if not self._send_rssi or self._rssi_count == 0:
            return None
        return (self._rssi_accum // self._rssi_count) & 0xFFFF

    def _write_rssi_header(self, header: bytearray) -> None:
        rssi = self._average_rssi()
        payload = bytes(header) if rssi is None else bytes(header) + rssi.to_bytes(2, "big")
        self._host.write_dstar_header(payload)
        self._rssi_accum = 0
        self._rssi_count = 0

    def _write_rssi_data(self, data: bytearray) -> None:
        frame = bytes(data[:DSTAR_DATA_LENGTH_BYTES])
        rssi = self._average_rssi()
        payload = frame if rssi is None else frame + rssi.to_bytes(2, "big")
        self._host.write_dstar_data(payload)
        self._rssi_accum = 0
        self._rssi_count = 0