"""Interfaces to the modem's sample I/O and to the host serial link.

The signal-processing classes talk to the outside world through two small
interfaces: ``ModemIO`` (the DAC/ADC side) and ``HostPort`` (frames and
debug text sent to the controlling host). Recording implementations are
provided for use in applications that run the modem logic offline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


class ModemIO(ABC):
    """The radio side of the modem: sample output and receive control."""

    @abstractmethod
    def get_space(self) -> int:
        """Return how many output samples can be accepted now."""

    @abstractmethod
    def write(self, mode: Any, samples: Sequence[int], control: Sequence[int] | None = None) -> None:
        """Queue output samples for ``mode`` with optional per-sample control marks."""

    @abstractmethod
    def set_decode(self, decode: bool) -> None:
        """Signal whether a transmission is being decoded."""

    @abstractmethod
    def set_adc_detection(self, detect: bool) -> None:
        """Enable or disable ADC overflow detection."""

    @abstractmethod
    def is_transmitting(self) -> bool:
        """Return True while the transmitter is keyed."""


class HostPort(ABC):
    """The host side of the modem: decoded frames and debug messages."""

    @abstractmethod
    def write_debug(self, text: str, *args: Any) -> None:
        """Send a debug message with optional numeric values."""

    @abstractmethod
    def write_dstar_header(self, header: bytes) -> None:
        """Send a decoded D-Star header."""

    @abstractmethod
    def write_dstar_data(self, data: bytes) -> None:
        """Send a received D-Star data frame."""

    @abstractmethod
    def write_dstar_eot(self) -> None:
        """Report the end of a D-Star transmission."""

    @abstractmethod
    def write_dstar_lost(self) -> None:
        """Report that D-Star synchronisation was lost."""


@dataclass(frozen=True)
class SampleWrite:
    """One block of samples handed to a ``RecordingModemIO``."""

    mode: Any
    samples: list[int]
    control: list[int] | None


class RecordingModemIO(ModemIO):
    """A ``ModemIO`` that keeps every write and reports a fixed amount of space."""

    def __init__(self, space: int = 1000, transmitting: bool = False) -> None:
        self.space = space
        self.transmitting = transmitting
        self.decode = False
        self.adc_detection = False
        self.writes: list[SampleWrite] = []

    def get_space(self) -> int:
        return self.space

    def write(self, mode: Any, samples: Sequence[int], control: Sequence[int] | None = None) -> None:
        self.writes.append(
            SampleWrite(mode, list(samples), None if control is None else list(control))
        )

    def set_decode(self, decode: bool) -> None:
        self.decode = bool(decode)

    def set_adc_detection(self, detect: bool) -> None:
        self.adc_detection = bool(detect)

    def is_transmitting(self) -> bool:
        return self.transmitting

    @property
    def samples(self) -> list[int]:
        """All samples written so far, in order."""
        return [s for w in self.writes for s in w.samples]


class RecordingHostPort(HostPort):
    """A ``HostPort`` that records everything sent to the host, in order."""

    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []
        self.debug: list[tuple[str, tuple[Any, ...]]] = []

    def write_debug(self, text: str, *args: Any) -> None:
        self.debug.append((text, args))

    def write_dstar_header(self, header: bytes) -> None:
        self.events.append(("header", bytes(header)))

    def write_dstar_data(self, data: bytes) -> None:
        self.events.append(("data", bytes(data)))

    def write_dstar_eot(self) -> None:
        self.events.append(("eot",))

    def write_dstar_lost(self) -> None:
        self.events.append(("lost",))

    @property
    def headers(self) -> list[bytes]:
        return [e[1] for e in self.events if e[0] == "header"]

    @property
    def data(self) -> list[bytes]:
        return [e[1] for e in self.events if e[0] == "data"]