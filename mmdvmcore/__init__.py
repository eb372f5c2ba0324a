"""FM repeater building blocks, CTCSS, D-Star and DMR signal processing for a multi-mode radio modem."""

__version__ = "0.1.0"