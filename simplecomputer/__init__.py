"""Emulator of a small educational computer, with an assembler and a terminal console."""

__version__ = "0.1.0"