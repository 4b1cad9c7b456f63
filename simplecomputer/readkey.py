"""Keyboard input: raw terminal modes, key decoding and value entry."""

from __future__ import annotations

import os
import re
import sys
import termios
from enum import Enum
from typing import TextIO


class Key(Enum):
    """Keys the console understands."""

    L = "l"
    S = "s"
    R = "r"
    T = "t"
    I = "i"  # noqa: E741
    F5 = "f5"
    F6 = "f6"
    UP = "up"
    DOWN = "down"
    RIGHT = "right"
    LEFT = "left"
    ESC = "esc"
    ENTER = "enter"
    OTHER = "other"


class TerminalMode:
    """Saves, restores and switches the line discipline of a terminal."""

    def __init__(self, fd: int | None = None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved: list | None = None

    def save(self) -> None:
        self._saved = termios.tcgetattr(self.fd)

    def restore(self) -> None:
        if self._saved is None:
            raise RuntimeError("terminal settings were never saved")
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, self._saved)

    def set_regime(self, canonical: bool, vtime: int, vmin: int, echo: bool, sigint: bool) -> None:
        """Switch to canonical mode, or to raw mode with the given options."""
        attrs = termios.tcgetattr(self.fd)
        if canonical:
            attrs[3] |= termios.ICANON
        else:
            attrs[3] &= ~termios.ICANON
            attrs[3] = attrs[3] | termios.ISIG if sigint else attrs[3] & ~termios.ISIG
            attrs[3] = attrs[3] | termios.ECHO if echo else attrs[3] & ~termios.ECHO
            attrs[6][termios.VMIN] = vmin
            attrs[6][termios.VTIME] = vtime
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, attrs)

    def __enter__(self) -> TerminalMode:
        self.save()
        return self

    def __exit__(self, *exc_info) -> None:
        self.restore()


_ESCAPE_KEYS = {
    b"A\0": Key.UP,
    b"B\0": Key.DOWN,
    b"C\0": Key.RIGHT,
    b"D\0": Key.LEFT,
    b"15": Key.F5,
    b"17": Key.F6,
}

_LETTER_KEYS = {
    ord("l"): Key.L,
    ord("s"): Key.S,
    ord("r"): Key.R,
    ord("t"): Key.T,
    ord("i"): Key.I,
}


def decode_key(data: bytes) -> Key:
    """Map the bytes of one key press to a Key."""
    buf = bytes(data[:5]).ljust(5, b"\0")
    if buf[0] == 0x1B:
        if buf[1] == 0:
            return Key.ESC
        if buf[1] == ord("["):
            return _ESCAPE_KEYS.get(buf[2:4], Key.OTHER)
        return Key.OTHER
    if buf[1] != 0:
        return Key.OTHER
    if buf[0] == ord("\n"):
        return Key.ENTER
    return _LETTER_KEYS.get(ord(chr(buf[0]).lower()), Key.OTHER)


def read_key(mode: TerminalMode, fd: int | None = None) -> Key:
    """Wait up to three seconds for a key press in raw mode and decode it."""
    sys.stdout.flush()
    fd = mode.fd if fd is None else fd
    mode.set_regime(False, 30, 0, False, False)
    try:
        data = os.read(fd, 5)
    finally:
        mode.restore()
    return decode_key(data)


_HEX_NUMBER = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")


def parse_value(text: str) -> int:
    """Parse a leading hexadecimal number; raise ValueError above 0x7FFF."""
    match = _HEX_NUMBER.match(text)
    sign, digits = match.groups()
    number = int(digits, 16) if digits else 0
    if sign == "-":
        number = -number
    if number > 0x7FFF:
        raise ValueError(f"value {number:#x} exceeds 0x7FFF")
    return number


def read_value(stream: TextIO | None = None) -> int:
    """Read one short line from ``stream`` and parse it as hexadecimal."""
    stream = sys.stdin if stream is None else stream
    return parse_value(stream.readline(9))