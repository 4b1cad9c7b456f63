"""ANSI terminal control: cursor movement, colours and screen size."""

from __future__ import annotations

import os
import sys
from enum import IntEnum
from typing import TextIO


class Color(IntEnum):
    """The eight base colours of the 256-colour palette."""

    BLACK = 0
    RED = 1
    GREEN = 2
    BLUE = 3
    MAGNETA = 4
    CYAN = 5
    GRAY = 6
    WHITE = 7


class Terminal:
    """Writes ANSI control sequences to a text stream.

    ``size`` fixes the screen size as ``(rows, cols)``; without it the size
    is asked from the terminal behind ``stream``.
    """

    def __init__(self, stream: TextIO | None = None, size: tuple[int, int] | None = None):
        self.stream = stream if stream is not None else sys.stdout
        self.size = size

    def write(self, text: str) -> None:
        self.stream.write(text)

    def flush(self) -> None:
        self.stream.flush()

    def screen_size(self) -> tuple[int, int]:
        """Return ``(rows, cols)``; raise OSError if it cannot be found."""
        if self.size is not None:
            return self.size
        fd = self.stream.fileno()
        size = os.get_terminal_size(fd)
        return size.lines, size.columns

    def clear_screen(self) -> None:
        self.write("\033[H\033[2J")

    def goto(self, col: int, row: int) -> None:
        """Move the cursor to 1-based ``col`` and ``row``."""
        if col == 0 or row == 0:
            raise ValueError("cursor positions start at 1")
        rows, cols = self.screen_size()
        if rows < row or cols < col:
            raise ValueError(f"position ({col}, {row}) lies outside the screen")
        self.write(f"\033[{row};{col}H")

    def set_fg(self, color: int) -> None:
        self.write(f"\033[38;5;{int(color)}m")

    def set_bg(self, color: int) -> None:
        self.write(f"\033[48;5;{int(color)}m")

    def reset_color(self) -> None:
        self.write("\033[0m")

    def set_cursor_visible(self, visible: bool) -> None:
        if visible not in (0, 1):
            raise ValueError("visible must be true or false")
        self.write("\033[?25h" if visible else "\033[?25l")

    def delete_line(self) -> None:
        self.write("\033[K")