"""Big 8x8 characters, pseudo-graphic boxes and font files."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Sequence

from .term import Color, Terminal

BOXCHAR_REC = "a"
BOXCHAR_DR = "j"
BOXCHAR_DL = "m"
BOXCHAR_UR = "k"
BOXCHAR_UL = "l"
BOXCHAR_VERT = "x"
BOXCHAR_HOR = "q"

_WORD_MASK = 0xFFFFFFFF
_COUNT = struct.Struct("<i")
_CHAR = struct.Struct("<II")


@dataclass
class BigChar:
    """An 8x8 bitmap held in two 32-bit words, four rows per word."""

    top: int = 0
    bottom: int = 0

    def __post_init__(self) -> None:
        self.top &= _WORD_MASK
        self.bottom &= _WORD_MASK

    @staticmethod
    def _locate(x: int, y: int) -> tuple[str, int]:
        if not (0 <= x <= 7 and 0 <= y <= 7):
            raise ValueError(f"pixel ({x}, {y}) is outside the 8x8 grid")
        return ("top" if y <= 3 else "bottom"), (y % 4) * 8 + x

    def get_pixel(self, x: int, y: int) -> int:
        word, shift = self._locate(x, y)
        return (getattr(self, word) >> shift) & 1

    def set_pixel(self, x: int, y: int, value: int) -> None:
        word, shift = self._locate(x, y)
        if value not in (0, 1):
            raise ValueError("pixel value must be 0 or 1")
        current = getattr(self, word)
        if value:
            current |= 1 << shift
        else:
            current &= ~(1 << shift)
        setattr(self, word, current & _WORD_MASK)

    def rows(self) -> list[str]:
        """Return the eight rows, lit pixels as the block glyph."""
        return [
            "".join(BOXCHAR_REC if self.get_pixel(x, y) else " " for x in range(8))
            for y in range(8)
        ]


def display_width(text: str | bytes) -> int:
    """Count characters in UTF-8 text by skipping continuation bytes."""
    data = text.encode("utf-8") if isinstance(text, str) else text
    return sum(1 for byte in data if byte & 0xC0 != 0x80)


def print_alt(terminal: Terminal, text: str) -> None:
    """Write text in the alternate (line drawing) character set."""
    terminal.write(f"\033(0{text}\033(B")


def draw_box(
    terminal: Terminal,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    box_fg: int,
    box_bg: int,
    header: str | None,
    header_fg: int,
    header_bg: int,
) -> None:
    """Draw a framed box with an optional centred header on its top edge."""
    x1, x2 = min(x1, x2), max(x1, x2)
    y1, y2 = min(y1, y2), max(y1, y2)
    max_y, max_x = terminal.screen_size()
    if x1 < 0 or y1 < 0 or x2 > max_x or y2 > max_y or x2 - x1 < 2 or y2 - y1 < 2:
        raise ValueError("box does not fit on the screen")
    inner = BOXCHAR_HOR * (x2 - x1 - 1)
    terminal.set_fg(box_fg)
    terminal.set_bg(box_bg)
    terminal.goto(x1, y1)
    print_alt(terminal, BOXCHAR_UL)
    for _ in inner:
        print_alt(terminal, BOXCHAR_HOR)
    print_alt(terminal, BOXCHAR_UR)
    for row in range(y1 + 1, y2):
        terminal.goto(x1, row)
        print_alt(terminal, BOXCHAR_VERT)
        terminal.goto(x2, row)
        print_alt(terminal, BOXCHAR_VERT)
    terminal.goto(x1, y2)
    print_alt(terminal, BOXCHAR_DL)
    for _ in inner:
        print_alt(terminal, BOXCHAR_HOR)
    print_alt(terminal, BOXCHAR_DR)
    if header is not None:
        position = x1 + (x2 - x1) // 2 - display_width(header) // 2
        terminal.set_fg(header_fg)
        terminal.set_bg(header_bg)
        terminal.goto(position, y1)
        terminal.write(f" {header} ")
    terminal.reset_color()


def print_big_char(
    terminal: Terminal, char: BigChar, x: int, y: int, fg: int = Color.BLACK, bg: int = Color.BLACK
) -> None:
    """Draw a big character with its top-left corner at (x, y)."""
    max_y, max_x = terminal.screen_size()
    if x < 0 or y < 0 or x + 8 > max_x or y + 8 > max_y:
        raise ValueError("big character does not fit on the screen")
    if fg != Color.BLACK:
        terminal.set_fg(fg)
    if bg != Color.BLACK:
        terminal.set_bg(bg)
    for offset, row in enumerate(char.rows()):
        terminal.goto(x, y + offset)
        print_alt(terminal, row)
    terminal.reset_color()


def write_font(stream: BinaryIO, chars: Sequence[BigChar]) -> None:
    """Write a count followed by each character's two words."""
    stream.write(_COUNT.pack(len(chars)))
    for char in chars:
        stream.write(_CHAR.pack(char.top, char.bottom))


def read_font(stream: BinaryIO, count: int) -> list[BigChar]:
    """Read up to ``count`` characters written by :func:`write_font`."""
    header = stream.read(_COUNT.size)
    if len(header) != _COUNT.size:
        raise ValueError("font file has no character count")
    data = stream.read(count * _CHAR.size)
    whole = len(data) - len(data) % _CHAR.size
    return [BigChar(top, bottom) for top, bottom in _CHAR.iter_unpack(data[:whole])]


_DEFAULT_FONT: Iterable[tuple[int, int]] = (
    (0xC3C3C3FF, 0xFFC3C3C3),  # 0
    (0x18181C18, 0xFF181818),  # 1
    (0xFFC0C0FF, 0xFF030303),  # 2
    (0xFEC0C0FF, 0xFFC0C0FE),  # 3
    (0xFFC3C3C3, 0xC0C0C0C0),  # 4
    (0xFF0303FF, 0xFFC0C0C0),  # 5
    (0xFF0303FF, 0xFFC3C3C3),  # 6
    (0x3030C0FF, 0x0C0C0C30),  # 7
    (0xFFC3C3FF, 0xFFC3C3FF),  # 8
    (0xFFC3C3FF, 0xFFC0C0C0),  # 9
    (0xC3C3C3FF, 0xC3C3C3FF),  # a
    (0xC3C3C37F, 0x7FC3C37F),  # b
    (0x030303FF, 0xFF030303),  # c
    (0xC3C3C33F, 0x3FC3C3C3),  # d
    (0xFF0303FF, 0xFF0303FF),  # e
    (0xFF0303FF, 0x030303FF),  # f
    (0xFF181800, 0x001818FF),  # +
    (0x18181C18, 0x18181818),  # 1 without base
)


def default_font() -> list[BigChar]:
    """Return the built-in font: hex digits, plus sign and a bare one."""
    return [BigChar(top, bottom) for top, bottom in _DEFAULT_FONT]