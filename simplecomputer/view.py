"""Full-screen view of the simple computer's state."""

from __future__ import annotations

from typing import Sequence

from .bigchars import BigChar, default_font, draw_box, print_big_char
from .computer import MEMORY_SIZE, WORD_MASK, Flag, SimpleComputer, decode_command
from .term import Color, Terminal

IO_HISTORY = 5
FONT_SIZE = 18
PLUS_GLYPH = 16

_FLAG_LETTERS = (
    (Flag.IT, "I", "  {}    "),
    (Flag.MC, "M", "{}    "),
    (Flag.SF, "S", "{}    "),
    (Flag.ZD, "Z", "{}    "),
    (Flag.OO, "O", "{}   "),
)

_KEY_HELP = (
    "l - load s - save i - reset\n",
    "r - run t - step\n",
    "esc - выход\n",
    "F5 - Accumulator\n",
    "F6 - Instruction counter\n",
)


def _fields(value: int) -> tuple[int, int, int, bool]:
    """Decode a word; for words outside the format decode its low 15 bits."""
    try:
        sign, command, operand = decode_command(value)
        return sign, command, operand, True
    except ValueError:
        sign, command, operand = decode_command(value & WORD_MASK)
        return sign, command, operand, False


class ConsoleView:
    """Draws memory, registers, flags, cache and the I/O log on a terminal."""

    def __init__(
        self,
        computer: SimpleComputer,
        terminal: Terminal,
        font: Sequence[BigChar] | None = None,
    ):
        self.computer = computer
        self.terminal = terminal
        self.font = list(font) if font is not None else default_font()
        if len(self.font) < FONT_SIZE:
            raise ValueError(f"font needs {FONT_SIZE} characters, got {len(self.font)}")
        self.io_addresses = [0] * IO_HISTORY
        self.io_values = [0] * IO_HISTORY

    def _current_value(self) -> int:
        counter = self.computer.counter
        return self.computer.memory[counter] if 0 <= counter < MEMORY_SIZE else 0

    def draw(self) -> None:
        """Redraw the whole screen."""
        term = self.terminal
        term.clear_screen()
        self.print_memory()
        self.print_accumulator()
        self.print_counters()
        self.print_flags()
        self.print_decoded(self._current_value())
        self.print_command()
        draw_box(term, 62, 7, 114, 18, Color.WHITE, Color.BLACK,
                 "Редактируемая ячейка (увеличенно)", Color.RED, Color.BLACK)
        self.print_big_cell(self._current_value(), 67, 9)
        self.print_keys()
        self.print_cache()
        draw_box(term, 1, 19, 66, 25, Color.WHITE, Color.BLACK, "Кэш", Color.GREEN, Color.BLACK)
        self.print_term()
        term.goto(1, 26)

    def print_cell(self, address: int, fg: int, bg: int) -> None:
        term = self.terminal
        sign, command, operand, _ = _fields(self.computer.memory[address])
        term.goto(2 + 6 * (address % 10), 2 + address // 10)
        term.set_fg(fg)
        term.set_bg(bg)
        term.write(f"{'-' if sign else '+'}{command:02d}{operand:02d} ")
        term.reset_color()

    def print_memory(self) -> None:
        for address in range(MEMORY_SIZE):
            if address == self.computer.counter:
                self.print_cell(address, Color.BLACK, Color.WHITE)
            else:
                self.print_cell(address, Color.GREEN, Color.BLACK)
        draw_box(self.terminal, 1, 1, 61, 15, Color.WHITE, Color.BLACK,
                 "Оперативная память", Color.RED, Color.BLACK)

    def print_accumulator(self) -> None:
        term = self.terminal
        acc = self.computer.accumulator
        sign, command, operand, _ = _fields(acc)
        term.goto(63, 2)
        term.write(f"sc: {'-' if sign else '+'}{command:02d}{operand:02d}    ")
        term.write(f" hex:{acc & 0xFFFFFFFF:04X} ")
        draw_box(term, 62, 1, 86, 3, Color.WHITE, Color.BLACK, "Аккумулятор", Color.RED, Color.BLACK)

    def print_counters(self) -> None:
        term = self.terminal
        counter = self.computer.counter
        term.goto(63, 5)
        term.write(f"T: {counter:02d}        IC: {counter:04X}")
        draw_box(term, 62, 4, 86, 6, Color.WHITE, Color.BLACK, "Счётчик команд", Color.RED, Color.BLACK)

    def print_flags(self) -> None:
        term = self.terminal
        term.goto(89, 2)
        for flag, letter, pattern in _FLAG_LETTERS:
            term.write(pattern.format(letter if self.computer.get_flag(flag) else "_"))
        draw_box(term, 88, 1, 114, 3, Color.WHITE, Color.BLACK, "Регистр флагов", Color.RED, Color.BLACK)

    def print_decoded(self, value: int) -> None:
        """Show ``value`` in decimal, octal, hex and its 15 low bits."""
        term = self.terminal
        draw_box(term, 1, 16, 60, 18, Color.WHITE, Color.BLACK,
                 "Редактируемая Ячейка", Color.RED, Color.BLACK)
        term.goto(2, 17)
        unsigned = value & 0xFFFFFFFF
        term.write(f"dec: {value:05d} | oct: {unsigned:05o} | hex: {unsigned:04X}   bin: ")
        for bit in range(15):
            term.goto(59 - bit, 17)
            term.write(str((value >> bit) & 1))

    def print_command(self) -> None:
        term = self.terminal
        term.goto(89, 5)
        sign, command, operand, valid = _fields(self._current_value())
        if not valid:
            term.write("!")
        term.write("     -" if sign else "     +")
        term.write(f"{command:02d}     :      {operand:02d}")
        draw_box(term, 88, 4, 114, 6, Color.WHITE, Color.BLACK, "Команда", Color.RED, Color.BLACK)

    def print_big_cell(self, cell: int, x: int, y: int) -> None:
        """Draw a plus sign and four hex digits of ``cell`` in big characters."""
        term = self.terminal
        print_big_char(term, self.font[PLUS_GLYPH], x, y)
        for index in range(4):
            digit = (cell >> 4 * (3 - index)) & 0xF
            print_big_char(term, self.font[digit], x + (index + 1) * 9, y)
        term.goto(x, y + 8)
        term.write(f"Номер редактируемой ячейки: {self.computer.counter:03d}")
        term.reset_color()

    def print_keys(self) -> None:
        term = self.terminal
        for offset, text in enumerate(_KEY_HELP):
            term.goto(85, 20 + offset)
            term.write(text)
        draw_box(term, 79, 19, 114, 25, Color.WHITE, Color.BLACK, "Клавиши", Color.GREEN, Color.BLACK)

    def print_cache(self) -> None:
        term = self.terminal
        for row, line in enumerate(self.computer.cache):
            term.goto(2, 20 + row)
            term.write(f"{line.number}0:")
            for column, value in enumerate(line.values):
                term.goto(6 + column * 6, 20 + row)
                term.write(f"+{value & 0xFFFFFFFF:04X}")

    def record_io(self, address: int, value: int) -> None:
        """Put an I/O event at the top of the log, dropping the oldest."""
        if not 0 <= address < MEMORY_SIZE:
            raise ValueError(f"address {address} out of range")
        self.io_addresses = [address, *self.io_addresses[:IO_HISTORY - 1]]
        self.io_values = [value, *self.io_values[:IO_HISTORY - 1]]

    def print_term(self) -> None:
        term = self.terminal
        draw_box(term, 67, 19, 78, 25, Color.WHITE, Color.BLACK, "IN-OUT", Color.GREEN, Color.BLACK)
        for row, (address, value) in enumerate(zip(self.io_addresses, self.io_values)):
            term.goto(68, 20 + row)
            sign = "-" if value < 0 else "+"
            term.write(f"{address:03d}> {sign}{abs(value):04d}")