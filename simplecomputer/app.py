"""Interactive console: key handling, value entry and the main loop."""

from __future__ import annotations

import signal
import sys
from typing import TextIO

from .bigchars import default_font, read_font, write_font
from .computer import MEMORY_SIZE, Flag, SimpleComputer
from .readkey import Key, TerminalMode, read_key, read_value
from .term import Terminal
from .view import FONT_SIZE, ConsoleView

DEFAULT_FONT_FILE = "font.bin"
MIN_ROWS = 26
MIN_COLS = 114


def move_cursor(position: int, key: Key) -> int:
    """Move the selected cell with an arrow key, wrapping around the grid."""
    if key is Key.UP:
        if position <= 9:
            return position + (110 if position >= 8 else 120)
        return position - 10
    if key is Key.RIGHT:
        if (position + 1) % (8 if position >= 120 else 10) == 0:
            return position - (7 if position >= 120 else 9)
        return position + 1
    if key is Key.DOWN:
        if position >= 118:
            return position - (110 if position < 120 else 120)
        return position + 10
    if key is Key.LEFT:
        if position % 10 == 0:
            return position + (7 if position >= 120 else 9)
        return position - 1
    return position


def load_font_file(path) -> list:
    """Read a font file; raise ValueError if it holds too few characters."""
    with open(path, "rb") as stream:
        font = read_font(stream, FONT_SIZE)
    if len(font) < FONT_SIZE:
        raise ValueError(f"font file holds {len(font)} characters, {FONT_SIZE} needed")
    return font


class ConsoleApp:
    """Runs the console: reads keys and edits or executes the machine."""

    def __init__(self, computer: SimpleComputer, view: ConsoleView, input_stream: TextIO | None = None):
        self.computer = computer
        self.view = view
        self.input_stream = sys.stdin if input_stream is None else input_stream
        self.interactive = False
        self.mode: TerminalMode | None = None

    @property
    def terminal(self) -> Terminal:
        return self.view.terminal

    def _goto(self, col: int, row: int) -> None:
        try:
            self.terminal.goto(col, row)
        except ValueError:
            pass

    def _read_input(self, address: int) -> int:
        term = self.terminal
        self._goto(75, 20)
        term.write("      ")
        self.view.print_term()
        if self.mode is not None:
            self.mode.restore()
        self._goto(75, 20)
        term.flush()
        try:
            value = read_value(self.input_stream)
        except ValueError:
            value = 0
        finally:
            if self.mode is not None:
                self.mode.set_regime(False, 30, 0, False, False)
        self.view.record_io(address, value)
        self.view.print_term()
        return value

    def _write_output(self, address: int, value: int) -> None:
        self.view.record_io(address, value)
        self.view.print_term()

    def step(self) -> None:
        self.computer.step(self._read_input, self._write_output)

    def handle_key(self, key: Key) -> None:
        computer = self.computer
        if key is Key.R:
            computer.set_flag(Flag.IT, 0)
            self.interactive = True
        elif key is Key.T:
            if computer.counter >= MEMORY_SIZE - 1:
                computer.counter = 0
            elif self.interactive:
                self.step()
        elif key is Key.I:
            computer.reset()
            self.interactive = False

        if self.interactive:
            return

        if key in (Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT):
            computer.counter = move_cursor(computer.counter, key)
        elif key is Key.L:
            self.load_memory()
        elif key is Key.S:
            self.save_memory()
        elif key is Key.F5:
            self.set_accumulator_value()
        elif key is Key.F6:
            self.set_counter_value()
        elif key is Key.ENTER:
            self.set_cell_value()

    def _ask_filename(self, prompt: str, limit: int) -> str:
        self.terminal.write(prompt)
        self.terminal.flush()
        name = self.input_stream.readline(limit).rstrip("\n")
        self.terminal.clear_screen()
        self._goto(1, 27)
        return name

    def load_memory(self) -> bool:
        """Ask for a file name and load memory from it."""
        name = self._ask_filename("Enter load file name: ", 19)
        try:
            self.computer.load_memory(name)
        except (OSError, ValueError):
            self.terminal.write("\nFailed to load memory               ")
            return False
        self.terminal.write("\nSuuccessful load memory             ")
        return True

    def save_memory(self) -> bool:
        """Ask for a file name and save memory to it."""
        name = self._ask_filename("Enter save file name: ", 100)
        try:
            self.computer.save_memory(name)
        except OSError:
            self.terminal.write("\nFailed to save memory                         ")
            return False
        self.terminal.write("\nSuuccessful saving memory                     ")
        return True

    def _read_hex(self) -> int | None:
        self.terminal.flush()
        try:
            return read_value(self.input_stream)
        except ValueError:
            return None

    def set_accumulator_value(self) -> bool:
        self._goto(67, 2)
        value = self._read_hex()
        if value is None:
            return False
        try:
            self.computer.set_accumulator(value)
        except ValueError:
            return False
        return True

    def set_counter_value(self) -> bool:
        self._goto(74, 5)
        value = self._read_hex()
        if value is None:
            return False
        try:
            self.computer.set_counter(value)
        except ValueError:
            return False
        return True

    def set_cell_value(self) -> bool:
        counter = self.computer.counter
        self._goto(counter % 10 * 6 + 4, counter // 10 + 2)
        value = self._read_hex()
        if value is None:
            return False
        try:
            self.computer.set_memory(counter, value)
        except ValueError:
            return False
        return True

    def _on_alarm(self, signum, frame) -> None:
        self.terminal.flush()
        if self.computer.tick(self._read_input, self._write_output):
            self.view.draw()
            self.terminal.flush()
            signal.alarm(1)

    def run(self, mode: TerminalMode | None = None, fd: int | None = None) -> int:
        """Draw, read keys and run the clock until Escape is pressed."""
        mode = TerminalMode(fd) if mode is None else mode
        self.mode = mode
        mode.save()
        previous = signal.signal(signal.SIGALRM, self._on_alarm)
        try:
            key = None
            while key is not Key.ESC:
                self.view.draw()
                self.terminal.flush()
                key = read_key(mode, fd)
                self.handle_key(key)
                signal.alarm(1)
        finally:
            signal.alarm(0)
            signal.signal(signal.SIGALRM, previous)
            mode.restore()
            self.mode = None
        return 0


def main(argv=None) -> int:
    """Start the console; the optional argument names a font file."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        with open(DEFAULT_FONT_FILE, "wb") as stream:
            write_font(stream, default_font())
    except OSError:
        print("Ошибка открытия файла")
    if not sys.stdout.isatty():
        print("Error: Output is not a terminal")
        return 1
    terminal = Terminal()
    try:
        rows, cols = terminal.screen_size()
    except OSError:
        rows = cols = 0
    if rows < MIN_ROWS or cols < MIN_COLS:
        print("Error: Terminal window is too small")
        return 1
    try:
        font = load_font_file(args[0] if args else DEFAULT_FONT_FILE)
    except OSError:
        print("Ошибка шрифт не найден")
        return 1
    except ValueError:
        print("Ошибка при чтении шрифта из файла")
        return 1
    computer = SimpleComputer()
    view = ConsoleView(computer, terminal, font)
    app = ConsoleApp(computer, view, sys.stdin)
    terminal.clear_screen()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())