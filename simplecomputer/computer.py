"""The simple computer: memory, flags, registers, ALU, control unit and cache."""

from __future__ import annotations

import contextlib
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Optional

MEMORY_SIZE = 128
WORD_MASK = 0x7FFF
CACHE_LINES = 5
CACHE_LINE_SIZE = 10

_CELL = struct.Struct("<i")

ReadInput = Callable[[int], int]
WriteOutput = Callable[[int, int], None]


class Flag(IntEnum):
    """Bits of the flag register."""

    IT = 0x001  # clock ignored / execution stopped
    SF = 0x010
    OO = 0x100  # overflow
    MC = 0x1000  # bad command
    ZD = 0x10000  # division by zero


class Opcode(IntEnum):
    """Instructions the control unit knows."""

    READ = 0x10
    WRITE = 0x11
    LOAD = 0x20
    STORE = 0x21
    ADD = 0x30
    SUB = 0x31
    DIVIDE = 0x32
    MUL = 0x33
    JUMP = 0x40
    JNEG = 0x41
    JZ = 0x42
    HALT = 0x43
    JNS = 0x55
    CHL = 0x60


_VALID_COMMANDS = frozenset(
    (
        0x00, 0x01, 0x0A, 0x0B, 0x14, 0x15, 0x1E, 0x1F, 0x20, 0x21,
        0x28, 0x29, 0x2A, 0x2B, 0x33, 0x34, 0x35, 0x36, 0x37, 0x38,
        0x39, 0x3A, 0x3B, 0x3C, 0x3D, 0x3E, 0x3F, 0x40, 0x41, 0x42,
        0x43, 0x44, 0x45, 0x46, 0x47, 0x48, 0x49, 0x4A, 0x4B, 0x4C,
    )
)

_ALU_COMMANDS = frozenset((Opcode.ADD, Opcode.SUB, Opcode.DIVIDE, Opcode.MUL))


def encode_command(sign: int, command: int, operand: int) -> int:
    """Pack a command and operand into a memory word."""
    if command not in _VALID_COMMANDS:
        raise ValueError(f"unknown command {command:#x}")
    if sign != 0:
        raise ValueError("only positive commands can be encoded")
    if not 0 <= operand <= 127:
        raise ValueError(f"operand {operand} out of range")
    return (command << 7) | operand


def decode_command(value: int) -> tuple[int, int, int]:
    """Split a memory word into ``(sign, command, operand)``."""
    if value & ~WORD_MASK:
        raise ValueError(f"value {value:#x} is not a command word")
    sign = 1 if value & 0x4000 else 0
    return sign, (value & 0x3F80) >> 7, value & 0x007F


def validate_command(command: int) -> bool:
    """Tell whether the command field of a word holds a known command."""
    shifted = (command << 1) & 0xFFFFFFFF
    if shifted & 0x80000000:
        shifted -= 1 << 32
    return (shifted >> 8) in _VALID_COMMANDS


def _truncating_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


@dataclass
class CacheLine:
    """One line of the instruction cache: ten cells of one memory row."""

    values: list[int] = field(default_factory=lambda: [0] * CACHE_LINE_SIZE)
    number: int = 0
    uses: int = 0


class SimpleComputer:
    """Memory, accumulator, instruction counter, flags and cache of the machine."""

    def __init__(self) -> None:
        self.memory: list[int] = [0] * MEMORY_SIZE
        self.flags = 0
        self.accumulator = 0
        self.counter = 0
        self.tacts = 0
        self.cache = [CacheLine() for _ in range(CACHE_LINES)]
        self._wait_tacts = 0
        self.reset_flags()

    # memory

    def reset_memory(self) -> None:
        self.memory[:] = [0] * MEMORY_SIZE

    def set_memory(self, address: int, value: int) -> None:
        if not 0 <= address < MEMORY_SIZE:
            raise ValueError(f"address {address} out of range")
        if not 0 <= value <= WORD_MASK:
            raise ValueError(f"value {value} out of range")
        self.memory[address] = value

    def get_memory(self, address: int) -> int:
        if not 0 <= address < MEMORY_SIZE:
            raise ValueError(f"address {address} out of range")
        return self.memory[address]

    def save_memory(self, path) -> None:
        """Write all cells as little-endian 32-bit integers."""
        with open(path, "wb") as stream:
            stream.write(b"".join(_CELL.pack(cell) for cell in self.memory))

    def load_memory(self, path) -> None:
        """Read cells written by :meth:`save_memory`; missing cells become 0."""
        with open(path, "rb") as stream:
            data = stream.read(MEMORY_SIZE * _CELL.size)
        whole = len(data) - len(data) % _CELL.size
        if whole == 0:
            raise ValueError("memory image holds no cells")
        values = [cell for (cell,) in _CELL.iter_unpack(data[:whole])]
        values.extend([0] * (MEMORY_SIZE - len(values)))
        self.memory[:] = values

    # flags and registers

    def reset_flags(self) -> None:
        self.flags = int(Flag.IT)

    def set_flag(self, flag: int, value: int) -> None:
        mask = int(Flag(flag))
        if value == 1:
            self.flags |= mask
        elif value == 0:
            self.flags &= ~mask
        else:
            raise ValueError("flag value must be 0 or 1")

    def get_flag(self, flag: int) -> int:
        """Return 1 if ``flag`` is set, else 0; unknown flags raise ValueError."""
        mask = int(Flag(flag))
        is_set = (self.flags & mask) == mask
        return int(is_set)

    def set_accumulator(self, value: int) -> None:
        if not -128 <= value <= 128:
            raise ValueError(f"accumulator value {value} out of range")
        self.accumulator = value

    def set_counter(self, value: int) -> None:
        if not 0 <= value < MEMORY_SIZE:
            raise ValueError(f"counter value {value} out of range")
        self.counter = value

    def reset_defaults(self) -> None:
        """Clear memory and registers and stop execution."""
        self.reset_memory()
        self.set_accumulator(0)
        self.set_counter(0)
        for flag in (Flag.OO, Flag.MC, Flag.SF, Flag.ZD):
            self.set_flag(flag, 0)
        self.set_flag(Flag.IT, 1)

    # execution

    def alu(self, command: int, operand: int) -> None:
        """Apply an arithmetic command; raise ArithmeticError on failure."""
        value = self.memory[operand]
        if command == Opcode.ADD:
            self.accumulator = (self.accumulator + value) & WORD_MASK
        elif command == Opcode.SUB:
            self.accumulator = (self.accumulator - value) & WORD_MASK
        elif command == Opcode.DIVIDE:
            if value == 0:
                self.set_flag(Flag.ZD, 1)
                raise ZeroDivisionError("division by zero")
            self.accumulator = _truncating_div(self.accumulator, value)
        elif command == Opcode.MUL:
            self.accumulator = (self.accumulator * value) & WORD_MASK
        elif command == Opcode.CHL:
            self.accumulator = (value << 1) & WORD_MASK
        if not 0 <= self.accumulator <= WORD_MASK:
            self.set_flag(Flag.OO, 1)
            raise OverflowError(f"accumulator {self.accumulator} out of range")
        self.set_flag(Flag.OO, 0)

    def _command_error(self) -> None:
        self.set_flag(Flag.MC, 1)
        self.set_flag(Flag.IT, 1)

    def step(
        self,
        read_input: Optional[ReadInput] = None,
        write_output: Optional[WriteOutput] = None,
    ) -> None:
        """Execute the instruction at the counter and advance it.

        ``read_input(address)`` supplies a value for READ; a ValueError from it
        stores 0. ``write_output(address, value)`` receives WRITE output.
        """
        if not 0 <= self.counter < MEMORY_SIZE:
            self._command_error()
            return
        try:
            _, command, operand = decode_command(self.memory[self.counter])
        except ValueError:
            self._command_error()
            return

        if command in _ALU_COMMANDS:
            try:
                self.alu(command, operand)
            except ArithmeticError:
                self.set_flag(Flag.IT, 1)
        else:
            acc = self.accumulator
            match command:
                case Opcode.READ:
                    try:
                        value = read_input(operand) if read_input is not None else 0
                    except ValueError:
                        value = 0
                    with contextlib.suppress(ValueError):
                        self.set_memory(operand, value)
                    self.set_flag(Flag.IT, 0)
                case Opcode.WRITE:
                    if write_output is not None:
                        write_output(operand, self.memory[operand])
                case Opcode.LOAD:
                    with contextlib.suppress(ValueError):
                        self.set_accumulator(self.memory[operand])
                case Opcode.STORE:
                    with contextlib.suppress(ValueError):
                        self.set_memory(operand, acc)
                case Opcode.JUMP:
                    self._jump(operand)
                case Opcode.JNEG:
                    if (acc >> 14) & 1 and acc != 0:
                        self._jump(operand)
                case Opcode.JZ:
                    if acc == 0:
                        self._jump(operand)
                case Opcode.JNS:
                    if (acc >> 14) == 0 and acc != 0:
                        self._jump(operand)
                case _:
                    self.set_flag(Flag.IT, 1)
        self.counter += 1

    def _jump(self, operand: int) -> None:
        with contextlib.suppress(ValueError):
            self.set_counter(operand - 1)

    def tick(
        self,
        read_input: Optional[ReadInput] = None,
        write_output: Optional[WriteOutput] = None,
    ) -> bool:
        """Handle one clock pulse; return whether the machine was running."""
        if self.get_flag(Flag.IT):
            return False
        if not self._wait_tacts:
            self.tacts = 0
        elif self.tacts < 10:
            self.tacts += 1
        else:
            self.tacts = 0
            self._wait_tacts = 0
        if not self._wait_tacts:
            self.step(read_input, write_output)
        return True

    def reset(self) -> None:
        """Zero the accumulator and the instruction counter."""
        self.set_accumulator(0)
        self.set_counter(0)

    # cache

    def cache_check(self, instruction: int) -> bool:
        """Look ``instruction`` up in the cache.

        On a hit the line's use count grows and False is returned; on a miss
        the least used line is refilled and True is returned.
        """
        victim = self.cache[0]
        for line in self.cache:
            if line.uses < victim.uses:
                victim = line
            if instruction in line.values:
                line.uses += 1
                return False
        self.cache_load(victim)
        return True

    def cache_load(self, line: CacheLine) -> None:
        """Fill ``line`` with the memory row that holds the counter."""
        line.number = self.counter // CACHE_LINE_SIZE
        line.uses = 0
        start = line.number * CACHE_LINE_SIZE
        values = self.memory[start:start + CACHE_LINE_SIZE]
        line.values = values + [0] * (CACHE_LINE_SIZE - len(values))