"""Assembler turning ``address COMMAND operand`` lines into memory images."""

from __future__ import annotations

import re
import struct
import sys
from typing import Callable, Iterable

from .computer import MEMORY_SIZE, Opcode

_LINE = re.compile(r"\s*([+-]?\d+)(?!\d)\s*(\S+)\s+([+-]?\d+)")
_IMAGE = struct.Struct(f"<{MEMORY_SIZE}i")


def command_code(name: str) -> int:
    """Return the opcode for a mnemonic, or 0 if it is unknown."""
    try:
        return Opcode[name]
    except KeyError:
        return 0


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _assemble(lines: Iterable[str], on_error: Callable[[str], None]) -> list[int]:
    memory = [0] * MEMORY_SIZE
    for line in lines:
        match = _LINE.match(line)
        if match is None:
            on_error(line)
            continue
        address = int(match.group(1))
        if not 0 <= address < MEMORY_SIZE:
            raise ValueError(f"address {address} out of range in line {line!r}")
        value = int(match.group(3))
        memory[address] = _to_int32(value | command_code(match.group(2)) << 7)
    return memory


def assemble(lines: Iterable[str]) -> list[int]:
    """Build a memory image; lines that do not parse are skipped."""
    return _assemble(lines, lambda line: None)


def assemble_file(source, target) -> list[int]:
    """Assemble ``source`` into the binary image ``target`` and return it.

    Prints ERROR for every line that does not parse; an unreadable source
    yields an image of zeros.
    """
    try:
        with open(source, encoding="utf-8", errors="replace") as stream:
            memory = _assemble(stream, lambda line: print("ERROR"))
    except OSError:
        print("Error opening file.")
        memory = [0] * MEMORY_SIZE
    with open(target, "wb") as stream:
        stream.write(_IMAGE.pack(*memory))
    return memory


def main(argv=None) -> int:
    """Command line: ``sat SOURCE TARGET``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) == 3 and args[0] == "sat":
        assemble_file(args[1], args[2])
        return 0
    return 1


if __name__ == "__main__":
    raise SystemExit(main())