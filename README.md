# simplecomputer

An emulator of a small educational computer. The machine has:

- 128 memory cells of 15 bits,
- an accumulator,
- an instruction counter,
- a flags register,
- a five-line instruction cache.

The package has two commands. The first is an interactive full-screen console
for a terminal. The second is an assembler that turns text programs into
memory images the console can load.

It needs a POSIX system, because keyboard input goes through `termios`. It
depends on nothing outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## The console

```
simplecomputer [FONT_FILE]
```

The console needs a real terminal of at least 114 columns by 26 rows. If
standard output is not a terminal, or the window is too small, it prints an
error and exits with status 1.

At start it writes the built-in big-digit font to `font.bin` in the current
directory. It then reads the font from `FONT_FILE`, or from `font.bin` when no
file is given. A font file that is missing, or that holds fewer than 18
characters, stops the console with an error.

The screen shows these areas:

- the memory grid, with the cell at the instruction counter highlighted;
- the accumulator;
- the instruction counter;
- the flags;
- the current cell in decimal, octal, hex and binary;
- the current command;
- the current cell in big digits;
- the cache;
- a log of the last five input/output events;
- a key summary.

Keys:

| Key    | Action                                                                 |
|--------|------------------------------------------------------------------------|
| arrows | move the selected cell (the instruction counter), wrapping at the edges |
| Enter  | type a new hexadecimal value for the selected cell                     |
| F5     | type a new accumulator value (hexadecimal, -128 to 128)                |
| F6     | type a new instruction counter value (hexadecimal, 0 to 127)           |
| l      | load memory from a file name that you type                             |
| s      | save memory to a file name that you type                               |
| r      | clear the IT flag and enter run mode; the clock then ticks once a second |
| t      | in run mode, execute one instruction; at cell 127 or beyond, go back to cell 0 |
| i      | zero the accumulator and instruction counter and leave run mode        |
| Esc    | quit                                                                   |

In run mode the editing keys (arrows, Enter, F5, F6, l, s) are ignored. Press
`i` to leave run mode.

A READ instruction asks for a hexadecimal value. A value that cannot be
stored becomes 0. The value goes into the input/output log, and so does every
WRITE instruction.

## The assembler

```
simplecomputer-asm sat program.sa program.bin
```

Each source line has the form `ADDRESS COMMAND OPERAND`. For example:

```
0 READ 10
1 LOAD 10
2 ADD 11
3 STORE 12
4 WRITE 12
5 HALT 0
```

The known mnemonics are READ, WRITE, LOAD, STORE, ADD, SUB, DIVIDE, MUL,
JUMP, JNEG, JZ, JNS, CHL and HALT. An unknown mnemonic assembles with command
code 0.

The assembler prints `ERROR` for every line that does not parse and skips it.
An address outside 0–127 raises `ValueError`. If the source cannot be opened,
it prints `Error opening file.` and writes an image of zeros.

The output is always 128 little-endian signed 32-bit integers. With any
arguments other than `sat SOURCE TARGET`, the command exits with status 1.

## Library use

```python
from simplecomputer.assembler import assemble
from simplecomputer.computer import SimpleComputer

computer = SimpleComputer()
for address, value in enumerate(assemble(["0 LOAD 5", "1 ADD 6", "2 HALT 0"])):
    computer.set_memory(address, value)
computer.set_memory(5, 7)
computer.set_memory(6, 35)

computer.step()   # LOAD 5
computer.step()   # ADD 6
print(computer.accumulator)   # 42
```

### Running and stepping

- `SimpleComputer.step(read_input, write_output)` executes the instruction at
  the counter and then advances the counter. It takes two optional callables.
  `read_input(address)` supplies the value for READ. `write_output(address,
  value)` receives the output of WRITE.
- `tick()` handles one clock pulse. It does nothing while the `Flag.IT` flag
  is set.
- Errors raise `ValueError`: bad addresses, values out of range, unknown
  flags, and empty memory images.

### Modules

- `simplecomputer.term`: `Terminal` writes ANSI cursor, colour and clear
  sequences; `Color` names the eight base colours.
- `simplecomputer.bigchars`: the 8x8 `BigChar` bitmap, `draw_box`,
  `print_big_char`, `default_font`, `write_font` and `read_font`. A font file
  holds a 32-bit character count, then two 32-bit words per character.
- `simplecomputer.readkey`: `Key`, `decode_key`, `read_key`, `parse_value`,
  `read_value` and `TerminalMode`, which saves, restores and switches the
  terminal line discipline.
- `simplecomputer.computer`: `SimpleComputer`, `Flag`, `Opcode`, `CacheLine`,
  and `encode_command`, `decode_command` and `validate_command`.
  - A word holds the sign in bit 14, the command in bits 7–13 and the operand
    in bits 0–6.
  - `save_memory` writes 128 little-endian 32-bit integers.
  - `load_memory` reads them back and fills cells missing from a short file
    with 0.
- `simplecomputer.assembler`: `command_code`, `assemble`, `assemble_file` and
  the `main` entry point of `simplecomputer-asm`.
- `simplecomputer.view`: `ConsoleView` draws the console screen.
- `simplecomputer.app`: `ConsoleApp` runs the console. The module also holds
  `move_cursor`, `load_font_file` and the `main` entry point of
  `simplecomputer`.