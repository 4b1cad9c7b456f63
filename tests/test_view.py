import io

import pytest

from simplecomputer.bigchars import default_font
from simplecomputer.computer import Flag, Opcode, SimpleComputer
from simplecomputer.term import Color, Terminal
from simplecomputer.view import ConsoleView


def make_view(size=(26, 114)):
    computer = SimpleComputer()
    out = io.StringIO()
    view = ConsoleView(computer, Terminal(out, size=size), default_font())
    return view, computer, out


def test_print_cell_shows_sign_command_and_operand():
    view, computer, out = make_view()
    computer.set_memory(13, Opcode.LOAD << 7 | 5)
    view.print_cell(13, Color.GREEN, Color.BLACK)
    text = out.getvalue()
    assert "\033[3;20H" in text
    assert "+3205 " in text


def test_print_memory_highlights_only_current_cell():
    view, computer, out = make_view()
    computer.set_counter(42)
    view.print_memory()
    assert out.getvalue().count("\033[48;5;7m") == 1
    assert "Оперативная память" in out.getvalue()


def test_print_flags_after_reset():
    view, computer, out = make_view()
    view.print_flags()
    assert "  I    _    _    _    _   " in out.getvalue()


def test_print_flags_all_set():
    view, computer, out = make_view()
    for flag in (Flag.IT, Flag.MC, Flag.SF, Flag.ZD, Flag.OO):
        computer.set_flag(flag, 1)
    view.print_flags()
    assert "  I    M    S    Z    O   " in out.getvalue()


def test_print_flags_all_clear():
    view, computer, out = make_view()
    computer.set_flag(Flag.IT, 0)
    view.print_flags()
    assert "  _    _    _    _    _   " in out.getvalue()


def test_print_counters_shows_decimal_and_hex():
    view, computer, out = make_view()
    computer.set_counter(12)
    view.print_counters()
    assert "T: 12        IC: 000C" in out.getvalue()


def test_print_accumulator():
    view, computer, out = make_view()
    computer.set_accumulator(5)
    view.print_accumulator()
    text = out.getvalue()
    assert "sc: +0005    " in text
    assert " hex:0005 " in text


def test_print_decoded_bits():
    view, computer, out = make_view()
    view.print_decoded(5)
    text = out.getvalue()
    assert "dec: 00005 | oct: 00005 | hex: 0005   bin: " in text
    assert "\033[17;59H1" in text
    assert "\033[17;58H0" in text
    assert "\033[17;57H1" in text


def test_print_command_marks_invalid_word():
    view, computer, out = make_view()
    computer.memory[0] = 0x8000
    view.print_command()
    assert "\033[5;89H!" in out.getvalue()


def test_print_command_valid_word_has_no_mark():
    view, computer, out = make_view()
    computer.set_memory(0, Opcode.LOAD << 7 | 5)
    view.print_command()
    assert "!" not in out.getvalue()
    assert "32     :      05" in out.getvalue()


def test_print_big_cell_draws_five_glyphs():
    view, computer, out = make_view()
    view.print_big_cell(0x1234, 67, 9)
    text = out.getvalue()
    assert text.count("\033(0") == 5 * 8
    assert "Номер редактируемой ячейки: 000" in text


def test_print_keys():
    view, computer, out = make_view()
    view.print_keys()
    assert "F5 - Accumulator" in out.getvalue()
    assert "Клавиши" in out.getvalue()


def test_print_cache_lines():
    view, computer, out = make_view()
    computer.cache[0].number = 3
    computer.cache[0].values[0] = 0x1F
    view.print_cache()
    text = out.getvalue()
    assert "\033[20;2H30:" in text
    assert "+001F" in text


def test_record_io_keeps_newest_first():
    view, _, _ = make_view()
    for address in range(6):
        view.record_io(address, address * 2)
    assert view.io_addresses == [5, 4, 3, 2, 1]
    assert view.io_values == [10, 8, 6, 4, 2]


def test_record_io_rejects_bad_address():
    view, _, _ = make_view()
    with pytest.raises(ValueError):
        view.record_io(128, 1)


def test_print_term_shows_log():
    view, _, out = make_view()
    view.record_io(10, 42)
    view.print_term()
    assert "010> +0042" in out.getvalue()


def test_draw_ends_below_panels():
    view, _, out = make_view()
    view.draw()
    assert out.getvalue().endswith("\033[26;1H")


def test_draw_fails_on_small_screen():
    view, _, _ = make_view(size=(20, 80))
    with pytest.raises(ValueError):
        view.draw()


def test_short_font_rejected():
    with pytest.raises(ValueError):
        ConsoleView(SimpleComputer(), Terminal(io.StringIO(), size=(26, 114)), default_font()[:10])