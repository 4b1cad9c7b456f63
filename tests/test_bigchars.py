import io

import pytest

from simplecomputer.bigchars import (
    BigChar,
    default_font,
    display_width,
    draw_box,
    print_alt,
    print_big_char,
    read_font,
    write_font,
)
from simplecomputer.term import Color, Terminal


def make_terminal(rows=30, cols=120):
    stream = io.StringIO()
    return Terminal(stream, (rows, cols)), stream


def test_set_then_get_every_pixel():
    char = BigChar()
    for y in range(8):
        for x in range(8):
            char.set_pixel(x, y, 1)
            assert char.get_pixel(x, y) == 1
    assert char.top == 0xFFFFFFFF
    assert char.bottom == 0xFFFFFFFF
    for y in range(8):
        for x in range(8):
            char.set_pixel(x, y, 0)
    assert (char.top, char.bottom) == (0, 0)


def test_set_pixel_touches_only_that_pixel():
    char = BigChar()
    char.set_pixel(3, 5, 1)
    lit = [(x, y) for y in range(8) for x in range(8) if char.get_pixel(x, y)]
    assert lit == [(3, 5)]
    assert char.top == 0


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (8, 0), (0, 8)])
def test_pixel_out_of_range(x, y):
    char = BigChar()
    with pytest.raises(ValueError):
        char.get_pixel(x, y)
    with pytest.raises(ValueError):
        char.set_pixel(x, y, 1)


def test_set_pixel_rejects_bad_value():
    char = BigChar()
    with pytest.raises(ValueError):
        char.set_pixel(0, 0, 2)
    assert (char.top, char.bottom) == (0, 0)


def test_rows_reflect_pixels():
    char = BigChar()
    char.set_pixel(2, 6, 1)
    rows = char.rows()
    assert len(rows) == 8
    assert all(len(row) == 8 for row in rows)
    assert rows[6][2] == "a"
    assert "".join(rows).count("a") == 1


def test_default_font_values():
    font = default_font()
    assert len(font) == 18
    assert font[0] == BigChar(0xC3C3C3FF, 0xFFC3C3C3)
    assert font[16] == BigChar(0xFF181800, 0x001818FF)


def test_default_font_zero_top_row_is_full():
    assert default_font()[0].rows()[0] == "aaaaaaaa"


def test_font_round_trip():
    font = default_font()
    buffer = io.BytesIO()
    write_font(buffer, font)
    buffer.seek(0)
    assert read_font(buffer, len(font)) == font


def test_font_file_starts_with_count():
    buffer = io.BytesIO()
    write_font(buffer, default_font()[:2])
    data = buffer.getvalue()
    assert data[:4] == (2).to_bytes(4, "little")
    assert len(data) == 4 + 2 * 8


def test_read_font_limits_count():
    buffer = io.BytesIO()
    write_font(buffer, default_font())
    buffer.seek(0)
    assert read_font(buffer, 5) == default_font()[:5]


def test_read_font_ignores_partial_character():
    buffer = io.BytesIO()
    write_font(buffer, default_font()[:3])
    truncated = io.BytesIO(buffer.getvalue()[:-3])
    assert read_font(truncated, 18) == default_font()[:2]


def test_read_font_without_header():
    with pytest.raises(ValueError):
        read_font(io.BytesIO(b"\x01\x00"), 18)


def test_display_width_counts_characters_not_bytes():
    header = "Кэш"
    assert display_width(header) == len(header)
    assert display_width(header.encode("utf-8")) == len(header)
    assert len(header.encode("utf-8")) > display_width(header)


def test_print_alt_wraps_in_charset_switch():
    term, stream = make_terminal()
    print_alt(term, "q")
    assert stream.getvalue() == "\033(0q\033(B"


def test_draw_box_corners_and_sides():
    term, stream = make_terminal()
    draw_box(term, 1, 1, 10, 5, Color.WHITE, Color.BLACK, None, Color.RED, Color.BLACK)
    out = stream.getvalue()
    for corner in "lkmj":
        assert out.count(f"\033(0{corner}\033(B") == 1
    assert out.count("\033(0x\033(B") == 2 * (5 - 1 - 1)
    assert out.count("\033(0q\033(B") == 2 * (10 - 1 - 1)
    assert out.endswith("\033[0m")


def test_draw_box_swaps_coordinates():
    first, first_out = make_terminal()
    second, second_out = make_terminal()
    draw_box(first, 1, 1, 10, 5, Color.WHITE, Color.BLACK, "Hi", Color.RED, Color.BLACK)
    draw_box(second, 10, 5, 1, 1, Color.WHITE, Color.BLACK, "Hi", Color.RED, Color.BLACK)
    assert first_out.getvalue() == second_out.getvalue()


def test_draw_box_header():
    term, stream = make_terminal()
    draw_box(term, 1, 1, 30, 5, Color.WHITE, Color.BLACK, "Кэш", Color.GREEN, Color.BLACK)
    assert " Кэш " in stream.getvalue()


@pytest.mark.parametrize(
    "coords", [(1, 1, 2, 5), (1, 1, 10, 2), (-1, 1, 10, 5), (1, 1, 121, 5), (1, 1, 10, 31)]
)
def test_draw_box_rejects_bad_boxes(coords):
    term, stream = make_terminal()
    with pytest.raises(ValueError):
        draw_box(term, *coords, Color.WHITE, Color.BLACK, None, Color.RED, Color.BLACK)
    assert stream.getvalue() == ""


def test_print_big_char_writes_each_row():
    term, stream = make_terminal()
    char = default_font()[8]
    print_big_char(term, char, 5, 5, Color.BLACK, Color.BLACK)
    out = stream.getvalue()
    for row in char.rows():
        assert f"\033(0{row}\033(B" in out
    assert "38;5" not in out


def test_print_big_char_applies_colour():
    term, stream = make_terminal()
    print_big_char(term, BigChar(), 1, 1, Color.RED, Color.BLACK)
    assert stream.getvalue().startswith("\033[38;5;1m")


def test_print_big_char_out_of_screen():
    term, _ = make_terminal(rows=10, cols=10)
    with pytest.raises(ValueError):
        print_big_char(term, BigChar(), 5, 1, Color.BLACK, Color.BLACK)