import io

from terminal_renderer import RESET, format_pixel, render


def test_format_pixel():
    assert format_pixel((1, 2, 3), cell="#") == (
        "\x1b[38;2;1;2;3m\x1b[48;2;1;2;3m#\x1b[0m"
    )


def test_render_writes_one_line_per_row():
    out = io.StringIO()
    render([[(0, 0, 0), (255, 255, 255)], [(9, 9, 9), (8, 8, 8)]], out, cell="X")
    lines = out.getvalue().split("\n")
    assert lines[-1] == ""
    assert len(lines) == 3
    assert lines[0] == format_pixel((0, 0, 0), "X") + format_pixel((255, 255, 255), "X")
    assert lines[1].count(RESET) == 2


def test_render_nothing():
    out = io.StringIO()
    render([], out)
    assert out.getvalue() == ""


def test_default_cell_is_five_bars():
    assert format_pixel((7, 7, 7)) == "\x1b[38;2;7;7;7m\x1b[48;2;7;7;7m|||||\x1b[0m"
