import sys

ESC = "\x1b"
RESET = f"{ESC}[0m"
DEFAULT_CELL = "|||||"


def format_pixel(rgb, cell=DEFAULT_CELL):
    # Same colour for foreground and background so the glyph fills the cell
    r, g, b = rgb
    return f"{ESC}[38;2;{r};{g};{b}m{ESC}[48;2;{r};{g};{b}m{cell}{RESET}"


def render(pixel_rows, stream=None, cell=DEFAULT_CELL):
    """Write rows of RGB tuples to ``stream`` as 24-bit colour escapes."""
    stream = stream or sys.stdout
    for row in pixel_rows:
        stream.write("".join(format_pixel(rgb, cell) for rgb in row))
        stream.write("\n")
    stream.flush()
