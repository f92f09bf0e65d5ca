import argparse
import logging
import sys

from bmp_errors import BitmapError
from bmp_file import open_buffer
from bmp_parser import DecoderConfig, decode
from bmp_sampler import rows
from terminal_renderer import DEFAULT_CELL, render

logger = logging.getLogger("bmpview")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="bmpview",
        description="Show 8-bit BMP images in a true-colour terminal",
    )
    parser.add_argument("paths", nargs="*", help="BMP files to show")
    parser.add_argument("-i", "--info", action="store_true",
                        help="only print header information")
    parser.add_argument("--strict", action="store_true",
                        help="treat a wrong declared file size as an error")
    parser.add_argument("--gui", action="store_true",
                        help="show the images in a window (needs PyQt5)")
    parser.add_argument("--cell", default=DEFAULT_CELL,
                        help="characters drawn for each pixel (default: %(default)r)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="more logging (-v info, -vv debug)")
    return parser


def setup_logging(verbosity):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def show_file(path, config, info_only=False, cell=DEFAULT_CELL, out=None):
    """Decode one file and print it. Raises BitmapError on failure."""
    out = out or sys.stdout
    with open_buffer(path) as data, decode(data, config) as image:
        if info_only:
            print(image.describe(path), file=out)
        else:
            render(rows(image), out, cell)
    logger.info("Displayed %s", path)


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    config = DecoderConfig(strict_file_size=args.strict)

    if args.gui and not args.info:
        # Qt is only loaded when a window is requested
        from viewer import show_images
        return 1 if show_images(args.paths, config) else 0

    failed = 0
    for path in args.paths:
        try:
            show_file(path, config, info_only=args.info, cell=args.cell)
        except BitmapError as e:
            print(f"bitmap error: {path}: {e}", file=sys.stderr)
            failed += 1

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
