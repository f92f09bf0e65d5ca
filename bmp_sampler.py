import logging

from bmp_errors import TruncatedPixelData, UnsupportedDepth
from bmp_parser import Orientation

logger = logging.getLogger(__name__)

SUPPORTED_BPP = (8,)


def _gray(sample):
    return (sample, sample, sample)


class PixelRows:
    """Rows of RGB tuples in display order (top row first).

    Re-iterable: every iteration walks the pixel region again from the top.
    """

    def __init__(self, image):
        g = image.geometry
        if g.bpp not in SUPPORTED_BPP:
            raise UnsupportedDepth(g.bpp)

        end = image.pixel_region_end
        if end > len(image.buffer):
            raise TruncatedPixelData(end, len(image.buffer))

        self._buffer = image.buffer
        self._width = g.width
        self._height = g.height
        self._stride = g.stride

        start = image.file_header.start_addr
        # On-disk rows run bottom row first unless the height was negative
        if g.orientation is Orientation.BOTTOM_UP:
            self._first = start + (g.height - 1) * g.stride
            self._step = -g.stride
        else:
            self._first = start
            self._step = g.stride

    def __len__(self):
        return self._height

    def row(self, y):
        if not 0 <= y < self._height:
            raise IndexError(f"row {y} out of range for height {self._height}")
        row_start = self._first + y * self._step
        samples = self._buffer[row_start:row_start + self._width]
        return [_gray(v) for v in samples]

    def __iter__(self):
        for y in range(self._height):
            yield self.row(y)


def rows(image):
    """Return the pixel rows of ``image`` top to bottom.

    Raises UnsupportedDepth for anything but 8bpp and TruncatedPixelData when
    the pixel region runs past the end of the buffer.
    """
    pixel_rows = PixelRows(image)
    logger.debug("Sampling %d rows of %d pixels", len(pixel_rows), image.geometry.width)
    return pixel_rows
