import os
import struct

import pytest

# Qt tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

LEGACY_SIZES = (12, 16, 64)


def build_bmp(width, height, bpp=8, header_size=40, pixel_data=b"",
              magic=b"BM", start_addr=None, file_size=None):
    """Assemble a BMP file in memory with the given header fields."""
    legacy = header_size in LEGACY_SIZES
    info = bytearray(max(header_size, 12 if legacy else 16))
    struct.pack_into("<I", info, 0, header_size)
    if legacy:
        struct.pack_into("<HHHH", info, 4, width, height, 1, bpp)
    else:
        struct.pack_into("<iiHH", info, 4, width, height, 1, bpp)

    if start_addr is None:
        start_addr = 14 + len(info)
    gap = bytes(max(0, start_addr - 14 - len(info)))
    body = bytes(info) + gap + bytes(pixel_data)

    if file_size is None:
        file_size = 14 + len(body)
    file_header = magic + struct.pack("<IHHI", file_size, 0, 0, start_addr)
    return file_header + body


@pytest.fixture
def make_bmp():
    return build_bmp


@pytest.fixture
def gray_2x2(make_bmp):
    # Two rows of two pixels, each row padded to four bytes
    def _make(height=-2, **kwargs):
        pixels = bytes([10, 20, 0, 0, 30, 40, 0, 0])
        return make_bmp(2, height, pixel_data=pixels, **kwargs)
    return _make
