import enum
import logging
import struct
from dataclasses import dataclass, field
from typing import Union

from bmp_errors import (
    BadMagic,
    FileSizeMismatch,
    NegativeWidth,
    TruncatedFile,
    UnknownInfoHeaderVariant,
)

logger = logging.getLogger(__name__)

MAGIC = b"BM"

# File header (14 bytes): magic, file size, 4 reserved bytes, pixel offset
FILE_HDR_SIZE = 0x0E
FILE_HDR_FILE_SIZE_OFFSET = 0x02
FILE_HDR_START_ADDR_OFFSET = 0x0A

# Every info header starts with its own size
INFO_HDR_SIZE_OFFSET = 0x0E

# OS/2 and core headers: unsigned 16-bit geometry
LEGACY_WIDTH_OFFSET = 0x12
LEGACY_HEIGHT_OFFSET = 0x14
LEGACY_BPP_OFFSET = 0x18

# Windows headers: signed 32-bit geometry
MODERN_WIDTH_OFFSET = 0x12
MODERN_HEIGHT_OFFSET = 0x16
MODERN_BPP_OFFSET = 0x1C


class Layout(enum.Enum):
    LEGACY = "legacy"
    MODERN = "modern"


class InfoHeaderKind(enum.Enum):
    """Info header variants, keyed by the size they declare."""

    CORE = 12
    OS2_16 = 16
    OS2 = 64
    INFO = 40
    V4 = 108
    V5 = 124

    @property
    def layout(self):
        if self in (InfoHeaderKind.CORE, InfoHeaderKind.OS2_16, InfoHeaderKind.OS2):
            return Layout.LEGACY
        return Layout.MODERN

    @property
    def label(self):
        return _KIND_LABELS[self]

    @classmethod
    def from_size(cls, size):
        try:
            return cls(size)
        except ValueError:
            raise UnknownInfoHeaderVariant(size) from None


_KIND_LABELS = {
    InfoHeaderKind.CORE: "BITMAPCOREHEADER",
    InfoHeaderKind.OS2_16: "OS22XBITMAPHEADER_16",
    InfoHeaderKind.OS2: "OS22XBITMAPHEADER",
    InfoHeaderKind.INFO: "BITMAPINFOHEADER",
    InfoHeaderKind.V4: "BITMAPV4HEADER",
    InfoHeaderKind.V5: "BITMAPV5HEADER",
}


class Orientation(enum.Enum):
    BOTTOM_UP = "bottom-up"
    TOP_DOWN = "top-down"


@dataclass(frozen=True)
class DecoderConfig:
    # Fail instead of warning when the declared file size is wrong
    strict_file_size: bool = False


@dataclass(frozen=True)
class FileHeader:
    magic: bytes
    file_size: int
    start_addr: int


@dataclass(frozen=True)
class LegacyInfoHeader:
    kind: InfoHeaderKind
    size: int
    width: int
    height: int
    bpp: int


@dataclass(frozen=True)
class ModernInfoHeader:
    kind: InfoHeaderKind
    size: int
    width: int
    # Raw signed value; negative means rows are stored top-down
    height: int
    bpp: int


InfoHeader = Union[LegacyInfoHeader, ModernInfoHeader]


@dataclass(frozen=True)
class ImageGeometry:
    width: int
    height: int
    bpp: int
    orientation: Orientation
    stride: int


@dataclass(frozen=True)
class DecodedImage:
    """A validated BMP header chain plus a borrowed view of the file bytes.

    The view is never copied. Call release() (or use the image as a context
    manager) before closing a memory-mapped buffer it was decoded from.
    """

    file_header: FileHeader
    info_header: InfoHeader
    geometry: ImageGeometry
    buffer: memoryview = field(repr=False, compare=False)

    @property
    def pixel_region_end(self):
        return self.file_header.start_addr + self.geometry.height * self.geometry.stride

    @property
    def metadata(self):
        g = self.geometry
        return {
            "file_size": self.file_header.file_size,
            "data_offset": self.file_header.start_addr,
            "header": self.info_header.kind.label,
            "header_size": self.info_header.size,
            "width": g.width,
            "height": g.height,
            "bpp": g.bpp,
            "orientation": g.orientation.value,
            "row_size": g.stride,
        }

    def describe(self, path):
        fh = self.file_header
        g = self.geometry
        first, second = chr(fh.magic[0]), chr(fh.magic[1])
        return (
            f'"{path}" ({fh.file_size}B) '
            f"'{first}' '{second}' "
            f"{g.width}x{g.height} ({g.stride}B row) {g.bpp}bpp "
            f"{self.info_header.kind.label} ({self.info_header.size}B)"
        )

    def release(self):
        self.buffer.release()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.release()


def calculate_row_size(width, bpp):
    # Each row is padded to a multiple of 4 bytes
    return ((width * bpp + 31) // 32) * 4


def _read(buf, fmt, offset):
    length = struct.calcsize(fmt)
    if offset + length > len(buf):
        raise TruncatedFile(offset, length, len(buf))
    return struct.unpack_from(fmt, buf, offset)[0]


def _parse_file_header(buf):
    if len(buf) < FILE_HDR_SIZE:
        raise TruncatedFile(0, FILE_HDR_SIZE, len(buf))

    magic = bytes(buf[0:2])
    if magic != MAGIC:
        raise BadMagic(magic)

    return FileHeader(
        magic=magic,
        file_size=_read(buf, "<I", FILE_HDR_FILE_SIZE_OFFSET),
        start_addr=_read(buf, "<I", FILE_HDR_START_ADDR_OFFSET),
    )


def _check_file_size(header, actual, config):
    if header.file_size == actual:
        return
    if config.strict_file_size:
        raise FileSizeMismatch(header.file_size, actual)
    logger.warning(
        "Declared file size %d does not match actual size %d",
        header.file_size,
        actual,
    )


def _parse_legacy(buf, kind, size):
    return LegacyInfoHeader(
        kind=kind,
        size=size,
        width=_read(buf, "<H", LEGACY_WIDTH_OFFSET),
        height=_read(buf, "<H", LEGACY_HEIGHT_OFFSET),
        bpp=_read(buf, "<H", LEGACY_BPP_OFFSET),
    )


def _parse_modern(buf, kind, size):
    width = _read(buf, "<i", MODERN_WIDTH_OFFSET)
    height = _read(buf, "<i", MODERN_HEIGHT_OFFSET)
    bpp = _read(buf, "<H", MODERN_BPP_OFFSET)
    if width < 0:
        raise NegativeWidth(width)
    return ModernInfoHeader(kind=kind, size=size, width=width, height=height, bpp=bpp)


_LAYOUT_PARSERS = {
    Layout.LEGACY: _parse_legacy,
    Layout.MODERN: _parse_modern,
}


def _parse_info_header(buf):
    size = _read(buf, "<I", INFO_HDR_SIZE_OFFSET)
    kind = InfoHeaderKind.from_size(size)
    logger.debug("Info header %s (%dB)", kind.label, size)
    return _LAYOUT_PARSERS[kind.layout](buf, kind, size)


def _geometry(info):
    if isinstance(info, ModernInfoHeader) and info.height < 0:
        orientation = Orientation.TOP_DOWN
        height = -info.height
    else:
        # Legacy headers have no sign bit, so they are always bottom-up
        orientation = Orientation.BOTTOM_UP
        height = info.height

    return ImageGeometry(
        width=info.width,
        height=height,
        bpp=info.bpp,
        orientation=orientation,
        stride=calculate_row_size(info.width, info.bpp),
    )


def decode(data, config=None):
    """Decode the header chain of a BMP file held in ``data``.

    ``data`` is any bytes-like object (bytes, bytearray, mmap). It is only
    read, and the returned image keeps a view of it rather than a copy.
    Raises a FormatError subclass when the bytes are not a valid BMP.
    """
    config = config or DecoderConfig()
    # Read-only even when the caller hands in a bytearray
    with memoryview(data) as raw:
        buf = raw.toreadonly()
    try:
        file_header = _parse_file_header(buf)
        _check_file_size(file_header, len(buf), config)
        info_header = _parse_info_header(buf)
    except Exception:
        buf.release()
        raise

    geometry = _geometry(info_header)
    logger.debug(
        "Decoded %dx%d %dbpp %s, stride=%d, pixels at %d",
        geometry.width,
        geometry.height,
        geometry.bpp,
        geometry.orientation.value,
        geometry.stride,
        file_header.start_addr,
    )
    return DecodedImage(
        file_header=file_header,
        info_header=info_header,
        geometry=geometry,
        buffer=buf,
    )
