"""Errors raised while opening, decoding, or sampling a BMP file."""


class BitmapError(Exception):
    pass


class FileAccessError(BitmapError):
    # Raised by the file layer, never by the decoder itself
    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot open {path}: {reason}")


class FormatError(BitmapError, ValueError):
    """The bytes are not a BMP file this viewer can decode."""


class TruncatedFile(FormatError):
    def __init__(self, offset, length, available):
        self.offset = offset
        self.length = length
        self.available = available
        super().__init__(
            f"truncated file: need {length} bytes at offset {offset}, "
            f"only {available} available"
        )


class BadMagic(FormatError):
    def __init__(self, magic):
        self.magic = bytes(magic)
        super().__init__(f"bad magic word {self.magic!r}, expected b'BM'")


class UnknownInfoHeaderVariant(FormatError):
    def __init__(self, size):
        self.size = size
        super().__init__(f"unknown info header variant ({size}B)")


class FileSizeMismatch(FormatError):
    def __init__(self, declared, actual):
        self.declared = declared
        self.actual = actual
        super().__init__(
            f"declared file size {declared}B does not match actual size {actual}B"
        )


class NegativeWidth(FormatError):
    def __init__(self, width):
        self.width = width
        super().__init__(f"negative image width {width}")


class TruncatedPixelData(FormatError):
    def __init__(self, required, available):
        self.required = required
        self.available = available
        super().__init__(
            f"truncated pixel data: pixel region ends at byte {required}, "
            f"file has {available}"
        )


class UnsupportedDepth(FormatError):
    def __init__(self, bpp):
        self.bpp = bpp
        super().__init__(f"unsupported depth: {bpp}bpp (only 8bpp is supported)")
