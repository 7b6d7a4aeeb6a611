"""Error types for the EGA codec and its BMP container."""
from enum import IntEnum


class EGAError(ValueError):
    """Base error for a failed conversion."""


class UnexpectedEof(EGAError, EOFError):
    """A token needs more bytes than remain in the stream."""


class CorruptStream(EGAError):
    """A token crosses a row boundary, or the decoded size is wrong."""


class SizeMismatch(CorruptStream):
    """Decoded byte count differs from width x height."""


class DimensionOverflow(EGAError):
    """Width or height cannot be stored in the 16-bit header."""


class UnsupportedPixelWidth(EGAError):
    """Odd pixel width reached the nibble packer."""


class BitmapError(EGAError):
    """Base error for BMP container problems."""


class NotABitmap(BitmapError):
    """Missing 'BM' signature."""


class InvalidBitmapHeader(BitmapError):
    """Header fields are inconsistent."""


class UnsupportedBitmap(BitmapError):
    """Valid BMP, but not 4 bpp / 16 colours / uncompressed."""


class ExitCode(IntEnum):
    OK = 0
    USAGE = -1
    OPEN = -2
    READ = -3
    NOT_BITMAP = -4
    ALLOC = -5
    BAD_HEADER = -6
    UNSUPPORTED = -7
    WRITE = -8
    CORRUPT = -9


def exit_code_for(exc: BaseException, *, writing: bool = False) -> ExitCode:
    """Map an exception raised during a conversion to its CLI exit code."""
    if isinstance(exc, MemoryError):
        return ExitCode.ALLOC
    if isinstance(exc, NotABitmap):
        return ExitCode.NOT_BITMAP
    if isinstance(exc, (UnsupportedBitmap, UnsupportedPixelWidth, DimensionOverflow)):
        return ExitCode.UNSUPPORTED
    if isinstance(exc, InvalidBitmapHeader):
        return ExitCode.BAD_HEADER
    if isinstance(exc, UnexpectedEof):
        return ExitCode.READ
    if isinstance(exc, CorruptStream):
        return ExitCode.CORRUPT
    if isinstance(exc, FileNotFoundError) or isinstance(exc, PermissionError):
        return ExitCode.WRITE if writing else ExitCode.OPEN
    if isinstance(exc, OSError):
        return ExitCode.WRITE if writing else ExitCode.READ
    return ExitCode.USAGE
