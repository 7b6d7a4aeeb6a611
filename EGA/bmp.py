import struct

import numpy as np

from bitpack import pack_nibbles, unpack_nibbles
from errors import (InvalidBitmapHeader, NotABitmap, UnexpectedEof,
                    UnsupportedBitmap)

# Default EGA/VGA 16 colour palette, (R, G, B)
EGA_PALETTE = (
    (0x00, 0x00, 0x00), (0x00, 0x00, 0xaa), (0x00, 0xaa, 0x00), (0x00, 0xaa, 0xaa),
    (0xaa, 0x00, 0x00), (0xaa, 0x00, 0xaa), (0xaa, 0x55, 0x00), (0xaa, 0xaa, 0xaa),
    (0x55, 0x55, 0x55), (0x55, 0x55, 0xff), (0x55, 0xff, 0x55), (0x55, 0xff, 0xff),
    (0xff, 0x55, 0x55), (0xff, 0x55, 0xff), (0xff, 0xff, 0x55), (0xff, 0xff, 0xff),
)

SIGNATURE = b"BM"

# BITMAPFILEHEADER (little-endian):
# signature(2s) file_size(u32) reserved(u32) image_offset(u32)
FILE_HDR_FMT = "<2sIII"
FILE_HDR_SIZE = struct.calcsize(FILE_HDR_FMT)

# BITMAPINFOHEADER:
# header_size(u32) width(i32) height(i32) planes(u16) bpp(u16)
# compression(u32) bitmap_size(u32) xres(i32) yres(i32)
# num_colors(u32) important_colors(u32)
INFO_HDR_FMT = "<IiiHHIIiiII"
INFO_HDR_SIZE = struct.calcsize(INFO_HDR_FMT)

PALETTE_SIZE = 16 * 4
DPI96 = 3780  # pixels per metre


def row_stride(width: int) -> int:
    """Bytes per 4 bpp row, padded to 32 bits."""
    return ((width * 4 + 31) // 32) * 4


def read_bmp(f):
    """
    Read a 16 colour, uncompressed BMP.
    Returns (pixels, bottom_up): pixels is uint8 (height, width) with rows in
    file order; bottom_up tells whether file row 0 is the bottom of the image.
    The palette is ignored; the standard EGA palette is assumed.
    """
    data = f.read(FILE_HDR_SIZE)
    if len(data) < 2 or data[:2] != SIGNATURE:
        raise NotABitmap("not a BMP file (bad signature)")
    if len(data) != FILE_HDR_SIZE:
        raise UnexpectedEof("Malformed BMP: file header truncated")
    _, _, reserved, image_offset = struct.unpack(FILE_HDR_FMT, data)

    data = f.read(INFO_HDR_SIZE)
    if len(data) != INFO_HDR_SIZE:
        raise UnexpectedEof("Malformed BMP: info header truncated")
    (header_size, width, height, planes, bpp,
     compression, _, _, _, num_colors, _) = struct.unpack(INFO_HDR_FMT, data)

    if header_size != INFO_HDR_SIZE or planes != 1 or reserved != 0:
        raise InvalidBitmapHeader(
            f"invalid header (size={header_size}, planes={planes}, reserved={reserved})")
    if bpp != 4 or num_colors not in (0, 16) or compression != 0:
        raise UnsupportedBitmap(
            f"unsupported BMP: {bpp} bpp, {num_colors} colours, compression {compression}")
    if width <= 0 or height == 0:
        raise InvalidBitmapHeader(f"invalid dimensions {width}x{height}")

    bottom_up = height > 0
    height = abs(height)
    stride = row_stride(width)

    f.seek(image_offset)
    raw = f.read(stride * height)
    if len(raw) != stride * height:
        raise UnexpectedEof("Malformed BMP: pixel data truncated")

    rows = np.frombuffer(raw, dtype=np.uint8).reshape(height, stride)
    packed = rows[:, :(width + 1) // 2]
    pixels = unpack_nibbles(packed)[:, :width]
    return np.ascontiguousarray(pixels), bottom_up


def write_bmp(f, pixels: np.ndarray, *, top_down: bool = False):
    """
    pixels: uint8 (height, width) in top-down display order.
    Rows are written bottom to top unless top_down is set (negative height).
    """
    px = np.asarray(pixels, dtype=np.uint8)
    if px.ndim != 2:
        raise ValueError("Image must be a 2D (height, width) array")
    height, width = px.shape
    stride = row_stride(width)
    image_size = stride * height
    image_offset = FILE_HDR_SIZE + INFO_HDR_SIZE + PALETTE_SIZE

    if width % 2:
        px = np.pad(px, ((0, 0), (0, 1)))
    packed = pack_nibbles(px)
    rows = np.zeros((height, stride), dtype=np.uint8)
    rows[:, :packed.shape[1]] = packed
    if not top_down:
        rows = rows[::-1]

    f.write(struct.pack(FILE_HDR_FMT, SIGNATURE, image_offset + image_size, 0, image_offset))
    f.write(struct.pack(
        INFO_HDR_FMT, INFO_HDR_SIZE, width, -height if top_down else height,
        1, 4, 0, image_size, DPI96, DPI96, 16, 0
    ))
    for r, g, b in EGA_PALETTE:
        f.write(bytes((b, g, r, 0)))
    f.write(np.ascontiguousarray(rows).tobytes())


def load_bmp(path):
    with open(path, "rb") as f:
        return read_bmp(f)


def save_bmp(path, pixels, *, top_down=False):
    with open(path, "wb") as f:
        write_bmp(f, pixels, top_down=top_down)


def palette_rgb(pixels: np.ndarray) -> np.ndarray:
    """Map 0..15 indices to an (H, W, 3) uint8 RGB image."""
    lut = np.array(EGA_PALETTE, dtype=np.uint8)
    return lut[np.asarray(pixels, dtype=np.uint8) & 0x0F]
