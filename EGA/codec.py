import numpy as np

from bitpack import pack_nibbles, unpack_nibbles
from bitstream import HEADER_SIZE, MAX_DIM, pack_header, unpack_header
from errors import DimensionOverflow, UnsupportedPixelWidth
from rle import iter_tokens, rle_decode, rle_encode


def check_dimensions(width: int, height: int):
    if not (1 <= width <= MAX_DIM) or not (1 <= height <= MAX_DIM):
        raise DimensionOverflow(f"image {width}x{height} outside 1..{MAX_DIM}")
    if width % 2:
        raise UnsupportedPixelWidth(f"odd pixel width {width} cannot be packed")


def to_storage_order(pixels: np.ndarray, bottom_up: bool = False) -> np.ndarray:
    """Rows -> storage order (row 0 = bottom displayed row)."""
    x = np.asarray(pixels, dtype=np.uint8)
    if x.ndim != 2:
        raise ValueError("Image must be a 2D (height, width) array")
    return np.ascontiguousarray(x if bottom_up else x[::-1])


def from_storage_order(storage: np.ndarray, bottom_up: bool = False) -> np.ndarray:
    """Storage order -> requested display order. The flip is its own inverse."""
    return to_storage_order(storage, bottom_up)


def encode_packed(packed: np.ndarray) -> bytes:
    """
    packed: uint8 (height, width_bytes) in storage order
    Returns header + token stream.
    """
    packed = np.asarray(packed, dtype=np.uint8)
    if packed.ndim != 2:
        raise ValueError("Packed image must be a 2D (height, width_bytes) array")
    height, wb = packed.shape
    width = wb * 2
    check_dimensions(width, height)
    return pack_header(width=width, height=height) + rle_encode(packed)


def decode_packed(data: bytes):
    """
    Returns (packed, width, height); packed is uint8 (height, width // 2)
    in storage order.
    """
    h = unpack_header(data)
    width, height = h["width"], h["height"]
    check_dimensions(width, height)
    wb = width // 2
    buf = rle_decode(data, wb, height, pos=HEADER_SIZE)
    packed = np.frombuffer(buf, dtype=np.uint8).reshape(height, wb)
    return packed, width, height


def encode_ega(pixels: np.ndarray, *, bottom_up: bool = False) -> bytes:
    """
    pixels: uint8 (height, width), values 0..15
    bottom_up: True if row 0 of pixels is already the bottom displayed row
    """
    storage = to_storage_order(pixels, bottom_up)
    height, width = storage.shape
    check_dimensions(width, height)
    return encode_packed(pack_nibbles(storage))


def decode_ega(data: bytes, *, bottom_up: bool = False) -> np.ndarray:
    """Inverse of encode_ega: returns uint8 (height, width) pixels."""
    packed, _, _ = decode_packed(data)
    return from_storage_order(unpack_nibbles(packed), bottom_up)


def dump_tokens(data: bytes):
    """Yield one text line per token, for tracing a stream."""
    h = unpack_header(data)
    width, height = h["width"], h["height"]
    yield f"image {width}x{height}, {len(data) - HEADER_SIZE} bytes of tokens"
    check_dimensions(width, height)
    for row, tok in iter_tokens(data, width // 2, pos=HEADER_SIZE):
        if tok.repeat:
            yield f"row {row:5d} @{tok.offset:06x} repeat {tok.length:3d} [{tok.data[0]:02x}]"
        else:
            body = " ".join(f"{b:02x}" for b in tok.data)
            yield f"row {row:5d} @{tok.offset:06x} copy   {tok.length:3d} [ {body} ]"
