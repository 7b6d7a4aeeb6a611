import numpy as np

from errors import UnsupportedPixelWidth


def pack_nibbles(pixels: np.ndarray) -> np.ndarray:
    """
    Pack one-byte-per-pixel values (0..15) two to a byte, left pixel in the
    high nibble. Works on the last axis, so a 2D (rows, width) array is packed
    row by row and pixels never pair across rows.
    Output: uint8 array with last axis width // 2
    """
    px = np.asarray(pixels, dtype=np.uint8)
    if px.ndim not in (1, 2):
        raise ValueError("pack_nibbles expects a 1D row or 2D (rows, width) array")
    width = px.shape[-1]
    if width % 2:
        raise UnsupportedPixelWidth(f"cannot pack odd pixel width {width}")
    left = px[..., 0::2]
    right = px[..., 1::2]
    return ((left << 4) | (right & 0x0F)).astype(np.uint8)


def unpack_nibbles(packed) -> np.ndarray:
    """
    Inverse of pack_nibbles: each byte -> (high nibble, low nibble).
    Output: uint8 array with last axis doubled
    """
    if isinstance(packed, (bytes, bytearray, memoryview)):
        pb = np.frombuffer(bytes(packed), dtype=np.uint8)
    else:
        pb = np.asarray(packed, dtype=np.uint8)
    if pb.ndim not in (1, 2):
        raise ValueError("unpack_nibbles expects a 1D row or 2D (rows, bytes) array")
    out = np.empty(pb.shape[:-1] + (pb.shape[-1] * 2,), dtype=np.uint8)
    out[..., 0::2] = (pb >> 4) & 0x0F
    out[..., 1::2] = pb & 0x0F
    return out
