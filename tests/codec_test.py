"""Tests for the EGA image pipelines."""
import numpy as np
import pytest

from codec import (decode_ega, decode_packed, dump_tokens, encode_ega,
                   encode_packed, to_storage_order)
from conftest import random_pixels
from errors import CorruptStream, DimensionOverflow, UnexpectedEof, UnsupportedPixelWidth
from phantom import generate_ega_pattern


def test_bottom_row_encoded_first():
    """Storage order puts the bottom displayed row first."""
    px = np.array([[1, 2], [3, 4]], dtype=np.uint8)  # top row first
    data = encode_ega(px)
    assert data == b"\x01\x00\x01\x00" + bytes([0x00, 0x34, 0x00, 0x12])
    assert decode_ega(data).tolist() == px.tolist()


def test_bottom_up_input():
    """bottom_up=True takes rows as already in storage order."""
    px = np.array([[3, 4], [1, 2]], dtype=np.uint8)
    assert encode_ega(px, bottom_up=True) == encode_ega(px[::-1])
    assert decode_ega(encode_ega(px, bottom_up=True), bottom_up=True).tolist() == px.tolist()


def test_round_trip_pattern(pattern):
    """decode(encode(x)) == x on the test pattern."""
    assert np.array_equal(decode_ega(encode_ega(pattern)), pattern)


def test_flat_image_compresses():
    """Large flat areas encode smaller than the packed image."""
    px = generate_ega_pattern(width=64, height=40, noise=0)
    assert len(encode_ega(px)) < px.size // 2


@pytest.mark.parametrize("shape", [(1, 2), (3, 8), (7, 300), (2, 1000)])
def test_round_trip_random(shape):
    """Noise survives a round trip at several widths."""
    px = random_pixels(shape, seed=shape[1])
    assert np.array_equal(decode_ega(encode_ega(px)), px)


def test_round_trip_long_runs():
    """Rows made of runs longer than one repeat token."""
    px = np.zeros((4, 600), dtype=np.uint8)
    px[1, :] = 5
    px[2, 262:] = 9
    px[3, ::2] = 3
    assert np.array_equal(decode_ega(encode_ega(px)), px)


def test_packed_round_trip():
    """encode_packed / decode_packed keep packed bytes and dimensions."""
    packed = np.array([[0x11, 0x11, 0x11, 0x23], [0x45, 0x67, 0x89, 0xAB]], dtype=np.uint8)
    out, width, height = decode_packed(encode_packed(packed))
    assert (width, height) == (8, 2)
    assert np.array_equal(out, packed)


def test_odd_width_rejected():
    """Odd widths cannot be packed."""
    with pytest.raises(UnsupportedPixelWidth):
        encode_ega(np.zeros((2, 3), dtype=np.uint8))


def test_odd_width_header_rejected():
    """A header claiming an odd width cannot be decoded."""
    with pytest.raises(UnsupportedPixelWidth):
        decode_ega(b"\x02\x00\x00\x00\x00\x11")


def test_too_wide_rejected():
    """Widths beyond the header range."""
    with pytest.raises(DimensionOverflow):
        encode_ega(np.zeros((1, 65538), dtype=np.uint8))


def test_truncated_stream():
    """Cutting the stream mid-token."""
    data = encode_ega(np.full((2, 8), 6, dtype=np.uint8))
    with pytest.raises(UnexpectedEof):
        decode_ega(data[:-1])


def test_corrupt_stream():
    """A token longer than its row."""
    with pytest.raises(CorruptStream):
        decode_ega(b"\x03\x00\x00\x00" + bytes([0x85, 0x00]))


def test_storage_order_requires_2d():
    """Flat buffers need a shape first."""
    with pytest.raises(ValueError):
        to_storage_order(np.zeros(8, dtype=np.uint8))


def test_dump_tokens():
    """One header line, then one line per token."""
    px = np.array([[1, 1, 1, 1, 1, 1, 2, 3]], dtype=np.uint8)
    lines = list(dump_tokens(encode_ega(px)))
    assert lines[0].startswith("image 8x1")
    assert "repeat   3 [11]" in lines[1]
    assert "copy     1 [ 23 ]" in lines[2]


def test_decoded_packed_is_writable():
    """decode_packed hands back an array the caller may modify."""
    packed, _, _ = decode_packed(encode_packed(np.full((2, 4), 0x11, dtype=np.uint8)))
    assert packed.flags.writeable
    packed[0, 0] = 0x22
    assert packed[0, 0] == 0x22
