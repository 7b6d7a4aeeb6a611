"""Tests for nibble packing."""
import numpy as np
import pytest

from bitpack import pack_nibbles, unpack_nibbles
from conftest import random_pixels
from errors import UnsupportedPixelWidth


def test_pack_left_pixel_in_high_nibble():
    """The leftmost pixel goes to the high nibble."""
    packed = pack_nibbles(np.array([1, 2, 3, 4, 15, 0], dtype=np.uint8))
    assert packed.tolist() == [0x12, 0x34, 0xF0]


def test_unpack_bytes():
    """Unpacking accepts raw bytes."""
    assert unpack_nibbles(b"\x12\xf0").tolist() == [1, 2, 15, 0]


def test_pack_rows_do_not_mix():
    """Each row of a 2D array packs on its own."""
    px = np.array([[1, 2], [3, 4]], dtype=np.uint8)
    assert pack_nibbles(px).tolist() == [[0x12], [0x34]]
    assert unpack_nibbles(pack_nibbles(px)).tolist() == px.tolist()


@pytest.mark.parametrize("length", [2, 10, 320])
def test_unpack_pack_is_identity(length):
    """unpack(pack(seq)) == seq for even lengths."""
    seq = random_pixels((length,), seed=length)
    assert np.array_equal(unpack_nibbles(pack_nibbles(seq)), seq)


def test_odd_width_rejected():
    """An odd pixel width has no packing policy."""
    with pytest.raises(UnsupportedPixelWidth):
        pack_nibbles(np.zeros((2, 5), dtype=np.uint8))
