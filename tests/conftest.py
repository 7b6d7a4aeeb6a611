"""Shared fixtures for the EGA codec tests."""
import numpy as np
import pytest

from bmp import save_bmp
from phantom import generate_ega_pattern


@pytest.fixture
def pattern():
    """A small deterministic 16 colour image (top-down rows)."""
    return generate_ega_pattern(width=64, height=40, seed=1, noise=0.05)


@pytest.fixture
def bmp_file(tmp_path, pattern):
    """The pattern saved as a bottom-up 4 bpp BMP."""
    path = tmp_path / "pattern.bmp"
    save_bmp(path, pattern)
    return path


def random_pixels(shape, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 16, size=shape, dtype=np.uint8)
