import numpy as np

def compression_ratio(width: int, height: int, encoded_len: int) -> float:
    """Packed (4 bpp) image size over encoded size."""
    if encoded_len <= 0:
        return float("inf")
    return float((width * height) / 2 / encoded_len)

def mismatch_count(x: np.ndarray, y: np.ndarray) -> int:
    if x.shape != y.shape:
        raise ValueError(f"shape mismatch: {x.shape} vs {y.shape}")
    return int(np.count_nonzero(x.astype(np.uint8) != y.astype(np.uint8)))
