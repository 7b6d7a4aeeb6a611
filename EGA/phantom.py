import numpy as np

from bmp import save_bmp

def generate_ega_pattern(width=320, height=200, seed=0, noise=0.02):
    """
    Deterministic 16 colour test image: flat background, colour bars and
    ellipses (long runs), plus sparse random pixels (literal spans).
    """
    rng = np.random.default_rng(seed)
    img = np.full((height, width), 1, dtype=np.uint8)

    yy, xx = np.mgrid[:height, :width]
    cx, cy = width / 2, height / 2

    # colour bars along the top
    bar_h = max(1, height // 10)
    img[:bar_h] = (xx[:bar_h] * 16 // max(1, width)).astype(np.uint8)

    # body
    body = ((xx - cx)**2 / (0.40*width)**2 + (yy - cy)**2 / (0.35*height)**2) <= 1
    img[body] = 7

    # eyes
    for ex in (cx - 0.15*width, cx + 0.15*width):
        eye = ((xx - ex)**2 / (0.06*width)**2 + (yy - (cy - 0.08*height))**2 / (0.08*height)**2) <= 1
        img[eye] = 15

    # mouth
    mouth = (np.abs(yy - (cy + 0.15*height)) <= max(1, height // 40)) & (np.abs(xx - cx) <= 0.2*width)
    img[mouth] = 4

    if noise > 0:
        mask = rng.random((height, width)) < noise
        img[mask] = rng.integers(0, 16, size=int(mask.sum()), dtype=np.uint8)

    return img

def save_pattern(path="pattern.bmp", width=320, height=200, seed=0, noise=0.02):
    x = generate_ega_pattern(width=width, height=height, seed=seed, noise=noise)
    save_bmp(path, x)
    return path

if __name__ == "__main__":
    p = save_pattern()
    print("Saved:", p)
