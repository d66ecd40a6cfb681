"""Dithering methods deciding the on/off palette color per pixel.

AIDEV-NOTE: Each mode compares normalized luminance against its own
threshold surface. All comparisons are strict (gray > t), so a pixel sitting
exactly on the threshold renders as the "off" color.
"""

import numpy as np

from models import DitherMode

BAYER_4X4 = (
    np.array(
        [
            [0, 8, 2, 10],
            [12, 4, 14, 6],
            [3, 11, 1, 9],
            [15, 7, 13, 5],
        ],
        dtype=np.float64,
    )
    / 16
)


def bayer_threshold(shape: "tuple[int, int]", threshold: float) -> np.ndarray:
    """Ordered 4x4 matrix tiled over the buffer, blended with the threshold."""
    height, width = shape
    ys, xs = np.indices((height, width))
    matrix = BAYER_4X4[ys % 4, xs % 4]
    return matrix * 0.8 + (threshold / 255) * 0.2


def halftone_threshold(
    shape: "tuple[int, int]", threshold: float, dot_scale: float
) -> np.ndarray:
    """Distance from the 2x2 cell center, scaled by dot_scale."""
    height, width = shape
    ys, xs = np.indices((height, width))
    dx = (xs % 2) / 2 - 0.5
    dy = (ys % 2) / 2 - 0.5
    return np.sqrt(dx * dx + dy * dy) * dot_scale + (threshold / 255) * 0.2


def stochastic_threshold(
    shape: "tuple[int, int]", threshold: float, rng: np.random.Generator
) -> np.ndarray:
    """Uniform random threshold per pixel."""
    return rng.random(shape) * 0.6 + (threshold / 255) * 0.4


def dither(
    gray: np.ndarray,
    mode: DitherMode,
    threshold: float,
    dot_scale: float = 1.0,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Reduce a luminance buffer to one bit per pixel.

    Args:
        gray: 2D float array of luminance values (0-1)
        mode: Dither algorithm
        threshold: Luminance cut point (0-255)
        dot_scale: Halftone dot radius scale
        rng: Random generator for STOCHASTIC mode (fresh one if None)

    Returns:
        2D uint8 array of 0/1 decisions
    """
    if mode == DitherMode.BAYER:
        surface = bayer_threshold(gray.shape, threshold)
    elif mode == DitherMode.HALFTONE:
        surface = halftone_threshold(gray.shape, threshold, dot_scale)
    elif mode == DitherMode.STOCHASTIC:
        surface = stochastic_threshold(
            gray.shape, threshold, rng if rng is not None else np.random.default_rng()
        )
    else:
        # THRESHOLD, and the fallback for anything unrecognized
        surface = threshold / 255

    return (gray > surface).astype(np.uint8)
