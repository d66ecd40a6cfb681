"""Utility functions for color parsing and per-pixel tone math.

AIDEV-NOTE: This module contains the numeric helpers shared by the frame
transform: hex color parsing, working buffer sizing, the contrast/brightness
tone curve and luminance.
"""

import numpy as np
from PIL import Image

from errors import InvalidDimensionsError

# Rec. 601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def hex_to_rgb(hex_color: str) -> "tuple[int, int, int]":
    """Parse a '#RRGGBB' color string.

    Args:
        hex_color: Color string such as '#0f380f'

    Returns:
        RGB tuple (0-255 each channel)

    Raises:
        ValueError: If the string is not a 6-digit hex color
    """
    value = hex_color.strip()
    if value.startswith("#"):
        value = value[1:]
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    except ValueError as e:
        raise ValueError(f"Invalid hex color: {hex_color!r}") from e


def working_size(
    source_width: int, source_height: int, pixel_size: int
) -> "tuple[int, int]":
    """Calculate the downsampled working buffer size.

    Args:
        source_width: Source width in pixels
        source_height: Source height in pixels
        pixel_size: Source pixels per output block

    Returns:
        Tuple of (width, height), each floor(source / pixel_size)

    Raises:
        InvalidDimensionsError: If any input or resulting dimension is
            non-positive
    """
    if source_width <= 0 or source_height <= 0:
        raise InvalidDimensionsError(
            f"Source dimensions must be positive, got {source_width}x{source_height}"
        )
    if pixel_size < 1:
        raise InvalidDimensionsError(f"pixel_size must be >= 1, got {pixel_size}")

    width = source_width // pixel_size
    height = source_height // pixel_size
    if width == 0 or height == 0:
        raise InvalidDimensionsError(
            f"pixel_size {pixel_size} is larger than the "
            f"{source_width}x{source_height} source"
        )
    return width, height


def contrast_factor(contrast: float) -> float:
    """Contrast multiplier for a contrast value in [-100, 100].

    The caller must reject contrast == 259 beforehand.
    """
    return (259 * (contrast + 255)) / (255 * (259 - contrast))


def adjust_tone(rgb: np.ndarray, contrast: float, brightness: float) -> np.ndarray:
    """Apply the contrast curve and brightness offset to RGB channels.

    Args:
        rgb: Array of shape (..., 3) with channel values
        contrast: Contrast setting
        brightness: Additive brightness offset

    Returns:
        float64 array of the same shape

    AIDEV-NOTE: Values are intentionally NOT clamped to [0, 255] here.
    Out-of-range intermediates feed straight into luminance, which changes
    the output at extreme contrast settings.
    """
    factor = contrast_factor(contrast)
    return factor * (rgb.astype(np.float64) - 128) + 128 + brightness


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Normalized luminance (0-1) of tone-adjusted RGB values."""
    r = rgb[..., 0]
    g = rgb[..., 1]
    b = rgb[..., 2]
    gray = (LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b) / 255
    return np.clip(gray, 0.0, 1.0)


def to_rgb_image(source) -> Image.Image:
    """Coerce a PIL image or RGB(A) uint8 array into an RGB PIL image.

    Args:
        source: PIL Image, or numpy array of shape (H, W, 3) or (H, W, 4)

    Returns:
        PIL Image in RGB mode
    """
    if isinstance(source, Image.Image):
        return source if source.mode == "RGB" else source.convert("RGB")

    array = np.asarray(source)
    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3|4) array, got shape {array.shape}")
    image = Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8))
    return image if image.mode == "RGB" else image.convert("RGB")
