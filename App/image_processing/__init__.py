"""Pixel-processing pipeline for image and video stylization.

AIDEV-NOTE: This package turns source pixels into a blocky, two-color
dithered frame. Organized into modular components:
- processor: apply_filters frame transform and the ImageProcessor wrapper
- dithering: threshold surfaces for each dither mode
- utils: color parsing, working buffer sizing, tone and luminance math
"""

from .processor import ImageProcessor, apply_filters

__all__ = ["ImageProcessor", "apply_filters"]
