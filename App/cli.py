"""Command-line stylization of a single still image.

Runs the same frame transform as the GUI without starting Qt:

    pixelart-cli photo.jpg photo-dithered.png --pixel-size 6 --mode HALFTONE
"""

import argparse
import sys
from dataclasses import replace

import numpy as np

from errors import PixelArtError
from image_processing import ImageProcessor
from models import PRESETS_BY_NAME, DitherMode, FilterSettings

DEFAULTS = FilterSettings()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelart-cli",
        description="Pixelate and two-color dither an image for a retro look.",
    )
    parser.add_argument("input", help="Path to the source image")
    parser.add_argument("output", help="Path for the output PNG")
    parser.add_argument(
        "-s",
        "--pixel-size",
        type=int,
        default=DEFAULTS.pixel_size,
        help=f"Source pixels per block. Higher = blockier (default: {DEFAULTS.pixel_size})",
    )
    parser.add_argument(
        "--contrast",
        type=float,
        default=DEFAULTS.contrast,
        help=f"Contrast, -100 to 100 (default: {DEFAULTS.contrast:g})",
    )
    parser.add_argument(
        "--brightness",
        type=float,
        default=DEFAULTS.brightness,
        help=f"Brightness offset (default: {DEFAULTS.brightness:g})",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULTS.threshold,
        help=f"Luminance cut point, 0 to 255 (default: {DEFAULTS.threshold:g})",
    )
    parser.add_argument(
        "-m",
        "--mode",
        type=str.upper,
        choices=[mode.value for mode in DitherMode],
        default=DEFAULTS.mode.value,
        help=f"Dither mode (default: {DEFAULTS.mode.value})",
    )
    parser.add_argument(
        "--invert", action="store_true", help="Swap the on and off colors"
    )
    parser.add_argument(
        "--dot-scale",
        type=float,
        default=DEFAULTS.dot_scale,
        help=f"Halftone dot radius scale (default: {DEFAULTS.dot_scale:g})",
    )
    parser.add_argument("--color-a", help="Off/background color as #RRGGBB")
    parser.add_argument("--color-b", help="On/foreground color as #RRGGBB")
    parser.add_argument(
        "-p",
        "--preset",
        type=str.lower,
        choices=sorted(PRESETS_BY_NAME),
        help="Named palette (explicit --color-a/--color-b win)",
    )
    parser.add_argument(
        "--seed", type=int, help="Random seed for STOCHASTIC mode (reproducible output)"
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> FilterSettings:
    """Build FilterSettings from parsed arguments."""
    settings = FilterSettings(
        pixel_size=args.pixel_size,
        contrast=args.contrast,
        brightness=args.brightness,
        threshold=args.threshold,
        mode=DitherMode(args.mode),
        invert=args.invert,
        dot_scale=args.dot_scale,
    )
    if args.preset:
        settings = settings.with_preset(PRESETS_BY_NAME[args.preset])
    if args.color_a:
        settings = replace(settings, color_a=args.color_a)
    if args.color_b:
        settings = replace(settings, color_b=args.color_b)
    return settings


def main(argv: "list[str] | None" = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    rng = np.random.default_rng(args.seed) if args.seed is not None else None

    processor = ImageProcessor(settings)
    try:
        image = processor.load_image(args.input)
        result = processor.process(image, rng=rng)
        processor.save_png(result, args.output)
    except (PixelArtError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"✓ Saved to {args.output}")
    print(
        f"Settings used: pixel_size={settings.pixel_size}, mode={settings.mode.value}, "
        f"colors={settings.color_a}/{settings.color_b}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
