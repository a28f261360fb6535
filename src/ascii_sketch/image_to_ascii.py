#!/usr/bin/env python3
"""Convert a raster image into ASCII art."""

import argparse
import io
import logging
import sys

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .config import DEFAULT_WIDTH, MAX_WIDTH, MIN_WIDTH, ConversionConfig, DetailLevel
from .errors import AsciiSketchError, ConversionCancelled, DecodeError
from .filters import (
    binary_threshold,
    composite_on_white,
    edge_threshold,
    enhance_contrast,
    grayscale,
    luma_array,
    rgba_array,
    unsharp_mask,
)
from .logging_conf import LEVELS, setup_logging
from .ramps import map_brightness, ramp_for, rows_to_text
from .resample import downsample, grid_size, upsample
from .tone import normalize_brightness, percentile_bounds

LOG = logging.getLogger(__name__)

# Detailed pipeline strengths
UPSAMPLE_FACTOR = 2
CONTRAST_FACTOR = 4.0
UNSHARP_STRENGTH = 2.0
LOWER_PERCENTILE = 2.0
UPPER_PERCENTILE = 98.0
DETAILED_GAMMA = 1.5
CURVE_STRENGTH = 2.0

# Smooth pipeline
SMOOTH_GAMMA = 2.2
SMOOTH_ALPHA_CUTOFF = 10  # out of 255, about 4%


# -----------------------------
# Decoding
# -----------------------------
def _is_high_bit_depth(img: Image.Image) -> bool:
    return img.mode in ("I", "F") or img.mode.startswith("I;16")


def _to_8bit(img: Image.Image) -> Image.Image:
    """Scale 16-bit sample values (0-65535) down to 8-bit grayscale."""
    arr = np.asarray(img, dtype=np.float64)
    return Image.fromarray(np.clip(np.floor(arr / 257.0 + 0.5), 0, 255).astype(np.uint8))


def decode_image(data: bytes) -> Image.Image:
    """Decode an encoded image payload into an upright RGBA image."""
    if not data:
        raise DecodeError("empty image payload")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        img = ImageOps.exif_transpose(img)
        if _is_high_bit_depth(img):
            img = _to_8bit(img)
        return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeError(f"failed to decode image: {e}") from e


def load_image(path: str) -> Image.Image:
    """Read ``path`` (``-`` for stdin) and decode it."""
    try:
        if path == "-":
            data = sys.stdin.buffer.read()
        else:
            with open(path, "rb") as f:
                data = f.read()
    except OSError as e:
        raise DecodeError(f"cannot read {path}: {e}") from e
    return decode_image(data)


# -----------------------------
# Pipelines
# -----------------------------
def _check_cancel(cancel) -> None:
    if cancel is not None and cancel.is_set():
        raise ConversionCancelled()


def convert_smooth(img: Image.Image, config: ConversionConfig, cancel=None) -> str:
    """Single cubic resize straight to the grid, gamma 2.2, short ramp."""
    cols, rows = grid_size(img.width, img.height, config.width)
    ramp = ramp_for(config.detail)

    small = upsample(img.convert("RGBA"), cols, rows)
    _check_cancel(cancel)
    gray = grayscale(small)
    alpha = rgba_array(small)[..., 3]

    final = normalize_brightness(
        luma_array(gray),
        bounds=None,
        invert=config.invert,
        gamma=SMOOTH_GAMMA,
        curve_strength=None,
    )
    chars = map_brightness(final, ramp)
    # Near-transparent cells render as background
    chars[alpha < SMOOTH_ALPHA_CUTOFF] = ramp[-1]
    return rows_to_text(chars)


def convert_detailed(img: Image.Image, config: ConversionConfig, cancel=None) -> str:
    """
    Work at twice the grid resolution, binarize, then drop to the grid.

    cubic upsample -> composite on white -> grayscale -> contrast ->
    unsharp mask -> median threshold -> edge threshold -> nearest
    downsample -> percentile stretch, gamma and S-curve -> glyphs
    """
    cols, rows = grid_size(img.width, img.height, config.width)
    ramp = ramp_for(config.detail)

    work = upsample(img.convert("RGBA"), cols * UPSAMPLE_FACTOR, rows * UPSAMPLE_FACTOR)
    LOG.debug("Working canvas %dx%d for a %dx%d grid", work.width, work.height, cols, rows)

    stages = (
        composite_on_white,
        grayscale,
        lambda im: enhance_contrast(im, CONTRAST_FACTOR),
        lambda im: unsharp_mask(im, UNSHARP_STRENGTH),
        binary_threshold,
        edge_threshold,
    )
    for stage in stages:
        _check_cancel(cancel)
        work = stage(work)

    final_img = downsample(work, cols, rows)
    _check_cancel(cancel)

    lum = luma_array(final_img)
    bounds = percentile_bounds(lum, LOWER_PERCENTILE, UPPER_PERCENTILE)
    LOG.debug("Percentile bounds low=%.4f high=%.4f", *bounds)

    final = normalize_brightness(
        lum,
        bounds=bounds,
        invert=config.invert,
        gamma=DETAILED_GAMMA,
        curve_strength=CURVE_STRENGTH,
    )
    return rows_to_text(map_brightness(final, ramp))


PIPELINES = {
    DetailLevel.SMOOTH: convert_smooth,
    DetailLevel.DETAILED: convert_detailed,
}


def convert_image(
    img: Image.Image, config: ConversionConfig | None = None, cancel=None
) -> str:
    """
    Convert a decoded image to ASCII art.

    Returns one line per grid row joined by newlines, each line exactly
    ``config.width`` characters. ``cancel`` is an optional
    ``threading.Event``; once set, the run stops at the next stage boundary
    with ConversionCancelled.
    """
    config = config or ConversionConfig()
    art = PIPELINES[config.detail](img, config, cancel=cancel)
    LOG.info(
        "Converted %dx%d image (detail=%s width=%d invert=%s)",
        img.width,
        img.height,
        config.detail.value,
        config.width,
        config.invert,
    )
    return art


def convert_bytes(data: bytes, config: ConversionConfig | None = None, cancel=None) -> str:
    img = decode_image(data)
    _check_cancel(cancel)
    return convert_image(img, config, cancel=cancel)


# -----------------------------
# CLI
# -----------------------------
def _width_arg(value: str) -> int:
    try:
        width = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid width: {value!r}")
    if not MIN_WIDTH <= width <= MAX_WIDTH:
        raise argparse.ArgumentTypeError(
            f"width must be between {MIN_WIDTH} and {MAX_WIDTH}, got {width}"
        )
    return width


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Convert an image to ASCII art")
    ap.add_argument("input", help="Input image path ('-' reads standard input)")
    ap.add_argument(
        "-o", "--output", default=None, help="Output text file (default: stdout)"
    )
    ap.add_argument(
        "-w",
        "--width",
        type=_width_arg,
        default=DEFAULT_WIDTH,
        help=f"Output columns, {MIN_WIDTH}-{MAX_WIDTH} (default: {DEFAULT_WIDTH})",
    )
    ap.add_argument(
        "--invert",
        action="store_true",
        help="Swap dark and light glyphs (useful for dark backgrounds)",
    )
    ap.add_argument(
        "--detail",
        choices=[level.value for level in DetailLevel],
        default=DetailLevel.DETAILED.value,
        help="smooth = short ramp, single resize; detailed = sharpened long ramp",
    )
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=LEVELS,
        help="Set the logging level (default: WARNING)",
    )
    ap.add_argument("--log", default=None, help="Also write a debug log to FILE")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log)

    try:
        config = ConversionConfig(
            width=args.width, invert=args.invert, detail=args.detail
        )
        art = convert_image(load_image(args.input), config)
    except AsciiSketchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(art + "\n")
    else:
        print(art)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
