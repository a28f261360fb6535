"""Resizing between source, working and character-grid resolutions."""

import math

from PIL import Image

from .errors import InvalidDimensionError

# Glyph cells are roughly twice as tall as they are wide.
CELL_ASPECT = 0.5


def grid_size(src_w: int, src_h: int, width: int) -> tuple[int, int]:
    """Character grid (columns, rows) for a source image at ``width`` columns."""
    if width <= 0 or src_w <= 0 or src_h <= 0:
        raise InvalidDimensionError(
            f"cannot size a {width}-column grid for a {src_w}x{src_h} image"
        )
    height = math.floor(width * (src_h / src_w) * CELL_ASPECT + 0.5)
    if height < 1:
        raise InvalidDimensionError(
            f"{src_w}x{src_h} image at width {width} gives {height} rows"
        )
    return width, height


def upsample(img: Image.Image, width: int, height: int) -> Image.Image:
    """Cubic resize; smooth enough for the working canvas and the direct path."""
    return img.resize((width, height), resample=Image.Resampling.BICUBIC)


def downsample(img: Image.Image, width: int, height: int) -> Image.Image:
    """Nearest-neighbor resize so thresholded edges stay hard."""
    return img.resize((width, height), resample=Image.Resampling.NEAREST)
