"""
Per-pixel stages of the detailed pipeline.

Every stage takes an RGBA ``PIL.Image.Image`` and returns a new one;
arithmetic happens on numpy arrays in between.
"""

import logging

import numpy as np
from PIL import Image

LOG = logging.getLogger(__name__)

# Luminance weights for R, G, B
LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float64)

# Fixed cutoff of the edge thresholder, in [0, 1]
EDGE_CUTOFF = 0.5


def luminance(r, g, b):
    """Perceptual brightness in [0, 1]; accepts scalars or numpy arrays."""
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255.0


# -----------------------------
# Array helpers
# -----------------------------
def rgba_array(img: Image.Image) -> np.ndarray:
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return np.asarray(img, dtype=np.float64)


def luma_array(img: Image.Image) -> np.ndarray:
    """HxW float64 luminance in [0, 1]."""
    arr = rgba_array(img)
    return luminance(arr[..., 0], arr[..., 1], arr[..., 2])


def _to_uint8(values: np.ndarray) -> np.ndarray:
    # round half up, then clamp
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def _gray_image(values01: np.ndarray, alpha: np.ndarray) -> Image.Image:
    gray = _to_uint8(values01 * 255.0)
    out = np.dstack([gray, gray, gray, _to_uint8(alpha)])
    return Image.fromarray(out)


# -----------------------------
# Alpha / grayscale
# -----------------------------
def has_transparency(img: Image.Image) -> bool:
    return bool(np.any(rgba_array(img)[..., 3] < 255))


def composite_on_white(img: Image.Image) -> Image.Image:
    """Flatten transparency onto a solid white background."""
    if not has_transparency(img):
        return img
    arr = rgba_array(img)
    a = arr[..., 3:4] / 255.0
    rgb = arr[..., :3] * a + 255.0 * (1.0 - a)
    out = np.dstack([_to_uint8(rgb), np.full(a.shape[:2], 255, dtype=np.uint8)])
    return Image.fromarray(out)


def grayscale(img: Image.Image) -> Image.Image:
    arr = rgba_array(img)
    lum = luminance(arr[..., 0], arr[..., 1], arr[..., 2])
    return _gray_image(lum, arr[..., 3])


# -----------------------------
# Enhancement chain
# -----------------------------
def enhance_contrast(img: Image.Image, factor: float) -> Image.Image:
    """Linear stretch of every color channel around the midpoint 128."""
    arr = rgba_array(img)
    rgb = np.clip((arr[..., :3] - 128.0) * factor + 128.0, 0.0, 255.0)
    out = np.dstack([_to_uint8(rgb), _to_uint8(arr[..., 3])])
    return Image.fromarray(out)


def neighborhood_mean(lum: np.ndarray) -> np.ndarray:
    """Mean of the 8 neighbors of every pixel, clamping at the borders."""
    p = np.pad(lum, ((1, 1), (1, 1)), mode="edge")
    h, w = lum.shape
    total = np.zeros_like(lum)
    for dy in (0, 1, 2):
        for dx in (0, 1, 2):
            if dy == 1 and dx == 1:
                continue
            total += p[dy : dy + h, dx : dx + w]
    return total / 8.0


def unsharp_mask(img: Image.Image, strength: float) -> Image.Image:
    """Amplify each pixel's difference from its 3x3 neighborhood; output is gray."""
    if strength <= 0:
        return img
    arr = rgba_array(img)
    lum = luminance(arr[..., 0], arr[..., 1], arr[..., 2])
    sharpened = np.clip(lum + (lum - neighborhood_mean(lum)) * strength, 0.0, 1.0)
    return _gray_image(sharpened, arr[..., 3])


def median_luminance(lum: np.ndarray) -> float:
    """Upper median: element ``n // 2`` of the sorted luminances."""
    flat = np.sort(lum, axis=None)
    return float(flat[flat.size // 2])


def binary_threshold(img: Image.Image) -> Image.Image:
    """
    Global black/white split at the median luminance.

    Pixels at or below the median go black, the rest white. A flat raster
    has no split to make, so it is binarized at EDGE_CUTOFF instead and a
    uniform white (or black) image keeps its tone.
    """
    arr = rgba_array(img)
    lum = luminance(arr[..., 0], arr[..., 1], arr[..., 2])
    if lum.max() - lum.min() <= 0.0:
        LOG.debug("Flat raster; binarizing at fixed cutoff %.2f", EDGE_CUTOFF)
        white = lum >= EDGE_CUTOFF
    else:
        median = median_luminance(lum)
        LOG.debug("Binary threshold at median luminance %.4f", median)
        white = lum > median
    return _gray_image(white.astype(np.float64), arr[..., 3])


def edge_threshold(img: Image.Image) -> Image.Image:
    """Binarize at the fixed EDGE_CUTOFF."""
    arr = rgba_array(img)
    lum = luminance(arr[..., 0], arr[..., 1], arr[..., 2])
    return _gray_image((lum >= EDGE_CUTOFF).astype(np.float64), arr[..., 3])
