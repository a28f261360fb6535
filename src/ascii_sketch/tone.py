"""Brightness bounds and the tone curve applied before glyph mapping."""

import math

import numpy as np

# Stretch is skipped when the trimmed range is narrower than this.
MIN_STRETCH_RANGE = 0.01

# Linear segment of the sRGB-style transfer curve.
GAMMA_LINEAR_KNEE = 0.04045


def percentile_bounds(
    lum: np.ndarray, lower: float = 2.0, upper: float = 98.0
) -> tuple[float, float]:
    """
    Robust (low, high) luminance bounds.

    Sorts every value and picks the elements at ``floor(n * p / 100)``,
    clamped to the valid index range, so a handful of extreme pixels
    do not compress the usable range.
    """
    flat = np.sort(np.asarray(lum, dtype=np.float64), axis=None)
    n = flat.size
    lo = min(max(math.floor(n * lower / 100.0), 0), n - 1)
    hi = min(max(math.floor(n * upper / 100.0), 0), n - 1)
    return float(flat[lo]), float(flat[hi])


def stretch(lum: np.ndarray, bounds) -> np.ndarray:
    lo, hi = bounds
    if hi - lo > MIN_STRETCH_RANGE:
        return np.clip((lum - lo) / (hi - lo), 0.0, 1.0)
    return lum


def gamma_correction(v, gamma: float) -> np.ndarray:
    v = np.clip(np.asarray(v, dtype=np.float64), 0.0, 1.0)
    return np.where(
        v < GAMMA_LINEAR_KNEE, v / 12.92, ((v + 0.055) / 1.055) ** gamma
    )


def contrast_curve(v, strength: float) -> np.ndarray:
    """S-curve: darkens values below 0.5 and lightens those above."""
    v = np.clip(np.asarray(v, dtype=np.float64), 0.0, 1.0)
    low = (2.0 * v) ** strength / 2.0
    high = 1.0 - (2.0 * (1.0 - v)) ** strength / 2.0
    return np.where(v < 0.5, low, high)


def normalize_brightness(
    lum,
    bounds=None,
    invert: bool = False,
    gamma: float = 1.5,
    curve_strength=2.0,
) -> np.ndarray:
    """
    Map raw luminance to the final [0, 1] value fed to the glyph mapper.

    ``bounds=None`` skips the histogram stretch and ``curve_strength=None``
    skips the S-curve.
    """
    v = np.asarray(lum, dtype=np.float64)
    if bounds is not None:
        v = stretch(v, bounds)
    v = gamma_correction(v, gamma)
    if curve_strength is not None:
        v = contrast_curve(v, curve_strength)
    if invert:
        v = 1.0 - v
    return np.clip(v, 0.0, 1.0)
