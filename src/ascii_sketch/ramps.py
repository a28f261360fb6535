#!/usr/bin/env python3
"""Character ramps and brightness-to-glyph quantization."""

import argparse
from types import MappingProxyType

import numpy as np

from .config import DetailLevel

# -----------------------------
# Ramps (index 0 = densest glyph, last = blank)
# -----------------------------
SMOOTH_RAMP = "@%#*+=-:. "

DETAILED_RAMP = (
    "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^'`. "
)

RAMPS = MappingProxyType(
    {
        DetailLevel.SMOOTH: SMOOTH_RAMP,
        DetailLevel.DETAILED: DETAILED_RAMP,
    }
)


def ramp_for(detail) -> str:
    return RAMPS[DetailLevel.parse(detail)]


# -----------------------------
# Character mapping
# -----------------------------
def char_index(values, ramp_length: int):
    """
    Glyph index for normalized brightness in [0, 1], rounding half up.

    Returns an int for a scalar and an integer array for an array.
    """
    v = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    idx = np.floor(v * (ramp_length - 1) + 0.5).astype(np.intp)
    return int(idx) if idx.ndim == 0 else idx


def map_brightness(values: np.ndarray, ramp: str) -> np.ndarray:
    """
    values: HxW float array of final brightness in [0, 1]
    returns HxW array of single-character strings
    """
    glyphs = np.array(list(ramp))
    return glyphs[np.asarray(char_index(values, len(glyphs)))]


def rows_to_text(chars: np.ndarray) -> str:
    return "\n".join("".join(row) for row in chars.tolist())


# -----------------------------
# CLI
# -----------------------------
def main(argv=None):
    parser = argparse.ArgumentParser(description="List the available character ramps")
    parser.parse_args(argv)

    for level, ramp in RAMPS.items():
        print(f"{level.value} ({len(ramp)} glyphs): {ramp!r}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
