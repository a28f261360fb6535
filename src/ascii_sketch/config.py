"""Conversion options shared by the pipeline, the session and the CLI."""

from dataclasses import dataclass
from enum import Enum

from .errors import InvalidDimensionError

# Width range offered by the interactive front end.
MIN_WIDTH = 40
MAX_WIDTH = 200
DEFAULT_WIDTH = 120


class DetailLevel(str, Enum):
    SMOOTH = "smooth"
    DETAILED = "detailed"

    @classmethod
    def parse(cls, value) -> "DetailLevel":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(level.value for level in cls)
            raise ValueError(f"unknown detail level: {value!r} (expected {names})")


@dataclass(frozen=True)
class ConversionConfig:
    """Per-request options. Height is always derived from the source image."""

    width: int = DEFAULT_WIDTH
    invert: bool = False
    detail: DetailLevel = DetailLevel.DETAILED

    def __post_init__(self):
        if int(self.width) <= 0:
            raise InvalidDimensionError(f"width must be positive, got {self.width}")
        # frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "invert", bool(self.invert))
        object.__setattr__(self, "detail", DetailLevel.parse(self.detail))
