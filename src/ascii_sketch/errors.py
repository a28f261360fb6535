"""Exceptions raised by the ascii_sketch conversion pipeline."""


class AsciiSketchError(Exception):
    """Base class for errors surfaced to callers of the pipeline."""


class DecodeError(AsciiSketchError):
    """The input payload is not a decodable image."""


class InvalidDimensionError(AsciiSketchError, ValueError):
    """The requested width yields an empty character grid."""


class ConversionCancelled(Exception):
    """A conversion was abandoned because a newer request superseded it."""
