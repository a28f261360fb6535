"""ASCII Sketch - turn images into ASCII art."""

__version__ = "0.1.0"

"""
Entry points are thin wrappers that import on demand, so running a
submodule with ``python -m`` does not find it already in ``sys.modules``.
"""


def image_to_ascii_main(*args, **kwargs):
    from .image_to_ascii import main as _m

    return _m(*args, **kwargs)


def ramps_main(*args, **kwargs):
    from .ramps import main as _m

    return _m(*args, **kwargs)


def convert_bytes(data, config=None, cancel=None):
    from .image_to_ascii import convert_bytes as _convert

    return _convert(data, config, cancel=cancel)


__all__ = [
    "convert_bytes",
    "image_to_ascii_main",
    "ramps_main",
]
