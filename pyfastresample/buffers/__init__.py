"""
Pixel buffer data model for PyFastResample.

A PixelBuffer is a flat, interleaved RGBA array plus its dimensions. Callers
own both the source and destination buffers; samplers only write into the
destination's ``data`` in place.

Author: B.G.
"""

from .errors import InvalidSizeError, ResampleError, ShapeMismatchError
from .pixelbuffer import PixelBuffer

__all__ = [
    "PixelBuffer",
    "ResampleError",
    "InvalidSizeError",
    "ShapeMismatchError",
]
