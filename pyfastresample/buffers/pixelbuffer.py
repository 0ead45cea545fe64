"""
PixelBuffer: interleaved RGBA pixel storage.

Pixel ``(x, y)`` occupies ``data[(y * width + x) * 4 : (y * width + x) * 4 + 4]``
in R, G, B, A order. ``data`` is a one-dimensional numpy integer array; a
``bytearray`` is wrapped as a writable numpy view so that writes performed by
the samplers land in the caller's storage.

Author: B.G.
"""

from dataclasses import dataclass

import numpy as np

from .. import constants as cte
from .errors import InvalidSizeError, ShapeMismatchError


def _as_flat_array(data):
    if isinstance(data, np.ndarray):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return np.frombuffer(data, dtype=np.uint8)
    raise TypeError(
        f"PixelBuffer data must be a numpy array or bytearray, got {type(data).__name__}"
    )


@dataclass(eq=False)
class PixelBuffer:
    """
    RGBA pixel grid owned by the caller.

    Attributes:
        width: Number of pixel columns
        height: Number of pixel rows
        data: Flat channel array of length width * height * 4
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        self.data = _as_flat_array(self.data)

    @classmethod
    def allocate(cls, width, height, dtype=np.uint8):
        """
        Create a zero-filled buffer.

        Args:
            width: Number of pixel columns
            height: Number of pixel rows
            dtype: numpy integer dtype of the channel values (default: uint8).
                   Use a signed, wider type (e.g. int16) to keep cubic
                   overshoot outside [0, 255] visible.

        Returns:
            PixelBuffer
        """
        if width < 0 or height < 0:
            raise InvalidSizeError(f"Cannot allocate a {width}x{height} buffer")
        return cls(width, height, np.zeros(width * height * cte.CHANNELS, dtype=dtype))

    @classmethod
    def from_array(cls, array):
        """
        Wrap an array of shape (height, width, 4).

        The flat ``data`` is a view onto ``array`` when it is C-contiguous,
        so resampling into the returned buffer updates ``array``.
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != cte.CHANNELS:
            raise ShapeMismatchError(
                f"Expected an array of shape (height, width, {cte.CHANNELS}), got {array.shape}"
            )
        height, width = array.shape[:2]
        return cls(width, height, array.reshape(-1))

    @classmethod
    def filled(cls, width, height, color, dtype=np.uint8):
        """Create a buffer where every pixel equals ``color`` (an RGBA 4-tuple)."""
        buf = cls.allocate(width, height, dtype=dtype)
        buf.to_array()[:, :] = np.asarray(color, dtype=dtype)
        return buf

    def to_array(self):
        """Return a (height, width, 4) view of the data."""
        return self.data.reshape(self.height, self.width, cte.CHANNELS)

    def pixel(self, x, y):
        """Return pixel (x, y) as a tuple of ints."""
        idx = (y * self.width + x) * cte.CHANNELS
        return tuple(int(v) for v in self.data[idx : idx + cte.CHANNELS])

    @property
    def shape(self):
        return (self.height, self.width, cte.CHANNELS)

    def validate(self, role="buffer"):
        """
        Check the size and length invariants.

        Args:
            role: Name used in error messages ("source", "destination", ...)

        Raises:
            InvalidSizeError: If width or height is not positive
            ShapeMismatchError: If data is not 1D or its length is not
                                width * height * 4
        """
        if self.width <= 0 or self.height <= 0:
            raise InvalidSizeError(
                f"{role} must have a positive size, got {self.width}x{self.height}"
            )
        if self.data.ndim != 1:
            raise ShapeMismatchError(
                f"{role} data must be one-dimensional, got shape {self.data.shape}"
            )
        expected = self.width * self.height * cte.CHANNELS
        if self.data.size != expected:
            raise ShapeMismatchError(
                f"{role} data has {self.data.size} values, expected {expected} "
                f"for {self.width}x{self.height}x{cte.CHANNELS}"
            )
