"""Exceptions raised when buffers handed to a sampler are unusable."""


class ResampleError(ValueError):
    """Base class for buffer validation failures."""


class InvalidSizeError(ResampleError):
    """A buffer has a zero or negative width or height."""


class ShapeMismatchError(ResampleError):
    """A buffer's data length does not match width * height * 4."""
