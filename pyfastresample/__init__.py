"""
PyFastResample: Taichi-accelerated resampling of RGBA pixel buffers.

Submodules:
- constants: shared numeric configuration
- buffers: PixelBuffer and validation errors
- pool: reusable Taichi scratch fields
- resampling: area-weighted, bicubic and bilinear samplers plus the dispatcher

Taichi must be initialised by the caller (``ti.init(arch=ti.cpu)`` or a GPU
arch supporting 64-bit floats) before the samplers run.

Author: B.G.
"""

__version__ = "0.0.1"

from . import constants
from . import pool
from . import buffers
from . import resampling

from .buffers import InvalidSizeError, PixelBuffer, ResampleError, ShapeMismatchError
from .resampling import (
    ResizeConfig,
    Strategy,
    bicubic_resample,
    bilinear_resample,
    gaussian_resample,
    resample,
    resize,
    sample_bicubic,
    sample_bilinear,
    select_strategy,
)

__all__ = [
    "constants",
    "pool",
    "buffers",
    "resampling",
    "PixelBuffer",
    "ResampleError",
    "InvalidSizeError",
    "ShapeMismatchError",
    "ResizeConfig",
    "Strategy",
    "resize",
    "resample",
    "select_strategy",
    "gaussian_resample",
    "bicubic_resample",
    "bilinear_resample",
    "sample_bilinear",
    "sample_bicubic",
]
