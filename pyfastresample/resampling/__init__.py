"""
Resampling module for PyFastResample.

Provides Taichi-accelerated resampling of RGBA pixel buffers:

- Area-weighted ("Gaussian") downsampling: weighted block averages
- Bicubic: Catmull-Rom patch over a 4x4 neighbourhood, clamp-to-edge
- Bilinear: 2x2 blend, out-of-range neighbours read as a sentinel pixel

``resize`` dispatches between area-weighted downsampling and bicubic
upsampling; every sampler is also callable on its own.

Usage:
    import pyfastresample as pr

    src = pr.PixelBuffer.from_array(rgba)
    dst = pr.PixelBuffer.allocate(64, 64)
    pr.resize(src, dst)

Author: B.G.
"""

from .bicubic import bicubic_kernel, bicubic_resample, cubic_interpolate, sample_bicubic
from .bilinear import bilinear_kernel, bilinear_resample, sample_bilinear
from .dispatch import (
    DEFAULT_CONFIG,
    STRATEGIES,
    ResizeConfig,
    Strategy,
    is_shrinking,
    resample,
    resize,
    select_strategy,
)
from .gaussian import gaussian_kernel, gaussian_resample

__all__ = [
    "resize",
    "resample",
    "select_strategy",
    "is_shrinking",
    "Strategy",
    "ResizeConfig",
    "DEFAULT_CONFIG",
    "STRATEGIES",
    "gaussian_resample",
    "gaussian_kernel",
    "bicubic_resample",
    "bicubic_kernel",
    "cubic_interpolate",
    "sample_bicubic",
    "bilinear_resample",
    "bilinear_kernel",
    "sample_bilinear",
]
