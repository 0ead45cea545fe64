"""
Constants for PyFastResample.

Centralises the numeric configuration shared by every sampler: floating
precision used inside the kernels, channel layout of pixel buffers, the
spread of the area-weighted kernel and the edge sentinel of the bilinear
sampler.

These values are read at kernel compile time. Override them through
``pyfastresample.ResizeConfig`` (tuning, kernel base) rather than by editing
this module at runtime.

Author: B.G.
"""

import taichi as ti

# Floating type used for every accumulator and interpolation weight
FLOAT_TYPE_TI = ti.f64
FLOAT_TYPE_NP = "float64"

# Integer type of the scratch fields holding channel values
INT_TYPE_TI = ti.i32
INT_TYPE_NP = "int32"

# Pixel layout: interleaved R, G, B, A
CHANNELS = 4

# Area-weighted ("Gaussian") downsampler
GAUSSIAN_TUNING = 10.0
GAUSSIAN_KERNEL_BASE = 2.718

# Value returned by the bilinear sampler for reads outside the source
SENTINEL_PIXEL = (128.0, 128.0, 128.0, 0.0)

# Nudge applied toward the value's sign before truncating to an integer
TRUNCATION_TOLERANCE = 1e-9

# Largest channel count a scratch field can hold; kernels index it with i32
MAX_FIELD_ELEMENTS = 2**31 - 1
