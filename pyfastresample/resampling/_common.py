"""
Shared Taichi helpers for the samplers.

Holds the per-pixel building blocks every sampler is made of (coordinate
mapping, pixel fetch, truncating store) and the host-side plumbing that
moves PixelBuffer data in and out of pooled Taichi fields.

Author: B.G.
"""

import math

import numpy as np
import taichi as ti

from .. import constants as cte
from .. import pool
from ..buffers import InvalidSizeError

PixelVec = ti.types.vector(cte.CHANNELS, cte.FLOAT_TYPE_TI)


@ti.func
def clamp_index(i: ti.i32, n: ti.i32) -> ti.i32:
    return ti.min(ti.max(i, 0), n - 1)


@ti.func
def map_coordinate(i: ti.i32, n_src: ti.i32, n_dst: ti.i32) -> cte.FLOAT_TYPE_TI:
    """Source-space coordinate of destination index i along one axis."""
    return ti.cast(i, cte.FLOAT_TYPE_TI) * ti.cast(n_src, cte.FLOAT_TYPE_TI) / ti.cast(n_dst, cte.FLOAT_TYPE_TI)


@ti.func
def truncate(v: cte.FLOAT_TYPE_TI) -> ti.i32:
    """
    Truncate toward zero after a 1e-9 nudge toward the value's sign.

    A value within 1e-9 below an integer (or above, for negatives) rounds
    to that integer instead of dropping a level.
    """
    res = 0
    if v >= 0:
        res = ti.cast(v + cte.TRUNCATION_TOLERANCE, ti.i32)
    else:
        res = ti.cast(v - cte.TRUNCATION_TOLERANCE, ti.i32)
    return res


@ti.func
def fetch_pixel(source_field: ti.template(), x: ti.i32, y: ti.i32, nx: ti.i32):
    """Read pixel (x, y). No bounds check: callers resolve the index first."""
    base = (y * nx + x) * cte.CHANNELS
    px = PixelVec(0.0)
    for c in ti.static(range(cte.CHANNELS)):
        px[c] = ti.cast(source_field[base + c], cte.FLOAT_TYPE_TI)
    return px


@ti.func
def store_pixel(target_field: ti.template(), idx: ti.i32, px):
    base = idx * cte.CHANNELS
    for c in ti.static(range(cte.CHANNELS)):
        target_field[base + c] = truncate(px[c])


def check_field_size(n_elements, role):
    """Reject buffers whose flat index would not fit the kernels' i32 indices."""
    if n_elements > cte.MAX_FIELD_ELEMENTS:
        raise InvalidSizeError(
            f"{role} holds {n_elements} channel values, more than the "
            f"{cte.MAX_FIELD_ELEMENTS} a kernel can index"
        )


def check_buffers(source, dest):
    """Validate both buffers before any sampling arithmetic."""
    source.validate("source")
    dest.validate("destination")
    check_field_size(source.data.size, "source")
    check_field_size(dest.data.size, "destination")


def check_kernel_parameters(tuning, kernel_base):
    """
    Validate the area-weighted kernel parameters.

    Raises:
        ValueError: If either value is not a finite positive number
    """
    if not (math.isfinite(tuning) and tuning > 0):
        raise ValueError(f"tuning must be a finite number > 0, got {tuning}")
    if not (math.isfinite(kernel_base) and kernel_base > 0):
        raise ValueError(f"kernel_base must be a finite number > 0, got {kernel_base}")


def upload(buffer):
    """
    Copy a PixelBuffer's channels into a pooled integer field.

    Returns:
        TPField: borrowed from the pool; the caller releases it
    """
    tpf = pool.get_temp_field(cte.INT_TYPE_TI, (buffer.data.size,))
    try:
        tpf.field.from_numpy(np.ascontiguousarray(buffer.data, dtype=cte.INT_TYPE_NP))
    except BaseException:
        tpf.release()
        raise
    return tpf


def download(tpf, dest):
    """
    Write a pooled integer field into dest.data in place.

    Values are cast to the destination dtype without clamping.
    """
    np.copyto(dest.data, tpf.field.to_numpy(), casting="unsafe")


def run_resampler(kernel, source, dest, *args):
    """
    Run a resampling kernel from source into dest.

    Both buffers must already have passed ``check_buffers``.
    The kernel signature is
    ``kernel(source_field, target_field, nx_src, ny_src, nx_t, ny_t, *args)``.

    Returns:
        PixelBuffer: dest, for chaining
    """
    with upload(source) as source_field, pool.get_temp_field(
        cte.INT_TYPE_TI, (dest.data.size,)
    ) as target_field:
        kernel(
            source_field.field,
            target_field.field,
            source.width,
            source.height,
            dest.width,
            dest.height,
            *args,
        )
        download(target_field, dest)

    return dest


def run_point_sampler(kernel, source, xs, ys):
    """
    Evaluate a point-sampling kernel at source-space coordinates.

    The kernel signature is
    ``kernel(source_field, xs_field, ys_field, out_field, nx, ny, n)``.

    Returns:
        numpy.ndarray: float64 array of shape (n, 4), not truncated
    """
    source.validate("source")
    check_field_size(source.data.size, "source")

    xs = np.asarray(xs, dtype=cte.FLOAT_TYPE_NP).reshape(-1)
    ys = np.asarray(ys, dtype=cte.FLOAT_TYPE_NP).reshape(-1)
    if xs.shape != ys.shape:
        raise ValueError(
            f"xs and ys must have the same length, got {xs.size} and {ys.size}"
        )
    n = xs.size
    if n == 0:
        return np.zeros((0, cte.CHANNELS), dtype=cte.FLOAT_TYPE_NP)
    check_field_size(n * cte.CHANNELS, "sample output")

    with upload(source) as source_field, pool.get_temp_field(
        cte.FLOAT_TYPE_TI, (n,)
    ) as xs_field, pool.get_temp_field(
        cte.FLOAT_TYPE_TI, (n,)
    ) as ys_field, pool.get_temp_field(
        cte.FLOAT_TYPE_TI, (n * cte.CHANNELS,)
    ) as out_field:
        xs_field.field.from_numpy(xs)
        ys_field.field.from_numpy(ys)
        kernel(
            source_field.field,
            xs_field.field,
            ys_field.field,
            out_field.field,
            source.width,
            source.height,
            n,
        )
        result = out_field.field.to_numpy().reshape(n, cte.CHANNELS)

    return result
