"""
Bicubic resampling for PyFastResample.

Reconstructs a Catmull-Rom bicubic patch from the 4x4 source neighbourhood
around each mapped coordinate and evaluates it at the fractional offset.
Neighbour indices are clamped to the source edges. Results are neither
renormalised nor clamped, so overshoot near sharp edges is kept.

Author: B.G.
"""

import logging

import taichi as ti

from .. import constants as cte
from ._common import (
    check_buffers,
    clamp_index,
    fetch_pixel,
    map_coordinate,
    run_point_sampler,
    run_resampler,
    store_pixel,
)

logger = logging.getLogger(__name__)


@ti.func
def cubic_interpolate(v0, v1, v2, v3, t):
    """
    Catmull-Rom interpolation between v1 (t=0) and v2 (t=1).

    Works on scalars and on pixel vectors alike. Evaluated in polynomial
    form so four equal inputs return that value exactly.
    """
    a = -0.5 * v0 + 1.5 * v1 - 1.5 * v2 + 0.5 * v3
    b = v0 - 2.5 * v1 + 2.0 * v2 - 0.5 * v3
    c = -0.5 * v0 + 0.5 * v2
    d = v1
    return ((a * t + b) * t + c) * t + d


@ti.func
def _cubic_row(
    source_field: ti.template(),
    x1: ti.i32,
    y: ti.i32,
    fx: cte.FLOAT_TYPE_TI,
    nx: ti.i32,
    ny: ti.i32,
):
    yy = clamp_index(y, ny)
    p0 = fetch_pixel(source_field, clamp_index(x1 - 1, nx), yy, nx)
    p1 = fetch_pixel(source_field, clamp_index(x1, nx), yy, nx)
    p2 = fetch_pixel(source_field, clamp_index(x1 + 1, nx), yy, nx)
    p3 = fetch_pixel(source_field, clamp_index(x1 + 2, nx), yy, nx)
    return cubic_interpolate(p0, p1, p2, p3, fx)


@ti.func
def bicubic_sample(
    source_field: ti.template(),
    x: cte.FLOAT_TYPE_TI,
    y: cte.FLOAT_TYPE_TI,
    nx: ti.i32,
    ny: ti.i32,
):
    """Evaluate the bicubic patch at source coordinate (x, y)."""
    x1 = ti.cast(x, ti.i32)
    y1 = ti.cast(y, ti.i32)
    fx = x - x1
    fy = y - y1

    r0 = _cubic_row(source_field, x1, y1 - 1, fx, nx, ny)
    r1 = _cubic_row(source_field, x1, y1, fx, nx, ny)
    r2 = _cubic_row(source_field, x1, y1 + 1, fx, nx, ny)
    r3 = _cubic_row(source_field, x1, y1 + 2, fx, nx, ny)
    return cubic_interpolate(r0, r1, r2, r3, fy)


@ti.kernel
def bicubic_kernel(
    source_field: ti.template(),
    target_field: ti.template(),
    nx_src: ti.i32,
    ny_src: ti.i32,
    nx_t: ti.i32,
    ny_t: ti.i32,
):
    """
    Fill target_field with bicubic samples of source_field.

    Args:
        source_field: Source channels (nx_src * ny_src * 4 elements)
        target_field: Output channels (nx_t * ny_t * 4 elements)
        nx_src, ny_src: Source dimensions
        nx_t, ny_t: Target dimensions
    """
    for idx in range(nx_t * ny_t):
        j_t = idx // nx_t
        i_t = idx % nx_t
        x = map_coordinate(i_t, nx_src, nx_t)
        y = map_coordinate(j_t, ny_src, ny_t)
        store_pixel(target_field, idx, bicubic_sample(source_field, x, y, nx_src, ny_src))


@ti.kernel
def bicubic_points_kernel(
    source_field: ti.template(),
    xs_field: ti.template(),
    ys_field: ti.template(),
    out_field: ti.template(),
    nx: ti.i32,
    ny: ti.i32,
    n: ti.i32,
):
    for k in range(n):
        px = bicubic_sample(source_field, xs_field[k], ys_field[k], nx, ny)
        for c in ti.static(range(cte.CHANNELS)):
            out_field[k * cte.CHANNELS + c] = px[c]


def bicubic_resample(source, dest):
    """
    Resample source into dest with bicubic interpolation.

    Destination pixel (i, j) samples source coordinate
    ``(i * src_w / dst_w, j * src_h / dst_h)``; pixels that land on integer
    source coordinates reproduce the source pixel exactly.

    Args:
        source: PixelBuffer to read
        dest: PixelBuffer whose width/height set the output size; its data
              is overwritten in place

    Returns:
        PixelBuffer: dest

    Raises:
        InvalidSizeError: If either buffer has a zero dimension
        ShapeMismatchError: If either buffer's data length is wrong
    """
    check_buffers(source, dest)
    return _bicubic_into(source, dest)


def _bicubic_into(source, dest):
    logger.debug(
        "Bicubic resample %dx%d -> %dx%d",
        source.width,
        source.height,
        dest.width,
        dest.height,
    )
    return run_resampler(bicubic_kernel, source, dest)


def sample_bicubic(source, xs, ys):
    """
    Evaluate the bicubic reconstruction of source at arbitrary coordinates.

    Args:
        source: PixelBuffer to read
        xs: Sequence of source-space x coordinates
        ys: Sequence of source-space y coordinates (same length as xs)

    Returns:
        numpy.ndarray: float64 array of shape (len(xs), 4), not truncated
    """
    return run_point_sampler(bicubic_points_kernel, source, xs, ys)


__all__ = ["bicubic_resample", "sample_bicubic", "bicubic_kernel", "cubic_interpolate"]
