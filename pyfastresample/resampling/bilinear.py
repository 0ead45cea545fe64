"""
Bilinear resampling for PyFastResample.

Blends the 2x2 source neighbourhood of each mapped coordinate, first along x
then along y. Unlike the bicubic sampler, neighbours outside the source are
not clamped: they read as the sentinel pixel ``constants.SENTINEL_PIXEL``
(mid grey, fully transparent). Coordinates that fall exactly on a source
pixel return that pixel without blending.

This sampler is not selected by ``resize`` with the default configuration.
Call it directly, through ``resample(..., Strategy.BILINEAR)`` or with
``ResizeConfig(upsample=Strategy.BILINEAR)``.

Author: B.G.
"""

import logging

import taichi as ti

from .. import constants as cte
from ._common import (
    PixelVec,
    check_buffers,
    fetch_pixel,
    map_coordinate,
    run_point_sampler,
    run_resampler,
    store_pixel,
)

logger = logging.getLogger(__name__)


@ti.func
def _pixel_or_sentinel(source_field: ti.template(), x: ti.i32, y: ti.i32, nx: ti.i32, ny: ti.i32):
    px = PixelVec(0.0)
    if 0 <= x < nx and 0 <= y < ny:
        px = fetch_pixel(source_field, x, y, nx)
    else:
        for c in ti.static(range(cte.CHANNELS)):
            px[c] = cte.SENTINEL_PIXEL[c]
    return px


@ti.func
def _mix(n, m, t):
    return n + (m - n) * t


@ti.func
def bilinear_sample(
    source_field: ti.template(),
    x: cte.FLOAT_TYPE_TI,
    y: cte.FLOAT_TYPE_TI,
    nx: ti.i32,
    ny: ti.i32,
):
    """Evaluate the bilinear reconstruction at source coordinate (x, y)."""
    fx = ti.cast(x, ti.i32)
    fy = ti.cast(y, ti.i32)
    px = PixelVec(0.0)
    if ti.cast(fx, cte.FLOAT_TYPE_TI) == x and ti.cast(fy, cte.FLOAT_TYPE_TI) == y:
        px = _pixel_or_sentinel(source_field, fx, fy, nx, ny)
    else:
        tx = x - fx
        ty = y - fy
        top = _mix(
            _pixel_or_sentinel(source_field, fx, fy, nx, ny),
            _pixel_or_sentinel(source_field, fx + 1, fy, nx, ny),
            tx,
        )
        bottom = _mix(
            _pixel_or_sentinel(source_field, fx, fy + 1, nx, ny),
            _pixel_or_sentinel(source_field, fx + 1, fy + 1, nx, ny),
            tx,
        )
        px = _mix(top, bottom, ty)
    return px


@ti.kernel
def bilinear_kernel(
    source_field: ti.template(),
    target_field: ti.template(),
    nx_src: ti.i32,
    ny_src: ti.i32,
    nx_t: ti.i32,
    ny_t: ti.i32,
):
    """
    Fill target_field with bilinear samples of source_field.

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
        store_pixel(target_field, idx, bilinear_sample(source_field, x, y, nx_src, ny_src))


@ti.kernel
def bilinear_points_kernel(
    source_field: ti.template(),
    xs_field: ti.template(),
    ys_field: ti.template(),
    out_field: ti.template(),
    nx: ti.i32,
    ny: ti.i32,
    n: ti.i32,
):
    for k in range(n):
        px = bilinear_sample(source_field, xs_field[k], ys_field[k], nx, ny)
        for c in ti.static(range(cte.CHANNELS)):
            out_field[k * cte.CHANNELS + c] = px[c]


def bilinear_resample(source, dest):
    """
    Resample source into dest with bilinear interpolation.

    Near the right and bottom edges of an enlargement the blend reaches past
    the source and mixes in the sentinel pixel.

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
    return _bilinear_into(source, dest)


def _bilinear_into(source, dest):
    logger.debug(
        "Bilinear resample %dx%d -> %dx%d",
        source.width,
        source.height,
        dest.width,
        dest.height,
    )
    return run_resampler(bilinear_kernel, source, dest)


def sample_bilinear(source, xs, ys):
    """
    Evaluate the bilinear reconstruction of source at arbitrary coordinates.

    Args:
        source: PixelBuffer to read
        xs: Sequence of source-space x coordinates
        ys: Sequence of source-space y coordinates (same length as xs)

    Returns:
        numpy.ndarray: float64 array of shape (len(xs), 4), not truncated.
        A coordinate whose whole neighbourhood lies outside the source
        returns exactly ``constants.SENTINEL_PIXEL``.
    """
    return run_point_sampler(bilinear_points_kernel, source, xs, ys)


__all__ = ["bilinear_resample", "sample_bilinear", "bilinear_kernel"]
