"""
Area-weighted ("Gaussian") downsampling for PyFastResample.

Each destination pixel averages the block of source pixels it covers. The
block starts at the pixel's mapped source coordinate ``(sx, sy)`` and spans
``sample_x = src_w / dst_w`` columns and ``sample_y = src_h / dst_h`` rows.
Every source pixel in the block is weighted by

    w(u, v) = 1 / (12 * tuning) * base ** ((u**2 + v**2) / (2 * tuning**2))

where ``(u, v)`` is its offset from ``(sx, sy)`` divided by the block size.
The exponent is positive: weights grow slightly with distance from the block
origin instead of decaying. With the default tuning of 10 the spread of
weights inside a block stays within about one percent, so the result is close to a
plain box average.

Author: B.G.
"""

import logging

import taichi as ti

from .. import constants as cte
from ._common import (
    PixelVec,
    check_buffers,
    check_kernel_parameters,
    fetch_pixel,
    map_coordinate,
    run_resampler,
    store_pixel,
)

logger = logging.getLogger(__name__)


@ti.kernel
def gaussian_kernel(
    source_field: ti.template(),
    target_field: ti.template(),
    nx_src: ti.i32,
    ny_src: ti.i32,
    nx_t: ti.i32,
    ny_t: ti.i32,
    sample_x: cte.FLOAT_TYPE_TI,
    sample_y: cte.FLOAT_TYPE_TI,
    tuning: cte.FLOAT_TYPE_TI,
    kernel_base: cte.FLOAT_TYPE_TI,
):
    """
    Fill target_field with weighted block averages of source_field.

    Args:
        source_field: Source channels (nx_src * ny_src * 4 elements)
        target_field: Output channels (nx_t * ny_t * 4 elements)
        nx_src, ny_src: Source dimensions
        nx_t, ny_t: Target dimensions
        sample_x, sample_y: Block extent in source pixels
        tuning: Kernel spread
        kernel_base: Base of the exponential weight
    """
    scale = 1.0 / (12.0 * tuning)
    spread = 2.0 * tuning * tuning
    width = ti.cast(nx_src, cte.FLOAT_TYPE_TI)
    height = ti.cast(ny_src, cte.FLOAT_TYPE_TI)

    for idx in range(nx_t * ny_t):
        j_t = idx // nx_t
        i_t = idx % nx_t

        x = map_coordinate(i_t, nx_src, nx_t)
        y = map_coordinate(j_t, ny_src, ny_t)

        # Block bounds, clipped to the source
        x0 = ti.cast(ti.max(x, 0.0), ti.i32)
        x1 = ti.cast(ti.min(x + sample_x, width), ti.i32)
        y0 = ti.cast(ti.max(y, 0.0), ti.i32)
        y1 = ti.cast(ti.min(y + sample_y, height), ti.i32)

        # An axis being enlarged can yield an empty block: keep one line
        if x1 <= x0:
            x1 = ti.min(x0 + 1, nx_src)
        if y1 <= y0:
            y1 = ti.min(y0 + 1, ny_src)

        acc = PixelVec(0.0)
        total = ti.cast(0.0, cte.FLOAT_TYPE_TI)
        for xs in range(x0, x1):
            for ys in range(y0, y1):
                u = (x - xs) / sample_x
                v = (y - ys) / sample_y
                w = scale * kernel_base ** ((u * u + v * v) / spread)
                acc += fetch_pixel(source_field, xs, ys, nx_src) * w
                total += w

        store_pixel(target_field, idx, acc / total)


def gaussian_resample(
    source,
    dest,
    tuning: float = cte.GAUSSIAN_TUNING,
    kernel_base: float = cte.GAUSSIAN_KERNEL_BASE,
):
    """
    Downsample source into dest with area-weighted block averaging.

    Intended for shrinking, but valid for any size pair: an axis that is
    being enlarged samples the single source line under each destination
    line.

    Args:
        source: PixelBuffer to read
        dest: PixelBuffer whose width/height set the output size; its data
              is overwritten in place
        tuning: Kernel spread (default: constants.GAUSSIAN_TUNING)
        kernel_base: Base of the exponential weight
                     (default: constants.GAUSSIAN_KERNEL_BASE)

    Returns:
        PixelBuffer: dest

    Raises:
        InvalidSizeError: If either buffer has a zero dimension
        ShapeMismatchError: If either buffer's data length is wrong
        ValueError: If tuning or kernel_base is not a finite positive number

    Example:
        src = PixelBuffer.filled(4, 4, (90, 90, 90, 255))
        dst = PixelBuffer.allocate(1, 1)
        gaussian_resample(src, dst).pixel(0, 0)   # (90, 90, 90, 255)
    """
    check_kernel_parameters(tuning, kernel_base)
    check_buffers(source, dest)
    return _gaussian_into(source, dest, tuning, kernel_base)


def _gaussian_into(source, dest, tuning, kernel_base):
    """Run the area-weighted kernel on buffers that are already validated."""
    sample_x = source.width / dest.width
    sample_y = source.height / dest.height
    logger.debug(
        "Area-weighted resample %dx%d -> %dx%d (block %.3f x %.3f, tuning=%s)",
        source.width,
        source.height,
        dest.width,
        dest.height,
        sample_x,
        sample_y,
        tuning,
    )

    return run_resampler(
        gaussian_kernel,
        source,
        dest,
        sample_x,
        sample_y,
        float(tuning),
        float(kernel_base),
    )


__all__ = ["gaussian_resample", "gaussian_kernel"]
