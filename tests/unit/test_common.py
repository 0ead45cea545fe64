"""Unit tests for the host-side plumbing shared by the samplers."""

import numpy as np
import pytest

from pyfastresample import InvalidSizeError, PixelBuffer, constants, pool
from pyfastresample.resampling import (
    bicubic_resample,
    bilinear_resample,
    gaussian_resample,
    sample_bilinear,
)
from pyfastresample.resampling import _common


def _half_red_row(width):
    """width x 1 buffer, black on the left half and red 200 on the right half."""
    rgba = np.zeros((1, width, 4), dtype=np.uint8)
    rgba[0, width // 2 :, 0] = 200
    rgba[0, :, 3] = 255
    return PixelBuffer.from_array(rgba)


@pytest.mark.unit
@pytest.mark.slow
def test_wide_bicubic_maps_last_column():
    # 59999 * 40000 does not fit an i32
    dest = bicubic_resample(_half_red_row(40000), PixelBuffer.allocate(60000, 1))
    assert dest.pixel(59999, 0) == (200, 0, 0, 255)
    assert dest.pixel(0, 0) == (0, 0, 0, 255)


@pytest.mark.unit
@pytest.mark.slow
def test_wide_bilinear_maps_aligned_column():
    dest = bilinear_resample(_half_red_row(40000), PixelBuffer.allocate(60000, 1))
    # 59997 * 40000 / 60000 == 39998 exactly
    assert dest.pixel(59997, 0) == (200, 0, 0, 255)


@pytest.mark.unit
@pytest.mark.slow
def test_wide_gaussian_maps_last_block():
    dest = gaussian_resample(_half_red_row(60000), PixelBuffer.allocate(40000, 1))
    assert dest.pixel(39999, 0) == (200, 0, 0, 255)
    assert dest.pixel(0, 0) == (0, 0, 0, 255)


@pytest.mark.unit
def test_buffer_too_large_for_kernel_indices():
    huge = np.broadcast_to(np.uint8(0), (2**31,))
    source = PixelBuffer(2**29, 1, huge)
    assert source.data.size > constants.MAX_FIELD_ELEMENTS
    with pytest.raises(InvalidSizeError):
        bicubic_resample(source, PixelBuffer.allocate(2, 2))
    with pytest.raises(InvalidSizeError):
        gaussian_resample(PixelBuffer.allocate(2, 2), source)
    with pytest.raises(InvalidSizeError):
        sample_bilinear(source, [0.0], [0.0])
    assert pool.taipool.stats()["in_use"] == 0


@pytest.mark.unit
def test_fields_released_when_download_fails(monkeypatch, test_data_manager):
    def failing_download(tpf, dest):
        raise RuntimeError("copy failed")

    monkeypatch.setattr(_common, "download", failing_download)
    with pytest.raises(RuntimeError):
        bicubic_resample(test_data_manager.random(3, 3), PixelBuffer.allocate(5, 5))
    assert pool.taipool.stats()["in_use"] == 0


@pytest.mark.unit
def test_source_released_when_target_borrow_fails(monkeypatch, test_data_manager):
    calls = []
    original = pool.get_temp_field

    def second_borrow_fails(dtype, shape):
        calls.append(shape)
        if len(calls) == 2:
            raise RuntimeError("out of device memory")
        return original(dtype, shape)

    monkeypatch.setattr(_common.pool, "get_temp_field", second_borrow_fails)
    with pytest.raises(RuntimeError):
        bilinear_resample(test_data_manager.random(3, 3), PixelBuffer.allocate(4, 4))
    assert len(calls) == 2
    assert pool.taipool.stats()["in_use"] == 0


@pytest.mark.unit
def test_point_sampler_fields_released_when_kernel_fails(test_data_manager):
    def failing_kernel(*args):
        raise RuntimeError("kernel failed")

    with pytest.raises(RuntimeError):
        _common.run_point_sampler(failing_kernel, test_data_manager.random(3, 3), [0.5], [0.5])
    assert pool.taipool.stats()["in_use"] == 0


@pytest.mark.unit
@pytest.mark.parametrize(
    "tuning,kernel_base",
    [(float("nan"), 2.718), (float("inf"), 2.718), (10.0, float("nan")), (10.0, float("-inf"))],
)
def test_check_kernel_parameters_rejects_non_finite(tuning, kernel_base):
    with pytest.raises(ValueError):
        _common.check_kernel_parameters(tuning, kernel_base)


@pytest.mark.unit
def test_check_kernel_parameters_accepts_defaults():
    _common.check_kernel_parameters(constants.GAUSSIAN_TUNING, constants.GAUSSIAN_KERNEL_BASE)
