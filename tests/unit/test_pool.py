"""Unit tests for the Taichi field pool."""

import numpy as np
import pytest
import taichi as ti

from pyfastresample.pool import TaiPool, TPField


@pytest.fixture
def fresh_pool():
    return TaiPool()


@pytest.mark.unit
def test_distinct_fields_while_in_use(fresh_pool):
    a = fresh_pool.get_tpfield(ti.i32, (8,))
    b = fresh_pool.get_tpfield(ti.i32, (8,))
    assert isinstance(a, TPField)
    assert a is not b
    assert a.in_use and b.in_use
    assert fresh_pool.stats() == {"total": 2, "in_use": 2, "free": 0}


@pytest.mark.unit
def test_released_field_is_reused(fresh_pool):
    a = fresh_pool.get_tpfield(ti.i32, (8,))
    a.release()
    b = fresh_pool.get_tpfield(ti.i32, 8)
    assert a is b
    assert fresh_pool.stats()["total"] == 1


@pytest.mark.unit
def test_key_includes_dtype_and_shape(fresh_pool):
    a = fresh_pool.get_tpfield(ti.i32, (8,))
    a.release()
    b = fresh_pool.get_tpfield(ti.f64, (8,))
    c = fresh_pool.get_tpfield(ti.i32, (9,))
    assert b is not a
    assert c is not a


@pytest.mark.unit
def test_context_manager_releases(fresh_pool):
    with fresh_pool.get_tpfield(ti.i32, (4,)) as tpf:
        assert tpf.in_use
        assert tpf.field.shape == (4,)
    assert not tpf.in_use


@pytest.mark.unit
def test_rejects_empty_shape(fresh_pool):
    with pytest.raises(ValueError):
        fresh_pool.get_tpfield(ti.i32, (0,))


@pytest.mark.unit
def test_clear(fresh_pool):
    fresh_pool.get_tpfield(ti.i32, (4,))
    fresh_pool.clear()
    assert fresh_pool.stats() == {"total": 0, "in_use": 0, "free": 0}


@pytest.mark.unit
def test_samplers_return_fields_to_global_pool(test_data_manager):
    from pyfastresample import PixelBuffer, bicubic_resample, pool

    src = test_data_manager.random(3, 3)
    bicubic_resample(src, PixelBuffer.allocate(5, 5))
    assert pool.taipool.stats()["in_use"] == 0


@pytest.mark.unit
def test_release_zero_fills(fresh_pool):
    tpf = fresh_pool.get_tpfield(ti.i32, (6,))
    tpf.field.fill(42)
    tpf.release()
    again = fresh_pool.get_tpfield(ti.i32, (6,))
    assert again is tpf
    assert not np.any(again.field.to_numpy())


@pytest.mark.unit
def test_free_list_is_bounded():
    small = TaiPool(max_free=2)
    borrowed = [small.get_tpfield(ti.i32, (n,)) for n in range(1, 6)]
    for tpf in borrowed:
        tpf.release()
    assert small.stats() == {"total": 2, "in_use": 0, "free": 2}
    # Oldest releases are evicted and their memory freed
    assert all(tpf.field is None for tpf in borrowed[:3])
    assert [tpf.shape for tpf in small.fields()] == [(4,), (5,)]


@pytest.mark.unit
def test_reuse_refreshes_eviction_order():
    small = TaiPool(max_free=2)
    a = small.get_tpfield(ti.i32, (1,))
    b = small.get_tpfield(ti.i32, (2,))
    a.release()
    b.release()
    small.get_tpfield(ti.i32, (1,)).release()
    small.get_tpfield(ti.i32, (3,)).release()
    assert a.field is not None
    assert b.field is None


@pytest.mark.unit
def test_rejects_negative_capacity():
    with pytest.raises(ValueError):
        TaiPool(max_free=-1)


@pytest.mark.unit
def test_no_pixel_data_left_in_global_pool(test_data_manager):
    from pyfastresample import PixelBuffer, gaussian_resample, pool

    src = test_data_manager.solid(8, 8, (1, 2, 3, 4))
    gaussian_resample(src, PixelBuffer.allocate(3, 3))
    tracked = pool.taipool.fields()
    assert tracked
    for tpf in tracked:
        assert not tpf.in_use
        assert not np.any(tpf.field.to_numpy())


@pytest.mark.unit
@pytest.mark.slow
def test_global_pool_stays_bounded_across_sizes(test_data_manager):
    from pyfastresample import PixelBuffer, pool, resize

    src = test_data_manager.random(16, 16)
    for n in range(2, 40):
        resize(src, PixelBuffer.allocate(n, n + 1))
    stats = pool.taipool.stats()
    assert stats["in_use"] == 0
    assert stats["total"] <= pool.taipool.max_free
