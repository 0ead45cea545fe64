"""
Memory pool of temporary Taichi fields.

Fields are identified by ``(dtype, shape)``. A field handed out by the pool
is marked in use until ``release()`` is called on its ``TPField`` wrapper.
Releasing a field zero-fills it, so no pixel data outlives the call that
borrowed it, and returns it to the free list of its pool.

The free list is bounded: at most ``max_free`` released fields are kept,
least recently released first out. Each pooled field lives in its own
Taichi SNode tree so that evicted fields give their memory back.

The pool is bound to the Taichi runtime that created its fields. After
calling ``ti.init`` again, call ``clear()`` so stale fields are dropped.

Author: B.G.
"""

import logging
from collections import OrderedDict

import taichi as ti

logger = logging.getLogger(__name__)

DEFAULT_MAX_FREE = 8


class TPField:
    """
    Pooled Taichi field wrapper.

    Attributes:
        field: The underlying Taichi field
        dtype: Taichi dtype of the field
        shape: Shape tuple of the field
        in_use: True while borrowed from the pool
    """

    def __init__(self, dtype, shape, pool=None):
        self.dtype = dtype
        self.shape = shape
        self.pool = pool
        self.in_use = False

        builder = ti.FieldsBuilder()
        self.field = ti.field(dtype=dtype)
        builder.dense(ti.axes(*range(len(shape))), shape).place(self.field)
        self._tree = builder.finalize()

    def release(self):
        """Zero the field and return it to its pool."""
        if not self.in_use:
            return
        self.field.fill(0)
        self.in_use = False
        if self.pool is not None:
            self.pool._on_release(self)

    def destroy(self):
        """Free the field's device memory. The field is unusable afterwards."""
        if self._tree is not None:
            self._tree.destroy()
            self._tree = None
            self.field = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    def __repr__(self):
        state = "in use" if self.in_use else "free"
        return f"TPField(dtype={self.dtype}, shape={self.shape}, {state})"


def _normalise_shape(shape):
    if isinstance(shape, int):
        return (shape,)
    return tuple(int(s) for s in shape)


class TaiPool:
    """
    Pool of reusable Taichi fields keyed by (dtype, shape).

    Args:
        max_free: Maximum number of released fields kept for reuse
    """

    def __init__(self, max_free=DEFAULT_MAX_FREE):
        if max_free < 0:
            raise ValueError(f"max_free must be >= 0, got {max_free}")
        self.max_free = max_free
        self._in_use = []
        # id -> TPField, oldest release first
        self._free = OrderedDict()

    def get_tpfield(self, dtype, shape):
        """
        Borrow a field of the given dtype and shape.

        Args:
            dtype: Taichi dtype (e.g. ti.i32, ti.f64)
            shape: int or tuple of positive ints

        Returns:
            TPField: marked in use; call ``release()`` when done

        Raises:
            ValueError: If any dimension of shape is not positive
        """
        shape = _normalise_shape(shape)
        if any(s <= 0 for s in shape):
            raise ValueError(f"Pooled fields need positive dimensions, got {shape}")

        for key, tpf in self._free.items():
            if tpf.dtype == dtype and tpf.shape == shape:
                del self._free[key]
                break
        else:
            logger.debug("Allocating pooled field dtype=%s shape=%s", dtype, shape)
            tpf = TPField(dtype, shape, pool=self)

        tpf.in_use = True
        self._in_use.append(tpf)
        return tpf

    def _on_release(self, tpf):
        self._in_use = [f for f in self._in_use if f is not tpf]
        self._free[id(tpf)] = tpf
        while len(self._free) > self.max_free:
            _, oldest = self._free.popitem(last=False)
            logger.debug("Evicting pooled field dtype=%s shape=%s", oldest.dtype, oldest.shape)
            oldest.destroy()

    def fields(self):
        """Return every field the pool currently tracks."""
        return list(self._in_use) + list(self._free.values())

    def clear(self):
        """Forget every pooled field, including ones still in use."""
        for tpf in self._in_use:
            tpf.pool = None
        self._in_use = []
        self._free = OrderedDict()

    def stats(self):
        """
        Summarise the pool content.

        Returns:
            dict: ``{"total": n, "in_use": n, "free": n}``
        """
        in_use = len(self._in_use)
        free = len(self._free)
        return {"total": in_use + free, "in_use": in_use, "free": free}


taipool = TaiPool()


def get_temp_field(dtype, shape):
    """Borrow a temporary field from the global pool."""
    return taipool.get_tpfield(dtype, shape)


def clear():
    """Drop every field of the global pool."""
    taipool.clear()
