"""
Taichi field pool for PyFastResample.

Every sampler copies the source buffer into a Taichi field, runs a kernel that
writes into a second field and copies the result back. Allocating Taichi
fields is expensive and each new field instance triggers a kernel recompile,
so temporary fields are recycled through a pool keyed by dtype and shape.

Usage:
    from pyfastresample import pool

    tmp = pool.get_temp_field(ti.i32, (n,))
    my_kernel(tmp.field)
    tmp.release()

Author: B.G.
"""

from .pool import TPField, TaiPool, taipool, get_temp_field, clear

__all__ = ["TPField", "TaiPool", "taipool", "get_temp_field", "clear"]
