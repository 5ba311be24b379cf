"""Utility kernels for device-resident field storage."""

import taichi as ti

from fieldops.core.dtypes import DTYPE


@ti.kernel
def fill_field(field: ti.template(), value: DTYPE):
    """Set all field values to a constant."""
    for I in ti.grouped(field):
        field[I] = value


@ti.kernel
def copy_field(src: ti.template(), dst: ti.template()):
    """Copy src to dst."""
    for I in ti.grouped(src):
        dst[I] = src[I]


@ti.kernel
def fill_window(
    field: ti.template(),
    value: DTYPE,
    i0: ti.i32,
    i1: ti.i32,
    j0: ti.i32,
    j1: ti.i32,
    k0: ti.i32,
    k1: ti.i32,
):
    """Set field values to a constant inside a storage-index box [lo, hi)."""
    for i, j, k in ti.ndrange((i0, i1), (j0, j1), (k0, k1)):
        field[i, j, k] = value
