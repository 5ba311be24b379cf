"""Type definitions for fieldops.

This module defines the default floating-point precision used by grids and
fields, and the mapping between numpy dtypes (host storage) and Taichi dtypes
(device storage).

Boolean data has no Taichi field type of its own and is stored on the device
as ti.i8, the same way integer domain masks are stored.
"""

import numpy as np
import taichi as ti

# Default floating-point type for Taichi initialisation and device fields
# ti.f64: Double precision (64-bit float) - matches numpy's default on the host
DTYPE = ti.f64

# Default numpy dtype for grids and host fields
NP_DTYPE = np.dtype(np.float64)

_NUMPY_TO_TAICHI = {
    np.dtype(np.float32): ti.f32,
    np.dtype(np.float64): ti.f64,
    np.dtype(np.int8): ti.i8,
    np.dtype(np.int16): ti.i16,
    np.dtype(np.int32): ti.i32,
    np.dtype(np.int64): ti.i64,
    np.dtype(np.uint8): ti.u8,
    np.dtype(np.uint16): ti.u16,
    np.dtype(np.uint32): ti.u32,
    np.dtype(np.uint64): ti.u64,
    np.dtype(np.bool_): ti.i8,
}


def to_taichi_dtype(dtype) -> object:
    """Get the Taichi storage type for a numpy dtype.

    Args:
        dtype: Anything accepted by np.dtype

    Returns:
        Taichi primitive type used to store values of this dtype

    Raises:
        TypeError: If the dtype has no Taichi storage type
    """
    key = np.dtype(dtype)
    if key not in _NUMPY_TO_TAICHI:
        raise TypeError(f"No Taichi storage type for dtype {key}")
    return _NUMPY_TO_TAICHI[key]


def storage_dtype(dtype) -> np.dtype:
    """Numpy dtype of the host copy of device data holding ``dtype`` values."""
    key = np.dtype(dtype)
    return np.dtype(np.int8) if key == np.bool_ else key


_TAICHI_INTEGER_TYPES = (ti.i8, ti.i16, ti.i32, ti.i64, ti.u8, ti.u16, ti.u32, ti.u64)


def is_mask_dtype(dtype) -> bool:
    """Whether arrays of ``dtype`` hold boolean flags (bool or integer storage).

    Accepts numpy dtypes for host arrays and Taichi primitive types for
    device fields, where booleans are stored as ti.i8.
    """
    if isinstance(dtype, np.dtype):
        return dtype.kind in "biu"
    return any(dtype == t for t in _TAICHI_INTEGER_TYPES)
