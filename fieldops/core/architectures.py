"""Memory domains and structural relocation.

Two memory domains are supported:
- HOST: numpy arrays in main memory
- DEVICE: Taichi fields in the Taichi runtime (backend chosen by init_taichi)

Relocation never aliases: moving data to a domain, including the domain it
already lives in, always produces an independent copy.

Usage:
    mask_d = arch_array(Architecture.DEVICE, mask)   # numpy -> ti.field
    node_d = adapt(Architecture.DEVICE, node)        # anything with relocate()
"""

import logging
from enum import Enum

import numpy as np
import taichi as ti

from fieldops.core.dtypes import storage_dtype, to_taichi_dtype
from fieldops.kernels.utils import copy_field

logger = logging.getLogger(__name__)


class Architecture(Enum):
    """Memory domain where data resides."""

    HOST = "HOST"
    DEVICE = "DEVICE"

    def __str__(self) -> str:
        return self.value


def is_device_array(obj) -> bool:
    """Check if obj is device storage (a Taichi scalar field)."""
    return isinstance(obj, ti.Field)


def architecture(obj) -> Architecture | None:
    """Get the memory domain of a grid, field, or raw array.

    Returns None for values with no memory domain (scalars, functions).
    """
    if isinstance(obj, Architecture):
        return obj
    if isinstance(obj, np.ndarray):
        return Architecture.HOST
    if is_device_array(obj):
        return Architecture.DEVICE
    arch = getattr(obj, "arch", None)
    if isinstance(arch, Architecture):
        return arch
    grid = getattr(obj, "grid", None)
    if grid is not None:
        return architecture(grid)
    return None


def array_shape(array) -> tuple[int, ...]:
    """Shape of host or device storage."""
    return tuple(array.shape)


def to_host(array) -> np.ndarray:
    """Copy host or device storage into a fresh numpy array."""
    if is_device_array(array):
        return array.to_numpy()
    return np.array(array, copy=True)


def arch_array(arch: Architecture, array, dtype=None):
    """Copy an array into the memory domain ``arch``.

    Args:
        arch: Target memory domain
        array: numpy array, Taichi field, or nested sequence
        dtype: Element type of the data (defaults to the array's own);
            on DEVICE, boolean data is stored as ti.i8

    Returns:
        numpy array for HOST, Taichi field for DEVICE
    """
    if arch is Architecture.HOST:
        host = to_host(array)
        if dtype is not None:
            host = host.astype(dtype)
        return host

    if arch is not Architecture.DEVICE:
        raise ValueError(f"Unknown architecture: {arch}")

    logger.debug("Copying array of shape %s to %s", array_shape(array), arch)

    if is_device_array(array):
        # Device-to-device copy stays on the device
        out = ti.field(dtype=array.dtype, shape=array.shape)
        copy_field(array, out)
        return out

    host = to_host(array)
    if dtype is None:
        dtype = host.dtype
    out = ti.field(dtype=to_taichi_dtype(dtype), shape=host.shape)
    out.from_numpy(np.ascontiguousarray(host.astype(storage_dtype(dtype))))
    return out


def adapt(to: Architecture, value):
    """Relocate a value to memory domain ``to`` by its own relocation contract.

    Values exposing relocate(arch) are delegated to. Raw arrays are copied
    with arch_array; tuples and lists are adapted elementwise. Anything else
    (scalars, functions, slices, ranges) has no memory domain and is
    returned unchanged.
    """
    relocate = getattr(value, "relocate", None)
    if callable(relocate) and not isinstance(value, type):
        return relocate(to)
    if isinstance(value, np.ndarray) or is_device_array(value):
        return arch_array(to, value)
    if isinstance(value, tuple):
        return tuple(adapt(to, v) for v in value)
    if isinstance(value, list):
        return [adapt(to, v) for v in value]
    return value
