"""Storage allocation and field assignment.

- similar_field: allocate a zeroed Field shaped like a field-like value
- evaluate_window: batched evaluation of any field-like value into numpy
- set_field: write scalars, arrays, functions of position, or lazy values
  into a Field's active window

set_field evaluates the source completely before writing, so a lazy value
may read from the very field it is being written into.
"""

import logging
from typing import Any

import numpy as np

from fieldops.core.architectures import Architecture, architecture
from fieldops.core.dtypes import storage_dtype
from fieldops.core.errors import GridMismatchError
from fieldops.fields.field import Field
from fieldops.fields.protocol import window_ranges
from fieldops.kernels.utils import fill_window

logger = logging.getLogger(__name__)


def similar_field(obj: Any) -> Field:
    """Allocate a zeroed Field with the grid, location, dtype and window of ``obj``."""
    return Field(obj.grid, location=obj.location, dtype=obj.dtype, indices=obj.indices)


def evaluate_over(obj: Any, ranges) -> np.ndarray:
    """Evaluate ``obj[i, j, k]`` for every index in the product of ``ranges``.

    Each index is read through ``obj[i, j, k]`` from Python, so device-resident
    values should go through host_copy first; evaluate_window and set_field do.

    Args:
        obj: Any elementwise-readable value
        ranges: One range of logical indices per axis

    Returns:
        numpy array of shape (len(ri), len(rj), len(rk))
    """
    ri, rj, rk = ranges
    shape = (len(ri), len(rj), len(rk))
    values = [obj[i, j, k] for i in ri for j in rj for k in rk]
    if not values:
        return np.zeros(shape, dtype=getattr(obj, "dtype", None))
    return np.asarray(values).reshape(shape)


def host_copy(obj: Any) -> Any:
    """HOST copy of a device-resident field-like value, else ``obj`` itself.

    One bulk transfer per constituent replaces a device read per index.
    """
    if architecture(obj) is not Architecture.DEVICE or not hasattr(obj, "relocate"):
        return obj
    logger.debug("Copying %s to HOST for evaluation", type(obj).__name__)
    return obj.relocate(Architecture.HOST)


def evaluate_window(obj: Any) -> np.ndarray:
    """Evaluate a field-like value over its own active window."""
    obj = host_copy(obj)
    if isinstance(obj, Field):
        return np.array(obj.interior(), copy=True)
    return evaluate_over(obj, window_ranges(obj))


def _position_values(field: Field, func) -> np.ndarray:
    grid = field.grid
    ri, rj, rk = window_ranges(field)
    lx, ly, lz = field.location
    return np.asarray(
        [
            func(grid.node(0, i, lx), grid.node(1, j, ly), grid.node(2, k, lz))
            for i in ri
            for j in rj
            for k in rk
        ]
    ).reshape(field.size)


def _write_window(field: Field, values: np.ndarray) -> None:
    values = np.asarray(values)
    if values.shape != field.size:
        raise ValueError(
            f"Values of shape {values.shape} don't match window {field.size}"
        )
    slices = field.storage_slices()
    if field.arch is Architecture.HOST:
        field.data[slices] = values.astype(field.dtype)
        return
    host = field.to_numpy()
    host[slices] = values.astype(field.dtype)
    field.data.from_numpy(np.ascontiguousarray(host.astype(storage_dtype(field.dtype))))


def set_field(field: Field, value: Any) -> Field:
    """Write ``value`` into the active window of ``field``.

    Args:
        field: Destination storage (caller-owned; exclusive access assumed)
        value: One of
            - a scalar, written to every point of the window
            - a numpy array shaped like the window or like the full storage
            - a field-like value on the same grid and location, evaluated
              at every index of the destination window
            - a function f(x, y, z) of node coordinates

    Returns:
        The destination field

    Raises:
        GridMismatchError: If a field-like value lives on another grid
        ValueError: If shapes or locations don't match
    """
    if not isinstance(field, Field):
        raise TypeError(f"Cannot set values of {type(field).__name__}")

    if hasattr(value, "grid") and hasattr(value, "__getitem__"):
        if value.grid != field.grid:
            raise GridMismatchError(
                f"Cannot set field on {field.grid.summary()} "
                f"from value on {value.grid.summary()}"
            )
        if tuple(value.location) != tuple(field.location):
            raise ValueError(
                f"Location mismatch: field at {field.location}, value at {value.location}"
            )
        logger.debug("Materializing %s into %s", type(value).__name__, field.summary())
        _write_window(field, evaluate_over(host_copy(value), window_ranges(field)))
        return field

    if isinstance(value, np.ndarray):
        if value.shape == field.size:
            _write_window(field, value)
        elif value.shape == field.grid.full_shape(field.location):
            if field.arch is Architecture.HOST:
                field.data[...] = value.astype(field.dtype)
            else:
                field.data.from_numpy(
                    np.ascontiguousarray(value.astype(storage_dtype(field.dtype)))
                )
        else:
            raise ValueError(
                f"Array of shape {value.shape} matches neither window {field.size} "
                f"nor full extent {field.grid.full_shape(field.location)}"
            )
        return field

    if callable(value):
        _write_window(field, _position_values(field, value))
        return field

    if field.arch is Architecture.DEVICE:
        lo_hi = []
        for s in field.storage_slices():
            lo_hi.extend((s.start, s.stop))
        fill_window(field.data, float(value), *lo_hi)
    else:
        field.data[field.storage_slices()] = value
    return field
