"""Concrete and constant fields on a structured grid.

This module provides the field-like values lazy operations read from:
- Field: storage-backed values at a staggered location, halos included
- ConstantField: storage-free field returning one value everywhere
- OneField: the constant one, used for counting reductions

Usage:
    grid = StructuredGrid(size=(16, 16, 8))
    c = Field(grid)                       # cell-centered, float64, on HOST
    c[0, 0, 0] = 1.0
    c_d = c.relocate(Architecture.DEVICE)  # independent copy in a ti.field
"""

from typing import Any

import numpy as np
import taichi as ti

from fieldops.core.architectures import (
    Architecture,
    architecture,
    arch_array,
    array_shape,
)
from fieldops.core.dtypes import to_taichi_dtype
from fieldops.core.grid import CCC, Location, StructuredGrid
from fieldops.fields.protocol import FULL, is_full, window_ranges
from fieldops.kernels.utils import fill_field


def _normalize_location(location) -> tuple[Location, Location, Location]:
    values = tuple(Location(loc) for loc in location)
    if len(values) != 3:
        raise ValueError(f"location must have 3 entries, got {len(values)}")
    return values


def _normalize_indices(indices, sizes) -> tuple:
    """Validate an index window against interior sizes.

    Each entry is FULL (slice(None)) or a unit-step range inside 0..n-1.
    """
    indices = tuple(indices)
    if len(indices) != 3:
        raise ValueError(f"indices must have 3 entries, got {len(indices)}")
    for axis, (window, n) in enumerate(zip(indices, sizes)):
        if is_full(window):
            continue
        if not isinstance(window, range):
            raise ValueError(
                f"index window on axis {axis} must be FULL or a range, got {window!r}"
            )
        if window.step != 1 or len(window) == 0:
            raise ValueError(f"index window on axis {axis} must be a non-empty unit-step range")
        if window.start < 0 or window.stop > n:
            raise ValueError(
                f"index window {window} on axis {axis} exceeds interior size {n}"
            )
    return indices


def _allocate(arch: Architecture, shape: tuple[int, ...], dtype: np.dtype):
    if arch is Architecture.DEVICE:
        return ti.field(dtype=to_taichi_dtype(dtype), shape=shape)
    return np.zeros(shape, dtype=dtype)


class Field:
    """Storage-backed field at a staggered location.

    Storage covers the full indexable extent, halos included, and lives in
    the grid's memory domain: a numpy array on HOST, a Taichi field on
    DEVICE. Logical index (i, j, k) maps to storage index
    (i + hx, j + hy, k + hz).

    Attributes:
        grid: Grid the field is defined on
        location: Location tag along each axis
        dtype: numpy element type
        indices: Active index window (FULL or a range per axis)
        data: Underlying storage
    """

    def __init__(
        self,
        grid: StructuredGrid,
        location=CCC,
        dtype: Any = None,
        indices: tuple = (FULL, FULL, FULL),
        data: Any = None,
    ):
        self._grid = grid
        self._location = _normalize_location(location)
        self._dtype = np.dtype(grid.dtype if dtype is None else dtype)
        self._indices = _normalize_indices(indices, grid.size_at(self._location))

        shape = grid.full_shape(self._location)
        if data is None:
            data = _allocate(grid.arch, shape, self._dtype)
        else:
            if array_shape(data) != shape:
                raise ValueError(
                    f"Field data shape {array_shape(data)} doesn't match "
                    f"full extent {shape}"
                )
            if architecture(data) is not grid.arch:
                raise ValueError(
                    f"Field data resides on {architecture(data)}, grid on {grid.arch}"
                )
        self._data = data
        self._offset = grid.halo
        self._as_bool = grid.arch is Architecture.DEVICE and self._dtype == np.bool_

    @property
    def grid(self) -> StructuredGrid:
        return self._grid

    @property
    def location(self) -> tuple[Location, Location, Location]:
        return self._location

    @property
    def indices(self) -> tuple:
        return self._indices

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def data(self) -> Any:
        return self._data

    @property
    def arch(self) -> Architecture:
        return self._grid.arch

    @property
    def size(self) -> tuple[int, int, int]:
        """Length of the active window along each axis."""
        return tuple(len(r) for r in window_ranges(self))

    def __getitem__(self, index):
        i, j, k = index
        hx, hy, hz = self._offset
        value = self._data[i + hx, j + hy, k + hz]
        if self._as_bool:
            return bool(value)
        return value

    def __setitem__(self, index, value):
        i, j, k = index
        hx, hy, hz = self._offset
        self._data[i + hx, j + hy, k + hz] = value

    def storage_slices(self) -> tuple[slice, slice, slice]:
        """Storage slices covering the active window."""
        return tuple(
            slice(r.start + h, r.stop + h)
            for r, h in zip(window_ranges(self), self._offset)
        )

    def to_numpy(self) -> np.ndarray:
        """Copy of the full storage, halos included, as a numpy array."""
        return arch_array(Architecture.HOST, self._data, self._dtype)

    def interior(self) -> np.ndarray:
        """Values in the active window as a numpy array.

        A view into the storage on HOST; a copy on DEVICE.
        """
        if self.arch is Architecture.HOST:
            return self._data[self.storage_slices()]
        return self.to_numpy()[self.storage_slices()]

    def fill(self, value) -> None:
        """Set every storage point, halos included, to ``value``."""
        if self.arch is Architecture.DEVICE:
            fill_field(self._data, float(value))
        else:
            self._data.fill(value)

    def relocate(self, arch: Architecture) -> "Field":
        """Independent copy of this field residing in ``arch``."""
        return Field(
            self._grid.relocate(arch),
            location=self._location,
            dtype=self._dtype,
            indices=self._indices,
            data=arch_array(arch, self._data, self._dtype),
        )

    def compute_at(self, time) -> None:
        """Concrete fields are always up to date."""
        return None

    def summary(self) -> str:
        dims = "×".join(str(n) for n in self.size)
        loc = ", ".join(str(l) for l in self._location)
        return f"{dims} Field{{{loc}}} on StructuredGrid on {self.arch}"

    def __repr__(self) -> str:
        return self.summary()


class ConstantField:
    """Field returning the same value at every index.

    Has no storage; relocation only relocates the grid reference.
    """

    def __init__(self, grid: StructuredGrid, value: Any, location=CCC):
        self._grid = grid
        self._value = value
        self._location = _normalize_location(location)
        self._dtype = np.asarray(value).dtype

    @property
    def grid(self) -> StructuredGrid:
        return self._grid

    @property
    def location(self) -> tuple[Location, Location, Location]:
        return self._location

    @property
    def indices(self) -> tuple:
        return (FULL, FULL, FULL)

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def value(self) -> Any:
        return self._value

    def __getitem__(self, index):
        return self._value

    def relocate(self, arch: Architecture) -> "ConstantField":
        return ConstantField(self._grid.relocate(arch), self._value, self._location)

    def summary(self) -> str:
        return f"ConstantField({self._value})"

    def __repr__(self) -> str:
        return self.summary()


def OneField(grid: StructuredGrid, dtype: Any = int, location=CCC) -> ConstantField:
    """Constant field of ones with element type ``dtype``."""
    return ConstantField(grid, np.dtype(dtype).type(1), location)
