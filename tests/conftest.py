"""Pytest fixtures and test utilities for fieldops."""

import numpy as np
import pytest

from fieldops.config import init_taichi, is_debug, set_debug
from fieldops.core.architectures import Architecture
from fieldops.core.grid import CCC, StructuredGrid
from fieldops.fields import Field, set_field


@pytest.fixture(scope="session", autouse=True)
def taichi_init():
    """Initialize Taichi once per test session with CPU backend."""
    init_taichi(backend="cpu", debug=True)
    yield


@pytest.fixture
def debug_off():
    """Disable index-window assertions for one test."""
    previous = is_debug()
    set_debug(False)
    yield
    set_debug(previous)


@pytest.fixture
def small_grid():
    """2×1×1 grid with the default 3×3×3 halo."""
    return StructuredGrid(size=(2, 1, 1), extent=(1, 1, 1))


@pytest.fixture
def grid_factory():
    """Factory for creating grids of various sizes."""
    return make_grid


def make_grid(size=(4, 3, 2), arch=Architecture.HOST, **kwargs) -> StructuredGrid:
    """Create a grid on HOST unless told otherwise."""
    return StructuredGrid(size=size, arch=arch, **kwargs)


@pytest.fixture
def mask_factory():
    """Factory for dense boolean masks true at given logical cells."""
    return make_mask


def make_mask(grid: StructuredGrid, true_cells=(), location=CCC) -> np.ndarray:
    """Boolean array over the full extent, true at each logical (i, j, k)."""
    mask = np.zeros(grid.full_shape(location), dtype=bool)
    hx, hy, hz = grid.halo
    for i, j, k in true_cells:
        mask[i + hx, j + hy, k + hz] = True
    return mask


@pytest.fixture
def ramp_factory():
    """Factory for fields holding 0, 1, 2, ... in row-major order."""
    return make_ramp


def make_ramp(grid: StructuredGrid, location=CCC, indices=None) -> Field:
    """Field whose interior holds consecutive values."""
    kwargs = {} if indices is None else {"indices": indices}
    field = Field(grid, location=location, **kwargs)
    values = np.arange(np.prod(field.size), dtype=np.float64).reshape(field.size)
    set_field(field, values)
    return field
