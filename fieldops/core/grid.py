"""Structured grid geometry and staggered locations for fieldops.

This module centralizes all spatial indexing logic:
- Location: where on a cell a quantity lives (center or face)
- Topology: per-axis boundary treatment (periodic or bounded)
- StructuredGrid: Immutable dataclass holding sizes, extents and halos

Indexing convention:
    Interior indices run 0..n-1 along each axis (0..n for faces on a
    bounded axis). Halo cells extend the index range by `halo` points on
    each side, so the full indexable extent along an axis is n + 2*halo.

    halo | 0  1  2  ...  n-1 | halo
"""

from dataclasses import dataclass, replace
from enum import Enum

import numpy as np

from fieldops.core.architectures import Architecture
from fieldops.core.dtypes import NP_DTYPE


class Location(Enum):
    """Position of a quantity on a grid cell along one axis."""

    CENTER = "center"
    FACE = "face"

    def __str__(self) -> str:
        return self.value.capitalize()


class Topology(Enum):
    """Boundary treatment along one axis."""

    PERIODIC = "periodic"
    BOUNDED = "bounded"

    def __str__(self) -> str:
        return self.value.capitalize()


CCC = (Location.CENTER, Location.CENTER, Location.CENTER)


def _triple(value, name: str) -> tuple:
    values = tuple(value)
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 entries, got {len(values)}")
    return values


@dataclass(frozen=True)
class StructuredGrid:
    """Immutable three-dimensional structured grid.

    Attributes:
        size: Number of cells (nx, ny, nz)
        extent: Physical length of each axis (Lx, Ly, Lz)
        halo: Number of halo points on each side (hx, hy, hz)
        topology: Boundary treatment per axis
        arch: Memory domain where fields on this grid reside
        dtype: Floating-point type of coordinates and default field data

    Two grids are the same grid when all attributes compare equal, including
    the memory domain: relocating a grid yields a different grid.
    """

    size: tuple[int, int, int]
    extent: tuple[float, float, float] = (1.0, 1.0, 1.0)
    halo: tuple[int, int, int] = (3, 3, 3)
    topology: tuple[Topology, Topology, Topology] = (
        Topology.PERIODIC,
        Topology.PERIODIC,
        Topology.BOUNDED,
    )
    arch: Architecture = Architecture.HOST
    dtype: np.dtype = NP_DTYPE

    def __post_init__(self):
        """Normalize and validate grid attributes."""
        size = tuple(int(n) for n in _triple(self.size, "size"))
        extent = tuple(float(L) for L in _triple(self.extent, "extent"))
        halo = tuple(int(h) for h in _triple(self.halo, "halo"))
        topology = tuple(Topology(t) for t in _triple(self.topology, "topology"))

        for n in size:
            if n < 1:
                raise ValueError(f"size entries must be >= 1, got {size}")
        for L in extent:
            if L <= 0:
                raise ValueError(f"extent entries must be > 0, got {extent}")
        for h in halo:
            if h < 0:
                raise ValueError(f"halo entries must be >= 0, got {halo}")

        object.__setattr__(self, "size", size)
        object.__setattr__(self, "extent", extent)
        object.__setattr__(self, "halo", halo)
        object.__setattr__(self, "topology", topology)
        object.__setattr__(self, "arch", Architecture(self.arch))
        object.__setattr__(self, "dtype", np.dtype(self.dtype))

    @property
    def spacing(self) -> tuple[float, float, float]:
        """Cell width along each axis."""
        return tuple(L / n for L, n in zip(self.extent, self.size))

    @property
    def n_cells(self) -> int:
        """Total number of interior cells."""
        nx, ny, nz = self.size
        return nx * ny * nz

    def size_at(self, location=CCC) -> tuple[int, int, int]:
        """Interior size of a field at ``location``.

        Faces on a bounded axis include both end points (n + 1); all other
        combinations have n points.
        """
        return tuple(
            n + 1 if loc is Location.FACE and topo is Topology.BOUNDED else n
            for n, loc, topo in zip(self.size, location, self.topology)
        )

    def full_shape(self, location=CCC) -> tuple[int, int, int]:
        """Full indexable extent of a field at ``location``, halos included."""
        return tuple(n + 2 * h for n, h in zip(self.size_at(location), self.halo))

    def node(self, axis: int, index: int, location: Location = Location.CENTER) -> float:
        """Physical coordinate of a grid point.

        Args:
            axis: Axis number (0, 1, 2)
            index: Logical index along the axis (may lie in the halo)
            location: Center or face

        Returns:
            Coordinate measured from the domain origin
        """
        delta = self.spacing[axis]
        if location is Location.FACE:
            return index * delta
        return (index + 0.5) * delta

    def relocate(self, arch: Architecture) -> "StructuredGrid":
        """Same grid with fields residing in ``arch``."""
        return replace(self, arch=arch)

    def summary(self) -> str:
        """One-line description of the grid."""
        dims = "×".join(str(n) for n in self.size)
        topo = ", ".join(str(t) for t in self.topology)
        halo = "×".join(str(h) for h in self.halo)
        return f"{dims} StructuredGrid{{{self.dtype}, {topo}}} on {self.arch} with {halo} halo"
