"""Tests for grid geometry and memory domains."""

import numpy as np
import pytest

from fieldops.core.architectures import Architecture
from fieldops.core.grid import CCC, Location, StructuredGrid, Topology

C, F = Location.CENTER, Location.FACE


class TestStructuredGrid:
    """Tests for StructuredGrid dataclass."""

    def test_defaults(self):
        """Default halo, topology, memory domain and dtype."""
        grid = StructuredGrid(size=(4, 3, 2))
        assert grid.halo == (3, 3, 3)
        assert grid.topology == (Topology.PERIODIC, Topology.PERIODIC, Topology.BOUNDED)
        assert grid.arch is Architecture.HOST
        assert grid.dtype == np.float64

    def test_normalizes_inputs(self):
        """Lists and strings are normalized to tuples and enums."""
        grid = StructuredGrid(size=[4, 3, 2], topology=["bounded", "periodic", "bounded"])
        assert grid.size == (4, 3, 2)
        assert grid.topology[0] is Topology.BOUNDED

    def test_validation_size(self):
        """Sizes must be positive."""
        with pytest.raises(ValueError, match="size"):
            StructuredGrid(size=(0, 1, 1))

    def test_validation_extent(self):
        """Extents must be positive."""
        with pytest.raises(ValueError, match="extent"):
            StructuredGrid(size=(1, 1, 1), extent=(1, -1, 1))

    def test_validation_entries(self):
        """Exactly three entries per axis attribute."""
        with pytest.raises(ValueError, match="3 entries"):
            StructuredGrid(size=(4, 4))

    def test_immutability(self):
        """StructuredGrid is frozen."""
        grid = StructuredGrid(size=(4, 3, 2))
        with pytest.raises(Exception):
            grid.size = (1, 1, 1)

    def test_structural_identity(self):
        """Grids with equal attributes are the same grid."""
        assert StructuredGrid(size=(4, 3, 2)) == StructuredGrid(size=(4, 3, 2))
        assert StructuredGrid(size=(4, 3, 2)) != StructuredGrid(size=(4, 3, 3))

    def test_size_at_faces(self):
        """Faces on bounded axes carry one extra point."""
        grid = StructuredGrid(size=(4, 3, 2))
        assert grid.size_at(CCC) == (4, 3, 2)
        assert grid.size_at((F, F, F)) == (4, 3, 3)

    def test_full_shape(self):
        """Full extent includes halos on both sides."""
        grid = StructuredGrid(size=(2, 1, 1))
        assert grid.full_shape() == (8, 7, 7)
        assert grid.full_shape((C, C, F)) == (8, 7, 8)

    def test_spacing_and_nodes(self):
        """Centers sit halfway between faces."""
        grid = StructuredGrid(size=(4, 2, 1), extent=(2.0, 1.0, 1.0))
        assert grid.spacing == (0.5, 0.5, 1.0)
        assert grid.node(0, 0, C) == pytest.approx(0.25)
        assert grid.node(0, 1, F) == pytest.approx(0.5)
        assert grid.node(0, -1, C) == pytest.approx(-0.25)

    def test_relocate(self):
        """Relocation only changes the memory domain."""
        grid = StructuredGrid(size=(4, 3, 2))
        moved = grid.relocate(Architecture.DEVICE)
        assert moved.arch is Architecture.DEVICE
        assert moved.size == grid.size
        assert moved != grid
        assert moved.relocate(Architecture.HOST) == grid

    def test_summary(self):
        """Summary lists sizes, topology, domain and halo."""
        grid = StructuredGrid(size=(2, 1, 1))
        assert grid.summary() == (
            "2×1×1 StructuredGrid{float64, Periodic, Periodic, Bounded} "
            "on HOST with 3×3×3 halo"
        )
