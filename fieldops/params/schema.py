"""Parameter schema with validation for grids and the Taichi runtime."""

from dataclasses import dataclass, field, asdict
from typing import Any

import numpy as np

from fieldops.core.architectures import Architecture
from fieldops.core.grid import StructuredGrid, Topology


class ValidationError(ValueError):
    """Parameter validation failed."""
    pass


BACKENDS = ("auto", "cpu", "cuda", "vulkan")


def _triple(value: Any, name: str) -> list:
    values = list(value)
    if len(values) != 3:
        raise ValidationError(f"{name} must have 3 entries, got {value}")
    return values


@dataclass(frozen=True)
class GridParams:
    """Grid: size (cells), extent [m], halo (points), topology, dtype."""
    size: tuple[int, int, int] = (16, 16, 16)
    extent: tuple[float, float, float] = (1.0, 1.0, 1.0)
    halo: tuple[int, int, int] = (3, 3, 3)
    topology: tuple[str, str, str] = ("periodic", "periodic", "bounded")
    dtype: str = "float64"

    def __post_init__(self) -> None:
        size = tuple(int(n) for n in _triple(self.size, "size"))
        extent = tuple(float(L) for L in _triple(self.extent, "extent"))
        halo = tuple(int(h) for h in _triple(self.halo, "halo"))
        topology = tuple(str(t).lower() for t in _triple(self.topology, "topology"))

        for n in size:
            if n < 1:
                raise ValidationError(f"size entries must be >= 1, got {size}")
        for L in extent:
            if L <= 0:
                raise ValidationError(f"extent entries must be positive, got {extent}")
        for h in halo:
            if h < 0:
                raise ValidationError(f"halo entries must be non-negative, got {halo}")
        valid = {t.value for t in Topology}
        for t in topology:
            if t not in valid:
                raise ValidationError(f"Unknown topology: {t}")
        try:
            np.dtype(self.dtype)
        except TypeError as e:
            raise ValidationError(f"Unknown dtype: {self.dtype}") from e

        object.__setattr__(self, "size", size)
        object.__setattr__(self, "extent", extent)
        object.__setattr__(self, "halo", halo)
        object.__setattr__(self, "topology", topology)

    @property
    def n_cells(self) -> int:
        nx, ny, nz = self.size
        return nx * ny * nz

    def build(self, arch: Architecture = Architecture.HOST) -> StructuredGrid:
        """Create the StructuredGrid these parameters describe."""
        return StructuredGrid(
            size=self.size,
            extent=self.extent,
            halo=self.halo,
            topology=tuple(Topology(t) for t in self.topology),
            arch=arch,
            dtype=np.dtype(self.dtype),
        )


@dataclass(frozen=True)
class RuntimeParams:
    """Runtime: backend ('auto', 'cpu', 'cuda', 'vulkan'), debug, arch ('host', 'device')."""
    backend: str = "auto"
    debug: bool = False
    arch: str = "host"

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ValidationError(f"backend must be one of {BACKENDS}, got {self.backend}")
        if self.arch not in ("host", "device"):
            raise ValidationError(f"arch must be 'host' or 'device', got {self.arch}")

    @property
    def architecture(self) -> Architecture:
        return Architecture(self.arch.upper())


@dataclass(frozen=True)
class FieldOpsConfig:
    """Complete fieldops configuration."""

    grid: GridParams = field(default_factory=GridParams)
    runtime: RuntimeParams = field(default_factory=RuntimeParams)

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dictionary of plain lists and scalars."""
        grid = asdict(self.grid)
        for key in ("size", "extent", "halo", "topology"):
            grid[key] = list(grid[key])
        return {
            "grid": grid,
            "runtime": asdict(self.runtime),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldOpsConfig":
        """Create from nested dictionary."""
        param_classes = {
            "grid": GridParams,
            "runtime": RuntimeParams,
        }
        for key in data:
            if key not in param_classes:
                raise ValidationError(f"Unknown parameter group: {key}")
        try:
            kwargs = {k: param_classes[k](**data[k]) for k in data}
        except TypeError as e:
            raise ValidationError(str(e)) from e
        return cls(**kwargs)

    def with_updates(self, **kwargs: Any) -> "FieldOpsConfig":
        """Create new config with updates."""
        current = self.to_dict()
        for key, value in kwargs.items():
            if key not in current:
                raise ValidationError(f"Unknown parameter group: {key}")
            if isinstance(value, dict):
                current[key].update(value)
            else:
                current[key] = asdict(value)
        return self.from_dict(current)

    def build_grid(self) -> StructuredGrid:
        """Grid in the configured memory domain."""
        return self.grid.build(self.runtime.architecture)
