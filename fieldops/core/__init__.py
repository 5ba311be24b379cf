"""Core infrastructure: types, grid geometry, memory domains and errors."""

from fieldops.core.architectures import Architecture, adapt, arch_array, architecture
from fieldops.core.dtypes import DTYPE, NP_DTYPE
from fieldops.core.errors import (
    ConditionShapeMismatchError,
    FieldOpsError,
    GridMismatchError,
    IndexOutOfWindowError,
    TypeIncompatibilityError,
)
from fieldops.core.grid import CCC, Location, StructuredGrid, Topology

__all__ = [
    "DTYPE",
    "NP_DTYPE",
    "Architecture",
    "adapt",
    "arch_array",
    "architecture",
    "Location",
    "Topology",
    "StructuredGrid",
    "CCC",
    "FieldOpsError",
    "GridMismatchError",
    "ConditionShapeMismatchError",
    "TypeIncompatibilityError",
    "IndexOutOfWindowError",
]
