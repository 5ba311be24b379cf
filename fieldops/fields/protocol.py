"""
Field protocol shared by concrete fields and lazy operations.

Anything satisfying AbstractField can be used as an operand of a lazy
operation, reduced with field_sum, or materialized with set_field:
- __getitem__: elementwise read at logical (i, j, k)
- grid / location / indices: where the values live and which part is active
- relocate(): structurally identical copy in another memory domain
"""

from typing import Any, Protocol, runtime_checkable

# Unrestricted index window along one axis
FULL = slice(None)


def is_full(window) -> bool:
    """Check if an index window entry is the unrestricted full range."""
    return isinstance(window, slice) and window == FULL


@runtime_checkable
class AbstractField(Protocol):
    """Protocol for field-like values on a structured grid."""

    @property
    def grid(self) -> Any:
        """StructuredGrid the values are defined on."""
        ...

    @property
    def location(self) -> tuple:
        """Location tag along each axis."""
        ...

    @property
    def indices(self) -> tuple:
        """Active index window: FULL or a range per axis."""
        ...

    @property
    def dtype(self) -> Any:
        """numpy element type."""
        ...

    def __getitem__(self, index: tuple[int, int, int]) -> Any:
        """Value at logical index (i, j, k)."""
        ...

    def relocate(self, arch: Any) -> "AbstractField":
        """Copy residing in memory domain ``arch``."""
        ...

    def summary(self) -> str:
        """One-line description."""
        ...


def location(obj) -> tuple:
    """Location tags of a field-like value."""
    return obj.location


def indices(obj) -> tuple:
    """Active index window of a field-like value."""
    return obj.indices


def window_ranges(obj) -> tuple[range, range, range]:
    """Concrete index ranges of the active window along each axis.

    Unrestricted axes span the interior, 0..n-1 at the value's location.
    """
    sizes = obj.grid.size_at(obj.location)
    return tuple(
        range(n) if is_full(w) else w for n, w in zip(sizes, obj.indices)
    )


def compute_at(obj, time) -> None:
    """Bring a field-like value up to date at ``time`` if it supports it."""
    hook = getattr(obj, "compute_at", None)
    if callable(hook):
        hook(time)
