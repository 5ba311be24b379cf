"""Lazy conditional masking of field-like values.

A ConditionalOperation represents, without computing it, the elementwise
value

    func(operand[i, j, k])  where the condition holds at (i, j, k)
    mask                    elsewhere

The condition is one of two tagged variants:
- Predicate: a function (i, j, k, grid, node) -> bool
- DenseMask: a boolean array covering the grid's full indexable extent

Nodes are immutable and flat: conditioning an already-conditioned value
overrides its func, condition or mask instead of nesting nodes, and a new
func replaces the previous one rather than composing with it.

Example:
    grid = StructuredGrid(size=(2, 1, 1), extent=(1, 1, 1))
    c = Field(grid)
    set_field(c, 5)

    def f(i, j, k, grid, node):
        return i < 1

    d = condition_operand(np.cos, c, f, 10)
    d[0, 0, 0]  # cos(5)
    d[1, 0, 0]  # 10
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

from fieldops.config import is_debug
from fieldops.core.architectures import (
    Architecture,
    adapt,
    arch_array,
    architecture,
    is_device_array,
)
from fieldops.core.dtypes import is_mask_dtype
from fieldops.core.errors import (
    ConditionShapeMismatchError,
    GridMismatchError,
    IndexOutOfWindowError,
    TypeIncompatibilityError,
)
from fieldops.core.grid import Location, StructuredGrid
from fieldops.fields.field import OneField
from fieldops.fields.protocol import compute_at, window_ranges
from fieldops.fields.set import set_field, similar_field

logger = logging.getLogger(__name__)

_KEEP = object()


def identity(x):
    return x


def truefunc(*args) -> bool:
    return True


def _func_name(func) -> str:
    name = getattr(func, "__name__", None)
    return name if name is not None else type(func).__name__


# =============================================================================
# Condition variants
# =============================================================================


class Predicate:
    """Condition given as a function of (i, j, k, grid, *args)."""

    __slots__ = ("func",)

    def __init__(self, func: Callable):
        if not callable(func):
            raise TypeError(f"Predicate requires a callable, got {type(func).__name__}")
        self.func = func

    def __call__(self, i, j, k, grid, *args) -> bool:
        return self.func(i, j, k, grid, *args)

    def relocate(self, arch: Architecture) -> "Predicate":
        # Plain functions carry no data; captured state relocates itself
        return Predicate(adapt(arch, self.func))

    def summary(self) -> str:
        return _func_name(self.func)

    def __repr__(self) -> str:
        return f"Predicate({self.summary()})"


class DenseMask:
    """Condition given as a boolean array over the full indexable extent.

    Indexed with the same logical (i, j, k) as fields on the grid, so the
    halo offset is applied on lookup. No bounds checks are performed.

    Attributes:
        data: numpy bool array on HOST, ti.i8 field on DEVICE
        offset: Halo width along each axis
    """

    __slots__ = ("data", "offset")

    def __init__(self, data: Any, offset: tuple[int, int, int]):
        self.data = data
        self.offset = tuple(offset)

    @classmethod
    def from_array(cls, array: Any, grid: StructuredGrid, location) -> "DenseMask":
        """Copy a user-supplied boolean array into the grid's memory domain.

        Raises:
            TypeError: If the array holds neither booleans nor integers
            ConditionShapeMismatchError: If the array does not cover the full
                indexable extent, halos included
        """
        if is_device_array(array):
            shape, dtype = tuple(array.shape), array.dtype
        else:
            array = np.asarray(array)
            shape, dtype = array.shape, array.dtype
        if not is_mask_dtype(dtype):
            raise TypeError(f"Condition array must hold booleans, got dtype {dtype}")
        expected = grid.full_shape(location)
        if tuple(shape) != expected:
            raise ConditionShapeMismatchError(
                f"Condition array of shape {tuple(shape)} doesn't match the "
                f"grid's full extent {expected} (halos included)"
            )
        return cls(arch_array(grid.arch, array, dtype=np.bool_), grid.halo)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.data.shape)

    @property
    def arch(self) -> Architecture:
        return architecture(self.data)

    def __getitem__(self, index) -> bool:
        i, j, k = index
        hx, hy, hz = self.offset
        return bool(self.data[i + hx, j + hy, k + hz])

    def relocate(self, arch: Architecture) -> "DenseMask":
        return DenseMask(arch_array(arch, self.data, np.bool_), self.offset)

    def summary(self) -> str:
        dims = "×".join(str(n) for n in self.shape)
        return f"{dims} DenseMask on {self.arch}"

    def __repr__(self) -> str:
        return self.summary()


ALWAYS = Predicate(truefunc)


def resolve_condition(condition, i: int, j: int, k: int, grid: StructuredGrid, *args) -> bool:
    """Decide whether ``condition`` holds at (i, j, k).

    Predicates are called with (i, j, k, grid, *args); dense masks are read
    directly at (i, j, k).
    """
    if isinstance(condition, DenseMask):
        return condition[i, j, k]
    if isinstance(condition, Predicate):
        return condition.func(i, j, k, grid, *args)
    raise TypeError(f"Unsupported condition type: {type(condition).__name__}")


def _as_condition(condition, grid: StructuredGrid, location):
    """Normalize a user-supplied condition into a Predicate or DenseMask."""
    if condition is None:
        return ALWAYS
    if isinstance(condition, Predicate):
        return condition
    if isinstance(condition, DenseMask):
        if condition.arch is not grid.arch:
            return condition.relocate(grid.arch)
        return condition
    if isinstance(condition, (np.ndarray, list)) or is_device_array(condition):
        return DenseMask.from_array(condition, grid, location)
    if callable(condition):
        return Predicate(condition)
    raise TypeError(
        f"condition must be None, a function, or a boolean array, "
        f"got {type(condition).__name__}"
    )


def _representable(mask, dtype: np.dtype) -> bool:
    if mask is None or isinstance(mask, (str, bytes)) or np.ndim(mask) != 0:
        return False
    value = np.asarray(mask)
    if value.dtype.kind not in "biufc":
        return False
    if dtype.kind == "b":
        return bool(value.astype(dtype) == value)
    if dtype.kind in "iu":
        if value.dtype.kind == "c" or not np.isfinite(value):
            return False
        if value.dtype.kind == "f" and not float(value).is_integer():
            return False
        info = np.iinfo(dtype)
        return info.min <= int(value) <= info.max
    if dtype.kind in "fc":
        if dtype.kind == "f" and value.dtype.kind == "c":
            return False
        with np.errstate(over="ignore", invalid="ignore"):
            cast = value.astype(dtype)
        # Finite fills must stay finite; inf and nan are kept as they are
        return bool(np.isfinite(cast)) or not bool(np.isfinite(value))
    return False


def _check_fill(mask, dtype) -> None:
    """Raise unless ``mask`` is representable in ``dtype``.

    Integers must lie inside the integer type's range (300 does not fit
    int8), floats stored in integer types must be whole, finite floats must
    not overflow a narrower float type, and booleans accept only values that
    convert losslessly (0, 1, True, False).
    """
    dtype = np.dtype(dtype)
    if not _representable(mask, dtype):
        raise TypeIncompatibilityError(
            f"mask {mask!r} cannot be represented as operand element type {dtype}"
        )


# =============================================================================
# ConditionalOperation
# =============================================================================


@dataclass(frozen=True, eq=False, repr=False)
class ConditionalOperation:
    """Lazy conditional masking of a field-like operand.

    Build with ConditionalOperation.from_operand or condition_operand rather
    than directly; the factories derive grid, indices and location from the
    operand and normalize the condition.

    Attributes:
        operand: Field-like value being masked (referenced, never copied)
        func: Unary function applied where the condition holds
        grid: Grid of the operand
        indices: Active index window, inherited from the operand
        condition: Predicate or DenseMask
        mask: Fill value where the condition does not hold
        location: Location tag along each axis
    """

    operand: Any
    func: Callable
    grid: StructuredGrid
    indices: tuple
    condition: Predicate | DenseMask
    mask: Any
    location: tuple

    def __post_init__(self):
        """Validate node invariants."""
        if isinstance(self.operand, ConditionalOperation):
            raise TypeError(
                "ConditionalOperation cannot wrap another ConditionalOperation; "
                "use override() instead"
            )
        if self.operand.grid != self.grid:
            raise GridMismatchError(
                f"Operand grid {self.operand.grid.summary()} differs from "
                f"{self.grid.summary()}"
            )
        if not isinstance(self.condition, (Predicate, DenseMask)):
            raise TypeError(
                f"condition must be a Predicate or DenseMask, "
                f"got {type(self.condition).__name__}"
            )

        location = tuple(Location(loc) for loc in self.location)
        object.__setattr__(self, "location", location)
        object.__setattr__(self, "indices", tuple(self.indices))

        if isinstance(self.condition, DenseMask):
            expected = self.grid.full_shape(location)
            if self.condition.shape != expected:
                raise ConditionShapeMismatchError(
                    f"DenseMask of shape {self.condition.shape} doesn't match "
                    f"the grid's full extent {expected} (halos included)"
                )
            if self.condition.offset != self.grid.halo:
                raise ConditionShapeMismatchError(
                    f"DenseMask built for halo {self.condition.offset} is used on "
                    f"a grid with halo {self.grid.halo}"
                )
            if self.condition.arch is not self.grid.arch:
                raise ValueError(
                    f"DenseMask resides on {self.condition.arch}, "
                    f"operand on {self.grid.arch}"
                )

        _check_fill(self.mask, self.operand.dtype)

    @classmethod
    def from_operand(
        cls,
        operand: Any,
        func: Callable = identity,
        condition: Any = None,
        mask: Any = 0,
    ) -> "ConditionalOperation":
        """Build a node masking ``func(operand)`` where ``condition`` holds.

        Args:
            operand: Field-like value with a grid
            func: Unary transform (default: identity)
            condition: None (always true), a function
                (i, j, k, grid, node) -> bool, or a boolean array covering
                the full indexable extent
            mask: Fill value where the condition is false (default: 0)

        Returns:
            New ConditionalOperation. A conditional operand is overridden,
            not nested (see condition_operand).
        """
        if isinstance(operand, ConditionalOperation):
            return condition_operand(func, operand, condition, mask)

        location = tuple(operand.location)
        return cls(
            operand=operand,
            func=func,
            grid=operand.grid,
            indices=tuple(operand.indices),
            condition=_as_condition(condition, operand.grid, location),
            mask=mask,
            location=location,
        )

    def override(self, func=_KEEP, condition=_KEEP, mask=_KEEP) -> "ConditionalOperation":
        """Copy of this node with some of func, condition, mask replaced.

        Unspecified fields are kept as the same objects. A new func replaces
        the current one; it is not composed with it. Passing condition=None
        resets the condition to always-true.
        """
        return ConditionalOperation(
            operand=self.operand,
            func=self.func if func is _KEEP else func,
            grid=self.grid,
            indices=tuple(self.operand.indices),
            condition=(
                self.condition
                if condition is _KEEP
                else _as_condition(condition, self.grid, self.location)
            ),
            mask=self.mask if mask is _KEEP else mask,
            location=self.location,
        )

    @property
    def dtype(self) -> np.dtype:
        """Element type of the operand."""
        return self.operand.dtype

    @property
    def size(self) -> tuple[int, int, int]:
        """Length of the active window along each axis."""
        return tuple(len(r) for r in self.axes())

    def __getitem__(self, index):
        i, j, k = index
        if is_debug():
            self._check_window(i, j, k)
        if resolve_condition(self.condition, i, j, k, self.grid, self):
            return self.func(self.operand[i, j, k])
        return self.mask

    def _check_window(self, i: int, j: int, k: int) -> None:
        for axis, (index, window) in enumerate(zip((i, j, k), window_ranges(self))):
            if index not in window:
                raise IndexOutOfWindowError(
                    f"Index {index} on axis {axis} is outside window {window}"
                )

    def axes(self) -> tuple[range, range, range]:
        """Index range along each axis.

        Unrestricted axes span 0..n-1 at the node's location; restricted
        axes return their window.
        """
        return window_ranges(self)

    def relocate(self, arch: Architecture) -> "ConditionalOperation":
        """Structurally identical node whose data resides in ``arch``.

        Every constituent is relocated by its own contract; the source node
        is left untouched and shares no storage with the result.
        """
        logger.debug("Relocating ConditionalOperation to %s", arch)
        return ConditionalOperation(
            operand=adapt(arch, self.operand),
            func=adapt(arch, self.func),
            grid=adapt(arch, self.grid),
            indices=adapt(arch, self.indices),
            condition=adapt(arch, self.condition),
            mask=adapt(arch, self.mask),
            location=self.location,
        )

    def compute_at(self, time) -> None:
        """Bring the operand up to date at ``time``."""
        compute_at(self.operand, time)

    def summary(self) -> str:
        return (
            f"ConditionalOperation of {self.operand.summary()} "
            f"with condition {self.condition.summary()}"
        )

    def __repr__(self) -> str:
        loc = ", ".join(str(l) for l in self.location)
        return (
            f"ConditionalOperation at ({loc})\n"
            f"├── operand: {self.operand.summary()}\n"
            f"├── grid: {self.grid.summary()}\n"
            f"├── func: {_func_name(self.func)}\n"
            f"├── condition: {self.condition.summary()}\n"
            f"└── mask: {self.mask}"
        )

    __str__ = __repr__


# =============================================================================
# Factories, counting and materialization
# =============================================================================


def condition_operand(func: Callable, operand: Any, condition: Any = None, mask: Any = 0):
    """Condition ``func(operand)`` on ``condition``, filling with ``mask``.

    Field-like operands produce a new node. Conditional operands are
    overridden so nodes never nest:
    - no condition, identity func: only the mask changes
    - no condition, other func: func and mask change, condition is kept
    - explicit condition: func, condition and mask are all replaced
    """
    if isinstance(operand, ConditionalOperation):
        if condition is None:
            if func is identity:
                return operand.override(mask=mask)
            return operand.override(func=func, mask=mask)
        return operand.override(func=func, condition=condition, mask=mask)
    return ConditionalOperation.from_operand(operand, func=func, condition=condition, mask=mask)


def condition_onefield(node: ConditionalOperation, mask: Any) -> ConditionalOperation:
    """Counting variant of ``node``: ones where the condition holds, ``mask`` elsewhere.

    Keeps the grid, index window, location and condition of ``node``.
    """
    return ConditionalOperation(
        operand=OneField(node.grid, int),
        func=identity,
        grid=node.grid,
        indices=node.indices,
        condition=node.condition,
        mask=mask,
        location=node.location,
    )


def materialize_into(storage, node: ConditionalOperation):
    """Write the values of ``node`` into caller-owned ``storage``.

    Raises:
        GridMismatchError: If storage lives on another grid
        ValueError: If storage sits at another location
    """
    return set_field(storage, node)


def materialize(node: ConditionalOperation):
    """Allocate a Field shaped like the operand and fill it with ``node``."""
    return materialize_into(similar_field(node), node)


def concretize_in_place(node: ConditionalOperation):
    """Overwrite the operand's own storage with the values of ``node``."""
    return materialize_into(node.operand, node)
