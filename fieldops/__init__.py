"""fieldops: lazy conditional operations on structured-grid fields.

Usage:
    from fieldops import Field, StructuredGrid, condition_operand, conditional_length

    grid = StructuredGrid(size=(16, 16, 8))
    u = Field(grid)
    positive = condition_operand(abs, u, lambda i, j, k, grid, node: node.operand[i, j, k] > 0)
    conditional_length(positive)
"""

from fieldops.config import init_taichi, is_debug, set_debug
from fieldops.core import (
    Architecture,
    ConditionShapeMismatchError,
    FieldOpsError,
    GridMismatchError,
    IndexOutOfWindowError,
    Location,
    StructuredGrid,
    Topology,
    TypeIncompatibilityError,
    adapt,
    arch_array,
    architecture,
)
from fieldops.fields import (
    FULL,
    ConstantField,
    Field,
    OneField,
    set_field,
    similar_field,
)
from fieldops.operations import (
    ConditionalOperation,
    DenseMask,
    Predicate,
    concretize_in_place,
    condition_onefield,
    condition_operand,
    conditional_length,
    field_sum,
    materialize,
    materialize_into,
    resolve_condition,
)

__all__ = [
    "init_taichi",
    "is_debug",
    "set_debug",
    "Architecture",
    "Location",
    "Topology",
    "StructuredGrid",
    "adapt",
    "arch_array",
    "architecture",
    "FieldOpsError",
    "GridMismatchError",
    "ConditionShapeMismatchError",
    "TypeIncompatibilityError",
    "IndexOutOfWindowError",
    "FULL",
    "Field",
    "ConstantField",
    "OneField",
    "set_field",
    "similar_field",
    "ConditionalOperation",
    "Predicate",
    "DenseMask",
    "condition_operand",
    "resolve_condition",
    "condition_onefield",
    "conditional_length",
    "field_sum",
    "materialize",
    "materialize_into",
    "concretize_in_place",
]
