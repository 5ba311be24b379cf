"""Lazy operations on field-like values.

Main classes:
- ConditionalOperation: func(operand) where a condition holds, mask elsewhere
- Predicate / DenseMask: the two condition variants

Functions:
- condition_operand: Build or override a conditional operation
- resolve_condition: Evaluate a condition at one index
- condition_onefield / conditional_length: Counting reduction
- materialize / materialize_into / concretize_in_place: Write values to storage
- field_sum: Summation over the active window
"""

from fieldops.operations.conditional import (
    ALWAYS,
    ConditionalOperation,
    DenseMask,
    Predicate,
    concretize_in_place,
    condition_onefield,
    condition_operand,
    identity,
    materialize,
    materialize_into,
    resolve_condition,
    truefunc,
)
from fieldops.operations.reductions import conditional_length, field_sum

__all__ = [
    "ConditionalOperation",
    "Predicate",
    "DenseMask",
    "ALWAYS",
    "identity",
    "truefunc",
    "condition_operand",
    "resolve_condition",
    "condition_onefield",
    "conditional_length",
    "field_sum",
    "materialize",
    "materialize_into",
    "concretize_in_place",
]
