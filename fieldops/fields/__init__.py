"""Field-like values for fieldops.

Main classes:
- AbstractField: Protocol every operand and lazy operation satisfies
- Field: Storage-backed field at a staggered location, halos included
- ConstantField / OneField: Storage-free constant fields

Functions:
- similar_field: Allocate storage shaped like a field-like value
- set_field: Write scalars, arrays or lazy values into a field
- evaluate_window: Batched evaluation over the active window
- host_copy: Bring device-resident values to HOST before evaluation
"""

from fieldops.fields.field import ConstantField, Field, OneField
from fieldops.fields.protocol import (
    FULL,
    AbstractField,
    compute_at,
    indices,
    is_full,
    location,
    window_ranges,
)
from fieldops.fields.set import (
    evaluate_over,
    evaluate_window,
    host_copy,
    set_field,
    similar_field,
)

__all__ = [
    # Core classes
    "AbstractField",
    "Field",
    "ConstantField",
    "OneField",
    # Index windows
    "FULL",
    "is_full",
    "indices",
    "location",
    "window_ranges",
    "compute_at",
    # Allocation and assignment
    "similar_field",
    "set_field",
    "evaluate_over",
    "evaluate_window",
    "host_copy",
]
