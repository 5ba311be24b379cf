"""Reductions over lazy and concrete field-like values.

field_sum is the summation capability reduction drivers build on;
conditional_length counts the cells where a conditional operation's
condition holds by summing its counting variant.
"""

import numpy as np

from fieldops.fields.set import evaluate_window
from fieldops.operations.conditional import ConditionalOperation, condition_onefield


def _normalize_dims(dims) -> tuple[int, ...]:
    if isinstance(dims, (int, np.integer)):
        dims = (dims,)
    dims = tuple(int(d) for d in dims)
    for d in dims:
        if d not in (0, 1, 2):
            raise ValueError(f"Reduction dims must be in (0, 1, 2), got {dims}")
    if len(set(dims)) != len(dims):
        raise ValueError(f"Reduction dims must be distinct, got {dims}")
    return dims


def field_sum(obj, dims=None):
    """Sum a field-like value over its active window.

    Args:
        obj: Field-like value (concrete field or lazy operation)
        dims: Axis or axes to reduce; None reduces all three

    Returns:
        numpy scalar when dims is None, otherwise a numpy array with the
        reduced axes removed
    """
    values = evaluate_window(obj)
    if dims is None:
        return values.sum()
    return values.sum(axis=_normalize_dims(dims))


def conditional_length(node: ConditionalOperation, dims=None):
    """Number of cells in the window of ``node`` where its condition holds.

    Args:
        node: Conditional operation
        dims: Axis or axes to count along; None counts over all three

    Returns:
        Integer count, or an integer array with the counted axes removed
    """
    return field_sum(condition_onefield(node, 0), dims)
