"""Errors raised by field operations.

All errors are raised synchronously, before any write takes place.
"""


class FieldOpsError(Exception):
    """Base class for field operation errors."""
    pass


class GridMismatchError(FieldOpsError, ValueError):
    """An operand or destination is defined on a different grid."""
    pass


class ConditionShapeMismatchError(FieldOpsError, ValueError):
    """A dense mask does not cover the grid's full indexable extent."""
    pass


class TypeIncompatibilityError(FieldOpsError, TypeError):
    """A fill value cannot be represented in the operand's element type."""
    pass


class IndexOutOfWindowError(FieldOpsError, IndexError):
    """An element access fell outside the active index window.

    Only raised when debug mode is enabled; see fieldops.config.
    """
    pass
