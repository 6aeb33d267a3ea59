"""Mini README: Sport configuration subsystem.

Re-exports the descriptor types and the shared ``REGISTRY``. Importing the
package registers the built-in sports so lookups work immediately.
"""

from .base import (
    CATEGORY_DETAILS,
    DynamicField,
    ExpenseCategory,
    ExpenseField,
    FieldKind,
    SportConfig,
    coerce_amount,
)
from .registry import REGISTRY, SportRegistry
from . import builtin  # noqa: F401  # ensure built-in sports register on import

__all__ = [
    "CATEGORY_DETAILS",
    "DynamicField",
    "ExpenseCategory",
    "ExpenseField",
    "FieldKind",
    "REGISTRY",
    "SportConfig",
    "SportRegistry",
    "coerce_amount",
]
