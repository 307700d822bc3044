"""Small shared helpers."""

from fastrt_core.utils.floats import DOUBLE_RELATIVE_ERROR, double_equal

__all__ = ["DOUBLE_RELATIVE_ERROR", "double_equal"]
