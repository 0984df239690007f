"""Formats evaluation results in Scheme notation."""
from typing import Any

from .sexp_ast import format_number
from .sexp_primitives import is_number


def format_value(value: Any) -> str:
    """
    #t / #f for booleans, integral floats as '3.', procedures as
    #<procedure name>, defined names as the bare name.
    """
    if isinstance(value, bool):
        return "#t" if value else "#f"
    if is_number(value):
        return format_number(value)
    # Closure, Primitive and Symbol all render themselves
    return str(value)
