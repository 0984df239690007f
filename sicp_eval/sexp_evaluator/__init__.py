"""Expression tree, environments and the applicative-order evaluator."""

from .sexp_evaluator import SexpEvaluator
from .sexp_environment import SexpEnvironment
from .sexp_closure import Closure
from .sexp_primitives import Primitive

__all__ = [
    "SexpEvaluator",
    "SexpEnvironment",
    "Closure",
    "Primitive",
]
