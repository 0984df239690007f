"""Substitution-model evaluator for the section 1.1 subset of Scheme."""

from .sexp_evaluator.sexp_evaluator import SexpEvaluator
from .sexp_evaluator.sexp_environment import SexpEnvironment
from .sexp_evaluator.sexp_printer import format_value
from .sexp_evaluator.prelude import load_prelude
from .system.models import EvaluatorConfig
from .system.errors import SexpSyntaxError, SexpEvaluationError

__version__ = "0.1.0"

__all__ = [
    "SexpEvaluator",
    "SexpEnvironment",
    "EvaluatorConfig",
    "SexpSyntaxError",
    "SexpEvaluationError",
    "format_value",
    "load_prelude",
]
