import pytest

from sicp_eval.sexp_evaluator.prelude import load_prelude
from sicp_eval.sexp_evaluator.sexp_environment import SexpEnvironment
from sicp_eval.sexp_evaluator.sexp_evaluator import SexpEvaluator
from sicp_eval.system.models import EvaluatorConfig


@pytest.fixture
def evaluator():
    """Provides a SexpEvaluator with default settings and a fresh global environment."""
    return SexpEvaluator()


@pytest.fixture
def global_env(evaluator):
    """The evaluator's global environment (primitives plus true/false)."""
    return evaluator.global_env


@pytest.fixture
def prelude_evaluator():
    """Evaluator with the textbook definitions already loaded."""
    ev = SexpEvaluator()
    load_prelude(ev)
    return ev


@pytest.fixture
def make_evaluator():
    """Factory for evaluators with custom EvaluatorConfig fields."""
    def _make(**config_fields):
        return SexpEvaluator(EvaluatorConfig(**config_fields))
    return _make


@pytest.fixture
def empty_env():
    """Provides a root SexpEnvironment with no bindings."""
    return SexpEnvironment()
