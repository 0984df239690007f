"""
Processor for S-expression special forms.

Each handler receives an already-analyzed node and controls which of its
sub-expressions get evaluated, and in which environment.
"""
import logging
from typing import Any, Dict, TYPE_CHECKING

from sicp_eval.system.errors import SexpEvaluationError
from .sexp_ast import And, Cond, Definition, If, Lambda, Let, Or, Symbol
from .sexp_closure import Closure
from .sexp_environment import SexpEnvironment
from .sexp_primitives import is_true

if TYPE_CHECKING:
    from .sexp_evaluator import SexpEvaluator

logger = logging.getLogger(__name__)


class SpecialFormProcessor:
    """
    Processes special forms for the SexpEvaluator.
    Errors raised while evaluating sub-expressions propagate unchanged.
    """
    def __init__(self, evaluator_instance: 'SexpEvaluator'):
        """
        Args:
            evaluator_instance: The SexpEvaluator used for recursive evaluation
                                of sub-expressions.
        """
        self.evaluator = evaluator_instance
        logger.debug("SpecialFormProcessor initialized.")

    def handle_if_form(self, expr: If, env: SexpEnvironment) -> Any:
        """
        Handles (if predicate consequent alternative).

        In the default 'special' mode exactly one branch is evaluated. In
        'procedure' mode all three operands are evaluated first, the way an
        ordinary procedure built from cond would receive them.
        """
        if self.evaluator.config.if_mode == "procedure":
            predicate = self.evaluator._eval(expr.predicate, env)
            consequent = self.evaluator._eval(expr.consequent, env)
            alternative = self.evaluator._eval(expr.alternative, env)
            return consequent if is_true(predicate) else alternative

        condition_result = self.evaluator._eval(expr.predicate, env)
        logger.debug("  'if' condition '%s' evaluated to: %s", expr.predicate, condition_result)
        chosen_branch = expr.consequent if is_true(condition_result) else expr.alternative
        logger.debug("  'if' chose branch: %s", chosen_branch)
        return self.evaluator._eval(chosen_branch, env)

    def handle_lambda_form(self, expr: Lambda, env: SexpEnvironment) -> Closure:
        """Creates a Closure over the current environment."""
        logger.debug(f"Creating Closure: params={[p.name for p in expr.parameters]}, def_env_id={id(env)}")
        return Closure(expr.parameters, expr.body, env, name=expr.name)

    def handle_define_form(self, expr: Definition, env: SexpEnvironment) -> Symbol:
        """
        Evaluates the value expression in env and binds it in env itself.
        Returns the defined name.
        """
        value = self.evaluator._eval(expr.value_expr, env)
        env.define(expr.name.name, value)
        logger.debug(f"  'define' bound '{expr.name}' in env {id(env)}")
        return expr.name

    def handle_cond_form(self, expr: Cond, env: SexpEnvironment) -> Any:
        """Evaluates the body of the first clause whose predicate is true."""
        for clause in expr.clauses:
            if is_true(self.evaluator._eval(clause.predicate, env)):
                logger.debug("  'cond' selected clause %s", clause)
                return self.evaluator._eval_sequence(clause.body, env)
        if expr.else_body is not None:
            return self.evaluator._eval_sequence(expr.else_body, env)
        raise SexpEvaluationError("No 'cond' clause matched and there is no 'else' clause.", expr)

    def handle_and_form(self, expr: And, env: SexpEnvironment) -> Any:
        """Stops at the first false operand; otherwise returns the last value, #t for (and)."""
        result: Any = True
        for operand in expr.operands:
            result = self.evaluator._eval(operand, env)
            if not is_true(result):
                return False
        return result

    def handle_or_form(self, expr: Or, env: SexpEnvironment) -> Any:
        """Returns the first true operand value, #f if none."""
        for operand in expr.operands:
            result = self.evaluator._eval(operand, env)
            if is_true(result):
                return result
        return False

    def handle_let_form(self, expr: Let, env: SexpEnvironment) -> Any:
        """Init expressions are evaluated in the outer env; the body in a child env."""
        evaluated_bindings: Dict[str, Any] = {}
        for name, value_expr in expr.bindings:
            evaluated_bindings[name.name] = self.evaluator._eval(value_expr, env)
        let_env = env.extend(evaluated_bindings)
        return self.evaluator._eval_sequence(expr.body, let_env)
