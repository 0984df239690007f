"""
S-expression evaluator implementation.

Applicative-order evaluation of the substitution model: the operator and
every operand of a combination are evaluated, left to right, in the caller's
environment before the procedure is applied. Compound procedures run in a
fresh child of the environment they were defined in.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from sicp_eval.sexp_parser.sexp_parser import SexpParser
from sicp_eval.system.errors import (
    ArityError, NotApplicableError, RecursionDepthError, SexpEvaluationError,
    SexpSyntaxError,
)
from sicp_eval.system.models import EvaluatorConfig
from .sexp_ast import (
    And, Boolean, Combination, Cond, Definition, Expression, If, Lambda, Let,
    Number, Or, Symbol,
)
from .sexp_closure import Closure
from .sexp_environment import SexpEnvironment
from .sexp_primitives import Primitive, PrimitiveProcessor
from .sexp_special_forms import SpecialFormProcessor
from .sexp_syntax import SyntaxAnalyzer

logger = logging.getLogger(__name__)


class SexpEvaluator:
    """
    Parses and evaluates S-expressions against a lexically scoped environment.

    Owns a single global environment, built once with the primitives and
    reused by every call that does not pass its own environment.
    """

    def __init__(self, config: Optional[EvaluatorConfig] = None):
        """
        Args:
            config: Evaluator settings; defaults to EvaluatorConfig().
        """
        self.config = config if config is not None else EvaluatorConfig()
        self.parser = SexpParser()
        self.analyzer = SyntaxAnalyzer()

        self.special_form_processor = SpecialFormProcessor(self)
        self.primitive_processor = PrimitiveProcessor()

        # Dispatch by node class; Number/Boolean/Symbol/Combination are handled inline in _eval.
        self.SPECIAL_FORM_HANDLERS: Dict[type, Callable[[Any, SexpEnvironment], Any]] = {
            If: self.special_form_processor.handle_if_form,
            Lambda: self.special_form_processor.handle_lambda_form,
            Definition: self.special_form_processor.handle_define_form,
            Cond: self.special_form_processor.handle_cond_form,
            And: self.special_form_processor.handle_and_form,
            Or: self.special_form_processor.handle_or_form,
            Let: self.special_form_processor.handle_let_form,
        }

        self._depth = 0
        self.global_env = self.create_global_environment()
        logger.info(f"SexpEvaluator initialized (if_mode={self.config.if_mode}, max_depth={self.config.max_depth}).")

    # --- Environments ---

    def create_global_environment(self) -> SexpEnvironment:
        """Builds a fresh root environment holding the primitives plus true/false."""
        bindings: Dict[str, Any] = dict(self.primitive_processor.build_primitives())
        bindings["true"] = True
        bindings["false"] = False
        logger.debug(f"Global environment bindings: {sorted(bindings)}")
        return SexpEnvironment(bindings=bindings)

    def reset_global_environment(self) -> SexpEnvironment:
        """Discards every top-level definition by replacing the global environment."""
        self.global_env = self.create_global_environment()
        return self.global_env

    # --- Public entry points ---

    def evaluate(self, expr: Any, env: Optional[SexpEnvironment] = None) -> Any:
        """
        Evaluates one expression.

        Args:
            expr: An Expression node, or a raw parsed node (analyzed first).
            env: Environment to evaluate in; defaults to the global environment.

        Raises:
            SexpSyntaxError: If a raw node is malformed.
            UnboundNameError, ArityError, NotApplicableError, SexpTypeError,
            RecursionDepthError, SexpEvaluationError: On evaluation failure.
        """
        env = env if env is not None else self.global_env
        try:
            expression = self._analyze(expr)
            return self._eval(expression, env)
        except RecursionDepthError:
            raise
        except RecursionError as e:
            # The tree may be too deep to render, so the expression is not quoted.
            logger.error("Host recursion limit reached during evaluation")
            raise RecursionDepthError(None) from e
        except SexpEvaluationError as e:
            logger.error(f"S-expression evaluation error: {e.message}")
            if not e.expression:
                e.expression = str(expression)
            raise

    def evaluate_string(self, sexp_string: str, env: Optional[SexpEnvironment] = None) -> Any:
        """Parses a single S-expression and evaluates it."""
        logger.info(f"Evaluating S-expression string: {sexp_string[:100]}")
        parsed_node = self.parser.parse_string(sexp_string)
        result = self.evaluate(parsed_node, env)
        logger.info(f"Finished evaluating S-expression. Result type: {type(result).__name__}")
        return result

    def iter_program(self, program_text: str, env: Optional[SexpEnvironment] = None) -> Iterator[Tuple[Expression, Any]]:
        """
        Evaluates each top-level form in order, yielding (expression, value).
        Evaluation stops at the first error, which propagates.
        """
        env = env if env is not None else self.global_env
        for node in self.parser.parse_program(program_text):
            expression = self._analyze(node)
            yield expression, self.evaluate(expression, env)

    def evaluate_program(self, program_text: str, env: Optional[SexpEnvironment] = None) -> List[Any]:
        """Evaluates every top-level form and returns their values in order."""
        return [value for _, value in self.iter_program(program_text, env)]

    def apply_procedure(self, procedure: Any, args: List[Any], call_expr: Any = None) -> Any:
        """
        Applies an evaluated procedure to evaluated operands.

        Raises:
            NotApplicableError: If procedure is neither a Closure, a Primitive,
                                nor a Python callable.
            ArityError: On an operand count mismatch.
        """
        if isinstance(procedure, Closure):
            return self._apply_closure(procedure, args, call_expr)

        if isinstance(procedure, Primitive):
            logger.debug("  apply_procedure: Applying primitive '%s' to %s", procedure.name, args)
            return procedure.apply(args, call_expr)

        if callable(procedure):
            # Plain Python callables injected into an environment by embedding code
            logger.debug(f"  apply_procedure: Operator is a general Python callable: {procedure}")
            try:
                return procedure(*args)
            except SexpEvaluationError:
                raise
            except (TypeError, ValueError, ArithmeticError) as e:
                raise SexpEvaluationError(f"Error invoking callable {procedure}: {e}", call_expr, error_details=str(e)) from e

        logger.error(f"  apply_procedure: Operator is not a procedure: {procedure!r}")
        raise NotApplicableError(procedure, call_expr)

    # --- Internal evaluation ---

    def _analyze(self, node: Any) -> Expression:
        try:
            return self.analyzer.analyze(node)
        except RecursionError as e:
            logger.error("S-expression syntax error: expression nested too deeply to analyze")
            raise SexpSyntaxError("Expression nested too deeply to parse.", "", error_details=str(e)) from e

    def _eval(self, node: Expression, env: SexpEnvironment) -> Any:
        """
        Internal recursive evaluation method for Expression nodes.
        """
        if not isinstance(node, Expression):
            # Raw parsed values nested inside a hand-built tree
            node = self.analyzer.analyze(node)
        logger.debug("Eval START: Node=%s (Type=%s) EnvID=%s", node, node.type, id(env))

        if isinstance(node, (Number, Boolean)):
            return node.value

        if isinstance(node, Symbol):
            return env.lookup(node.name)

        if isinstance(node, Combination):
            return self._eval_combination(node, env)

        handler = self.SPECIAL_FORM_HANDLERS.get(type(node))
        if handler is None:
            raise SexpEvaluationError(f"Unknown expression type: {type(node).__name__}", node)
        return handler(node, env)

    def _eval_combination(self, node: Combination, env: SexpEnvironment) -> Any:
        procedure = self._eval(node.operator, env)
        # Operands are evaluated in the caller's env, left to right, before any binding.
        evaluated_args = [self._eval(operand, env) for operand in node.operands]
        logger.debug("  _eval_combination: %s -> %r, args=%s", node.operator, procedure, evaluated_args)
        return self.apply_procedure(procedure, evaluated_args, node)

    def _eval_sequence(self, body: List[Expression], env: SexpEnvironment) -> Any:
        """Evaluates each expression in order and returns the last value."""
        result: Any = None
        for body_node in body:
            result = self._eval(body_node, env)
        return result

    def _apply_closure(self, closure: Closure, args: List[Any], call_expr: Any) -> Any:
        num_expected_params = len(closure.params_ast)
        if num_expected_params != len(args):
            raise ArityError(closure.name or "anonymous procedure", str(num_expected_params), len(args), call_expr)

        max_depth = self.config.max_depth
        if max_depth is not None and self._depth >= max_depth:
            logger.error(f"  _apply_closure: depth limit {max_depth} reached at {call_expr}")
            raise RecursionDepthError(max_depth, call_expr)

        # The call frame's parent is the closure's definition environment, not the caller's.
        call_frame_env = closure.definition_env.extend(dict(zip(closure.param_names, args)))
        logger.debug("    Created call_frame_env id=%s extending definition_env id=%s", id(call_frame_env), id(closure.definition_env))

        self._depth += 1
        try:
            return self._eval_sequence(closure.body_ast, call_frame_env)
        finally:
            self._depth -= 1
