"""
Worked examples from section 1.1, as loadable program text.

The prelude is ordinary source evaluated by the evaluator itself, so every
definition here goes through the same parser, analyzer and environments as
user input.
"""
import logging
from typing import Dict, List, Optional, TYPE_CHECKING

from .sexp_environment import SexpEnvironment

if TYPE_CHECKING:
    from .sexp_evaluator import SexpEvaluator

logger = logging.getLogger(__name__)

PRELUDE_SOURCE = """
(define (square x) (* x x))

(define (sum-of-squares x y)
  (+ (square x) (square y)))

(define (f a)
  (sum-of-squares (+ a 1) (* a 2)))

(define (abs x)
  (cond ((> x 0) x)
        ((= x 0) 0)
        ((< x 0) (- x))))

(define (abs-cond-else x)
  (cond ((< x 0) (- x))
        (else x)))

(define (abs-if x)
  (if (< x 0)
      (- x)
      x))

(define (>=-or x y)
  (or (> x y) (= x y)))

(define (average x y)
  (/ (+ x y) 2))

(define (improve guess x)
  (average guess (/ x guess)))

(define (sqrt-iter guess x)
  (if (good-enough? guess x)
      guess
      (sqrt-iter (improve guess x) x)))

(define (sqrt x)
  (sqrt-iter 1.0 x))

(define (cube x) (* x x x))

(define (cube-root x)
  (define (improve-cube guess)
    (/ (+ (/ x (square guess)) (* 2 guess)) 3))
  (define (cube-good-enough? guess)
    (< (abs (- (cube guess) x)) sqrt-tolerance))
  (define (cube-root-iter guess)
    (if (cube-good-enough? guess)
        guess
        (cube-root-iter (improve-cube guess))))
  (cube-root-iter 1.0))

(define (sum-of-larger-squares a b c)
  (cond ((and (<= a b) (<= a c)) (sum-of-squares b c))
        ((and (<= b a) (<= b c)) (sum-of-squares a c))
        (else (sum-of-squares a b))))

(define (a-plus-abs-b a b)
  ((if (> b 0) + -) a b))
"""

# Termination tests for sqrt-iter, keyed by EvaluatorConfig.sqrt_policy.
GOOD_ENOUGH_SOURCES: Dict[str, str] = {
    "absolute": """
(define (good-enough? guess x)
  (< (abs (- (square guess) x)) sqrt-tolerance))
""",
    "relative": """
(define (good-enough? guess x)
  (< (abs (- (improve guess x) guess)) (* guess sqrt-tolerance)))
""",
}


def prelude_names(evaluator: 'SexpEvaluator') -> List[str]:
    """Top-level names the prelude defines, in definition order."""
    forms = evaluator.parser.parse_program(PRELUDE_SOURCE + GOOD_ENOUGH_SOURCES["absolute"])
    return ["sqrt-tolerance"] + [str(evaluator.analyzer.analyze(form).name) for form in forms]


def load_prelude(evaluator: 'SexpEvaluator', env: Optional[SexpEnvironment] = None) -> SexpEnvironment:
    """
    Evaluates the prelude into env (the evaluator's global environment by default).

    `sqrt-tolerance` is bound directly from evaluator.config.sqrt_tolerance, and
    the `good-enough?` definition is chosen by evaluator.config.sqrt_policy.

    Returns:
        The environment the definitions were added to.
    """
    env = env if env is not None else evaluator.global_env
    config = evaluator.config
    env.define("sqrt-tolerance", config.sqrt_tolerance)
    evaluator.evaluate_program(PRELUDE_SOURCE, env)
    evaluator.evaluate_program(GOOD_ENOUGH_SOURCES[config.sqrt_policy], env)
    logger.info(f"Prelude loaded (sqrt_policy={config.sqrt_policy}, sqrt_tolerance={config.sqrt_tolerance}).")
    return env
