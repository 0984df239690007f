"""
Processor for S-expression primitives.

Built-ins receive operands that have already been evaluated (applicative
order); each one validates arity and operand kinds before computing.
"""
import logging
import operator
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from sicp_eval.system.errors import ArityError, SexpEvaluationError, SexpTypeError

logger = logging.getLogger(__name__)

Numeric = Union[int, float]


def is_number(value: Any) -> bool:
    """Numbers are int/float; bool is excluded even though Python treats it as an int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_true(value: Any) -> bool:
    """Only #f is false; every other value, including 0, counts as true."""
    return value is not False


class Primitive:
    """
    A built-in procedure value.

    Attributes:
        name: The name it is bound to in the global environment.
        function: Callable taking (evaluated_args, call_expr).
        min_args: Fewest operands accepted.
        max_args: Most operands accepted, or None for variadic.
    """

    def __init__(self, name: str, function: Callable[[List[Any], Any], Any], min_args: int = 0, max_args: Optional[int] = None):
        self.name = name
        self.function = function
        self.min_args = min_args
        self.max_args = max_args

    def describe_arity(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.max_args == self.min_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"

    def apply(self, args: List[Any], call_expr: Any = None) -> Any:
        count = len(args)
        if count < self.min_args or (self.max_args is not None and count > self.max_args):
            raise ArityError(self.name, self.describe_arity(), count, call_expr)
        try:
            return self.function(args, call_expr)
        except OverflowError as e:
            # Mixing floats with integers too large for a float, or inexact big-int division
            raise SexpEvaluationError(f"Numeric overflow in '{self.name}'", call_expr, error_details=str(e)) from e

    def __str__(self) -> str:
        return f"#<primitive {self.name}>"

    def __repr__(self) -> str:
        return f"<Primitive name={self.name} arity={self.describe_arity()}>"


class PrimitiveProcessor:
    """
    Applies primitives for the SexpEvaluator.
    Each method implements one built-in over already-evaluated operands.
    """

    def __init__(self):
        # name -> (applier, min_args, max_args)
        self.PRIMITIVE_APPLIERS: Dict[str, Tuple[Callable[[List[Any], Any], Any], int, Optional[int]]] = {
            "+": (self.apply_add_primitive, 0, None),
            "-": (self.apply_subtract_primitive, 1, None),
            "*": (self.apply_multiply_primitive, 0, None),
            "/": (self.apply_divide_primitive, 1, None),
            "=": (self._comparison("=", operator.eq), 2, None),
            "<": (self._comparison("<", operator.lt), 2, None),
            ">": (self._comparison(">", operator.gt), 2, None),
            "<=": (self._comparison("<=", operator.le), 2, None),
            ">=": (self._comparison(">=", operator.ge), 2, None),
            "and": (self.apply_and_primitive, 0, None),
            "or": (self.apply_or_primitive, 0, None),
            "not": (self.apply_not_primitive, 1, 1),
            "remainder": (self.apply_remainder_primitive, 2, 2),
            "quotient": (self.apply_quotient_primitive, 2, 2),
            "modulo": (self.apply_modulo_primitive, 2, 2),
            "min": (self._extremum("min", min), 1, None),
            "max": (self._extremum("max", max), 1, None),
            "zero?": (self.apply_zero_primitive, 1, 1),
            "even?": (self._parity("even?", 0), 1, 1),
            "odd?": (self._parity("odd?", 1), 1, 1),
            "exact->inexact": (self.apply_exact_to_inexact_primitive, 1, 1),
        }
        logger.debug(f"PrimitiveProcessor initialized with {len(self.PRIMITIVE_APPLIERS)} primitives.")

    def build_primitives(self) -> Dict[str, Primitive]:
        """Wraps every applier in a Primitive value, keyed by its global name."""
        return {
            name: Primitive(name, applier, min_args, max_args)
            for name, (applier, min_args, max_args) in self.PRIMITIVE_APPLIERS.items()
        }

    # --- Operand validation ---

    @staticmethod
    def _require_numbers(name: str, args: List[Any], call_expr: Any) -> List[Numeric]:
        for arg in args:
            if not is_number(arg):
                raise SexpTypeError(name, arg, "number", call_expr)
        return args

    @staticmethod
    def _require_nonzero(name: str, divisor: Numeric, call_expr: Any) -> None:
        if divisor == 0:
            raise SexpEvaluationError(f"Division by zero in '{name}'", call_expr)

    # --- Arithmetic ---

    def apply_add_primitive(self, args: List[Any], call_expr: Any) -> Numeric:
        """(+ n ...)"""
        total: Numeric = 0
        for n in self._require_numbers("+", args, call_expr):
            total += n
        return total

    def apply_subtract_primitive(self, args: List[Any], call_expr: Any) -> Numeric:
        """(- n) negates; (- n m ...) subtracts left to right."""
        numbers = self._require_numbers("-", args, call_expr)
        if len(numbers) == 1:
            return -numbers[0]
        result = numbers[0]
        for n in numbers[1:]:
            result -= n
        return result

    def apply_multiply_primitive(self, args: List[Any], call_expr: Any) -> Numeric:
        """(* n ...)"""
        product: Numeric = 1
        for n in self._require_numbers("*", args, call_expr):
            product *= n
        return product

    def _divide(self, dividend: Numeric, divisor: Numeric, call_expr: Any) -> Numeric:
        self._require_nonzero("/", divisor, call_expr)
        if isinstance(dividend, int) and isinstance(divisor, int) and dividend % divisor == 0:
            return dividend // divisor
        return dividend / divisor

    def apply_divide_primitive(self, args: List[Any], call_expr: Any) -> Numeric:
        """(/ n) is the reciprocal; exact integer quotients stay integers."""
        numbers = self._require_numbers("/", args, call_expr)
        if len(numbers) == 1:
            return self._divide(1, numbers[0], call_expr)
        result = numbers[0]
        for n in numbers[1:]:
            result = self._divide(result, n, call_expr)
        return result

    def apply_remainder_primitive(self, args: List[Any], call_expr: Any) -> Numeric:
        """Sign follows the dividend."""
        a, b = self._require_numbers("remainder", args, call_expr)
        self._require_nonzero("remainder", b, call_expr)
        r = abs(a) % abs(b)
        return r if a >= 0 else -r

    def apply_quotient_primitive(self, args: List[Any], call_expr: Any) -> Numeric:
        """Integer division truncating toward zero."""
        a, b = self._require_numbers("quotient", args, call_expr)
        self._require_nonzero("quotient", b, call_expr)
        q = abs(a) // abs(b)
        return q if (a >= 0) == (b >= 0) else -q

    def apply_modulo_primitive(self, args: List[Any], call_expr: Any) -> Numeric:
        """Sign follows the divisor."""
        a, b = self._require_numbers("modulo", args, call_expr)
        self._require_nonzero("modulo", b, call_expr)
        return a % b

    def apply_exact_to_inexact_primitive(self, args: List[Any], call_expr: Any) -> float:
        (n,) = self._require_numbers("exact->inexact", args, call_expr)
        return float(n)

    def _extremum(self, name: str, pick: Callable[..., Numeric]) -> Callable[[List[Any], Any], Numeric]:
        def applier(args: List[Any], call_expr: Any) -> Numeric:
            numbers = self._require_numbers(name, args, call_expr)
            result = pick(numbers)
            # Inexact contagion: any float operand makes the result a float.
            if any(isinstance(n, float) for n in numbers):
                return float(result)
            return result
        return applier

    # --- Predicates ---

    def _comparison(self, name: str, compare: Callable[[Numeric, Numeric], bool]) -> Callable[[List[Any], Any], bool]:
        def applier(args: List[Any], call_expr: Any) -> bool:
            numbers = self._require_numbers(name, args, call_expr)
            return all(compare(a, b) for a, b in zip(numbers, numbers[1:]))
        return applier

    def apply_zero_primitive(self, args: List[Any], call_expr: Any) -> bool:
        (n,) = self._require_numbers("zero?", args, call_expr)
        return n == 0

    def _parity(self, name: str, expected: int) -> Callable[[List[Any], Any], bool]:
        def applier(args: List[Any], call_expr: Any) -> bool:
            (n,) = self._require_numbers(name, args, call_expr)
            if isinstance(n, float) and not n.is_integer():
                raise SexpTypeError(name, n, "integer", call_expr)
            return int(n) % 2 == expected
        return applier

    # --- Logical connectives as procedures ---
    # These evaluate every operand before being applied; the short-circuiting
    # 'and'/'or' special forms shadow them in operator position of parsed text.

    def apply_and_primitive(self, args: List[Any], call_expr: Any) -> Any:
        result: Any = True
        for value in args:
            if not is_true(value):
                return False
            result = value
        return result

    def apply_or_primitive(self, args: List[Any], call_expr: Any) -> Any:
        for value in args:
            if is_true(value):
                return value
        return False

    def apply_not_primitive(self, args: List[Any], call_expr: Any) -> bool:
        return not is_true(args[0])
