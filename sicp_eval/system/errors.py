"""
System-wide custom error types.
"""
from typing import Any, Optional


class SexpSyntaxError(ValueError):
    """
    Custom exception raised when S-expression parsing fails due to syntax errors,
    or when a special form is malformed (e.g. `(if 1 2)`).
    Inherits from ValueError for general compatibility but provides specific context.
    """
    def __init__(self, message: str, sexp_string: str, error_details: str = ""):
        """
        Initializes the SexpSyntaxError.

        Args:
            message: A high-level error message.
            sexp_string: The original S-expression string that caused the error.
            error_details: Specific details from the underlying parser, if available.
        """
        full_message = f"{message}\nInput: '{sexp_string}'"
        if error_details:
            full_message += f"\nDetails: {error_details}"
        super().__init__(full_message)
        self.sexp_string = sexp_string
        self.error_details = error_details


class SexpEvaluationError(Exception):
    """
    Custom exception raised during the evaluation phase of S-expressions.
    Base class of every runtime failure: unbound symbols, arity mismatches,
    non-applicable operators and operand type mismatches.
    """
    def __init__(self, message: str, expression: Any = "", error_details: str = ""):
        """
        Initializes the SexpEvaluationError.

        Args:
            message: A high-level error message describing the evaluation failure.
            expression: The S-expression string or node being evaluated when the error occurred;
                        nodes are rendered with str().
            error_details: Specific details about the error (e.g., from underlying exceptions).
        """
        expression = str(expression) if expression else ""
        full_message = f"{message}"
        if expression:
            full_message += f"\nExpression: '{expression}'"
        if error_details:
            full_message += f"\nDetails: {error_details}"
        super().__init__(full_message)
        self.message = message
        self.expression = expression
        self.error_details = error_details


class UnboundNameError(SexpEvaluationError, NameError):
    """A symbol has no binding anywhere in the environment chain."""
    def __init__(self, name: str, expression: Any = ""):
        super().__init__(f"Unbound symbol: Name '{name}' is not defined.", expression)
        self.name = name


class ArityError(SexpEvaluationError, TypeError):
    """A procedure or built-in was applied to the wrong number of operands."""
    def __init__(self, procedure: str, expected: str, got: int, expression: Any = ""):
        super().__init__(
            f"Arity mismatch: '{procedure}' expects {expected} argument(s), got {got}.",
            expression,
        )
        self.procedure = procedure
        self.expected = expected
        self.got = got


class NotApplicableError(SexpEvaluationError, TypeError):
    """The operator position did not evaluate to a procedure."""
    def __init__(self, operator: Any, expression: Any = ""):
        super().__init__(
            f"Not applicable: {operator!r} (type: {type(operator).__name__}) is not a procedure.",
            expression,
        )
        self.operator = operator


class SexpTypeError(SexpEvaluationError, TypeError):
    """A built-in received an operand of the wrong kind of value."""
    def __init__(self, procedure: str, operand: Any, expected: str, expression: Any = ""):
        super().__init__(
            f"Wrong operand type for '{procedure}': expected {expected}, got {operand!r}.",
            expression,
        )
        self.procedure = procedure
        self.operand = operand
        self.expected = expected


class RecursionDepthError(SexpEvaluationError, RecursionError):
    """Nested procedure applications exceeded the configured or host depth limit."""
    def __init__(self, depth: Optional[int], expression: Any = ""):
        limit = f"configured limit of {depth}" if depth is not None else "host recursion limit"
        super().__init__(f"Maximum recursion depth exceeded ({limit}).", expression)
        self.depth = depth
