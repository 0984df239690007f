"""AST node implementations for the S-expression evaluator.

Each class is one tag of the Expression variant. Nodes are immutable in
practice, compare structurally, and render back to S-expression text with
str(), which is what error messages quote.
"""
from typing import Any, Optional, Sequence, Tuple, Union


def format_number(value: Union[int, float]) -> str:
    """Render a number as Scheme prints it: integral floats end in a bare dot (3.)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value)) + "."
    return str(value)


class Expression:
    """Base class for every expression node."""

    type = "expression"

    def _fields(self) -> Tuple[Any, ...]:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self) -> int:
        return hash((type(self).__name__, repr(self._fields())))


class Number(Expression):
    """A numeric literal. Evaluates to itself."""

    type = "number"

    def __init__(self, value: Union[int, float]):
        self.value = value

    def _fields(self):
        return (self.value,)

    def __repr__(self) -> str:
        return f"Number({self.value!r})"

    def __str__(self) -> str:
        return format_number(self.value)


class Boolean(Expression):
    """A boolean literal (#t / #f). Evaluates to itself."""

    type = "boolean"

    def __init__(self, value: bool):
        self.value = value

    def _fields(self):
        return (self.value,)

    def __repr__(self) -> str:
        return f"Boolean({self.value!r})"

    def __str__(self) -> str:
        return "#t" if self.value else "#f"


class Symbol(Expression):
    """A name, resolved through the environment chain."""

    type = "symbol"

    def __init__(self, name: str):
        self.name = str(name)

    def _fields(self):
        return (self.name,)

    def __repr__(self) -> str:
        return f"Symbol('{self.name}')"

    def __str__(self) -> str:
        return self.name


class Combination(Expression):
    """
    A procedure application.

    Attributes:
        operator: Expression producing the procedure; may itself be compound.
        operands: Operand expressions, evaluated left to right.
    """

    type = "combination"

    def __init__(self, operator: Expression, operands: Sequence[Expression]):
        self.operator = operator
        self.operands = list(operands)

    def _fields(self):
        return (self.operator, tuple(self.operands))

    def __repr__(self) -> str:
        return f"Combination({self.operator!r}, {self.operands!r})"

    def __str__(self) -> str:
        parts = [str(self.operator)] + [str(o) for o in self.operands]
        return "(" + " ".join(parts) + ")"


class If(Expression):
    """(if predicate consequent alternative)"""

    type = "if"

    def __init__(self, predicate: Expression, consequent: Expression, alternative: Expression):
        self.predicate = predicate
        self.consequent = consequent
        self.alternative = alternative

    def _fields(self):
        return (self.predicate, self.consequent, self.alternative)

    def __repr__(self) -> str:
        return f"If({self.predicate!r}, {self.consequent!r}, {self.alternative!r})"

    def __str__(self) -> str:
        return f"(if {self.predicate} {self.consequent} {self.alternative})"


class Lambda(Expression):
    """
    (lambda (param ...) body ...)

    The body is a non-empty sequence; only the last expression's value is
    returned from a call.
    """

    type = "lambda"

    def __init__(self, parameters: Sequence[Symbol], body: Union[Expression, Sequence[Expression]], name: Optional[str] = None):
        self.parameters = list(parameters)
        self.body = [body] if isinstance(body, Expression) else list(body)
        # Name given by (define (name ...) ...), used only for printing.
        self.name = name

    def _fields(self):
        return (tuple(self.parameters), tuple(self.body))

    def __repr__(self) -> str:
        return f"Lambda({self.parameters!r}, {self.body!r})"

    def __str__(self) -> str:
        params = " ".join(str(p) for p in self.parameters)
        body = " ".join(str(b) for b in self.body)
        return f"(lambda ({params}) {body})"


class Definition(Expression):
    """(define name value-expr)"""

    type = "definition"

    def __init__(self, name: Symbol, value_expr: Expression):
        self.name = name
        self.value_expr = value_expr

    def _fields(self):
        return (self.name, self.value_expr)

    def __repr__(self) -> str:
        return f"Definition({self.name!r}, {self.value_expr!r})"

    def __str__(self) -> str:
        return f"(define {self.name} {self.value_expr})"


class CondClause:
    """One (predicate body ...) clause of a cond."""

    def __init__(self, predicate: Expression, body: Sequence[Expression]):
        self.predicate = predicate
        self.body = list(body)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CondClause):
            return NotImplemented
        return self.predicate == other.predicate and self.body == other.body

    def __hash__(self) -> int:
        return hash((self.predicate, tuple(self.body)))

    def __repr__(self) -> str:
        return f"CondClause({self.predicate!r}, {self.body!r})"

    def __str__(self) -> str:
        return "(" + " ".join([str(self.predicate)] + [str(b) for b in self.body]) + ")"


class Cond(Expression):
    """(cond (p1 e1 ...) (p2 e2 ...) ... (else e ...))"""

    type = "cond"

    def __init__(self, clauses: Sequence[CondClause], else_body: Optional[Sequence[Expression]] = None):
        self.clauses = list(clauses)
        self.else_body = list(else_body) if else_body is not None else None

    def _fields(self):
        else_part = tuple(self.else_body) if self.else_body is not None else None
        return (tuple(self.clauses), else_part)

    def __repr__(self) -> str:
        return f"Cond({self.clauses!r}, else_body={self.else_body!r})"

    def __str__(self) -> str:
        parts = [str(c) for c in self.clauses]
        if self.else_body is not None:
            parts.append("(else " + " ".join(str(b) for b in self.else_body) + ")")
        return "(cond " + " ".join(parts) + ")"


class And(Expression):
    """(and e ...), short-circuiting on the first false value."""

    type = "and"

    def __init__(self, operands: Sequence[Expression]):
        self.operands = list(operands)

    def _fields(self):
        return (tuple(self.operands),)

    def __repr__(self) -> str:
        return f"And({self.operands!r})"

    def __str__(self) -> str:
        return "(" + " ".join(["and"] + [str(o) for o in self.operands]) + ")"


class Or(Expression):
    """(or e ...), short-circuiting on the first true value."""

    type = "or"

    def __init__(self, operands: Sequence[Expression]):
        self.operands = list(operands)

    def _fields(self):
        return (tuple(self.operands),)

    def __repr__(self) -> str:
        return f"Or({self.operands!r})"

    def __str__(self) -> str:
        return "(" + " ".join(["or"] + [str(o) for o in self.operands]) + ")"


class Let(Expression):
    """(let ((name expr) ...) body ...)"""

    type = "let"

    def __init__(self, bindings: Sequence[Tuple[Symbol, Expression]], body: Sequence[Expression]):
        self.bindings = [(name, expr) for name, expr in bindings]
        self.body = list(body)

    def _fields(self):
        return (tuple(self.bindings), tuple(self.body))

    def __repr__(self) -> str:
        return f"Let({self.bindings!r}, {self.body!r})"

    def __str__(self) -> str:
        bindings = " ".join(f"({name} {expr})" for name, expr in self.bindings)
        body = " ".join(str(b) for b in self.body)
        return f"(let ({bindings}) {body})"
