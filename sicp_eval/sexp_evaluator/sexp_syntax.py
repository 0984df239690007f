"""
Syntax analysis: converts raw sexpdata ASTs into Expression nodes.

Special-form keywords are recognised by name in operator position before
any environment lookup, so they cannot be shadowed by definitions.
"""
import logging
from typing import Any, Callable, Dict, List

from sexpdata import Symbol as SexpSymbol, Quoted

from sicp_eval.system.errors import SexpSyntaxError
from .sexp_ast import (
    And, Boolean, Combination, Cond, CondClause, Definition, Expression, If,
    Lambda, Let, Number, Or, Symbol,
)

logger = logging.getLogger(__name__)

SexpNode = Any


def node_to_str(node: SexpNode) -> str:
    """Render a raw parsed node back to S-expression text for error messages."""
    if isinstance(node, list):
        return "(" + " ".join(node_to_str(n) for n in node) + ")"
    if isinstance(node, bool):
        return "#t" if node else "#f"
    if isinstance(node, SexpSymbol):
        return node.value()
    if isinstance(node, str):
        return f'"{node}"'
    return str(node)


class SyntaxAnalyzer:
    """
    Turns parsed S-expressions into Expression trees, validating the shape of
    every special form on the way.
    """

    def __init__(self):
        self.SPECIAL_FORM_ANALYZERS: Dict[str, Callable[[List[SexpNode], SexpNode], Expression]] = {
            "define": self._analyze_define,
            "lambda": self._analyze_lambda,
            "if": self._analyze_if,
            "cond": self._analyze_cond,
            "and": self._analyze_and,
            "or": self._analyze_or,
            "let": self._analyze_let,
        }

    def analyze(self, node: SexpNode) -> Expression:
        """
        Converts one parsed node into an Expression.

        Raises:
            SexpSyntaxError: If the node uses unsupported syntax or a malformed special form.
        """
        if isinstance(node, Expression):
            return node
        # bool before int: Python booleans are ints
        if isinstance(node, bool):
            return Boolean(node)
        if isinstance(node, (int, float)):
            return Number(node)
        if isinstance(node, SexpSymbol):
            return Symbol(node.value())
        if isinstance(node, Quoted):
            raise SexpSyntaxError("Quotation is not supported.", node_to_str(node))
        if isinstance(node, str):
            raise SexpSyntaxError("String literals are not supported.", node_to_str(node))
        if isinstance(node, list):
            return self._analyze_list(node)
        raise SexpSyntaxError(f"Unsupported expression of type {type(node).__name__}.", node_to_str(node))

    def _analyze_list(self, node: List[SexpNode]) -> Expression:
        if not node:
            raise SexpSyntaxError("Empty combination '()' is not an expression.", "()")

        op_node, arg_nodes = node[0], node[1:]
        if isinstance(op_node, SexpSymbol) and op_node.value() in self.SPECIAL_FORM_ANALYZERS:
            logger.debug(f"Analyzing special form '{op_node.value()}'")
            return self.SPECIAL_FORM_ANALYZERS[op_node.value()](arg_nodes, node)

        return Combination(self.analyze(op_node), [self.analyze(a) for a in arg_nodes])

    def _analyze_body(self, body_nodes: List[SexpNode], form: str, whole: SexpNode) -> List[Expression]:
        if not body_nodes:
            raise SexpSyntaxError(f"'{form}' requires at least one body expression.", node_to_str(whole))
        return [self.analyze(b) for b in body_nodes]

    def _analyze_parameters(self, param_nodes: Any, whole: SexpNode) -> List[Symbol]:
        if not isinstance(param_nodes, list):
            raise SexpSyntaxError("Lambda parameter definition must be a list of symbols.", node_to_str(whole))
        params: List[Symbol] = []
        for p_node in param_nodes:
            if not isinstance(p_node, SexpSymbol):
                raise SexpSyntaxError(f"Lambda parameters must be symbols, got {node_to_str(p_node)}.", node_to_str(whole))
            params.append(Symbol(p_node.value()))
        names = [p.name for p in params]
        if len(set(names)) != len(names):
            raise SexpSyntaxError(f"Duplicate parameter names in {node_to_str(param_nodes)}.", node_to_str(whole))
        return params

    def _analyze_define(self, args: List[SexpNode], whole: SexpNode) -> Definition:
        """(define name expr) or (define (name param ...) body ...)"""
        if not args:
            raise SexpSyntaxError("'define' requires a name.", node_to_str(whole))
        target = args[0]

        if isinstance(target, list):
            if not target or not isinstance(target[0], SexpSymbol):
                raise SexpSyntaxError("Procedure definition must start with (name param ...).", node_to_str(whole))
            name = target[0].value()
            params = self._analyze_parameters(target[1:], whole)
            body = self._analyze_body(args[1:], "define", whole)
            return Definition(Symbol(name), Lambda(params, body, name=name))

        if not isinstance(target, SexpSymbol):
            raise SexpSyntaxError(f"'define' name must be a symbol, got {node_to_str(target)}.", node_to_str(whole))
        if len(args) != 2:
            raise SexpSyntaxError("'define' requires exactly a name and one value expression: (define name expr)", node_to_str(whole))

        value_expr = self.analyze(args[1])
        if isinstance(value_expr, Lambda) and value_expr.name is None:
            value_expr.name = target.value()
        return Definition(Symbol(target.value()), value_expr)

    def _analyze_lambda(self, args: List[SexpNode], whole: SexpNode) -> Lambda:
        """(lambda (param ...) body ...)"""
        if len(args) < 2:
            raise SexpSyntaxError("'lambda' requires a parameter list and at least one body expression.", node_to_str(whole))
        params = self._analyze_parameters(args[0], whole)
        return Lambda(params, self._analyze_body(args[1:], "lambda", whole))

    def _analyze_if(self, args: List[SexpNode], whole: SexpNode) -> If:
        """(if predicate consequent alternative)"""
        if len(args) != 3:
            raise SexpSyntaxError("'if' requires 3 arguments: (if condition then_branch else_branch)", node_to_str(whole))
        predicate, consequent, alternative = (self.analyze(a) for a in args)
        return If(predicate, consequent, alternative)

    def _analyze_cond(self, args: List[SexpNode], whole: SexpNode) -> Cond:
        """(cond (p e ...) ... (else e ...))"""
        if not args:
            raise SexpSyntaxError("'cond' requires at least one clause.", node_to_str(whole))
        clauses: List[CondClause] = []
        else_body = None
        for i, clause in enumerate(args):
            if not isinstance(clause, list) or len(clause) < 2:
                raise SexpSyntaxError(f"Invalid 'cond' clause: expected (predicate expression ...), got {node_to_str(clause)}", node_to_str(whole))
            head = clause[0]
            if isinstance(head, SexpSymbol) and head.value() == "else":
                if i != len(args) - 1:
                    raise SexpSyntaxError("'else' clause must be the last clause of 'cond'.", node_to_str(whole))
                else_body = [self.analyze(e) for e in clause[1:]]
                continue
            clauses.append(CondClause(self.analyze(head), [self.analyze(e) for e in clause[1:]]))
        return Cond(clauses, else_body)

    def _analyze_and(self, args: List[SexpNode], whole: SexpNode) -> And:
        return And([self.analyze(a) for a in args])

    def _analyze_or(self, args: List[SexpNode], whole: SexpNode) -> Or:
        return Or([self.analyze(a) for a in args])

    def _analyze_let(self, args: List[SexpNode], whole: SexpNode) -> Let:
        """(let ((name expr) ...) body ...)"""
        if len(args) < 2 or not isinstance(args[0], list):
            raise SexpSyntaxError("'let' requires a bindings list and at least one body expression: (let ((var expr)...) body...)", node_to_str(whole))
        bindings = []
        seen = set()
        for binding in args[0]:
            if not (isinstance(binding, list) and len(binding) == 2 and isinstance(binding[0], SexpSymbol)):
                raise SexpSyntaxError(f"Invalid 'let' binding format: expected (symbol expression), got {node_to_str(binding)}", node_to_str(whole))
            name = binding[0].value()
            if name in seen:
                raise SexpSyntaxError(f"Duplicate 'let' binding for '{name}'.", node_to_str(whole))
            seen.add(name)
            bindings.append((Symbol(name), self.analyze(binding[1])))
        return Let(bindings, self._analyze_body(args[1:], "let", whole))
