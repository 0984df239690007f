"""
Defines the Closure class for compound procedures created by 'lambda'
(and by the procedure form of 'define').
"""
import logging
from typing import List, Optional

from .sexp_ast import Expression, Symbol
from .sexp_environment import SexpEnvironment

logger = logging.getLogger(__name__)


class Closure:
    def __init__(self, params_ast: List[Symbol], body_ast: List[Expression], definition_env: SexpEnvironment, name: Optional[str] = None):
        """
        Represents a lexically-scoped compound procedure.

        Args:
            params_ast: The formal parameters, in order.
            body_ast: The body expressions; a call returns the value of the last one.
            definition_env: The SexpEnvironment captured at the time of lambda definition.
                            This environment is the parent for the function's call frame.
            name: Optional name for printing, taken from (define (name ...) ...).
        """
        self.params_ast: List[Symbol] = params_ast
        self.body_ast: List[Expression] = body_ast
        self.definition_env: SexpEnvironment = definition_env
        self.name = name

        logger.debug(f"Closure created: name={name}, params=({', '.join(self.param_names)}), num_body_exprs={len(self.body_ast)}, def_env_id={id(self.definition_env)}")

    @property
    def param_names(self) -> List[str]:
        return [p.name for p in self.params_ast]

    def __str__(self) -> str:
        return f"#<procedure {self.name or 'anonymous'}>"

    def __repr__(self):
        return f"<Closure name={self.name} params=({', '.join(self.param_names)}) body_exprs#={len(self.body_ast)} def_env_id={id(self.definition_env)}>"
