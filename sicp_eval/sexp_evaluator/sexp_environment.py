"""
Lexical scoping environment for S-expression evaluation.
"""

import logging
from typing import Any, Dict, Optional

from sicp_eval.system.errors import UnboundNameError

logger = logging.getLogger(__name__)


class SexpEnvironment:
    """
    Represents a lexical environment for S-expression evaluation,
    supporting variable lookup, definition, and nested scopes.

    A frame only ever points at its parent, never at its children, so the
    chain is acyclic and a frame lives exactly as long as some closure or
    active call still references it.
    """

    def __init__(
        self,
        bindings: Optional[Dict[str, Any]] = None,
        parent: Optional['SexpEnvironment'] = None
    ):
        """
        Initializes a new SexpEnvironment.

        Args:
            bindings: An optional dictionary of initial variable bindings for this scope.
            parent: An optional parent environment for creating nested scopes.
                    Defaults to None, indicating a top-level scope.
        """
        self._bindings: Dict[str, Any] = dict(bindings) if bindings is not None else {}
        self._parent: Optional['SexpEnvironment'] = parent
        logger.debug("Initialized SexpEnvironment id=%s (Parent: %s, Bindings: %s)", id(self), id(parent) if parent else None, list(self._bindings))

    @property
    def parent(self) -> Optional['SexpEnvironment']:
        return self._parent

    def lookup(self, name: str) -> Any:
        """
        Looks up a variable name in the environment and its parent scopes.
        The innermost binding wins.

        Raises:
            UnboundNameError: If the name is not found in this environment or any
                              of its ancestor environments. Also a NameError.
        """
        env: Optional[SexpEnvironment] = self
        while env is not None:
            if name in env._bindings:
                value = env._bindings[name]
                logger.debug("  Found '%s' in env id=%s. Value type: %s", name, id(env), type(value).__name__)
                return value
            env = env._parent
        logger.debug("  '%s' not found in env chain starting at id=%s.", name, id(self))
        raise UnboundNameError(name)

    def define(self, name: str, value: Any) -> None:
        """
        Defines or redefines a variable in the *current* environment scope.
        This does not affect parent scopes.
        """
        logger.debug(f"Defining '{name}' = {type(value).__name__} in env {id(self)}")
        self._bindings[name] = value

    def extend(self, bindings: Dict[str, Any]) -> 'SexpEnvironment':
        """
        Creates a new child environment whose parent is this one, holding the
        given bindings in its local scope.
        """
        logger.debug("Extending env %s with bindings: %s", id(self), list(bindings))
        return SexpEnvironment(bindings=bindings, parent=self)

    # --- Helper methods for inspection ---

    def get_local_bindings(self) -> Dict[str, Any]:
        """Returns a copy of the bindings defined directly in this scope."""
        return self._bindings.copy()

    def __repr__(self) -> str:
        parent_id = id(self._parent) if self._parent else None
        return f"<SexpEnvironment id={id(self)} parent={parent_id} bindings={list(self._bindings.keys())}>"
