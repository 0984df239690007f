"""Interactive read-eval-print loop."""
from .repl import Repl

__all__ = ["Repl"]
