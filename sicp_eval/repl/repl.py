"""REPL interface for interactive sessions."""
import logging
import sys
from typing import Callable, Dict, Optional

from sicp_eval.sexp_evaluator.prelude import load_prelude, prelude_names
from sicp_eval.sexp_evaluator.sexp_evaluator import SexpEvaluator
from sicp_eval.sexp_evaluator.sexp_printer import format_value
from sicp_eval.system.errors import SexpEvaluationError, SexpSyntaxError

logger = logging.getLogger(__name__)


class Repl:
    """Interactive REPL (Read-Eval-Print Loop) interface.

    Reads one line at a time, evaluates every form on it against the
    evaluator's global environment, and prints each value in Scheme notation.
    Lines starting with '/' are REPL commands.
    """

    def __init__(self, evaluator: SexpEvaluator, output_stream=None, input_func: Optional[Callable[[str], str]] = None):
        """Initialize the REPL interface.

        Args:
            evaluator: The SexpEvaluator whose global environment persists across inputs
            output_stream: Optional output stream (defaults to sys.stdout)
            input_func: Optional replacement for input(), used to feed lines in tests
        """
        self.evaluator = evaluator
        self.verbose = False  # Verbose mode off by default
        self.running = False
        self.output = output_stream or sys.stdout
        self.input_func = input_func or input
        self.prompt = "sicp> "
        self.commands: Dict[str, Callable[[str], None]] = {
            "/help": self._cmd_help,
            "/reset": self._cmd_reset,
            "/env": self._cmd_env,
            "/prelude": self._cmd_prelude,
            "/verbose": self._cmd_verbose,
            "/exit": self._cmd_exit,
        }

    def start(self) -> None:
        """Start the REPL interface.

        Runs until /exit, end of input or Ctrl-C.
        """
        print("SICP evaluator REPL started", file=self.output)
        print("Type expressions to evaluate (/help for help)", file=self.output)

        self.running = True
        while self.running:
            try:
                user_input = self.input_func(self.prompt)
                self._process_input(user_input)
            except (KeyboardInterrupt, EOFError):
                print("\nExiting...", file=self.output)
                break

    def _process_input(self, user_input: str) -> None:
        """Process user input.

        Args:
            user_input: Input from the user
        """
        user_input = user_input.strip()

        if not user_input:
            return

        if user_input.startswith("/"):
            self._handle_command(user_input)
        else:
            self._handle_program(user_input)

    def _handle_command(self, command: str) -> None:
        """Handle a command input.

        Args:
            command: Command from the user
        """
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()
        args = parts[1] if len(parts) > 1 else ""

        if cmd in self.commands:
            self.commands[cmd](args)
        else:
            print(f"Unknown command: {cmd}", file=self.output)
            print("Type /help for available commands", file=self.output)

    def _handle_program(self, text: str) -> None:
        """Evaluate every form in text, printing each value as it is produced.

        Errors are reported and the session continues; definitions made before
        the failing form stay in place.
        """
        try:
            for expression, value in self.evaluator.iter_program(text):
                if self.verbose:
                    print(f";; {expression}", file=self.output)
                print(format_value(value), file=self.output)
        except (SexpSyntaxError, SexpEvaluationError) as e:
            logger.debug(f"REPL input failed: {e}")
            message = getattr(e, "message", None) or str(e).splitlines()[0]
            print(f"Error: {message}", file=self.output)
            if self.verbose:
                print(str(e), file=self.output)

    def _cmd_help(self, args: str) -> None:
        """Handle the help command."""
        print("Available commands:", file=self.output)
        print("  /help - Show this help", file=self.output)
        print("  /reset - Discard all definitions and restore the built-ins", file=self.output)
        print("  /env - List the names defined in this session", file=self.output)
        print("  /prelude - Load the section 1.1 examples (square, sqrt, abs, ...)", file=self.output)
        print("  /verbose [on|off] - Toggle verbose mode", file=self.output)
        print("  /exit - Exit the REPL", file=self.output)

    def _cmd_reset(self, args: str) -> None:
        """Handle the reset command."""
        self.evaluator.reset_global_environment()
        print("Environment reset", file=self.output)

    def _cmd_env(self, args: str) -> None:
        """Handle the env command: user definitions only, built-ins are left out."""
        builtins = set(self.evaluator.create_global_environment().get_local_bindings())
        bindings = self.evaluator.global_env.get_local_bindings()
        user_names = sorted(name for name in bindings if name not in builtins)
        if not user_names:
            print("No definitions", file=self.output)
            return
        for name in user_names:
            print(f"  {name} = {format_value(bindings[name])}", file=self.output)

    def _cmd_prelude(self, args: str) -> None:
        """Handle the prelude command."""
        try:
            load_prelude(self.evaluator)
        except (SexpSyntaxError, SexpEvaluationError) as e:
            print(f"Error: failed to load prelude: {e}", file=self.output)
            return
        print(f"Prelude loaded: {', '.join(prelude_names(self.evaluator))}", file=self.output)

    def _cmd_verbose(self, args: str) -> None:
        """Handle the verbose command.

        Args:
            args: Command arguments
        """
        if not args:
            # Toggle verbose mode
            self.verbose = not self.verbose
        elif args.lower() in ["on", "true", "yes", "1"]:
            self.verbose = True
        elif args.lower() in ["off", "false", "no", "0"]:
            self.verbose = False
        else:
            print(f"Invalid option: {args}", file=self.output)
            print("Usage: /verbose [on|off]", file=self.output)
            return

        print(f"Verbose mode: {'on' if self.verbose else 'off'}", file=self.output)

    def _cmd_exit(self, args: str) -> None:
        """Handle the exit command."""
        print("Exiting...", file=self.output)
        self.running = False
