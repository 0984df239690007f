"""
Command-line entry point.

    sicp-eval FILE        evaluate a program file
    sicp-eval -e EXPR     evaluate program text given on the command line
    sicp-eval             start the interactive REPL
"""
import argparse
import json
import sys
from typing import List, Optional

from pydantic import ValidationError

from sicp_eval.config.logging_config import get_logger, setup_logging
from sicp_eval.repl.repl import Repl
from sicp_eval.sexp_evaluator.prelude import load_prelude
from sicp_eval.sexp_evaluator.sexp_ast import Definition
from sicp_eval.sexp_evaluator.sexp_evaluator import SexpEvaluator
from sicp_eval.sexp_evaluator.sexp_printer import format_value
from sicp_eval.system.errors import SexpEvaluationError, SexpSyntaxError
from sicp_eval.system.models import EvaluatorConfig

logger = get_logger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command-line arguments."""
    parser = argparse.ArgumentParser(description="Substitution-model evaluator for the section 1.1 subset of Scheme")

    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument("file", nargs="?", help="Program file to evaluate. Omit to start the REPL.")
    source_group.add_argument("-e", "--expr", help="Program text to evaluate.")

    parser.add_argument("--prelude", action="store_true", help="Load the textbook definitions (square, sqrt, abs, ...) first.")
    parser.add_argument("--config", help="JSON file with evaluator settings.")
    parser.add_argument("--tolerance", type=float, help="Override sqrt_tolerance used by the prelude's good-enough?.")
    parser.add_argument("--sqrt-policy", choices=["absolute", "relative"], help="Override the sqrt termination test.")
    parser.add_argument("--if-mode", choices=["special", "procedure"], help="Override how 'if' evaluates its operands.")
    parser.add_argument("--max-depth", type=int, help="Override the maximum nesting of procedure applications.")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Set the logging level (default: WARNING).")
    parser.add_argument("--log-file", help="Write logs to this file instead of stderr.")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> EvaluatorConfig:
    """
    Merges the optional config file with command-line overrides.

    Raises:
        pydantic.ValidationError: If a resulting value is invalid.
    """
    data = {}
    if args.config:
        data = EvaluatorConfig.from_json_file(args.config).model_dump()

    overrides = {
        "sqrt_tolerance": args.tolerance,
        "sqrt_policy": args.sqrt_policy,
        "if_mode": args.if_mode,
        "max_depth": args.max_depth,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return EvaluatorConfig.model_validate(data)


def run_program(evaluator: SexpEvaluator, program_text: str, output=None) -> int:
    """
    Evaluates program_text form by form, printing the value of every
    non-definition form. Stops at the first error.

    Returns:
        Process exit status: 0 on success, 1 on a syntax or evaluation error.
    """
    output = output or sys.stdout
    try:
        for expression, value in evaluator.iter_program(program_text):
            if not isinstance(expression, Definition):
                print(format_value(value), file=output)
    except (SexpSyntaxError, SexpEvaluationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        config = build_config(args)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2

    evaluator = SexpEvaluator(config)
    if args.prelude:
        load_prelude(evaluator)

    if args.expr is not None:
        return run_program(evaluator, args.expr)

    if args.file:
        try:
            with open(args.file, encoding="utf-8") as fh:
                program_text = fh.read()
        except OSError as e:
            print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
            return 2
        logger.info(f"Evaluating program file {args.file}")
        return run_program(evaluator, program_text)

    Repl(evaluator).start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
