"""
Implementation of the S-expression reader using the 'sexpdata' library.
Parses S-expression strings into Python Abstract Syntax Trees (ASTs).
"""

import logging
from typing import Any, List
from io import StringIO
from sexpdata import load, parse, ExpectNothing, ExpectClosingBracket

from sicp_eval.system.errors import SexpSyntaxError

logger = logging.getLogger(__name__)

# Keyword arguments shared by every sexpdata call: '#t'/'#f' become Python
# booleans, and 'nil' is left alone as an ordinary symbol.
_SEXPDATA_OPTIONS = {"nil": None, "true": "#t", "false": "#f"}


class SexpParser:
    """
    Parses S-expression strings into Python ASTs (nested lists/atoms).

    Uses the 'sexpdata' library for the underlying parsing mechanism.
    Numbers come back as int/float, '#t'/'#f' as bool, identifiers as
    sexpdata.Symbol, and combinations as Python lists.
    """

    def parse_string(self, sexp_string: str) -> Any:
        """
        Parses a single S-expression from a string.

        Args:
            sexp_string: The string containing the S-expression.

        Returns:
            The parsed S-expression as a Python AST (nested lists/atoms).

        Raises:
            SexpSyntaxError: If the input string has syntax errors, is empty,
                             is nested too deeply for the reader, or contains
                             more than one top-level expression.
            TypeError: If the input is not a string.
        """
        if not isinstance(sexp_string, str):
            raise TypeError("Input must be a string.")

        logger.debug(f"Attempting to parse S-expression string: '{sexp_string}'")
        stripped_string = sexp_string.strip()

        if not stripped_string:
            logger.error("S-expression parsing failed: Input string is empty or contains only whitespace.")
            raise SexpSyntaxError(
                "Input string is empty or contains only whitespace.",
                sexp_string
            )

        sio = StringIO(stripped_string)

        try:
            parsed_expression = load(sio, **_SEXPDATA_OPTIONS)
        except (ExpectClosingBracket, ExpectNothing, ValueError) as e:
            logger.error(f"S-expression syntax error: {e}")
            raise SexpSyntaxError("S-expression syntax error: Unbalanced parentheses or brackets.", sexp_string, error_details=str(e)) from e
        except AssertionError as e:
            # sexpdata asserts exactly one top-level expression
            logger.error(f"S-expression syntax error (Multiple Expressions): {e}")
            raise SexpSyntaxError("Multiple top-level S-expressions found. Use parse_program for a sequence of forms.", sexp_string, error_details=str(e)) from e
        except RecursionError as e:
            logger.error("S-expression syntax error: expression nested too deeply")
            raise SexpSyntaxError("Expression nested too deeply to parse.", sexp_string, error_details=str(e)) from e

        logger.debug("Successfully parsed AST: %r", parsed_expression)
        return parsed_expression

    def parse_program(self, program_text: str) -> List[Any]:
        """
        Parses every top-level S-expression in a program text, in order.

        Comments start with ';' and run to the end of the line. An empty
        program yields an empty list.

        Raises:
            SexpSyntaxError: If any form is malformed or nested too deeply.
            TypeError: If the input is not a string.
        """
        if not isinstance(program_text, str):
            raise TypeError("Input must be a string.")

        logger.debug(f"Parsing program of {len(program_text)} characters")
        try:
            forms = parse(program_text, **_SEXPDATA_OPTIONS)
        except (ExpectClosingBracket, ExpectNothing, ValueError) as e:
            logger.error(f"S-expression syntax error in program: {e}")
            raise SexpSyntaxError("S-expression syntax error: Unbalanced parentheses or brackets.", program_text, error_details=str(e)) from e
        except RecursionError as e:
            logger.error("S-expression syntax error in program: expression nested too deeply")
            raise SexpSyntaxError("Expression nested too deeply to parse.", program_text, error_details=str(e)) from e

        logger.debug(f"Parsed {len(forms)} top-level form(s)")
        return list(forms)
