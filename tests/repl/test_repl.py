"""Tests for the REPL Interface."""
import pytest
from unittest.mock import patch
from io import StringIO

from sicp_eval.repl.repl import Repl
from sicp_eval.sexp_evaluator.sexp_evaluator import SexpEvaluator


@pytest.fixture
def output():
    return StringIO()

@pytest.fixture
def repl_instance(evaluator, output):
    """Fixture for REPL instance writing to a StringIO."""
    return Repl(evaluator, output_stream=output)


def lines(output):
    return output.getvalue().splitlines()


class TestRepl:
    """Tests for the REPL class."""

    def test_init(self, evaluator):
        repl = Repl(evaluator)
        assert repl.evaluator is evaluator
        assert repl.verbose is False
        for cmd in ["/help", "/reset", "/env", "/prelude", "/verbose", "/exit"]:
            assert cmd in repl.commands

    def test_process_input_command(self, repl_instance):
        with patch.object(repl_instance, '_handle_command') as mock_handle_command:
            repl_instance._process_input("/help")
            mock_handle_command.assert_called_once_with("/help")

    def test_process_input_program(self, repl_instance):
        with patch.object(repl_instance, '_handle_program') as mock_handle_program:
            repl_instance._process_input("  (+ 1 2)  ")
            mock_handle_program.assert_called_once_with("(+ 1 2)")

    def test_process_input_empty(self, repl_instance, output):
        repl_instance._process_input("   ")
        assert output.getvalue() == ""

    def test_evaluates_and_prints_value(self, repl_instance, output):
        repl_instance._process_input("(+ 137 349)")
        assert lines(output) == ["486"]

    def test_prints_each_form_on_a_line(self, repl_instance, output):
        repl_instance._process_input("(define (square x) (* x x)) (square 21) (> 1 2)")
        assert lines(output) == ["square", "441", "#f"]

    def test_definitions_persist_between_inputs(self, repl_instance, output):
        repl_instance._process_input("(define size 2)")
        repl_instance._process_input("(* 5 size)")
        assert lines(output)[-1] == "10"

    def test_prints_float_in_scheme_notation(self, repl_instance, output):
        repl_instance._process_input("(* 1.5 2)")
        assert lines(output) == ["3."]

    def test_error_is_reported_and_session_continues(self, repl_instance, output):
        repl_instance._process_input("(+ 1 missing)")
        repl_instance._process_input("(+ 1 1)")
        out = lines(output)
        assert out[0] == "Error: Unbound symbol: Name 'missing' is not defined."
        assert out[-1] == "2"

    def test_syntax_error_is_reported(self, repl_instance, output):
        repl_instance._process_input("(if 1 2)")
        assert lines(output)[0].startswith("Error: 'if' requires 3 arguments")

    def test_unknown_command(self, repl_instance, output):
        repl_instance._process_input("/bogus")
        assert "Unknown command: /bogus" in output.getvalue()

    def test_cmd_help(self, repl_instance, output):
        repl_instance._cmd_help("")
        text = output.getvalue()
        assert "Available commands:" in text
        assert "/prelude" in text
        assert "/exit" in text

    def test_cmd_reset(self, repl_instance, output):
        repl_instance._process_input("(define x 1)")
        repl_instance._process_input("/reset")
        repl_instance._process_input("x")
        out = lines(output)
        assert "Environment reset" in out
        assert out[-1].startswith("Error: Unbound symbol")

    def test_cmd_env(self, repl_instance, output):
        repl_instance._process_input("/env")
        assert lines(output) == ["No definitions"]
        repl_instance._process_input("(define (square x) (* x x)) (define size 2)")
        repl_instance._process_input("/env")
        out = lines(output)
        assert "  size = 2" in out
        assert "  square = #<procedure square>" in out
        assert not any(line.startswith("  +") for line in out)

    def test_cmd_prelude(self, repl_instance, output):
        repl_instance._process_input("/prelude")
        repl_instance._process_input("(sum-of-squares 3 4)")
        out = lines(output)
        assert out[0].startswith("Prelude loaded: sqrt-tolerance, square, sum-of-squares")
        assert "good-enough?" in out[0]
        assert out[1] == "25"

    def test_overflow_is_reported_and_session_continues(self, repl_instance, output):
        big = "1" + "0" * 400
        repl_instance._process_input(f"(/ {big} 3)")
        repl_instance._process_input("(* 1.5 " + big + ")")
        repl_instance._process_input("(+ 1 1)")
        out = lines(output)
        assert out[0] == "Error: Numeric overflow in '/'"
        assert out[1] == "Error: Numeric overflow in '*'"
        assert out[2] == "2"

    def test_deeply_nested_input_is_reported(self, repl_instance, output):
        repl_instance._process_input("(+ 1 " * 3000 + "0" + ")" * 3000)
        repl_instance._process_input("(+ 1 1)")
        out = lines(output)
        assert out[0] == "Error: Expression nested too deeply to parse."
        assert out[-1] == "2"

    def test_cmd_verbose_toggle(self, repl_instance, output):
        repl_instance._cmd_verbose("")
        assert repl_instance.verbose is True
        repl_instance._cmd_verbose("off")
        assert repl_instance.verbose is False
        repl_instance._cmd_verbose("on")
        assert repl_instance.verbose is True
        assert "Verbose mode: on" in output.getvalue()

    def test_cmd_verbose_invalid(self, repl_instance, output):
        repl_instance._cmd_verbose("maybe")
        assert "Invalid option: maybe" in output.getvalue()
        assert repl_instance.verbose is False

    def test_verbose_echoes_expression(self, repl_instance, output):
        repl_instance.verbose = True
        repl_instance._process_input("(+ 1 2)")
        assert lines(output) == [";; (+ 1 2)", "3"]

    def test_start_runs_until_exit(self, evaluator, output):
        inputs = iter(["(define x 3)", "(* x x)", "/exit", "(never evaluated)"])
        repl = Repl(evaluator, output_stream=output, input_func=lambda prompt: next(inputs))
        repl.start()
        out = lines(output)
        assert "x" in out
        assert "9" in out
        assert out[-1] == "Exiting..."
        assert repl.running is False

    def test_start_stops_on_eof(self, output):
        def raise_eof(prompt):
            raise EOFError
        repl = Repl(SexpEvaluator(), output_stream=output, input_func=raise_eof)
        repl.start()
        assert "Exiting..." in output.getvalue()
