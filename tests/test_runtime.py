"""
Tests for the edrtest interpreter and the execute() entry point.
"""

import pytest
from edrtest import execute, default_registry
from edrtest.registry import Registry
from edrtest.runtime import Interpreter, Scope, interpret
from edrtest.script import (
    tokenize, parse, ActivityError, ExecutionError, ParserError, SourceLocation,
    get_source_line,
)


class Recorder:
    """Registry functions that record their calls."""

    def __init__(self):
        self.calls = []

    def rec(self, args):
        self.calls.append(list(args))
        return "rec:" + ",".join(args)

    def fail(self, args):
        raise ActivityError("boom")

    def registry(self):
        registry = Registry()
        registry.register("rec", ["*args"], self.rec)
        registry.register("fail", ["*args"], self.fail)
        return registry


class TestScope:
    """Test variable bindings."""

    def test_get_missing(self):
        assert Scope().get("x") is None

    def test_set_and_overwrite(self):
        scope = Scope()
        scope.set("x", "1")
        scope.set("x", "2")
        assert scope.get("x") == "2"
        assert scope.contains("x")
        assert not scope.contains("y")


class TestInterpreter:
    """Test statement execution."""

    def setup_method(self):
        self.recorder = Recorder()
        self.registry = self.recorder.registry()

    def run(self, source):
        return execute(source, self.registry)

    def test_empty_program(self):
        scope = self.run("")
        assert scope.variables == {}

    def test_assignment_round_trip(self):
        """A variable read returns exactly the assigned value."""
        self.run('name = "a value with spaces"\nrec name')
        assert self.recorder.calls == [["a value with spaces"]]

    def test_reassignment(self):
        scope = self.run('x = "1"\nx = "2"\nrec x')
        assert scope.get("x") == "2"
        assert self.recorder.calls == [["2"]]

    def test_assign_call_result(self):
        scope = self.run('x = rec "a" "b"')
        assert scope.get("x") == "rec:a,b"

    def test_arguments_in_order(self):
        self.run('b = "B"\nrec "a" b :c')
        assert self.recorder.calls == [["a", "B", "c"]]

    def test_undefined_variable(self):
        with pytest.raises(ExecutionError) as exc_info:
            self.run('rec "a" missing "c"')
        assert exc_info.value.message == "undefined variable"
        assert exc_info.value.location == SourceLocation(0, 8)
        assert exc_info.value.diagnostic.code == "E401"

    def test_undefined_variable_skips_call(self):
        """The call is not invoked when an argument fails."""
        with pytest.raises(ExecutionError):
            self.run("rec missing")
        assert self.recorder.calls == []

    def test_use_before_assignment(self):
        """Only earlier statements are visible."""
        with pytest.raises(ExecutionError):
            self.run('rec x\nx = "1"')

    def test_activity_error_located_at_call(self):
        with pytest.raises(ExecutionError) as exc_info:
            self.run('rec "1"\nx = fail')
        err = exc_info.value
        assert err.message == "boom"
        assert err.location == SourceLocation(1, 4)
        assert err.diagnostic.code == "E402"
        assert isinstance(err.__cause__, ActivityError)

    def test_failure_aborts_remaining_statements(self):
        """Earlier side effects stay; later statements do not run."""
        with pytest.raises(ExecutionError):
            self.run('rec "1"\nfail\nrec "2"')
        assert self.recorder.calls == [["1"]]

    def test_parse_error_prevents_execution(self):
        """Nothing runs if any line fails to parse."""
        with pytest.raises(ParserError):
            self.run('rec "1"\nnope')
        assert self.recorder.calls == []

    def test_fresh_scope_per_run(self):
        interpreter = Interpreter()
        interpreter.interpret(parse(tokenize('x = "1"'), self.registry))
        with pytest.raises(ExecutionError):
            interpreter.interpret(parse(tokenize("rec x"), self.registry))

    def test_interpret_function(self):
        scope = interpret(parse(tokenize('x = "1"'), self.registry))
        assert scope.get("x") == "1"


class TestExecute:
    """Test scripts against the default registry."""

    def test_print_variable(self, capsys):
        execute('greeting = "hi"\nprint greeting')
        assert capsys.readouterr().out == "hi\n"

    def test_join(self):
        scope = execute('x = join "a" "b" "c"')
        assert scope.get("x") == "abc"

    def test_join_nothing(self):
        assert execute("x = join").get("x") == ""

    def test_comment_and_blank_lines(self, capsys):
        execute('# comment\n\nprint "ok"')
        assert capsys.readouterr().out == "ok\n"

    def test_print_returns_ok(self, capsys):
        scope = execute('r = print "x"')
        assert scope.get("r") == "ok"

    def test_explicit_registry(self, capsys):
        execute('print :word', default_registry())
        assert capsys.readouterr().out == "word\n"

    def test_filename_in_errors(self):
        with pytest.raises(ExecutionError) as exc_info:
            execute("print nothing", filename="probe.edr")
        assert str(exc_info.value) == "probe.edr:1:7: error[E401]: undefined variable"


class TestRender:
    """Test error display with source context."""

    def test_inline(self):
        with pytest.raises(ParserError) as exc_info:
            execute("print")
        assert exc_info.value.render("print", inline=True).splitlines() == [
            "error: missing arguments, expected 1",
            "<cmd>:1:1 | print",
            " " * len("<cmd>:1:1 | ") + "^",
        ]

    def test_file(self, tmp_path):
        script = tmp_path / "probe.edr"
        script.write_text('print "a"\nx = nope\n')
        with pytest.raises(ParserError) as exc_info:
            with open(script, encoding="utf-8") as fh:
                execute(fh)
        prefix = f"{script}:2:5 | "
        assert exc_info.value.render(str(script), inline=False).splitlines() == [
            "error: function not found",
            prefix + "x = nope",
            " " * (len(prefix) + 4) + "^",
        ]

    def test_source_line_splits_on_newline_only(self, tmp_path):
        script = tmp_path / "probe.edr"
        script.write_bytes(b'x = "a\rb"\r\nnope\n')
        assert get_source_line(str(script), 0) == 'x = "a\rb"'
        assert get_source_line(str(script), 1) == "nope"
        assert get_source_line(str(script), 2) is None

    def test_opened_binary_file(self, tmp_path):
        script = tmp_path / "probe.edr"
        script.write_bytes(b'x = "a\rb"\ny = join x\n')
        with open(script, "rb") as fh:
            scope = execute(fh)
        assert scope.get("y") == "a\rb"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExecutionError) as exc_info:
            execute("print x")
        lines = exc_info.value.render(str(tmp_path / "gone.edr"), inline=False).splitlines()
        assert lines[1].endswith(" | ???")
