"""
Tests for the function registry.
"""

import pytest
from edrtest.registry import Registry
from edrtest.script import ParserError, RegistrationError, ScriptError, SourceLocation


def noop(args):
    return "ok"


class TestRegistration:
    """Test arity derivation and registration rules."""

    def test_fixed_arity(self):
        entry = Registry().register("file.create", ["type", "path"], noop)
        assert entry.min_arity == 2
        assert entry.variadic is False

    def test_variadic_arity(self):
        """The marked parameter does not count toward the minimum."""
        entry = Registry().register("process.spawn", ["cmd", "*args"], noop)
        assert entry.min_arity == 1
        assert entry.variadic is True

    def test_no_params(self):
        entry = Registry().register("tick", [], noop)
        assert entry.min_arity == 0
        assert entry.variadic is False

    def test_multiple_variadic_rejected(self):
        with pytest.raises(RegistrationError):
            Registry().register("bad", ["*a", "*b"], noop)

    def test_registration_error_is_not_script_error(self):
        """Registration mistakes are programming errors, not script errors."""
        assert not issubclass(RegistrationError, ScriptError)

    def test_duplicate_name_rejected(self):
        registry = Registry()
        registry.register("join", ["*args"], noop)
        with pytest.raises(RegistrationError):
            registry.register("join", ["a"], noop)
        assert len(registry) == 1

    def test_lookup(self):
        registry = Registry()
        entry = registry.register("join", ["*args"], noop)
        assert "join" in registry
        assert registry.get_function("join") is entry
        assert registry.get_function("nope") is None

    def test_functions_in_registration_order(self):
        registry = Registry()
        for name in ["b", "a", "c"]:
            registry.register(name, [], noop)
        assert [e.name for e in registry.functions()] == ["b", "a", "c"]

    def test_usage(self):
        entry = Registry().register("process.spawn", ["cmd", "*args"], noop)
        assert entry.usage == "<cmd> [args, ...]"

    def test_invoke(self):
        entry = Registry().register("join", ["*args"], "-".join)
        assert entry.invoke(["a", "b"]) == "a-b"


class TestResolve:
    """Test call-site resolution."""

    def setup_method(self):
        self.registry = Registry()
        self.registry.register("print", ["message"], noop)
        self.registry.register("join", ["*args"], noop)
        self.loc = SourceLocation(3, 7)

    def test_resolves(self):
        entry = self.registry.resolve(self.loc, "print", 1)
        assert entry.name == "print"

    def test_not_found_keeps_location(self):
        with pytest.raises(ParserError) as exc_info:
            self.registry.resolve(self.loc, "missing", 0)
        assert exc_info.value.message == "function not found"
        assert exc_info.value.location == self.loc

    def test_missing(self):
        with pytest.raises(ParserError) as exc_info:
            self.registry.resolve(self.loc, "print", 0)
        assert exc_info.value.message == "missing arguments, expected 1"

    def test_too_many(self):
        with pytest.raises(ParserError) as exc_info:
            self.registry.resolve(self.loc, "print", 2)
        assert exc_info.value.message == "too many arguments, expected 1"

    def test_variadic_any_count(self):
        for count in (0, 1, 10):
            assert self.registry.resolve(self.loc, "join", count).name == "join"

    def test_params_kept_as_tuple(self):
        entry = Registry().register("process.spawn", ["cmd", "*args"], noop)
        assert entry.params == ("cmd", "*args")
