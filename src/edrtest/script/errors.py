"""
Script exceptions and error reporting.

Every failure a script can provoke is a ``ScriptError`` carrying a
``Diagnostic`` with a code, a message and a source location.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors (grammar and call resolution)
- E4xx: Runtime errors
"""

from dataclasses import dataclass
from typing import Optional

from .tokens import SourceLocation


INLINE_SOURCE_NAME = "<cmd>"


@dataclass
class Diagnostic:
    """A single located error message."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    location: SourceLocation

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "location": {
                "line": self.location.line,
                "column": self.location.column,
            },
        }


def get_source_line(path: str, line: int) -> Optional[str]:
    """Return physical line ``line`` (0-indexed) of the file at ``path``.

    Lines end at ``\\n``; one ``\\r`` before it is dropped, as the lexer does.
    """
    with open(path, "rb") as fh:
        for i, raw in enumerate(fh):
            if i == line:
                if raw.endswith(b"\n"):
                    raw = raw[:-1]
                if raw.endswith(b"\r"):
                    raw = raw[:-1]
                return raw.decode("utf-8", errors="replace")
    return None


class ScriptError(Exception):
    """Base exception for script errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return f"{self.location}: error[{self.diagnostic.code}]: {self.message}"

    def render(self, source: str, inline: bool) -> str:
        """
        Format the error with the offending source line and a caret.

        Args:
            source: Path of the script file, or the script text itself
            inline: True if ``source`` is the script text

        Returns:
            Three lines: the message, the located source line, and a caret
            under the error column.
        """
        loc = self.location
        if inline:
            lines = source.split("\n")
            path = INLINE_SOURCE_NAME
            line = lines[loc.line] if loc.line < len(lines) else None
            if line is not None and line.endswith("\r"):
                line = line[:-1]
        else:
            path = source
            try:
                line = get_source_line(source, loc.line)
            except OSError:
                line = None

        prefix = f"{path}:{loc.line + 1}:{loc.column + 1} | "
        return "\n".join([
            f"error: {self.message}",
            f"{prefix}{line if line is not None else '???'}",
            " " * (len(prefix) + loc.column) + "^",
        ])


class LexerError(ScriptError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(ScriptError):
    """Error during parsing or call resolution (E1xx)."""
    pass


class ExecutionError(ScriptError):
    """Error while interpreting a script (E4xx)."""
    pass


class ActivityError(Exception):
    """Raised by a native activity to report failure.

    The interpreter re-raises it as an ``ExecutionError`` located at the
    call that invoked the activity.
    """
    pass


class RegistrationError(Exception):
    """Invalid function registration.

    Raised for mistakes in the embedding program, never for script input;
    not a ``ScriptError``.
    """
    pass


# --- Lexer error codes ---

def error_invalid_character(location: SourceLocation) -> LexerError:
    """E001: Character that cannot start any token."""
    return LexerError(Diagnostic("E001", "invalid character", location))


def error_unterminated_string(location: SourceLocation) -> LexerError:
    """E002: String literal not closed before end of line."""
    return LexerError(Diagnostic("E002", "missing closing quotation mark", location))


# --- Parser error codes ---

def error_unexpected_token(found: str, location: SourceLocation) -> ParserError:
    """E101: Token that cannot begin a statement."""
    return ParserError(Diagnostic(
        "E101", f"unexpected token {found} in statement", location
    ))


def error_unexpected_eof(location: SourceLocation) -> ParserError:
    """E102: Token stream ended without an EOF token."""
    return ParserError(Diagnostic("E102", "unexpected end of input", location))


def error_expected_eol(found: str, location: SourceLocation) -> ParserError:
    """E103: Trailing tokens after a complete statement."""
    return ParserError(Diagnostic(
        "E103", f"expected end of line, got {found}", location
    ))


def error_expected_value(found: str, location: SourceLocation) -> ParserError:
    """E104: Assignment without a right-hand side."""
    return ParserError(Diagnostic(
        "E104", f"expected value, got {found}", location
    ))


def error_function_not_found(location: SourceLocation) -> ParserError:
    """E110: Call to a name that is not registered."""
    return ParserError(Diagnostic("E110", "function not found", location))


def error_missing_arguments(expected: int, location: SourceLocation) -> ParserError:
    """E111: Fewer arguments than the function requires."""
    return ParserError(Diagnostic(
        "E111", f"missing arguments, expected {expected}", location
    ))


def error_too_many_arguments(expected: int, location: SourceLocation) -> ParserError:
    """E112: More arguments than a non-variadic function accepts."""
    return ParserError(Diagnostic(
        "E112", f"too many arguments, expected {expected}", location
    ))


# --- Runtime error codes ---

def error_undefined_variable(location: SourceLocation) -> ExecutionError:
    """E401: Read of a variable that was never assigned."""
    return ExecutionError(Diagnostic("E401", "undefined variable", location))


def error_activity_failed(message: str, location: SourceLocation) -> ExecutionError:
    """E402: A native activity reported failure."""
    return ExecutionError(Diagnostic("E402", message, location))
