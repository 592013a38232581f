"""
Token types for the edrtest script lexer.

Token categories follow the diagnostic code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the script lexer."""

    IDENTIFIER = auto()         # file.create, greeting, _tmp
    STRING_LITERAL = auto()     # "hello", :shorthand
    EQUALS = auto()             # =
    EOL = auto()                # end of a physical line
    EOF = auto()                # end of input


# Characters allowed inside identifiers and ':' shorthand literals
IDENTIFIER_START = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
)
IDENTIFIER_CHARS = IDENTIFIER_START | {"."}


@dataclass(frozen=True)
class SourceLocation:
    """A position in source text.

    Both ``line`` and ``column`` are 0-indexed; ``str()`` renders them
    1-indexed for humans.
    """
    line: int
    column: int
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line + 1}:{self.column + 1}"
        return f"{self.line + 1}:{self.column + 1}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Optional[str]        # text for IDENTIFIER / STRING_LITERAL
    location: SourceLocation

    def __str__(self) -> str:
        if self.type in (TokenType.IDENTIFIER, TokenType.STRING_LITERAL):
            return f"{self.type.name}({self.value!r})"
        return self.type.name
