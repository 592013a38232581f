"""
Lexer for edrtest scripts.

Converts source text into a flat stream of located tokens, one physical
line at a time. Supports:
- Identifiers made of ASCII letters, '_' and '.' (e.g. file.create)
- Double-quoted string literals, taken verbatim (no escape sequences)
- ':word' shorthand, which produces a string literal "word"
- '=' for assignment
- '#' comments running to the end of the line

Every physical line ends with an EOL token, even when it produced no
other tokens, and the stream ends with a single EOF token.
"""

from typing import BinaryIO, Iterator, List, Optional, TextIO, Union

from .tokens import (
    Token, TokenType, SourceLocation, IDENTIFIER_START, IDENTIFIER_CHARS,
)
from .errors import error_invalid_character, error_unterminated_string


Source = Union[str, bytes, TextIO, BinaryIO]


def _split_lines(text: str) -> Iterator[str]:
    """Split on '\\n' only; a trailing newline does not start a new line."""
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        if end < 0:
            yield text[start:]
            return
        yield text[start:end]
        start = end + 1


class Lexer:
    """
    Tokenizer for edrtest scripts.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(open("script.edr"))
        for token in lexer:
            process(token)

    Streaming yields tokens lazily line by line; a lexical error is raised
    when the offending line is reached.
    """

    def __init__(self, source: Source, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.line = 0           # Current line (0-indexed)

    def _location(self, column: int) -> SourceLocation:
        return SourceLocation(self.line, column, self.filename)

    def _physical_lines(self) -> Iterator[str]:
        """Yield each physical line without its terminator."""
        source = self.source
        if isinstance(source, bytes):
            source = source.decode("utf-8")
        if isinstance(source, str):
            lines = _split_lines(source)
        else:
            lines = iter(source)

        for raw in lines:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            if raw.endswith("\n"):
                raw = raw[:-1]
            if raw.endswith("\r"):
                raw = raw[:-1]
            yield raw

    @staticmethod
    def _scan_identifier(text: str, pos: int) -> int:
        """Return the end of the identifier-shaped run starting at ``pos``."""
        while pos < len(text) and text[pos] in IDENTIFIER_CHARS:
            pos += 1
        return pos

    def _scan_line(self, text: str) -> Iterator[Token]:
        """Scan one physical line, ending with its EOL token."""
        pos = 0
        while pos < len(text):
            ch = text[pos]
            start = self._location(pos)

            if ch == " " or ch == "\t":
                pos += 1
            elif ch == "#":
                # Comment runs to the end of the line
                break
            elif ch == '"':
                end = text.find('"', pos + 1)
                if end < 0:
                    raise error_unterminated_string(start)
                yield Token(TokenType.STRING_LITERAL, text[pos + 1:end], start)
                pos = end + 1
            elif ch == ":":
                end = self._scan_identifier(text, pos + 1)
                yield Token(TokenType.STRING_LITERAL, text[pos + 1:end], start)
                pos = end
            elif ch in IDENTIFIER_START:
                end = self._scan_identifier(text, pos)
                yield Token(TokenType.IDENTIFIER, text[pos:end], start)
                pos = end
            elif ch == "=":
                yield Token(TokenType.EQUALS, None, start)
                pos += 1
            else:
                raise error_invalid_character(start)

        yield Token(TokenType.EOL, None, self._location(len(text)))

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        self.line = 0
        for text in self._physical_lines():
            yield from self._scan_line(text)
            self.line += 1
        yield Token(TokenType.EOF, None, self._location(0))

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        return list(self)


def tokenize(source: Source, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: Script text, UTF-8 bytes, or an open file
        filename: Optional filename for error messages

    Returns:
        List of tokens

    Raises:
        LexerError: If tokenization fails
    """
    return Lexer(source, filename).tokenize()
