"""
Parser for edrtest scripts.

Converts a token stream into a list of statement AST nodes. The grammar is
line-oriented, one statement per line:

    program   := (statement EOL)* EOF
    statement := IDENTIFIER '=' rhs
               | IDENTIFIER arg*
    rhs       := IDENTIFIER arg*        (call)
               | value
    arg       := IDENTIFIER | STRING_LITERAL
    value     := IDENTIFIER | STRING_LITERAL

Blank and comment-only lines contribute only an EOL token and are skipped.
The first error aborts parsing; there is no recovery.
"""

from typing import List

from .tokens import Token, TokenType, SourceLocation
from .ast import AstNode, Assignment, Call, StringLiteral, Identifier, Empty
from .errors import (
    error_unexpected_token,
    error_unexpected_eof,
    error_expected_eol,
    error_expected_value,
)
from ..registry import Registry


class Parser:
    """
    Single-cursor parser with one token of lookahead.

    Usage:
        parser = Parser(tokens, registry)
        statements = parser.parse_program()

    Every call site is resolved against ``registry`` as soon as its
    argument list is known.
    """

    def __init__(self, tokens: List[Token], registry: Registry):
        self.tokens = tokens
        self.registry = registry
        self.pos = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            raise error_unexpected_eof(self.tokens[-1].location)
        return self.tokens[self.pos]

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        self.pos += 1
        return token

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_value(self) -> AstNode:
        """Parse an identifier or string literal.

        Any other token yields ``Empty`` without being consumed.
        """
        token = self._current()
        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(location=token.location, name=token.value)
        if token.type == TokenType.STRING_LITERAL:
            self._advance()
            return StringLiteral(location=token.location, value=token.value)
        return Empty(location=token.location)

    def _parse_arguments(self) -> List[AstNode]:
        """Parse values until one fails to look like a value."""
        args = []
        while True:
            value = self._parse_value()
            if isinstance(value, Empty):
                break
            args.append(value)
        return args

    def _parse_call(self, name: str, location: SourceLocation) -> Call:
        """Parse the arguments following a function name and resolve it."""
        args = self._parse_arguments()
        target = self.registry.resolve(location, name, len(args))
        return Call(location=location, name=name, target=target, arguments=args)

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> AstNode:
        """Parse an assignment or a call statement."""
        token = self._current()
        if token.type != TokenType.IDENTIFIER:
            raise error_unexpected_token(str(token), token.location)
        self._advance()

        if not self._check(TokenType.EQUALS):
            return self._parse_call(token.value, token.location)
        self._advance()  # consume '='

        rhs = self._current()
        if rhs.type == TokenType.IDENTIFIER:
            self._advance()
            value = self._parse_call(rhs.value, rhs.location)
        else:
            value = self._parse_value()
            if isinstance(value, Empty):
                raise error_expected_value(str(rhs), rhs.location)

        return Assignment(location=token.location, name=token.value, value=value)

    def parse_program(self) -> List[AstNode]:
        """Parse a complete program."""
        statements: List[AstNode] = []
        if not self.tokens:
            return statements

        while True:
            token = self._current()
            if token.type == TokenType.EOF:
                break
            if token.type == TokenType.EOL:
                self._advance()
                continue

            statements.append(self._parse_statement())

            token = self._current()
            if token.type != TokenType.EOL:
                raise error_expected_eol(str(token), token.location)
            self._advance()

        return statements


def parse(tokens: List[Token], registry: Registry) -> List[AstNode]:
    """
    Convenience function to parse tokens into a list of statements.

    Args:
        tokens: List of tokens from the lexer
        registry: Registry used to resolve call targets

    Returns:
        Parsed statements in program order

    Raises:
        ParserError: If parsing or call resolution fails
    """
    return Parser(tokens, registry).parse_program()
