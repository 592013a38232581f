"""
edrtest script front end.

This module provides:
- Lexer: Tokenizes script source line by line
- Parser: Builds statement ASTs, resolving calls against a Registry
- Errors: Located diagnostics shared by every phase

Usage:
    from edrtest.script import tokenize, parse
    from edrtest import default_registry

    tokens = tokenize('x = join "a" "b" "c"')
    statements = parse(tokens, default_registry())
"""

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
)

from .errors import (
    Diagnostic,
    ScriptError,
    LexerError,
    ParserError,
    ExecutionError,
    ActivityError,
    RegistrationError,
    get_source_line,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .ast import (
    AstNode,
    AstVisitor,
    Assignment,
    Call,
    StringLiteral,
    Identifier,
    Empty,
    format_ast,
)

from .parser import (
    Parser,
    parse,
)

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',

    # Errors
    'Diagnostic',
    'ScriptError',
    'LexerError',
    'ParserError',
    'ExecutionError',
    'ActivityError',
    'RegistrationError',
    'get_source_line',

    # Lexer
    'Lexer',
    'tokenize',

    # AST nodes
    'AstNode',
    'AstVisitor',
    'Assignment',
    'Call',
    'StringLiteral',
    'Identifier',
    'Empty',
    'format_ast',

    # Parser
    'Parser',
    'parse',
]
