"""
Tree-walking interpreter for edrtest scripts.

Executes statements strictly in program order against a fresh scope. The
first failing statement aborts the run; side effects already performed by
earlier statements are not rolled back.
"""

from typing import List

from .context import Scope
from ..script.ast import AstNode, Assignment, Call, StringLiteral, Identifier
from ..script.errors import (
    ActivityError,
    error_activity_failed,
    error_undefined_variable,
)


class Interpreter:
    """
    Tree-walking interpreter.

    Evaluates AST nodes by dispatching on node type. Call targets were
    resolved by the parser, so the interpreter never looks up functions.
    """

    def __init__(self):
        self.scope = Scope()

    def interpret(self, statements: List[AstNode]) -> Scope:
        """
        Execute a program.

        Returns:
            The scope as left by the last statement

        Raises:
            ExecutionError: On the first failing statement
        """
        self.scope = Scope()
        for stmt in statements:
            self._execute_statement(stmt)
        return self.scope

    def _execute_statement(self, stmt: AstNode) -> None:
        """Execute a statement."""
        if isinstance(stmt, Assignment):
            self.scope.set(stmt.name, self._evaluate(stmt.value))
        else:
            self._evaluate(stmt)

    def _evaluate(self, expr: AstNode) -> str:
        """Evaluate an expression to its string value."""
        if isinstance(expr, StringLiteral):
            return expr.value
        elif isinstance(expr, Identifier):
            return self._eval_identifier(expr)
        elif isinstance(expr, Call):
            return self._eval_call(expr)
        else:
            raise TypeError(f"Cannot evaluate {type(expr).__name__}")

    def _eval_identifier(self, ident: Identifier) -> str:
        """Evaluate an identifier (variable lookup)."""
        value = self.scope.get(ident.name)
        if value is None:
            raise error_undefined_variable(ident.location)
        return value

    def _eval_call(self, call: Call) -> str:
        """Evaluate arguments left to right, then invoke the target."""
        args = [self._evaluate(arg) for arg in call.arguments]
        try:
            return call.target.invoke(args)
        except ActivityError as e:
            raise error_activity_failed(str(e), call.location) from e


def interpret(statements: List[AstNode]) -> Scope:
    """
    Execute parsed statements with a fresh interpreter.

    Raises:
        ExecutionError: On the first failing statement
    """
    interpreter = Interpreter()
    return interpreter.interpret(statements)


def execute(source, registry=None, logger=None, filename=None) -> Scope:
    """
    High-level API to lex, parse and run a script in one call:

        from edrtest import execute

        execute('''
            greeting = join "hello " :world
            print greeting
        ''')

    Args:
        source: Script text, UTF-8 bytes, or an open file
        registry: Registry to resolve calls against; defaults to all
            native activities bound to ``logger``
        logger: Activity logger for the default registry
        filename: Optional filename for error locations

    Returns:
        The final variable scope

    Raises:
        ScriptError: The first lexer, parser or execution error
    """
    from ..activity import default_registry
    from ..script.lexer import tokenize
    from ..script.parser import parse

    if registry is None:
        registry = default_registry(logger)

    tokens = tokenize(source, filename)
    statements = parse(tokens, registry)
    return Interpreter().interpret(statements)
