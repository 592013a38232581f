"""
Abstract Syntax Tree (AST) node definitions for edrtest scripts.

A program is a flat list of statements. Statements are either an
``Assignment`` or a bare ``Call``; expressions are calls, string literals
and identifiers. There is no nesting beyond a single call with flat
arguments.
"""

from dataclasses import dataclass, field
from typing import Any, List

from .tokens import SourceLocation
from ..registry import RegistryEntry


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode:
    """Base class for all AST nodes."""
    location: SourceLocation  # Source location for error reporting

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor:
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class StringLiteral(AstNode):
    """A string literal ("text" or :word)."""
    value: str


@dataclass
class Identifier(AstNode):
    """A variable reference."""
    name: str


@dataclass
class Call(AstNode):
    """A call to a registered function.

    The target is resolved against the registry while parsing, so a
    ``Call`` always refers to an existing entry with a valid argument count.
    """
    name: str
    target: RegistryEntry
    arguments: List[AstNode] = field(default_factory=list)


@dataclass
class Empty(AstNode):
    """Marks the end of an argument list; never executed."""
    pass


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Assignment(AstNode):
    """Bind the value of one expression to a variable (name = value)."""
    name: str
    value: AstNode


# =============================================================================
# Visitor Helpers
# =============================================================================

class PrintVisitor(AstVisitor):
    """Render the AST structure as indented lines."""

    def __init__(self, indent: int = 0):
        self.indent = indent
        self.lines: List[str] = []

    def _emit(self, text: str) -> None:
        self.lines.append("  " * self.indent + text)

    def _nested(self, node: AstNode) -> None:
        child = PrintVisitor(self.indent + 1)
        node.accept(child)
        self.lines.extend(child.lines)

    def visit_Assignment(self, node: Assignment) -> None:
        self._emit(f"Assignment {node.name} @ {node.location}")
        self._nested(node.value)

    def visit_Call(self, node: Call) -> None:
        self._emit(f"Call {node.name} @ {node.location}")
        for arg in node.arguments:
            self._nested(arg)

    def visit_StringLiteral(self, node: StringLiteral) -> None:
        self._emit(f"StringLiteral {node.value!r}")

    def visit_Identifier(self, node: Identifier) -> None:
        self._emit(f"Identifier {node.name}")


def format_ast(statements: List[AstNode]) -> str:
    """Render a parsed program for debugging."""
    visitor = PrintVisitor()
    for stmt in statements:
        stmt.accept(visitor)
    return "\n".join(visitor.lines)
