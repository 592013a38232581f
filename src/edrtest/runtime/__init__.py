"""
Script runtime - tree-walking interpreter for script execution.

This module provides:
- Interpreter: Executes parsed statements in program order
- Scope: Flat variable bindings for one execution
"""

from .context import (
    Scope,
)

from .interpreter import (
    Interpreter,
    interpret,
    execute,
)

__all__ = [
    'Scope',
    'Interpreter',
    'interpret',
    'execute',
]
