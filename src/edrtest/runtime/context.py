"""
Execution context for the script interpreter.

A script runs against a single flat scope: no nesting, no visibility rules
beyond "assigned before use in program order".
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class Scope:
    """Variable bindings for one script execution."""
    variables: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        """Look up a variable, or None if it was never assigned."""
        return self.variables.get(name)

    def set(self, name: str, value: str) -> None:
        """Bind a variable, overwriting any earlier value."""
        self.variables[name] = value

    def contains(self, name: str) -> bool:
        return name in self.variables
