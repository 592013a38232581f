"""
Function registry for edrtest scripts.

Maps script function names to native activity implementations together
with the arity rule derived from their declared parameter names. The
parser resolves every call against the registry, so unknown functions and
wrong argument counts are rejected before any statement runs.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .script.errors import (
    RegistrationError,
    error_function_not_found,
    error_missing_arguments,
    error_too_many_arguments,
)
from .script.tokens import SourceLocation


# A parameter name starting with this marker accepts zero or more
# trailing arguments.
VARIADIC_MARKER = "*"

NativeFunction = Callable[[List[str]], str]


@dataclass(frozen=True)
class RegistryEntry:
    """
    A registered function with its implementation and arity rule.
    """
    name: str
    params: Tuple[str, ...]
    min_arity: int
    variadic: bool
    function: NativeFunction

    def invoke(self, args: List[str]) -> str:
        """Call the native implementation with evaluated arguments."""
        return self.function(args)

    @property
    def usage(self) -> str:
        """Parameter list for help text, e.g. ``<cmd> [args, ...]``."""
        parts = []
        for param in self.params:
            if param.startswith(VARIADIC_MARKER):
                parts.append(f"[{param[len(VARIADIC_MARKER):]}, ...]")
            else:
                parts.append(f"<{param}>")
        return " ".join(parts)


class Registry:
    """
    Registry of all callable script functions.

    Built once at startup and treated as read-only afterwards.
    """

    def __init__(self):
        self._functions: Dict[str, RegistryEntry] = {}

    def __len__(self) -> int:
        return len(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def register(self, name: str, params: Sequence[str],
                 function: NativeFunction) -> RegistryEntry:
        """
        Register a function.

        Raises:
            RegistrationError: If more than one parameter carries the
                variadic marker, or ``name`` is already registered
        """
        if name in self._functions:
            raise RegistrationError(f"function {name!r} registered twice")

        min_arity = 0
        variadic = False
        for param in params:
            if param.startswith(VARIADIC_MARKER):
                if variadic:
                    raise RegistrationError(
                        f'multiple "{VARIADIC_MARKER}" argument types not allowed '
                        f"in {name!r}"
                    )
                variadic = True
            else:
                min_arity += 1

        entry = RegistryEntry(name, tuple(params), min_arity, variadic, function)
        self._functions[name] = entry
        return entry

    def get_function(self, name: str) -> Optional[RegistryEntry]:
        """Look up a function by name."""
        return self._functions.get(name)

    def functions(self) -> List[RegistryEntry]:
        """All entries in registration order."""
        return list(self._functions.values())

    def resolve(self, location: SourceLocation, name: str,
                arg_count: int) -> RegistryEntry:
        """
        Resolve a call site to its registry entry.

        Raises:
            ParserError: If the name is unknown or ``arg_count`` does not
                satisfy the entry's arity
        """
        entry = self._functions.get(name)
        if entry is None:
            raise error_function_not_found(location)
        if arg_count < entry.min_arity:
            raise error_missing_arguments(entry.min_arity, location)
        if arg_count > entry.min_arity and not entry.variadic:
            raise error_too_many_arguments(entry.min_arity, location)
        return entry
