# -*- coding: utf-8 -*-
"""
edrtest - scripted synthetic host activity for exercising detection tooling.

Usage:
    from edrtest import ActivityLogger, default_registry, execute

    with ActivityLogger("activity.log") as logger:
        execute('file.create :file "/tmp/probe"', default_registry(logger))
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("edr-test")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from .script import (
    SourceLocation,
    ScriptError,
    LexerError,
    ParserError,
    ExecutionError,
    ActivityError,
    RegistrationError,
    tokenize,
    parse,
)
from .registry import Registry, RegistryEntry
from .runtime import Interpreter, Scope, interpret, execute
from .activity import Activities, register, default_registry
from .logger import ActivityLogger, NullActivityLogger, LoggerError
from .config import Settings, load_settings

__all__ = [
    '__version__',
    'SourceLocation',
    'ScriptError',
    'LexerError',
    'ParserError',
    'ExecutionError',
    'ActivityError',
    'RegistrationError',
    'tokenize',
    'parse',
    'Registry',
    'RegistryEntry',
    'Interpreter',
    'Scope',
    'interpret',
    'execute',
    'Activities',
    'register',
    'default_registry',
    'ActivityLogger',
    'NullActivityLogger',
    'LoggerError',
    'Settings',
    'load_settings',
]
