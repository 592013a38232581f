#!/usr/bin/env python3
"""
CLI for the edrtest script runner.

Usage:
    python -m edrtest [-l FILE] [--config FILE] SCRIPT
    python -m edrtest [-l FILE] -c FUNCTION [ARG ...]
    python -m edrtest --check [-v] SCRIPT

Examples:
    # Run a script file, logging activities to activity.log
    python -m edrtest probes/drop_and_run.edr

    # Run an inline script; every word after the first is quoted for you
    python -m edrtest -c file.create file /tmp/probe

    # Log somewhere else
    python -m edrtest -l /var/log/edrtest.log probes/beacon.edr

    # Only check syntax and function names, without running anything
    python -m edrtest --check -v probes/beacon.edr
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .activity import default_registry
from .config import DEFAULT_LOG_FILE, load_settings
from .logger import ActivityLogger
from .registry import Registry
from .runtime import execute
from .script import ScriptError, format_ast, parse, tokenize


def format_functions(registry: Registry) -> str:
    """List registered functions with their parameters for help output."""
    lines = ["Registered functions:"]
    for entry in registry.functions():
        lines.append(f"    {entry.name} {entry.usage}".rstrip())
    return "\n".join(lines)


def build_inline_source(words: List[str]) -> str:
    """
    Join command-line words into one script line.

    The first word (the function name) is kept verbatim; every later word
    is wrapped in double quotes unless it already contains one.
    """
    parts = []
    for i, word in enumerate(words):
        if i == 0 or '"' in word:
            parts.append(word)
        else:
            parts.append(f'"{word}"')
    return " ".join(parts)


def build_parser(registry: Registry) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='edrtest',
        description='Run scripted file, process and network activity',
        epilog=format_functions(registry),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-l', '--log-file', metavar='FILE',
                        help=f'set log file (default: {DEFAULT_LOG_FILE})')
    parser.add_argument('-c', '--command', action='store_true',
                        help="execute script string (don't read from a file), "
                             "arguments are implicitly quoted")
    parser.add_argument('--config', metavar='FILE',
                        help='YAML settings file')
    parser.add_argument('--check', action='store_true',
                        help='parse the script without running it')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='with --check, print the parsed statements')
    parser.add_argument('script', nargs='?',
                        help='script file, or script text with -c')
    parser.add_argument('args', nargs=argparse.REMAINDER,
                        help=argparse.SUPPRESS)
    return parser


def cmd_check(source, display: str, inline: bool, verbose: bool) -> int:
    """Lex and parse a script without executing it."""
    try:
        statements = parse(tokenize(source, None if inline else display),
                           default_registry())
    except ScriptError as e:
        print(e.render(display, inline), file=sys.stderr)
        return 1

    name = "<cmd>" if inline else Path(display).name
    print(f"OK: {name} - {len(statements)} statement(s)")
    if verbose and statements:
        print(format_ast(statements))
    return 0


def cmd_run(source, display: str, inline: bool, log_file: str) -> int:
    """Execute a script with activity logging."""
    logger = ActivityLogger(log_file)
    try:
        logger.open()
    except OSError as e:
        print(f"Error: cannot open log file: {e}", file=sys.stderr)
        return 1

    try:
        execute(source, default_registry(logger),
                filename=None if inline else display)
    except ScriptError as e:
        print(e.render(display, inline), file=sys.stderr)
        return 1
    finally:
        logger.close()

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser(default_registry())
    args = parser.parse_args(argv)

    if args.script is None:
        parser.print_help()
        return 1

    if args.command:
        source = build_inline_source([args.script] + args.args)
        display = source
    elif args.args:
        parser.error(f"unexpected arguments after script file: {' '.join(args.args)}")
    else:
        display = args.script

    try:
        settings = load_settings(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    log_file = args.log_file or settings.log_file

    if args.command:
        if args.check:
            return cmd_check(source, display, True, args.verbose)
        return cmd_run(source, display, True, log_file)

    try:
        with open(args.script, 'rb') as fh:
            if args.check:
                return cmd_check(fh, display, False, args.verbose)
            return cmd_run(fh, display, False, log_file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
