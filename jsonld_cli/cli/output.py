"""Result output, failure reporting and logging setup for CLI commands.

This module provides:
- write_result: Serialize a command result to stdout per an OutputSpec
- handle_error: Print an ERROR diagnostic with context and optional stack trace
- configure_logging: Route log records to stderr at the requested level
"""

import json
import logging
import sys
import traceback
from enum import Enum
from typing import Any, TextIO

from jsonld_cli.core.exceptions import OptionError
from jsonld_cli.core.request import OutputSpec

LOG_LEVELS = ("debug", "info", "warning", "error")


class OutputKind(Enum):
    """Shape of a result value, decided once before writing."""

    STRUCTURED = "structured"
    TEXT = "text"
    RAW = "raw"


def classify_output(value: Any) -> OutputKind:
    """Return the output kind for a result value."""
    if isinstance(value, (dict, list)):
        return OutputKind.STRUCTURED
    if isinstance(value, str):
        return OutputKind.TEXT
    return OutputKind.RAW


def render_output(value: Any, spec: OutputSpec) -> str:
    """Render a result value to the exact text written to stdout.

    Structured values are pretty-printed with ``spec.indent`` spaces per level
    (an indent of 0 gives compact single-line JSON) and keep their key order.
    Text is stripped of surrounding whitespace. Anything else is written as
    its JSON literal (``true``, ``null``, ``42``).

    Example:
        >>> render_output({"a": 1}, OutputSpec(indent=0, newline=False))
        '{"a":1}'
        >>> render_output("  <a> <b> <c> .\\n", OutputSpec())
        '<a> <b> <c> .\\n'
    """
    kind = classify_output(value)
    if kind is OutputKind.STRUCTURED:
        if spec.indent == 0:
            text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        else:
            text = json.dumps(value, ensure_ascii=False, indent=spec.indent)
    elif kind is OutputKind.TEXT:
        text = value.strip()
    elif value is None or isinstance(value, (bool, int, float)):
        text = json.dumps(value)
    else:
        text = str(value)

    if spec.newline:
        text += "\n"
    return text


def write_result(value: Any, spec: OutputSpec, stream: TextIO | None = None) -> None:
    """Write a rendered result to stdout (or ``stream``) in one write."""
    stream = stream or sys.stdout
    stream.write(render_output(value, spec))
    stream.flush()


def handle_error(error: Exception, verbose: bool = False) -> None:
    """Format and display an error message with context.

    Displays ``ERROR: <message>`` on stderr, then the error's context fields
    (JsonLdCliError and ConfigError carry them) and, in verbose mode, the
    full stack trace.

    Args:
        error: Exception to display
        verbose: Whether to show the stack trace (default False)

    Example:
        try:
            # ... command ...
        except Exception as e:
            handle_error(e, verbose=True)
    """
    message = getattr(error, "message", None) or str(error) or type(error).__name__
    print(f"ERROR: {message}", file=sys.stderr)

    if getattr(error, "context", None):
        print("Context:", file=sys.stderr)
        for key, value in error.context.items():
            print(f"  {key}: {value}", file=sys.stderr)

    if verbose:
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)


def configure_logging(level: str = "warning") -> None:
    """Send log records at ``level`` and above to stderr.

    Raises:
        OptionError: If the level name is not one of LOG_LEVELS
    """
    if level.lower() not in LOG_LEVELS:
        raise OptionError(
            f"Invalid log level '{level}'. Choose from: {', '.join(LOG_LEVELS)}",
            option="log_level",
            value=level,
        )
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
