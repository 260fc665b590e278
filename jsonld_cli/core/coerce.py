"""Boolean coercion for value-taking command-line flags.

Flags such as ``--embed false`` carry their value as a token. This module
turns those tokens (and booleans loaded from config files) into ``bool``.
"""

from typing import Any

from jsonld_cli.core.exceptions import BooleanParseError

TRUE_LITERALS = ("true", "t", "1", "yes", "y")

# "t" is also listed here but never reached: the true literals are checked first.
FALSE_LITERALS = ("false", "t", "0", "no", "n")


def coerce_boolean(value: Any, option: str | None = None) -> bool:
    """Parse a flag literal into a boolean.

    Args:
        value: A ``bool`` or a string literal (case-insensitive)
        option: Name of the option being parsed, used in the error context

    Returns:
        The parsed boolean

    Raises:
        BooleanParseError: If the value is neither a bool nor a recognized literal

    Example:
        >>> coerce_boolean("YES")
        True
        >>> coerce_boolean("n")
        False
    """
    if isinstance(value, bool):
        return value

    literal = str(value).lower()
    if literal in TRUE_LITERALS:
        return True
    if literal in FALSE_LITERALS:
        return False

    raise BooleanParseError(f"Invalid boolean value: {value}", value=value, option=option)
