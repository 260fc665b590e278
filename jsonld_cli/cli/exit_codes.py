"""Exit code constants for CLI commands.

Exit codes:
    0: SUCCESS - Command completed and its result was written
    1: FAILURE - Any reported failure (input, network, option, engine)
"""


class ExitCode:
    """Standard exit codes for CLI commands.

    Every failure maps to the same code; the diagnostic printed to stderr
    tells the failures apart.

    Example:
        >>> from jsonld_cli.cli.exit_codes import ExitCode
        >>> import sys
        >>>
        >>> try:
        ...     # ... command ...
        ...     sys.exit(ExitCode.SUCCESS)
        ... except JsonLdCliError:
        ...     sys.exit(ExitCode.FAILURE)
    """

    SUCCESS = 0
    """Command completed successfully."""

    FAILURE = 1
    """Command failed; an ERROR diagnostic was printed."""
