"""CLI entry point for jsonld-cli.

Enables invocation via `python -m jsonld_cli` and the `jsonld` console script.

This module imports the Cyclopts app and invokes it, exiting with the
appropriate exit code based on command execution results.
"""

import sys

from jsonld_cli.cli.app import app


def main() -> None:
    exit_code = app()
    sys.exit(exit_code if exit_code is not None else 0)


if __name__ == "__main__":
    main()
