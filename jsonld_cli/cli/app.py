"""Cyclopts application and command routing for jsonld-cli.

This module defines the main Cyclopts application and registers the six
JSON-LD processing commands:
- format: Format and convert a document
- compact: Compact a document using a context
- expand: Expand a document
- flatten: Flatten a document
- frame: Frame a document
- normalize: Normalize a document
"""

from cyclopts import App

from jsonld_cli import __version__
from jsonld_cli.cli import commands

# Create the main application
app = App(
    name="jsonld",
    help="JSON-LD command line interface",
    version=__version__,
)

# Register subcommands
app.command(commands.format_document, name="format")
app.command(commands.compact)
app.command(commands.expand)
app.command(commands.flatten)
app.command(commands.frame)
app.command(commands.normalize)
