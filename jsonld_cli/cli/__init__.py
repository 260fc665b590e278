"""CLI interface for jsonld-cli.

This package provides the six JSON-LD processing commands, their config
file handling and their output formatting.
"""
