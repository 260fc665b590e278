"""jsonld-cli: command-line JSON-LD processing.

Reads JSON-LD documents from files, URLs or stdin and runs them through
a JSON-LD processor (format, compact, expand, flatten, frame, normalize).
"""

__version__ = "0.3.0"
