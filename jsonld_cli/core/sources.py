"""Source descriptor classification.

A source descriptor is the positional ``[filename|URL|-]`` argument (or the
value of ``--context``/``--frame``). Classification is purely syntactic:
stdin is checked first, then the HTTP prefixes, and everything else is a
local file. The file system is never consulted, so a file literally named
``-`` cannot be read through this interface.
"""

from dataclasses import dataclass
from enum import Enum

STDIN = "-"
NETWORK_PREFIXES = ("http://", "https://")


class SourceKind(Enum):
    """Kind of input a descriptor refers to."""

    STDIN = "stdin"
    NETWORK = "network"
    FILE = "file"


@dataclass(frozen=True)
class SourceDescriptor:
    """A classified source descriptor."""

    value: str
    kind: SourceKind

    def __str__(self) -> str:
        return self.value


def classify_source(value: str) -> SourceDescriptor:
    """Classify a raw descriptor string.

    Example:
        >>> classify_source("-").kind
        <SourceKind.STDIN: 'stdin'>
        >>> classify_source("https://example.org/doc").kind
        <SourceKind.NETWORK: 'network'>
        >>> classify_source("./doc.jsonld").kind
        <SourceKind.FILE: 'file'>
    """
    if value == STDIN:
        return SourceDescriptor(value, SourceKind.STDIN)
    if value.startswith(NETWORK_PREFIXES):
        return SourceDescriptor(value, SourceKind.NETWORK)
    return SourceDescriptor(value, SourceKind.FILE)
