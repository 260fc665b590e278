"""Request assembly for the JSON-LD engine.

A command invocation produces an immutable options mapping keyed by flag
name (``compact_arrays``, ``omit_default``, ...). :func:`assemble_request`
projects that mapping onto the option names the engine understands for one
operation and bundles it with the resolved documents into a
:class:`ProcessingRequest`.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from jsonld_cli.core.exceptions import OptionError

# flag name -> engine option name, per engine operation
ENGINE_OPTION_NAMES: dict[str, dict[str, str]] = {
    "toRDF": {"base": "base", "format": "format"},
    "compact": {
        "base": "base",
        "strict": "strict",
        "compact_arrays": "compactArrays",
        "graph": "graph",
        "skip_expansion": "skipExpansion",
    },
    "expand": {"base": "base", "keep_free_floating_nodes": "keepFreeFloatingNodes"},
    "flatten": {"base": "base"},
    "frame": {
        "base": "base",
        "embed": "embed",
        "explicit": "explicit",
        "omit_default": "omitDefault",
    },
    "normalize": {"base": "base", "format": "format"},
}

OPERATIONS = tuple(ENGINE_OPTION_NAMES)


def freeze_options(options: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a read-only copy of an options mapping."""
    return MappingProxyType(dict(options))


@dataclass(frozen=True)
class OutputSpec:
    """How a result is written: indentation width and trailing newline."""

    indent: int = 2
    newline: bool = True

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise OptionError("Indent must be a non-negative integer", option="indent", value=self.indent)


@dataclass(frozen=True)
class ProcessingRequest:
    """Everything one engine call needs.

    Attributes:
        operation: Engine operation name (one of :data:`OPERATIONS`)
        document: The primary document
        secondary: Context or frame document, ``None`` when not given
        options: Engine option names mapped to values
    """

    operation: str
    document: Any
    secondary: Any = None
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


def assemble_request(
    operation: str,
    document: Any,
    options: Mapping[str, Any],
    secondary: Any = None,
) -> ProcessingRequest:
    """Build the engine request for one operation.

    Flags the operation does not understand are dropped, as are flags whose
    value is ``None`` (for example an omitted ``--base``).

    Args:
        operation: Engine operation name
        document: Resolved primary document
        options: Invocation options keyed by flag name
        secondary: Resolved context or frame document

    Returns:
        A frozen ProcessingRequest

    Raises:
        KeyError: If the operation is unknown

    Example:
        >>> request = assemble_request(
        ...     "compact", {"@id": "urn:a"}, {"compact_arrays": False, "base": None}
        ... )
        >>> dict(request.options)
        {'compactArrays': False}
    """
    if operation not in ENGINE_OPTION_NAMES:
        raise KeyError(f"Unknown operation '{operation}'. Available: {', '.join(OPERATIONS)}")

    names = ENGINE_OPTION_NAMES[operation]
    projected = {
        engine_name: options[flag]
        for flag, engine_name in names.items()
        if options.get(flag) is not None
    }
    return ProcessingRequest(
        operation=operation,
        document=document,
        secondary=secondary,
        options=freeze_options(projected),
    )
