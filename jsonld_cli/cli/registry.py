"""Output format registry.

Maps the format names accepted by ``--format`` to canonical media types.
Lookup is case-insensitive; unknown names raise UnknownFormatError listing
what is available.

Two media types are registered:
- ``application/ld+json``: JSON-LD, written as a JSON structure
- ``application/nquads``: N-Quads text
"""

from jsonld_cli.core.exceptions import UnknownFormatError

JSONLD = "application/ld+json"
NQUADS = "application/nquads"

# Registry mapping format names to media types
FORMATS: dict[str, str] = {}


def register_format(name: str, media_type: str) -> None:
    """Register a format name.

    Args:
        name: Name accepted by ``--format`` (e.g., "json-ld")
        media_type: Canonical media type the name stands for

    Example:
        >>> from jsonld_cli.cli.registry import register_format, NQUADS
        >>> register_format("nq", NQUADS)
    """
    FORMATS[name.lower()] = media_type


def get_format(name: str) -> str:
    """Get the canonical media type for a format name.

    Raises:
        UnknownFormatError: If the name is not registered
    """
    media_type = FORMATS.get(name.lower())
    if media_type is None:
        available = list_formats()
        raise UnknownFormatError(
            f"Unknown format '{name}'. Available: {', '.join(available)}",
            format=name,
            available=available,
        )
    return media_type


def list_formats() -> list[str]:
    """Return all registered format names, sorted."""
    return sorted(FORMATS)


def is_jsonld(media_type: str | None) -> bool:
    """Return True if the media type is the JSON-LD one."""
    return media_type == JSONLD


def resolve_format(
    format: str | None = None,
    nquads: bool = False,
    json: bool = False,
    default: str | None = None,
) -> str | None:
    """Apply the format flag precedence of ``format``/``normalize``.

    ``nquads`` wins over ``json``, which wins over an explicit ``format``
    name; with none of them the ``default`` name is used (``None`` stays
    ``None``).

    Example:
        >>> resolve_format(format="json", nquads=True)
        'application/nquads'
        >>> resolve_format(default="json")
        'application/ld+json'
    """
    if nquads:
        return NQUADS
    if json:
        return JSONLD
    if format is not None:
        return get_format(format)
    if default is not None:
        return get_format(default)
    return None


for _name in ("application/json", "json", "application/ld+json", "json-ld", "ld+json"):
    register_format(_name, JSONLD)

for _name in ("application/nquads", "application/n-quads", "nquads", "n-quads"):
    register_format(_name, NQUADS)
