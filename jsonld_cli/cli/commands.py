"""CLI command implementations.

This module implements the six jsonld-cli commands:
- format: Reformat a document, or convert it to N-Quads
- compact: Compact a document against a context
- expand: Expand a document
- flatten: Flatten a document, optionally compacting it with a context
- frame: Frame a document with a frame document
- normalize: Canonicalize a document (URDNA2015)

Each command is a function returning an exit code, so the commands can be
called directly as well as through the Cyclopts app. They share one flow:
merge config-file defaults with CLI flags, describe the work as an
Invocation, run it, then write the result. Any failure is reported once
through handle_error and nothing is written to stdout.
"""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Annotated, Any

from cyclopts import Parameter

from jsonld_cli.cli.config import load_command_config, merge_config
from jsonld_cli.cli.exit_codes import ExitCode
from jsonld_cli.cli.output import configure_logging, handle_error, write_result
from jsonld_cli.cli.registry import is_jsonld, resolve_format
from jsonld_cli.core.coerce import coerce_boolean
from jsonld_cli.core.exceptions import OptionError
from jsonld_cli.core.pipeline import DOCUMENT, Invocation, execute_invocation
from jsonld_cli.core.request import OutputSpec, freeze_options
from jsonld_cli.core.resolver import DEFAULT_ENCODING
from jsonld_cli.core.sources import STDIN

Builder = Callable[[str, Mapping[str, Any]], Invocation]

SOURCE_HELP = "[filename|URL|-] Input document (default: - for stdin)"


def _flag(options: Mapping[str, Any], name: str, default: bool) -> bool:
    value = options.get(name)
    if value is None:
        return default
    return coerce_boolean(value, option=name)


def _encoding(options: Mapping[str, Any]) -> str:
    return options.get("encoding") or DEFAULT_ENCODING


def build_output_spec(options: Mapping[str, Any]) -> OutputSpec:
    """Derive the OutputSpec from merged options.

    Raises:
        OptionError: If indent is not a non-negative integer
        BooleanParseError: If newline is not a boolean literal
    """
    indent = options.get("indent", 2)
    try:
        indent = int(indent)
    except (TypeError, ValueError) as e:
        raise OptionError(f"Indent must be an integer, got {indent!r}", option="indent", value=indent) from e
    return OutputSpec(indent=indent, newline=_flag(options, "newline", True))


def run_command(
    command: str,
    source: str,
    build: Builder,
    config: Path | None = None,
    log_level: str = "warning",
    verbose: bool = False,
    **overrides: Any,
) -> int:
    """Run one command invocation end to end.

    Args:
        command: Command name, used to select the config section
        source: Primary source descriptor
        build: Turns (source, merged options) into an Invocation
        config: Optional configuration file
        log_level: Logging level
        verbose: Print a stack trace on failure
        **overrides: CLI values; ``None`` means "not given on the command line"

    Returns:
        Exit code (0 for success, 1 for any failure)
    """
    try:
        configure_logging(log_level)
        options = merge_config(load_command_config(config, command), **overrides)
        spec = build_output_spec(options)
        invocation = build(source, options)
        result = execute_invocation(invocation)
        write_result(result, spec)
        return ExitCode.SUCCESS
    except Exception as e:
        handle_error(e, verbose=verbose)
        return ExitCode.FAILURE


# ---------------------------------------------------------------------------
# Invocation builders
# ---------------------------------------------------------------------------

def build_format_invocation(source: str, options: Mapping[str, Any]) -> Invocation:
    """Build the ``format`` invocation.

    JSON-LD output formats skip the engine and pass the document through;
    N-Quads goes through ``toRDF``.
    """
    media_type = resolve_format(
        format=options.get("format"),
        nquads=_flag(options, "nquads", False),
        json=_flag(options, "json", False),
        default="json",
    )
    if is_jsonld(media_type):
        return Invocation(
            operation=None,
            sources={DOCUMENT: source},
            options=freeze_options({"base": options.get("base")}),
            encoding=_encoding(options),
        )
    return Invocation(
        operation="toRDF",
        sources={DOCUMENT: source},
        options=freeze_options({"base": options.get("base"), "format": media_type}),
        encoding=_encoding(options),
    )


def build_compact_invocation(source: str, options: Mapping[str, Any]) -> Invocation:
    """Build the ``compact`` invocation (secondary input: context)."""
    return Invocation(
        operation="compact",
        sources={DOCUMENT: source, "context": options.get("context")},
        options=freeze_options({
            "base": options.get("base"),
            "strict": _flag(options, "strict", True),
            "compact_arrays": _flag(options, "compact_arrays", True),
            "graph": _flag(options, "graph", False),
            "skip_expansion": not _flag(options, "expansion", True),
        }),
        secondary="context",
        encoding=_encoding(options),
    )


def build_expand_invocation(source: str, options: Mapping[str, Any]) -> Invocation:
    """Build the ``expand`` invocation."""
    return Invocation(
        operation="expand",
        sources={DOCUMENT: source},
        options=freeze_options({
            "base": options.get("base"),
            "keep_free_floating_nodes": _flag(options, "keep_free_floating_nodes", False),
        }),
        encoding=_encoding(options),
    )


def build_flatten_invocation(source: str, options: Mapping[str, Any]) -> Invocation:
    """Build the ``flatten`` invocation (optional secondary input: context)."""
    return Invocation(
        operation="flatten",
        sources={DOCUMENT: source, "context": options.get("context")},
        options=freeze_options({"base": options.get("base")}),
        secondary="context",
        encoding=_encoding(options),
    )


def build_frame_invocation(source: str, options: Mapping[str, Any]) -> Invocation:
    """Build the ``frame`` invocation (secondary input: frame)."""
    return Invocation(
        operation="frame",
        sources={DOCUMENT: source, "frame": options.get("frame")},
        options=freeze_options({
            "base": options.get("base"),
            "embed": _flag(options, "embed", True),
            "explicit": _flag(options, "explicit", False),
            "omit_default": _flag(options, "omit_default", False),
        }),
        secondary="frame",
        encoding=_encoding(options),
    )


def build_normalize_invocation(source: str, options: Mapping[str, Any]) -> Invocation:
    """Build the ``normalize`` invocation.

    Without a format (or with a JSON-LD one) the engine returns the
    canonical dataset as JSON; N-Quads returns canonical N-Quads text.
    """
    media_type = resolve_format(
        format=options.get("format"),
        nquads=_flag(options, "nquads", False),
    )
    if is_jsonld(media_type):
        media_type = None
    return Invocation(
        operation="normalize",
        sources={DOCUMENT: source},
        options=freeze_options({"base": options.get("base"), "format": media_type}),
        encoding=_encoding(options),
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def format_document(
    source: Annotated[str, Parameter(help=SOURCE_HELP)] = STDIN,
    *,
    indent: Annotated[int | None, Parameter(name=["--indent", "-i"], help="Spaces per indentation level (default: 2)")] = None,
    no_newline: Annotated[bool, Parameter(name=["--no-newline", "-N"], negative="", help="Do not print a trailing newline")] = False,
    base: Annotated[str | None, Parameter(name=["--base", "-b"], help="Base IRI")] = None,
    output_format: Annotated[str | None, Parameter(name=["--format", "-f"], help="Output format (default: json)")] = None,
    nquads: Annotated[bool, Parameter(name=["--nquads", "-q"], negative="", help="Output application/nquads")] = False,
    as_json: Annotated[bool, Parameter(name=["--json", "-j"], negative="", help="Output application/json")] = False,
    encoding: Annotated[str | None, Parameter(name=["--encoding", "-e"], help="Input text encoding (default: utf-8)")] = None,
    config: Annotated[Path | None, Parameter(help="Configuration file path")] = None,
    log_level: Annotated[str, Parameter(help="Log level (debug, info, warning, error)")] = "warning",
    verbose: Annotated[bool, Parameter(help="Show stack trace on failure")] = False,
) -> int:
    """Format and convert a JSON-LD document.

    With a JSON-LD output format (the default) the document is re-indented
    and written back unchanged. ``--nquads`` converts it to N-Quads.

    Example:
        >>> from jsonld_cli.cli.commands import format_document
        >>> exit_code = format_document("doc.jsonld", indent=4)
    """
    return run_command(
        "format",
        source,
        build_format_invocation,
        config=config,
        log_level=log_level,
        verbose=verbose,
        indent=indent,
        newline=False if no_newline else None,
        base=base,
        encoding=encoding,
        format=output_format,
        nquads=True if nquads else None,
        json=True if as_json else None,
    )


def compact(
    source: Annotated[str, Parameter(help=SOURCE_HELP)] = STDIN,
    *,
    context: Annotated[str | None, Parameter(name=["--context", "-c"], help="[filename|URL|-] Context to compact with")] = None,
    indent: Annotated[int | None, Parameter(name=["--indent", "-i"], help="Spaces per indentation level (default: 2)")] = None,
    no_newline: Annotated[bool, Parameter(name=["--no-newline", "-N"], negative="", help="Do not print a trailing newline")] = False,
    base: Annotated[str | None, Parameter(name=["--base", "-b"], help="Base IRI")] = None,
    no_strict: Annotated[bool, Parameter(name=["--no-strict", "-S"], negative="", help="Disable strict mode")] = False,
    no_compact_arrays: Annotated[bool, Parameter(name=["--no-compact-arrays", "-A"], negative="", help="Keep single-element arrays")] = False,
    graph: Annotated[bool, Parameter(name=["--graph", "-g"], negative="", help="Always output a top-level @graph")] = False,
    no_expansion: Annotated[bool, Parameter(name=["--no-expansion", "-E"], negative="", help="Input is already expanded")] = False,
    encoding: Annotated[str | None, Parameter(name=["--encoding", "-e"], help="Input text encoding (default: utf-8)")] = None,
    config: Annotated[Path | None, Parameter(help="Configuration file path")] = None,
    log_level: Annotated[str, Parameter(help="Log level (debug, info, warning, error)")] = "warning",
    verbose: Annotated[bool, Parameter(help="Show stack trace on failure")] = False,
) -> int:
    """Compact a JSON-LD document using a context.

    Both the document and the context are read before the engine runs; they
    may come from files, URLs or stdin (only one of them from stdin).

    Example:
        >>> from jsonld_cli.cli.commands import compact
        >>> exit_code = compact("doc.jsonld", context="context.jsonld")
    """
    return run_command(
        "compact",
        source,
        build_compact_invocation,
        config=config,
        log_level=log_level,
        verbose=verbose,
        indent=indent,
        newline=False if no_newline else None,
        base=base,
        encoding=encoding,
        context=context,
        strict=False if no_strict else None,
        compact_arrays=False if no_compact_arrays else None,
        graph=True if graph else None,
        expansion=False if no_expansion else None,
    )


def expand(
    source: Annotated[str, Parameter(help=SOURCE_HELP)] = STDIN,
    *,
    indent: Annotated[int | None, Parameter(name=["--indent", "-i"], help="Spaces per indentation level (default: 2)")] = None,
    no_newline: Annotated[bool, Parameter(name=["--no-newline", "-N"], negative="", help="Do not print a trailing newline")] = False,
    base: Annotated[str | None, Parameter(name=["--base", "-b"], help="Base IRI")] = None,
    keep_free_floating_nodes: Annotated[bool, Parameter(negative="", help="Keep free-floating nodes")] = False,
    encoding: Annotated[str | None, Parameter(name=["--encoding", "-e"], help="Input text encoding (default: utf-8)")] = None,
    config: Annotated[Path | None, Parameter(help="Configuration file path")] = None,
    log_level: Annotated[str, Parameter(help="Log level (debug, info, warning, error)")] = "warning",
    verbose: Annotated[bool, Parameter(help="Show stack trace on failure")] = False,
) -> int:
    """Expand a JSON-LD document."""
    return run_command(
        "expand",
        source,
        build_expand_invocation,
        config=config,
        log_level=log_level,
        verbose=verbose,
        indent=indent,
        newline=False if no_newline else None,
        base=base,
        encoding=encoding,
        keep_free_floating_nodes=True if keep_free_floating_nodes else None,
    )


def flatten(
    source: Annotated[str, Parameter(help=SOURCE_HELP)] = STDIN,
    *,
    context: Annotated[str | None, Parameter(name=["--context", "-c"], help="[filename|URL|-] Context to compact the result with")] = None,
    indent: Annotated[int | None, Parameter(name=["--indent", "-i"], help="Spaces per indentation level (default: 2)")] = None,
    no_newline: Annotated[bool, Parameter(name=["--no-newline", "-N"], negative="", help="Do not print a trailing newline")] = False,
    base: Annotated[str | None, Parameter(name=["--base", "-b"], help="Base IRI")] = None,
    encoding: Annotated[str | None, Parameter(name=["--encoding", "-e"], help="Input text encoding (default: utf-8)")] = None,
    config: Annotated[Path | None, Parameter(help="Configuration file path")] = None,
    log_level: Annotated[str, Parameter(help="Log level (debug, info, warning, error)")] = "warning",
    verbose: Annotated[bool, Parameter(help="Show stack trace on failure")] = False,
) -> int:
    """Flatten a JSON-LD document."""
    return run_command(
        "flatten",
        source,
        build_flatten_invocation,
        config=config,
        log_level=log_level,
        verbose=verbose,
        indent=indent,
        newline=False if no_newline else None,
        base=base,
        encoding=encoding,
        context=context,
    )


def frame(
    source: Annotated[str, Parameter(help=SOURCE_HELP)] = STDIN,
    *,
    frame: Annotated[str | None, Parameter(name=["--frame", "-f"], help="[filename|URL|-] Frame document")] = None,
    indent: Annotated[int | None, Parameter(name=["--indent", "-i"], help="Spaces per indentation level (default: 2)")] = None,
    no_newline: Annotated[bool, Parameter(name=["--no-newline", "-N"], negative="", help="Do not print a trailing newline")] = False,
    base: Annotated[str | None, Parameter(name=["--base", "-b"], help="Base IRI")] = None,
    embed: Annotated[str | None, Parameter(help="Default @embed flag (default: true)")] = None,
    explicit: Annotated[str | None, Parameter(help="Default @explicit flag (default: false)")] = None,
    omit_default: Annotated[str | None, Parameter(help="Default @omitDefault flag (default: false)")] = None,
    encoding: Annotated[str | None, Parameter(name=["--encoding", "-e"], help="Input text encoding (default: utf-8)")] = None,
    config: Annotated[Path | None, Parameter(help="Configuration file path")] = None,
    log_level: Annotated[str, Parameter(help="Log level (debug, info, warning, error)")] = "warning",
    verbose: Annotated[bool, Parameter(help="Show stack trace on failure")] = False,
) -> int:
    """Frame a JSON-LD document.

    ``--embed``, ``--explicit`` and ``--omit-default`` take a boolean literal
    (true/t/1/yes/y or false/0/no/n, any case).

    Example:
        >>> from jsonld_cli.cli.commands import frame
        >>> exit_code = frame("doc.jsonld", frame="frame.jsonld", embed="no")
    """
    return run_command(
        "frame",
        source,
        build_frame_invocation,
        config=config,
        log_level=log_level,
        verbose=verbose,
        indent=indent,
        newline=False if no_newline else None,
        base=base,
        encoding=encoding,
        frame=frame,
        embed=embed,
        explicit=explicit,
        omit_default=omit_default,
    )


def normalize(
    source: Annotated[str, Parameter(help=SOURCE_HELP)] = STDIN,
    *,
    indent: Annotated[int | None, Parameter(name=["--indent", "-i"], help="Spaces per indentation level (default: 2)")] = None,
    no_newline: Annotated[bool, Parameter(name=["--no-newline", "-N"], negative="", help="Do not print a trailing newline")] = False,
    base: Annotated[str | None, Parameter(name=["--base", "-b"], help="Base IRI")] = None,
    output_format: Annotated[str | None, Parameter(name=["--format", "-f"], help="Output format (default: JSON dataset)")] = None,
    nquads: Annotated[bool, Parameter(name=["--nquads", "-q"], negative="", help="Output application/nquads")] = False,
    encoding: Annotated[str | None, Parameter(name=["--encoding", "-e"], help="Input text encoding (default: utf-8)")] = None,
    config: Annotated[Path | None, Parameter(help="Configuration file path")] = None,
    log_level: Annotated[str, Parameter(help="Log level (debug, info, warning, error)")] = "warning",
    verbose: Annotated[bool, Parameter(help="Show stack trace on failure")] = False,
) -> int:
    """Normalize (canonicalize) a JSON-LD document."""
    return run_command(
        "normalize",
        source,
        build_normalize_invocation,
        config=config,
        log_level=log_level,
        verbose=verbose,
        indent=indent,
        newline=False if no_newline else None,
        base=base,
        encoding=encoding,
        format=output_format,
        nquads=True if nquads else None,
    )
