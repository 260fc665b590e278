"""Invocation pipeline: resolve inputs, assemble the request, call the engine.

Each command describes its work as an :class:`Invocation`: the named sources
it needs (``document`` plus an optional ``context`` or ``frame``), its
options and the engine operation. :func:`run_invocation` resolves all
sources concurrently and only calls the engine once every one of them has
resolved. The first failing source aborts the invocation; the engine is
never called and nothing is returned.

The flow:
1. Check that stdin is named by at most one source
2. Resolve every source concurrently
3. Either return the primary document untouched (``operation=None``) or
4. Assemble a ProcessingRequest and await the engine
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from jsonld_cli.core.engine import Engine, get_engine
from jsonld_cli.core.exceptions import InputReadError
from jsonld_cli.core.request import assemble_request
from jsonld_cli.core.resolver import DEFAULT_ENCODING, resolve_source
from jsonld_cli.core.sources import STDIN

logger = logging.getLogger(__name__)

DOCUMENT = "document"


@dataclass(frozen=True)
class Invocation:
    """One command's inputs, options and engine operation.

    Attributes:
        operation: Engine operation, or ``None`` to pass the document through
        sources: Input name -> source descriptor (``None`` when not given).
                 Must contain ``document``.
        options: Invocation options keyed by flag name
        secondary: Name of the source handed to the engine as its second
                   document (``context`` or ``frame``), if any
        encoding: Text encoding for stdin and local files
    """

    operation: str | None
    sources: Mapping[str, str | None]
    options: Mapping[str, Any]
    secondary: str | None = None
    encoding: str = DEFAULT_ENCODING


def _check_single_stdin(sources: Mapping[str, str | None]) -> None:
    readers = [name for name, descriptor in sources.items() if descriptor == STDIN]
    if len(readers) > 1:
        raise InputReadError(
            "Standard input can only be read by one source",
            source=STDIN,
            inputs=readers,
        )


async def gather_inputs(
    sources: Mapping[str, str | None],
    encoding: str = DEFAULT_ENCODING,
    transport: Any = None,
) -> dict[str, Any]:
    """Resolve every named source concurrently.

    Returns:
        Input name -> parsed document (``None`` for sources not given)

    Raises:
        JsonLdCliError: The first failure among the sources
    """
    _check_single_stdin(sources)
    names = list(sources)
    documents = await asyncio.gather(
        *(resolve_source(sources[name], encoding, transport) for name in names)
    )
    return dict(zip(names, documents))


async def run_invocation(
    invocation: Invocation,
    engine: Engine | None = None,
    transport: Any = None,
) -> Any:
    """Resolve inputs and run the engine operation of one invocation.

    Args:
        invocation: What to resolve and run
        engine: Engine to call (defaults to :func:`get_engine`)
        transport: Optional httpx transport for URL sources

    Returns:
        The engine result, or the primary document for pass-through invocations
    """
    inputs = await gather_inputs(invocation.sources, invocation.encoding, transport)

    if invocation.operation is None:
        logger.debug("No engine operation requested; passing document through")
        return inputs[DOCUMENT]

    request = assemble_request(
        invocation.operation,
        inputs[DOCUMENT],
        invocation.options,
        secondary=inputs.get(invocation.secondary) if invocation.secondary else None,
    )
    engine = engine or get_engine()
    logger.info("Running %s with options %s", request.operation, dict(request.options))
    return await engine.run(request)


def execute_invocation(
    invocation: Invocation,
    engine: Engine | None = None,
    transport: Any = None,
) -> Any:
    """Run :func:`run_invocation` to completion on a fresh event loop."""
    return asyncio.run(run_invocation(invocation, engine=engine, transport=transport))
