"""JSON-LD engine binding.

The transformation algorithms themselves come from PyLD. This module defines
the :class:`Engine` protocol the pipeline talks to and the PyLD-backed
implementation used by the commands.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

from pyld import jsonld

from jsonld_cli.core.exceptions import JsonLdCliError, ProcessingError
from jsonld_cli.core.request import ProcessingRequest
from jsonld_cli.core.resolver import document_loader

logger = logging.getLogger(__name__)

NQUADS_MEDIA_TYPE = "application/n-quads"
NORMALIZE_ALGORITHM = "URDNA2015"


class Engine(Protocol):
    """Protocol for JSON-LD processors.

    Implementations receive a fully assembled request and return one result
    value: a JSON structure for most operations, a string when an N-Quads
    serialization was requested.
    """

    async def run(self, request: ProcessingRequest) -> Any:
        """Execute ``request.operation`` and return its result.

        Raises:
            ProcessingError: If the processor rejects the request
        """
        ...


def _cli_cause(error: BaseException) -> JsonLdCliError | None:
    """Find a JsonLdCliError in the cause chain of a PyLD error."""
    seen = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, JsonLdCliError):
            return current
        seen.add(id(current))
        current = current.__cause__ or getattr(current, "cause", None) or current.__context__
    return None


class PyLDEngine:
    """Engine implementation backed by ``pyld.jsonld``.

    PyLD is synchronous; each call runs in a worker thread so it can be
    awaited like the input reads. Remote contexts are loaded through
    ``loader`` (an httpx-backed loader unless one is given).
    """

    def __init__(self, loader: Callable[..., dict[str, Any]] | None = None) -> None:
        self.loader = loader or document_loader()

    async def run(self, request: ProcessingRequest) -> Any:
        try:
            return await asyncio.to_thread(self._call, request)
        except JsonLdCliError:
            raise
        except Exception as e:
            # A failed remote context load is reported as the network or
            # parse error the loader raised.
            cause = _cli_cause(e)
            if cause is not None:
                raise cause
            raise ProcessingError(
                f"{request.operation} failed: {e}",
                operation=request.operation,
                reason=type(e).__name__,
            ) from e

    def _call(self, request: ProcessingRequest) -> Any:
        options = dict(request.options)
        options["documentLoader"] = self.loader
        if options.get("format") == "application/nquads":
            options["format"] = NQUADS_MEDIA_TYPE

        operation = request.operation
        if operation == "toRDF":
            return jsonld.to_rdf(request.document, options)
        if operation == "compact":
            return jsonld.compact(request.document, request.secondary, options)
        if operation == "expand":
            return jsonld.expand(request.document, options)
        if operation == "flatten":
            return jsonld.flatten(request.document, request.secondary, options)
        if operation == "frame":
            return jsonld.frame(request.document, request.secondary, options)
        if operation == "normalize":
            options.setdefault("algorithm", NORMALIZE_ALGORITHM)
            return jsonld.normalize(request.document, options)
        raise ProcessingError(f"Unsupported operation: {operation}", operation=operation)


def get_engine() -> Engine:
    """Return the engine used by the commands."""
    return PyLDEngine()
