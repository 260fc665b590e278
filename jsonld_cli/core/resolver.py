"""Input resolution: turn a source descriptor into a parsed JSON document.

Sources are read from stdin, a local file or an HTTP(S) URL depending on how
:func:`jsonld_cli.core.sources.classify_source` classifies the descriptor.
Blocking reads run in a worker thread so that several sources can be
resolved concurrently by :mod:`jsonld_cli.core.pipeline`.

Network access uses httpx. When httpx is not installed, URL sources fail
with :class:`NetworkUnavailableError` instead of being read as file paths.
The same client settings back :func:`document_loader`, which the engine uses
for remote contexts.
"""

import asyncio
import codecs
import json
import logging
import os
import sys
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

try:
    import httpx
except ImportError:
    httpx = None  # type: ignore

from jsonld_cli import __version__
from jsonld_cli.core.exceptions import (
    InputParseError,
    InputReadError,
    NetworkError,
    NetworkUnavailableError,
)
from jsonld_cli.core.sources import SourceKind, classify_source

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
ACCEPT_HEADER = "application/ld+json, application/json"


def network_available() -> bool:
    """Return True when an HTTP client library is installed."""
    return httpx is not None


def parse_document(text: str, source: str) -> Any:
    """Parse document text as JSON.

    Raises:
        InputParseError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InputParseError(
            f"Failed to parse JSON from {source}: {e.msg}",
            source=source,
            line_number=e.lineno,
            reason=str(e),
        ) from e


def _check_encoding(encoding: str, source: str) -> None:
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise InputReadError(
            f"Unknown encoding: {encoding}",
            source=source,
            encoding=encoding,
            reason=str(e),
        ) from e


READ_CHUNK_SIZE = 65536


def _stdin_fileno() -> int | None:
    try:
        return sys.stdin.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _read_stdin(encoding: str) -> str:
    fd = _stdin_fileno()
    if fd is None:
        stream = sys.stdin
        buffer = getattr(stream, "buffer", None)
        if buffer is None:
            return stream.read()
        return buffer.read().decode(encoding)

    # Raw reads on the descriptor: a reader thread left blocked here at exit
    # must not hold the lock of sys.stdin's buffered reader.
    chunks = []
    while True:
        chunk = os.read(fd, READ_CHUNK_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks).decode(encoding)


def _settle(future: asyncio.Future, result: Any, error: BaseException | None) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


async def run_in_daemon_thread(func: Callable[..., Any], *args: Any) -> Any:
    """Run a blocking call on a daemon thread and await its result.

    Unlike :func:`asyncio.to_thread`, the thread is not part of the loop's
    default executor, so ``asyncio.run`` does not wait for it on shutdown.
    A read that never finishes (stdin left open at a terminal) cannot delay
    reporting a failure from another source.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def target() -> None:
        result, error = None, None
        try:
            result = func(*args)
        except BaseException as e:
            error = e
        try:
            loop.call_soon_threadsafe(_settle, future, result, error)
        except RuntimeError:
            # Loop already closed: the invocation finished without this result.
            logger.debug("Discarding result of %s after loop shutdown", func.__name__)

    threading.Thread(target=target, name="jsonld-stdin", daemon=True).start()
    return await future


async def read_stdin(encoding: str = DEFAULT_ENCODING) -> Any:
    """Read stdin to end-of-stream and parse it as a JSON document."""
    _check_encoding(encoding, "-")
    logger.debug("Reading document from stdin (encoding=%s)", encoding)
    try:
        text = await run_in_daemon_thread(_read_stdin, encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(
            f"Failed to read stdin: {e}", source="-", encoding=encoding, reason=str(e)
        ) from e
    return parse_document(text, "-")


async def read_file(path: str, encoding: str = DEFAULT_ENCODING) -> Any:
    """Read a local file fully and parse it as a JSON document."""
    _check_encoding(encoding, path)
    logger.debug("Reading document from file %s (encoding=%s)", path, encoding)
    try:
        text = await asyncio.to_thread(Path(path).read_text, encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(
            f"Failed to read {path}: {e}", source=path, encoding=encoding, reason=str(e)
        ) from e
    return parse_document(text, path)


def build_async_client(transport: Any = None) -> "httpx.AsyncClient":
    """Create the HTTP client used for remote documents.

    No timeout is configured; a stalled server stalls the command.
    """
    return httpx.AsyncClient(
        timeout=None,
        follow_redirects=True,
        headers={
            "Accept": ACCEPT_HEADER,
            "User-Agent": f"jsonld-cli/{__version__}",
        },
        transport=transport,
    )


def build_client(transport: Any = None) -> "httpx.Client":
    """Create the blocking HTTP client used while the engine runs.

    Configured like :func:`build_async_client`.
    """
    return httpx.Client(
        timeout=None,
        follow_redirects=True,
        headers={
            "Accept": ACCEPT_HEADER,
            "User-Agent": f"jsonld-cli/{__version__}",
        },
        transport=transport,
    )


def document_loader(transport: Any = None) -> Callable[..., dict[str, Any]]:
    """Return a PyLD document loader that fetches remote contexts with httpx.

    The engine calls the loader from its worker thread for every ``@context``
    (and other remote references) given as a URL. Failures raise the same
    errors as URL sources so the cause can be reported as such.

    Args:
        transport: Optional httpx transport (used by tests)
    """

    def load(url: str, options: dict[str, Any] | None = None) -> dict[str, Any]:
        if not network_available():
            raise NetworkUnavailableError(
                "Cannot load remote context: httpx is not installed. "
                "Install it with: pip install httpx",
                url=url,
            )

        logger.debug("Loading remote context %s", url)
        with build_client(transport) as client:
            try:
                response = client.get(url)
            except httpx.HTTPError as e:
                raise NetworkError(f"Failed to fetch {url}: {e}", url=url, reason=str(e)) from e

        if str(response.status_code)[0] != "2":
            raise NetworkError(
                f"Bad status code {response.status_code} from {url}",
                status_code=response.status_code,
                url=url,
            )

        try:
            document = response.json()
        except ValueError as e:
            raise InputParseError(
                f"Failed to parse JSON from {url}: {e}", source=url, reason=str(e)
            ) from e

        return {
            "contentType": response.headers.get("content-type", "application/json"),
            "contextUrl": None,
            "documentUrl": str(response.url),
            "document": document,
        }

    return load


async def fetch_document(url: str, transport: Any = None) -> Any:
    """GET a remote JSON document.

    Args:
        url: An ``http://`` or ``https://`` URL
        transport: Optional httpx transport (used by tests)

    Returns:
        The parsed response body

    Raises:
        NetworkUnavailableError: If httpx is not installed
        NetworkError: On transport failure or a status outside 2xx
        InputParseError: If a 2xx body is not JSON
    """
    if not network_available():
        raise NetworkUnavailableError(
            "Cannot fetch remote document: httpx is not installed. "
            "Install it with: pip install httpx",
            url=url,
        )

    logger.debug("Fetching document from %s", url)
    async with build_async_client(transport) as client:
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise NetworkError(f"Failed to fetch {url}: {e}", url=url, reason=str(e)) from e

    # Only the leading digit of the status decides success.
    if str(response.status_code)[0] != "2":
        raise NetworkError(
            f"Bad status code {response.status_code} from {url}",
            status_code=response.status_code,
            url=url,
        )

    try:
        return response.json()
    except ValueError as e:
        raise InputParseError(
            f"Failed to parse JSON from {url}: {e}", source=url, reason=str(e)
        ) from e


async def resolve_source(
    descriptor: str | None,
    encoding: str = DEFAULT_ENCODING,
    transport: Any = None,
) -> Any:
    """Resolve a source descriptor to a parsed document.

    Args:
        descriptor: ``-`` for stdin, an HTTP(S) URL, or a file path. ``None``
                   means the source was not given and resolves to ``None``.
        encoding: Text encoding for stdin and local files
        transport: Optional httpx transport for URL sources

    Returns:
        The parsed document, or ``None`` when no descriptor was given
    """
    if descriptor is None:
        return None

    source = classify_source(descriptor)
    if source.kind is SourceKind.STDIN:
        return await read_stdin(encoding)
    if source.kind is SourceKind.NETWORK:
        return await fetch_document(source.value, transport=transport)
    return await read_file(source.value, encoding)
