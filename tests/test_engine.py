"""Tests for the PyLD engine binding.

These run real PyLD operations on small documents that need no remote
contexts.
"""

import asyncio
import json

import httpx
import pytest

from jsonld_cli.core import resolver
from jsonld_cli.core.engine import PyLDEngine
from jsonld_cli.core.exceptions import (
    NetworkError,
    NetworkUnavailableError,
    ProcessingError,
)
from jsonld_cli.core.request import assemble_request
from jsonld_cli.core.resolver import document_loader

DOCUMENT = {
    "@context": {"name": "http://schema.org/name"},
    "@id": "http://example.org/alice",
    "name": "Alice",
}
NQUADS = '<http://example.org/alice> <http://schema.org/name> "Alice" .\n'


def _run(operation, document=DOCUMENT, secondary=None, loader=None, **options):
    request = assemble_request(operation, document, options, secondary=secondary)
    return asyncio.run(PyLDEngine(loader).run(request))


def test_expand():
    assert _run("expand") == [
        {
            "@id": "http://example.org/alice",
            "http://schema.org/name": [{"@value": "Alice"}],
        }
    ]


def test_compact():
    context = {"@context": {"n": "http://schema.org/name"}}
    result = _run("compact", secondary=context)
    assert result["n"] == "Alice"
    assert result["@id"] == "http://example.org/alice"


def test_compact_without_context_fails():
    with pytest.raises(ProcessingError) as exc_info:
        _run("compact", secondary=None)
    assert exc_info.value.context["operation"] == "compact"
    assert exc_info.value.__cause__ is not None


def test_to_rdf_nquads():
    assert _run("toRDF", format="application/nquads") == NQUADS


def test_normalize_nquads():
    assert _run("normalize", format="application/nquads") == NQUADS


def test_flatten_without_context():
    result = _run("flatten")
    assert result == [
        {
            "@id": "http://example.org/alice",
            "http://schema.org/name": [{"@value": "Alice"}],
        }
    ]


def _context_server(status_code=200, body=None):
    """Transport serving one context document and recording requested URLs."""
    requested = []
    if body is None:
        body = json.dumps({"@context": {"name": "http://schema.org/name"}}).encode()

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(
            status_code, content=body, headers={"content-type": "application/ld+json"}
        )

    return httpx.MockTransport(handler), requested


class TestRemoteContexts:
    """Contexts given as URLs are fetched through the httpx loader.

    Each test uses its own URL since PyLD caches resolved contexts.
    """

    def test_expand_with_remote_context(self):
        url = "https://contexts.example.org/expand.jsonld"
        transport, requested = _context_server()
        document = {"@context": url, "@id": "http://example.org/alice", "name": "Alice"}

        result = _run("expand", document=document, loader=document_loader(transport))

        assert requested == [url]
        assert result == [
            {
                "@id": "http://example.org/alice",
                "http://schema.org/name": [{"@value": "Alice"}],
            }
        ]

    def test_remote_context_bad_status(self):
        url = "https://contexts.example.org/missing.jsonld"
        transport, _ = _context_server(status_code=404, body=b"not found")
        document = {"@context": url, "name": "Alice"}

        with pytest.raises(NetworkError) as exc_info:
            _run("expand", document=document, loader=document_loader(transport))
        assert exc_info.value.status_code == 404
        assert exc_info.value.url == url

    def test_remote_context_without_httpx(self, monkeypatch):
        url = "https://contexts.example.org/offline.jsonld"
        monkeypatch.setattr(resolver, "httpx", None)
        document = {"@context": url, "name": "Alice"}

        with pytest.raises(NetworkUnavailableError):
            _run("expand", document=document, loader=document_loader())

    def test_default_loader_is_httpx_backed(self):
        assert PyLDEngine().loader.__qualname__ == document_loader().__qualname__
