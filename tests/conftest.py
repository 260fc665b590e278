"""Shared test fixtures and Hypothesis strategies for jsonld-cli tests."""

import io
import json
import os
import sys
import threading
from pathlib import Path
from typing import Any

import pytest
from hypothesis import strategies as st
from hypothesis.strategies import composite

from jsonld_cli.core.request import ProcessingRequest


# JSON scalars that survive a json.dumps/json.loads round trip unchanged
json_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-(2**53), max_value=2**53),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(max_size=20),
)


@composite
def json_documents(draw: st.DrawFn) -> Any:
    """Generate random JSON object documents.

    Documents are always objects at the top level, nested up to a few levels
    with arrays and objects, like JSON-LD node objects.

    Example:
        >>> from hypothesis import given
        >>> @given(json_documents())
        ... def test_something(doc):
        ...     assert isinstance(doc, dict)
    """
    values = st.recursive(
        json_scalars,
        lambda children: st.one_of(
            st.lists(children, max_size=4),
            st.dictionaries(st.text(max_size=10), children, max_size=4),
        ),
        max_leaves=12,
    )
    return draw(st.dictionaries(st.text(max_size=10), values, max_size=5))


SAMPLE_DOCUMENT = {
    "@context": {"name": "http://schema.org/name"},
    "@id": "http://example.org/alice",
    "name": "Alice",
}


class RecordingEngine:
    """Engine double that records requests and returns a fixed result."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = {"result": True} if result is None else result
        self.error = error
        self.requests: list[ProcessingRequest] = []

    async def run(self, request: ProcessingRequest) -> Any:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def engine(monkeypatch: pytest.MonkeyPatch) -> RecordingEngine:
    """Replace the engine used by the pipeline with a RecordingEngine."""
    recording = RecordingEngine()
    monkeypatch.setattr("jsonld_cli.core.pipeline.get_engine", lambda: recording)
    return recording


@pytest.fixture
def feed_stdin(monkeypatch: pytest.MonkeyPatch):
    """Return a function that replaces stdin with the given text."""

    def feed(text: str, encoding: str = "utf-8") -> None:
        stream = io.TextIOWrapper(io.BytesIO(text.encode(encoding)), encoding=encoding)
        monkeypatch.setattr(sys, "stdin", stream)

    return feed


@pytest.fixture
def stdin_pipe(monkeypatch: pytest.MonkeyPatch):
    """Replace stdin with the read end of an OS pipe and yield the write end.

    The write end stays open until the test closes it, like a terminal that
    never sends end-of-file.
    """
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb")
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(reader))
    yield writer
    if not writer.closed:
        writer.close()
    for thread in threading.enumerate():
        if thread.name == "jsonld-stdin":
            thread.join(timeout=5)
    reader.close()


@pytest.fixture
def write_document(tmp_path: Path):
    """Return a function that writes a document to a file and returns its path."""

    def write(document: Any, name: str = "doc.jsonld") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)

    return write
