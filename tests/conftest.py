"""Shared pytest fixtures for jsondedup tests."""
from __future__ import annotations

import io
from typing import Callable

import pytest

from jsondedup.dedup.engine import dedup
from jsondedup.document.parser import parse
from jsondedup.document.writer import write


@pytest.fixture()
def tsv_stream() -> Callable[..., io.BytesIO]:
    """Return a factory that builds an in-memory byte stream from rows."""

    def _make(rows: list[str], trailing_newline: bool = True) -> io.BytesIO:
        data = "\n".join(rows)
        if rows and trailing_newline:
            data += "\n"
        return io.BytesIO(data.encode("utf-8"))

    return _make


@pytest.fixture()
def dedup_json() -> Callable[[str], str]:
    """parse → dedup → write, skipping the TSV layer."""

    def _run(text: str) -> str:
        return write(dedup(parse(text)))

    return _run


@pytest.fixture()
def sample_rows() -> list[str]:
    return [
        '{"id":1,"a":null,"a":"x","b":""}',
        '{"id":2,"user.name":"ann","user.age":31}',
        '{"id":3,"tags":[1,1,{"t":null,"t":"k"}]}',
        '{"id":4,"big":9223372036854775808,"small":-9223372036854775808}',
    ]
