"""Tests for the schema fragment fetcher."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from sportsdata_generator.fetcher import FetchError, SchemaFetcher
from sportsdata_generator.logging import redact_url


def _fetcher(handler) -> SchemaFetcher:  # type: ignore[no-untyped-def]
    return SchemaFetcher(transport=httpx.MockTransport(handler))


def test_fetch_returns_parsed_document() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v3/scores.json"
        return httpx.Response(200, json={"basePath": "/v3/nba/scores", "paths": {}})

    document = asyncio.run(_fetcher(handler).fetch("https://example.test/v3/scores.json"))
    assert document == {"basePath": "/v3/nba/scores", "paths": {}}


def test_non_200_raises_fetch_error() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(404, text="missing"))
    with pytest.raises(FetchError, match="404"):
        asyncio.run(fetcher.fetch("https://example.test/v3/scores.json"))


def test_invalid_json_raises_fetch_error() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200, text="<html></html>"))
    with pytest.raises(FetchError, match="not valid JSON"):
        asyncio.run(fetcher.fetch("https://example.test/v3/scores.json"))


def test_non_object_json_raises_fetch_error() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200, json=["a", "b"]))
    with pytest.raises(FetchError, match="not a JSON object"):
        asyncio.run(fetcher.fetch("https://example.test/v3/scores.json"))


def test_transport_error_raises_fetch_error_with_redacted_url() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = _fetcher(handler)
    with pytest.raises(FetchError) as excinfo:
        asyncio.run(fetcher.fetch("https://example.test/v3/scores.json?key=secret123"))
    assert "connection refused" in str(excinfo.value)
    assert "secret123" not in str(excinfo.value)


def test_redact_url_masks_credential_parameters() -> None:
    assert (
        redact_url("https://example.test/scores.json?key=abc&season=2024")
        == "https://example.test/scores.json?key=REDACTED&season=2024"
    )
    assert redact_url("https://example.test/scores.json") == "https://example.test/scores.json"


def test_redact_url_masks_query_of_unparseable_url() -> None:
    redacted = redact_url("https://example.test:notaport/scores.json?key=abc")
    assert "abc" not in redacted
    assert redacted == "https://example.test:notaport/scores.json?REDACTED"
