"""Tests for outbound request execution."""

import asyncio

import httpx
import pytest

from core.exceptions import RelayReadError, RequestConstructionError, TransportError
from core.request_types import PreparedRequest
from core.resolver import resolve_target
from core.results import Success
from services.upstream import UpstreamClient


class FailingStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b"partial"
        raise httpx.ReadError("connection reset by peer")


def _prepared(method="GET", path="/localhost:8181", body=b"", headers=None):
    return PreparedRequest(method, resolve_target(method, path), headers or {}, body)


def _forward(handler, prepared, logger, timeout=5.0):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await UpstreamClient(client, timeout=timeout).forward(prepared, logger)

    return asyncio.run(run())


class TestForward:
    def test_relays_status_and_body(self, logger):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, text="created")

        result = _forward(handler, _prepared("POST", body=b'{"a": 1}'), logger)

        assert result == Success(201, b"created")
        assert seen[0].method == "POST"
        assert seen[0].url.host == "localhost"
        assert seen[0].url.port == 8181
        assert seen[0].content == b'{"a": 1}'
        assert logger.forwards == [("POST", "localhost")]

    def test_forwards_prepared_headers_only(self, logger):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200)

        _forward(handler, _prepared(headers={"x-trace": "1"}), logger)

        assert seen[0].headers["x-trace"] == "1"
        assert "origin" not in seen[0].headers

    def test_transport_failure(self, logger):
        def handler(request):
            raise httpx.ConnectError("Name or service not known")

        with pytest.raises(TransportError) as exc_info:
            _forward(handler, _prepared(path="/invalid-request", body=b"data"), logger)

        err = exc_info.value
        assert err.code == 422
        assert err.message == "Get http://invalid-request: Name or service not known"
        assert err.detail == {
            "body": b"data",
            "method": "GET",
            "requestedURL": "http://invalid-request",
            "response": None,
        }

    def test_timeout_is_transport_failure(self, logger):
        def handler(request):
            raise httpx.ReadTimeout("timed out")

        with pytest.raises(TransportError) as exc_info:
            _forward(handler, _prepared(), logger)

        assert exc_info.value.code == 422

    def test_relay_read_failure_uses_downstream_status(self, logger):
        def handler(request):
            return httpx.Response(503, stream=FailingStream())

        with pytest.raises(RelayReadError) as exc_info:
            _forward(handler, _prepared(), logger)

        err = exc_info.value
        assert err.code == 503
        assert err.detail["responseCode"] == 503
        assert err.detail["requestedURL"] == "http://localhost:8181"
        assert isinstance(err.detail["response"], httpx.Response)


class TestBuild:
    def test_invalid_method_token(self):
        client = UpstreamClient(httpx.AsyncClient())

        with pytest.raises(RequestConstructionError) as exc_info:
            client.build(_prepared("GET/", path="/localhost"))

        err = exc_info.value
        assert err.code == 412
        assert err.message == 'invalid method "GET/"'
        assert err.detail == {"body": b"", "method": "GET/", "requestedURL": "http://localhost"}

    def test_builds_request_with_body(self):
        client = UpstreamClient(httpx.AsyncClient(), timeout=2.0)

        request = client.build(_prepared("PUT", body=b"payload"))

        assert request.method == "PUT"
        assert request.content == b"payload"
        assert request.extensions["timeout"]["read"] == 2.0
