"""Tests for pixelprompt.core.remote_client — the outbound model call.

Requests are served by ``httpx.MockTransport``; nothing leaves the process.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from pixelprompt.core.exceptions import RemoteServiceError, UnknownGenerationError
from pixelprompt.core.remote_client import RemoteModelClient


def _complete(client: RemoteModelClient, prompt: str):
    async def _go():
        async with client.http_client:
            return await client.complete(prompt)

    return asyncio.run(_go())


def _client(transport, **kwargs) -> RemoteModelClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return RemoteModelClient(
        http_client,
        "https://models.test/chat/completions",
        "test/model",
        **kwargs,
    )


class TestRequestShape:
    def test_posts_chat_payload(self, transport):
        _complete(_client(transport), "a red fox")

        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://models.test/chat/completions"
        assert transport.last_json() == {
            "model": "test/model",
            "messages": [{"role": "user", "content": "a red fox"}],
        }
        assert request.headers["content-type"] == "application/json"

    def test_auth_headers_when_configured(self, transport):
        _complete(_client(transport, api_key="k", customer_id="me@example.com"), "x")
        headers = transport.requests[0].headers
        assert headers["authorization"] == "Bearer k"
        assert headers["customerid"] == "me@example.com"

    def test_auth_headers_omitted_when_unset(self, transport):
        _complete(_client(transport), "x")
        headers = transport.requests[0].headers
        assert "authorization" not in headers
        assert "customerid" not in headers

    def test_from_config(self, test_config):
        http_client = httpx.AsyncClient()
        client = RemoteModelClient.from_config(http_client, test_config)
        assert client.endpoint_url == test_config.endpoint_url
        assert client.model == "test/model"
        assert client.api_key == "test-key"
        assert client.customer_id == "tester@example.com"
        asyncio.run(http_client.aclose())


class TestResponses:
    def test_returns_parsed_json(self, transport):
        transport.payload = {"data": [{"url": "https://a/b.png"}]}
        assert _complete(_client(transport), "x") == {"data": [{"url": "https://a/b.png"}]}

    def test_non_2xx_raises_with_status_and_body(self, transport):
        transport.status_code = 502
        transport.text = "upstream exploded"
        with pytest.raises(RemoteServiceError) as exc_info:
            _complete(_client(transport), "x")
        assert exc_info.value.status_code == 502
        assert exc_info.value.body == "upstream exploded"
        assert str(exc_info.value) == "AI service returned 502: upstream exploded"
        assert len(transport.requests) == 1  # no retry

    def test_network_fault_raises(self, transport):
        transport.error = httpx.ConnectError("connection refused")
        with pytest.raises(RemoteServiceError) as exc_info:
            _complete(_client(transport), "x")
        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.body

    def test_non_json_success_body_is_unknown_error(self, transport):
        transport.text = "<html>hello</html>"
        with pytest.raises(UnknownGenerationError) as exc_info:
            _complete(_client(transport), "x")
        assert not isinstance(exc_info.value, RemoteServiceError)
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert len(transport.requests) == 1
