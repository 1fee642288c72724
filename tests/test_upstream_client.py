"""
Unit tests for the upstream client: response classification and request shape.
"""

import asyncio
import json

import httpx
import pytest

from askproxy.agent.llm import Completion, UpstreamClient, UpstreamFailure, chat_payload, parse_completion_body
from askproxy.core.config import ModelParams
from askproxy.core.errors import ErrorKind

URL = "http://mock-ai.test/v1/chat/completions"
PARAMS = ModelParams("some/model", 100, 0.5)


def _complete(handler, payload=None, timeout=5.0):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = UpstreamClient(http, URL, "secret", timeout=timeout)
            return await client.complete(payload or chat_payload(PARAMS, "hi"))

    return asyncio.run(run())


class TestParseCompletionBody:
    """Tests for parse_completion_body()."""

    def test_content_is_trimmed(self) -> None:
        body = json.dumps({"choices": [{"message": {"content": "  answer \n"}}]})
        assert parse_completion_body(body) == Completion(text="answer")

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": []},
            {"choices": [{"message": {"content": None}}]},
            {"choices": [{"message": {"content": ""}}]},
            {"choices": [{"message": {}}]},
            {},
        ],
    )
    def test_missing_or_empty_content(self, body) -> None:
        result = parse_completion_body(json.dumps(body))
        assert isinstance(result, UpstreamFailure)
        assert result.kind is ErrorKind.EMPTY_CONTENT

    def test_error_field_wins_over_choices(self) -> None:
        body = {"error": {"message": "bad", "type": "x"}, "choices": [{"message": {"content": "ok"}}]}
        assert parse_completion_body(json.dumps(body)) == UpstreamFailure(ErrorKind.UPSTREAM_LOGIC, "bad")

    def test_string_error_field(self) -> None:
        result = parse_completion_body(json.dumps({"error": "quota exceeded"}))
        assert result == UpstreamFailure(ErrorKind.UPSTREAM_LOGIC, "quota exceeded")

    def test_unparsable_body(self) -> None:
        result = parse_completion_body(b"not json")
        assert isinstance(result, UpstreamFailure)
        assert result.kind is ErrorKind.MALFORMED_UPSTREAM

    def test_non_object_body(self) -> None:
        assert parse_completion_body("[1]").kind is ErrorKind.MALFORMED_UPSTREAM

    def test_nan_in_body_is_malformed(self) -> None:
        body = '{"choices": [{"message": {"content": "ok"}}], "usage": {"cost": NaN}}'
        assert parse_completion_body(body).kind is ErrorKind.MALFORMED_UPSTREAM


class TestUpstreamClient:
    """Tests for UpstreamClient.complete()."""

    def test_sends_one_authorized_post(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"choices": [{"message": {"content": "hello"}}]})

        result = _complete(handler)
        assert result == Completion(text="hello")
        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == URL
        assert seen[0].headers["authorization"] == "Bearer secret"
        assert json.loads(seen[0].content) == {
            "model": "some/model",
            "messages": [{"role": "user", "content": "hi"}],
            "max_tokens": 100,
            "temperature": 0.5,
        }

    def test_http_error_carries_status_and_body(self) -> None:
        result = _complete(lambda request: httpx.Response(503, text="overloaded"))
        assert result == UpstreamFailure(ErrorKind.UPSTREAM_HTTP, "overloaded", status=503)

    def test_server_error_is_not_retried(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, text="")

        _complete(handler)
        assert len(calls) == 1

    def test_timeout_is_classified(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out")

        assert _complete(handler).kind is ErrorKind.TIMEOUT

    def test_transport_error_is_classified(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("peer closed connection")

        result = _complete(handler)
        assert result.kind is ErrorKind.NETWORK
        assert result.detail == "peer closed connection"

    def test_redirect_is_followed(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if len(seen) == 1:
                return httpx.Response(307, headers={"Location": URL + "/v2"})
            return httpx.Response(200, json={"choices": [{"message": {"content": "moved"}}]})

        assert _complete(handler) == Completion(text="moved")
        assert len(seen) == 2
        assert seen[1].method == "POST"
        assert str(seen[1].url) == URL + "/v2"
        assert json.loads(seen[1].content) == json.loads(seen[0].content)

    def test_slow_response_hits_total_deadline(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json={"choices": [{"message": {"content": "late"}}]})

        result = _complete(handler, timeout=0.05)
        assert isinstance(result, UpstreamFailure)
        assert result.kind is ErrorKind.TIMEOUT


def test_chat_payload_accepts_content_parts() -> None:
    parts = [{"type": "text", "text": "describe"}, {"type": "image_url", "image_url": {"url": "data:image/png;base64,AA"}}]
    payload = chat_payload(PARAMS, parts)
    assert payload["messages"][0]["content"] is parts
    assert payload["model"] == "some/model"
