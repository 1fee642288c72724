"""
Shared fixtures: a scripted fake AI provider (httpx.MockTransport) and a
TestClient with settings and the upstream HTTP client overridden.
"""

import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from askproxy.api.dependencies import get_http_client
from askproxy.core.config import Settings, get_settings
from askproxy.main import app

PROVIDER_URL = "http://mock-ai.test/v1/chat/completions"
WORKER_KEY = "test-worker-key"


def completion(content: Any) -> dict[str, Any]:
    """OpenAI-style completion body with one choice."""
    return {
        "choices": [
            {"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


class FakeProvider:
    """Replies to upstream POSTs in order and records each request body."""

    def __init__(self) -> None:
        self.replies: list[httpx.Response | Exception] = []
        self.requests: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []

    def reply(self, body: Any = None, status: int = 200, text: str | None = None) -> "FakeProvider":
        if text is not None:
            self.replies.append(httpx.Response(status, text=text))
        else:
            self.replies.append(httpx.Response(status, json=body))
        return self

    def reply_content(self, content: Any) -> "FakeProvider":
        return self.reply(completion(content))

    def fail_with(self, exc: Exception) -> "FakeProvider":
        self.replies.append(exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        self.headers.append(request.headers)
        if not self.replies:
            raise AssertionError("unexpected upstream call")
        nxt = self.replies.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def models_called(self) -> list[str]:
        return [r["model"] for r in self.requests]


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        ai_api_url=PROVIDER_URL,
        ai_api_key="provider-key",
        worker_api_key=WORKER_KEY,
        profile_db_path=tmp_path / "profiles.db",
    )


@pytest.fixture
def client(settings: Settings, provider: FakeProvider):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = lambda: http_client
    yield TestClient(app, headers={"Authorization": f"Bearer {WORKER_KEY}"})
    app.dependency_overrides.clear()
