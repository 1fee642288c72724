"""
Upstream LLM client for OpenAI-compatible chat completions.

One POST per call, never retried. Every outcome is returned as a value:
Completion on success, UpstreamFailure (classified by ErrorKind) otherwise.
The response body is checked once here so callers never dig through raw JSON.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from askproxy.agent.contract import strict_json_loads
from askproxy.core.config import ModelParams
from askproxy.core.errors import ErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Completion:
    """Successful completion: non-empty, trimmed text."""

    text: str


@dataclass(frozen=True)
class UpstreamFailure:
    """Classified upstream failure. status is the provider's HTTP status when there was one."""

    kind: ErrorKind
    detail: str = ""
    status: int | None = None


def chat_payload(params: ModelParams, content: str | list[dict[str, Any]]) -> dict[str, Any]:
    """OpenAI chat-completions body with a single user message."""
    return {
        "model": params.model,
        "messages": [{"role": "user", "content": content}],
        "max_tokens": params.max_tokens,
        "temperature": params.temperature,
    }


def parse_completion_body(raw: bytes | str) -> Completion | UpstreamFailure:
    """Interpret a 2xx provider body: malformed JSON, a logical error field, empty content, or text."""
    try:
        data = strict_json_loads(raw)
    except ValueError as e:
        return UpstreamFailure(ErrorKind.MALFORMED_UPSTREAM, f"Invalid JSON in provider response: {e}")
    if not isinstance(data, dict):
        return UpstreamFailure(ErrorKind.MALFORMED_UPSTREAM, "Provider response is not a JSON object")

    error = data.get("error")
    if error:
        if isinstance(error, dict):
            message = error.get("message") or json.dumps(error)
            logger.error("[llm:parse] provider error in body type=%s msg=%s", error.get("type"), message)
        else:
            message = str(error)
            logger.error("[llm:parse] provider error in body msg=%s", message)
        return UpstreamFailure(ErrorKind.UPSTREAM_LOGIC, message)

    choices = data.get("choices") or []
    content = None
    if choices and isinstance(choices[0], dict):
        msg = choices[0].get("message") or {}
        if isinstance(msg, dict):
            content = msg.get("content")
    if not isinstance(content, str) or not content.strip():
        logger.warning("[llm:parse] response successful, but content was null or empty")
        return UpstreamFailure(ErrorKind.EMPTY_CONTENT, "content was null or empty")
    return Completion(text=content.strip())


class UpstreamClient:
    """
    Thin wrapper over a shared httpx.AsyncClient bound to one provider URL and key.
    The AsyncClient (connection pool) is owned by the application, not by this object.
    """

    def __init__(self, http_client: httpx.AsyncClient, api_url: str, api_key: str, timeout: float) -> None:
        self._http = http_client
        self._api_url = api_url
        self._api_key = api_key
        self._timeout = timeout

    async def complete(self, payload: dict[str, Any]) -> Completion | UpstreamFailure:
        """Send one chat-completions request and classify the result."""
        model = payload.get("model", "")
        preview = json.dumps(payload)[:200]
        logger.info("[llm:complete] IN  model=%s payload=%s...", model, preview)
        headers = {"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"}
        try:
            # httpx timeouts are per phase; wait_for bounds the whole call.
            response = await asyncio.wait_for(
                self._http.post(
                    self._api_url,
                    json=payload,
                    headers=headers,
                    timeout=self._timeout,
                    follow_redirects=True,
                ),
                timeout=self._timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error("[llm:complete] timeout model=%s: %s", model, e)
            return UpstreamFailure(ErrorKind.TIMEOUT, str(e) or "timed out")
        except httpx.TransportError as e:
            logger.error("[llm:complete] transport failure model=%s: %s", model, e)
            return UpstreamFailure(ErrorKind.NETWORK, str(e) or type(e).__name__)

        logger.info("[llm:complete] model=%s responded with status %d", model, response.status_code)
        if not response.is_success:
            body = response.text
            logger.error("[llm:complete] API error (%d): %s", response.status_code, body[:500])
            return UpstreamFailure(ErrorKind.UPSTREAM_HTTP, body, status=response.status_code)

        result = parse_completion_body(response.content)
        if isinstance(result, Completion):
            logger.info("[llm:complete] OUT model=%s response_len=%d", model, len(result.text))
        return result
