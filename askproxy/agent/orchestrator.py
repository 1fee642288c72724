"""
Query orchestrator: validate → (vision → contract gate → reasoning | direct) → result.

Each step returns a value; the first Failure ends the request. In the vision
path the reasoning call sits after the contract gate's early return, so it can
never run for a description that did not parse as JSON.
"""

import logging
from dataclasses import dataclass

from askproxy.agent.contract import validate_description
from askproxy.agent.llm import Completion, UpstreamClient, UpstreamFailure, chat_payload
from askproxy.agent.prompts import build_reasoning_prompt, build_vision_prompt
from askproxy.core.config import ModelParams, Settings
from askproxy.core.errors import ErrorKind, Failure, upstream_status_to_caller
from askproxy.schemas.query import QueryRequest
from askproxy.services.request_validator import validate_query

logger = logging.getLogger(__name__)

CONFIG_MISSING_MESSAGE = "Internal Server Error: AI provider configuration missing"


@dataclass(frozen=True)
class Stage:
    """Caller-facing wording for failures of one upstream call."""

    name: str
    http_failed: str  # "<prefix> (<status>): <body>"
    logic_error: str  # "<prefix>: <provider message>"
    empty: str
    timed_out: str
    transport: str  # "<prefix>: <detail>"


VISION_STAGE = Stage(
    name="vision",
    http_failed="AI Vision Step Failed",
    logic_error="AI Vision Step Error",
    empty="AI description content was empty",
    timed_out="Request to Vision AI timed out",
    transport="Failed during image analysis step",
)

REASONING_STAGE = Stage(
    name="reasoning",
    http_failed="AI Target Step Failed",
    logic_error="AI Target Step Error",
    empty="AI final answer content was empty",
    timed_out="Request to Target AI timed out",
    transport="Failed during final answer generation step",
)

DIRECT_STAGE = Stage(
    name="direct",
    http_failed="Direct AI Query Failed",
    logic_error="Direct AI Query Error",
    empty="Direct AI response content was empty",
    timed_out="Request to AI timed out",
    transport="Failed processing direct AI query",
)


def stage_failure(stage: Stage, failure: UpstreamFailure) -> Failure:
    """Map a classified upstream failure to the caller-facing Failure for this stage."""
    kind = failure.kind
    if kind is ErrorKind.UPSTREAM_HTTP:
        status = failure.status or 502
        message = f"{stage.http_failed} ({status}): {failure.detail or 'Request failed'}"
        return Failure(kind=kind, message=message, status=upstream_status_to_caller(status))
    if kind is ErrorKind.UPSTREAM_LOGIC:
        return Failure.of(kind, f"{stage.logic_error}: {failure.detail}")
    if kind is ErrorKind.EMPTY_CONTENT:
        return Failure.of(kind, stage.empty)
    if kind is ErrorKind.TIMEOUT:
        return Failure.of(kind, stage.timed_out)
    if kind in (ErrorKind.NETWORK, ErrorKind.MALFORMED_UPSTREAM):
        return Failure.of(kind, f"{stage.transport}: {failure.detail}")
    return Failure.of(ErrorKind.INTERNAL, f"{stage.transport}: {failure.detail}")


def looks_like_image_data_url(value: str) -> bool:
    return value.startswith("data:image/")


class QueryOrchestrator:
    """Runs one /query request against the configured providers."""

    def __init__(self, settings: Settings, client: UpstreamClient) -> None:
        self._settings = settings
        self._client = client

    async def run(self, request: QueryRequest) -> Completion | Failure:
        validated = validate_query(request)
        if isinstance(validated, Failure):
            return validated
        if not self._settings.provider_configured:
            logger.error("[orchestrator:run] CUSTOM_AI_API_URL or CUSTOM_AI_API_KEY not set")
            return Failure.of(ErrorKind.CONFIG, CONFIG_MISSING_MESSAGE)

        text = validated.text or ""
        if validated.image:
            return await self._vision_path(text, validated.image)
        return await self._direct_path(text)

    async def _call(self, stage: Stage, params: ModelParams, content) -> Completion | Failure:
        logger.info("[orchestrator:%s] calling model=%s", stage.name, params.model)
        result = await self._client.complete(chat_payload(params, content))
        if isinstance(result, UpstreamFailure):
            failure = stage_failure(stage, result)
            logger.error("[orchestrator:%s] failed kind=%s status=%d", stage.name, failure.kind.value, failure.status)
            return failure
        return result

    async def _direct_path(self, text: str) -> Completion | Failure:
        logger.info("[orchestrator:direct] no image; performing direct query")
        return await self._call(DIRECT_STAGE, self._settings.direct, text)

    async def _vision_path(self, text: str, image: str) -> Completion | Failure:
        logger.info("[orchestrator:vision] image detected; starting two-step process")
        if not looks_like_image_data_url(image):
            logger.warning("[orchestrator:vision] image is not a data:image/ URL; proceeding anyway")

        prompt, image_part = build_vision_prompt(text, image, self._settings.host_os)
        vision = await self._call(
            VISION_STAGE, self._settings.vision, [{"type": "text", "text": prompt}, image_part]
        )
        if isinstance(vision, Failure):
            return vision

        description = validate_description(vision.text)
        if isinstance(description, Failure):
            return description
        logger.info("[orchestrator:vision] description validated (length: %d)", len(description))

        reasoning_prompt = build_reasoning_prompt(text, description, self._settings.host_os)
        return await self._call(REASONING_STAGE, self._settings.reasoning, reasoning_prompt)
