"""
API handlers: read request data, call services, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Marshalling and
outcome-to-HTTP mapping. Lives in the API layer so services stay free of
FastAPI/HTTP types.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from askproxy.agent.llm import Completion
from askproxy.agent.orchestrator import QueryOrchestrator
from askproxy.core.errors import Failure, ProfileStoreError
from askproxy.core.profile_db import upsert_profile
from askproxy.schemas.profile import SyncResponse, SyncUserRequest
from askproxy.schemas.query import ErrorEnvelope, QueryRequest, QueryResponse

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


class BadRequest(Exception):
    """Request body could not be read as the expected JSON."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def error_response(message: str, status: int = 500) -> JSONResponse:
    """Uniform {success: false, message} body. Logged server-side."""
    logger.error("Error Response (%d): %s", status, message)
    return JSONResponse(status_code=status, content=ErrorEnvelope(message=message).model_dump())


def sync_response(message: str = "User profile synced successfully.") -> JSONResponse:
    return JSONResponse(status_code=200, content=SyncResponse(message=message).model_dump())


def assemble(outcome: Completion | Failure) -> JSONResponse:
    """Terminal pipeline state to HTTP: Completion → 200 {ai_text}, Failure → its status and envelope."""
    if isinstance(outcome, Failure):
        return error_response(outcome.message, outcome.status)
    return JSONResponse(status_code=200, content=QueryResponse(ai_text=outcome.text).model_dump())


async def read_json_body(request: Request) -> dict[str, Any]:
    """
    Require a JSON content type and a JSON object body.
    Raises BadRequest with the caller-facing message otherwise.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != JSON_MEDIA_TYPE:
        raise BadRequest("Bad Request: Expected JSON")
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error("[handlers:read_json_body] failed to parse JSON for %s: %s", request.url.path, e)
        raise BadRequest(f"Bad Request: Invalid JSON - {e}") from e
    if not isinstance(payload, dict):
        raise BadRequest("Bad Request: Invalid JSON - expected an object")
    return payload


async def handle_query(request: Request, orchestrator: QueryOrchestrator) -> JSONResponse:
    """
    Parse the /query body, run the pipeline, assemble the response.
    Any fault the pipeline did not classify becomes a generic 500 envelope.
    """
    try:
        payload = await read_json_body(request)
        try:
            query = QueryRequest.model_validate(payload)
        except ValidationError as e:
            return error_response(f"Bad Request: Invalid query payload - {e.error_count()} invalid field(s)", 400)
        outcome = await orchestrator.run(query)
    except BadRequest as e:
        return error_response(e.message, 400)
    except Exception:
        logger.exception("[handlers:handle_query] unhandled exception in query pipeline")
        return error_response("Internal Server Error", 500)
    return assemble(outcome)


async def handle_sync_user(request: Request, db_path: Path) -> JSONResponse:
    """Validate the profile and upsert it; store failures map to 500."""
    try:
        payload = await read_json_body(request)
        body = SyncUserRequest.model_validate(payload)
    except BadRequest as e:
        return error_response(e.message, 400)
    except ValidationError as e:
        return error_response(f"Bad Request: Invalid profile payload - {e.error_count()} invalid field(s)", 400)

    profile = body.profile
    if profile is None or not profile.id or not profile.login:
        logger.warning("[handlers:handle_sync_user] sync payload missing required fields (id, login)")
        return error_response("Bad Request: Missing profile fields (id, login)", 400)

    logger.info("[handlers:handle_sync_user] received sync payload for user ID: %s", profile.id)
    try:
        await asyncio.to_thread(upsert_profile, profile, db_path)
    except ProfileStoreError as e:
        return error_response(e.message or "Database sync failed", 500)
    logger.info("[handlers:handle_sync_user] sync completed for user ID: %s", profile.id)
    return sync_response()
