"""
API route aggregator: register endpoints; no logic, only delegate to handlers.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from askproxy.agent.orchestrator import QueryOrchestrator
from askproxy.api.auth import require_api_key
from askproxy.api.dependencies import get_orchestrator
from askproxy.api.handlers import handle_query, handle_sync_user
from askproxy.core.config import Settings, get_settings
from askproxy.schemas.profile import SyncResponse
from askproxy.schemas.query import ErrorEnvelope, QueryResponse

logger = logging.getLogger(__name__)
router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope},
    401: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
}


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "Query proxy running"}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Query ---

@router.post(
    "/query",
    tags=["query"],
    summary="Answer a text and/or screenshot query",
    description=(
        "Body: {text, base64ImageDataUrl?}. Text only: one call to the target model. "
        "With an image: the vision model describes the screenshot as JSON, the description "
        "is checked, then the target model answers. 200 {ai_text} or {success: false, message}."
    ),
    dependencies=[Depends(require_api_key)],
    responses={
        200: {"model": QueryResponse},
        **_ERROR_RESPONSES,
        502: {"model": ErrorEnvelope},
        504: {"model": ErrorEnvelope},
    },
)
async def post_query(
    request: Request,
    orchestrator: QueryOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    logger.info("[api:post_query] handling /query request")
    return await handle_query(request, orchestrator)


# --- Profile sync ---

@router.post(
    "/sync-user",
    tags=["profile"],
    summary="Upsert the signed-in user's GitHub profile",
    dependencies=[Depends(require_api_key)],
    responses={200: {"model": SyncResponse}, **_ERROR_RESPONSES},
)
async def post_sync_user(request: Request, settings: Settings = Depends(get_settings)) -> JSONResponse:
    logger.info("[api:post_sync_user] handling /sync-user request")
    return await handle_sync_user(request, settings.profile_db_path)
