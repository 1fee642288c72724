"""
Bearer-token authentication for client-facing endpoints.

The desktop client sends `Authorization: Bearer <WORKER_API_KEY>`.
"""

import hmac
import logging

from fastapi import Depends, Header, HTTPException

from askproxy.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def authenticate(settings: Settings, authorization: str | None) -> tuple[str, int] | None:
    """Return None when the header carries the configured key, else (message, status)."""
    expected = settings.worker_api_key
    if not expected:
        logger.error("[auth] CRITICAL: WORKER_API_KEY environment variable not set")
        return "Internal Server Error: API Key configuration missing", 500
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return "Unauthorized: Missing or malformed Authorization header", 401
    provided = authorization[len(BEARER_PREFIX):]
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        return "Unauthorized: Invalid API Key", 401
    return None


def require_api_key(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency: reject the request before the handler runs."""
    error = authenticate(settings, authorization)
    if error is not None:
        message, status = error
        raise HTTPException(status_code=status, detail=message)
