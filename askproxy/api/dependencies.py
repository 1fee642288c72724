"""
FastAPI dependencies that wire settings and the shared HTTP client into the pipeline.
"""

import httpx
from fastapi import Depends, Request

from askproxy.agent.llm import UpstreamClient
from askproxy.agent.orchestrator import QueryOrchestrator
from askproxy.core.config import Settings, get_settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Process-wide AsyncClient created in the app lifespan."""
    return request.app.state.http_client


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> QueryOrchestrator:
    client = UpstreamClient(http_client, settings.ai_api_url, settings.ai_api_key, settings.timeout)
    return QueryOrchestrator(settings, client)
