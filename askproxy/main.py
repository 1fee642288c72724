# Run from project root: uvicorn askproxy.main:app --reload

import logging
import os
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from askproxy.api.handlers import error_response
from askproxy.api.routes import router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One connection pool for all upstream calls; per-call timeouts come from Settings.
    async with httpx.AsyncClient(follow_redirects=True) as client:
        app.state.http_client = client
        yield


app = FastAPI(title="Query Proxy", lifespan=lifespan)
app.include_router(router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(str(exc.detail), exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response("Bad Request: Invalid request", 400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
    return error_response("Internal Server Error", 500)


def run_api() -> None:
    """Start the FastAPI server via uvicorn."""
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    logger.info("Starting query proxy on %s:%d", host, port)
    uvicorn.run("askproxy.main:app", host=host, port=port, log_level="info", reload=False)


if __name__ == "__main__":
    run_api()
