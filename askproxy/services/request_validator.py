"""
Query validation: decide whether a parsed /query body can enter the pipeline.

Runs before any upstream call; an invalid request never reaches a provider.
"""

import logging

from askproxy.core.errors import ErrorKind, Failure
from askproxy.schemas.query import QueryRequest

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Bad Request: Requires text or image data"


def validate_query(request: QueryRequest) -> QueryRequest | Failure:
    """
    Normalize text to a string and image to None-or-non-empty, then require at
    least one of them. Returns the normalized request or a VALIDATION Failure.
    """
    text = request.text or ""
    image = request.image or None
    if not text.strip() and not image:
        logger.info("[validator:validate_query] rejected: no text and no image")
        return Failure.of(ErrorKind.VALIDATION, MISSING_INPUT_MESSAGE)
    logger.info(
        "[validator:validate_query] OK text=%r image=%s",
        text[:50] + "..." if len(text) > 50 else text or "None",
        "Present" if image else "None",
    )
    return QueryRequest(text=text, image=image)
