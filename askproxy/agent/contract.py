"""
JSON contract gate between the vision stage and the reasoning stage.

The vision model is instructed to emit a bare JSON object. Models sometimes wrap
it in a ```json fence anyway, so the fence is stripped; the remainder must then
parse as JSON. Only syntax is checked; the schema is a prompt-level agreement.
"""

import json
import logging

from askproxy.core.errors import ErrorKind, Failure

logger = logging.getLogger(__name__)

JSON_FENCE_OPEN = "```json"
FENCE_CLOSE = "```"
INVALID_CONTRACT_MESSAGE = "AI description step failed: Output was not valid JSON"


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def strict_json_loads(text: str | bytes):
    """json.loads that also rejects NaN, Infinity and -Infinity. Raises ValueError."""
    return json.loads(text, parse_constant=_reject_constant)


def strip_json_fence(raw: str) -> str:
    """Trim, and remove a leading ```json fence and its closing ``` when present."""
    text = raw.strip()
    if text.startswith(JSON_FENCE_OPEN):
        text = text[len(JSON_FENCE_OPEN):]
        if text.endswith(FENCE_CLOSE):
            text = text[: -len(FENCE_CLOSE)]
        text = text.strip()
    return text


def validate_description(raw: str) -> str | Failure:
    """
    Return the fence-stripped description if it parses as JSON, else an
    INVALID_JSON_CONTRACT Failure. The parsed value is discarded; the string
    itself is what the reasoning prompt embeds.
    """
    description = strip_json_fence(raw)
    try:
        strict_json_loads(description)
    except ValueError as e:
        logger.error("[contract:validate_description] vision output failed JSON parsing: %s", e)
        logger.error("[contract:validate_description] received content: %r", raw[:1000])
        return Failure.of(ErrorKind.INVALID_JSON_CONTRACT, INVALID_CONTRACT_MESSAGE)
    logger.info("[contract:validate_description] OK description_len=%d", len(description))
    return description
