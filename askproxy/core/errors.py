"""
Application errors for clean API error handling.

Pipeline stages do not raise: they return a Failure (kind, message, status)
that the API layer turns into a {success: false, message} envelope.
ProfileStoreError is the one exception raised across a module boundary, by the
profile store when the database operation fails.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Classified failure kinds for the query pipeline."""

    VALIDATION = "validation_error"
    CONFIG = "config_error"
    TIMEOUT = "timeout_error"
    NETWORK = "network_error"
    UPSTREAM_HTTP = "upstream_http_error"
    MALFORMED_UPSTREAM = "malformed_upstream_json"
    UPSTREAM_LOGIC = "upstream_logic_error"
    EMPTY_CONTENT = "empty_content_error"
    INVALID_JSON_CONTRACT = "invalid_json_contract_error"
    INTERNAL = "internal_error"


# Caller-facing status for kinds whose status does not depend on the upstream.
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFIG: 500,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.NETWORK: 502,
    ErrorKind.MALFORMED_UPSTREAM: 502,
    ErrorKind.UPSTREAM_LOGIC: 400,
    ErrorKind.EMPTY_CONTENT: 500,
    ErrorKind.INVALID_JSON_CONTRACT: 500,
    ErrorKind.INTERNAL: 500,
}


def upstream_status_to_caller(status: int) -> int:
    """Provider 5xx (and any unfollowed 3xx) becomes 502 Bad Gateway; 4xx passes through unchanged."""
    return status if 400 <= status < 500 else 502


@dataclass(frozen=True)
class Failure:
    """Terminal failed state of a request: what went wrong and the HTTP status to report."""

    kind: ErrorKind
    message: str
    status: int

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> "Failure":
        return cls(kind=kind, message=message, status=STATUS_BY_KIND[kind])


class ProfileStoreError(Exception):
    """Raised when the profile database operation fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
