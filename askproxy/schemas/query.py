"""Schemas for the query endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class QueryRequest(BaseModel):
    """Request body for POST /query. At least one of text or image must be present."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str | None = Field(None, description="User question; may be empty when an image is sent.")
    image: str | None = Field(
        None,
        alias="base64ImageDataUrl",
        description="Screenshot as a data URL, e.g. data:image/png;base64,...",
    )


class QueryResponse(BaseModel):
    """Response for POST /query."""

    ai_text: str = Field(..., description="Final answer from the reasoning model.")


class ErrorEnvelope(BaseModel):
    """Uniform error body for every failed request."""

    success: bool = False
    message: str = Field(..., description="Human-readable error message.")

    model_config = {
        "json_schema_extra": {
            "examples": [{"success": False, "message": "Bad Request: Requires text or image data"}]
        }
    }
