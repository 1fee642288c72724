"""Schemas for the sync-user endpoint."""

from pydantic import BaseModel, Field


class GithubUserProfile(BaseModel):
    """GitHub profile as obtained by the desktop client's OAuth flow."""

    id: int | None = Field(None, description="GitHub numeric user id (required for sync).")
    login: str | None = Field(None, description="GitHub login (required for sync).")
    name: str | None = None
    avatar_url: str | None = None
    email: str | None = None


class SyncUserRequest(BaseModel):
    """Request body for POST /sync-user."""

    profile: GithubUserProfile | None = None


class SyncResponse(BaseModel):
    """Success acknowledgment for POST /sync-user."""

    success: bool = True
    message: str = "User profile synced successfully."
