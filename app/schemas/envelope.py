"""JSON envelope shared by every endpoint: {success, message, data?, token?}."""

from typing import Any

from pydantic import BaseModel, Field


class Envelope(BaseModel):
    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable outcome")
    data: Any | None = Field(default=None, description="Operation payload, if any")
    token: str | None = Field(default=None, description="Bearer token (login only)")
