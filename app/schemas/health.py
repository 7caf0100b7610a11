"""Payload schema for the health check envelope."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthData(BaseModel):
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a trivial query against the credential store database",
    )
