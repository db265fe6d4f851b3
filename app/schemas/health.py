"""Pydantic schemas for health check and API index responses."""

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.auth import CurrentUser


class HealthResponse(BaseModel):
    """Data of the health check envelope."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database connectivity status when check is performed",
    )
    timestamp: str = Field(description="Server time, ISO 8601")


class ApiIndex(BaseModel):
    """Data of the root discovery envelope."""

    name: str
    version: str
    endpoints: dict[str, str]
    user: CurrentUser | None = Field(
        default=None, description="Present when the request carried a valid access token"
    )
