"""Pydantic response models for the HTTP server.

RULES:
- All models use Field(description=...) for OpenAPI documentation
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status ('ok').")
    version: str = Field(description="Bot version string.")
