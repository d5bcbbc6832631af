"""Pydantic schemas for the middleware admin API."""

from typing import Any

from pydantic import BaseModel, Field


class MiddlewareSchema(BaseModel):
    """One middleware in the published chain."""
    name: str = Field(..., description="Middleware name", examples=["logger"])
    priority: int = Field(..., description="Lower runs earlier", examples=[20])
    position: int = Field(..., description="Zero-based position in the chain")


class MiddlewareListSchema(BaseModel):
    """The published chain in execution order."""
    middlewares: list[MiddlewareSchema]
    count: int


class MiddlewareCreateSchema(BaseModel):
    """Request to build a middleware by type and add it to the chain."""
    type: str = Field(..., description="Builder type", examples=["cors"])
    name: str = Field(..., min_length=1, description="Middleware name")
    config: dict[str, Any] = Field(
        default_factory=dict,
        description="Builder-specific configuration",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "type": "cors",
                    "name": "cors-public",
                    "config": {"allow_origins": ["https://*.example.com"], "priority": 25},
                }
            ]
        }
    }


class BuilderListSchema(BaseModel):
    """Registered builder types."""
    types: list[str]
