"""Response models for pack endpoints."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PingResponse(BaseModel):
    """Response model for a pack liveness probe."""

    ok: bool = True
    gizmo: str = Field(..., description="Pack identifier")


class CollectionResponse(BaseModel):
    """Response model for public FitDegree collection proxies."""

    ok: bool = True
    endpoint_used: str = Field(..., description="Endpoint candidate that answered")
    response: List[Any] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "ok": True,
                "endpoint_used": "/api/v1/TEAM_MEMBERS",
                "response": [{"id": 1, "first_name": "Ana"}],
            }
        }


class ErrorResponse(BaseModel):
    """Error envelope returned with HTTP 500/502."""

    ok: bool = False
    error: str
    detail: Optional[Dict[str, Any]] = None
    hint: Optional[str] = None
