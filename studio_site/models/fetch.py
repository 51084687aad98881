"""Transport-level models for FitDegree requests."""
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class FetchResult(BaseModel):
    """Outcome of a single GET against the FitDegree API."""

    url: str = Field(..., description="Fully qualified request URL")
    status: int = Field(..., description="HTTP status code")
    ok: bool = Field(..., description="True for 2xx responses")
    payload: Any = Field(
        None, description="Parsed JSON body, raw text on parse failure, None when empty"
    )


class ResolutionDebug(BaseModel):
    """Debug trailer attached to resolved payloads under `_debug`."""

    requested: str
    resolved: str
    url: Optional[str] = None
    status: Optional[int] = None
    tried: List[str] = Field(default_factory=list)
    note: Optional[str] = None
