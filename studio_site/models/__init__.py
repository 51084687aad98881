"""Data models for the application."""
from .fetch import FetchResult, ResolutionDebug
from .records import (
    BuildResult,
    GroupClass,
    Instructor,
    ScheduleItem,
    ServiceOffering,
)
from .responses import CollectionResponse, ErrorResponse, PingResponse

__all__ = [
    "FetchResult",
    "ResolutionDebug",
    "BuildResult",
    "GroupClass",
    "Instructor",
    "ScheduleItem",
    "ServiceOffering",
    "CollectionResponse",
    "ErrorResponse",
    "PingResponse",
]
