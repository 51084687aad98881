"""Normalized display records built from FitDegree collections."""
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


class Instructor(BaseModel):
    """Instructor projected from a team-member item and its identity."""

    id: Optional[str] = None
    identity_id: Optional[str] = None
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    bio: str = ""
    image_id: Optional[str] = None
    image_url: Optional[str] = None
    slug: str = ""


class GroupClass(BaseModel):
    """Group class type (title-level, not a scheduled occurrence)."""

    id: Optional[str] = None
    title: str = ""
    description: str = ""
    group_name: str = ""
    difficulty: str = ""


class ServiceOffering(BaseModel):
    """One-on-one service with resolved image and price lines."""

    id: Optional[str] = None
    name: str = ""
    description: str = ""
    image_url: Optional[str] = None
    price_lines: List[str] = Field(default_factory=list)
    display_on_app: bool = True


class ScheduleItem(BaseModel):
    """Scheduled class occurrence."""

    id: Optional[str] = None
    title: str = ""
    instructor_name: str = ""
    starts_at: str = Field("", description="Studio-local 'YYYY-MM-DD HH:MM:SS'")
    description: str = ""
    book_url: Optional[str] = None
    past: bool = False


class BuildResult(BaseModel):
    """Summary of a completed builder run."""

    target: Path
    count: int = Field(..., description="Records rendered")
    total: int = Field(..., description="Records fetched before filtering")
    extra_files: List[Path] = Field(default_factory=list)
