"""Pydantic models for the Segment entity and its request payloads."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from segments.models.enums import SegmentLevel, SegmentStatus

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class SegmentCreate(BaseModel):
    """Payload for creating a project group, project or subproject."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    parent_slug: str | None = Field(None, pattern=SLUG_PATTERN)
    parent_name: str | None = None
    grandparent_slug: str | None = Field(None, pattern=SLUG_PATTERN)
    grandparent_name: str | None = None
    status: SegmentStatus = SegmentStatus.ACTIVE
    description: str | None = Field(None, max_length=5000)
    url: str | None = None
    source_id: str | None = None
    source_parent_id: str | None = None


class SegmentUpdate(BaseModel):
    """Partial update. Hierarchy placement (level and parents) is not updatable."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    status: SegmentStatus | None = None
    description: str | None = Field(None, max_length=5000)
    url: str | None = None
    source_id: str | None = None
    source_parent_id: str | None = None


class Segment(BaseModel):
    """A node of the project group -> project -> subproject hierarchy."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    level: SegmentLevel
    name: str
    slug: str
    parent_slug: str | None = None
    parent_name: str | None = None
    grandparent_slug: str | None = None
    grandparent_name: str | None = None
    status: SegmentStatus = SegmentStatus.ACTIVE
    description: str | None = None
    url: str | None = None
    source_id: str | None = None
    source_parent_id: str | None = None
    custom_activity_types: dict[str, dict[str, Any]] = Field(default_factory=dict)
    activity_channels: dict[str, list[str]] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SegmentCriteria(BaseModel):
    model_config = ConfigDict(extra="forbid")

    search: str | None = None
    parent_slug: str | None = None
    grandparent_slug: str | None = None
    status: SegmentStatus | None = None
    limit: int = Field(20, ge=1, le=200)
    offset: int = Field(0, ge=0)


class SegmentPage(BaseModel):
    rows: list[Segment]
    count: int
    limit: int
    offset: int
