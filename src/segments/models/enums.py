"""String enums for segment levels and statuses."""

from enum import StrEnum


class SegmentLevel(StrEnum):
    PROJECT_GROUP = "project_group"
    PROJECT = "project"
    SUBPROJECT = "subproject"


class SegmentStatus(StrEnum):
    ACTIVE = "active"
    FORMATION = "formation"
    PROSPECT = "prospect"
    ARCHIVED = "archived"
