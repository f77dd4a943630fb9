"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from segments.db.models.segment import SegmentRow

__all__ = [
    "SegmentRow",
]
