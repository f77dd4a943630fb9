"""Segment table: project group -> project -> subproject hierarchy."""

from sqlalchemy import JSON, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from segments.db.base import Base, TimestampMixin


class SegmentRow(Base, TimestampMixin):
    __tablename__ = "segments"
    __table_args__ = (
        Index("ix_segments_parent", "level", "parent_slug", "grandparent_slug"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    level: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Denormalized copies of the ancestors' name/slug
    parent_slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    grandparent_slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    grandparent_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(String(32), nullable=False, default="active")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    source_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source_parent_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    custom_activity_types: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    activity_channels: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)


# NULL ancestors compare as distinct in a plain unique constraint, so the
# sibling key coalesces them to '' (project groups have neither ancestor).
Index(
    "uq_segments_sibling_slug",
    SegmentRow.level,
    SegmentRow.slug,
    func.coalesce(SegmentRow.parent_slug, ""),
    func.coalesce(SegmentRow.grandparent_slug, ""),
    unique=True,
)
