"""Segment repository."""

import copy
import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from segments.db.models.segment import SegmentRow
from segments.errors.exceptions import ConflictError, NotFoundError, ValidationError
from segments.models.activity import ActivityTypeSettings
from segments.models.enums import SegmentLevel
from segments.models.segment import Segment, SegmentCriteria
from segments.repositories.base import BaseRepository
from segments.services.default_activity_types import DEFAULT_ACTIVITY_TYPES
from segments.services.id_generator import generate_id

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "name",
    "slug",
    "status",
    "description",
    "url",
    "source_id",
    "source_parent_id",
    "custom_activity_types",
    "activity_channels",
)


class SegmentRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, SegmentRow)

    # -- level helpers -----------------------------------------------------

    @staticmethod
    def level_for(parent_slug: str | None, grandparent_slug: str | None) -> SegmentLevel:
        """Derive a segment's level from which ancestor slugs it carries."""
        if grandparent_slug:
            if not parent_slug:
                raise ValidationError("A segment with a grandparent must also have a parent")
            return SegmentLevel.SUBPROJECT
        if parent_slug:
            return SegmentLevel.PROJECT
        return SegmentLevel.PROJECT_GROUP

    @staticmethod
    def is_project_group(segment: SegmentRow | Segment) -> bool:
        return segment.level == SegmentLevel.PROJECT_GROUP

    @staticmethod
    def is_project(segment: SegmentRow | Segment) -> bool:
        return segment.level == SegmentLevel.PROJECT

    @staticmethod
    def is_subproject(segment: SegmentRow | Segment) -> bool:
        return segment.level == SegmentLevel.SUBPROJECT

    # -- activity configuration blobs ----------------------------------------

    @staticmethod
    def get_activity_types(segment: SegmentRow | Segment) -> ActivityTypeSettings:
        return ActivityTypeSettings(
            default=copy.deepcopy(DEFAULT_ACTIVITY_TYPES),
            custom=copy.deepcopy(segment.custom_activity_types or {}),
        )

    @staticmethod
    def get_activity_channels(segment: SegmentRow | Segment) -> dict[str, list[str]]:
        return copy.deepcopy(segment.activity_channels or {})

    # -- writes ---------------------------------------------------------------

    async def create(self, data: dict[str, Any]) -> SegmentRow:
        """Insert one segment row. Level is derived from the ancestor slugs."""
        level = self.level_for(data.get("parent_slug"), data.get("grandparent_slug"))
        await self._ensure_unique_sibling(
            level, data["slug"], data.get("parent_slug"), data.get("grandparent_slug")
        )
        row = SegmentRow(
            id=generate_id("seg_"),
            level=level.value,
            name=data["name"],
            slug=data["slug"],
            parent_slug=data.get("parent_slug"),
            parent_name=data.get("parent_name"),
            grandparent_slug=data.get("grandparent_slug"),
            grandparent_name=data.get("grandparent_name"),
            status=data.get("status") or "active",
            description=data.get("description"),
            url=data.get("url"),
            source_id=data.get("source_id"),
            source_parent_id=data.get("source_parent_id"),
            custom_activity_types=data.get("custom_activity_types") or {},
            activity_channels=data.get("activity_channels") or {},
        )
        self.session.add(row)
        await self._flush(f"Segment '{row.slug}' already exists at level {level.value}")
        logger.debug("Created %s segment %s (%s)", level.value, row.id, row.slug)
        return row

    async def update(self, segment_id: str, data: dict[str, Any]) -> SegmentRow:
        row = await self.get_by_id("id", segment_id)
        if row is None:
            raise NotFoundError("Segment", segment_id)

        unknown = set(data) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                "Fields cannot be updated: " + ", ".join(sorted(unknown)),
                details={"fields": sorted(unknown)},
            )

        new_slug = data.get("slug")
        if new_slug and new_slug != row.slug:
            await self._ensure_unique_sibling(
                SegmentLevel(row.level), new_slug, row.parent_slug, row.grandparent_slug,
                exclude_id=row.id,
            )

        for key, value in data.items():
            setattr(row, key, value)
        await self._flush(f"Segment '{row.slug}' already exists at level {row.level}")
        return row

    async def update_children_bulk(
        self,
        parent: Segment,
        *,
        name: str | None = None,
        slug: str | None = None,
    ) -> int:
        """Copy a renamed parent's name/slug into its descendants' denormalized fields.

        ``parent`` is the segment as it was before the rename; its old slug
        selects the children. Returns the number of rows touched.
        """
        if not name and not slug:
            return 0

        touched = 0
        if self.is_project_group(parent):
            parent_values = _prefixed("parent", name, slug)
            result = await self.session.execute(
                update(SegmentRow)
                .where(
                    SegmentRow.level == SegmentLevel.PROJECT.value,
                    SegmentRow.parent_slug == parent.slug,
                )
                .values(**parent_values)
                .execution_options(synchronize_session="fetch")
            )
            touched += result.rowcount or 0

            grandparent_values = _prefixed("grandparent", name, slug)
            result = await self.session.execute(
                update(SegmentRow)
                .where(
                    SegmentRow.level == SegmentLevel.SUBPROJECT.value,
                    SegmentRow.grandparent_slug == parent.slug,
                )
                .values(**grandparent_values)
                .execution_options(synchronize_session="fetch")
            )
            touched += result.rowcount or 0
        elif self.is_project(parent):
            parent_values = _prefixed("parent", name, slug)
            result = await self.session.execute(
                update(SegmentRow)
                .where(
                    SegmentRow.level == SegmentLevel.SUBPROJECT.value,
                    SegmentRow.parent_slug == parent.slug,
                    SegmentRow.grandparent_slug == parent.parent_slug,
                )
                .values(**parent_values)
                .execution_options(synchronize_session="fetch")
            )
            touched += result.rowcount or 0

        logger.debug("Propagated rename of %s to %d descendant rows", parent.id, touched)
        return touched

    # -- reads ----------------------------------------------------------------

    async def find_by_id(self, segment_id: str) -> SegmentRow | None:
        return await self.get_by_id("id", segment_id)

    async def find_by_slug(
        self,
        slug: str,
        level: SegmentLevel,
        parent_slug: str | None = None,
        grandparent_slug: str | None = None,
    ) -> SegmentRow | None:
        stmt = select(SegmentRow).where(
            SegmentRow.slug == slug,
            SegmentRow.level == SegmentLevel(level).value,
        )
        if parent_slug is not None:
            stmt = stmt.where(SegmentRow.parent_slug == parent_slug)
        if grandparent_slug is not None:
            stmt = stmt.where(SegmentRow.grandparent_slug == grandparent_slug)
        stmt = stmt.order_by(SegmentRow.created_at, SegmentRow.id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def query_project_groups(self, criteria: SegmentCriteria) -> tuple[list[SegmentRow], int]:
        return await self._query(SegmentLevel.PROJECT_GROUP, criteria)

    async def query_projects(self, criteria: SegmentCriteria) -> tuple[list[SegmentRow], int]:
        return await self._query(SegmentLevel.PROJECT, criteria)

    async def query_subprojects(self, criteria: SegmentCriteria) -> tuple[list[SegmentRow], int]:
        return await self._query(SegmentLevel.SUBPROJECT, criteria)

    # -- internals ------------------------------------------------------------

    async def _query(
        self, level: SegmentLevel, criteria: SegmentCriteria
    ) -> tuple[list[SegmentRow], int]:
        stmt = select(SegmentRow).where(SegmentRow.level == level.value)
        if criteria.search:
            stmt = stmt.where(func.lower(SegmentRow.name).contains(criteria.search.lower()))
        if criteria.parent_slug:
            stmt = stmt.where(SegmentRow.parent_slug == criteria.parent_slug)
        if criteria.grandparent_slug:
            stmt = stmt.where(SegmentRow.grandparent_slug == criteria.grandparent_slug)
        if criteria.status:
            stmt = stmt.where(SegmentRow.status == criteria.status.value)

        count_result = await self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        )
        count = count_result.scalar_one()

        page = stmt.order_by(SegmentRow.name, SegmentRow.id).limit(criteria.limit).offset(criteria.offset)
        result = await self.session.execute(page)
        return list(result.scalars().all()), count

    async def _ensure_unique_sibling(
        self,
        level: SegmentLevel,
        slug: str,
        parent_slug: str | None,
        grandparent_slug: str | None,
        exclude_id: str | None = None,
    ) -> None:
        stmt = select(SegmentRow.id).where(
            SegmentRow.level == level.value,
            SegmentRow.slug == slug,
            _nullable_eq(SegmentRow.parent_slug, parent_slug),
            _nullable_eq(SegmentRow.grandparent_slug, grandparent_slug),
        )
        if exclude_id:
            stmt = stmt.where(SegmentRow.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError(
                f"Segment '{slug}' already exists at level {level.value}",
                details={
                    "slug": slug,
                    "level": level.value,
                    "parent_slug": parent_slug,
                    "grandparent_slug": grandparent_slug,
                },
            )

    async def _flush(self, conflict_message: str) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(conflict_message) from exc


def _nullable_eq(column, value):
    return column.is_(None) if value is None else column == value


def _prefixed(prefix: str, name: str | None, slug: str | None) -> dict[str, str]:
    values = {}
    if name:
        values[f"{prefix}_name"] = name
    if slug:
        values[f"{prefix}_slug"] = slug
    return values
