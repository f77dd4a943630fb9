"""Per-segment activity type and activity channel configuration.

Both blobs are read-modify-write: the current value is read from the
segment row, changed through ``CustomActivityTypes`` / ``ActivityChannels``
and written back whole. Concurrent writers to the same segment are
last-writer-wins.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from segments.config import settings
from segments.db.models.segment import SegmentRow
from segments.db.transaction import atomic
from segments.errors.exceptions import ConflictError, NotFoundError, ValidationError
from segments.models.activity import (
    ActivityChannelCreate,
    ActivityChannels,
    ActivityTypeCreate,
    ActivityTypeSettings,
    ActivityTypeUpdate,
    CustomActivityTypes,
    build_activity_type,
)
from segments.repositories.segment_repo import SegmentRepository
from segments.services.activity_projector import ActivityTypeProjection, project

logger = logging.getLogger(__name__)


class ActivityConfigStore:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = SegmentRepository(session)

    async def create_activity_type(
        self,
        segment_id: str,
        data: ActivityTypeCreate,
        platform: str | None = None,
    ) -> ActivityTypeSettings:
        type_name = _required(data.type, "type", "Activity type is required when creating an activity type")

        segment = await self._segment(segment_id)
        type_key = type_name.lower()
        platform_key = (platform or settings.default_platform).lower()

        current = SegmentRepository.get_activity_types(segment)
        owner = self._projection(segment_id, current.custom).platform_of(type_key)
        if owner is not None and owner != platform_key:
            raise ConflictError(
                f"Activity type '{type_key}' already exists for platform '{owner}'",
                details={"type": type_key, "platform": owner},
            )

        custom = CustomActivityTypes(current.custom)
        if not custom.insert_if_absent(platform_key, type_key, build_activity_type(type_name)):
            logger.debug("Activity type %s/%s already exists", platform_key, type_key)
            return current

        return await self._write_activity_types(segment_id, custom)

    async def update_activity_type(
        self, segment_id: str, key: str, data: ActivityTypeUpdate
    ) -> ActivityTypeSettings:
        type_name = _required(data.type, "type", "Activity type is required when updating an activity type")

        segment = await self._segment(segment_id)
        current = SegmentRepository.get_activity_types(segment)
        platform = self._projection(segment_id, current.custom).platform_of(key)
        if platform is None:
            raise NotFoundError("ActivityType", key)

        custom = CustomActivityTypes(current.custom)
        custom.replace(platform, key, build_activity_type(type_name))
        return await self._write_activity_types(segment_id, custom)

    async def destroy_activity_type(self, segment_id: str, key: str) -> ActivityTypeSettings:
        segment = await self._segment(segment_id)
        current = SegmentRepository.get_activity_types(segment)
        platform = self._projection(segment_id, current.custom).platform_of(key)
        if platform is None:
            return current

        custom = CustomActivityTypes(current.custom)
        custom.remove(platform, key)
        return await self._write_activity_types(segment_id, custom)

    async def list_activity_types(self, segment_id: str) -> ActivityTypeSettings:
        segment = await self._segment(segment_id)
        return SegmentRepository.get_activity_types(segment)

    async def update_activity_channels(
        self, segment_id: str, data: ActivityChannelCreate
    ) -> dict[str, list[str]]:
        channel = _required(data.channel, "channel", "Channel is required when adding an activity channel")

        segment = await self._segment(segment_id)
        channels = ActivityChannels(SegmentRepository.get_activity_channels(segment))
        channels.add(data.platform, channel)

        async with atomic(self.session):
            row = await self.repo.update(segment_id, {"activity_channels": channels.to_dict()})
        return SegmentRepository.get_activity_channels(row)

    async def list_activity_channels(self, segment_id: str) -> dict[str, list[str]]:
        segment = await self._segment(segment_id)
        return SegmentRepository.get_activity_channels(segment)

    # -- internals ------------------------------------------------------------

    async def _segment(self, segment_id: str) -> SegmentRow:
        segment = await self.repo.find_by_id(segment_id)
        if segment is None:
            raise NotFoundError("Segment", segment_id)
        return segment

    @staticmethod
    def _projection(segment_id: str, custom: dict[str, dict[str, Any]]) -> ActivityTypeProjection:
        projection = project(custom)
        for collision in projection.collisions:
            logger.warning(
                "Activity type %s of platform %s is shadowed by platform %s in segment %s",
                collision.type_key,
                collision.shadowed_platform,
                collision.platform,
                segment_id,
            )
        return projection

    async def _write_activity_types(
        self, segment_id: str, custom: CustomActivityTypes
    ) -> ActivityTypeSettings:
        async with atomic(self.session):
            row = await self.repo.update(segment_id, {"custom_activity_types": custom.to_dict()})
        return SegmentRepository.get_activity_types(row)


def _required(value: str | None, field: str, message: str) -> str:
    """Strip ``value``; blank or missing values are a validation error."""
    value = (value or "").strip()
    if not value:
        raise ValidationError(message, details={"field": field})
    return value
