"""Activity type and activity channel configuration routes."""

from fastapi import APIRouter, Depends

from segments.dependencies import DBSession, TraceId
from segments.logging_config import bind_request_context
from segments.models.activity import ActivityChannelCreate, ActivityTypeCreate, ActivityTypeUpdate
from segments.services.activity_config import ActivityConfigStore

router = APIRouter(prefix="/segments/{segment_id}", tags=["ActivityConfig"])


def _bind_segment(segment_id: str, trace_id: TraceId) -> str:
    bind_request_context(trace_id, segment_id=segment_id)
    return segment_id


@router.get("/activity-types")
async def list_activity_types(db: DBSession, segment_id: str = Depends(_bind_segment)) -> dict:
    settings = await ActivityConfigStore(db).list_activity_types(segment_id)
    return settings.model_dump(mode="json")


@router.post("/activity-types", status_code=201)
async def create_activity_type(
    data: ActivityTypeCreate,
    db: DBSession,
    platform: str | None = None,
    segment_id: str = Depends(_bind_segment),
) -> dict:
    settings = await ActivityConfigStore(db).create_activity_type(segment_id, data, platform)
    return settings.model_dump(mode="json")


@router.put("/activity-types/{key}")
async def update_activity_type(
    key: str,
    data: ActivityTypeUpdate,
    db: DBSession,
    segment_id: str = Depends(_bind_segment),
) -> dict:
    settings = await ActivityConfigStore(db).update_activity_type(segment_id, key, data)
    return settings.model_dump(mode="json")


@router.delete("/activity-types/{key}")
async def destroy_activity_type(
    key: str,
    db: DBSession,
    segment_id: str = Depends(_bind_segment),
) -> dict:
    settings = await ActivityConfigStore(db).destroy_activity_type(segment_id, key)
    return settings.model_dump(mode="json")


@router.get("/activity-channels")
async def list_activity_channels(
    db: DBSession, segment_id: str = Depends(_bind_segment)
) -> dict[str, list[str]]:
    return await ActivityConfigStore(db).list_activity_channels(segment_id)


@router.put("/activity-channels")
async def update_activity_channels(
    data: ActivityChannelCreate,
    db: DBSession,
    segment_id: str = Depends(_bind_segment),
) -> dict[str, list[str]]:
    return await ActivityConfigStore(db).update_activity_channels(segment_id, data)
