"""Segment hierarchy API routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from segments.dependencies import DBSession
from segments.errors.exceptions import NotFoundError
from segments.models.enums import SegmentLevel
from segments.models.segment import SegmentCreate, SegmentCriteria, SegmentUpdate
from segments.services.hierarchy import SegmentHierarchyManager
from segments.services.segment_queries import SegmentQueries

router = APIRouter(prefix="/segments", tags=["Segments"])


@router.post("/project-groups", status_code=201)
async def create_project_group(data: SegmentCreate, db: DBSession) -> dict:
    segment = await SegmentHierarchyManager(db).create_project_group(data)
    return segment.model_dump(mode="json")


@router.post("/projects", status_code=201)
async def create_project(data: SegmentCreate, db: DBSession) -> dict:
    segment = await SegmentHierarchyManager(db).create_project(data)
    return segment.model_dump(mode="json")


@router.post("/subprojects", status_code=201)
async def create_subproject(data: SegmentCreate, db: DBSession) -> dict:
    segment = await SegmentHierarchyManager(db).create_subproject(data)
    return segment.model_dump(mode="json")


@router.get("/project-groups")
async def query_project_groups(
    db: DBSession, criteria: Annotated[SegmentCriteria, Query()]
) -> dict:
    page = await SegmentQueries(db).query_project_groups(criteria)
    return page.model_dump(mode="json")


@router.get("/projects")
async def query_projects(
    db: DBSession, criteria: Annotated[SegmentCriteria, Query()]
) -> dict:
    page = await SegmentQueries(db).query_projects(criteria)
    return page.model_dump(mode="json")


@router.get("/subprojects")
async def query_subprojects(
    db: DBSession, criteria: Annotated[SegmentCriteria, Query()]
) -> dict:
    page = await SegmentQueries(db).query_subprojects(criteria)
    return page.model_dump(mode="json")


@router.get("/by-slug/{slug}")
async def get_segment_by_slug(slug: str, level: SegmentLevel, db: DBSession) -> dict:
    segment = await SegmentQueries(db).find_by_slug(slug, level)
    if segment is None:
        raise NotFoundError("Segment", f"{level.value}:{slug}")
    return segment.model_dump(mode="json")


@router.get("/{segment_id}")
async def get_segment(segment_id: str, db: DBSession) -> dict:
    segment = await SegmentQueries(db).find_by_id(segment_id)
    if segment is None:
        raise NotFoundError("Segment", segment_id)
    return segment.model_dump(mode="json")


@router.put("/{segment_id}")
async def update_segment(segment_id: str, data: SegmentUpdate, db: DBSession) -> dict:
    segment = await SegmentHierarchyManager(db).update(segment_id, data)
    return segment.model_dump(mode="json")
