"""Read-only segment lookups."""

from sqlalchemy.ext.asyncio import AsyncSession

from segments.models.enums import SegmentLevel
from segments.models.segment import Segment, SegmentCriteria, SegmentPage
from segments.repositories.segment_repo import SegmentRepository


class SegmentQueries:
    def __init__(self, session: AsyncSession):
        self.repo = SegmentRepository(session)

    async def find_by_id(self, segment_id: str) -> Segment | None:
        row = await self.repo.find_by_id(segment_id)
        return Segment.model_validate(row) if row else None

    async def find_by_slug(self, slug: str, level: SegmentLevel) -> Segment | None:
        row = await self.repo.find_by_slug(slug, level)
        return Segment.model_validate(row) if row else None

    async def query_project_groups(self, criteria: SegmentCriteria) -> SegmentPage:
        return _page(criteria, *await self.repo.query_project_groups(criteria))

    async def query_projects(self, criteria: SegmentCriteria) -> SegmentPage:
        return _page(criteria, *await self.repo.query_projects(criteria))

    async def query_subprojects(self, criteria: SegmentCriteria) -> SegmentPage:
        return _page(criteria, *await self.repo.query_subprojects(criteria))


def _page(criteria: SegmentCriteria, rows, count: int) -> SegmentPage:
    return SegmentPage(
        rows=[Segment.model_validate(row) for row in rows],
        count=count,
        limit=criteria.limit,
        offset=criteria.offset,
    )
