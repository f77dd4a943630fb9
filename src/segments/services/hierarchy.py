"""Segment hierarchy manager: creation cascades and rename propagation.

Creating a project group also creates its project and subproject
counterparts; creating a project also creates its subproject counterpart.
Renaming a project group or project rewrites the denormalized parent and
grandparent names/slugs stored on its descendants. Every multi-row change
is expressed as a ``CascadePlan`` and committed in one transaction.
"""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from segments.db.transaction import atomic
from segments.errors.exceptions import NotFoundError, ParentNotFoundError, ValidationError
from segments.models.enums import SegmentLevel
from segments.models.segment import Segment, SegmentCreate, SegmentUpdate
from segments.repositories.segment_repo import SegmentRepository
from segments.services.cascade import CascadePlan

logger = logging.getLogger(__name__)

# Optional metadata columns that may be cleared with an explicit null
_CLEARABLE_FIELDS = ("description", "url", "source_id", "source_parent_id")

_NO_PARENT = {"parent_slug": None, "parent_name": None}
_NO_GRANDPARENT = {"grandparent_slug": None, "grandparent_name": None}


class SegmentHierarchyManager:
    def __init__(
        self,
        session: AsyncSession,
        repository_factory: Callable[[AsyncSession], SegmentRepository] = SegmentRepository,
    ):
        self.session = session
        self.repo = repository_factory(session)

    # -- creation -------------------------------------------------------------

    async def create_project_group(self, data: SegmentCreate) -> Segment:
        if data.parent_slug or data.grandparent_slug:
            raise ValidationError(
                "Project groups can't have parent or grandparent segments.",
                details={"parent_slug": data.parent_slug, "grandparent_slug": data.grandparent_slug},
            )

        plan = self.project_group_plan(data.model_dump(mode="json"))
        group, _, _ = await plan.run(self.session, self.repo)
        logger.info("Created project group %s (%s) with counterparts", group.id, group.slug)
        return await self._reread(group.id)

    async def create_project(self, data: SegmentCreate) -> Segment:
        if data.grandparent_slug:
            raise ValidationError(
                "Projects can't have grandparent segments.",
                details={"grandparent_slug": data.grandparent_slug},
            )
        if not data.parent_slug:
            raise ValidationError(
                "Missing parent_slug. Projects must belong to a project group.",
                details={"field": "parent_slug"},
            )

        group = await self.repo.find_by_slug(data.parent_slug, SegmentLevel.PROJECT_GROUP)
        if group is None:
            raise ParentNotFoundError(
                f"Project group {data.parent_name or data.parent_slug} does not exist.",
                details={"parent_slug": data.parent_slug},
            )

        fields = data.model_dump(mode="json")
        fields["parent_name"] = group.name
        plan = self.project_plan(fields)
        project, _ = await plan.run(self.session, self.repo)
        logger.info("Created project %s (%s) under %s", project.id, project.slug, group.slug)
        return await self._reread(project.id)

    async def create_subproject(self, data: SegmentCreate) -> Segment:
        if not data.parent_slug:
            raise ValidationError(
                "Missing parent_slug. Subprojects must belong to a project.",
                details={"field": "parent_slug"},
            )
        if not data.grandparent_slug:
            raise ValidationError(
                "Missing grandparent_slug. Subprojects must belong to a project group.",
                details={"field": "grandparent_slug"},
            )

        project = await self.repo.find_by_slug(
            data.parent_slug, SegmentLevel.PROJECT, parent_slug=data.grandparent_slug
        )
        if project is None:
            raise ParentNotFoundError(
                f"Project {data.parent_slug} does not exist in project group {data.grandparent_slug}.",
                details={"parent_slug": data.parent_slug, "grandparent_slug": data.grandparent_slug},
            )

        fields = data.model_dump(mode="json")
        fields["parent_name"] = project.name
        fields["grandparent_name"] = project.parent_name

        # Leaf level: a single insert, nothing cascades below a subproject
        async with atomic(self.session):
            subproject = await self.repo.create(fields)
        logger.info("Created subproject %s (%s)", subproject.id, subproject.slug)
        return await self._reread(subproject.id)

    # -- update ---------------------------------------------------------------

    async def update(self, segment_id: str, data: SegmentUpdate) -> Segment:
        row = await self.repo.find_by_id(segment_id)
        if row is None:
            raise NotFoundError("Segment", segment_id)
        existing = Segment.model_validate(row)

        changes = {
            key: value
            for key, value in data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or key in _CLEARABLE_FIELDS
        }
        if not changes:
            return existing

        plan = self.update_plan(existing, changes)
        await plan.run(self.session, self.repo)
        return await self._reread(segment_id)

    # -- plans ----------------------------------------------------------------

    def project_group_plan(self, fields: dict[str, Any]) -> CascadePlan:
        slug, name = fields["slug"], fields["name"]
        # A group is a root; ancestor fields from the request are dropped
        fields = {**fields, **_NO_PARENT, **_NO_GRANDPARENT}
        project_fields = {**fields, "parent_slug": slug, "parent_name": name}
        subproject_fields = {
            **fields,
            "parent_slug": slug,
            "parent_name": name,
            "grandparent_slug": slug,
            "grandparent_name": name,
        }
        return (
            CascadePlan(f"create project group {slug}")
            .add("project_group", lambda repo: repo.create(fields))
            .add("project_counterpart", lambda repo: repo.create(project_fields))
            .add("subproject_counterpart", lambda repo: repo.create(subproject_fields))
        )

    def project_plan(self, fields: dict[str, Any]) -> CascadePlan:
        fields = {**fields, **_NO_GRANDPARENT}
        subproject_fields = {
            **fields,
            "parent_slug": fields["slug"],
            "parent_name": fields["name"],
            "grandparent_slug": fields["parent_slug"],
            "grandparent_name": fields["parent_name"],
        }
        return (
            CascadePlan(f"create project {fields['slug']}")
            .add("project", lambda repo: repo.create(fields))
            .add("subproject_counterpart", lambda repo: repo.create(subproject_fields))
        )

    def update_plan(self, existing: Segment, changes: dict[str, Any]) -> CascadePlan:
        plan = CascadePlan(f"update segment {existing.id}").add(
            "segment", lambda repo: repo.update(existing.id, changes)
        )

        if SegmentRepository.is_subproject(existing):
            return plan

        renamed = {
            key: changes[key]
            for key in ("name", "slug")
            if changes.get(key) and changes[key] != getattr(existing, key)
        }
        if renamed:
            plan.add(
                "children",
                lambda repo: repo.update_children_bulk(existing, **renamed),
            )
        return plan

    async def _reread(self, segment_id: str) -> Segment:
        row = await self.repo.find_by_id(segment_id)
        if row is None:
            raise NotFoundError("Segment", segment_id)
        return Segment.model_validate(row)
