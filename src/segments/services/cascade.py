"""Ordered write plans applied atomically against the segment repository."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from segments.db.transaction import atomic
from segments.repositories.segment_repo import SegmentRepository

logger = logging.getLogger(__name__)

WriteFn = Callable[[SegmentRepository], Awaitable[Any]]


@dataclass(frozen=True)
class WriteStep:
    name: str
    apply: WriteFn


@dataclass
class CascadePlan:
    """Writes that must land together or not at all, in the order added."""

    description: str
    steps: list[WriteStep] = field(default_factory=list)

    def add(self, name: str, apply: WriteFn) -> "CascadePlan":
        self.steps.append(WriteStep(name, apply))
        return self

    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]

    async def run(self, session: AsyncSession, repo: SegmentRepository) -> list[Any]:
        """Apply every step inside one transaction and return their results.

        If any step raises, nothing is committed and the step's exception
        propagates unchanged.
        """
        results: list[Any] = []
        async with atomic(session):
            for index, step in enumerate(self.steps):
                try:
                    results.append(await step.apply(repo))
                except Exception:
                    logger.warning(
                        "Cascade '%s' failed at step %d (%s)", self.description, index, step.name
                    )
                    raise
        logger.info("Cascade '%s' committed %d writes", self.description, len(results))
        return results
