"""Flat view over a segment's per-platform custom activity types.

    {platform: {type1: settings1, type2: settings2}}

is projected to

    {type1: {**settings1, "platform": platform}, type2: {...}}

Type keys are meant to be unique across platforms. When they are not, the
platform iterated last owns the key in the flat view and the shadowed entry
is reported as a ``KeyCollision``.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class KeyCollision:
    type_key: str
    shadowed_platform: str
    platform: str


@dataclass
class ActivityTypeProjection:
    flat: dict[str, dict[str, Any]] = field(default_factory=dict)
    collisions: list[KeyCollision] = field(default_factory=list)

    def platform_of(self, type_key: str) -> str | None:
        entry = self.flat.get(type_key)
        return entry["platform"] if entry else None


def project(nested: dict[str, dict[str, Any]] | None) -> ActivityTypeProjection:
    """Flatten ``nested`` and record every key claimed by more than one platform."""
    projection = ActivityTypeProjection()
    for platform, types in (nested or {}).items():
        if not types:
            continue
        for type_key, settings in types.items():
            previous = projection.flat.get(type_key)
            if previous is not None:
                projection.collisions.append(
                    KeyCollision(type_key, previous["platform"], platform)
                )
            projection.flat[type_key] = {**settings, "platform": platform}
    return projection


def flatten(nested: dict[str, dict[str, Any]] | None) -> dict[str, dict[str, Any]]:
    return project(nested).flat
