"""Activity type and activity channel configuration models.

A segment stores two JSON blobs:

    custom_activity_types = {platform: {type_key: settings}}
    activity_channels = {platform: [channel, ...]}

``CustomActivityTypes`` and ``ActivityChannels`` wrap a private copy of a
blob and expose the only merge operations the service performs on it. The
caller writes ``to_dict()`` back as a whole.
"""

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict


class ActivityTypeCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str | None = None


class ActivityTypeUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str | None = None


class ActivityChannelCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    platform: str
    channel: str | None = None


class ActivityTypeSettings(BaseModel):
    """Built-in catalog plus the segment's custom activity types."""

    default: dict[str, dict[str, Any]]
    custom: dict[str, dict[str, Any]]


def build_activity_type(type_name: str) -> dict[str, Any]:
    """Settings for a custom activity type displayed as ``type_name``."""
    return {
        "display": {
            "default": type_name,
            "short": type_name,
            "channel": "",
        },
        "isContribution": False,
    }


class CustomActivityTypes:
    """Working copy of ``platform -> type_key -> settings``."""

    def __init__(self, data: dict[str, dict[str, Any]] | None = None):
        self._data: dict[str, dict[str, Any]] = copy.deepcopy(data or {})

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(self._data)

    def get(self, platform: str, key: str) -> dict[str, Any] | None:
        return (self._data.get(platform) or {}).get(key)

    def insert_if_absent(self, platform: str, key: str, settings: dict[str, Any]) -> bool:
        """Insert ``settings`` unless ``key`` already exists under ``platform``.

        Returns True when the blob changed.
        """
        types = self._data.get(platform)
        if types is None:
            types = self._data[platform] = {}
        if key in types:
            return False
        types[key] = copy.deepcopy(settings)
        return True

    def replace(self, platform: str, key: str, settings: dict[str, Any]) -> None:
        if key not in (self._data.get(platform) or {}):
            raise KeyError(f"{platform}/{key}")
        self._data[platform][key] = copy.deepcopy(settings)

    def remove(self, platform: str, key: str) -> bool:
        types = self._data.get(platform) or {}
        if key not in types:
            return False
        del types[key]
        return True


class ActivityChannels:
    """Working copy of ``platform -> ordered unique channels``."""

    def __init__(self, data: dict[str, list[str]] | None = None):
        self._data: dict[str, list[str]] = copy.deepcopy(data or {})

    def to_dict(self) -> dict[str, list[str]]:
        return copy.deepcopy(self._data)

    def add(self, platform: str, channel: str) -> bool:
        """Append ``channel`` to the platform's list unless already present."""
        channels = self._data.get(platform)
        if not channels:
            self._data[platform] = [channel]
            return True
        if channel in channels:
            return False
        channels.append(channel)
        return True
