"""Tests for the activity type projection and configuration value types."""

from segments.models.activity import (
    ActivityChannels,
    CustomActivityTypes,
    build_activity_type,
)
from segments.services.activity_projector import KeyCollision, flatten, project


def test_flatten_attaches_platform():
    nested = {
        "github": {"star": build_activity_type("Star")},
        "discord": {"hello": build_activity_type("Hello")},
    }
    flat = flatten(nested)
    assert flat["star"] == {**build_activity_type("Star"), "platform": "github"}
    assert flat["hello"]["platform"] == "discord"


def test_flatten_skips_empty_platforms():
    assert flatten({"github": {}, "slack": None}) == {}
    assert flatten(None) == {}


def test_flatten_inverts_nested_insert():
    custom = CustomActivityTypes()
    settings = build_activity_type("Deploy")
    assert custom.insert_if_absent("other", "deploy", settings)

    assert flatten(custom.to_dict()) == {"deploy": {**settings, "platform": "other"}}


def test_projection_reports_collisions():
    nested = {
        "github": {"mention": build_activity_type("Mention")},
        "slack": {"mention": build_activity_type("Mentioned")},
    }
    projection = project(nested)

    assert projection.platform_of("mention") == "slack"
    assert projection.collisions == [KeyCollision("mention", "github", "slack")]
    assert projection.platform_of("absent") is None


def test_insert_if_absent_does_not_overwrite():
    custom = CustomActivityTypes({"github": {"star": build_activity_type("Star")}})
    assert not custom.insert_if_absent("github", "star", build_activity_type("Other"))
    assert custom.get("github", "star")["display"]["default"] == "Star"


def test_working_copy_is_detached():
    source = {"github": {"star": build_activity_type("Star")}}
    custom = CustomActivityTypes(source)
    custom.remove("github", "star")

    assert "star" in source["github"]
    assert custom.to_dict() == {"github": {}}


def test_remove_leaves_other_keys():
    custom = CustomActivityTypes(
        {"github": {"star": build_activity_type("Star"), "fork": build_activity_type("Fork")}}
    )
    assert custom.remove("github", "star")
    assert not custom.remove("github", "star")
    assert list(custom.to_dict()["github"]) == ["fork"]


def test_channels_keep_first_insertion_order():
    channels = ActivityChannels()
    assert channels.add("discord", "general")
    assert channels.add("discord", "help")
    assert not channels.add("discord", "general")
    assert channels.add("slack", "general")

    assert channels.to_dict() == {"discord": ["general", "help"], "slack": ["general"]}
