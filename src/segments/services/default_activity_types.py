"""Built-in activity types, reported alongside a segment's custom ones."""

from segments.models.activity import build_activity_type


def _builtin(default: str, short: str, channel: str = "", is_contribution: bool = False) -> dict:
    return {
        "display": {"default": default, "short": short, "channel": channel},
        "isContribution": is_contribution,
    }


DEFAULT_ACTIVITY_TYPES: dict[str, dict[str, dict]] = {
    "github": {
        "star": _builtin("Starred a repository", "starred"),
        "fork": _builtin("Forked a repository", "forked"),
        "issues-opened": _builtin("Opened a new issue", "opened an issue", is_contribution=True),
        "pull_request-opened": _builtin(
            "Opened a new pull request", "opened a pull request", is_contribution=True
        ),
        "pull_request-comment": _builtin(
            "Commented on a pull request", "commented", is_contribution=True
        ),
    },
    "discord": {
        "joined_guild": _builtin("Joined server", "joined server"),
        "message": _builtin("Sent a message", "sent a message", "{channel}", is_contribution=True),
        "thread_started": _builtin("Started a thread", "started a thread", "{channel}", True),
    },
    "slack": {
        "channel_joined": _builtin("Joined channel", "joined channel", "{channel}"),
        "message": _builtin("Sent a message", "sent a message", "{channel}", is_contribution=True),
    },
    "hackernews": {
        "post": _builtin("Posted", "posted", is_contribution=True),
        "comment": _builtin("Commented on a post", "commented", is_contribution=True),
    },
    "other": {
        "note": build_activity_type("Note"),
    },
}
