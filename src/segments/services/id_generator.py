"""Segment identifiers."""

import uuid


def generate_id(prefix: str) -> str:
    """Return ``prefix`` followed by 16 random hex digits, e.g. ``seg_3f9c0a1be24d7c55``."""
    return prefix + uuid.uuid4().hex[:16]
