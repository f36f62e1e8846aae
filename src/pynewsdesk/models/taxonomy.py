"""Categories and locations used to file content."""

from __future__ import annotations

from pynewsdesk.models._base import ActivityStatus, Entity


class Category(Entity):
    name: str = ""
    description: str | None = None
    color: str | None = None
    status: ActivityStatus | None = None


class Location(Entity):
    name: str = ""
    country: str | None = None
    region: str | None = None
    description: str | None = None
    status: ActivityStatus | None = None
