"""States and cities."""

from __future__ import annotations

from pynewsdesk.models._base import ActivityStatus, Entity


class State(Entity):
    name: str = ""
    country: str = ""
    description: str | None = None
    status: ActivityStatus | None = None
    image: str | None = None


class City(Entity):
    name: str = ""
    state: str = ""
    """Id of the owning :class:`State`."""
    country: str = ""
    description: str | None = None
    status: ActivityStatus | None = None
