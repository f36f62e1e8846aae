"""Backend endpoints of the dashboard's entity types.

Each entity only declares its model and where it lives; the CRUD logic is
shared through :class:`~pynewsdesk.store.ResourceStore`.
"""

from __future__ import annotations

from typing import Any

from pynewsdesk.models.content import Advertisement, Article, EPaper, Short
from pynewsdesk.models.geo import City, State
from pynewsdesk.models.taxonomy import Category, Location
from pynewsdesk.store import InsertPosition, ResourceEndpoint


def _default_article_status(record: dict[str, Any]) -> dict[str, Any]:
    if not record.get("status"):
        record["status"] = "draft"
    return record


CATEGORIES: ResourceEndpoint[Category] = ResourceEndpoint(
    path="/category",
    model=Category,
    label="categories",
    list_key="categories",
)

LOCATIONS: ResourceEndpoint[Location] = ResourceEndpoint(
    path="/locations",
    model=Location,
    label="locations",
    list_key="locations",
)

# Newest first on the articles screen.
ARTICLES: ResourceEndpoint[Article] = ResourceEndpoint(
    path="/articles",
    model=Article,
    label="articles",
    list_key="articles",
    insert=InsertPosition.PREPEND,
    multipart=True,
    normalize=_default_article_status,
)

# The advertisement list is not paginated: ``data`` is the bare array.
ADVERTISEMENTS: ResourceEndpoint[Advertisement] = ResourceEndpoint(
    path="/advertisement",
    model=Advertisement,
    label="advertisements",
    list_key=None,
    paginated=False,
    multipart=True,
)

STATES: ResourceEndpoint[State] = ResourceEndpoint(
    path="/states",
    model=State,
    label="states",
    list_key="states",
    multipart=True,
)

CITIES: ResourceEndpoint[City] = ResourceEndpoint(
    path="/cities",
    model=City,
    label="cities",
    list_key="cities",
)

EPAPERS: ResourceEndpoint[EPaper] = ResourceEndpoint(
    path="/epapers",
    model=EPaper,
    label="epapers",
    list_key="epapers",
    multipart=True,
)

SHORTS: ResourceEndpoint[Short] = ResourceEndpoint(
    path="/shorts",
    model=Short,
    label="shorts",
    list_key="shorts",
    multipart=True,
)

ALL_ENDPOINTS: dict[str, ResourceEndpoint[Any]] = {
    "categories": CATEGORIES,
    "locations": LOCATIONS,
    "articles": ARTICLES,
    "advertisements": ADVERTISEMENTS,
    "states": STATES,
    "cities": CITIES,
    "epapers": EPAPERS,
    "shorts": SHORTS,
}
