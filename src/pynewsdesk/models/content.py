"""Editorial content: articles, advertisements, shorts and e-papers."""

from __future__ import annotations

from pydantic import Field

from pynewsdesk.models._base import ActivityStatus, Entity, NewsdeskBaseModel, PublishStatus


class Article(Entity):
    colored_heading: str | None = None
    rest_heading: str | None = None
    article_title: str | None = None
    author: str | None = None
    category: str | None = None
    status: PublishStatus = PublishStatus.DRAFT
    excerpt: str | None = None
    content: str | None = None
    featured_image: str | None = None


class Advertisement(Entity):
    title: str = ""
    slug: str | None = None
    tags: list[str] = Field(default_factory=list)
    description: str | None = None
    destination_link: str | None = None
    placement_location: str | None = None
    cities: list[str] = Field(default_factory=list)
    amount_paid: float | None = None
    views_allowed: int | None = None
    status: ActivityStatus | None = None
    media: str | None = None
    category: str | None = None


class RelatedLink(NewsdeskBaseModel):
    url: str


class Short(Entity):
    """Short-form video."""

    title: str = ""
    description: str = ""
    category: str = ""
    video_url: str = ""
    thumbnail_url: str = ""
    related_links: list[RelatedLink] = Field(default_factory=list)


class EPaper(Entity):
    publication_name: str = ""
    publication_date: str = ""
    city: str = ""
    country: str = ""
    language: str = ""
    total_pages: int = 0
    status: PublishStatus = PublishStatus.DRAFT
    pages: list[str] = Field(default_factory=list)
    """Uploaded page file URLs."""
