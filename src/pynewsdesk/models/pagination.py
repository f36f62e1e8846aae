"""Pagination block returned by list endpoints."""

from __future__ import annotations

from pynewsdesk.models._base import NewsdeskBaseModel


class Pagination(NewsdeskBaseModel):
    """``{total, page, pages, limit}`` as sent by the backend."""

    total: int = 0
    page: int = 1
    pages: int = 1
    limit: int = 10
