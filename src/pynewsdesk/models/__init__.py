"""Backend record models."""

from pynewsdesk.models._base import ActivityStatus, Entity, NewsdeskBaseModel, NewsdeskEnum, PublishStatus
from pynewsdesk.models.content import Advertisement, Article, EPaper, RelatedLink, Short
from pynewsdesk.models.geo import City, State
from pynewsdesk.models.media import MediaFile
from pynewsdesk.models.pagination import Pagination
from pynewsdesk.models.taxonomy import Category, Location
from pynewsdesk.models.user import AdminUser, AuthTokens, LoginResult

__all__ = [
    "ActivityStatus",
    "AdminUser",
    "Advertisement",
    "Article",
    "AuthTokens",
    "Category",
    "City",
    "EPaper",
    "Entity",
    "Location",
    "LoginResult",
    "MediaFile",
    "NewsdeskBaseModel",
    "NewsdeskEnum",
    "Pagination",
    "PublishStatus",
    "RelatedLink",
    "Short",
    "State",
]
