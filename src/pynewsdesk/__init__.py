"""pynewsdesk - Async data-access layer for the newsdesk admin dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pynewsdesk")
except PackageNotFoundError:
    __version__ = "0+local"
from pynewsdesk.auth import AuthService, AuthState
from pynewsdesk.client import NewsdeskClient
from pynewsdesk.config import NewsdeskConfig
from pynewsdesk.credentials import CredentialStore, Credentials, JsonFileStorage, MemoryStorage
from pynewsdesk.exceptions import (
    NewsdeskClientStateError,
    NewsdeskConfigError,
    NewsdeskError,
    NewsdeskHttpError,
    NewsdeskResponseError,
    NewsdeskSessionExpiredError,
    NewsdeskTransportError,
)
from pynewsdesk.models import (
    AdminUser,
    Advertisement,
    Article,
    Category,
    City,
    EPaper,
    Location,
    MediaFile,
    Pagination,
    Short,
    State,
)
from pynewsdesk.notifications import (
    DismissReason,
    NotificationController,
    NotificationKind,
    NotificationState,
    SingleFlightGuard,
)
from pynewsdesk.pipeline import HttpPipeline, is_permission_denied
from pynewsdesk.store import InsertPosition, ResourceEndpoint, ResourceState, ResourceStore, make_resource_store

__all__ = [
    "__version__",
    "AdminUser",
    "Advertisement",
    "Article",
    "AuthService",
    "AuthState",
    "Category",
    "City",
    "CredentialStore",
    "Credentials",
    "DismissReason",
    "EPaper",
    "HttpPipeline",
    "InsertPosition",
    "JsonFileStorage",
    "Location",
    "MediaFile",
    "MemoryStorage",
    "NewsdeskClient",
    "NewsdeskClientStateError",
    "NewsdeskConfig",
    "NewsdeskConfigError",
    "NewsdeskError",
    "NewsdeskHttpError",
    "NewsdeskResponseError",
    "NewsdeskSessionExpiredError",
    "NewsdeskTransportError",
    "NotificationController",
    "NotificationKind",
    "NotificationState",
    "Pagination",
    "ResourceEndpoint",
    "ResourceState",
    "ResourceStore",
    "Short",
    "SingleFlightGuard",
    "State",
    "is_permission_denied",
    "make_resource_store",
]
