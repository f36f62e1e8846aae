"""Generic CRUD resource store.

One :class:`ResourceStore` holds the list, the current item, a loading
flag, the last error and pagination for one entity type, and exposes the
standard operations against that entity's REST endpoint.  Every operation
follows the same three phases:

1. pending: ``loading`` set, ``error`` cleared;
2. fulfilled: the result is merged into the state;
3. rejected: ``error`` set to a readable message, everything else kept.

Operations never raise; failures are visible only through ``error``.

Operations on one store may overlap.  Each result is applied when its
request completes, in completion order, so a slow ``list`` finishing after
a ``delete`` brings the deleted item back until the next fetch.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable, Mapping
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, ValidationError

from pynewsdesk.exceptions import NewsdeskError, NewsdeskHttpError, NewsdeskResponseError
from pynewsdesk.models._base import Entity
from pynewsdesk.models.media import MediaFile
from pynewsdesk.models.pagination import Pagination
from pynewsdesk.pipeline import HttpPipeline

_logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Entity)

Payload = Mapping[str, Any] | BaseModel
StateListener = Callable[["ResourceState[Any]"], None]


class InsertPosition(StrEnum):
    PREPEND = "prepend"
    APPEND = "append"


@dataclasses.dataclass(frozen=True)
class ResourceEndpoint(Generic[T]):
    """Where and how one entity type lives on the backend.

    Parameters
    ----------
    path : str
        Collection path, e.g. ``"/category"``.  Items live at ``{path}/{id}``.
    model : type
        Entity model used to validate records.
    label : str
        Plural, human-readable name used in fallback error messages.
    list_key : str or None
        Key of the item array inside the list envelope's ``data``.
        ``None`` means ``data`` is the array itself.
    paginated : bool
        Whether list calls send ``page``/``limit`` and read ``pagination``.
    insert : InsertPosition
        Where a newly created item goes in ``items``.
    multipart : bool
        Always send mutation bodies as ``multipart/form-data``.  Payloads
        holding a :class:`MediaFile` are sent as multipart regardless.
    normalize : callable or None
        Applied to every raw record before validation.
    """

    path: str
    model: type[T]
    label: str
    list_key: str | None = None
    paginated: bool = True
    insert: InsertPosition = InsertPosition.APPEND
    multipart: bool = False
    normalize: Callable[[dict[str, Any]], dict[str, Any]] | None = None

    def item_path(self, item_id: str) -> str:
        return f"{self.path.rstrip('/')}/{item_id}"


class ResourceState(BaseModel, Generic[T]):
    """State of one resource.  ``items`` never holds two records with the same id."""

    items: list[T] = Field(default_factory=list)
    current: T | None = None
    loading: bool = False
    error: str | None = None
    pagination: Pagination | None = None


def _unique_by_id(items: Iterable[T]) -> list[T]:
    seen: set[str] = set()
    unique: list[T] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def _payload_dict(payload: Payload) -> dict[str, Any]:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(payload)


def _has_media(payload: Mapping[str, Any]) -> bool:
    for value in payload.values():
        if isinstance(value, MediaFile):
            return True
        if isinstance(value, (list, tuple)) and any(isinstance(v, MediaFile) for v in value):
            return True
    return False


class ResourceStore(Generic[T]):
    """State container plus CRUD operations for one entity type.

    Usage::

        categories = make_resource_store(CATEGORIES, pipeline)
        await categories.list(page=1, limit=10)
        if categories.error:
            ...
    """

    def __init__(self, endpoint: ResourceEndpoint[T], pipeline: HttpPipeline, *, page_size: int = 10) -> None:
        self.endpoint = endpoint
        self._pipeline = pipeline
        self._page_size = page_size
        self._state: ResourceState[T] = ResourceState[endpoint.model]()  # type: ignore[valid-type]
        self._in_flight = 0
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> ResourceState[T]:
        """Snapshot of the current state."""
        return self._state.model_copy(update={"items": list(self._state.items)})

    @property
    def items(self) -> list[T]:
        return list(self._state.items)

    @property
    def current(self) -> T | None:
        return self._state.current

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def pagination(self) -> Pagination | None:
        return self._state.pagination

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* with a snapshot after every state change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def clear_error(self) -> None:
        self._state.error = None
        self._notify()

    def set_current(self, item: T | None) -> None:
        self._state.current = item
        self._notify()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    async def list(self, page: int = 1, limit: int | None = None) -> bool:
        """Fetch one page and replace ``items`` and ``pagination`` with it."""
        limit = limit if limit is not None else self._page_size
        params = {"page": page, "limit": limit} if self.endpoint.paginated else None
        self._begin()
        try:
            response = await self._pipeline.get(self.endpoint.path, params=params)
            items, pagination = self._parse_list(response.data, limit)
            self._state.items = _unique_by_id(items)
            self._state.pagination = pagination
        except Exception as exc:
            self._fail(exc, "fetch")
            return False
        finally:
            self._settle()
        return True

    async def get(self, item_id: str) -> T | None:
        """Fetch one record into ``current``."""
        item_id = str(item_id)
        self._begin()
        try:
            response = await self._pipeline.get(self.endpoint.item_path(item_id))
            item = self._parse_item(response.data)
            self._state.current = item
        except Exception as exc:
            self._fail(exc, "fetch")
            return None
        finally:
            self._settle()
        return item

    async def create(self, payload: Payload) -> T | None:
        """Create a record and insert it into ``items``."""
        self._begin()
        try:
            response = await self._pipeline.post(self.endpoint.path, **self._body(payload))
            item = self._parse_item(response.data)
            self._insert(item)
        except Exception as exc:
            self._fail(exc, "create")
            return None
        finally:
            self._settle()
        return item

    async def update(self, item_id: str, payload: Payload) -> T | None:
        """Update a record and replace the entry with *item_id* in ``items``."""
        item_id = str(item_id)
        self._begin()
        try:
            response = await self._pipeline.put(self.endpoint.item_path(item_id), **self._body(payload))
            item = self._parse_item(response.data)
            self._state.items = _unique_by_id(
                item if existing.id == item_id else existing for existing in self._state.items
            )
            if self._state.current is not None and self._state.current.id == item_id:
                self._state.current = item
        except Exception as exc:
            self._fail(exc, "update")
            return None
        finally:
            self._settle()
        return item

    async def delete(self, item_id: str) -> bool:
        """Delete a record and drop it from ``items``."""
        item_id = str(item_id)
        self._begin()
        try:
            await self._pipeline.delete(self.endpoint.item_path(item_id))
            self._state.items = [existing for existing in self._state.items if existing.id != item_id]
            if self._state.current is not None and self._state.current.id == item_id:
                self._state.current = None
        except Exception as exc:
            self._fail(exc, "delete")
            return False
        finally:
            self._settle()
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _begin(self) -> None:
        self._in_flight += 1
        self._state.loading = True
        self._state.error = None
        self._notify()

    def _settle(self) -> None:
        # Also runs when the awaiting task is cancelled.
        self._in_flight -= 1
        self._state.loading = self._in_flight > 0
        self._notify()

    def _fail(self, exc: Exception, action: str) -> None:
        message = self._error_message(exc, action)
        if isinstance(exc, (NewsdeskError, ValidationError)):
            _logger.warning("Failed to %s %s: %s", action, self.endpoint.label, message)
        else:
            _logger.error("Unexpected error while trying to %s %s", action, self.endpoint.label, exc_info=exc)
        self._state.error = message

    def _error_message(self, exc: Exception, action: str) -> str:
        if isinstance(exc, NewsdeskHttpError) and exc.backend_message:
            return exc.backend_message
        if isinstance(exc, ValidationError):
            return f"Failed to {action} {self.endpoint.label}: unexpected record shape"
        if isinstance(exc, NewsdeskError) and str(exc):
            return str(exc)
        return f"Failed to {action} {self.endpoint.label}"

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("%s state listener failed", self.endpoint.label, exc_info=True)

    def _insert(self, item: T) -> None:
        items = self._state.items
        for index, existing in enumerate(items):
            if existing.id == item.id:
                self._state.items = [*items[:index], item, *items[index + 1 :]]
                return
        if self.endpoint.insert == InsertPosition.PREPEND:
            self._state.items = [item, *items]
        else:
            self._state.items = [*items, item]

    def _body(self, payload: Payload) -> dict[str, Any]:
        data = _payload_dict(payload)
        if self.endpoint.multipart or _has_media(data):
            return {"form": data}
        return {"json": data}

    def _validate(self, record: Any) -> T:
        if isinstance(record, dict) and self.endpoint.normalize is not None:
            record = self.endpoint.normalize(dict(record))
        return self.endpoint.model.model_validate(record)

    def _envelope_data(self, body: Any) -> Any:
        if not isinstance(body, dict):
            raise NewsdeskResponseError(
                f"Unexpected response from {self.endpoint.path}: expected an object envelope",
                endpoint=self.endpoint.path,
            )
        return body.get("data")

    def _parse_item(self, body: Any) -> T:
        data = self._envelope_data(body)
        if not isinstance(data, dict):
            raise NewsdeskResponseError(
                f"Response from {self.endpoint.path} has no record under 'data'",
                endpoint=self.endpoint.path,
            )
        return self._validate(data)

    def _parse_list(self, body: Any, limit: int) -> tuple[list[T], Pagination | None]:
        data = self._envelope_data(body)
        if self.endpoint.list_key is None:
            raw_items = data
            raw_pagination = None
        else:
            raw_items = data.get(self.endpoint.list_key) if isinstance(data, dict) else None
            raw_pagination = data.get("pagination") if isinstance(data, dict) else None

        items = [self._validate(record) for record in raw_items] if isinstance(raw_items, list) else []

        if not self.endpoint.paginated:
            return items, None
        if isinstance(raw_pagination, dict):
            return items, Pagination.model_validate(raw_pagination)
        return items, Pagination(total=0, page=1, pages=1, limit=limit)


def make_resource_store(
    endpoint: ResourceEndpoint[T],
    pipeline: HttpPipeline,
    *,
    page_size: int = 10,
) -> ResourceStore[T]:
    """Build the store for one entity type."""
    return ResourceStore(endpoint, pipeline, page_size=page_size)
