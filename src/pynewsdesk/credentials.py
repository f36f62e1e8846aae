"""Credential store: access token, refresh token and signed-in user.

The store is a thin get/set/clear layer over a key-value storage
backend.  It never validates token shape; the backend is the authority
on whether a token is acceptable.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from pynewsdesk.models.user import AdminUser

_logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"
USER_KEY = "user"
#: Written by older dashboard builds; removed together with the others.
LEGACY_TOKEN_KEY = "token"


class KeyValueStorage(Protocol):
    """Durable string key-value storage (the browser ``localStorage`` shape)."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """Process-local storage, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Storage persisted as a flat JSON object in a single file.

    An unreadable or corrupt file reads as empty, which leaves the caller
    unauthenticated.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            _logger.debug("Credential file %s unreadable: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _dump(self, items: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(items, indent=2), encoding="utf-8")

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._dump(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            del items[key]
            self._dump(items)


class Credentials(BaseModel):
    """Snapshot of the persisted credentials."""

    model_config = ConfigDict(frozen=True)

    access_token: str | None = None
    refresh_token: str | None = None
    user: AdminUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)


class CredentialStore:
    """Reads and writes :class:`Credentials` under fixed storage keys.

    This is the only component that writes the credential keys.
    """

    def __init__(self, storage: KeyValueStorage | None = None) -> None:
        self._storage: KeyValueStorage = storage if storage is not None else MemoryStorage()

    def get(self) -> Credentials:
        return Credentials(
            access_token=self._storage.get_item(ACCESS_TOKEN_KEY) or None,
            refresh_token=self._storage.get_item(REFRESH_TOKEN_KEY) or None,
            user=self._load_user(),
        )

    def set(self, credentials: Credentials) -> None:
        if credentials.access_token:
            self._storage.set_item(ACCESS_TOKEN_KEY, credentials.access_token)
        else:
            self._storage.remove_item(ACCESS_TOKEN_KEY)

        if credentials.refresh_token:
            self._storage.set_item(REFRESH_TOKEN_KEY, credentials.refresh_token)
        else:
            self._storage.remove_item(REFRESH_TOKEN_KEY)

        if credentials.user is not None:
            self._storage.set_item(USER_KEY, credentials.user.model_dump_json(by_alias=True))
        else:
            self._storage.remove_item(USER_KEY)

    def clear(self) -> None:
        for key in (LEGACY_TOKEN_KEY, ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY):
            self._storage.remove_item(key)

    @property
    def is_signed_in(self) -> bool:
        """Presence of an access token is the sole signed-in signal."""
        return bool(self._storage.get_item(ACCESS_TOKEN_KEY))

    def _load_user(self) -> AdminUser | None:
        raw = self._storage.get_item(USER_KEY)
        if not raw:
            return None
        try:
            return AdminUser.model_validate(json.loads(raw))
        except (ValueError, ValidationError):
            _logger.debug("Stored user record is not valid; treating as absent")
            return None
