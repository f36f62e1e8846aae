"""High-level async client for the newsdesk admin backend."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pynewsdesk import resources
from pynewsdesk._transport import AiohttpTransport, Transport
from pynewsdesk.auth import AuthService
from pynewsdesk.config import NewsdeskConfig
from pynewsdesk.credentials import CredentialStore, JsonFileStorage, KeyValueStorage, MemoryStorage
from pynewsdesk.exceptions import NewsdeskClientStateError
from pynewsdesk.models.content import Advertisement, Article, EPaper, Short
from pynewsdesk.models.geo import City, State
from pynewsdesk.models.taxonomy import Category, Location
from pynewsdesk.notifications import NotificationController, NotificationRenderer
from pynewsdesk.pipeline import HttpPipeline, Navigator
from pynewsdesk.store import ResourceStore, make_resource_store

_logger = logging.getLogger(__name__)


class NewsdeskClient:
    """Async client wiring credentials, notifications, pipeline and stores.

    Usage::

        async with NewsdeskClient(config) as client:
            await client.auth.login("admin@example.com", "secret")
            await client.categories.list(page=1, limit=10)
            print(client.categories.items)

    The notification controller, navigator and storage are injected so a
    UI (or a test) can supply its own.
    """

    def __init__(
        self,
        config: NewsdeskConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        storage: KeyValueStorage | None = None,
        notifier: NotificationController | None = None,
        renderer: NotificationRenderer | None = None,
        navigator: Navigator | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport

        if storage is None:
            storage = JsonFileStorage(config.credentials_path) if config.credentials_path else MemoryStorage()
        self.credentials = CredentialStore(storage)
        self.notifier = (
            notifier
            if notifier is not None
            else NotificationController(renderer, exit_delay=config.notification_exit_delay)
        )
        self._navigator = navigator
        self._pipeline: HttpPipeline | None = None
        self._stores: dict[str, ResourceStore[Any]] = {}
        self._auth: AuthService | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> NewsdeskClient:
        transport = self._transport
        if transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = AiohttpTransport(self._config, self._http_session)
        self._pipeline = HttpPipeline(
            transport,
            self.credentials,
            self.notifier,
            navigator=self._navigator,
            sign_in_path=self._config.sign_in_path,
        )
        self._stores = {
            name: make_resource_store(endpoint, self._pipeline, page_size=self._config.default_page_size)
            for name, endpoint in resources.ALL_ENDPOINTS.items()
        }
        self._auth = AuthService(self._pipeline, self.credentials)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._pipeline is not None:
            pending = self._pipeline.tasks.pending
            if pending:
                _logger.debug("Cancelling %d pending notification task(s)", pending)
            self._pipeline.tasks.cancel_all()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._pipeline = None
        self._stores = {}
        self._auth = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def _require_pipeline(self) -> HttpPipeline:
        if self._pipeline is None:
            raise NewsdeskClientStateError("Client not initialized. Use 'async with NewsdeskClient(...) as client:'")
        return self._pipeline

    @property
    def pipeline(self) -> HttpPipeline:
        return self._require_pipeline()

    @property
    def auth(self) -> AuthService:
        if self._auth is None:
            raise NewsdeskClientStateError("Client not initialized. Use 'async with NewsdeskClient(...) as client:'")
        return self._auth

    def store(self, name: str) -> ResourceStore[Any]:
        """Return the store registered under *name* (see ``resources.ALL_ENDPOINTS``)."""
        self._require_pipeline()
        try:
            return self._stores[name]
        except KeyError:
            raise KeyError(f"Unknown resource {name!r}; expected one of {sorted(self._stores)}") from None

    @property
    def categories(self) -> ResourceStore[Category]:
        return self.store("categories")

    @property
    def locations(self) -> ResourceStore[Location]:
        return self.store("locations")

    @property
    def articles(self) -> ResourceStore[Article]:
        return self.store("articles")

    @property
    def advertisements(self) -> ResourceStore[Advertisement]:
        return self.store("advertisements")

    @property
    def states(self) -> ResourceStore[State]:
        return self.store("states")

    @property
    def cities(self) -> ResourceStore[City]:
        return self.store("cities")

    @property
    def epapers(self) -> ResourceStore[EPaper]:
        return self.store("epapers")

    @property
    def shorts(self) -> ResourceStore[Short]:
        return self.store("shorts")
