from __future__ import annotations

import asyncio
import copy
from dataclasses import dataclass, field
from typing import Any

import pytest

from pynewsdesk._transport import HttpRequest, HttpResponse, raise_for_status
from pynewsdesk.credentials import CredentialStore, Credentials, MemoryStorage
from pynewsdesk.exceptions import NewsdeskTransportError
from pynewsdesk.notifications import NotificationController, NotificationState
from pynewsdesk.pipeline import HttpPipeline


@dataclass
class Route:
    status: int = 200
    body: Any = None
    error: Exception | None = None
    gate: asyncio.Event | None = None


@dataclass
class FakeBackend:
    """In-memory stand-in for the REST backend, implementing the Transport protocol."""

    routes: dict[tuple[str, str], list[Route]] = field(default_factory=dict)
    sent: list[HttpRequest] = field(default_factory=list)

    def on(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        body: Any = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        """Queue a response.  The last queued response for a route repeats."""
        self.routes.setdefault((method, path), []).append(Route(status=status, body=body, error=error, gate=gate))

    def calls(self, method: str, path: str) -> list[HttpRequest]:
        return [req for req in self.sent if req.method == method and req.path == path]

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.sent.append(copy.deepcopy(request))
        queue = self.routes.get((request.method, request.path))
        if not queue:
            raise NewsdeskTransportError(f"Request to {request.path} failed: no route", endpoint=request.path)
        route = queue.pop(0) if len(queue) > 1 else queue[0]
        if route.gate is not None:
            await route.gate.wait()
        else:
            await asyncio.sleep(0)
        if route.error is not None:
            raise route.error
        raise_for_status(request, route.status, route.body)
        return HttpResponse(status=route.status, data=copy.deepcopy(route.body))


class RecordingRenderer:
    def __init__(self) -> None:
        self.states: list[NotificationState] = []

    def render(self, state: NotificationState) -> None:
        self.states.append(state)

    @property
    def shown(self) -> list[NotificationState]:
        return [s for s in self.states if s.visible and not s.closing]


class RecordingNavigator:
    def __init__(self) -> None:
        self.paths: list[str] = []

    def navigate(self, path: str) -> None:
        self.paths.append(path)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def credentials() -> CredentialStore:
    store = CredentialStore(MemoryStorage())
    store.set(Credentials(access_token="access-1", refresh_token="refresh-1"))
    return store


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def notifier(renderer: RecordingRenderer) -> NotificationController:
    return NotificationController(renderer, exit_delay=0.0)


@pytest.fixture
def pipeline(
    backend: FakeBackend,
    credentials: CredentialStore,
    notifier: NotificationController,
    navigator: RecordingNavigator,
) -> HttpPipeline:
    return HttpPipeline(backend, credentials, notifier, navigator=navigator, sign_in_path="/signin")
