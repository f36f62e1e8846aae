"""HTTP client pipeline: interceptor chain around every backend call.

Request interceptors run before a request is sent.  Response interceptors
run after it settles, identically for success and for HTTP errors, and
only ever add side effects: the caller always gets the original response
or the original exception.

Built-in chain:

* :class:`AuthHeaderInterceptor` attaches the stored tokens.
* :class:`SessionExpiryInterceptor` wipes credentials on HTTP 401, tells
  the user, and navigates to sign-in once they dismiss the message.
* :class:`PermissionDeniedInterceptor` tells the user when a body
  carries the backend's permission-denied marker.

Both notifying interceptors share the notification controller's
:class:`~pynewsdesk.notifications.SingleFlightGuard`, so a burst of
failing requests produces a single visible message.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from collections.abc import Coroutine, Mapping
from enum import StrEnum
from typing import Any, Protocol

from pynewsdesk._transport import HttpRequest, HttpResponse, Transport
from pynewsdesk.credentials import CredentialStore
from pynewsdesk.exceptions import NewsdeskTransportError
from pynewsdesk.notifications import DismissReason, NotificationController

_logger = logging.getLogger(__name__)

PERMISSION_DENIED_MARKER = "Permission denied"
PERMISSION_DENIED_MESSAGE = (
    "You don't have permission to access this resource. "
    "Please contact your administrator if you believe this is an error."
)
SESSION_EXPIRED_MESSAGE = "Your session has expired. You will be redirected to the login page."


def is_permission_denied(body: Any) -> bool:
    """Whether a response body carries the backend's permission-denied marker.

    The backend has no structured code for this, so the check is a plain
    substring match: on the body itself when it is a string, on its JSON
    serialization when it is an object or array.  Any payload that merely
    quotes the marker text matches too.
    """
    if isinstance(body, str):
        return PERMISSION_DENIED_MARKER in body
    if isinstance(body, (dict, list)):
        try:
            serialized = json.dumps(body, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return False
        return PERMISSION_DENIED_MARKER in serialized
    return False


class RequestPhase(StrEnum):
    CREATED = "created"
    SENT = "sent"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclasses.dataclass
class Exchange:
    """A request together with how it settled."""

    request: HttpRequest
    phase: RequestPhase = RequestPhase.CREATED
    response: HttpResponse | None = None
    error: NewsdeskTransportError | None = None

    @property
    def status(self) -> int | None:
        if self.response is not None:
            return self.response.status
        if self.error is not None:
            return self.error.status_code
        return None

    @property
    def body(self) -> Any:
        if self.response is not None:
            return self.response.data
        if self.error is not None:
            return self.error.body
        return None


class RequestInterceptor(Protocol):
    def on_request(self, request: HttpRequest) -> None:
        ...


class ResponseInterceptor(Protocol):
    def on_response(self, exchange: Exchange) -> None:
        ...


class Navigator(Protocol):
    """Moves the application to another route."""

    def navigate(self, path: str) -> None:
        ...


class LoggingNavigator:
    """Navigator for headless use: records the redirect in the log."""

    def navigate(self, path: str) -> None:
        _logger.info("Navigation requested to %s", path)


class BackgroundTasks:
    """Tracks side-effect tasks started by interceptors."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    def spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            _logger.error("Pipeline side effect failed", exc_info=task.exception())

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """Wait until every side effect started so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()


class AuthHeaderInterceptor:
    """Attaches the stored access and refresh tokens.

    Without an access token nothing is attached and the request goes out
    unauthenticated; the backend decides whether that is acceptable.
    """

    def __init__(self, credentials: CredentialStore) -> None:
        self._credentials = credentials

    def on_request(self, request: HttpRequest) -> None:
        creds = self._credentials.get()
        if not creds.access_token:
            return
        request.headers["Authorization"] = f"Bearer {creds.access_token}"
        request.headers["x-access-token"] = creds.access_token
        if creds.refresh_token:
            request.headers["x-refresh-token"] = creds.refresh_token


class SessionExpiryInterceptor:
    """Handles HTTP 401: wipe credentials, notify, then go to sign-in.

    Credentials are cleared on every 401.  The notification and the
    redirect happen only for the request that wins the single-flight
    guard, and the redirect waits until the user dismisses the message.
    If a later ``show`` replaces it, the redirect waits for the replacing
    notification instead.  A programmatic ``hide`` leaves nothing on
    screen, so the redirect follows immediately.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        notifier: NotificationController,
        navigator: Navigator,
        tasks: BackgroundTasks,
        *,
        sign_in_path: str = "/",
    ) -> None:
        self._credentials = credentials
        self._notifier = notifier
        self._navigator = navigator
        self._tasks = tasks
        self._sign_in_path = sign_in_path

    def on_response(self, exchange: Exchange) -> None:
        if exchange.status != 401:
            return
        self._credentials.clear()
        _logger.info("Session expired on %s %s; credentials cleared", exchange.request.method, exchange.request.path)
        if not self._notifier.guard.try_acquire():
            _logger.debug("Notification already active; session expiry message suppressed")
            return
        self._tasks.spawn(self._notify_then_redirect())

    async def _notify_then_redirect(self) -> None:
        try:
            reason = await self._notifier.error(SESSION_EXPIRED_MESSAGE)
            # A replacing message must be dismissed before leaving the page.
            while reason == DismissReason.REPLACED:
                replacement = self._notifier.pending_dismissal
                if replacement is None:
                    break
                reason = await replacement
        finally:
            self._notifier.guard.release()
        self._navigator.navigate(self._sign_in_path)


class PermissionDeniedInterceptor:
    """Notifies the user when a response body carries the permission-denied marker.

    On a 401 the session expiry message takes precedence, so detection is
    only logged.
    """

    def __init__(self, notifier: NotificationController, tasks: BackgroundTasks) -> None:
        self._notifier = notifier
        self._tasks = tasks

    def on_response(self, exchange: Exchange) -> None:
        if not is_permission_denied(exchange.body):
            return
        _logger.warning(
            "Permission denied for %s %s (status=%s)",
            exchange.request.method,
            exchange.request.path,
            exchange.status,
        )
        if exchange.status == 401:
            return
        if not self._notifier.guard.try_acquire():
            return
        self._tasks.spawn(self._notify())

    async def _notify(self) -> None:
        try:
            await self._notifier.error(PERMISSION_DENIED_MESSAGE)
        finally:
            self._notifier.guard.release()


class HttpPipeline:
    """Runs every backend call through the interceptor chain.

    Usage::

        pipeline = HttpPipeline(transport, credentials, notifier)
        response = await pipeline.get("/category", params={"page": 1, "limit": 10})
    """

    def __init__(
        self,
        transport: Transport,
        credentials: CredentialStore,
        notifier: NotificationController,
        *,
        navigator: Navigator | None = None,
        sign_in_path: str = "/",
    ) -> None:
        self._transport = transport
        self.credentials = credentials
        self.notifier = notifier
        self.tasks = BackgroundTasks()
        self._request_interceptors: list[RequestInterceptor] = [AuthHeaderInterceptor(credentials)]
        self._response_interceptors: list[ResponseInterceptor] = [
            SessionExpiryInterceptor(
                credentials,
                notifier,
                navigator if navigator is not None else LoggingNavigator(),
                self.tasks,
                sign_in_path=sign_in_path,
            ),
            PermissionDeniedInterceptor(notifier, self.tasks),
        ]

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        self._request_interceptors.append(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        self._response_interceptors.append(interceptor)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        form: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Send one request; raises the transport's exception unchanged on failure."""
        exchange = Exchange(
            HttpRequest(
                method=method.upper(),
                path=path,
                params=dict(params or {}),
                json=json,
                form=form,
                headers=dict(headers or {}),
            )
        )
        for request_interceptor in self._request_interceptors:
            request_interceptor.on_request(exchange.request)

        exchange.phase = RequestPhase.SENT
        try:
            response = await self._transport.send(exchange.request)
        except NewsdeskTransportError as exc:
            exchange.phase = RequestPhase.FAILED
            exchange.error = exc
            self._after_response(exchange)
            raise

        exchange.phase = RequestPhase.SUCCEEDED
        exchange.response = response
        self._after_response(exchange)
        return response

    async def get(self, path: str, *, params: Mapping[str, Any] | None = None) -> HttpResponse:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None, form: Mapping[str, Any] | None = None) -> HttpResponse:
        return await self.request("POST", path, json=json, form=form)

    async def put(self, path: str, *, json: Any = None, form: Mapping[str, Any] | None = None) -> HttpResponse:
        return await self.request("PUT", path, json=json, form=form)

    async def delete(self, path: str) -> HttpResponse:
        return await self.request("DELETE", path)

    async def wait_idle(self) -> None:
        """Wait for outstanding notifications and redirects."""
        await self.tasks.wait_idle()

    def _after_response(self, exchange: Exchange) -> None:
        for response_interceptor in self._response_interceptors:
            response_interceptor.on_response(exchange)
