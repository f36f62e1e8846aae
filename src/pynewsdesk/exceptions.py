"""Custom exception hierarchy for pynewsdesk."""

from __future__ import annotations

from typing import Any


class NewsdeskError(Exception):
    """Base exception for all pynewsdesk errors."""


class NewsdeskConfigError(NewsdeskError):
    """Invalid or missing configuration."""


class NewsdeskClientStateError(NewsdeskError):
    """Client used before it was entered with ``async with``."""


class NewsdeskTransportError(NewsdeskError):
    """Request failed before any response arrived (network error, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class NewsdeskHttpError(NewsdeskTransportError):
    """Backend answered with an HTTP error status (>= 400)."""

    @property
    def backend_message(self) -> str | None:
        """The ``message`` field of the error body, when the backend sent one."""
        if isinstance(self.body, dict):
            message = self.body.get("message")
            if isinstance(message, str) and message:
                return message
        return None


class NewsdeskSessionExpiredError(NewsdeskHttpError):
    """Backend rejected the credentials (HTTP 401).

    The pipeline wipes the stored credentials and sends the user back to
    sign-in whenever this is raised.
    """


class NewsdeskResponseError(NewsdeskError):
    """Response arrived but its envelope is not the expected shape."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)
