"""Client configuration for pynewsdesk."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pynewsdesk.exceptions import NewsdeskConfigError

#: One day.  Slow media uploads were observed to need far more than the usual
#: client-side ceilings, so the transport keeps this deliberately generous.
DEFAULT_REQUEST_TIMEOUT: float = 24 * 3600


@dataclasses.dataclass(frozen=True)
class NewsdeskConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Backend REST base URL.
    request_timeout : float
        Total timeout in seconds applied to every request.  Timeouts are
        reported as ordinary transport failures; nothing is retried.
    sign_in_path : str
        Route the application is sent to after a session expires.
    notification_exit_delay : float
        Seconds a dismissed notification stays on screen while its exit
        animation runs.
    default_page_size : int
        ``limit`` used by list calls that do not pass one.
    credentials_path : str or None
        JSON file used as durable credential storage.  ``None`` keeps
        credentials in memory for the lifetime of the process.
    """

    base_url: str = "http://localhost:5000"
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    sign_in_path: str = "/"
    notification_exit_delay: float = 0.3
    default_page_size: int = 10
    credentials_path: str | None = None

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise NewsdeskConfigError("base_url must be non-empty")
        if self.request_timeout <= 0:
            raise NewsdeskConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.default_page_size <= 0:
            raise NewsdeskConfigError(f"default_page_size must be positive, got {self.default_page_size}")
        if self.notification_exit_delay < 0:
            raise NewsdeskConfigError("notification_exit_delay must not be negative")

    def url_for(self, path: str) -> str:
        """Join *path* onto the configured base URL."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls, **overrides: Any) -> NewsdeskConfig:
        """Create configuration from ``NEWSDESK_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        _ENV_CONFIG_MAP = {
            "NEWSDESK_BASE_URL": "base_url",
            "NEWSDESK_SIGN_IN_PATH": "sign_in_path",
            "NEWSDESK_CREDENTIALS_PATH": "credentials_path",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "NEWSDESK_REQUEST_TIMEOUT": ("request_timeout", float),
            "NEWSDESK_NOTIFICATION_EXIT_DELAY": ("notification_exit_delay", float),
            "NEWSDESK_PAGE_SIZE": ("default_page_size", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = cast(val)
            except ValueError as exc:
                raise NewsdeskConfigError(f"{env_key} is not a valid number: {val!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
