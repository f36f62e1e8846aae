"""Administrator sign-in and sign-out.

Endpoint:
  - /admin/login
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ValidationError

from pynewsdesk.credentials import CredentialStore, Credentials
from pynewsdesk.exceptions import NewsdeskError, NewsdeskHttpError, NewsdeskResponseError
from pynewsdesk.models.user import AdminUser, LoginResult
from pynewsdesk.pipeline import HttpPipeline

_logger = logging.getLogger(__name__)

_ENDPOINT = "/admin/login"


class AuthState(BaseModel):
    user: AdminUser | None = None
    loading: bool = False
    error: str | None = None


class AuthService:
    """Signs administrators in and out.

    Like the resource stores, failures land in ``state.error`` instead of
    being raised.
    """

    def __init__(self, pipeline: HttpPipeline, credentials: CredentialStore) -> None:
        self._pipeline = pipeline
        self._credentials = credentials
        self.state = AuthState(user=credentials.get().user)

    @property
    def is_signed_in(self) -> bool:
        return self._credentials.is_signed_in

    async def login(self, email: str, password: str) -> LoginResult | None:
        """Sign in and persist the returned tokens and admin record."""
        self.state.loading = True
        self.state.error = None
        try:
            response = await self._pipeline.post(_ENDPOINT, json={"email": email, "password": password})
            body = response.data
            data = body.get("data") if isinstance(body, dict) else None
            if not isinstance(data, dict):
                raise NewsdeskResponseError("Login response has no 'data' block", endpoint=_ENDPOINT)
            result = LoginResult.model_validate(data)
        except (NewsdeskError, ValidationError) as exc:
            message = exc.backend_message if isinstance(exc, NewsdeskHttpError) else None
            self.state.error = message or str(exc) or "Login failed"
            self.state.loading = False
            _logger.warning("Login failed for %s: %s", email, self.state.error)
            return None

        self._credentials.set(
            Credentials(
                access_token=result.tokens.access_token,
                refresh_token=result.tokens.refresh_token,
                user=result.admin,
            )
        )
        self.state.user = result.admin
        self.state.loading = False
        _logger.info("Signed in as %s", result.admin.email)
        return result

    def logout(self) -> None:
        self._credentials.clear()
        self.state = AuthState()
