from __future__ import annotations

import pytest

from pynewsdesk.auth import AuthService
from pynewsdesk.credentials import CredentialStore, MemoryStorage
from pynewsdesk.notifications import NotificationController
from pynewsdesk.pipeline import HttpPipeline

from conftest import FakeBackend

_LOGIN_OK = {
    "success": True,
    "data": {
        "admin": {"_id": "u1", "email": "editor@example.com", "name": "Editor", "isSuper_Admin": False},
        "tokens": {"accessToken": "new-access", "refreshToken": "new-refresh"},
    },
}


@pytest.fixture
def signed_out() -> CredentialStore:
    return CredentialStore(MemoryStorage())


@pytest.fixture
def auth(backend: FakeBackend, signed_out: CredentialStore, notifier: NotificationController) -> AuthService:
    return AuthService(HttpPipeline(backend, signed_out, notifier), signed_out)


@pytest.mark.asyncio
async def test_login_persists_tokens_and_user(
    auth: AuthService,
    backend: FakeBackend,
    signed_out: CredentialStore,
) -> None:
    backend.on("POST", "/admin/login", body=_LOGIN_OK)

    result = await auth.login("editor@example.com", "secret")

    assert result is not None
    assert auth.is_signed_in
    creds = signed_out.get()
    assert creds.access_token == "new-access"
    assert creds.refresh_token == "new-refresh"
    assert auth.state.user is not None
    assert auth.state.user.email == "editor@example.com"
    assert auth.state.error is None
    assert not auth.state.loading
    assert backend.sent[0].json == {"email": "editor@example.com", "password": "secret"}
    assert "Authorization" not in backend.sent[0].headers


@pytest.mark.asyncio
async def test_subsequent_requests_carry_new_token(
    auth: AuthService,
    backend: FakeBackend,
    signed_out: CredentialStore,
    notifier: NotificationController,
) -> None:
    backend.on("POST", "/admin/login", body=_LOGIN_OK)
    backend.on("GET", "/category", body={"data": {}})
    await auth.login("editor@example.com", "secret")

    await HttpPipeline(backend, signed_out, notifier).get("/category")

    assert backend.calls("GET", "/category")[0].headers["Authorization"] == "Bearer new-access"


@pytest.mark.asyncio
async def test_login_failure_sets_backend_message(auth: AuthService, backend: FakeBackend) -> None:
    backend.on("POST", "/admin/login", status=400, body={"message": "Invalid credentials"})

    assert await auth.login("editor@example.com", "wrong") is None

    assert auth.state.error == "Invalid credentials"
    assert not auth.is_signed_in
    assert not auth.state.loading


@pytest.mark.asyncio
async def test_login_with_malformed_body(auth: AuthService, backend: FakeBackend) -> None:
    backend.on("POST", "/admin/login", body={"data": {"admin": {"_id": "u1"}}})

    assert await auth.login("editor@example.com", "secret") is None

    assert auth.state.error
    assert not auth.is_signed_in


@pytest.mark.asyncio
async def test_logout_clears_everything(auth: AuthService, backend: FakeBackend, signed_out: CredentialStore) -> None:
    backend.on("POST", "/admin/login", body=_LOGIN_OK)
    await auth.login("editor@example.com", "secret")

    auth.logout()

    assert not auth.is_signed_in
    assert signed_out.get().user is None
    assert auth.state.user is None
