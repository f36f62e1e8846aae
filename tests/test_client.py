from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from pynewsdesk.client import NewsdeskClient
from pynewsdesk.config import NewsdeskConfig
from pynewsdesk.credentials import CredentialStore, Credentials, JsonFileStorage
from pynewsdesk.exceptions import NewsdeskClientStateError
from pynewsdesk.pipeline import SESSION_EXPIRED_MESSAGE

from conftest import FakeBackend, RecordingNavigator, RecordingRenderer


def test_accessors_require_context() -> None:
    client = NewsdeskClient(NewsdeskConfig(), transport=FakeBackend())

    with pytest.raises(NewsdeskClientStateError):
        _ = client.categories
    with pytest.raises(NewsdeskClientStateError):
        _ = client.auth


@pytest.mark.asyncio
async def test_client_wires_stores_through_pipeline(backend: FakeBackend) -> None:
    config = NewsdeskConfig(default_page_size=20)
    backend.on("GET", "/locations", body={"data": {"locations": [{"_id": "l1", "name": "Delhi"}]}})

    async with NewsdeskClient(config, transport=backend) as client:
        client.credentials.set(Credentials(access_token="tok"))
        assert await client.locations.list()

        assert [loc.name for loc in client.locations.items] == ["Delhi"]
        assert client.store("locations") is client.locations
        with pytest.raises(KeyError):
            client.store("weather")

    (sent,) = backend.sent
    assert sent.params == {"page": 1, "limit": 20}
    assert sent.headers["Authorization"] == "Bearer tok"


@pytest.mark.asyncio
async def test_session_expiry_redirects_to_configured_path(backend: FakeBackend) -> None:
    renderer = RecordingRenderer()
    navigator = RecordingNavigator()
    config = NewsdeskConfig(sign_in_path="/login", notification_exit_delay=0)
    backend.on("GET", "/shorts", status=401, body={"message": "jwt expired"})

    async with NewsdeskClient(config, transport=backend, renderer=renderer, navigator=navigator) as client:
        client.credentials.set(Credentials(access_token="stale"))
        assert not await client.shorts.list()
        await asyncio.sleep(0)

        assert not client.credentials.is_signed_in
        assert [s.message for s in renderer.shown] == [SESSION_EXPIRED_MESSAGE]

        client.notifier.acknowledge()
        await client.pipeline.wait_idle()

    assert navigator.paths == ["/login"]


@pytest.mark.asyncio
async def test_credentials_path_uses_file_storage(tmp_path: Path, backend: FakeBackend) -> None:
    path = tmp_path / "session.json"
    CredentialStore(JsonFileStorage(path)).set(Credentials(access_token="from-disk"))
    backend.on("GET", "/states", body={"data": {"states": []}})

    async with NewsdeskClient(NewsdeskConfig(credentials_path=str(path)), transport=backend) as client:
        assert client.credentials.is_signed_in
        await client.states.list()

    assert backend.sent[0].headers["x-access-token"] == "from-disk"
