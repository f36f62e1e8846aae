from __future__ import annotations

import json
from pathlib import Path

from pynewsdesk.credentials import CredentialStore, Credentials, JsonFileStorage, MemoryStorage
from pynewsdesk.models import AdminUser


def _admin() -> AdminUser:
    return AdminUser.model_validate(
        {
            "_id": "u1",
            "email": "editor@example.com",
            "name": "Editor",
            "role": "admin",
            "isSuper_Admin": True,
        }
    )


def test_set_get_clear_in_memory() -> None:
    store = CredentialStore(MemoryStorage())
    assert not store.is_signed_in
    assert store.get() == Credentials()

    store.set(Credentials(access_token="a", refresh_token="r", user=_admin()))

    creds = store.get()
    assert store.is_signed_in
    assert creds.access_token == "a"
    assert creds.refresh_token == "r"
    assert creds.user is not None
    assert creds.user.id == "u1"
    assert creds.user.is_super_admin

    store.clear()
    assert store.get() == Credentials()


def test_clear_also_removes_legacy_token_key() -> None:
    storage = MemoryStorage({"token": "old", "accessToken": "a", "theme": "dark"})
    CredentialStore(storage).clear()

    assert storage.get_item("token") is None
    assert storage.get_item("accessToken") is None
    assert storage.get_item("theme") == "dark"


def test_set_without_refresh_token_removes_stale_one() -> None:
    storage = MemoryStorage({"refreshToken": "stale"})
    CredentialStore(storage).set(Credentials(access_token="a"))

    assert storage.get_item("refreshToken") is None


def test_json_file_storage_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "creds.json"
    CredentialStore(JsonFileStorage(path)).set(Credentials(access_token="a", user=_admin()))

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["accessToken"] == "a"
    assert json.loads(on_disk["user"])["_id"] == "u1"

    creds = CredentialStore(JsonFileStorage(path)).get()
    assert creds.access_token == "a"
    assert creds.user is not None
    assert creds.user.email == "editor@example.com"


def test_unreadable_storage_reads_as_signed_out(tmp_path: Path) -> None:
    path = tmp_path / "creds.json"
    path.write_text("{not json", encoding="utf-8")

    store = CredentialStore(JsonFileStorage(path))

    assert not store.is_signed_in
    assert store.get() == Credentials()


def test_corrupt_user_record_is_ignored() -> None:
    store = CredentialStore(MemoryStorage({"accessToken": "a", "user": "{broken"}))

    creds = store.get()
    assert creds.access_token == "a"
    assert creds.user is None
