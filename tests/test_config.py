from __future__ import annotations

import pytest

from pynewsdesk.config import DEFAULT_REQUEST_TIMEOUT, NewsdeskConfig
from pynewsdesk.exceptions import NewsdeskConfigError


def test_defaults() -> None:
    config = NewsdeskConfig()
    assert config.request_timeout == DEFAULT_REQUEST_TIMEOUT == 86400
    assert config.sign_in_path == "/"
    assert config.url_for("/category") == "http://localhost:5000/category"


def test_from_env_with_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWSDESK_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("NEWSDESK_PAGE_SIZE", "25")
    monkeypatch.setenv("NEWSDESK_REQUEST_TIMEOUT", "120")

    config = NewsdeskConfig.from_env(request_timeout=60.0)

    assert config.url_for("articles") == "https://api.example.com/articles"
    assert config.default_page_size == 25
    assert config.request_timeout == 60.0


def test_from_env_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWSDESK_PAGE_SIZE", "ten")
    with pytest.raises(NewsdeskConfigError):
        NewsdeskConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [{"base_url": " "}, {"request_timeout": 0}, {"default_page_size": -1}, {"notification_exit_delay": -0.1}],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(NewsdeskConfigError):
        NewsdeskConfig(**kwargs)  # type: ignore[arg-type]
