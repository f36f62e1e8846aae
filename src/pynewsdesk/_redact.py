"""Helpers for safe debug logging.

Every authenticated request carries bearer and refresh tokens, and the
sign-in call carries a password.  This module redacts those before they
reach DEBUG logs, and summarises uploaded media instead of dumping it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from pynewsdesk.models.media import MediaFile

_REDACTED = "<redacted>"

# Compared lowercased; request headers and login bodies use mixed case.
_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "accesstoken",
        "refreshtoken",
        "token",
        "tokens",
        "authorization",
        "x-access-token",
        "x-refresh-token",
        "cookie",
        "set-cookie",
    }
)

_BEARER_RE = re.compile(r"(?i)\b(bearer)\s+[^\s,;\"']+")


def _redact_text(text: str, max_string: int) -> str:
    text = _BEARER_RE.sub(lambda m: f"{m.group(1)} {_REDACTED}", text)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* safe to pass to a DEBUG log call.

    Secret keys are replaced wholesale and bearer tokens embedded in free
    text are masked.  Media parts are reduced to their name, type and size.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _redact_text(value, max_string)
    if isinstance(value, MediaFile):
        return f"<file {value.filename} {value.content_type} {len(value.content)}b>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)

    if isinstance(value, Mapping):
        return {
            str(key): _REDACTED
            if str(key).lower() in _SECRET_KEYS
            else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return _redact_text(repr(value), max_string)
