"""HTTP transport over aiohttp with JSON and multipart bodies."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp
from pydantic import BaseModel

from pynewsdesk._redact import redact_for_log
from pynewsdesk.config import NewsdeskConfig
from pynewsdesk.exceptions import NewsdeskHttpError, NewsdeskSessionExpiredError, NewsdeskTransportError
from pynewsdesk.models.media import MediaFile

_logger = logging.getLogger(__name__)


@dataclasses.dataclass
class HttpRequest:
    """One outgoing call.  Request interceptors may edit ``headers``."""

    method: str
    path: str
    params: dict[str, Any] = dataclasses.field(default_factory=dict)
    json: Any = None
    form: Mapping[str, Any] | None = None
    headers: dict[str, str] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class HttpResponse:
    status: int
    data: Any
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)


class Transport(Protocol):
    """Structural transport interface used by the pipeline.

    Implementations return the decoded response for statuses below 400 and
    raise :class:`NewsdeskHttpError` (or its 401 subclass) otherwise, with the
    decoded error body attached.  Having a protocol here makes it easy to
    pass test doubles.
    """

    async def send(self, request: HttpRequest) -> HttpResponse:
        ...


def raise_for_status(request: HttpRequest, status: int, body: Any) -> None:
    """Map an HTTP error status onto the exception hierarchy."""
    if status < 400:
        return
    exc_type = NewsdeskSessionExpiredError if status == 401 else NewsdeskHttpError
    raise exc_type(
        f"Request failed with status code {status}",
        status_code=status,
        endpoint=request.path,
        body=body,
    )


def decode_body(text: str) -> Any:
    """Decode a response body: JSON when it parses, else the plain text."""
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _decode_text(raw: bytes, charset: str | None) -> str:
    """Decode a response body, replacing bytes that do not fit the charset."""
    try:
        return raw.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    return str(value)


def build_form_data(form: Mapping[str, Any]) -> aiohttp.FormData:
    """Build a multipart body.  Lists of files repeat their field name."""
    data = aiohttp.FormData()
    for key, value in form.items():
        if value is None:
            continue
        if isinstance(value, MediaFile):
            value = [value]
        if isinstance(value, (list, tuple)) and value and all(isinstance(v, MediaFile) for v in value):
            for media in value:
                data.add_field(key, media.content, filename=media.filename, content_type=media.content_type)
        else:
            data.add_field(key, _form_value(value))
    return data


class AiohttpTransport:
    """Sends :class:`HttpRequest` objects with a shared aiohttp session."""

    def __init__(self, config: NewsdeskConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def send(self, request: HttpRequest) -> HttpResponse:
        url = self._config.url_for(request.path)
        kwargs: dict[str, Any] = {
            "headers": {"accept": "application/json", **request.headers},
            "timeout": self._timeout,
        }
        if request.params:
            kwargs["params"] = {k: str(v) for k, v in request.params.items()}
        if request.form is not None:
            kwargs["data"] = build_form_data(request.form)
        elif request.json is not None:
            try:
                kwargs["data"] = json.dumps(request.json)
            except (TypeError, ValueError) as exc:
                raise NewsdeskTransportError(
                    f"Request to {request.path} failed: body is not JSON serializable: {exc}",
                    endpoint=request.path,
                ) from exc
            kwargs["headers"]["content-type"] = "application/json"

        _logger.debug(
            "%s %s params=%s headers=%s body=%s",
            request.method,
            url,
            request.params,
            redact_for_log(request.headers),
            redact_for_log(request.json if request.form is None else dict(request.form)),
        )

        try:
            async with self._http.request(request.method, url, **kwargs) as resp:
                status = resp.status
                headers = dict(resp.headers)
                raw = await resp.read()
                text = _decode_text(raw, resp.charset)
        except aiohttp.ClientError as exc:
            raise NewsdeskTransportError(
                f"Request to {request.path} failed: {exc}",
                endpoint=request.path,
            ) from exc
        except asyncio.TimeoutError as exc:
            raise NewsdeskTransportError(
                f"Request to {request.path} timed out after {self._config.request_timeout:g}s",
                endpoint=request.path,
            ) from exc

        body = decode_body(text)
        _logger.debug("%s %s -> %d %s", request.method, url, status, redact_for_log(body, max_string=200))
        raise_for_status(request, status, body)
        return HttpResponse(status=status, data=body, headers=headers)
