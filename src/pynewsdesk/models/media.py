"""Binary media attached to mutation payloads."""

from __future__ import annotations

import dataclasses
from pathlib import Path


@dataclasses.dataclass(frozen=True)
class MediaFile:
    """A file sent as one part of a ``multipart/form-data`` body.

    Any payload containing a ``MediaFile`` is sent as multipart.
    """

    filename: str
    content: bytes = dataclasses.field(repr=False)
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path, content_type: str = "application/octet-stream") -> MediaFile:
        file_path = Path(path)
        return cls(filename=file_path.name, content=file_path.read_bytes(), content_type=content_type)
