"""Base model and enums for newsdesk backend records.

Every backend record inherits from :class:`NewsdeskBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` values so
  the field default is used.
* A ``raw`` dict that captures the original payload.

Entities (anything with a backend ``_id``) inherit from :class:`Entity`.
Status enums inherit from :class:`NewsdeskEnum` which resolves unknown
values to ``UNKNOWN`` instead of failing the whole list response.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class NewsdeskEnum(StrEnum):
    """Base for backend status enums.

    Every subclass **must** define ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> NewsdeskEnum:
        unknown: NewsdeskEnum = cls["UNKNOWN"]
        return unknown


class ActivityStatus(NewsdeskEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNKNOWN = "unknown"


class PublishStatus(NewsdeskEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    UNKNOWN = "unknown"


class NewsdeskBaseModel(BaseModel):
    """Base for backend response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        coerce_numbers_to_str=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned


class Entity(NewsdeskBaseModel):
    """A backend record identified by its ``_id``."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    created_at: datetime | None = None
    updated_at: datetime | None = None
