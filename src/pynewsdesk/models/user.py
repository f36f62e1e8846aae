"""Signed-in administrator and login token models."""

from __future__ import annotations

from pydantic import Field

from pynewsdesk.models._base import Entity, NewsdeskBaseModel


class AdminUser(Entity):
    """Administrator record stored alongside the tokens after sign-in."""

    email: str = ""
    name: str = ""
    role: str = ""
    type: str = ""
    is_super_admin: bool = Field(default=False, alias="isSuper_Admin")


class AuthTokens(NewsdeskBaseModel):
    access_token: str
    refresh_token: str | None = None


class LoginResult(NewsdeskBaseModel):
    """``data`` block of a successful ``/admin/login`` response."""

    admin: AdminUser
    tokens: AuthTokens
