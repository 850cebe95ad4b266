# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Form schemas for login, sign-up, contacts and notes.

Forms arrive as flat string mappings. Validation failures are flattened into
``{field: [messages]}`` for the 400 responses.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, HttpUrl, ValidationError, field_validator

from contactbook.errors import FieldErrors, FormInvalid

M = TypeVar("M", bound=BaseModel)

_PYDANTIC_PREFIXES = ("Value error, ", "Assertion failed, ")


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class _CredentialsForm(_Form):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def check_password_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Must be at least 8 characters")
        return v


class LoginForm(_CredentialsForm):
    remember: bool = False

    @field_validator("remember", mode="before")
    @classmethod
    def parse_checkbox(cls, v: Any) -> bool:
        return v == "on"


class JoinForm(_CredentialsForm):
    pass


class ContactForm(_Form):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[HttpUrl] = None
    title: Optional[str] = None
    company: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    twitter_handle: Optional[str] = None
    website_url: Optional[HttpUrl] = None
    linkedin_url: Optional[HttpUrl] = None
    about: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v

    def to_fields(self) -> dict:
        out = self.model_dump(exclude_unset=True)
        for name in ("avatar_url", "website_url", "linkedin_url"):
            if out.get(name) is not None:
                out[name] = str(out[name])
        return out


class NoteForm(_Form):
    title: str
    body: str

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("body")
    @classmethod
    def check_body(cls, v: str) -> str:
        if not v:
            raise ValueError("Description is required")
        if len(v) > 260:
            raise ValueError("Description is too long")
        return v


def _message(err: dict) -> str:
    if err.get("type") == "missing":
        return "Required"
    msg = str(err.get("msg") or "Invalid value")
    for prefix in _PYDANTIC_PREFIXES:
        if msg.startswith(prefix):
            return msg[len(prefix):]
    return msg


def flatten_errors(exc: ValidationError) -> FieldErrors:
    out: FieldErrors = {}
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        out.setdefault(str(loc[0]), []).append(_message(err))
    return out


def parse_form(model: Type[M], data: Mapping[str, Any]) -> M:
    """Validate ``data`` against ``model``; raise :class:`FormInvalid` with field errors."""
    try:
        return model.model_validate(dict(data))
    except ValidationError as exc:
        raise FormInvalid(flatten_errors(exc)) from exc
