# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

from fastapi import HTTPException, Request

from contactbook.auth.session import SessionStore

LOGIN_PATH = "/login"


def _sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def _redirect(location: str) -> HTTPException:
    return HTTPException(status_code=303, headers={"Location": location})


def current_user_id(request: Request) -> Optional[str]:
    return _sessions(request).read_session(request.headers.get("cookie"))


def require_user_id(request: Request) -> str:
    user_id = current_user_id(request)
    if user_id:
        return user_id
    loc = LOGIN_PATH + "?" + urlencode({"redirectTo": request.url.path})
    raise _redirect(loc)


def redirect_authed_user(request: Request, target: str = "/") -> None:
    if current_user_id(request):
        raise _redirect(target)


def safe_redirect(to: Optional[str], default: str = "/") -> str:
    """Return ``to`` if it is a local path, else ``default``.

    Guards the post-login redirect against open redirects such as
    ``//evil.example`` or ``https://evil.example``.
    """
    if not to or not isinstance(to, str):
        return default
    if not to.startswith("/") or to.startswith("//") or to.startswith("/\\"):
        return default
    return to

