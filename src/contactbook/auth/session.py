# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadData, URLSafeTimedSerializer
from starlette.requests import cookie_parser
from starlette.responses import Response

COOKIE_NAME = "__session"
SESSION_MAX_AGE_SECONDS = 60 * 60 * 24  # 1 day
REMEMBER_MAX_AGE_SECONDS = 60 * 60 * 24 * 7  # 7 days


@dataclass(frozen=True)
class SessionConfig:
    secret: str
    salt: str = "contactbook.session.v1"
    cookie_name: str = COOKIE_NAME
    secure: bool = False
    # Upper bound for browser-session cookies, which carry no Max-Age.
    session_max_age: int = SESSION_MAX_AGE_SECONDS
    remember_max_age: int = REMEMBER_MAX_AGE_SECONDS


class SessionStore:
    """Signed, cookie-backed sessions holding a user id.

    Nothing is kept server-side: a token whose signature and age check out is
    trusted to name its user.
    """

    def __init__(self, config: SessionConfig) -> None:
        if not config.secret:
            raise RuntimeError("Session secret is empty")
        self.config = config
        self._serializer = URLSafeTimedSerializer(secret_key=config.secret, salt=config.salt)

    def _cookie_header(self, value: str, *, max_age: Optional[int], expires: Optional[int] = None) -> str:
        resp = Response()
        resp.set_cookie(
            self.config.cookie_name,
            value,
            max_age=max_age,
            expires=expires,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.config.secure,
        )
        return resp.headers["set-cookie"]

    def create_session(self, user_id: str, remember: bool) -> str:
        token = self._serializer.dumps({"userId": user_id, "remember": bool(remember)})
        max_age = self.config.remember_max_age if remember else None
        return self._cookie_header(token, max_age=max_age)

    def destroy_session(self) -> str:
        return self._cookie_header("", max_age=0, expires=0)

    def read_token(self, token: str) -> Optional[str]:
        if not token:
            return None
        try:
            data, signed_at = self._serializer.loads(
                token,
                max_age=self.config.remember_max_age,
                return_timestamp=True,
            )
        except BadData:
            return None
        if not isinstance(data, dict):
            return None
        user_id = str(data.get("userId") or "").strip()
        if not user_id:
            return None
        if not data.get("remember"):
            age = time.time() - signed_at.timestamp()
            if age > self.config.session_max_age:
                return None
        return user_id

    def read_session(self, cookie_header: Optional[str]) -> Optional[str]:
        if not cookie_header:
            return None
        cookies = cookie_parser(cookie_header)
        return self.read_token(cookies.get(self.config.cookie_name, ""))
