# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass, field

from contactbook.auth.passwords import HashParams
from contactbook.auth.session import REMEMBER_MAX_AGE_SECONDS, SESSION_MAX_AGE_SECONDS, SessionConfig

_TRUE = {"1", "true", "yes", "y"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed to ``create_app``."""

    session_secret: str
    database_url: str = "sqlite:///./data/contactbook.db"
    environment: str = "development"
    cookie_name: str = "__session"
    session_max_age: int = SESSION_MAX_AGE_SECONDS
    remember_max_age: int = REMEMBER_MAX_AGE_SECONDS
    hash_params: HashParams = field(default_factory=HashParams)
    log_level: str = "INFO"

    @property
    def production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def session_config(self) -> SessionConfig:
        return SessionConfig(
            secret=self.session_secret,
            cookie_name=self.cookie_name,
            secure=self.production,
            session_max_age=self.session_max_age,
            remember_max_age=self.remember_max_age,
        )

    @classmethod
    def from_env(cls) -> "Settings":
        secret = os.getenv("SESSION_SECRET") or os.getenv("SECRET_KEY")
        if not secret:
            raise RuntimeError("Missing SESSION_SECRET (or SECRET_KEY) in environment")
        defaults = HashParams()
        return cls(
            session_secret=secret,
            database_url=os.getenv("CONTACTBOOK_DATABASE_URL", cls.database_url),
            environment=os.getenv("CONTACTBOOK_ENV", cls.environment),
            cookie_name=os.getenv("CONTACTBOOK_COOKIE_NAME", cls.cookie_name),
            session_max_age=_env_int("CONTACTBOOK_SESSION_MAX_AGE", SESSION_MAX_AGE_SECONDS),
            remember_max_age=_env_int("CONTACTBOOK_REMEMBER_MAX_AGE", REMEMBER_MAX_AGE_SECONDS),
            hash_params=HashParams(
                time_cost=_env_int("CONTACTBOOK_ARGON2_TIME_COST", defaults.time_cost),
                memory_cost=_env_int("CONTACTBOOK_ARGON2_MEMORY_COST", defaults.memory_cost),
                parallelism=_env_int("CONTACTBOOK_ARGON2_PARALLELISM", defaults.parallelism),
            ),
            log_level=os.getenv("CONTACTBOOK_LOG_LEVEL", cls.log_level),
        )


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE
