# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from contactbook.auth.passwords import (
    DEFAULT_PARAMS,
    HashParams,
    hash_password,
    hash_password_async,
    verify_password_async,
)
from contactbook.errors import EmailTaken, InvalidCredentials
from contactbook.infra.models import Password, User

logger = logging.getLogger(__name__)

# Verified against for unknown emails so both failure paths pay the KDF cost.
_DUMMY_HASH = "0" * 32 + ":" + "0" * 128


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    e = normalize_email(email)
    if not e:
        return None
    return db.scalar(select(User).options(joinedload(User.password)).where(User.email == e))


def create_user(db: Session, email: str, password_hash: str) -> User:
    if get_user_by_email(db, email):
        raise EmailTaken()
    user = User(email=normalize_email(email))
    user.password = Password(hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent sign-up for the same email.
        db.rollback()
        raise EmailTaken() from exc
    return user


def create_user_sync(db: Session, email: str, password: str, *, params: HashParams = DEFAULT_PARAMS) -> User:
    """Blocking variant for scripts and fixtures that run outside the event loop."""
    return create_user(db, email, hash_password(password, params=params))


async def register(db: Session, email: str, password: str, *, params: HashParams = DEFAULT_PARAMS) -> User:
    if get_user_by_email(db, email):
        raise EmailTaken()
    password_hash = await hash_password_async(password, params=params)
    user = create_user(db, email, password_hash)
    logger.info("user %s signed up", user.id)
    return user


async def authenticate(db: Session, email: str, password: str, *, params: HashParams = DEFAULT_PARAMS) -> User:
    u = get_user_by_email(db, email)
    if not u or not u.password:
        await verify_password_async(_DUMMY_HASH, password, params=params)
        logger.info("failed login: unknown account")
        raise InvalidCredentials()
    if not await verify_password_async(u.password.hash, password, params=params):
        logger.info("failed login for user %s", u.id)
        raise InvalidCredentials()
    return u
