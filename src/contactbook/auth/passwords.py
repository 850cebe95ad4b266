# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Password hashing and verification.

Stored format is ``<salt>:<derived key hex>`` where the salt is 16 random
bytes in hex and the derived key is a 64-byte Argon2id output over
``(password, salt)``.
"""

from __future__ import annotations

import asyncio
import hmac
import secrets
from dataclasses import dataclass

import argon2
from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw

from contactbook.errors import HashingFailure

SALT_BYTES = 16
KEY_BYTES = 64


@dataclass(frozen=True)
class HashParams:
    time_cost: int = argon2.DEFAULT_TIME_COST
    memory_cost: int = argon2.DEFAULT_MEMORY_COST  # KiB
    parallelism: int = argon2.DEFAULT_PARALLELISM
    hash_len: int = KEY_BYTES


DEFAULT_PARAMS = HashParams()


def _derive(plain: str, salt: str, params: HashParams) -> str:
    try:
        key = hash_secret_raw(
            secret=plain.encode("utf-8"),
            salt=salt.encode("utf-8"),
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
            hash_len=params.hash_len,
            type=Type.ID,
        )
    except HashingError as exc:
        raise HashingFailure(str(exc)) from exc
    return key.hex()


def hash_password(plain: str, *, params: HashParams = DEFAULT_PARAMS) -> str:
    if not plain:
        raise ValueError("Empty password")
    salt = secrets.token_hex(SALT_BYTES)
    return f"{salt}:{_derive(plain, salt, params)}"


def verify_password(hash_value: str, plain: str, *, params: HashParams = DEFAULT_PARAMS) -> bool:
    if not hash_value or not plain:
        return False
    salt, sep, expected = hash_value.partition(":")
    if not sep:
        return False
    derived = _derive(plain, salt, params)
    return hmac.compare_digest(derived.encode("utf-8"), expected.encode("utf-8"))


async def hash_password_async(plain: str, *, params: HashParams = DEFAULT_PARAMS) -> str:
    """Run :func:`hash_password` off the event loop."""
    return await asyncio.to_thread(hash_password, plain, params=params)


async def verify_password_async(hash_value: str, plain: str, *, params: HashParams = DEFAULT_PARAMS) -> bool:
    """Run :func:`verify_password` off the event loop."""
    return await asyncio.to_thread(verify_password, hash_value, plain, params=params)
