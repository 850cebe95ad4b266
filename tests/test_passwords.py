import asyncio

import pytest

from contactbook.auth.passwords import (
    HashParams,
    hash_password,
    hash_password_async,
    verify_password,
    verify_password_async,
)
from contactbook.errors import HashingFailure

from conftest import FAST_HASH


def test_hash_format_is_salt_and_64_byte_key():
    stored = hash_password("s3cret-pass", params=FAST_HASH)
    salt, sep, key = stored.partition(":")
    assert sep == ":"
    assert len(salt) == 32
    int(salt, 16)
    assert len(key) == 128
    int(key, 16)
    assert "s3cret-pass" not in stored


def test_verify_accepts_the_hashed_password():
    stored = hash_password("s3cret-pass", params=FAST_HASH)
    assert verify_password(stored, "s3cret-pass", params=FAST_HASH) is True


def test_verify_rejects_another_password():
    stored = hash_password("s3cret-pass", params=FAST_HASH)
    assert verify_password(stored, "s3cret-pasS", params=FAST_HASH) is False


def test_hash_uses_a_fresh_salt_each_time():
    a = hash_password("same-password", params=FAST_HASH)
    b = hash_password("same-password", params=FAST_HASH)
    assert a != b
    assert a.split(":")[0] != b.split(":")[0]
    assert verify_password(a, "same-password", params=FAST_HASH)
    assert verify_password(b, "same-password", params=FAST_HASH)


def test_derivation_is_deterministic_for_a_salt():
    stored = hash_password("pw-12345678", params=FAST_HASH)
    salt = stored.split(":")[0]
    forged = salt + ":" + "0" * 128
    assert verify_password(forged, "pw-12345678", params=FAST_HASH) is False
    assert verify_password(stored, "pw-12345678", params=FAST_HASH) is True


def test_verify_with_other_params_fails():
    stored = hash_password("pw-12345678", params=FAST_HASH)
    other = HashParams(time_cost=2, memory_cost=64, parallelism=1)
    assert verify_password(stored, "pw-12345678", params=other) is False


def test_empty_and_malformed_inputs():
    with pytest.raises(ValueError):
        hash_password("", params=FAST_HASH)
    assert verify_password("", "pw", params=FAST_HASH) is False
    assert verify_password("no-separator", "pw", params=FAST_HASH) is False


def test_kdf_error_surfaces_as_hashing_failure():
    # Argon2 rejects salts shorter than 8 bytes.
    with pytest.raises(HashingFailure):
        verify_password("abc:deadbeef", "pw-12345678", params=FAST_HASH)


def test_async_variants():
    async def run():
        stored = await hash_password_async("async-pass", params=FAST_HASH)
        ok = await verify_password_async(stored, "async-pass", params=FAST_HASH)
        bad = await verify_password_async(stored, "other-pass", params=FAST_HASH)
        return ok, bad

    assert asyncio.run(run()) == (True, False)
