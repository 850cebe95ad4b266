import asyncio

import pytest

from contactbook.auth import users
from contactbook.errors import EmailTaken, InvalidCredentials

from conftest import FAST_HASH


def test_unknown_email_still_runs_the_kdf(db, monkeypatch):
    calls = []

    async def fake_verify(hash_value, plain, *, params):
        calls.append((hash_value, plain))
        return False

    monkeypatch.setattr(users, "verify_password_async", fake_verify)
    with pytest.raises(InvalidCredentials):
        asyncio.run(users.authenticate(db, "nobody@example.com", "password-1", params=FAST_HASH))
    assert len(calls) == 1
    assert calls[0][1] == "password-1"


def test_concurrent_duplicate_sign_up_maps_to_email_taken(db, monkeypatch):
    users.create_user_sync(db, "ada@example.com", "password-1", params=FAST_HASH)
    # The other request already passed the existence check when this one commits.
    monkeypatch.setattr(users, "get_user_by_email", lambda db, email: None)
    with pytest.raises(EmailTaken):
        users.create_user_sync(db, "ada@example.com", "password-2", params=FAST_HASH)
    monkeypatch.undo()
    assert users.get_user_by_email(db, "ada@example.com") is not None
