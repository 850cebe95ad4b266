import time

import pytest

from contactbook.auth.session import SessionConfig, SessionStore


@pytest.fixture()
def store():
    return SessionStore(SessionConfig(secret="k1"))


def _cookie_pair(set_cookie: str) -> str:
    return set_cookie.split(";", 1)[0]


def test_round_trip(store):
    header = store.create_session("user-1", remember=False)
    assert store.read_session(_cookie_pair(header)) == "user-1"


def test_cookie_flags(store):
    short = store.create_session("user-1", remember=False)
    assert "HttpOnly" in short
    assert "Path=/" in short
    assert "samesite=lax" in short.lower()
    assert "Max-Age" not in short
    assert "Secure" not in short

    long = store.create_session("user-1", remember=True)
    assert "Max-Age=604800" in long

    secure = SessionStore(SessionConfig(secret="k1", secure=True))
    assert "Secure" in secure.create_session("user-1", remember=False)


def test_other_cookies_are_ignored(store):
    pair = _cookie_pair(store.create_session("user-1", remember=True))
    assert store.read_session(f"theme=dark; {pair}; lang=es") == "user-1"


@pytest.mark.parametrize("header", [None, "", "__session=", "__session=garbage", "__session=a.b.c", "other=1"])
def test_invalid_or_missing_is_none(store, header):
    assert store.read_session(header) is None


def test_foreign_key_is_rejected(store):
    other = SessionStore(SessionConfig(secret="k2"))
    pair = _cookie_pair(other.create_session("user-1", remember=True))
    assert store.read_session(pair) is None


def test_expired_remembered_session(store, monkeypatch):
    pair = _cookie_pair(store.create_session("user-1", remember=True))
    now = time.time()
    monkeypatch.setattr(time, "time", lambda: now + 8 * 24 * 3600)
    assert store.read_session(pair) is None


def test_expired_browser_session(store, monkeypatch):
    pair = _cookie_pair(store.create_session("user-1", remember=False))
    now = time.time()
    monkeypatch.setattr(time, "time", lambda: now + 2 * 24 * 3600)
    assert store.read_session(pair) is None


def test_remembered_session_outlives_browser_bound(store, monkeypatch):
    pair = _cookie_pair(store.create_session("user-1", remember=True))
    now = time.time()
    monkeypatch.setattr(time, "time", lambda: now + 2 * 24 * 3600)
    assert store.read_session(pair) == "user-1"


def test_destroy_session(store):
    header = store.destroy_session()
    assert "Max-Age=0" in header
    assert store.read_session(_cookie_pair(header)) is None


def test_empty_secret_is_refused():
    with pytest.raises(RuntimeError):
        SessionStore(SessionConfig(secret=""))
