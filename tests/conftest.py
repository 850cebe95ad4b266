import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from contactbook.app import create_app
from contactbook.auth.passwords import HashParams
from contactbook.config import Settings

# Argon2id at its floor; real cost parameters only slow the suite down.
FAST_HASH = HashParams(time_cost=1, memory_cost=64, parallelism=1)

PASSWORD = "correct-horse"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        session_secret="test-secret",
        database_url=f"sqlite:///{tmp_path / 'contactbook.db'}",
        hash_params=FAST_HASH,
        log_level="WARNING",
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app, follow_redirects=False)


def sign_up(client: TestClient, email: str, password: str = PASSWORD):
    return client.post("/join", data={"email": email, "password": password})


@pytest.fixture()
def authed_client(client) -> TestClient:
    r = sign_up(client, "ada@example.com")
    assert r.status_code == 303
    return client
