import pytest
from fastapi import HTTPException
from starlette.requests import Request

from contactbook.permissions import redirect_authed_user, require_user_id, safe_redirect


def _request(app, path: str, cookie: str = "") -> Request:
    headers = [(b"cookie", cookie.encode())] if cookie else []
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": headers,
        "app": app,
    }
    return Request(scope)


def _session_cookie(app, user_id: str = "user-1") -> str:
    return app.state.sessions.create_session(user_id, remember=False).split(";", 1)[0]


def test_require_user_id_redirects_to_login_with_original_path(app):
    with pytest.raises(HTTPException) as excinfo:
        require_user_id(_request(app, "/contacts/42"))
    assert excinfo.value.status_code == 303
    assert excinfo.value.headers["Location"] == "/login?redirectTo=%2Fcontacts%2F42"


def test_require_user_id_returns_session_user(app):
    assert require_user_id(_request(app, "/contacts", _session_cookie(app))) == "user-1"


def test_redirect_authed_user_is_noop_without_session(app):
    assert redirect_authed_user(_request(app, "/login"), "/contacts") is None


def test_redirect_authed_user_redirects_with_session(app):
    with pytest.raises(HTTPException) as excinfo:
        redirect_authed_user(_request(app, "/login", _session_cookie(app)), "/contacts")
    assert excinfo.value.headers["Location"] == "/contacts"


@pytest.mark.parametrize(
    "to, expected",
    [
        ("/contacts/1", "/contacts/1"),
        (None, "/contacts"),
        ("", "/contacts"),
        ("https://evil.example", "/contacts"),
        ("//evil.example", "/contacts"),
        ("contacts", "/contacts"),
    ],
)
def test_safe_redirect(to, expected):
    assert safe_redirect(to, "/contacts") == expected
