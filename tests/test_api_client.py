"""
tests/test_api_client.py -- Unit tests for the requests-based API client.

The requests.Session is a MagicMock: these tests check what the client sends
and how it reads answers, not the server (see test_user_api.py for that).
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests
from conftest import make_issuer

from auth.errors import InvalidCredential
from client.api import ApiClient


def _response(status: int, body) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.content = b"x"
    resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status}")
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def http() -> MagicMock:
    return MagicMock()


def test_login_posts_bare_string(http: MagicMock) -> None:
    issued = make_issuer().issue("Prerak")
    http.post.return_value = _response(200, {"user": "Prerak", "token": issued.token})
    client = ApiClient("http://api.local/", session=http)

    result = client.login("Prerak")

    args, kwargs = http.post.call_args
    assert args[0] == "http://api.local/api/v1/user/login"
    assert kwargs["json"] == "Prerak"
    assert result.user == "Prerak"
    assert result.token == issued.token
    assert result.expires_at == issued.expires_at
    assert client.token == issued.token


def test_login_rejected(http: MagicMock) -> None:
    http.post.return_value = _response(400, "Invalid User")
    client = ApiClient("http://api.local", session=http)
    with pytest.raises(InvalidCredential):
        client.login("eve")
    assert client.token is None


def test_login_server_error(http: MagicMock) -> None:
    http.post.return_value = _response(500, {"error": {"code": "internal_error"}})
    with pytest.raises(requests.HTTPError):
        ApiClient("http://api.local", session=http).login("Prerak")


def test_me_sends_bearer(http: MagicMock) -> None:
    token = make_issuer().issue("Prerak").token
    http.post.return_value = _response(200, {"user": "Prerak", "token": token})
    http.get.return_value = _response(200, {"name": "Prerak", "role": "User"})
    client = ApiClient("http://api.local", session=http)
    client.login("Prerak")

    assert client.me()["name"] == "Prerak"
    _args, kwargs = http.get.call_args
    assert kwargs["headers"] == {"Authorization": f"Bearer {token}"}


def test_logout_drops_token(http: MagicMock) -> None:
    http.get.return_value = _response(401, {"error": {"code": "unauthorized"}})
    client = ApiClient("http://api.local", session=http)
    client.token = "stale"
    client.logout()
    with pytest.raises(requests.HTTPError):
        client.me()
    _args, kwargs = http.get.call_args
    assert kwargs["headers"] == {}
