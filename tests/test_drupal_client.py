from __future__ import annotations

import pytest
import requests

import drupal_client
from drupal_client import DrupalApiError, DrupalClient


class FakeResponse:
    def __init__(self, status_code: int, payload: object = None, *, reason: str = "", invalid_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason
        self._invalid_json = invalid_json

    def json(self) -> object:
        if self._invalid_json:
            raise ValueError("no json")
        return self._payload


def _install_post(monkeypatch, *responses):
    calls: list[dict] = []
    queue = list(responses)

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": dict(headers or {}), "timeout": timeout})
        return queue.pop(0)

    monkeypatch.setattr(drupal_client.requests, "post", fake_post)
    return calls


def test_connect_anonymous_then_login_sends_cookie(monkeypatch):
    calls = _install_post(
        monkeypatch,
        FakeResponse(200, {"sessid": "anon", "session_name": "SESSabc", "user": {"uid": 0}}),
        FakeResponse(200, {"sessid": "s3cr3t", "session_name": "SESSabc", "user": {"uid": "7", "name": "alice"}}),
        FakeResponse(200, {"fid": "12"}),
    )
    client = DrupalClient("https://drupal.example.com", timeout=3)

    session = client.connect()
    assert calls[0]["url"] == "https://drupal.example.com/api/system/connect"
    assert calls[0]["timeout"] == 3
    assert session.is_authenticated is False
    assert session.user.uid == 0

    session = client.login("alice", "pw")
    assert calls[1]["url"].endswith("api/user/login")
    assert calls[1]["json"] == {"name": "alice", "pass": "pw"}
    assert calls[1]["headers"]["Cookie"] == "SESSabc=anon"
    assert session.user.uid == 7
    assert session.user.name == "alice"

    fid = client.create_file(filename="picture.jpg", file_data="QUJD", uid=7)
    assert fid == 12
    assert calls[2]["json"] == {"file": {"filename": "picture.jpg", "file": "QUJD", "uid": 7}}
    assert calls[2]["headers"]["Cookie"] == "SESSabc=s3cr3t"


def test_connect_keeps_previous_session_name(monkeypatch):
    _install_post(
        monkeypatch,
        FakeResponse(200, {"sessid": "one", "session_name": "SESSx", "user": {"uid": 0}}),
        FakeResponse(200, {"sessid": "two", "user": {"uid": 0}}),
    )
    client = DrupalClient("https://drupal.example.com/")
    client.connect()
    session = client.connect()
    assert session.cookie == "SESSx=two"


def test_login_failure_uses_backend_message(monkeypatch):
    _install_post(monkeypatch, FakeResponse(401, ["Wrong username or password."], reason="Unauthorized"))
    client = DrupalClient("https://drupal.example.com/")

    with pytest.raises(DrupalApiError) as excinfo:
        client.login("alice", "bad")
    assert str(excinfo.value) == "Wrong username or password."
    assert excinfo.value.status_code == 401


def test_error_falls_back_to_http_reason(monkeypatch):
    _install_post(monkeypatch, FakeResponse(500, invalid_json=True, reason="Internal Server Error"))
    client = DrupalClient("https://drupal.example.com/")

    with pytest.raises(DrupalApiError, match="Internal Server Error"):
        client.create_node({"title": "x"})


def test_network_error_is_wrapped(monkeypatch):
    def boom(*_args, **_kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(drupal_client.requests, "post", boom)
    client = DrupalClient("https://drupal.example.com/")
    with pytest.raises(DrupalApiError, match="Network error"):
        client.connect()


def test_missing_base_url_is_reported_before_any_request(monkeypatch):
    calls = _install_post(monkeypatch)
    with pytest.raises(DrupalApiError, match="base URL"):
        DrupalClient("").connect()
    assert calls == []


def test_create_node_wraps_body_and_returns_nid(monkeypatch):
    calls = _install_post(monkeypatch, FakeResponse(200, {"nid": 42, "uri": "node/42"}))
    client = DrupalClient("https://drupal.example.com/")
    nid = client.create_node({"title": "Bridge", "type": "blog"})
    assert nid == 42
    assert calls[0]["json"] == {"node": {"title": "Bridge", "type": "blog"}}


def test_create_file_without_fid_is_an_error(monkeypatch):
    _install_post(monkeypatch, FakeResponse(200, {"uri": "file/0"}))
    client = DrupalClient("https://drupal.example.com/")
    with pytest.raises(DrupalApiError, match="file id"):
        client.create_file(filename="a.png", file_data="", uid=1)


def test_logout_clears_session_even_on_failure(monkeypatch):
    _install_post(
        monkeypatch,
        FakeResponse(200, {"sessid": "s", "session_name": "SESS", "user": {"uid": 3, "name": "bob"}}),
        FakeResponse(406, ["User is not logged in."]),
    )
    client = DrupalClient("https://drupal.example.com/")
    client.login("bob", "pw")
    with pytest.raises(DrupalApiError):
        client.logout()
    assert client.session is None
