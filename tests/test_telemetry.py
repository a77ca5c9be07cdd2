from __future__ import annotations

import logging

import telemetry


def test_emit_log_event_normalizes_and_masks(monkeypatch, caplog):
    monkeypatch.setattr(telemetry, "request_client_ip", lambda: "203.0.113.42")

    with caplog.at_level(logging.INFO, logger=telemetry.ACTIVITY_LOGGER_NAME):
        payload = telemetry.emit_log_event(
            type=" user ",
            action="login",
            result="ok",
            params=["7", " ", None, "a", "b", "dropped"],
            user_name="alice",
        )

    assert payload["type"] == "user"
    assert payload["result"] == "success"
    assert payload["client_ip"] == "203.0.*.*"
    assert payload["user_name"] == "alice"
    assert [payload[f"param{i}"] for i in range(1, 6)] == ["7", None, None, "a", "b"]
    assert "param6" not in payload

    record = caplog.records[-1]
    assert record.name == "geopicture.activity"
    assert record.levelno == logging.INFO
    assert record.activity["action"] == "login"


def test_failed_events_are_warnings(monkeypatch, caplog):
    monkeypatch.setattr(telemetry, "request_client_ip", lambda: None)

    payload = telemetry.emit_log_event(type="post", action="create", result="error")

    assert payload["result"] == "fail"
    assert payload["client_ip"] is None
    assert caplog.records[-1].levelno == logging.WARNING


def test_explicit_client_ip_skips_lookup(monkeypatch):
    def fail():
        raise AssertionError("lookup should not happen")

    monkeypatch.setattr(telemetry, "request_client_ip", fail)
    payload = telemetry.emit_log_event(type="user", action="logout", result="success", client_ip="2001:db8:85a3::1")
    assert payload["client_ip"] == "2001:db8:85a3:*:*"
