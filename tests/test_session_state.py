from __future__ import annotations

from types import SimpleNamespace

import pytest

import session_state
from app_constants import PAGE_HOME, PAGE_OPTIONS
from location_resolver import LocationDraft
from picture_acquirer import PictureDraft
from session_proxy import GeoPictureSessionProxy


@pytest.fixture
def fake_state(monkeypatch):
    state: dict = {}
    monkeypatch.setattr(session_state, "st", SimpleNamespace(session_state=state))
    return state


def test_ensure_state_sets_defaults_once(fake_state):
    fake_state["title"] = "kept"
    proxy = session_state.ensure_state()

    assert proxy.page == PAGE_HOME
    assert fake_state["title"] == "kept"
    assert fake_state["body"] == ""
    assert isinstance(fake_state["picture_draft"], PictureDraft)
    assert isinstance(fake_state["location_draft"], LocationDraft)

    draft = fake_state["picture_draft"]
    session_state.ensure_state()
    assert fake_state["picture_draft"] is draft


def test_go_page_validates_name(fake_state):
    session_state.ensure_state()
    session_state.go_page(PAGE_OPTIONS)
    assert fake_state["page"] == PAGE_OPTIONS
    with pytest.raises(ValueError):
        session_state.go_page("board")


def test_pull_location_from_widgets_updates_draft(fake_state):
    session_state.ensure_state()
    draft = fake_state["location_draft"]
    fake_state.update(street="Main St 5", city="Springfield", postal_code="12345", latitude=None)

    pulled = session_state.pull_location_from_widgets()

    assert pulled is draft
    assert pulled.latitude == ""
    assert pulled.summary == "Main St 5, 12345 Springfield"


def test_proxy_alert_queue_and_unknown_page():
    backing = {"page": "somewhere"}
    proxy = GeoPictureSessionProxy(backing)
    assert proxy.page == PAGE_HOME

    proxy.push_alert({"message": "one"})
    proxy.push_alert({"message": "two"})
    assert proxy.pop_alert() == {"message": "one"}
    assert [alert["message"] for alert in proxy.alerts] == ["two"]
    proxy.pop_alert()
    assert proxy.pop_alert() is None
