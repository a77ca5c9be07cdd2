from __future__ import annotations

import pytest
import requests

import geocoder
from geocoder import GeocodingError, GoogleGeocoder, PostalAddress, parse_address


class FakeResponse:
    def __init__(self, status_code: int, payload: object):
        self.status_code = status_code
        self._payload = payload

    def json(self) -> object:
        return self._payload


SAMPLE_RESULT = {
    "address_components": [
        {"long_name": "221", "types": ["street_number"]},
        {"long_name": "Baker Street", "types": ["route"]},
        {"long_name": "London", "types": ["locality", "political"]},
        {"long_name": "England", "types": ["administrative_area_level_1", "political"]},
        {"long_name": "NW1 6XE", "types": ["postal_code"]},
    ]
}


def test_parse_address_orders_route_before_number():
    address = parse_address(SAMPLE_RESULT)
    assert address == PostalAddress(
        street="Baker Street 221",
        city="London",
        province="England",
        postal_code="NW1 6XE",
    )


def test_parse_address_with_missing_components():
    address = parse_address({"address_components": [{"long_name": "Main St", "types": ["route"]}]})
    assert address.street == "Main St"
    assert address.city == ""
    assert address.postal_code == ""


def test_reverse_sends_latlng_key_and_region(monkeypatch):
    seen: dict = {}

    def fake_get(url, params=None, timeout=None):
        seen.update(url=url, params=params, timeout=timeout)
        return FakeResponse(200, {"status": "OK", "results": [SAMPLE_RESULT]})

    monkeypatch.setattr(geocoder.requests, "get", fake_get)
    client = GoogleGeocoder("maps-key", region="BE", timeout=4)

    address = client.reverse(50.85, 4.35)

    assert seen["url"] == geocoder.GEOCODE_URL
    assert seen["params"] == {"latlng": "50.85,4.35", "key": "maps-key", "region": "be"}
    assert seen["timeout"] == 4
    assert address.city == "London"


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "ZERO_RESULTS", "results": []},
        {"status": "OVER_QUERY_LIMIT"},
        {"status": "OK", "results": []},
    ],
)
def test_reverse_raises_when_no_address(monkeypatch, payload):
    monkeypatch.setattr(geocoder.requests, "get", lambda *a, **k: FakeResponse(200, payload))
    with pytest.raises(GeocodingError, match="Geocoder failed due to"):
        GoogleGeocoder("maps-key").reverse(0.0, 0.0)


@pytest.mark.parametrize("results", [["not a result"], {"0": SAMPLE_RESULT}, [None]])
def test_reverse_rejects_malformed_results(monkeypatch, results):
    payload = {"status": "OK", "results": results}
    monkeypatch.setattr(geocoder.requests, "get", lambda *a, **k: FakeResponse(200, payload))
    with pytest.raises(GeocodingError, match="malformed results"):
        GoogleGeocoder("maps-key").reverse(0.0, 0.0)


def test_reverse_wraps_network_errors(monkeypatch):
    def boom(*_args, **_kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(geocoder.requests, "get", boom)
    with pytest.raises(GeocodingError, match="Network error"):
        GoogleGeocoder("maps-key").reverse(1.0, 2.0)


def test_api_key_is_required():
    with pytest.raises(ValueError):
        GoogleGeocoder("")
