import json

import httpx

from app.config import settings


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            request = httpx.Request("GET", "https://geocoder.test")
            raise httpx.HTTPStatusError("upstream error", request=request, response=httpx.Response(self.status_code, request=request))

    def json(self):
        return self._payload


def test_city_fuzzy_match(client):
    resp = client.get("/api/places/cities", params={"city": "San Fransisco"})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert 1 <= len(body) <= 3
    assert body[0]["city"] == "San Francisco"
    assert body[0]["state_id"] == "CA"


def test_city_no_match_is_no_content(client):
    resp = client.get("/api/places/cities", params={"city": "qqqqxxxxzzzz"})
    assert resp.status_code == 204


def test_autocomplete_maps_results(client, monkeypatch):
    captured = {}

    def _fake_get(url, params=None, timeout=None):
        captured["url"] = url
        captured["params"] = params
        captured["timeout"] = timeout
        return _FakeResponse(
            {
                "results": [
                    {"address": {"freeformAddress": "1 Market St, San Francisco, CA 94105"}, "position": {"lat": 37.794, "lon": -122.395}},
                    {"address": {"freeformAddress": "1 Market Pl, Boston, MA"}, "position": {"lat": 42.36, "lon": -71.05}},
                    {"address": {}, "position": {"lat": 1.0, "lon": 2.0}},
                ]
            }
        )

    monkeypatch.setattr("httpx.get", _fake_get)
    monkeypatch.setattr(settings, "GEOCODER_API_KEY", "test-key")

    resp = client.get("/api/places/autocomplete", params={"query": "1 Market"})
    assert resp.status_code == 200, resp.text
    assert resp.json() == [
        {"address": "1 Market St, San Francisco, CA 94105", "lat": 37.794, "lon": -122.395},
        {"address": "1 Market Pl, Boston, MA", "lat": 42.36, "lon": -71.05},
    ]
    assert captured["url"].endswith("/search/2/search/1%20Market.json")
    assert captured["params"]["key"] == "test-key"
    assert captured["params"]["typeahead"] == "true"
    assert captured["params"]["countrySet"] == "US"
    assert captured["params"]["limit"] == 3


def test_autocomplete_upstream_failure(client, monkeypatch):
    monkeypatch.setattr("httpx.get", lambda url, params=None, timeout=None: _FakeResponse({}, status_code=503))
    resp = client.get("/api/places/autocomplete", params={"query": "1 Market"})
    assert resp.status_code == 502
    body = resp.json()
    assert body["code"] == "INTERNAL_ERROR"
    assert body["detail"] == "Internal Server Error"


def test_autocomplete_transport_error(client, monkeypatch):
    def _boom(url, params=None, timeout=None):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr("httpx.get", _boom)
    resp = client.get("/api/places/autocomplete", params={"query": "Main"})
    assert resp.status_code == 502


def test_find_city_state_qualifier():
    from app.services import city_service

    assert city_service.find_city("Portland")["state_id"] == "OR"
    assert city_service.find_city("portland, me")["state_id"] == "ME"
    assert city_service.find_city("Springfield, Illinois")["state_id"] == "IL"


def test_feed_with_state_qualified_city(client):
    resp = client.get("/api/entries/feed", params={"location": "Portland, XX", "distance": 5})
    assert resp.status_code == 404
    resp = client.get("/api/entries/feed", params={"location": "Portland, ME", "distance": 5})
    assert resp.status_code == 204


def test_city_list_can_be_replaced(client, monkeypatch, tmp_path):
    data = tmp_path / "cities.json"
    data.write_text(
        json.dumps([{"city": "Smallville", "state_id": "KS", "state_name": "Kansas", "lat": 39.0, "lng": -98.0, "population": 45001}]),
        encoding="utf-8",
    )
    monkeypatch.setattr(settings, "CITY_DATA_PATH", str(data))

    resp = client.get("/api/places/cities", params={"city": "Smallvile"})
    assert resp.status_code == 200, resp.text
    assert [row["city"] for row in resp.json()] == ["Smallville"]
