from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from schedule_desktop.api_client import ApiClient, ApiError, PayloadError, unwrap_trips
from schedule_desktop.models import Trip


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class Recorder:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.queue: List[Any] = []

    def __getitem__(self, index: int) -> Dict[str, Any]:
        return self.calls[index]


@pytest.fixture()
def calls(monkeypatch) -> Recorder:
    recorder = Recorder()

    def fake_request(method, url, **kwargs):
        recorder.calls.append({"method": method, "url": url, **kwargs})
        response = recorder.queue.pop(0) if recorder.queue else FakeResponse(payload=[])
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(requests, "request", fake_request)
    return recorder


def test_unwrap_trips_priority():
    assert unwrap_trips([{"ID": "1"}]) == [{"ID": "1"}]
    assert unwrap_trips({"Schedule_Trips": [{"ID": "2"}]}) == [{"ID": "2"}]
    assert unwrap_trips({"scheduleTrips": [{"ID": "3"}], "trips": [{"ID": "4"}]}) == [{"ID": "4"}]
    assert unwrap_trips({"trips": "broken", "schedule_trips": [{"ID": "5"}]}) == [{"ID": "5"}]
    assert unwrap_trips({"unexpected": []}) == []
    assert unwrap_trips(None) == []


def test_fetch_trips_decodes_wrapped_payload(calls):
    calls.queue.append(FakeResponse(payload={"schedule_trips": [{"ID": "1", "Driver1": "Alice"}, "junk"]}))
    client = ApiClient("http://api.local/", token="secret")

    trips = client.fetch_trips("/api/schedule-tool")

    assert trips == [Trip("1", driver="Alice")]
    assert calls[0]["method"] == "GET"
    assert calls[0]["url"] == "http://api.local/api/schedule-tool"
    assert calls[0]["headers"]["Authorization"] == "Bearer secret"
    assert calls[0]["timeout"] == 15


def test_non_success_status_raises(calls):
    calls.queue.append(FakeResponse(status_code=500))
    client = ApiClient("http://api.local")

    with pytest.raises(ApiError) as excinfo:
        client.fetch_trips("/api/schedule-tool2")
    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == "Request failed: 500"


def test_invalid_json_raises_payload_error(calls):
    calls.queue.append(FakeResponse(invalid_json=True))
    client = ApiClient("http://api.local")

    with pytest.raises(PayloadError):
        client.fetch_trips("/api/schedule-tool")


def test_connection_error_becomes_api_error(calls):
    calls.queue.append(requests.ConnectionError("refused"))
    client = ApiClient("http://api.local")

    with pytest.raises(ApiError) as excinfo:
        client.fetch_trips("/api/schedule-tool")
    assert excinfo.value.status_code is None


def test_save_trips_payload(calls):
    client = ApiClient("http://api.local")
    trips = [Trip("1", driver="Alice", extra={"Date_field": "2024-05-02"})]

    client.save_trips("/api/schedule-tool2", trips)
    client.save_trips("/api/schedule-tool2", trips, preserve_drivers=True)

    assert calls[0]["method"] == "POST"
    assert calls[0]["json"] == {"trips": [{"ID": "1", "Driver1": "Alice", "Date_field": "2024-05-02"}]}
    assert calls[1]["json"]["preserveDrivers"] is True


def test_clear_trips_sends_delete(calls):
    ApiClient("http://api.local").clear_trips("/api/schedule-tool")
    assert calls[0]["method"] == "DELETE"
    assert calls[0]["url"] == "http://api.local/api/schedule-tool"
