import pytest
import requests

from schoolclosings import utils
from schoolclosings.utils import fetch, parse_geojson_features, safe_strip


class FakeResponse:
    def __init__(self, status: int):
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    waited: list[float] = []
    monkeypatch.setattr(utils.time, "sleep", waited.append)
    return waited


def test_fetch_retries_with_backoff(monkeypatch, sleeps) -> None:
    outcomes = [requests.ConnectionError("reset"), FakeResponse(503), FakeResponse(200)]
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs["timeout"]))
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(utils.requests, "get", fake_get)

    response = fetch("http://example.test/feed", timeout=2.5)

    assert response.status_code == 200
    assert calls == [("http://example.test/feed", 2.5)] * 3
    assert sleeps == [2, 4]


def test_fetch_raises_after_last_attempt(monkeypatch, sleeps) -> None:
    monkeypatch.setattr(utils.requests, "get", lambda url, **kwargs: FakeResponse(502))

    with pytest.raises(requests.HTTPError, match="502"):
        fetch("http://example.test/feed")
    assert len(sleeps) == utils.MAX_RETRIES - 1


def test_safe_strip() -> None:
    assert safe_strip("  Odyssey  ") == "Odyssey"
    assert safe_strip("   ") is None
    assert safe_strip(None) is None


def test_parse_geojson_features_defaults_properties() -> None:
    data = {"features": [{"type": "Feature", "properties": None}, "junk"]}

    assert parse_geojson_features(data) == [{"type": "Feature", "properties": {}}]
    assert parse_geojson_features({}) == []
