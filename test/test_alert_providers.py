import pytest
import requests

from alerts.providers import http_provider
from alerts.providers.base import AlertProviderError
from alerts.providers.http_provider import HttpAlertProvider
from alerts.providers.static_provider import StaticAlertProvider
from growcycle.models import Alert, FarmSnapshot


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def _patch_post(monkeypatch, response=None, exc=None):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append({"url": url, "json": json, "timeout": timeout})
        if exc is not None:
            raise exc
        return response

    monkeypatch.setattr(http_provider.requests, "post", fake_post)
    return calls


def test_static_provider_returns_copy():
    alerts = [Alert(type="warning", title="Move to Blackout", tray_id="t1")]
    provider = StaticAlertProvider(alerts)
    out = provider.get_alerts(FarmSnapshot())
    assert out == alerts
    out.clear()
    assert provider.get_alerts(FarmSnapshot()) == alerts


def test_http_provider_parses_list(monkeypatch, crops):
    calls = _patch_post(
        monkeypatch,
        FakeResponse([{"type": "urgent", "title": "Harvest Overdue", "message": "2 extra days", "tray_id": "t9"}]),
    )
    provider = HttpAlertProvider("http://alerts.local/classify", timeout_s=1.5)
    out = provider.get_alerts(FarmSnapshot(crops=crops))

    assert out[0].title == "Harvest Overdue"
    assert out[0].tray_id == "t9"
    assert calls[0]["timeout"] == 1.5
    assert calls[0]["json"]["crops"][0]["id"] == "pea"


def test_http_provider_parses_wrapped_payload(monkeypatch):
    _patch_post(monkeypatch, FakeResponse({"alerts": [{"type": "routine", "title": "Deep Clean"}]}))
    out = HttpAlertProvider("http://alerts.local").get_alerts(FarmSnapshot())
    assert [a.type for a in out] == ["routine"]


def test_http_provider_connection_error(monkeypatch):
    _patch_post(monkeypatch, exc=requests.ConnectionError("refused"))
    with pytest.raises(AlertProviderError):
        HttpAlertProvider("http://alerts.local").get_alerts(FarmSnapshot())


def test_http_provider_bad_status(monkeypatch):
    _patch_post(monkeypatch, FakeResponse([], status_code=503))
    with pytest.raises(AlertProviderError):
        HttpAlertProvider("http://alerts.local").get_alerts(FarmSnapshot())


def test_http_provider_garbage_body(monkeypatch):
    _patch_post(monkeypatch, FakeResponse(ValueError("not json")))
    with pytest.raises(AlertProviderError):
        HttpAlertProvider("http://alerts.local").get_alerts(FarmSnapshot())

    _patch_post(monkeypatch, FakeResponse([{"type": "panic"}]))
    with pytest.raises(AlertProviderError):
        HttpAlertProvider("http://alerts.local").get_alerts(FarmSnapshot())


def test_http_provider_nothing_to_report(monkeypatch):
    _patch_post(monkeypatch, FakeResponse([]))
    assert HttpAlertProvider("http://alerts.local").get_alerts(FarmSnapshot()) == []
