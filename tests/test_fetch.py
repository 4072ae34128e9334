"""Tests for envelope retrieval."""

import pytest
import requests

from tele_station import fetch
from tele_station.errors import FetchFailure

from conftest import DummyResponse


def test_fetch_document_success(monkeypatch) -> None:
    doc = {"data": [{"name": "pressure", "pressure": 30.1}]}
    seen: dict[str, object] = {}

    def fake_get(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return DummyResponse(doc)

    monkeypatch.setattr(fetch.requests, "get", fake_get)

    assert fetch.fetch_document("http://wx.local/data.json", timeout_s=4) == doc
    assert seen["url"] == "http://wx.local/data.json"
    assert seen["timeout"] == 4


def test_fetch_document_http_error(monkeypatch) -> None:
    monkeypatch.setattr(
        fetch.requests, "get", lambda *_a, **_k: DummyResponse({}, status=503)
    )

    with pytest.raises(FetchFailure) as excinfo:
        fetch.fetch_document("http://wx.local/data.json")
    assert excinfo.value.status_code == 503
    assert excinfo.value.as_dict()["details"]["status_code"] == 503


def test_fetch_document_timeout(monkeypatch) -> None:
    def fake_get(*_args, **_kwargs):
        raise requests.exceptions.Timeout("read timed out")

    monkeypatch.setattr(fetch.requests, "get", fake_get)

    with pytest.raises(FetchFailure, match="timed out"):
        fetch.fetch_document("http://wx.local/data.json", timeout_s=1)


def test_fetch_document_connection_error(monkeypatch) -> None:
    def fake_get(*_args, **_kwargs):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(fetch.requests, "get", fake_get)

    with pytest.raises(FetchFailure, match="request failed"):
        fetch.fetch_document("http://wx.local/data.json")


def test_fetch_document_invalid_json(monkeypatch) -> None:
    monkeypatch.setattr(
        fetch.requests,
        "get",
        lambda *_a, **_k: DummyResponse(ValueError("Expecting value")),
    )

    with pytest.raises(FetchFailure, match="not valid JSON"):
        fetch.fetch_document("http://wx.local/data.json")


@pytest.mark.parametrize("body", [[1, 2], {"data": "nope"}, {"other": []}])
def test_fetch_document_rejects_unexpected_shapes(monkeypatch, body) -> None:
    monkeypatch.setattr(fetch.requests, "get", lambda *_a, **_k: DummyResponse(body))

    with pytest.raises(FetchFailure):
        fetch.fetch_document("http://wx.local/data.json")
