from __future__ import annotations

import pytest
import requests
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from alphadash.core.exceptions import DatasetNotFoundError, ProviderError
from alphadash.data import sources as sources_module
from alphadash.data.sources import BlobSource, HttpSource


class DummyResponse:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


class DummySession:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.headers = {}
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    monkeypatch.setattr(sources_module.time, "sleep", lambda _s: None)


def test_http_source_returns_body():
    session = DummySession([DummyResponse(200, "a,b\n1,2\n")])
    source = HttpSource("https://host/data/", session=session)

    assert source.read_text("/model.csv") == "a,b\n1,2\n"
    assert session.calls == ["https://host/data/model.csv"]
    assert session.headers["User-Agent"].startswith("alpha-dash/")


def test_http_source_retries_server_errors_then_succeeds():
    session = DummySession(
        [
            DummyResponse(503),
            requests.ConnectionError("boom"),
            DummyResponse(200, "{}"),
        ]
    )
    source = HttpSource("https://host", session=session, retries=3)

    assert source.read_text("model.json") == "{}"
    assert len(session.calls) == 3


def test_http_source_not_found_is_not_retried():
    session = DummySession([DummyResponse(404)])
    source = HttpSource("https://host", session=session)

    with pytest.raises(DatasetNotFoundError):
        source.read_text("missing.csv")
    assert len(session.calls) == 1


def test_http_source_gives_up_after_retries():
    session = DummySession([requests.Timeout("slow")] * 2)
    source = HttpSource("https://host", session=session, retries=2)

    with pytest.raises(ProviderError):
        source.read_text("model.json")


class FakeDownload:
    def __init__(self, payload: bytes) -> None:
        self.payload = payload

    def readall(self) -> bytes:
        return self.payload


class FakeBlob:
    def __init__(self, store, name):
        self.store = store
        self.name = name

    def download_blob(self):
        value = self.store.get(self.name)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise ResourceNotFoundError("missing")
        return FakeDownload(value)


class FakeContainer:
    container_name = "models"

    def __init__(self, store):
        self.store = store

    def get_blob_client(self, name):
        return FakeBlob(self.store, name)


def test_blob_source_reads_and_maps_errors():
    source = BlobSource(
        FakeContainer(
            {
                "model.json": b'{"ok": true}',
                "broken.csv": HttpResponseError("throttled"),
            }
        )
    )

    assert source.read_text("/model.json") == '{"ok": true}'
    assert source.cacheable is True
    with pytest.raises(DatasetNotFoundError):
        source.read_text("absent.csv")
    with pytest.raises(ProviderError):
        source.read_text("broken.csv")
