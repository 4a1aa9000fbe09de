from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests

from sources.google_search import GoogleEvidenceSearch
from sources.linkup_search import LinkupEvidenceSearch


class _FakeLinkup:
    def __init__(self, results):
        self.results = results
        self.kwargs = None

    def search(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(results=self.results)


def test_linkup_maps_and_caps_results(settings_factory):
    results = [
        SimpleNamespace(name=f"TechCorp news {i}", url=f"https://techcrunch.com/{i}", content="Funding round")
        for i in range(5)
    ]
    client = _FakeLinkup(results)
    backend = LinkupEvidenceSearch(settings_factory(), client=client)
    items = backend.search('"Alex Rivera" "TechCorp"', max_results=3, company="TechCorp")
    assert len(items) == 3
    assert items[0].title == "TechCorp news 0"
    assert items[0].content_type == "news"
    assert items[0].confidence == "high"
    assert client.kwargs["output_type"] == "searchResults"
    assert client.kwargs["depth"] == "standard"


def test_linkup_errors_propagate(settings_factory):
    class _Broken:
        def search(self, **kwargs):
            raise ConnectionError("linkup down")

    backend = LinkupEvidenceSearch(settings_factory(), client=_Broken())
    with pytest.raises(ConnectionError):
        backend.search("q", max_results=3)


class _Response:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = str(payload)

    def json(self):
        return self._payload


class _Session:
    def __init__(self, responses):
        self.responses = list(responses)
        self.params = []

    def get(self, url, params=None, timeout=None):
        self.params.append(params)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _google_settings(settings_factory, **overrides):
    return settings_factory(google_api_key="key", google_cse_id="cx", search_provider="google_cse", **overrides)


def test_google_pages_until_max_results(settings_factory):
    page1 = {
        "items": [{"title": f"Result {i}", "link": f"https://example.com/{i}", "snippet": "s"} for i in range(10)],
        "searchInformation": {"totalResults": "25"},
    }
    page2 = {
        "items": [{"title": f"Result {i}", "link": f"https://example.com/{i}", "snippet": "s"} for i in range(10, 15)],
        "searchInformation": {"totalResults": "25"},
    }
    session = _Session([_Response(200, page1), _Response(200, page2)])
    backend = GoogleEvidenceSearch(_google_settings(settings_factory), session=session)
    items = backend.search("q", max_results=12)
    assert len(items) == 12
    assert [p["start"] for p in session.params] == [1, 11]
    assert session.params[1]["num"] == 2
    assert backend.api_calls_made == 2


def test_google_rate_limit_raises(settings_factory):
    session = _Session([_Response(429)])
    backend = GoogleEvidenceSearch(_google_settings(settings_factory), session=session)
    with pytest.raises(RuntimeError, match="rate limit"):
        backend.search("q", max_results=5)


def test_google_retries_request_errors(settings_factory, monkeypatch):
    monkeypatch.setattr("sources.google_search.time.sleep", lambda s: None)
    session = _Session([requests.exceptions.ConnectionError("reset"), _Response(200, {"items": []})])
    backend = GoogleEvidenceSearch(_google_settings(settings_factory, max_retries=2), session=session)
    assert backend.search("q", max_results=5) == []
    assert len(session.params) == 2
