from __future__ import annotations

import os
import re
import sys
import threading
from dataclasses import replace
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'pipelines.steps.gather_evidence'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


class FakeSearch:
    """Evidence search double: deterministic items per query, optional failures."""

    source_name = "fake"

    def __init__(self, fail_on=(), fail_all=False, responder=None, delay_on=None):
        self.fail_on = tuple(fail_on)
        self.fail_all = fail_all
        self.responder = responder
        self.delay_on = delay_on
        self.calls = []
        self._lock = threading.Lock()

    def search(self, query, *, max_results, company=None):
        from models.evidence import EvidenceItem

        with self._lock:
            self.calls.append((query, max_results))
        if self.delay_on and self.delay_on[0] in query:
            self.delay_on[1].wait(5)
        if self.fail_all or any(marker in query for marker in self.fail_on):
            raise RuntimeError("search backend unavailable")
        if self.responder is not None:
            return self.responder(query, max_results)
        slug = re.sub(r"[^a-z0-9]+", "-", query.lower()).strip("-")
        return [
            EvidenceItem(
                title=f"Team speaker conference: leadership announces {i}",
                url=f"https://news.example.com/{slug}/{i}",
                snippet="Jane Roe and John Smith spoke on the team panel.",
                domain="news.example.com",
                content_type="article",
                confidence="medium",
            )
            for i in range(max_results)
        ]


class FakeLLM:
    """Text generation double keyed by use case; values may be text, an exception, or a callable."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self.prompts = {}

    def generate(self, *, use_case, prompt, system_prompt=None, prompt_name=None):
        self.calls.append(use_case)
        self.prompts.setdefault(use_case, []).append(prompt)
        response = self.responses.get(use_case, "")
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response


def make_settings(**overrides):
    from config.settings import Settings

    base = Settings(
        openai_api_key="test-openai",
        openai_model="gpt-4o-mini",
        llm_timeout_seconds=5,
        search_provider="linkup",
        linkup_api_key="test-linkup",
        linkup_depth="standard",
        google_api_key=None,
        google_cse_id=None,
        google_search_url="https://www.googleapis.com/customsearch/v1",
        search_timeout_seconds=5,
        max_retries=1,
        gather_concurrency=5,
        default_search_depth="medium",
        max_connections=10,
        discovery_cache_ttl_seconds=3600,
        validation_mode="lenient",
        run_env="test",
        log_level="WARNING",
        api_host="127.0.0.1",
        api_port=8000,
    )
    return replace(base, **overrides)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def fake_search():
    return FakeSearch


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def contact():
    from models.contact import Contact

    return Contact(name="Alex Rivera", company="TechCorp", position="VP Engineering")


@pytest.fixture
def requester():
    from models.contact import RequesterProfile

    return RequesterProfile(
        name="Sam Lee",
        title="Senior Software Engineer",
        summary="Backend engineer moving into engineering leadership",
        skills=["Python", "Distributed Systems"],
    )
