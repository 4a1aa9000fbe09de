from __future__ import annotations

import threading

import pytest

from models.evidence import EvidenceItem
from pipelines.steps.gather_evidence import DEPTH_CAPS, EvidenceGatherer, build_queries, cap_for


def test_caps_are_monotonic_in_depth():
    for topic, caps in DEPTH_CAPS.items():
        assert caps[0] <= caps[1] <= caps[2], topic
    assert cap_for("general", "shallow") == 5
    assert cap_for("team", "deep") == 12


def test_issues_five_topic_queries_with_depth_caps(fake_search, contact):
    search = fake_search()
    result = EvidenceGatherer(search).gather(contact, "shallow")
    assert result.status == "ok"
    assert len(search.calls) == 5
    assert sorted(m for _, m in search.calls) == sorted([5, 3, 3, 5, 3])
    assert len(result.data) == 5 + 3 + 3 + 5 + 3


@pytest.mark.parametrize("shallow,deeper", [("shallow", "medium"), ("medium", "deep")])
def test_deeper_search_never_yields_fewer_items(fake_search, contact, shallow, deeper):
    low = EvidenceGatherer(fake_search()).gather(contact, shallow)
    high = EvidenceGatherer(fake_search()).gather(contact, deeper)
    assert len(high.data) >= len(low.data)


def test_merges_in_topic_order_and_dedupes_by_url(fake_search, contact):
    def responder(query, max_results):
        # Every topic returns the same page plus one unique page
        unique = query.split('"')[1] if '"' in query else query
        return [
            EvidenceItem(title="Team speaker announces", url="https://shared.example.com", snippet="team", content_type="article"),
            EvidenceItem(title="Team speaker announces", url=f"https://u.example.com/{hash(query)}", snippet=unique, content_type="article"),
        ]

    search = fake_search(responder=responder)
    result = EvidenceGatherer(search).gather(contact, "medium")
    urls = [i.url for i in result.data]
    assert urls.count("https://shared.example.com") == 1
    assert urls[0] == "https://shared.example.com"
    assert len(urls) == 1 + len(build_queries(contact))


def test_partial_failure_is_degraded(fake_search, contact):
    search = fake_search(fail_on=("press release",))
    result = EvidenceGatherer(search).gather(contact, "medium")
    assert result.status == "degraded"
    assert "press" in result.detail
    assert result.data


def test_total_failure_is_none(fake_search, contact):
    result = EvidenceGatherer(fake_search(fail_all=True)).gather(contact, "medium")
    assert result.status == "none"
    assert result.data == []


def test_slow_query_times_out_without_blocking_others(fake_search, contact):
    release = threading.Event()
    search = fake_search(delay_on=("speaker conference", release))
    try:
        result = EvidenceGatherer(search, timeout_seconds=0.2).gather(contact, "shallow")
    finally:
        release.set()
    assert result.status == "degraded"
    assert "events" in result.detail
    assert len(result.data) == 5 + 3 + 3 + 5


def test_topic_filters_drop_off_topic_items(fake_search, contact):
    def responder(query, max_results):
        return [EvidenceItem(title="Quarterly results", url=f"https://x.example.com/{hash(query)}", snippet="numbers")]

    result = EvidenceGatherer(fake_search(responder=responder)).gather(contact, "medium")
    # Only the unfiltered general topic contributes
    assert len(result.data) == 1
