from __future__ import annotations

import json

from models.connection import DiscoveredConnection
from pipelines.steps.score_alignment import AlignmentScorer


def _connections():
    return [
        DiscoveredConnection(name="Jane Roe", title="CTO", company="TechCorp", career_relevance="Runs engineering"),
        DiscoveredConnection(name="Omar Haddad", title="Partner", company="Seed Fund", career_relevance="Invests in dev tools"),
    ]


def test_overlays_alignment_and_networking_value_only(fake_llm, requester):
    body = json.dumps({
        "connections": [
            {
                "name": "Someone Else",
                "careerRelevance": "rewritten by model",
                "networkingValue": 9,
                "careerAlignment": {"overallScore": 88, "alignmentFactors": {"roleRelevance": 9}},
            },
            {"networkingValue": "12", "careerAlignment": {"overallScore": 61}},
        ]
    })
    connections = _connections()
    result = AlignmentScorer(fake_llm({"alignment_scoring": body})).score(connections, requester, "Become a CTO")
    assert result.status == "ok"
    first, second = result.data
    assert first.name == "Jane Roe"
    assert first.career_relevance == "Runs engineering"
    assert first.networking_value == 9
    assert first.career_alignment.overall_score == 88
    assert first.career_alignment.alignment_factors.role_relevance == 9
    assert second.networking_value == 10
    assert second.career_alignment.overall_score == 61


def test_unparseable_response_gets_default_alignment(fake_llm, requester):
    connections = _connections()
    result = AlignmentScorer(fake_llm({"alignment_scoring": "not json"})).score(connections, requester, None)
    assert result.status == "degraded"
    for conn in result.data:
        assert conn.career_alignment.overall_score == 50
        assert conn.career_alignment.alignment_factors.industry_match == 5
        assert conn.career_alignment.actionable_insights.timeline_recommendation == "near_term"
        assert conn.career_alignment.confidence_level == "medium"


def test_missing_entries_get_default_alignment(fake_llm, requester):
    body = json.dumps([{"careerAlignment": {"overallScore": 77}}])
    result = AlignmentScorer(fake_llm({"alignment_scoring": body})).score(_connections(), requester, None)
    assert result.status == "degraded"
    assert result.data[0].career_alignment.overall_score == 77
    assert result.data[1].career_alignment.overall_score == 50


def test_single_batched_call(fake_llm, requester):
    llm = fake_llm({"alignment_scoring": "[]"})
    AlignmentScorer(llm).score(_connections(), requester, None)
    assert llm.calls == ["alignment_scoring"]
    assert "Omar Haddad" in llm.prompts["alignment_scoring"][0]


def test_non_finite_scores_fall_back_per_entry(fake_llm, requester):
    body = (
        '{"connections": ['
        '{"networkingValue": NaN, "careerAlignment": {"overallScore": Infinity, "alignmentFactors": {"skillsOverlap": NaN}}},'
        '{"networkingValue": 7, "careerAlignment": {"overallScore": 72}}'
        ']}'
    )
    connections = _connections()
    result = AlignmentScorer(fake_llm({"alignment_scoring": body})).score(connections, requester, None)
    assert result.status == "ok"
    jane, omar = result.data
    assert jane.career_alignment.overall_score == 50
    assert jane.career_alignment.alignment_factors.skills_overlap == 5
    assert jane.networking_value == 5
    assert omar.career_alignment.overall_score == 72
    assert omar.networking_value == 7


def test_malformed_entry_gets_default_alignment(fake_llm, requester, monkeypatch):
    import pipelines.steps.score_alignment as score_alignment

    def explode(raw):
        raise TypeError("unexpected alignment shape")

    monkeypatch.setattr(score_alignment, "normalize_alignment", explode)
    body = json.dumps({"connections": [{"careerAlignment": {"overallScore": 90}}, {"careerAlignment": {}}]})
    result = AlignmentScorer(fake_llm({"alignment_scoring": body})).score(_connections(), requester, None)
    assert result.status == "degraded"
    assert [c.career_alignment.overall_score for c in result.data] == [50, 50]
