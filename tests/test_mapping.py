from __future__ import annotations

import pytest

from services.mapping import (
    normalize_alignment,
    normalize_connection,
    split_relationship_to_target,
    to_evidence_item,
    unwrap_connection_list,
)


@pytest.mark.parametrize(
    "raw,content_type,confidence",
    [
        ({"url": "https://www.prnewswire.com/news/x", "name": "Acme appoints CFO", "content": "..."}, "press_release", "high"),
        ({"link": "https://techcrunch.com/2024/a", "title": "Funding round", "snippet": "..."}, "news", "high"),
        ({"url": "https://www.linkedin.com/in/jane-roe", "name": "Jane Roe", "content": "..."}, "professional_bio", "medium"),
        ({"url": "https://techcorp.io/about/team", "name": "Our team", "content": "..."}, "company_page", "high"),
        ({"url": "https://someblog.net/post", "name": "Thoughts", "content": "long read"}, "article", "low"),
    ],
)
def test_evidence_classification_by_domain(raw, content_type, confidence):
    item = to_evidence_item(raw, company="TechCorp")
    assert item.content_type == content_type
    assert item.confidence == confidence


def test_evidence_item_maps_google_cse_shape():
    item = to_evidence_item(
        {"title": "Acme team", "link": "https://www.acme.com/team", "snippet": "Our leaders", "displayLink": "www.acme.com"}
    )
    assert item.url == "https://www.acme.com/team"
    assert item.domain == "acme.com"
    assert item.snippet == "Our leaders"


def test_evidence_item_placeholders_for_empty_result():
    item = to_evidence_item({})
    assert item.title == "No title"
    assert item.domain == "unknown"
    assert item.content_type == "unknown"


def test_split_relationship_to_target():
    rel, company, title = split_relationship_to_target("Colleague at Acme Ventures (Managing Director)")
    assert rel == "Colleague"
    assert company == "Acme Ventures"
    assert title == "Managing Director"


def test_normalize_connection_accepts_alternate_names():
    conn = normalize_connection(
        {
            "connection_name": "Jane Roe",
            "role": "CTO",
            "organization": "Acme",
            "relevance_to_user": "Leads platform engineering",
            "sources": "https://acme.com/team",
            "score": "8/10",
            "evidenceStrength": "HIGH",
        },
        0,
    )
    assert conn.name == "Jane Roe"
    assert conn.title == "CTO"
    assert conn.company == "Acme"
    assert conn.career_relevance == "Leads platform engineering"
    assert conn.evidence_sources == ["https://acme.com/team"]
    assert conn.networking_value == 8
    assert conn.evidence_strength == "high"


def test_normalize_connection_parses_combined_relationship_field():
    conn = normalize_connection(
        {"name": "Kim Park", "relationship_to_target": "Co-founder at Beta Labs (CEO)"}, 0
    )
    assert conn.relationship_to_fwb == "Co-founder"
    assert conn.company == "Beta Labs"
    assert conn.title == "CEO"


def test_normalize_connection_fills_placeholders():
    conn = normalize_connection({}, 2)
    assert conn.name == "Unknown Person 3"
    assert conn.title == "Unknown Position"
    assert conn.company == "Unknown Company"
    assert conn.relationship_to_fwb == "Colleague"
    assert conn.evidence_strength == "medium"
    assert conn.networking_value == 5


def test_normalize_connection_clamps_networking_value():
    assert normalize_connection({"name": "A B", "networkingValue": 42}, 0).networking_value == 10
    assert normalize_connection({"name": "A B", "networkingValue": -3}, 0).networking_value == 1


@pytest.mark.parametrize(
    "parsed,count",
    [
        ({"connections": [{"name": "A"}, {"name": "B"}]}, 2),
        ({"valuable_connections": [{"name": "A"}]}, 1),
        ({"results": [{"name": "A"}, "junk"]}, 1),
        ([{"name": "A"}, {"name": "B"}, {"name": "C"}], 3),
        ({"unexpected": True}, 0),
        ("text", 0),
    ],
)
def test_unwrap_connection_list_shapes(parsed, count):
    assert len(unwrap_connection_list(parsed)) == count


def test_normalize_alignment_clamps_and_defaults():
    alignment = normalize_alignment(
        {
            "overallScore": 140,
            "alignmentFactors": {"industryMatch": 11, "roleRelevance": "7"},
            "actionableInsights": {"timelineRecommendation": "Near-term", "introductionTemplates": {"direct": "Hi"}},
            "confidenceLevel": "HIGH",
        }
    )
    assert alignment.overall_score == 100
    assert alignment.alignment_factors.industry_match == 10
    assert alignment.alignment_factors.role_relevance == 7
    assert alignment.alignment_factors.skills_overlap == 5
    assert alignment.actionable_insights.timeline_recommendation == "near_term"
    assert alignment.actionable_insights.introduction_templates == {"direct": "Hi"}
    assert alignment.confidence_level == "high"


def test_normalize_alignment_non_dict_is_default():
    alignment = normalize_alignment("nonsense")
    assert alignment.overall_score == 50
    assert alignment.alignment_factors.networking_potential == 5
    assert alignment.actionable_insights.timeline_recommendation == "near_term"


def test_normalize_connection_ignores_non_finite_scores():
    for value in (float("nan"), float("inf"), float("-inf"), 10 ** 400):
        assert normalize_connection({"name": "A B", "networkingValue": value}, 0).networking_value == 5


def test_normalize_connection_coerces_contact_fields():
    conn = normalize_connection({"name": "A B", "linkedinUrl": 12345, "email": ["a@b.c"]}, 0)
    assert conn.linkedin_url is None
    assert conn.email is None

    conn = normalize_connection(
        {"name": "A B", "linkedinUrl": "https://www.linkedin.com/in/Jane-Roe/en/", "email": " jane@techcorp.io "}, 0
    )
    assert conn.linkedin_url == "https://linkedin.com/in/jane-roe"
    assert conn.email == "jane@techcorp.io"
    # Company pages are not profile links
    assert normalize_connection({"name": "A B", "linkedinUrl": "https://linkedin.com/company/techcorp"}, 0).linkedin_url is None
