"""Adapters from the loose shapes external services return to our records.

Every external call site has exactly one normalizer here. The search
backends and the generation model do not reliably honor the requested
schema, so each function accepts the alternate field names seen in
practice and fills anything still missing with a deterministic placeholder.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from models.connection import (
    ActionableInsights,
    AlignmentFactors,
    CareerAlignment,
    DiscoveredConnection,
    StrategicValue,
)
from models.evidence import EvidenceItem
from services.domain_utils import extract_apex_domain, hostname_from_url, normalize_linkedin_profile_url
from utils.score_parsing import clamp_score


# --- evidence -----------------------------------------------------------------

NEWS_DOMAINS = (
    "techcrunch", "bloomberg", "reuters", "wsj", "fortune", "forbes",
    "businessinsider", "nytimes", "ft.com", "cnbc", "theverge", "wired",
    "venturebeat", "axios",
)
PRESS_DOMAINS = ("prnewswire", "businesswire", "globenewswire", "marketwatch", "newswire")
BIO_DOMAINS = ("linkedin.com", "crunchbase.com", "about.me", "theorg.com", "zoominfo.com")
HIGH_CONFIDENCE_DOMAINS = NEWS_DOMAINS[:10] + PRESS_DOMAINS[:3]

CONTENT_TYPES = ("news", "press_release", "company_page", "professional_bio", "article", "unknown")
TIERS = ("high", "medium", "low")


def _company_slug(company: Optional[str]) -> str:
    return re.sub(r"[^a-z0-9]", "", (company or "").lower())


def _is_company_domain(domain: str, company: Optional[str]) -> bool:
    slug = _company_slug(company)
    if len(slug) < 3:
        return False
    apex = extract_apex_domain(domain) or domain
    return slug in re.sub(r"[^a-z0-9]", "", apex.split(".")[0])


def classify_content_type(domain: str, title: str, snippet: str, company: Optional[str] = None) -> str:
    d = (domain or "").lower()
    t = (title or "").lower()
    if any(p in d for p in PRESS_DOMAINS) or "press release" in t or " announces " in f" {t} ":
        return "press_release"
    if any(n in d for n in NEWS_DOMAINS):
        return "news"
    if any(b in d for b in BIO_DOMAINS):
        return "professional_bio"
    if _is_company_domain(d, company):
        return "company_page"
    if snippet:
        return "article"
    return "unknown"


def assess_confidence(domain: str, content_type: str, company: Optional[str] = None) -> str:
    d = (domain or "").lower()
    if any(h in d for h in HIGH_CONFIDENCE_DOMAINS) or content_type == "company_page":
        return "high"
    if content_type in ("news", "press_release", "professional_bio"):
        return "medium"
    return "low"


def normalize_tier(value: Any, default: str = "medium") -> str:
    text = str(value or "").strip().lower()
    return text if text in TIERS else default


def _first(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, "", []):
            return value
    return None


def to_evidence_item(raw: Dict[str, Any], company: Optional[str] = None) -> EvidenceItem:
    """Map a Linkup result, a Google CSE item, or an already-structured dict."""
    url = str(_first(raw, "url", "link") or "")
    title = str(_first(raw, "title", "name") or "No title")
    snippet = str(_first(raw, "snippet", "content", "description") or "")
    domain = str(_first(raw, "domain", "displayLink") or hostname_from_url(url)).lower()
    if domain.startswith("www."):
        domain = domain[4:]

    content_type = str(_first(raw, "contentType", "content_type") or "").lower().replace("-", "_")
    if content_type not in CONTENT_TYPES or content_type == "unknown":
        content_type = classify_content_type(domain, title, snippet, company)
    confidence = _first(raw, "confidence")
    confidence = normalize_tier(confidence, default="") or assess_confidence(domain, content_type, company)

    return EvidenceItem(
        title=title,
        url=url,
        snippet=snippet,
        domain=domain or "unknown",
        content_type=content_type,  # type: ignore[arg-type]
        confidence=confidence,  # type: ignore[arg-type]
        publish_date=_first(raw, "publishDate", "publish_date", "date"),
        source=_first(raw, "source") or domain or None,
    )


# --- connections ----------------------------------------------------------------

_PAREN_RE = re.compile(r"\(([^)]+)\)")
_AT_COMPANY_RE = re.compile(r"\bat\s+([^(]+)", re.IGNORECASE)
_RELATION_RE = re.compile(r"^(.*?)\s+at\s+", re.IGNORECASE)


def split_relationship_to_target(text: Optional[str]) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Split 'Colleague at Acme Ventures (Managing Director)' into
    (relationship, company, title). Any part may be None."""
    if not text:
        return None, None, None
    title_m = _PAREN_RE.search(text)
    company_m = _AT_COMPANY_RE.search(text)
    relation_m = _RELATION_RE.match(text)
    title = title_m.group(1).strip() if title_m else None
    company = company_m.group(1).strip() if company_m else None
    relationship = relation_m.group(1).strip() if relation_m else None
    return relationship or None, company or None, title or None


def unwrap_connection_list(parsed: Any) -> List[Dict[str, Any]]:
    """Find the candidate array in whatever root shape the model chose."""
    if isinstance(parsed, list):
        items: Iterable[Any] = parsed
    elif isinstance(parsed, dict):
        items = _first(parsed, "connections", "valuable_connections", "results", "people") or []
        if not isinstance(items, list):
            items = []
    else:
        items = []
    return [item for item in items if isinstance(item, dict)]


def _as_source_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(v) for v in value if isinstance(v, (str, int, float)) and str(v).strip()]
    return []


def _optional_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def normalize_connection(raw: Dict[str, Any], index: int) -> DiscoveredConnection:
    """Canonical DiscoveredConnection from one extraction entry (index is 0-based)."""
    title = _first(raw, "title", "role", "current_title", "job_title", "position")
    company = _first(raw, "company", "organization", "employer")
    relationship = _first(raw, "relationshipToFWB", "relationship", "connection_type")

    combined = raw.get("relationship_to_target")
    if isinstance(combined, str) and combined.strip():
        rel_part, company_part, title_part = split_relationship_to_target(combined)
        title = title or title_part
        company = company or company_part
        relationship = relationship or rel_part or combined.strip()

    sources = _as_source_list(_first(raw, "evidenceSources", "evidence_sources", "sources", "evidence"))
    if not sources and raw.get("source_url"):
        sources = _as_source_list(raw.get("source_url"))
    if not sources:
        sources = ["Team directory"]

    return DiscoveredConnection(
        name=str(_first(raw, "name", "connection_name", "fullName", "full_name") or f"Unknown Person {index + 1}").strip(),
        title=str(title or "Unknown Position").strip(),
        company=str(company or "Unknown Company").strip(),
        linkedin_url=normalize_linkedin_profile_url(_optional_str(_first(raw, "linkedinUrl", "linkedin_url", "profileLink"))),
        email=_optional_str(_first(raw, "email")),
        relationship_to_fwb=str(relationship or "Colleague").strip(),
        evidence_strength=normalize_tier(_first(raw, "evidenceStrength", "evidence_strength")),  # type: ignore[arg-type]
        evidence_sources=sources,
        career_relevance=str(
            _first(raw, "careerRelevance", "relevance_to_user", "reason_for_connection", "relevance", "career_relevance")
            or "Potential networking opportunity"
        ),
        networking_value=clamp_score(_first(raw, "networkingValue", "networking_value", "score"), 1, 10, 5),
    )


# --- alignment ------------------------------------------------------------------

_TIMELINES = {
    "immediate": "immediate",
    "now": "immediate",
    "near_term": "near_term",
    "near-term": "near_term",
    "near term": "near_term",
    "nearterm": "near_term",
    "medium_term": "near_term",
    "future": "future",
    "long_term": "future",
    "long-term": "future",
}


def normalize_timeline(value: Any) -> str:
    return _TIMELINES.get(str(value or "").strip().lower(), "near_term")


def _str_list(value: Any, default: List[str]) -> List[str]:
    if isinstance(value, list):
        out = [str(v) for v in value if isinstance(v, (str, int, float)) and str(v).strip()]
        return out or default
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return default


def normalize_templates(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items() if isinstance(v, str) and v.strip()}


def normalize_alignment(raw: Any) -> CareerAlignment:
    """CareerAlignment from a model entry; unknown or missing parts keep neutral defaults."""
    if not isinstance(raw, dict):
        return CareerAlignment.default()
    base = CareerAlignment.default()

    factors_raw = _first(raw, "alignmentFactors", "alignment_factors", "factors")
    factors_raw = factors_raw if isinstance(factors_raw, dict) else {}
    factors = AlignmentFactors(
        industry_match=clamp_score(_first(factors_raw, "industryMatch", "industry_match"), 1, 10, 5),
        role_relevance=clamp_score(_first(factors_raw, "roleRelevance", "role_relevance"), 1, 10, 5),
        skills_overlap=clamp_score(_first(factors_raw, "skillsOverlap", "skills_overlap"), 1, 10, 5),
        career_stage_alignment=clamp_score(
            _first(factors_raw, "careerStageAlignment", "career_stage_alignment"), 1, 10, 5
        ),
        networking_potential=clamp_score(
            _first(factors_raw, "networkingPotential", "networking_potential"), 1, 10, 5
        ),
    )

    sv_raw = _first(raw, "strategicValue", "strategic_value")
    sv_raw = sv_raw if isinstance(sv_raw, dict) else {}
    sv_default = base.strategic_value
    strategic = StrategicValue(
        short_term_benefit=str(_first(sv_raw, "shortTermBenefit", "short_term_benefit") or sv_default.short_term_benefit),
        long_term_benefit=str(_first(sv_raw, "longTermBenefit", "long_term_benefit") or sv_default.long_term_benefit),
        key_opportunities=_str_list(_first(sv_raw, "keyOpportunities", "key_opportunities"), sv_default.key_opportunities),
        potential_challenges=_str_list(
            _first(sv_raw, "potentialChallenges", "potential_challenges"), sv_default.potential_challenges
        ),
    )

    ai_raw = _first(raw, "actionableInsights", "actionable_insights")
    ai_raw = ai_raw if isinstance(ai_raw, dict) else {}
    ai_default = base.actionable_insights
    insights = ActionableInsights(
        approach_strategy=str(_first(ai_raw, "approachStrategy", "approach_strategy") or ai_default.approach_strategy),
        conversation_starters=_str_list(
            _first(ai_raw, "conversationStarters", "conversation_starters"), ai_default.conversation_starters
        ),
        value_proposition=str(_first(ai_raw, "valueProposition", "value_proposition") or ai_default.value_proposition),
        timeline_recommendation=normalize_timeline(  # type: ignore[arg-type]
            _first(ai_raw, "timelineRecommendation", "timeline_recommendation", "timeline")
        ),
        introduction_templates=normalize_templates(_first(ai_raw, "introductionTemplates", "introduction_templates")),
    )

    return CareerAlignment(
        overall_score=clamp_score(_first(raw, "overallScore", "overall_score", "score"), 1, 100, 50),
        alignment_factors=factors,
        strategic_value=strategic,
        actionable_insights=insights,
        confidence_level=normalize_tier(_first(raw, "confidenceLevel", "confidence_level", "confidence")),  # type: ignore[arg-type]
    )
