from __future__ import annotations

from typing import Literal

from models.base import Tier, WireModel


ContentType = Literal["news", "press_release", "company_page", "professional_bio", "article", "unknown"]


class EvidenceItem(WireModel):
    """One search hit suggesting a relationship; lives for a single pipeline run."""

    title: str = "No title"
    url: str = ""
    snippet: str = ""
    domain: str = "unknown"
    content_type: ContentType = "unknown"
    confidence: Tier = "low"
    publish_date: str | None = None
    source: str | None = None
