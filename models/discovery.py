from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field

from models.base import SearchDepth, WireModel
from models.connection import RankedConnection
from models.contact import Contact, RequesterProfile
from models.portfolio import PortfolioInsight


ResponseCode = Literal["OK", "NO_CONNECTIONS_FOUND", "DEGRADED_RESULT", "DISCOVERY_FAILED"]


class DiscoveryRequest(WireModel):
    contact: Contact = Field(validation_alias=AliasChoices("contact", "fwbContact"))
    requester_profile: RequesterProfile = Field(
        validation_alias=AliasChoices("requesterProfile", "requester_profile", "userProfile")
    )
    objective: str | None = Field(
        default=None, validation_alias=AliasChoices("objective", "careerObjective")
    )
    depth: SearchDepth | None = Field(
        default=None, validation_alias=AliasChoices("depth", "searchDepth")
    )


class SearchSummary(WireModel):
    total_searches: int = 0
    sources_analyzed: int = 0
    confidence_score: float = 0.0


class ResearchInsights(WireModel):
    network_size_category: Literal["large", "medium", "small"] = "small"
    industry_connections: list[str] = Field(default_factory=list)
    relationship_types: list[str] = Field(default_factory=list)


class DiscoveryResponse(WireModel):
    discovered_connections: list[RankedConnection] = Field(default_factory=list)
    search_summary: SearchSummary = Field(default_factory=SearchSummary)
    research_insights: ResearchInsights = Field(default_factory=ResearchInsights)
    portfolio_insight: PortfolioInsight | None = None
    processing_time_ms: int = 0
    request_id: str = ""
    cached: bool = False
    timestamp: str = ""
    code: ResponseCode = "OK"
