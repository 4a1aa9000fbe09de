from __future__ import annotations

from typing import Dict, Literal

from pydantic import Field

from models.base import Tier, WireModel


ContactMethod = Literal["linkedin", "email", "mutual_contact", "unknown"]
Timeline = Literal["immediate", "near_term", "future"]


class AlignmentFactors(WireModel):
    industry_match: int = Field(default=5, ge=1, le=10)
    role_relevance: int = Field(default=5, ge=1, le=10)
    skills_overlap: int = Field(default=5, ge=1, le=10)
    career_stage_alignment: int = Field(default=5, ge=1, le=10)
    networking_potential: int = Field(default=5, ge=1, le=10)


class StrategicValue(WireModel):
    short_term_benefit: str = "Potential networking opportunity"
    long_term_benefit: str = "May provide future career value"
    key_opportunities: list[str] = Field(default_factory=lambda: ["Expand professional network"])
    potential_challenges: list[str] = Field(default_factory=lambda: ["Unknown relationship strength"])


class ActionableInsights(WireModel):
    approach_strategy: str = "Standard professional introduction"
    conversation_starters: list[str] = Field(
        default_factory=lambda: ["Discuss industry trends", "Share professional experiences"]
    )
    value_proposition: str = "Mutual professional networking"
    timeline_recommendation: Timeline = "near_term"
    introduction_templates: Dict[str, str] = Field(default_factory=dict)


class CareerAlignment(WireModel):
    """Fit between one discovered connection and the requester's goals.

    Every field default together forms the neutral alignment used whenever
    scoring is unavailable: overall 50, every factor 5.
    """

    overall_score: int = Field(default=50, ge=1, le=100)
    alignment_factors: AlignmentFactors = Field(default_factory=AlignmentFactors)
    strategic_value: StrategicValue = Field(default_factory=StrategicValue)
    actionable_insights: ActionableInsights = Field(default_factory=ActionableInsights)
    confidence_level: Tier = "medium"

    @classmethod
    def default(cls) -> "CareerAlignment":
        return cls()


class DiscoveredConnection(WireModel):
    name: str
    title: str = "Unknown Position"
    company: str = "Unknown Company"
    linkedin_url: str | None = None
    email: str | None = None
    relationship_to_fwb: str = Field(default="Colleague", alias="relationshipToFWB")
    evidence_strength: Tier = "medium"
    evidence_sources: list[str] = Field(default_factory=list)
    career_relevance: str = "Potential networking opportunity"
    networking_value: int = Field(default=5, ge=1, le=10)
    contact_method: ContactMethod = "unknown"
    career_alignment: CareerAlignment | None = None


class RankedConnection(DiscoveredConnection):
    """Response view of a connection: alignment plus outreach helpers."""

    networking_priority: int = 50
    introduction_templates: Dict[str, str] = Field(default_factory=dict)
