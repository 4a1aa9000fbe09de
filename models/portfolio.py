from __future__ import annotations

from pydantic import Field

from models.base import WireModel
from models.connection import DiscoveredConnection


class PriorityTiers(WireModel):
    tier1: list[DiscoveredConnection] = Field(default_factory=list)
    tier2: list[DiscoveredConnection] = Field(default_factory=list)
    tier3: list[DiscoveredConnection] = Field(default_factory=list)


class PortfolioInsight(WireModel):
    overall_networking_strategy: str = "Focus on highest-scoring connections first"
    priority_tiers: PriorityTiers = Field(default_factory=PriorityTiers)
    gap_analysis: list[str] = Field(default_factory=list)
    recommended_focus_areas: list[str] = Field(default_factory=list)
