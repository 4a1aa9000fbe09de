from .contact import Contact, RequesterProfile, WorkHistoryEntry
from .evidence import EvidenceItem
from .connection import (
    ActionableInsights,
    AlignmentFactors,
    CareerAlignment,
    DiscoveredConnection,
    RankedConnection,
    StrategicValue,
)
from .portfolio import PortfolioInsight, PriorityTiers
from .introductions import IntroductionRequest, IntroductionTemplates
from .discovery import DiscoveryRequest, DiscoveryResponse, ResearchInsights, SearchSummary

__all__ = [
    "Contact",
    "RequesterProfile",
    "WorkHistoryEntry",
    "EvidenceItem",
    "ActionableInsights",
    "AlignmentFactors",
    "CareerAlignment",
    "DiscoveredConnection",
    "RankedConnection",
    "StrategicValue",
    "PortfolioInsight",
    "PriorityTiers",
    "IntroductionRequest",
    "IntroductionTemplates",
    "DiscoveryRequest",
    "DiscoveryResponse",
    "ResearchInsights",
    "SearchSummary",
]
