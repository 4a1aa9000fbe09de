from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from models.connection import DiscoveredConnection
from pipelines.runner import RunContext
from ports.search import EvidenceSearchPort


ADDITIONAL_EVIDENCE_RESULTS = 3


@dataclass(frozen=True)
class AggregatedEvidence:
    sources: List[str]
    strength: str


def strength_for(source_count: int) -> str:
    if source_count >= 3:
        return "high"
    if source_count >= 2:
        return "medium"
    return "low"


def infer_contact_method(connection: DiscoveredConnection) -> str:
    if connection.linkedin_url:
        return "linkedin"
    if connection.email:
        return "email"
    if connection.evidence_strength == "high":
        return "mutual_contact"
    return "unknown"


class EvidenceAggregator:
    """Corroborates weakly supported connections with one extra targeted search."""

    def __init__(self, search: EvidenceSearchPort) -> None:
        self.search = search
        self.searches_issued = 0

    def aggregate(self, connection: DiscoveredConnection) -> AggregatedEvidence:
        original = AggregatedEvidence(list(connection.evidence_sources), connection.evidence_strength)
        if connection.evidence_strength == "high" and len(connection.evidence_sources) >= 2:
            return original

        self.searches_issued += 1
        try:
            items = self.search.search(
                f'"{connection.name}" "{connection.company}"',
                max_results=ADDITIONAL_EVIDENCE_RESULTS,
                company=connection.company,
            )
        except Exception as e:
            logging.warning(f"Additional evidence search failed for {connection.name}: {e}")
            return original

        additional = [i.url for i in items if i.confidence != "low" and i.url]
        merged: List[str] = []
        for source in list(connection.evidence_sources) + additional:
            if source not in merged:
                merged.append(source)
        return AggregatedEvidence(merged, strength_for(len(merged)))


class AggregateEvidence:
    name = "aggregate_evidence"

    def __init__(self, aggregator: EvidenceAggregator) -> None:
        self.aggregator = aggregator

    def run(self, ctx: RunContext) -> RunContext:
        before = self.aggregator.searches_issued
        for connection in ctx.connections:
            result = self.aggregator.aggregate(connection)
            connection.evidence_sources = result.sources
            connection.evidence_strength = result.strength  # type: ignore[assignment]
            connection.contact_method = infer_contact_method(connection)  # type: ignore[assignment]
        ctx.total_searches += self.aggregator.searches_issued - before
        ctx.outcomes[self.name] = "ok"
        return ctx
