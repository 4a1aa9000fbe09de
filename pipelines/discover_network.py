from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from config.settings import Settings, get_settings
from data_extractor import ConnectionExtractor
from data_validator import DataValidator
from models.connection import CareerAlignment, DiscoveredConnection, RankedConnection
from models.contact import Contact
from models.discovery import DiscoveryRequest, DiscoveryResponse, ResearchInsights, SearchSummary
from models.evidence import EvidenceItem
from models.portfolio import PortfolioInsight
from pipelines.runner import Pipeline, RunContext
from pipelines.steps.aggregate_evidence import AggregateEvidence, EvidenceAggregator
from pipelines.steps.extract_connections import ExtractConnections
from pipelines.steps.gather_evidence import EvidenceGatherer, GatherEvidence
from pipelines.steps.score_alignment import AlignmentScorer, ScoreAlignment
from pipelines.steps.synthesize_portfolio import PortfolioSynthesizer, SynthesizePortfolio, bucket_by_score
from pipelines.steps.validate_connections import ValidateConnections
from ports.cache import DiscoveryCachePort
from ports.llm import TextGenerationPort
from ports.search import EvidenceSearchPort
from services.cache import DiscoveryCache, fingerprint


_TIER_WEIGHT = {"high": 3, "medium": 2, "low": 1}
FALLBACK_CONFIDENCE = 0.3
MAX_FALLBACK_CONNECTIONS = 3


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def confidence_score(evidence: List[EvidenceItem], connections: List[DiscoveredConnection]) -> float:
    """Mean of normalized evidence confidence and normalized connection strength; 0 without evidence."""
    if not evidence:
        return 0.0
    search_conf = sum(_TIER_WEIGHT.get(e.confidence, 1) for e in evidence) / len(evidence) / 3
    strength = sum(_TIER_WEIGHT.get(c.evidence_strength, 1) for c in connections) / (len(connections) or 1) / 3
    return round((search_conf + strength) / 2, 2)


def _distinct(values: List[str], limit: int) -> List[str]:
    out: List[str] = []
    for value in values:
        if value and value not in out:
            out.append(value)
    return out[:limit]


def research_insights(connections: List[DiscoveredConnection]) -> ResearchInsights:
    count = len(connections)
    size = "large" if count >= 8 else "medium" if count >= 4 else "small"
    return ResearchInsights(
        network_size_category=size,
        industry_connections=_distinct([c.company for c in connections], 5),
        relationship_types=_distinct([c.relationship_to_fwb for c in connections], 3),
    )


def rank_connection(connection: DiscoveredConnection) -> RankedConnection:
    alignment = connection.career_alignment or CareerAlignment.default()
    templates = dict(alignment.actionable_insights.introduction_templates) or {
        "direct": f"Hi {connection.name}, I'd love to connect and learn more about your work at {connection.company}."
    }
    data = connection.model_dump()
    data.update(
        career_alignment=alignment,
        networking_priority=alignment.overall_score,
        introduction_templates=templates,
    )
    return RankedConnection(**data)


def roles_for_company(company: str) -> List[str]:
    """Typical senior roles by the kind of company the name suggests."""
    base = company.lower()
    if "tech" in base or "software" in base or "ai" in base:
        return ["Engineering Manager", "Product Manager", "Head of Engineering", "CTO", "VP of Product"]
    if "finance" in base or "bank" in base or "capital" in base:
        return ["VP of Finance", "Investment Director", "Senior Analyst", "Portfolio Manager", "Managing Director"]
    if "consulting" in base:
        return ["Principal", "Senior Manager", "Director", "Partner", "Practice Lead"]
    return ["VP of Operations", "Head of Strategy", "Director of Business Development", "Senior Manager", "Team Lead"]


def role_based_suggestions(contact: Contact) -> List[DiscoveredConnection]:
    suggestions = []
    for index, role in enumerate(roles_for_company(contact.company)[:MAX_FALLBACK_CONNECTIONS]):
        suggestions.append(
            DiscoveredConnection(
                name=f"{contact.company} {role}",
                title=role,
                company=contact.company,
                relationship_to_fwb="Colleague",
                evidence_strength="low",
                evidence_sources=[f"{contact.company} team directory"],
                career_relevance=f"{role} at {contact.company} could provide industry insights",
                networking_value=max(1, 5 - index),
                contact_method="unknown",
                career_alignment=CareerAlignment.default(),
            )
        )
    return suggestions


class NetworkDiscoveryService:
    """End-to-end discovery: cache, gather, extract, validate, aggregate, score, synthesize.

    discover() never raises for upstream failures; it degrades to role-based
    suggestions and, if even that fails, to an empty structure.
    """

    def __init__(
        self,
        search: EvidenceSearchPort,
        llm: TextGenerationPort,
        cache: Optional[DiscoveryCachePort] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.search = search
        self.llm = llm
        self.cache = cache if cache is not None else DiscoveryCache(self.settings.discovery_cache_ttl_seconds)

    def _validator(self) -> DataValidator:
        strict = self.settings.validation_mode == "strict"
        return DataValidator(mode=self.settings.validation_mode, llm=self.llm if strict else None)

    def _pipeline(self) -> Pipeline:
        # Fresh stage objects per run; counters are per request
        return Pipeline([
            GatherEvidence(EvidenceGatherer(
                self.search,
                concurrency=self.settings.gather_concurrency,
                timeout_seconds=self.settings.search_timeout_seconds,
            )),
            ExtractConnections(ConnectionExtractor(self.llm), max_connections=self.settings.max_connections),
            ValidateConnections(self._validator()),
            AggregateEvidence(EvidenceAggregator(self.search)),
            ScoreAlignment(AlignmentScorer(self.llm)),
            SynthesizePortfolio(PortfolioSynthesizer(self.llm)),
        ])

    def discover(self, request: DiscoveryRequest) -> DiscoveryResponse:
        t0 = time.time()
        request_id = f"fwb-discovery-{uuid.uuid4().hex[:12]}"
        depth = request.depth or self.settings.default_search_depth
        key = fingerprint(request.contact, request.requester_profile, request.objective, depth)
        log_extra = {"step": "discover", "request_id": request_id}

        cached = self.cache.get(key)
        if cached is not None:
            logging.info(f"Cache hit for {request.contact.name}", extra={**log_extra, "status": "cached"})
            return cached.model_copy(update={
                "cached": True,
                "request_id": request_id,
                "processing_time_ms": int((time.time() - t0) * 1000),
            })

        ctx = RunContext(
            contact=request.contact,
            requester=request.requester_profile,
            objective=request.objective,
            depth=depth,
            request_id=request_id,
        )
        logging.info(
            f"Discovering network of {request.contact.name} at {request.contact.company} (depth={depth})",
            extra={**log_extra, "status": "start"},
        )
        try:
            ctx = self._pipeline().run(ctx)
        except Exception as e:
            logging.exception(
                f"Discovery failed for {request.contact.name}, building fallback",
                extra={**log_extra, "status": "error", "error": str(e)},
            )
            ctx.meta["fallback_reason"] = str(e)
            return self._fallback(ctx, t0)

        if ctx.outcomes.get("gather_evidence") == "none":
            return self._fallback(ctx, t0)

        if not ctx.connections:
            ctx.state = "complete"
            response = self._respond(ctx, t0, portfolio=None, code="NO_CONNECTIONS_FOUND")
        else:
            ctx.state = "complete"
            response = self._respond(ctx, t0, portfolio=ctx.portfolio, code="OK")

        if "degraded" not in ctx.outcomes.values():
            self.cache.put(key, response)
        logging.info(
            f"Discovery complete: {len(response.discovered_connections)} connections",
            extra={
                **log_extra,
                "state": ctx.state,
                "status": response.code,
                "searches": ctx.total_searches,
                "duration_ms": response.processing_time_ms,
            },
        )
        return response

    def _respond(
        self,
        ctx: RunContext,
        t0: float,
        portfolio: Optional[PortfolioInsight],
        code: str,
        confidence: Optional[float] = None,
    ) -> DiscoveryResponse:
        return DiscoveryResponse(
            discovered_connections=[rank_connection(c) for c in ctx.connections],
            search_summary=SearchSummary(
                total_searches=ctx.total_searches,
                sources_analyzed=len(ctx.evidence),
                confidence_score=confidence if confidence is not None else confidence_score(ctx.evidence, ctx.connections),
            ),
            research_insights=research_insights(ctx.connections),
            portfolio_insight=portfolio,
            processing_time_ms=int((time.time() - t0) * 1000),
            request_id=ctx.request_id,
            cached=False,
            timestamp=_now_iso(),
            code=code,  # type: ignore[arg-type]
        )

    def _fallback(self, ctx: RunContext, t0: float) -> DiscoveryResponse:
        ctx.state = "degraded"
        logging.warning(
            f"Returning role-based suggestions for {ctx.contact.name}: {ctx.meta.get('fallback_reason')}",
            extra={"step": "fallback", "status": "degraded", "request_id": ctx.request_id},
        )
        try:
            ctx.connections = role_based_suggestions(ctx.contact)
            portfolio = PortfolioInsight(priority_tiers=bucket_by_score(ctx.connections))
            response = self._respond(ctx, t0, portfolio=portfolio, code="DEGRADED_RESULT", confidence=FALLBACK_CONFIDENCE)
            response.research_insights.network_size_category = "small"
            return response
        except Exception as e:
            ctx.state = "error"
            logging.error(
                f"Fallback generation also failed for {ctx.contact.name}: {e}",
                extra={"step": "fallback", "status": "error", "error": str(e), "request_id": ctx.request_id},
            )
            return DiscoveryResponse(
                processing_time_ms=int((time.time() - t0) * 1000),
                request_id=ctx.request_id,
                timestamp=_now_iso(),
                code="DISCOVERY_FAILED",
            )
