from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from models.connection import DiscoveredConnection
from models.contact import RequesterProfile
from models.portfolio import PortfolioInsight, PriorityTiers
from pipelines.runner import RunContext, StageResult
from ports.llm import TextGenerationPort
from utils.json_parsing import extract_json


SYSTEM_PROMPT = """You are a career networking strategist. Given scored connections, build a networking portfolio.

Return ONLY a JSON object:
{
  "overallNetworkingStrategy": "2-3 sentences",
  "priorityTiers": {"tier1": ["c1"], "tier2": ["c2"], "tier3": ["c3"]},
  "gapAnalysis": ["missing kinds of contacts"],
  "recommendedFocusAreas": ["..."]
}
Refer to connections by their id. tier1 = reach out now, tier2 = next, tier3 = later.
"""

TIER_KEYS = ("tier1", "tier2", "tier3")


def _score(connection: DiscoveredConnection) -> int:
    return connection.career_alignment.overall_score if connection.career_alignment else 50


def tier_for_score(score: int) -> str:
    if score >= 80:
        return "tier1"
    if score >= 60:
        return "tier2"
    return "tier3"


def bucket_by_score(connections: List[DiscoveredConnection]) -> PriorityTiers:
    tiers: Dict[str, List[DiscoveredConnection]] = {k: [] for k in TIER_KEYS}
    for connection in connections:
        tiers[tier_for_score(_score(connection))].append(connection)
    return PriorityTiers(**tiers)


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if isinstance(v, (str, int, float)) and str(v).strip()]


class PortfolioSynthesizer:
    """Groups scored connections into exclusive priority tiers with strategy notes."""

    def __init__(self, llm: TextGenerationPort) -> None:
        self.llm = llm

    def _resolve(self, entry: Any, ids: Dict[str, int], connections: List[DiscoveredConnection]) -> Optional[int]:
        """Index of the candidate a tier entry refers to: id first, then name substring either way."""
        if isinstance(entry, dict):
            key = entry.get("id") or entry.get("name")
        else:
            key = entry
        if not isinstance(key, str) or not key.strip():
            return None
        key = key.strip()
        if key in ids:
            return ids[key]
        needle = key.lower()
        for index, connection in enumerate(connections):
            name = connection.name.lower()
            if needle in name or name in needle:
                return index
        return None

    def synthesize(
        self,
        connections: List[DiscoveredConnection],
        requester: RequesterProfile,
        objective: Optional[str],
    ) -> StageResult[PortfolioInsight]:
        fallback = PortfolioInsight(priority_tiers=bucket_by_score(connections))
        ids = {f"c{i + 1}": i for i in range(len(connections))}
        summary = [
            {
                "id": f"c{i + 1}",
                "name": c.name,
                "title": c.title,
                "company": c.company,
                "overallScore": _score(c),
                "networkingValue": c.networking_value,
            }
            for i, c in enumerate(connections)
        ]
        prompt = (
            f"User: {requester.name}, {requester.title}. {requester.summary}\n"
            + (f"Career goal: {objective}\n" if objective else "")
            + f"\nScored connections:\n{json.dumps(summary, indent=2)}"
        )
        try:
            text = self.llm.generate(
                use_case="portfolio_synthesis",
                prompt=prompt,
                system_prompt=SYSTEM_PROMPT,
                prompt_name="portfolio_synthesis",
            )
        except Exception as e:
            logging.error(f"Portfolio synthesis failed: {e}")
            return StageResult.degraded(fallback, f"generation failed: {e}")

        parsed = extract_json(text)
        if not isinstance(parsed, dict):
            return StageResult.degraded(fallback, "unparseable portfolio response")

        raw_tiers = parsed.get("priorityTiers") or parsed.get("priority_tiers") or {}
        if not isinstance(raw_tiers, dict):
            raw_tiers = {}
        assigned: Dict[int, str] = {}
        dropped = 0
        for tier in TIER_KEYS:
            entries = raw_tiers.get(tier)
            for entry in entries if isinstance(entries, list) else []:
                index = self._resolve(entry, ids, connections)
                if index is None:
                    dropped += 1
                    continue
                # First tier wins
                assigned.setdefault(index, tier)
        if dropped:
            logging.debug(f"Dropped {dropped} unresolvable tier entries")

        tiers: Dict[str, List[DiscoveredConnection]] = {k: [] for k in TIER_KEYS}
        for index, connection in enumerate(connections):
            tier = assigned.get(index) or tier_for_score(_score(connection))
            tiers[tier].append(connection)

        strategy = parsed.get("overallNetworkingStrategy") or parsed.get("overall_networking_strategy")
        return StageResult.ok(
            PortfolioInsight(
                overall_networking_strategy=str(strategy) if strategy else fallback.overall_networking_strategy,
                priority_tiers=PriorityTiers(**tiers),
                gap_analysis=_str_list(parsed.get("gapAnalysis") or parsed.get("gap_analysis")),
                recommended_focus_areas=_str_list(
                    parsed.get("recommendedFocusAreas") or parsed.get("recommended_focus_areas")
                ),
            )
        )


class SynthesizePortfolio:
    name = "synthesize_portfolio"

    def __init__(self, synthesizer: PortfolioSynthesizer) -> None:
        self.synthesizer = synthesizer

    def run(self, ctx: RunContext) -> RunContext:
        result = self.synthesizer.synthesize(ctx.connections, ctx.requester, ctx.objective)
        ctx.outcomes[self.name] = result.status
        ctx.portfolio = result.data
        return ctx
