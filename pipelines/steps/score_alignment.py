from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from models.connection import CareerAlignment, DiscoveredConnection
from models.contact import RequesterProfile
from pipelines.runner import RunContext, StageResult
from ports.llm import TextGenerationPort
from services.mapping import normalize_alignment
from utils.json_parsing import extract_json
from utils.score_parsing import clamp_score


SYSTEM_PROMPT = """You are a career strategist scoring how valuable each professional connection is for the user.

Scoring guidance:
1. Career relevance (40%): how directly their role and industry serve the user's goals
2. Seniority and influence (25%): ability to open doors or make decisions
3. Accessibility (20%): how realistic a warm introduction is
4. Evidence strength (15%): quality of evidence for the relationship

Return ONLY a JSON object {"connections": [...]} with one entry per input connection, in the same order:
{
  "name": "...",
  "networkingValue": 1-10,
  "careerAlignment": {
    "overallScore": 1-100,
    "alignmentFactors": {"industryMatch": 1-10, "roleRelevance": 1-10, "skillsOverlap": 1-10,
                         "careerStageAlignment": 1-10, "networkingPotential": 1-10},
    "strategicValue": {"shortTermBenefit": "...", "longTermBenefit": "...",
                       "keyOpportunities": ["..."], "potentialChallenges": ["..."]},
    "actionableInsights": {"approachStrategy": "...", "conversationStarters": ["..."],
                           "valueProposition": "...", "timelineRecommendation": "immediate | near_term | future",
                           "introductionTemplates": {"direct": "..."}},
    "confidenceLevel": "high | medium | low"
  }
}
"""


def _entries(parsed: Any) -> Optional[List[Any]]:
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        for key in ("connections", "scored", "results"):
            if isinstance(parsed.get(key), list):
                return parsed[key]
    return None


class AlignmentScorer:
    """Scores every candidate against the requester's goals in one batched call."""

    def __init__(self, llm: TextGenerationPort) -> None:
        self.llm = llm

    def _prompt(
        self, connections: List[DiscoveredConnection], requester: RequesterProfile, objective: Optional[str]
    ) -> str:
        payload = [
            {
                "name": c.name,
                "title": c.title,
                "company": c.company,
                "relationshipToFWB": c.relationship_to_fwb,
                "evidenceStrength": c.evidence_strength,
                "careerRelevance": c.career_relevance,
                "networkingValue": c.networking_value,
            }
            for c in connections
        ]
        return (
            "User profile:\n"
            f"- Name: {requester.name}\n- Title: {requester.title}\n- Background: {requester.summary}\n"
            f"- Skills: {', '.join(requester.skills)}\n"
            + (f"- Career goal: {objective}\n" if objective else "")
            + f"\nConnections to score:\n{json.dumps(payload, indent=2)}"
        )

    def score(
        self,
        connections: List[DiscoveredConnection],
        requester: RequesterProfile,
        objective: Optional[str],
    ) -> StageResult[List[DiscoveredConnection]]:
        """Attach a CareerAlignment to every connection; identity and careerRelevance stay as given."""
        if not connections:
            return StageResult.none([], "nothing to score")
        entries: Optional[List[Any]] = None
        detail = None
        try:
            text = self.llm.generate(
                use_case="alignment_scoring",
                prompt=self._prompt(connections, requester, objective),
                system_prompt=SYSTEM_PROMPT,
                prompt_name="alignment_scoring",
            )
            entries = _entries(extract_json(text))
            if entries is None:
                detail = "unparseable scoring response"
        except Exception as e:
            logging.error(f"Alignment scoring failed: {e}")
            detail = f"generation failed: {e}"

        entries = entries or []
        for index, connection in enumerate(connections):
            entry = entries[index] if index < len(entries) and isinstance(entries[index], dict) else None
            if entry is None:
                connection.career_alignment = CareerAlignment.default()
                continue
            try:
                alignment = normalize_alignment(entry.get("careerAlignment") or entry.get("career_alignment"))
                networking_value = clamp_score(
                    entry.get("networkingValue", entry.get("networking_value")), 1, 10, connection.networking_value
                )
            except (ValueError, TypeError) as e:
                logging.warning(f"Malformed scoring entry {index} for {connection.name}: {e}")
                connection.career_alignment = CareerAlignment.default()
                detail = detail or "malformed scoring entry"
                continue
            connection.career_alignment = alignment
            connection.networking_value = networking_value

        if detail:
            return StageResult.degraded(connections, detail)
        if len(entries) < len(connections):
            return StageResult.degraded(connections, "scoring response missing entries")
        return StageResult.ok(connections)


class ScoreAlignment:
    name = "score_alignment"

    def __init__(self, scorer: AlignmentScorer) -> None:
        self.scorer = scorer

    def run(self, ctx: RunContext) -> RunContext:
        ctx.state = "aligning"
        result = self.scorer.score(ctx.connections, ctx.requester, ctx.objective)
        ctx.outcomes[self.name] = result.status
        ctx.connections = result.data
        return ctx
