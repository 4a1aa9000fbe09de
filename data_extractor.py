import logging
from typing import List, Optional

from models.connection import DiscoveredConnection
from models.contact import Contact, RequesterProfile
from models.evidence import EvidenceItem
from pipelines.runner import StageResult
from ports.llm import TextGenerationPort
from services.mapping import normalize_connection, unwrap_connection_list
from utils.json_parsing import extract_json


SYSTEM_PROMPT = """You are an expert network analyst specializing in professional relationship discovery and career networking strategy.

Analyze web search results about a person (the "FWB", the friend whose network is explored) and discover who in their professional network would be the most valuable connections for the user to meet.

Analysis framework:
1. Identify people in the FWB's network: colleagues, collaborators, co-speakers, co-authors, team members, investors, advisors, board members, alumni.
2. Assess relationship strength: worked together, appeared together, mentioned together.
3. Career relevance: how valuable each connection would be for the user's career goals.
4. Contact feasibility: how the user might be able to reach this person.

Return ONLY a JSON object with exactly this structure:

{{
  "connections": [
    {{
      "name": "Full Name",
      "title": "Job Title",
      "company": "Company Name",
      "relationshipToFWB": "Direct colleague",
      "evidenceStrength": "high | medium | low",
      "evidenceSources": ["Company team page"],
      "careerRelevance": "2-3 specific sentences on why this person matters for the user's goals",
      "networkingValue": 1-10
    }}
  ]
}}

Use exactly these field names. Only include real, named individuals. Return up to {max_connections} connections, ranked by networkingValue (highest first).
"""


class ConnectionExtractor:
    """Turns gathered evidence into candidate connections with one generation call."""

    def __init__(self, llm: TextGenerationPort):
        self.llm = llm
        self.extraction_stats = {
            'extractions_attempted': 0,
            'extractions_successful': 0,
            'extractions_failed': 0,
        }

    def _create_extraction_prompt(
        self,
        contact: Contact,
        evidence: List[EvidenceItem],
        requester: RequesterProfile,
        objective: Optional[str],
    ) -> str:
        experience = "\n".join(
            f"- {e.title} at {e.company}" + (f" ({e.duration})" if e.duration else "")
            for e in requester.experience
        )
        user_context = (
            "User profile:\n"
            f"- Name: {requester.name}\n"
            f"- Current title: {requester.title}\n"
            f"- Background: {requester.summary}\n"
            f"- Skills: {', '.join(requester.skills)}\n"
            + (f"- Experience:\n{experience}\n" if experience else "")
            + (f"- Career objective: {objective}\n" if objective else "")
        )
        contact_context = (
            "FWB contact:\n"
            f"- Name: {contact.name}\n"
            f"- Company: {contact.company}\n"
            f"- Position: {contact.position}\n"
            + (f"- Profile: {contact.profile_link}\n" if contact.profile_link else "")
        )
        results = "\n".join(
            f"Source: {item.domain}\nTitle: {item.title}\nContent: {item.snippet}\nURL: {item.url}\n"
            f"Content Type: {item.content_type}\nConfidence: {item.confidence}\n---"
            for item in evidence
        )
        return (
            f"{user_context}\n{contact_context}\nWeb search results to analyze:\n{results}\n\n"
            f"Analyze these search results to discover valuable professional connections in "
            f"{contact.name}'s network that would benefit {requester.name}'s career goals."
        )

    def extract(
        self,
        contact: Contact,
        evidence: List[EvidenceItem],
        requester: RequesterProfile,
        objective: Optional[str],
        max_connections: int,
    ) -> StageResult[List[DiscoveredConnection]]:
        if not evidence:
            return StageResult.none([], "no evidence to analyze")

        self.extraction_stats['extractions_attempted'] += 1
        prompt = self._create_extraction_prompt(contact, evidence, requester, objective)
        try:
            text = self.llm.generate(
                use_case='connection_extraction',
                prompt=prompt,
                system_prompt=SYSTEM_PROMPT.format(max_connections=max_connections),
                prompt_name='connection_extraction',
            )
        except Exception as e:
            self.extraction_stats['extractions_failed'] += 1
            logging.error(f"Connection extraction failed for {contact.name}: {e}")
            return StageResult.degraded([], f"generation failed: {e}")

        parsed = extract_json(text)
        if parsed is None:
            self.extraction_stats['extractions_failed'] += 1
            logging.warning(f"Could not find valid JSON in extraction response for {contact.name}")
            return StageResult.degraded([], "unparseable extraction response")

        raw_items = unwrap_connection_list(parsed)
        connections: List[DiscoveredConnection] = []
        for i, raw in enumerate(raw_items):
            try:
                connections.append(normalize_connection(raw, i))
            except (ValueError, TypeError) as e:
                # One malformed entry is dropped; the rest of the extraction stands
                logging.warning(f"Skipping malformed extraction entry {i} for {contact.name}: {e}")
        self.extraction_stats['extractions_successful'] += 1
        logging.debug(f"Extracted {len(connections)} raw connections for {contact.name}")
        return StageResult.ok(connections[:max_connections])
