import logging
import re
from typing import Any, Dict, List, Optional

from models.connection import DiscoveredConnection
from ports.llm import TextGenerationPort
from utils.json_parsing import extract_json

SEARCH_DEPTHS = ('shallow', 'medium', 'deep')
GROUP_WORDS = ('Attendees', 'Speakers', 'Various')

_LOWERCASE_NAME_RE = re.compile(r'^[a-z]+$')
_DIGIT_RE = re.compile(r'\d')
_INITIALS_RE = re.compile(r'^[A-Z]\.\s?[A-Z]\.$')


class DataValidator:
    """Filters implausible discovered connections.

    Lenient mode is pure and deterministic. Strict mode additionally asks the
    generation capability whether the candidate is a real professional; any
    failure of that check keeps the candidate.
    """

    def __init__(self, mode: str = 'lenient', llm: Optional[TextGenerationPort] = None):
        if mode not in ('lenient', 'strict'):
            raise ValueError(f"Unknown validation mode: {mode}")
        if mode == 'strict' and llm is None:
            raise ValueError("Strict validation requires a text generation client")
        self.mode = mode
        self.llm = llm
        self.validation_stats = {
            'total_connections': 0,
            'valid_connections': 0,
            'invalid_connections': 0,
            'rejection_reasons': {}
        }

    def rejection_reason(self, connection: DiscoveredConnection) -> Optional[str]:
        """Return why a connection fails the lenient rules, or None when it passes."""
        name = (connection.name or '').strip()
        company = (connection.company or '').strip()

        if not name or 'Unknown Person' in name:
            return "missing or placeholder name"
        if not company or company == 'Unknown Company':
            return "missing or unknown company"
        if _LOWERCASE_NAME_RE.match(name) or _DIGIT_RE.search(name):
            return "suspicious name format"
        if _INITIALS_RE.match(name):
            return "initials only"
        if any(word in name for word in GROUP_WORDS):
            return "group rather than a person"
        return None

    def is_valid_connection(self, connection: DiscoveredConnection) -> bool:
        """Lenient plausibility check. Idempotent; never mutates."""
        return self.rejection_reason(connection) is None

    def _strict_check(self, connection: DiscoveredConnection) -> bool:
        prompt = (
            "Is the following a plausible, real, individual professional (not a group, "
            "role, or placeholder)? Answer ONLY with JSON {\"valid\": true|false, \"reason\": \"...\"}.\n\n"
            f"Name: {connection.name}\nTitle: {connection.title}\nCompany: {connection.company}\n"
            f"Relationship: {connection.relationship_to_fwb}"
        )
        try:
            text = self.llm.generate(  # type: ignore[union-attr]
                use_case='connection_validation',
                prompt=prompt,
                system_prompt="You verify professional identities. Output only valid JSON.",
            )
        except Exception as e:
            logging.warning(f"Strict validation unavailable for {connection.name}, keeping candidate: {e}")
            return True
        parsed = extract_json(text)
        if isinstance(parsed, dict) and isinstance(parsed.get('valid'), bool):
            return parsed['valid']
        return True

    def validate_all_connections(self, connections: List[DiscoveredConnection]) -> List[DiscoveredConnection]:
        """Keep the connections that pass, preserving order."""
        valid: List[DiscoveredConnection] = []
        for connection in connections:
            self.validation_stats['total_connections'] += 1
            reason = self.rejection_reason(connection)
            if reason is None and self.mode == 'strict' and not self._strict_check(connection):
                reason = "rejected by strict verification"
            if reason is None:
                self.validation_stats['valid_connections'] += 1
                valid.append(connection)
            else:
                self.validation_stats['invalid_connections'] += 1
                reasons = self.validation_stats['rejection_reasons']
                reasons[reason] = reasons.get(reason, 0) + 1
                logging.debug(f"Skipping connection {connection.name!r}: {reason}")

        logging.info(
            f"Validation complete: {self.validation_stats['valid_connections']} valid, "
            f"{self.validation_stats['invalid_connections']} rejected"
        )
        return valid

    def get_validation_stats(self) -> Dict[str, Any]:
        stats = dict(self.validation_stats)
        stats['rejection_reasons'] = dict(stats['rejection_reasons'])
        total = stats['total_connections']
        stats['success_rate'] = (stats['valid_connections'] / total * 100) if total else 0
        return stats


def _require_string(obj: Dict[str, Any], field: str, path: str, errors: List[str]) -> None:
    value = obj.get(field)
    if not isinstance(value, str) or not value.strip():
        errors.append(f"{path}.{field} is required and must be a non-empty string")


def validate_discovery_request(payload: Any) -> List[str]:
    """Every violation in a discovery request body; empty when it is acceptable."""
    if not isinstance(payload, dict):
        return ["request body must be a JSON object"]
    errors: List[str] = []

    contact = payload.get('fwbContact', payload.get('contact'))
    if contact is None:
        errors.append("fwbContact is required")
    elif not isinstance(contact, dict):
        errors.append("fwbContact must be an object")
    else:
        for field in ('name', 'company', 'position'):
            _require_string(contact, field, 'fwbContact', errors)
        link = contact.get('profileLink', contact.get('linkedinUrl'))
        if link is not None and not isinstance(link, str):
            errors.append("fwbContact.profileLink must be a string")

    profile = payload.get('userProfile', payload.get('requesterProfile'))
    if profile is None:
        errors.append("userProfile is required")
    elif not isinstance(profile, dict):
        errors.append("userProfile must be an object")
    else:
        for field in ('name', 'title'):
            _require_string(profile, field, 'userProfile', errors)
        summary = profile.get('summary')
        if summary is not None and not isinstance(summary, str):
            errors.append("userProfile.summary must be a string")
        skills = profile.get('skills')
        if skills is not None and (
            not isinstance(skills, list) or not all(isinstance(s, str) for s in skills)
        ):
            errors.append("userProfile.skills must be a list of strings")
        experience = profile.get('experience')
        if experience is not None and not isinstance(experience, list):
            errors.append("userProfile.experience must be a list")

    objective = payload.get('careerObjective', payload.get('objective'))
    if objective is not None and not isinstance(objective, str):
        errors.append("careerObjective must be a string")

    depth = payload.get('searchDepth', payload.get('depth'))
    if depth is not None and depth not in SEARCH_DEPTHS:
        errors.append("searchDepth must be one of: shallow, medium, deep")

    return errors


def validate_introduction_request(payload: Any) -> List[str]:
    """Every violation in an introduction-templates request body."""
    if not isinstance(payload, dict):
        return ["request body must be a JSON object"]
    errors = [e for e in validate_discovery_request(payload) if not e.startswith("searchDepth")]
    connection = payload.get('connection')
    if connection is None:
        errors.append("connection is required")
    elif not isinstance(connection, dict):
        errors.append("connection must be an object")
    else:
        _require_string(connection, 'name', 'connection', errors)
    return errors
