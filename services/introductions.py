from __future__ import annotations

import logging
from typing import Optional

from models.connection import DiscoveredConnection
from models.contact import Contact, RequesterProfile
from models.introductions import IntroductionTemplates
from ports.llm import TextGenerationPort
from utils.json_parsing import extract_json


SYSTEM_PROMPT = (
    "You write warm, concise professional introduction messages. "
    "Return ONLY a JSON object with keys introductionRequest, followUpMessage, "
    "linkedInMessage, emailSubject."
)


def default_templates(
    connection: DiscoveredConnection,
    contact: Contact,
    requester: RequesterProfile,
    objective: Optional[str] = None,
) -> IntroductionTemplates:
    goal = objective or "my career goals"
    return IntroductionTemplates(
        introduction_request=(
            f"Hi {contact.name}, I hope you're doing well! I noticed you're connected with "
            f"{connection.name} ({connection.title} at {connection.company}). I'm currently working on "
            f"{goal} and I think {connection.name} could offer valuable insights. Would you be "
            f"comfortable making a brief introduction? Thanks so much, {requester.name}"
        ),
        follow_up_message=(
            f"Hi {connection.name}, thank you for connecting! {contact.name} mentioned you'd be a great "
            f"person to talk to about your work at {connection.company}. Would you be open to a short "
            f"call in the coming weeks? Best, {requester.name}"
        ),
        linked_in_message=(
            f"Hi {connection.name}, {contact.name} suggested I reach out. I'm {requester.name}, "
            f"{requester.title}, and I'd love to learn more about your work at {connection.company}."
        ),
        email_subject=f"Introduction to {connection.name}",
    )


class IntroductionWriter:
    """Drafts warm-introduction messages for one discovered connection."""

    def __init__(self, llm: TextGenerationPort):
        self.llm = llm

    def generate_templates(
        self,
        connection: DiscoveredConnection,
        contact: Contact,
        requester: RequesterProfile,
        objective: Optional[str] = None,
    ) -> IntroductionTemplates:
        """Model-written templates; any field the model omits keeps its default."""
        defaults = default_templates(connection, contact, requester, objective)
        prompt = (
            f"Requester: {requester.name}, {requester.title}. {requester.summary}\n"
            f"Mutual contact (FWB): {contact.name}, {contact.position} at {contact.company}\n"
            f"Target connection: {connection.name}, {connection.title} at {connection.company}\n"
            f"Relationship to FWB: {connection.relationship_to_fwb}\n"
            f"Why relevant: {connection.career_relevance}\n"
            + (f"Career objective: {objective}\n" if objective else "")
            + "\nWrite: (1) a message asking the FWB for an introduction, (2) a follow-up message to the "
            "connection after the introduction, (3) a LinkedIn connection note under 300 characters, "
            "(4) an email subject line."
        )
        try:
            text = self.llm.generate(
                use_case="introduction_templates",
                prompt=prompt,
                system_prompt=SYSTEM_PROMPT,
                prompt_name="introduction_templates",
            )
        except Exception as e:
            logging.warning(f"Introduction template generation failed for {connection.name}: {e}")
            return defaults

        parsed = extract_json(text)
        if not isinstance(parsed, dict):
            return defaults

        def pick(*keys: str) -> Optional[str]:
            for key in keys:
                value = parsed.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
            return None

        return IntroductionTemplates(
            introduction_request=pick("introductionRequest", "introduction_request") or defaults.introduction_request,
            follow_up_message=pick("followUpMessage", "follow_up_message") or defaults.follow_up_message,
            linked_in_message=pick("linkedInMessage", "linkedin_message", "linked_in_message")
            or defaults.linked_in_message,
            email_subject=pick("emailSubject", "email_subject") or defaults.email_subject,
        )
