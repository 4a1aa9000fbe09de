from __future__ import annotations

from pydantic import AliasChoices, Field

from models.base import WireModel
from models.connection import DiscoveredConnection
from models.contact import Contact, RequesterProfile


class IntroductionTemplates(WireModel):
    introduction_request: str
    follow_up_message: str
    linked_in_message: str = Field(alias="linkedInMessage")
    email_subject: str


class IntroductionRequest(WireModel):
    """Inbound body for drafting introduction messages to one connection."""

    connection: DiscoveredConnection
    contact: Contact = Field(validation_alias=AliasChoices("contact", "fwbContact"))
    requester_profile: RequesterProfile = Field(
        validation_alias=AliasChoices("requesterProfile", "requester_profile", "userProfile")
    )
    objective: str | None = Field(
        default=None, validation_alias=AliasChoices("objective", "careerObjective")
    )
