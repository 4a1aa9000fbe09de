from __future__ import annotations

from pydantic import AliasChoices, ConfigDict, Field

from models.base import WireModel


class Contact(WireModel):
    """The FWB whose network is explored. Identity is (name, company)."""

    name: str
    company: str
    position: str
    profile_link: str | None = Field(
        default=None,
        validation_alias=AliasChoices("profileLink", "profile_link", "linkedinUrl", "linkedin_url"),
    )

    model_config = ConfigDict(frozen=True)


class WorkHistoryEntry(WireModel):
    title: str
    company: str
    duration: str | None = None


class RequesterProfile(WireModel):
    """The person asking for introductions; read-only input to scoring."""

    name: str
    title: str
    summary: str = ""
    skills: list[str] = Field(default_factory=list)
    experience: list[WorkHistoryEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
