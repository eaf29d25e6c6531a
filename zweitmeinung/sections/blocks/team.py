"""Équipe médicale."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import BlockModel, Media, SectionBlock


class TeamMember(BlockModel):
    id: Optional[int] = None
    name: str
    position: str = ""
    bio: Optional[str] = None
    image: Optional[Media] = None


class TeamSection(SectionBlock):
    block_type: Literal["sections.team"] = Field("sections.team", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    teamMembers: List[TeamMember] = Field(default_factory=list)
