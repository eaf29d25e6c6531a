"""Chiffres clés."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import BlockModel, SectionBlock


class StatItem(BlockModel):
    id: Optional[int] = None
    number: str
    label: str
    icon: Optional[str] = None


class StatsSection(SectionBlock):
    block_type: Literal["sections.stats"] = Field("sections.stats", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    stats: List[StatItem] = Field(default_factory=list)
