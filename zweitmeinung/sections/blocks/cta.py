"""Bloc CTA : appel à l'action avec boutons."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import CTAButton, SectionBlock


class CTASection(SectionBlock):
    block_type: Literal["sections.cta"] = Field("sections.cta", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    ctaButtons: List[CTAButton] = Field(default_factory=list)
    backgroundColor: Optional[str] = None
