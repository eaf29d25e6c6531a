"""Grille de services (prestations, options, prix)."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import BlockModel, CTAButton, Media, SectionBlock


class ServicePrice(BlockModel):
    amount: float
    currency: str = "EUR"
    period: Optional[str] = None


class Service(BlockModel):
    id: Optional[int] = None
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    image: Optional[Media] = None
    features: List[str] = Field(default_factory=list)
    price: Optional[ServicePrice] = None
    ctaButton: Optional[CTAButton] = None


class ServicesGrid(SectionBlock):
    block_type: Literal["sections.services-grid"] = Field("sections.services-grid", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    services: List[Service] = Field(default_factory=list)
    columns: int = Field(3, ge=1, le=6)
