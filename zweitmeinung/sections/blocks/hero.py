"""Hero simple et carrousel de slides."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import BlockModel, CTAButton, Media, SectionBlock


class HeroSection(SectionBlock):
    block_type: Literal["sections.hero"] = Field("sections.hero", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    backgroundImage: Optional[Media] = None
    ctaButtons: List[CTAButton] = Field(default_factory=list)
    overlayOpacity: Optional[float] = None


class SlideBadge(BlockModel):
    text: str
    icon: Optional[str] = None


class TitleLine(BlockModel):
    id: Optional[int] = None
    text: str
    highlight: bool = False
    color: Optional[str] = None


class HeroSlide(BlockModel):
    id: Optional[int] = None
    badge: Optional[SlideBadge] = None
    titleLines: List[TitleLine] = Field(default_factory=list)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    backgroundImage: Optional[Media] = None
    overlayOpacity: Optional[float] = None
    ctaButtons: List[CTAButton] = Field(default_factory=list)


class HeroCarousel(SectionBlock):
    block_type: Literal["sections.hero-carousel"] = Field("sections.hero-carousel", alias="__component")
    slides: List[HeroSlide] = Field(default_factory=list)
    autoplay: bool = True
    autoplayInterval: int = 5000
