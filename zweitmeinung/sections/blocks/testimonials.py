"""Témoignages patients."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import BlockModel, Media, SectionBlock


class TestimonialAuthor(BlockModel):
    name: str
    title: Optional[str] = None
    company: Optional[str] = None
    avatar: Optional[Media] = None


class Testimonial(BlockModel):
    id: Optional[int] = None
    content: str
    author: TestimonialAuthor
    rating: Optional[int] = Field(None, ge=0, le=5)


class TestimonialsSection(SectionBlock):
    block_type: Literal["sections.testimonials"] = Field("sections.testimonials", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    testimonials: List[Testimonial] = Field(default_factory=list)
    layout: Literal["grid", "carousel"] = "grid"
