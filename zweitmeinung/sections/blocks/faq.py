"""Section FAQ embarquée dans une page."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import BlockModel, SectionBlock


class FAQItem(BlockModel):
    id: Optional[int] = None
    question: str
    answer: str
    category: Optional[str] = None


class FAQSection(SectionBlock):
    block_type: Literal["sections.faq"] = Field("sections.faq", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    faqs: List[FAQItem] = Field(default_factory=list)
