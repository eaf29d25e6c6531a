"""Actualités, articles liés, structure v4 (attributes) ou v5 (plate)."""
from typing import Any, List, Literal, Optional
from pydantic import Field, model_validator
from .base import BlockModel, Media, SectionBlock


class Article(BlockModel):
    id: Optional[int] = None
    title: str
    slug: str
    excerpt: Optional[str] = None
    publishedAt: Optional[str] = None
    featuredImage: Optional[Media] = None

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, value: Any) -> Any:
        if isinstance(value, dict) and isinstance(value.get("attributes"), dict):
            return {"id": value.get("id"), **value["attributes"]}
        return value


class NewsSection(SectionBlock):
    block_type: Literal["sections.news"] = Field("sections.news", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    articles: List[Article] = Field(default_factory=list)
    showMore: bool = False
    moreButtonText: Optional[str] = None
    moreButtonHref: Optional[str] = None
