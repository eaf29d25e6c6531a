"""Bloc texte riche (HTML éditorial du CMS)."""
from typing import Literal, Optional
from pydantic import Field
from .base import SectionBlock


class TextBlock(SectionBlock):
    block_type: Literal["sections.text-block"] = Field("sections.text-block", alias="__component")
    title: Optional[str] = None
    content: str = ""
    alignment: Literal["left", "center", "right"] = "left"
    backgroundColor: Optional[str] = None
    textColor: Optional[str] = None
