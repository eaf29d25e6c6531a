"""Formulaire de contact configurable depuis le CMS."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import SectionBlock
from ...contact.validation import FormFieldConfig


class ContactFormSection(SectionBlock):
    block_type: Literal["sections.contact-form"] = Field("sections.contact-form", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    fields: List[FormFieldConfig] = Field(default_factory=list)
    submitButtonText: str = "Nachricht senden"
    successMessage: Optional[str] = None
    errorMessage: Optional[str] = None
