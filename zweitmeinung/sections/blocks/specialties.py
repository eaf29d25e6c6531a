"""Grille des spécialités médicales."""
from typing import List, Literal, Optional
from pydantic import Field
from .base import BlockModel, Media, SectionBlock


class MedicalSpecialty(BlockModel):
    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    image: Optional[Media] = None
    href: Optional[str] = None


class MedicalSpecialtiesGrid(SectionBlock):
    block_type: Literal["sections.medical-specialties-grid"] = Field(
        "sections.medical-specialties-grid", alias="__component")
    title: Optional[str] = None
    subtitle: Optional[str] = None
    specialties: List[MedicalSpecialty] = Field(default_factory=list)
    columns: int = Field(3, ge=1, le=6)
