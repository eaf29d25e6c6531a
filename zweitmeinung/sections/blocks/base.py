"""
Blocs de base : un modèle Pydantic par type de section CMS.

Chaque bloc porte son tag (`__component`) en `block_type` et tolère les champs
supplémentaires envoyés par Strapi.
"""
from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...cms.schemas import media_url


class BlockModel(BaseModel):
    """Modèle tolérant : les champs inconnus sont ignorés."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SectionBlock(BlockModel):
    """Bloc de base (classe parente de toutes les sections).

    Hors tag et id, tout champ est optionnel : un `null` envoyé par Strapi
    retombe sur la valeur par défaut du bloc.
    """
    block_type: str = Field(alias="__component")
    id: int

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if v is not None}
        return value


class Media(BlockModel):
    """Média Strapi v5 ({url, alternativeText}) ou v4 ({data: {attributes}})."""
    url: Optional[str] = None
    alternativeText: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, value: Any) -> Any:
        if isinstance(value, dict) and "url" not in value:
            data = value.get("data")
            attrs = (data.get("attributes") or data) if isinstance(data, dict) else {}
            return {"url": media_url(value), "alternativeText": attrs.get("alternativeText")}
        return value


class CTAButton(BlockModel):
    id: Optional[int] = None
    text: str
    href: str = "#"
    variant: Literal["primary", "secondary", "ghost"] = "primary"
    isExternal: bool = False
    icon: Optional[str] = None
