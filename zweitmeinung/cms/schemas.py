"""
Schémas Pydantic des contenus Strapi (structure v5, sans wrapper `attributes`).

Les sections de page restent des dicts bruts : leur validation et leur rendu
appartiennent au pipeline de sections (zweitmeinung.sections).
"""
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class StrapiModel(BaseModel):
    """Base tolérante : Strapi ajoute régulièrement des champs."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# ── Médias ────────────────────────────────────────────────────────────────────

def media_url(media: Any) -> Optional[str]:
    """URL d'un média Strapi, v5 ({url}) ou v4 ({data: {attributes: {url}}})."""
    if not isinstance(media, dict):
        return None
    if media.get("url"):
        return media["url"]
    data = media.get("data")
    if isinstance(data, dict):
        attrs = data.get("attributes") or data
        return attrs.get("url")
    return None


# ── Pages ─────────────────────────────────────────────────────────────────────

class SEOComponent(StrapiModel):
    metaTitle: Optional[str] = None
    metaDescription: Optional[str] = None
    keywords: Optional[str] = None
    ogTitle: Optional[str] = None
    ogDescription: Optional[str] = None
    ogImage: Optional[Any] = None
    twitterCard: Optional[str] = None
    canonical: Optional[str] = None
    noindex: Optional[bool] = False
    nofollow: Optional[bool] = False


class Page(StrapiModel):
    """Page CMS : métadonnées + dynamic zone `sections` (records bruts, ordonnés)."""
    id: int
    documentId: Optional[str] = None
    title: str
    slug: str
    description: Optional[str] = None
    sections: List[Any] = Field(default_factory=list)
    seo: Optional[SEOComponent] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    publishedAt: Optional[str] = None

    @field_validator("sections", mode="before")
    @classmethod
    def _sections_or_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ── FAQ ───────────────────────────────────────────────────────────────────────

class FAQCategory(StrapiModel):
    id: int
    documentId: Optional[str] = None
    name: str
    slug: str
    description: Optional[str] = ""
    icon: Optional[str] = None
    color: Optional[str] = None
    order: int = 0


class FAQ(StrapiModel):
    id: int
    documentId: Optional[str] = None
    question: str
    slug: Optional[str] = None
    answer: str = ""
    shortAnswer: Optional[str] = None
    tags: Optional[List[str]] = None
    priority: Literal["low", "medium", "high", "featured"] = "medium"
    helpfulCount: int = 0
    notHelpfulCount: int = 0
    category: Optional[FAQCategory] = None


class FAQPage(StrapiModel):
    id: int
    documentId: Optional[str] = None
    title: str
    slug: str
    description: Optional[str] = None
    sections: List[Any] = Field(default_factory=list)
    seo: Optional[SEOComponent] = None

    @field_validator("sections", mode="before")
    @classmethod
    def _sections_or_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ── Site configuration ────────────────────────────────────────────────────────

class NavItem(StrapiModel):
    id: Optional[int] = None
    label: str
    href: str
    isExternal: bool = False
    children: List["NavItem"] = Field(default_factory=list)


class FooterLink(StrapiModel):
    id: Optional[int] = None
    label: str
    href: str
    isExternal: bool = False


class FooterSection(StrapiModel):
    id: Optional[int] = None
    title: str
    links: List[FooterLink] = Field(default_factory=list)


class Navigation(StrapiModel):
    main: List[NavItem] = Field(default_factory=list)
    footer: List[FooterSection] = Field(default_factory=list)


class ContactInfo(StrapiModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    emergencyPhone: Optional[str] = None
    address: Optional[str] = None


class ThemeConfig(StrapiModel):
    primaryColor: Optional[str] = None
    secondaryColor: Optional[str] = None
    accentColor: Optional[str] = None
    customCSS: Optional[str] = None


class SiteConfiguration(StrapiModel):
    id: int
    siteIdentifier: str
    domain: Optional[str] = None
    siteName: str
    tagline: Optional[str] = None
    brand: Optional[str] = None
    navigation: Optional[Navigation] = None
    contact: Optional[ContactInfo] = None
    theme: Optional[ThemeConfig] = None
    socialMedia: Optional[Dict[str, Any]] = None
    footer: Optional[Dict[str, Any]] = None
    openingHours: Optional[Dict[str, Any]] = None


# ── Pages légales ─────────────────────────────────────────────────────────────

LegalPageType = Literal["impressum", "datenschutz", "agb", "cookie-policy", "other"]


class LegalPage(StrapiModel):
    id: int
    documentId: Optional[str] = None
    type: LegalPageType
    content: str = ""
    embedType: Optional[Literal["iframe", "javascript", "static"]] = None
    embedUrl: Optional[str] = None
    provider: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    language: Optional[str] = None


# ── Métriques ─────────────────────────────────────────────────────────────────

class PerformanceMetricPayload(StrapiModel):
    name: str
    value: float
    path: Optional[str] = None
    duration: Optional[float] = None
    userAgent: Optional[str] = None
    timestamp: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None
