"""
Registre des sections : tag CMS (`__component`) → renderer HTML.

Table fixée à l'import, en lecture seule. Correspondance exacte et sensible
à la casse : pas d'alias, pas d'enregistrement dynamique.
"""
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional

from . import html

SectionRenderer = Callable[[Mapping[str, Any]], str]

_SECTION_RENDERERS = {
    "sections.hero":                     html.render_hero,
    "sections.hero-carousel":            html.render_hero_carousel,
    "sections.medical-specialties-grid": html.render_specialties_grid,
    "sections.text-block":               html.render_text_block,
    "sections.services-grid":            html.render_services_grid,
    "sections.testimonials":             html.render_testimonials,
    "sections.news":                     html.render_news,
    "sections.faq":                      html.render_faq,
    "sections.contact-form":             html.render_contact_form,
    "sections.stats":                    html.render_stats,
    "sections.team":                     html.render_team,
    "sections.cta":                      html.render_cta,
}

DEFAULT_REGISTRY: Mapping[str, SectionRenderer] = MappingProxyType(_SECTION_RENDERERS)


def resolve(tag: str, registry: Mapping[str, SectionRenderer] = DEFAULT_REGISTRY) -> Optional[SectionRenderer]:
    return registry.get(tag)


def tags(registry: Mapping[str, SectionRenderer] = DEFAULT_REGISTRY) -> List[str]:
    return list(registry)
