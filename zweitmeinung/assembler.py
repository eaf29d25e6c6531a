"""
Assemblage de page : orchestre les fetchs CMS d'une route, rend les sections
et projette les métadonnées.

Les appels CMS (requests, bloquants) partent en threads et sont attendus
ensemble. Page absente ou CMS en échec → même issue : not_found.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from . import config
from .cms import faq as cms_faq
from .cms import legal as cms_legal
from .cms import pages as cms_pages
from .cms.client import CMSError
from .metadata import PageMetadata, page_metadata
from .reporting import report_exception
from .sections.renderer import RenderedSection, debug_section_types, render_sections

log = logging.getLogger(__name__)


@dataclass
class PageResult:
    not_found: bool
    page: Any = None
    sections: List[RenderedSection] = field(default_factory=list)
    metadata: Optional[PageMetadata] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def missing(cls) -> "PageResult":
        return cls(not_found=True)


async def _fetch_all(main: Callable[[], Any], extras: Dict[str, Callable[[], Any]]):
    names = list(extras)
    results = await asyncio.gather(
        asyncio.to_thread(main),
        *(asyncio.to_thread(extras[name]) for name in names),
    )
    return results[0], dict(zip(names, results[1:]))


async def _assemble(label: str, main: Callable[[], Any],
                    extras: Optional[Dict[str, Callable[[], Any]]]) -> PageResult:
    try:
        page, extra_values = await _fetch_all(main, extras or {})
    except CMSError as e:
        log.error("Page '%s' : CMS en échec (%s), réponse 404", label, e)
        report_exception(e, slug=label)
        return PageResult.missing()

    if page is None:
        return PageResult.missing()

    if config.is_development():
        debug_section_types(page.sections)
    return PageResult(
        not_found=False,
        page=page,
        sections=render_sections(page.sections),
        metadata=page_metadata(page),
        extras=extra_values,
    )


async def assemble_page(slug: str, extras: Optional[Dict[str, Callable[[], Any]]] = None) -> PageResult:
    """
    Assemble la page CMS `slug`.

    `extras` : fetchers auxiliaires nommés (callables sans argument) exécutés
    en parallèle de la page ; leurs résultats sont rendus dans PageResult.extras.
    """
    return await _assemble(slug, lambda: cms_pages.get_page(slug), extras)


async def assemble_faq_page(faq_limit: int = 50) -> PageResult:
    """Page FAQ + catégories + FAQs ; les listes dégradent d'elles-mêmes en liste vide."""
    return await _assemble("faq", cms_faq.get_faq_page, {
        "categories": cms_faq.get_faq_categories,
        "faqs": lambda: cms_faq.get_faqs(faq_limit),
    })


async def load_legal_page(page_type: str):
    """Page légale ou None (absente ou CMS en échec)."""
    try:
        return await asyncio.to_thread(cms_legal.get_legal_page, page_type)
    except CMSError as e:
        log.error("Page légale '%s' : CMS en échec (%s)", page_type, e)
        report_exception(e, slug=page_type)
        return None
