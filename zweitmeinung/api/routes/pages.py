"""
Pages HTML : /, /faq, /kontakt, /impressum, /datenschutz, /sitemap.xml, /{slug}.

Page absente ou CMS en échec → page 404 (noindex) avec liens rapides.
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, Response

from ...assembler import PageResult, assemble_faq_page, assemble_page, load_legal_page
from ...cms import faq as cms_faq
from ...cms import pages as cms_pages
from ...cms.site_config import get_cached_site_config
from ...metadata import PageMetadata
from ...sections.document import render_document, render_faq_overview, render_legal_body, render_not_found
from ...sections.html import render_contact_form
from ...sections.renderer import filter_sections_by_type, join_sections
from ...sitemap import build_sitemap

log = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


async def _site():
    return await asyncio.to_thread(get_cached_site_config)


async def _not_found() -> HTMLResponse:
    return HTMLResponse(render_not_found(await _site()), status_code=404)


def _page_response(result: PageResult, extra_body: str = "") -> HTMLResponse:
    body = join_sections(result.sections) + extra_body
    return HTMLResponse(render_document(body, result.metadata, result.extras.get("site")))


async def _cms_page(slug: str) -> HTMLResponse:
    result = await assemble_page(slug, extras={"site": get_cached_site_config})
    if result.not_found:
        return await _not_found()
    return _page_response(result)


@router.get("/", response_class=HTMLResponse)
async def home():
    return await _cms_page("home")


# ── FAQ ──────────────────────────────────────────────────────────────────────

@router.get("/faq", response_class=HTMLResponse)
async def faq_page(kategorie: Optional[str] = None, q: Optional[str] = None):
    result = await assemble_faq_page()
    if result.not_found:
        return await _not_found()

    faqs = result.extras["faqs"]
    query = q.strip() if q else None
    if query and len(query) >= 2:
        faqs = await asyncio.to_thread(cms_faq.search_faqs, query)
    elif kategorie:
        faqs = await asyncio.to_thread(cms_faq.get_faqs_by_category, kategorie)

    site = await _site()
    body = join_sections(result.sections) + render_faq_overview(result.extras["categories"], faqs, kategorie, query)
    return HTMLResponse(render_document(body, result.metadata, site))


# ── Kontakt ──────────────────────────────────────────────────────────────────

_DEFAULT_CONTACT_SECTION = {
    "__component": "sections.contact-form",
    "id": 1,
    "title": "Kontakt",
    "subtitle": "Wir melden uns innerhalb von 24 Stunden bei Ihnen.",
}


@router.get("/kontakt", response_class=HTMLResponse)
async def kontakt():
    """Page CMS `kontakt` si elle existe, complétée du formulaire si elle n'en a pas."""
    result = await assemble_page("kontakt", extras={"site": get_cached_site_config})
    if result.not_found:
        site = await _site()
        meta = PageMetadata(
            title="Kontakt",
            description="Kontaktieren Sie uns für eine medizinische Zweitmeinung.",
        )
        return HTMLResponse(render_document(render_contact_form(_DEFAULT_CONTACT_SECTION), meta, site))

    extra = ""
    if not filter_sections_by_type(result.page.sections, "sections.contact-form"):
        extra = render_contact_form(_DEFAULT_CONTACT_SECTION)
    return _page_response(result, extra)


# ── Pages légales ────────────────────────────────────────────────────────────

async def _legal(page_type: str, title: str) -> HTMLResponse:
    page, site = await asyncio.gather(load_legal_page(page_type), _site())
    if page is None:
        return HTMLResponse(render_not_found(site), status_code=404)
    meta = PageMetadata(title=page.title or title, description=page.description)
    return HTMLResponse(render_document(render_legal_body(page), meta, site))


@router.get("/impressum", response_class=HTMLResponse)
async def impressum():
    return await _legal("impressum", "Impressum")


@router.get("/datenschutz", response_class=HTMLResponse)
async def datenschutz():
    return await _legal("datenschutz", "Datenschutzerklärung")


# ── Sitemap ──────────────────────────────────────────────────────────────────

@router.get("/sitemap.xml")
async def sitemap_xml():
    pages = await asyncio.to_thread(cms_pages.get_all_pages)
    return Response(build_sitemap(pages), media_type="application/xml",
                    headers={"Cache-Control": "public, max-age=3600"})


# ── Page CMS générique (à déclarer en dernier) ───────────────────────────────

@router.get("/{slug}", response_class=HTMLResponse)
async def cms_page(slug: str):
    return await _cms_page(slug)
