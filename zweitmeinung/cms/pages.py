"""
Pages CMS : récupération par slug, liste complète (sitemap).

get_page() distingue « absent » (None) et « en échec » (CMSError) ;
get_all_pages() dégrade en liste vide.
"""
import logging
from typing import List, Optional

from pydantic import ValidationError

from .client import CMSError, CMSPayloadError, StrapiClient, response_items, strapi_client
from .schemas import Page

log = logging.getLogger(__name__)

PAGE_POPULATE = [
    "sections",
    "sections.slides",
    "sections.slides.titleLines",
    "sections.slides.ctaButtons",
    "sections.slides.backgroundImage",
    "sections.slides.badge",
    "seo",
]


def get_page(slug: str, client: StrapiClient = strapi_client) -> Optional[Page]:
    """Page publiée pour `slug`, ou None si le CMS n'en a pas. Lève CMSError sinon."""
    params = {**client.build_populate_params(PAGE_POPULATE), **client.build_filters(slug=slug)}
    items = response_items(client.get("/pages", params), "/pages")
    if not items:
        log.warning("Page '%s' introuvable", slug)
        return None

    try:
        page = Page.model_validate(items[0])
    except ValidationError as e:
        raise CMSPayloadError(f"Page '{slug}' invalide : {e.error_count()} erreur(s)") from e
    log.info("Page '%s' chargée (%d section(s))", slug, len(page.sections))
    return page


def get_all_pages(client: StrapiClient = strapi_client) -> List[Page]:
    params = {**client.build_populate_params(["seo"]), "pagination[pageSize]": "100"}
    try:
        items = response_items(client.get("/pages", params), "/pages")
    except CMSError as e:
        log.error("Liste des pages indisponible : %s", e)
        return []

    pages = []
    for item in items:
        try:
            pages.append(Page.model_validate(item))
        except ValidationError:
            log.warning("Page ignorée (structure invalide) id=%s", item.get("id") if isinstance(item, dict) else None)
    return pages
