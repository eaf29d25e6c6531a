"""Pages légales (impressum, datenschutz, agb…), version la plus récente par type."""
import logging
from typing import Optional

from pydantic import ValidationError

from .client import CMSPayloadError, StrapiClient, response_items, strapi_client
from .schemas import LegalPage

log = logging.getLogger(__name__)

LEGAL_PAGE_TYPES = ("impressum", "datenschutz", "agb", "cookie-policy", "other")


def get_legal_page(page_type: str, client: StrapiClient = strapi_client) -> Optional[LegalPage]:
    if page_type not in LEGAL_PAGE_TYPES:
        raise ValueError(f"Type de page légale inconnu : {page_type}")

    params = {**client.build_filters(type=page_type), "sort": "createdAt:desc"}
    items = response_items(client.get("/legal-pages", params), "/legal-pages")
    if not items:
        log.warning("Aucune page légale de type %s", page_type)
        return None
    try:
        page = LegalPage.model_validate(items[0])
    except ValidationError as e:
        raise CMSPayloadError(f"Page légale {page_type} invalide") from e
    log.info("Page légale chargée : %s (v%s)", page_type, page.version)
    return page
