"""
Écritures vers le CMS : messages de contact, métriques de performance, votes FAQ.
"""
import logging
from typing import Any, Dict, Optional

from .client import CMSError, CMSPayloadError, StrapiClient, response_items, strapi_client
from .schemas import PerformanceMetricPayload

log = logging.getLogger(__name__)


def submit_contact_message(data: Dict[str, Any], client: StrapiClient = strapi_client) -> Any:
    """POST /contact-messages {data}. Lève CMSError en cas d'échec."""
    return client.post("/contact-messages", {"data": data})


def record_performance_metric(metric: PerformanceMetricPayload, client: StrapiClient = strapi_client) -> Any:
    return client.post("/performance-metrics", {"data": metric.model_dump(exclude_none=True)})


def _find_faq(faq_id: int, client: StrapiClient) -> Optional[dict]:
    items = response_items(client.get("/faqs", {**client.build_filters(id=faq_id), "populate": "*"}), "/faqs")
    if not items:
        return None
    if not isinstance(items[0], dict):
        raise CMSPayloadError(f"/faqs : FAQ {faq_id} invalide")
    return items[0]


def get_faq_votes(faq_id: int, client: StrapiClient = strapi_client) -> Optional[Dict[str, int]]:
    """Compteurs {helpfulCount, notHelpfulCount} ou None si la FAQ n'existe pas."""
    faq = _find_faq(faq_id, client)
    if faq is None:
        log.warning("FAQ %s introuvable", faq_id)
        return None
    return {
        "helpfulCount": faq.get("helpfulCount") or 0,
        "notHelpfulCount": faq.get("notHelpfulCount") or 0,
    }


def update_faq_votes(faq_id: int, helpful: int, not_helpful: int,
                     client: StrapiClient = strapi_client) -> bool:
    """Met à jour les compteurs via le documentId. False si la mise à jour échoue."""
    try:
        faq = _find_faq(faq_id, client)
        if not faq or not faq.get("documentId"):
            log.error("FAQ %s introuvable ou sans documentId", faq_id)
            return False
        client.put(f"/faqs/{faq['documentId']}",
                   {"data": {"helpfulCount": helpful, "notHelpfulCount": not_helpful}})
    except CMSError as e:
        log.error("Mise à jour des votes FAQ %s en échec : %s", faq_id, e)
        return False
    log.info("Votes FAQ %s : %d utile(s), %d non utile(s)", faq_id, helpful, not_helpful)
    return True
