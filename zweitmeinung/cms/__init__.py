from .client import (
    CMSError,
    CMSPayloadError,
    CMSResponseError,
    CMSUnavailable,
    StrapiClient,
    strapi_client,
)
from .faq import get_faq_categories, get_faq_page, get_faqs, get_faqs_by_category, search_faqs
from .legal import get_legal_page
from .pages import get_all_pages, get_page
from .site_config import get_cached_site_config, get_site_config
from .submissions import get_faq_votes, record_performance_metric, submit_contact_message, update_faq_votes

__all__ = [
    "CMSError", "CMSPayloadError", "CMSResponseError", "CMSUnavailable",
    "StrapiClient", "strapi_client",
    "get_page", "get_all_pages",
    "get_faq_page", "get_faq_categories", "get_faqs", "get_faqs_by_category", "search_faqs",
    "get_site_config", "get_cached_site_config",
    "get_legal_page",
    "submit_contact_message", "record_performance_metric", "get_faq_votes", "update_faq_votes",
]
