"""
Configuration du site (navigation, contact, thème, footer).

Strapi héberge plusieurs sites : on retient celui dont siteIdentifier vaut
config.SITE_IDENTIFIER. Absent, invalide ou CMS injoignable → configuration
de repli, la mise en page ne doit jamais casser faute de config.
"""
import logging
import re
from typing import Optional

from pydantic import ValidationError

from .. import config
from .cache import TTLCache
from .client import CMSError, StrapiClient, response_items, strapi_client
from .schemas import SiteConfiguration

log = logging.getLogger(__name__)

CACHE_TTL = 5 * 60
_CACHE = TTLCache(CACHE_TTL)

FALLBACK_SITE_CONFIG = {
    "id": 11,
    "siteIdentifier": "zweitmeinu-ng",
    "domain": "zweitmein.ng",
    "siteName": "Zweitmeinung.ng",
    "brand": "portal",
    "navigation": {
        "main": [
            {"id": 1, "label": "Home", "href": "/"},
            {"id": 2, "label": "Zweitmeinung", "href": "/zweitmeinung"},
            {"id": 3, "label": "Fachbereiche", "href": "/fachbereiche"},
            {"id": 4, "label": "Motivation", "href": "/motivation"},
            {"id": 5, "label": "Über uns", "href": "/ueber-uns"},
            {"id": 6, "label": "Kontakt", "href": "/kontakt"},
        ],
        "footer": [
            {"id": 1, "title": "Services", "links": [
                {"id": 1, "label": "Medizinische Zweitmeinung", "href": "/zweitmeinung"},
                {"id": 2, "label": "Online Beratung", "href": "/beratung"},
            ]},
            {"id": 2, "title": "Rechtliches", "links": [
                {"id": 1, "label": "Impressum", "href": "/impressum"},
                {"id": 2, "label": "Datenschutz", "href": "/datenschutz"},
                {"id": 3, "label": "AGB", "href": "/agb"},
            ]},
        ],
    },
    "contact": {
        "email": "info@zweitmein.ng",
        "phone": "+49 176 47870680",
        "emergencyPhone": "+49 176 47870680",
        "address": "Healthcare Innovation Center, Deutschland",
    },
    "theme": {"primaryColor": "#004166", "secondaryColor": "#1278B3", "accentColor": "#B3AF09"},
}


def fallback_site_config() -> SiteConfiguration:
    return SiteConfiguration.model_validate(FALLBACK_SITE_CONFIG)


def normalize_site(raw: dict) -> dict:
    """Structure Strapi réelle (mainNavigation/topBar) → structure SiteConfiguration."""
    site = dict(raw)
    nav = raw.get("navigation")
    if isinstance(nav, dict) and "mainNavigation" in nav:
        main = []
        for index, item in enumerate(nav.get("mainNavigation") or []):
            digits = re.sub(r"\D", "", str(item.get("id", "")))
            main.append({
                "id": int(digits) if digits else index + 1,
                "label": item.get("label", ""),
                "href": item.get("url", "/"),
                "isExternal": item.get("type") == "external",
                "children": [
                    {"id": i + 1, "label": sub.get("label", ""), "href": sub.get("url", "/")}
                    for i, sub in enumerate(item.get("subItems") or [])
                ],
            })
        site["navigation"] = {"main": main, "footer": []}

        top_bar = ((nav.get("topBar") or {}).get("content")) or []
        by_type = {entry.get("type"): entry.get("content") for entry in top_bar if isinstance(entry, dict)}
        site.setdefault("contact", {
            "email": by_type.get("email") or "kontakt@zweitmeinu.ng",
            "phone": by_type.get("phone") or config.EMERGENCY_PHONE,
            "emergencyPhone": by_type.get("phone") or config.EMERGENCY_PHONE,
        })
    return site


def get_site_config(client: StrapiClient = strapi_client) -> SiteConfiguration:
    try:
        sites = response_items(client.get("/site-configurations", {"populate": "*"}), "/site-configurations")
    except CMSError as e:
        log.error("Configuration du site indisponible, repli : %s", e)
        return fallback_site_config()

    raw = next((s for s in sites if isinstance(s, dict) and s.get("siteIdentifier") == config.SITE_IDENTIFIER), None)
    if raw is None:
        log.warning("Aucune configuration pour %s (sites : %s), repli", config.SITE_IDENTIFIER,
                    [s.get("siteIdentifier") for s in sites if isinstance(s, dict)])
        return fallback_site_config()

    try:
        site = SiteConfiguration.model_validate(normalize_site(raw))
    except ValidationError as e:
        log.error("Configuration du site invalide (%d erreur(s)), repli", e.error_count())
        return fallback_site_config()
    log.info("Configuration du site chargée : %s", site.siteName)
    return site


def get_cached_site_config(client: StrapiClient = strapi_client) -> Optional[SiteConfiguration]:
    cached = _CACHE.get("site")
    if cached is not None:
        return cached
    site = get_site_config(client)
    if site:
        _CACHE.set("site", site)
    return site


def clear_cache() -> None:
    _CACHE.clear()
