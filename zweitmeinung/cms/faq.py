"""
FAQ : page FAQ, catégories, listes, filtrage par catégorie et recherche.

Les listes sont mises en cache (catégories 10 min, FAQs 5 min, recherche 2 min)
et, en cas d'échec du CMS, on sert la dernière valeur connue même expirée.
"""
import logging
import re
from typing import Dict, List, Optional

from pydantic import ValidationError

from .cache import TTLCache
from .client import CMSError, CMSPayloadError, StrapiClient, response_items, strapi_client
from .schemas import FAQ, FAQCategory, FAQPage

log = logging.getLogger(__name__)

CATEGORIES_TTL = 10 * 60
FAQS_TTL       = 5 * 60
SEARCH_TTL     = 2 * 60

# Termes de recherche publics : taille bornée
SEARCH_CACHE_MAX = 200

_CATEGORIES_CACHE = TTLCache(CATEGORIES_TTL)
_FAQ_CACHE        = TTLCache(FAQS_TTL)
_SEARCH_CACHE     = TTLCache(SEARCH_TTL, max_entries=SEARCH_CACHE_MAX)

_FAQ_SORT = "priority:desc,helpfulCount:desc"
_PRIORITY_ORDER = {"featured": 4, "high": 3, "medium": 2, "low": 1}

# Mots-clés par catégorie : primaire +3, secondaire +1
CATEGORY_KEYWORDS: Dict[str, dict] = {
    "zweitmeinung-gallenblase": {
        "primary":   ["gallenblase", "gallenstein", "cholezystektomie"],
        "secondary": ["gallen", "gallensteine", "gallenblasenentfernung", "gallenkolik", "cholangitis"],
    },
    "zweitmeinung-nephrologie": {
        "primary":   ["niere", "dialyse", "niereninsuffizienz"],
        "secondary": ["nieren", "nierenerkrankung", "nephro", "transplantation", "hämodialyse",
                      "peritonealdialyse", "nierenversagen"],
    },
    "zweitmeinung-kardiologie": {
        "primary":   ["herz", "herzinfarkt", "bypass"],
        "secondary": ["kardio", "katheter", "herzkatheter", "stent", "koronararterien",
                      "angioplastie", "herzrhythmus", "schrittmacher"],
    },
    "zweitmeinung-onkologie": {
        "primary":   ["krebs", "tumor", "chemotherapie"],
        "secondary": ["onko", "chemo", "bestrahlung", "strahlentherapie", "karzinom",
                      "metastasen", "biopsie", "malignom", "zytostatika"],
    },
    "zweitmeinung-intensivmedizin": {
        "primary":   ["intensiv", "intensivstation", "beatmung"],
        "secondary": ["notfall", "reanimation", "sepsis", "schock", "koma", "icu",
                      "lebenserhaltung", "organversagen"],
    },
    "zweitmeinung-schilddruese": {
        "primary":   ["schilddrüse", "thyroid", "thyreoidektomie"],
        "secondary": ["schild", "struma", "schilddrüsenknoten", "tsh", "hyperthyreose",
                      "hypothyreose", "autonomie"],
    },
    "allgemeine-fragen-zur-zweitmeinung": {
        "primary":   ["zweitmeinung", "gutachten", "experten", "was", "wie", "wann", "kosten", "ablauf"],
        "secondary": ["bringt", "hilft", "sinnvoll", "notwendig", "wichtig", "verfahren", "beratung",
                      "meinung", "einschätzung", "diagnose", "behandlung", "therapie", "unterlagen",
                      "dokumente", "zeit", "dauer", "experte", "arzt"],
    },
}


def _parse(model, items) -> list:
    parsed = []
    for item in items or []:
        try:
            parsed.append(model.model_validate(item))
        except ValidationError:
            log.warning("%s ignoré (structure invalide) id=%s", model.__name__,
                        item.get("id") if isinstance(item, dict) else None)
    return parsed


def _fetch_list(client: StrapiClient, endpoint: str, params: dict, model) -> list:
    return _parse(model, response_items(client.get(endpoint, params), endpoint))


# ── Page FAQ ──────────────────────────────────────────────────────────────────

def get_faq_page(client: StrapiClient = strapi_client) -> Optional[FAQPage]:
    """Page CMS `faq` ou None si absente. Lève CMSError en cas d'échec."""
    params = {**client.build_filters(slug="faq"), "populate": "*"}
    items = response_items(client.get("/pages", params), "/pages")
    if not items:
        return None
    try:
        return FAQPage.model_validate(items[0])
    except ValidationError as e:
        raise CMSPayloadError("Page FAQ invalide") from e


# ── Listes ────────────────────────────────────────────────────────────────────

def get_faq_categories(client: StrapiClient = strapi_client) -> List[FAQCategory]:
    key = "faq-categories-all"
    cached = _CATEGORIES_CACHE.get(key)
    if cached is not None:
        return cached
    try:
        categories = _fetch_list(client, "/faq-categories", {"sort": "order:asc", "populate": "*"}, FAQCategory)
    except CMSError as e:
        log.error("Catégories FAQ indisponibles : %s", e)
        return _CATEGORIES_CACHE.get_stale(key) or []
    _CATEGORIES_CACHE.set(key, categories)
    log.info("Catégories FAQ chargées : %d", len(categories))
    return categories


def get_faqs(limit: int = 25, client: StrapiClient = strapi_client) -> List[FAQ]:
    key = f"faqs-list-{limit}"
    cached = _FAQ_CACHE.get(key)
    if cached is not None:
        return cached
    params = {"sort": _FAQ_SORT, "pagination[limit]": str(limit), "populate": "*"}
    try:
        faqs = _fetch_list(client, "/faqs", params, FAQ)
    except CMSError as e:
        log.error("FAQs indisponibles : %s", e)
        return _FAQ_CACHE.get_stale(key) or []
    _FAQ_CACHE.set(key, faqs)
    log.info("FAQs chargées : %d", len(faqs))
    return faqs


def score_faq(faq: FAQ, keywords: dict) -> int:
    text = f"{faq.question} {faq.answer}".lower()
    score = sum(3 for kw in keywords["primary"] if kw in text)
    score += sum(1 for kw in keywords["secondary"] if kw in text)
    return score


def get_faqs_by_category(category_slug: str, limit: int = 10,
                         client: StrapiClient = strapi_client) -> List[FAQ]:
    """
    FAQs d'une catégorie.

    1. Filtre de relation CMS (slug, documentId, nom), premier résultat non vide.
    2. Sinon, classement par mots-clés sur question + réponse.
    """
    approaches = [
        {"filters[category][slug][$eq]": category_slug},
        {"filters[category][documentId][$eq]": category_slug},
        {"filters[category][name][$containsi]": re.sub(r"[-_]", " ", category_slug)},
    ]
    for filters in approaches:
        params = {**filters, "sort": _FAQ_SORT, "pagination[limit]": str(limit), "populate": "category"}
        try:
            faqs = _fetch_list(client, "/faqs", params, FAQ)
        except CMSError as e:
            log.info("Filtre catégorie %s en échec : %s", list(filters)[0], e)
            continue
        if faqs:
            log.info("Catégorie %s : %d FAQ(s) via relation", category_slug, len(faqs))
            return faqs

    keywords = CATEGORY_KEYWORDS.get(category_slug)
    if not keywords:
        log.warning("Aucun mot-clé pour la catégorie %s", category_slug)
        return []

    scored = [(score_faq(faq, keywords), faq) for faq in get_faqs(100, client=client)]
    scored = [(s, faq) for s, faq in scored if s > 0]
    scored.sort(key=lambda sf: (sf[0], _PRIORITY_ORDER.get(sf[1].priority, 0), sf[1].helpfulCount),
                reverse=True)
    result = [faq for _, faq in scored[:limit]]
    log.info("Catégorie %s : %d FAQ(s) via mots-clés", category_slug, len(result))
    return result


def search_faqs(term: str, limit: int = 20, client: StrapiClient = strapi_client) -> List[FAQ]:
    key = f"faq-search-{term.lower()}-{limit}"
    cached = _SEARCH_CACHE.get(key)
    if cached is not None:
        return cached
    params = {
        "filters[question][$containsi]": term,
        "sort": _FAQ_SORT,
        "pagination[limit]": str(limit),
        "populate": "*",
    }
    try:
        results = _fetch_list(client, "/faqs", params, FAQ)
    except CMSError as e:
        log.error("Recherche FAQ en échec : %s", e)
        return _SEARCH_CACHE.get_stale(key) or []
    _SEARCH_CACHE.set(key, results)
    return results


def cache_stats() -> dict:
    return {
        "categories": _CATEGORIES_CACHE.stats(),
        "faqData": _FAQ_CACHE.stats(),
        "search": _SEARCH_CACHE.stats(),
    }


def clear_caches() -> None:
    _CATEGORIES_CACHE.clear()
    _FAQ_CACHE.clear()
    _SEARCH_CACHE.clear()
