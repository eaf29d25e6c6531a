"""
Auto-complétion de la recherche FAQ.

Quatre sources fusionnées puis triées par score : dictionnaire médical (termes
et synonymes), recherches populaires, catégories FAQ et questions FAQ du CMS.
Les doublons (texte identique, casse ignorée) gardent la première occurrence.
"""
import logging
import math
import re
from html import escape
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

from .cms import faq as cms_faq
from .cms.cache import TTLCache

log = logging.getLogger(__name__)

CACHE_TTL = 5 * 60
CACHE_MAX = 200
MIN_SCORE = 0.3

_CACHE = TTLCache(CACHE_TTL, max_entries=CACHE_MAX)

MEDICAL_DICTIONARY: Dict[str, dict] = {
    # Zweitmeinung
    "zweitmeinung": {
        "synonyms": ["zweit meinung", "zweite meinung", "fachliche einschätzung", "expert opinion"],
        "description": "Unabhängige medizinische Bewertung einer Diagnose oder Behandlung",
    },
    "gutachten": {
        "synonyms": ["medizinisches gutachten", "fachgutachten", "expertise"],
        "description": "Professionelle medizinische Einschätzung",
    },
    # Kardiologie
    "herz": {
        "synonyms": ["kardio", "cardiac", "herzkrankheit", "herzerkrankung"],
        "description": "Herzmedizin und Herz-Kreislauf-System",
    },
    "herzinfarkt": {
        "synonyms": ["myokardinfarkt", "heart attack", "herzanfall"],
        "description": "Akuter Verschluss einer Herzkranzarterie",
    },
    "bypass": {
        "synonyms": ["herzbypass", "koronarer bypass", "cabg"],
        "description": "Operative Umleitung bei Gefäßverengungen",
    },
    "stent": {
        "synonyms": ["gefäßstütze", "koronarstent", "herzkatheter"],
        "description": "Medizinische Gefäßstütze zur Offenhaltung",
    },
    "schrittmacher": {
        "synonyms": ["herzschrittmacher", "pacemaker", "stimulator"],
        "description": "Medizinisches Gerät zur Herzrhythmus-Regulierung",
    },
    # Onkologie
    "krebs": {
        "synonyms": ["karzinom", "tumor", "onkologie", "malignität"],
        "description": "Krebserkrankungen und Tumormedizin",
    },
    "chemotherapie": {
        "synonyms": ["chemo", "zytostatika", "krebstherapie"],
        "description": "Medikamentöse Krebsbehandlung",
    },
    "bestrahlung": {
        "synonyms": ["strahlentherapie", "radiotherapie", "radiation"],
        "description": "Strahlenbehandlung bei Krebs",
    },
    "metastasen": {
        "synonyms": ["metastasierung", "streuung", "sekundärtumor"],
        "description": "Tochtergeschwülste bei Krebserkrankungen",
    },
    # Intensivmedizin
    "intensiv": {
        "synonyms": ["intensivstation", "icu", "intensivbehandlung"],
        "description": "Intensivmedizinische Betreuung",
    },
    "beatmung": {
        "synonyms": ["ventilation", "respirator", "intubation"],
        "description": "Künstliche Beatmung bei kritischen Patienten",
    },
    "reanimation": {
        "synonyms": ["wiederbelebung", "cpr", "notfallmedizin"],
        "description": "Lebensrettende Sofortmaßnahmen",
    },
    # Gallenblase
    "gallenblase": {
        "synonyms": ["galle", "cholezyst", "gallenstein"],
        "description": "Gallenblase und Gallenwegerkrankungen",
    },
    "gallenstein": {
        "synonyms": ["gallensteine", "cholelithiasis", "gallenkolik"],
        "description": "Steinbildung in der Gallenblase",
    },
    "cholezystektomie": {
        "synonyms": ["gallenblasenentfernung", "gallen op"],
        "description": "Operative Entfernung der Gallenblase",
    },
    # Nephrologie
    "niere": {
        "synonyms": ["nieren", "nephro", "nierenerkrankung"],
        "description": "Nierenmedizin und Nierenerkrankungen",
    },
    "dialyse": {
        "synonyms": ["hämodialyse", "peritonealdialyse", "blutwäsche"],
        "description": "Nierenersatztherapie bei Nierenversagen",
    },
    "niereninsuffizienz": {
        "synonyms": ["nierenversagen", "nierenschwäche"],
        "description": "Eingeschränkte Nierenfunktion",
    },
    # Schilddrüse
    "schilddrüse": {
        "synonyms": ["thyroid", "schild", "schilddrüsenerkrankung"],
        "description": "Schilddrüsenmedizin und Hormonstörungen",
    },
    "struma": {
        "synonyms": ["kropf", "schilddrüsenvergrößerung"],
        "description": "Vergrößerung der Schilddrüse",
    },
    "thyreoidektomie": {
        "synonyms": ["schilddrüsenentfernung", "schilddrüsen op"],
        "description": "Operative Entfernung der Schilddrüse",
    },
    # Allgemein
    "operation": {
        "synonyms": ["op", "eingriff", "chirurgie", "surgery"],
        "description": "Operative medizinische Behandlung",
    },
    "diagnose": {
        "synonyms": ["befund", "krankheitsbild", "diagnosis"],
        "description": "Medizinische Krankheitsbestimmung",
    },
    "therapie": {
        "synonyms": ["behandlung", "therapy", "treatment"],
        "description": "Medizinische Behandlungsverfahren",
    },
    "kosten": {
        "synonyms": ["preis", "gebühren", "erstattung", "kostenübernahme"],
        "description": "Kosten und Kostenübernahme für medizinische Leistungen",
    },
}

POPULAR_SEARCHES = [
    "Zweitmeinung Kosten",
    "Operation notwendig",
    "Krebs Behandlung",
    "Herz Katheter",
    "Gallenblase entfernen",
    "Schilddrüse Operation",
    "Dialyse Alternativen",
    "Intensivmedizin Entscheidung",
    "Chemotherapie sinnvoll",
    "Bypass Operation",
    "Stent oder Operation",
    "Zweitmeinung Ablauf",
    "Experten finden",
    "Gutachten anfordern",
    "Behandlung überprüfen",
]


class Suggestion(BaseModel):
    id: str
    text: str
    type: Literal["faq", "medical-term", "popular-search", "category"]
    category: Optional[str] = None
    description: Optional[str] = None
    highlightedText: Optional[str] = None
    score: float


# ── Scoring ──────────────────────────────────────────────────────────────────

def fuzzy_match(search: str, target: str) -> float:
    """
    1.0 si `search` est contenu dans `target`, sinon 0.6 × la part des
    caractères de `search` retrouvés dans l'ordre.
    """
    search, text = search.lower(), target.lower()
    if not search:
        return 0.0
    if search in text:
        return 1.0
    matched = 0
    for ch in text:
        if matched < len(search) and ch == search[matched]:
            matched += 1
    return matched / len(search) * 0.6


def highlight(text: str, term: str) -> str:
    """Texte échappé, occurrences de `term` entourées de <mark>."""
    if not term:
        return escape(text)
    parts = re.split(f"({re.escape(term)})", text, flags=re.IGNORECASE)
    return "".join(f"<mark>{escape(p)}</mark>" if i % 2 else escape(p) for i, p in enumerate(parts))


def _top(suggestions: List[Suggestion], limit: int) -> List[Suggestion]:
    return sorted(suggestions, key=lambda s: s.score, reverse=True)[:limit]


# ── Sources ──────────────────────────────────────────────────────────────────

def medical_term_suggestions(query: str, limit: int = 5) -> List[Suggestion]:
    found = []
    for term, entry in MEDICAL_DICTIONARY.items():
        score = fuzzy_match(query, term)
        if score > MIN_SCORE:
            found.append(Suggestion(id=f"medical-{term}", text=term, type="medical-term",
                                    description=entry["description"],
                                    highlightedText=highlight(term, query), score=score))
        for synonym in entry["synonyms"]:
            score = fuzzy_match(query, synonym)
            if score > MIN_SCORE:
                found.append(Suggestion(id=f"medical-synonym-{synonym}", text=synonym, type="medical-term",
                                        description=f"Synonym für: {term}",
                                        highlightedText=highlight(synonym, query), score=score * 0.9))
    return _top(found, limit)


def popular_search_suggestions(query: str, limit: int = 3) -> List[Suggestion]:
    found = []
    for popular in POPULAR_SEARCHES:
        score = fuzzy_match(query, popular)
        if score > MIN_SCORE:
            found.append(Suggestion(id=f"popular-{popular}", text=popular, type="popular-search",
                                    description="Beliebte Suche",
                                    highlightedText=highlight(popular, query), score=score * 0.8))
    return _top(found, limit)


def category_suggestions(query: str, limit: int = 2) -> List[Suggestion]:
    found = []
    for category in cms_faq.get_faq_categories():
        score = fuzzy_match(query, category.name)
        if score > MIN_SCORE:
            found.append(Suggestion(id=f"category-{category.slug}", text=category.name, type="category",
                                    category=category.slug, description=category.description or "FAQ-Kategorie",
                                    highlightedText=highlight(category.name, query), score=score * 0.85))
    return _top(found, limit)


def faq_suggestions(query: str, limit: int = 2) -> List[Suggestion]:
    return [
        Suggestion(id=f"faq-{faq.id}", text=faq.question, type="faq",
                   category=faq.category.name if faq.category else "Allgemein",
                   description="FAQ-Frage", highlightedText=highlight(faq.question, query),
                   score=round(0.9 - i * 0.1, 2))
        for i, faq in enumerate(cms_faq.search_faqs(query, limit)[:limit])
    ]


# ── Point d'entrée ───────────────────────────────────────────────────────────

def suggest(query: str, max_results: int = 10) -> dict:
    """
    {suggestions, searchTerm, totalSuggestions} pour `query` (déjà nettoyée,
    au moins 2 caractères). Mis en cache 5 min par (requête, max_results).
    """
    key = f"{query.lower()}-{max_results}"
    cached = _CACHE.get(key)
    if cached is not None:
        return cached

    candidates = (
        medical_term_suggestions(query, math.ceil(max_results * 0.5))
        + popular_search_suggestions(query, math.ceil(max_results * 0.3))
        + category_suggestions(query, math.ceil(max_results * 0.2))
        + faq_suggestions(query, math.ceil(max_results * 0.2))
    )
    seen, unique = set(), []
    for s in candidates:
        if s.text.lower() not in seen:
            seen.add(s.text.lower())
            unique.append(s)
    suggestions = _top(unique, max_results)

    result = {
        "suggestions": [s.model_dump(exclude_none=True) for s in suggestions],
        "searchTerm": query,
        "totalSuggestions": len(suggestions),
    }
    _CACHE.set(key, result)
    log.debug("Auto-complétion '%s' : %d suggestion(s)", query, len(suggestions))
    return result


def clear_cache() -> None:
    _CACHE.clear()
