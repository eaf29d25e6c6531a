"""
Tests de l'auto-complétion FAQ : scoring, surlignage, fusion des sources.
"""
from unittest.mock import patch

import pytest

from zweitmeinung import autocomplete
from zweitmeinung.cms.schemas import FAQ, FAQCategory


def make_faq(faq_id, question, category=None):
    cat = FAQCategory(id=99, name=category, slug="cat") if category else None
    return FAQ(id=faq_id, question=question, category=cat)


def suggest_with(query, faqs=(), categories=(), max_results=10):
    with patch("zweitmeinung.cms.faq.search_faqs", return_value=list(faqs)) as search, \
         patch("zweitmeinung.cms.faq.get_faq_categories", return_value=list(categories)):
        return autocomplete.suggest(query, max_results), search


# ── Scoring ───────────────────────────────────────────────────────────────

class TestFuzzyMatch:
    def test_sous_chaine(self):
        assert autocomplete.fuzzy_match("HERZ", "Herzinfarkt") == 1.0

    def test_sous_sequence(self):
        assert autocomplete.fuzzy_match("hrz", "herz") == pytest.approx(0.6)

    def test_partiel(self):
        assert autocomplete.fuzzy_match("herzx", "herz") == pytest.approx(4 / 5 * 0.6)

    def test_vide(self):
        assert autocomplete.fuzzy_match("", "herz") == 0.0


class TestHighlight:
    def test_marque_sans_casse(self):
        assert autocomplete.highlight("Herz Katheter", "herz") == "<mark>Herz</mark> Katheter"

    def test_echappe(self):
        assert autocomplete.highlight("<b>Herz</b>", "herz") == "&lt;b&gt;<mark>Herz</mark>&lt;/b&gt;"

    def test_terme_regex_litteral(self):
        assert autocomplete.highlight("a.b", ".") == "a<mark>.</mark>b"


# ── Sources ───────────────────────────────────────────────────────────────

class TestSources:
    def test_termes_medicaux_et_synonymes(self):
        found = autocomplete.medical_term_suggestions("herz", limit=5)
        assert [s.text for s in found][:2] == ["herz", "herzinfarkt"]
        synonym = next(s for s in found if s.text == "herzkrankheit")
        assert synonym.score == pytest.approx(0.9)
        assert synonym.description == "Synonym für: herz"

    def test_recherches_populaires(self):
        found = autocomplete.popular_search_suggestions("katheter")
        assert found[0].text == "Herz Katheter"
        assert found[0].score == pytest.approx(0.8)


# ── Fusion ────────────────────────────────────────────────────────────────

class TestSuggest:
    def test_reponse(self):
        result, _ = suggest_with("herz")
        texts = [s["text"] for s in result["suggestions"]]
        assert {"herz", "herzinfarkt", "Herz Katheter"} <= set(texts)
        assert result["searchTerm"] == "herz"
        assert result["totalSuggestions"] == len(texts) <= 10
        scores = [s["score"] for s in result["suggestions"]]
        assert scores == sorted(scores, reverse=True)

    def test_faq_du_cms(self):
        result, search = suggest_with("kostet", faqs=[make_faq(7, "Was kostet eine Zweitmeinung?", "Allgemein")])
        search.assert_called_once_with("kostet", 2)
        faq = next(s for s in result["suggestions"] if s["type"] == "faq")
        assert faq["id"] == "faq-7"
        assert faq["category"] == "Allgemein"
        assert faq["score"] == pytest.approx(0.9)
        assert "<mark>kostet</mark>" in faq["highlightedText"]

    def test_categories(self):
        categories = [FAQCategory(id=1, name="Kardiologie", slug="zweitmeinung-kardiologie")]
        result, _ = suggest_with("kardio", categories=categories)
        cat = next(s for s in result["suggestions"] if s["type"] == "category")
        assert cat["text"] == "Kardiologie"
        assert cat["category"] == "zweitmeinung-kardiologie"
        assert cat["score"] == pytest.approx(0.85)

    def test_doublons_premiere_occurrence(self):
        result, _ = suggest_with("herz", faqs=[make_faq(3, "Herz")])
        same = [s for s in result["suggestions"] if s["text"].lower() == "herz"]
        assert len(same) == 1
        assert same[0]["type"] == "medical-term"

    def test_limite(self):
        result, _ = suggest_with("herz", max_results=3)
        assert len(result["suggestions"]) == 3

    def test_cache(self):
        suggest_with("dialyse")
        _, search = suggest_with("dialyse")
        search.assert_not_called()

    def test_cms_injoignable(self):
        result = autocomplete.suggest("herz")
        assert result["totalSuggestions"] > 0
        assert all(s["type"] != "faq" for s in result["suggestions"])
