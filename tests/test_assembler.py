"""
Tests de l'assemblage de page : page trouvée, absente, CMS en échec.
"""
import asyncio
import logging
from unittest.mock import patch

from zweitmeinung.assembler import assemble_faq_page, assemble_page, load_legal_page
from zweitmeinung.cms.client import CMSResponseError, CMSUnavailable
from zweitmeinung.cms.schemas import FAQ, FAQCategory, FAQPage, Page


def make_page(sections=None):
    return Page.model_validate({
        "id": 3, "title": "Onkologie", "slug": "onkologie", "description": "Krebs-Zweitmeinung",
        "sections": sections if sections is not None else [
            {"__component": "sections.hero", "id": 1, "title": "Onkologie"},
            {"__component": "sections.unbekannt", "id": 2},
            {"__component": "sections.cta", "id": 0},
        ],
    })


class TestAssemblePage:
    def test_page_trouvee(self):
        with patch("zweitmeinung.cms.pages.get_page", return_value=make_page()) as get_page:
            result = asyncio.run(assemble_page("onkologie"))
        get_page.assert_called_once_with("onkologie")
        assert result.not_found is False
        assert [s.kind for s in result.sections] == ["section", "placeholder"]
        assert result.metadata.title == "Onkologie"

    def test_page_absente(self):
        with patch("zweitmeinung.cms.pages.get_page", return_value=None):
            result = asyncio.run(assemble_page("gibt-es-nicht"))
        assert result.not_found is True
        assert result.sections == []
        assert result.metadata is None

    def test_cms_injoignable_meme_issue_que_absent(self, caplog):
        with patch("zweitmeinung.cms.pages.get_page", side_effect=CMSUnavailable("timeout")):
            with caplog.at_level(logging.ERROR):
                result = asyncio.run(assemble_page("home"))
        assert result.not_found is True
        assert any("home" in rec.getMessage() for rec in caplog.records if rec.levelno == logging.ERROR)

    def test_erreur_http_cms(self):
        with patch("zweitmeinung.cms.pages.get_page", side_effect=CMSResponseError(500, "Internal")):
            result = asyncio.run(assemble_page("home"))
        assert result.not_found is True

    def test_extras_en_parallele(self):
        with patch("zweitmeinung.cms.pages.get_page", return_value=make_page([])):
            result = asyncio.run(assemble_page("onkologie", extras={"site": lambda: "site", "n": lambda: 3}))
        assert result.extras == {"site": "site", "n": 3}
        assert result.sections == []

    def test_cms_non_configure(self):
        # STRAPI_API_URL vide (conftest) → CMSUnavailable → not_found
        result = asyncio.run(assemble_page("home"))
        assert result.not_found is True


class TestAssembleFaqPage:
    def test_page_faq(self):
        page = FAQPage.model_validate({"id": 9, "title": "FAQ", "slug": "faq", "sections": []})
        categories = [FAQCategory(id=1, name="Kardiologie", slug="zweitmeinung-kardiologie")]
        faqs = [FAQ(id=1, question="Was kostet eine Zweitmeinung?", answer="...")]
        with patch("zweitmeinung.cms.faq.get_faq_page", return_value=page), \
             patch("zweitmeinung.cms.faq.get_faq_categories", return_value=categories), \
             patch("zweitmeinung.cms.faq.get_faqs", return_value=faqs) as get_faqs:
            result = asyncio.run(assemble_faq_page(faq_limit=20))
        get_faqs.assert_called_once_with(20)
        assert result.not_found is False
        assert result.extras["categories"] == categories
        assert result.extras["faqs"] == faqs

    def test_page_faq_absente(self):
        with patch("zweitmeinung.cms.faq.get_faq_page", return_value=None), \
             patch("zweitmeinung.cms.faq.get_faq_categories", return_value=[]), \
             patch("zweitmeinung.cms.faq.get_faqs", return_value=[]):
            result = asyncio.run(assemble_faq_page())
        assert result.not_found is True


class TestLoadLegalPage:
    def test_cms_en_echec(self):
        with patch("zweitmeinung.cms.legal.get_legal_page", side_effect=CMSUnavailable("down")):
            assert asyncio.run(load_legal_page("impressum")) is None
