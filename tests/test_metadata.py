"""
Tests des métadonnées : replis SEO → page et balises <head>.
"""
from zweitmeinung.cms.schemas import Page
from zweitmeinung.metadata import PageMetadata, page_metadata, render_head


def make_page(seo=None, **extra):
    data = {"id": 1, "title": "Kardiologie", "slug": "kardiologie",
            "description": "Zweitmeinung Herz", "sections": [], **extra}
    if seo is not None:
        data["seo"] = seo
    return Page.model_validate(data)


class TestPageMetadata:
    def test_sans_seo(self):
        meta = page_metadata(make_page())
        assert meta.title == "Kardiologie"
        assert meta.description == "Zweitmeinung Herz"
        assert meta.og_title == "Kardiologie"
        assert meta.og_description == "Zweitmeinung Herz"
        assert meta.twitter_card == "summary_large_image"
        assert meta.noindex is False and meta.nofollow is False

    def test_seo_prioritaire(self):
        meta = page_metadata(make_page(seo={"metaTitle": "Herz-Zweitmeinung", "metaDescription": "Experten"}))
        assert meta.title == "Herz-Zweitmeinung"
        assert meta.description == "Experten"
        assert meta.og_title == "Herz-Zweitmeinung"
        assert meta.og_description == "Experten"

    def test_og_explicite(self):
        meta = page_metadata(make_page(seo={
            "metaTitle": "Meta", "ogTitle": "OG", "ogDescription": "OG desc",
            "ogImage": {"url": "https://cdn.example.org/og.png"}, "twitterCard": "summary",
        }))
        assert meta.og_title == "OG"
        assert meta.og_description == "OG desc"
        assert meta.og_image == "https://cdn.example.org/og.png"
        assert meta.twitter_card == "summary"

    def test_seo_vide_replie_sur_la_page(self):
        meta = page_metadata(make_page(seo={}))
        assert meta.title == "Kardiologie"
        assert meta.og_title == "Kardiologie"
        assert meta.description == "Zweitmeinung Herz"

    def test_robots(self):
        meta = page_metadata(make_page(seo={"noindex": True, "canonical": "https://zweitmein.ng/k"}))
        assert meta.noindex is True
        assert meta.canonical == "https://zweitmein.ng/k"


class TestRenderHead:
    def test_balises_de_base(self):
        head = render_head(PageMetadata(title="Kontakt", description="Schreiben Sie uns"))
        assert "<title>Kontakt</title>" in head
        assert '<meta name="description" content="Schreiben Sie uns">' in head
        assert '<meta property="og:title" content="Kontakt">' in head
        assert '<meta name="twitter:card" content="summary_large_image">' in head
        assert '<meta name="robots" content="index, follow">' in head

    def test_nom_du_site_ajoute(self):
        head = render_head(PageMetadata(title="FAQ"), site_name="Zweitmeinung.ng")
        assert "<title>FAQ | Zweitmeinung.ng</title>" in head
        assert 'og:site_name' in head

    def test_nom_du_site_deja_present(self):
        head = render_head(PageMetadata(title="Zweitmeinung.ng"), site_name="Zweitmeinung.ng")
        assert "<title>Zweitmeinung.ng</title>" in head

    def test_noindex_nofollow(self):
        head = render_head(PageMetadata(title="404", noindex=True, nofollow=True))
        assert '<meta name="robots" content="noindex, nofollow">' in head

    def test_echappement(self):
        head = render_head(PageMetadata(title='"Herz" <OP>'))
        assert "&quot;Herz&quot; &lt;OP&gt;" in head
