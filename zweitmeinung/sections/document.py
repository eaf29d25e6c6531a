"""
Document HTML complet : <head> (métadonnées), variables CSS du thème,
en-tête/pied de page issus de la configuration du site, sections rendues.
"""
from html import escape
from typing import Optional

from .. import config
from ..cms.schemas import SiteConfiguration
from ..metadata import PageMetadata, render_head

DEFAULT_THEME = {
    "primaryColor":   "#004166",
    "secondaryColor": "#1278B3",
    "accentColor":    "#B3AF09",
}

BASE_CSS = """
*,*::before,*::after{box-sizing:border-box}
body{margin:0;font-family:Roboto,Arial,sans-serif;line-height:1.6;color:#1f2937;background:#fff}
a{color:var(--color-secondary)}
.skip-link{position:absolute;left:-9999px}.skip-link:focus{left:1rem;top:1rem;z-index:100}
.container{max-width:1200px;margin:0 auto;padding:0 1.5rem}
section{padding:4rem 0}
.btn{display:inline-block;padding:.75rem 1.5rem;border-radius:6px;text-decoration:none;font-weight:500}
.btn-primary{background:var(--color-primary);color:#fff}
.btn-secondary{background:var(--color-secondary);color:#fff}
.btn-ghost{border:2px solid currentColor}
.hero{background:var(--color-primary);color:#fff;min-height:60vh;display:flex;align-items:center;background-size:cover}
.hero__title-line--highlight{color:var(--color-accent)}
[class*="__grid"]{display:grid;gap:1.5rem;grid-template-columns:repeat(auto-fit,minmax(240px,1fr))}
.cta-block{background:var(--color-secondary);color:#fff;text-align:center}
.faq__question{width:100%;text-align:left;background:none;border:0;padding:1rem 0;font-size:1.1rem;cursor:pointer}
.form__field{display:flex;flex-direction:column;margin-bottom:1rem}
.section-fallback{padding:2rem 0;background:#fef2f2;border:1px solid #fecaca;color:#b91c1c;text-align:center}
.site-header,.site-footer{background:var(--color-primary);color:#fff}
.site-header a,.site-footer a{color:#fff}
.site-header__nav ul,.site-footer ul{list-style:none;margin:0;padding:0;display:flex;gap:1.5rem}
.emergency-bar{background:#dc2626;color:#fff;text-align:center;padding:.25rem}
"""


def theme_css(site: Optional[SiteConfiguration]) -> str:
    """Variables CSS :root depuis site.theme (valeurs par défaut sinon)."""
    theme = dict(DEFAULT_THEME)
    if site and site.theme:
        for key in DEFAULT_THEME:
            value = getattr(site.theme, key)
            if value:
                theme[key] = value
    custom = site.theme.customCSS if site and site.theme and site.theme.customCSS else ""
    return (
        f":root{{--color-primary:{theme['primaryColor']};"
        f"--color-secondary:{theme['secondaryColor']};"
        f"--color-accent:{theme['accentColor']}}}"
        f"{BASE_CSS}{custom}"
    )


def render_header(site: Optional[SiteConfiguration]) -> str:
    name = escape(site.siteName) if site else "Zweitmeinung"
    phone = (site.contact.emergencyPhone if site and site.contact else None) or config.EMERGENCY_PHONE

    items = ""
    if site and site.navigation:
        for item in site.navigation.main:
            ext = ' target="_blank" rel="noopener"' if item.isExternal else ""
            items += f'<li><a href="{escape(item.href)}"{ext}>{escape(item.label)}</a></li>'

    return f"""<div class="emergency-bar">Notfall? <a href="tel:{escape(phone.replace(' ', ''))}">{escape(phone)}</a></div>
<header class="site-header">
  <div class="container">
    <a href="/" class="site-header__logo">{name}</a>
    <nav class="site-header__nav" aria-label="Hauptnavigation"><ul>{items}</ul></nav>
  </div>
</header>"""


def render_footer(site: Optional[SiteConfiguration]) -> str:
    columns = ""
    if site and site.navigation:
        for col in site.navigation.footer:
            links = "".join(f'<li><a href="{escape(link.href)}">{escape(link.label)}</a></li>' for link in col.links)
            columns += f'<div class="site-footer__column"><h3>{escape(col.title)}</h3><ul>{links}</ul></div>'

    contact = ""
    if site and site.contact:
        parts = [escape(p) for p in (site.contact.email, site.contact.phone, site.contact.address) if p]
        contact = f'<address class="site-footer__contact">{"<br>".join(parts)}</address>'

    name = escape(site.siteName) if site else "Zweitmeinung"
    return f"""<footer class="site-footer">
  <div class="container">
    <div class="site-footer__grid">{columns}</div>
    {contact}
    <p class="site-footer__copyright">© {name}</p>
  </div>
</footer>"""


def render_document(body: str, meta: PageMetadata, site: Optional[SiteConfiguration] = None,
                    extra_head: str = "") -> str:
    """Génère le HTML complet d'une page."""
    head = render_head(meta, site.siteName if site else None)
    return f"""<!DOCTYPE html>
<html lang="de">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  {head}
  <style>{theme_css(site)}</style>
  {extra_head}
</head>
<body>
<a href="#main" class="skip-link">Zum Inhalt springen</a>
{render_header(site)}
<main id="main">
{body}
</main>
{render_footer(site)}
</body>
</html>"""


NOT_FOUND_LINKS = [
    ("/", "Startseite"),
    ("/faq", "Häufige Fragen"),
    ("/kontakt", "Kontakt"),
]


def render_not_found(site: Optional[SiteConfiguration] = None) -> str:
    """Page 404 avec liens rapides, non indexée."""
    links = "".join(f'<li><a href="{href}">{label}</a></li>' for href, label in NOT_FOUND_LINKS)
    body = f"""<section class="not-found">
  <div class="container">
    <h1>Seite nicht gefunden</h1>
    <p>Die angeforderte Seite existiert nicht oder wurde verschoben.</p>
    <ul class="not-found__links">{links}</ul>
  </div>
</section>"""
    meta = PageMetadata(title="Seite nicht gefunden", noindex=True, nofollow=True)
    return render_document(body, meta, site)


def render_error_page(site: Optional[SiteConfiguration] = None) -> str:
    body = """<section class="server-error">
  <div class="container">
    <h1>Ein Fehler ist aufgetreten</h1>
    <p>Bitte versuchen Sie es später erneut.</p>
  </div>
</section>"""
    return render_document(body, PageMetadata(title="Fehler", noindex=True), site)


# ── Corps de pages spécifiques ───────────────────────────────────────────────

def render_legal_body(page) -> str:
    """Page légale : contenu éditorial ou iframe du fournisseur."""
    title = escape(page.title or page.type.capitalize())
    if page.embedType == "iframe" and page.embedUrl:
        content = (f'<iframe class="legal__embed" src="{escape(page.embedUrl)}" title="{title}" '
                   f'loading="lazy" style="width:100%;min-height:80vh;border:0"></iframe>')
    else:
        content = f'<div class="legal__content">{page.content}</div>'
    version = f'<p class="legal__version">Version {escape(page.version)}</p>' if page.version else ""
    return f"""<section class="legal legal--{escape(page.type)}">
  <div class="container">
    <h1>{title}</h1>
    {content}
    {version}
  </div>
</section>"""


def render_faq_overview(categories, faqs, active_category: Optional[str] = None,
                        query: Optional[str] = None) -> str:
    """Catégories (filtres) + liste de FAQs en accordéon."""
    cat_links = ""
    for c in categories:
        current = ' aria-current="true"' if c.slug == active_category else ""
        cat_links += f'<li><a href="/faq?kategorie={escape(c.slug)}"{current}>{escape(c.name)}</a></li>'
    items = ""
    for faq in faqs:
        answer_id = f"faq-answer-{faq.id}"
        items += f"""<div class="faq__item" data-faq-id="{faq.id}">
  <button class="faq__question" aria-expanded="false" aria-controls="{answer_id}"
    onclick="var a=this.nextElementSibling;var open=this.getAttribute('aria-expanded')==='true';this.setAttribute('aria-expanded',!open);a.hidden=open;"
  >{escape(faq.question)}<span class="faq__icon" aria-hidden="true">▾</span></button>
  <div class="faq__answer" id="{answer_id}" hidden>{faq.answer}</div>
</div>"""
    if not items:
        items = '<p class="faq__empty">Keine Fragen gefunden.</p>'

    value = escape(query) if query else ""
    return f"""<section class="faq faq-overview">
  <div class="container">
    <form class="faq__search" method="get" action="/faq" role="search">
      <label for="faq-q">FAQ durchsuchen</label>
      <input type="search" id="faq-q" name="q" value="{value}" minlength="2">
    </form>
    <ul class="faq__categories">{cat_links}</ul>
    <div class="faq__list">{items}</div>
  </div>
</section>"""
