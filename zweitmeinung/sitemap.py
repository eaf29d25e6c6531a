"""
Sitemap XML : routes fixes du site + pages CMS publiées (hors noindex).
"""
from html import escape as xml_escape
from typing import List, Optional

from . import config
from .cms.schemas import Page

# (chemin, changefreq, priority)
STATIC_ENTRIES = [
    ("/",            "weekly",  "1.0"),
    ("/faq",         "weekly",  "0.8"),
    ("/kontakt",     "monthly", "0.7"),
    ("/impressum",   "yearly",  "0.3"),
    ("/datenschutz", "yearly",  "0.3"),
]

# Slugs CMS déjà servis par une route fixe
_ROUTED_SLUGS = {"home", "faq", "kontakt", "impressum", "datenschutz"}


def absolute_url(path: str) -> str:
    return f"{config.SITE_URL.rstrip('/')}{path}"


def build_sitemap_entry(path: str, lastmod: Optional[str] = None,
                        changefreq: Optional[str] = "weekly", priority: Optional[str] = "0.6") -> str:
    lines = [
        "  <url>",
        f"    <loc>{xml_escape(absolute_url(path))}</loc>",
    ]
    if lastmod:
        lines.append(f"    <lastmod>{xml_escape(lastmod[:10])}</lastmod>")
    if changefreq:
        lines.append(f"    <changefreq>{changefreq}</changefreq>")
    if priority:
        lines.append(f"    <priority>{priority}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def build_sitemap(pages: List[Page]) -> str:
    entries = [build_sitemap_entry(path, changefreq=freq, priority=prio) for path, freq, prio in STATIC_ENTRIES]
    for page in pages:
        if page.slug in _ROUTED_SLUGS or (page.seo and page.seo.noindex):
            continue
        entries.append(build_sitemap_entry(
            f"/{page.slug}",
            lastmod=page.updatedAt or page.publishedAt,
            changefreq="monthly",
            priority="0.7",
        ))

    return "\n".join([
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        *entries,
        "</urlset>",
    ])
