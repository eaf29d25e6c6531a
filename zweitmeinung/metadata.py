"""
Métadonnées de page : projection unique Page → PageMetadata → balises <head>.

Toutes les routes HTML passent par page_metadata() + render_head().
"""
from html import escape
from typing import Optional

from pydantic import BaseModel

from .cms.schemas import media_url


def _e(value) -> str:
    return escape(str(value), quote=True)


class PageMetadata(BaseModel):
    title: str
    description: Optional[str] = None
    keywords: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    twitter_card: str = "summary_large_image"
    canonical: Optional[str] = None
    noindex: bool = False
    nofollow: bool = False


def page_metadata(page) -> PageMetadata:
    """
    Projection avec replis :
        title          ← seo.metaTitle | title
        description    ← seo.metaDescription | description
        og_title       ← seo.ogTitle | seo.metaTitle | title
        og_description ← seo.ogDescription | seo.metaDescription | description
        twitter_card   ← seo.twitterCard | "summary_large_image"
    """
    seo = page.seo
    title = (seo and seo.metaTitle) or page.title
    description = (seo and seo.metaDescription) or page.description
    if seo is None:
        return PageMetadata(title=title, description=description, og_title=title, og_description=description)

    return PageMetadata(
        title=title,
        description=description,
        keywords=seo.keywords,
        og_title=seo.ogTitle or seo.metaTitle or page.title,
        og_description=seo.ogDescription or seo.metaDescription or page.description,
        og_image=media_url(seo.ogImage),
        twitter_card=seo.twitterCard or "summary_large_image",
        canonical=seo.canonical,
        noindex=bool(seo.noindex),
        nofollow=bool(seo.nofollow),
    )


def render_head(meta: PageMetadata, site_name: Optional[str] = None) -> str:
    """Balises <title>, description, OpenGraph, Twitter, canonical et robots."""
    title = f"{meta.title} | {site_name}" if site_name and site_name not in meta.title else meta.title

    tags = [f"<title>{_e(title)}</title>"]
    if meta.description:
        tags.append(f'<meta name="description" content="{_e(meta.description)}">')
    if meta.keywords:
        tags.append(f'<meta name="keywords" content="{_e(meta.keywords)}">')

    tags.append(f'<meta property="og:title" content="{_e(meta.og_title or meta.title)}">')
    if meta.og_description:
        tags.append(f'<meta property="og:description" content="{_e(meta.og_description)}">')
    if meta.og_image:
        tags.append(f'<meta property="og:image" content="{_e(meta.og_image)}">')
    tags.append('<meta property="og:type" content="website">')
    if site_name:
        tags.append(f'<meta property="og:site_name" content="{_e(site_name)}">')

    tags.append(f'<meta name="twitter:card" content="{_e(meta.twitter_card)}">')
    tags.append(f'<meta name="twitter:title" content="{_e(meta.og_title or meta.title)}">')
    if meta.og_description:
        tags.append(f'<meta name="twitter:description" content="{_e(meta.og_description)}">')
    if meta.og_image:
        tags.append(f'<meta name="twitter:image" content="{_e(meta.og_image)}">')

    if meta.canonical:
        tags.append(f'<link rel="canonical" href="{_e(meta.canonical)}">')
    robots = f'{"noindex" if meta.noindex else "index"}, {"nofollow" if meta.nofollow else "follow"}'
    tags.append(f'<meta name="robots" content="{robots}">')
    return "\n  ".join(tags)
