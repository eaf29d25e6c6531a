"""
Renderers HTML des sections : un renderer par tag CMS.

Chaque renderer reçoit le mapping brut du record, le valide dans son propre
modèle Pydantic puis produit un fragment <section>. Les textes sont échappés ;
seuls les champs de contenu éditorial (TextBlock.content, réponses FAQ) sont
injectés tels quels, ils proviennent de l'éditeur riche du CMS.
"""
import json
from html import escape
from typing import Any, List, Mapping, Optional

from .blocks import (
    CTAButton,
    CTASection,
    ContactFormSection,
    FAQSection,
    HeroCarousel,
    HeroSection,
    MedicalSpecialtiesGrid,
    NewsSection,
    ServicesGrid,
    StatsSection,
    TeamSection,
    TestimonialsSection,
    TextBlock,
)
from ..contact.validation import DEFAULT_CONTACT_FIELDS, FormFieldConfig, validation_rules


def _e(value: Any) -> str:
    return escape(str(value)) if value is not None else ""


def _section(block_id: int, classes: List[str], inner: str, style: str = "") -> str:
    style_attr = f' style="{_e(style)}"' if style else ""
    return f"""<section id="section-{block_id}" class="{" ".join(classes)}"{style_attr}>
  <div class="container">
{inner}
  </div>
</section>"""


def _header(block: str, title: Optional[str], subtitle: Optional[str] = None) -> str:
    if not title and not subtitle:
        return ""
    title_html = f'<h2 class="{block}__title">{_e(title)}</h2>' if title else ""
    sub_html   = f'<p class="{block}__subtitle">{_e(subtitle)}</p>' if subtitle else ""
    return f'<div class="{block}__header">{title_html}{sub_html}</div>'


def _buttons(buttons: List[CTAButton], block: str) -> str:
    if not buttons:
        return ""
    links = []
    for b in buttons:
        ext = ' target="_blank" rel="noopener"' if b.isExternal else ""
        links.append(f'<a href="{_e(b.href)}" class="btn btn-{b.variant}"{ext}>{_e(b.text)}</a>')
    return f'<div class="{block}__cta-group">{"".join(links)}</div>'


# ── Hero ─────────────────────────────────────────────────────────────────────

def render_hero(data: Mapping[str, Any]) -> str:
    b = HeroSection.model_validate(dict(data))

    classes = ["hero"]
    style = ""
    if b.backgroundImage and b.backgroundImage.url:
        classes.append("hero--bg-image")
        style = f"background-image:url('{b.backgroundImage.url}')"
    if b.overlayOpacity:
        classes.append("hero--overlay")

    sub  = f'<p class="hero__subtitle">{_e(b.subtitle)}</p>' if b.subtitle else ""
    desc = f'<p class="hero__description">{_e(b.description)}</p>' if b.description else ""
    title = f'<h1 class="hero__title">{_e(b.title)}</h1>' if b.title else ""
    inner = f"""    <div class="hero__content">
      {title}{sub}{desc}{_buttons(b.ctaButtons, "hero")}
    </div>"""
    return _section(b.id, classes, inner, style)


def render_hero_carousel(data: Mapping[str, Any]) -> str:
    b = HeroCarousel.model_validate(dict(data))

    slides_html = ""
    for i, slide in enumerate(b.slides):
        style = ""
        if slide.backgroundImage and slide.backgroundImage.url:
            style = f' style="background-image:url(\'{_e(slide.backgroundImage.url)}\')"'
        badge = f'<span class="hero__badge">{_e(slide.badge.text)}</span>' if slide.badge else ""
        lines = "".join(
            f'<span class="hero__title-line{" hero__title-line--highlight" if line.highlight else ""}">{_e(line.text)}</span>'
            for line in slide.titleLines
        )
        sub  = f'<p class="hero__subtitle">{_e(slide.subtitle)}</p>' if slide.subtitle else ""
        desc = f'<p class="hero__description">{_e(slide.description)}</p>' if slide.description else ""
        hidden = "" if i == 0 else " hidden"
        slides_html += f"""<div class="hero-carousel__slide" role="group" aria-roledescription="slide" aria-label="{i + 1} / {len(b.slides)}"{style}{hidden}>
  <div class="hero__content">{badge}<h1 class="hero__title">{lines}</h1>{sub}{desc}{_buttons(slide.ctaButtons, "hero")}</div>
</div>"""

    data_attrs = f' data-autoplay="{str(b.autoplay).lower()}" data-interval="{b.autoplayInterval}"'
    inner = f'    <div class="hero-carousel__track" aria-roledescription="carousel"{data_attrs}>{slides_html}</div>'
    return _section(b.id, ["hero", "hero-carousel"], inner)


# ── Grilles ──────────────────────────────────────────────────────────────────

def render_specialties_grid(data: Mapping[str, Any]) -> str:
    b = MedicalSpecialtiesGrid.model_validate(dict(data))

    cards = ""
    for s in b.specialties:
        icon = f'<span class="specialties__icon" aria-hidden="true">{_e(s.icon)}</span>' if s.icon else ""
        desc = f'<p class="specialties__desc">{_e(s.description)}</p>' if s.description else ""
        name = f'<a href="{_e(s.href)}">{_e(s.name)}</a>' if s.href else _e(s.name)
        cards += f'<div class="specialties__card">{icon}<h3 class="specialties__name">{name}</h3>{desc}</div>'

    inner = f"""    {_header("specialties", b.title, b.subtitle)}
    <div class="specialties__grid grid--{b.columns}col">{cards}</div>"""
    return _section(b.id, ["specialties"], inner)


def render_services_grid(data: Mapping[str, Any]) -> str:
    b = ServicesGrid.model_validate(dict(data))

    cards = ""
    for svc in b.services:
        feats = "".join(f"<li>{_e(f)}</li>" for f in svc.features)
        feats_html = f'<ul class="services__features">{feats}</ul>' if feats else ""
        price = ""
        if svc.price:
            period = f" / {_e(svc.price.period)}" if svc.price.period else ""
            price = f'<div class="services__price">{svc.price.amount:g} {_e(svc.price.currency)}{period}</div>'
        desc = f'<p class="services__desc">{_e(svc.description)}</p>' if svc.description else ""
        cta  = _buttons([svc.ctaButton], "services") if svc.ctaButton else ""
        cards += f'<div class="services__card"><h3 class="services__name">{_e(svc.title)}</h3>{desc}{feats_html}{price}{cta}</div>'

    inner = f"""    {_header("services", b.title, b.subtitle)}
    <div class="services__grid grid--{b.columns}col">{cards}</div>"""
    return _section(b.id, ["services"], inner)


# ── Contenu ──────────────────────────────────────────────────────────────────

def render_text_block(data: Mapping[str, Any]) -> str:
    b = TextBlock.model_validate(dict(data))

    styles = []
    if b.backgroundColor:
        styles.append(f"background:{b.backgroundColor}")
    if b.textColor:
        styles.append(f"color:{b.textColor}")

    title = f'<h2 class="text-block__title">{_e(b.title)}</h2>' if b.title else ""
    inner = f'    {title}<div class="text-block__content">{b.content}</div>'
    return _section(b.id, ["text-block", f"text-block--{b.alignment}"], inner, ";".join(styles))


def render_testimonials(data: Mapping[str, Any]) -> str:
    b = TestimonialsSection.model_validate(dict(data))

    items = ""
    for t in b.testimonials:
        role = ", ".join(p for p in (t.author.title, t.author.company) if p)
        role_html = f'<span class="testimonials__role">{_e(role)}</span>' if role else ""
        rating = ""
        if t.rating:
            rating = f'<div class="testimonials__rating" aria-label="{t.rating} von 5 Sternen">{"★" * t.rating}{"☆" * (5 - t.rating)}</div>'
        items += f"""<figure class="testimonials__item">
  {rating}<blockquote class="testimonials__quote">{_e(t.content)}</blockquote>
  <figcaption><strong>{_e(t.author.name)}</strong>{role_html}</figcaption>
</figure>"""

    inner = f"""    {_header("testimonials", b.title, b.subtitle)}
    <div class="testimonials__list testimonials__list--{b.layout}">{items}</div>"""
    return _section(b.id, ["testimonials"], inner)


def render_news(data: Mapping[str, Any]) -> str:
    b = NewsSection.model_validate(dict(data))

    cards = ""
    for a in b.articles:
        date = f'<time datetime="{_e(a.publishedAt)}">{_e((a.publishedAt or "")[:10])}</time>' if a.publishedAt else ""
        excerpt = f'<p class="news__excerpt">{_e(a.excerpt)}</p>' if a.excerpt else ""
        cards += f'<article class="news__card">{date}<h3><a href="/news/{_e(a.slug)}">{_e(a.title)}</a></h3>{excerpt}</article>'

    more = ""
    if b.showMore and b.moreButtonHref:
        more = f'<div class="news__more"><a href="{_e(b.moreButtonHref)}" class="btn btn-secondary">{_e(b.moreButtonText or "Alle Neuigkeiten")}</a></div>'

    inner = f"""    {_header("news", b.title, b.subtitle)}
    <div class="news__grid">{cards}</div>{more}"""
    return _section(b.id, ["news"], inner)


def render_faq(data: Mapping[str, Any]) -> str:
    b = FAQSection.model_validate(dict(data))

    items = ""
    for i, item in enumerate(b.faqs):
        answer_id = f"faq-{b.id}-{item.id if item.id is not None else i}"
        items += f"""<div class="faq__item">
  <button class="faq__question" aria-expanded="false" aria-controls="{answer_id}"
    onclick="var a=this.nextElementSibling;var open=this.getAttribute('aria-expanded')==='true';this.setAttribute('aria-expanded',!open);a.hidden=open;"
  >{_e(item.question)}<span class="faq__icon" aria-hidden="true">▾</span></button>
  <div class="faq__answer" id="{answer_id}" hidden>{item.answer}</div>
</div>"""

    inner = f"""    {_header("faq", b.title, b.subtitle)}
    <div class="faq__list">{items}</div>"""
    return _section(b.id, ["faq"], inner)


def render_stats(data: Mapping[str, Any]) -> str:
    b = StatsSection.model_validate(dict(data))

    items = "".join(
        f'<div class="stat__item"><div class="stat__value">{_e(s.number)}</div><div class="stat__label">{_e(s.label)}</div></div>'
        for s in b.stats
    )
    inner = f"""    {_header("stat", b.title, b.subtitle)}
    <div class="stat__grid">{items}</div>"""
    return _section(b.id, ["stat"], inner)


def render_team(data: Mapping[str, Any]) -> str:
    b = TeamSection.model_validate(dict(data))

    cards = ""
    for m in b.teamMembers:
        img = ""
        if m.image and m.image.url:
            img = f'<img class="team__photo" src="{_e(m.image.url)}" alt="{_e(m.image.alternativeText or m.name)}" loading="lazy">'
        bio = f'<p class="team__bio">{_e(m.bio)}</p>' if m.bio else ""
        cards += f'<div class="team__member">{img}<h3 class="team__name">{_e(m.name)}</h3><p class="team__position">{_e(m.position)}</p>{bio}</div>'

    inner = f"""    {_header("team", b.title, b.subtitle)}
    <div class="team__grid">{cards}</div>"""
    return _section(b.id, ["team"], inner)


def render_cta(data: Mapping[str, Any]) -> str:
    b = CTASection.model_validate(dict(data))

    title = f'<h2 class="cta-block__title">{_e(b.title)}</h2>' if b.title else ""
    sub   = f'<p class="cta-block__subtitle">{_e(b.subtitle)}</p>' if b.subtitle else ""
    desc  = f'<p class="cta-block__desc">{_e(b.description)}</p>' if b.description else ""
    style = f"background:{b.backgroundColor}" if b.backgroundColor else ""
    inner = f"    {title}{sub}{desc}{_buttons(b.ctaButtons, 'cta-block')}"
    return _section(b.id, ["cta-block"], inner, style)


# ── Formulaire de contact ────────────────────────────────────────────────────

def render_form_field(field: FormFieldConfig) -> str:
    """Champ de formulaire avec attributs de contrainte dérivés de validation_rules()."""
    rules = validation_rules(field)
    attrs = []
    if "required" in rules:
        attrs.append('required')
        attrs.append(f'data-msg-required="{_e(rules["required"])}"')
    if "minLength" in rules:
        attrs.append(f'minlength="{rules["minLength"]["value"]}"')
        attrs.append(f'data-msg-minlength="{_e(rules["minLength"]["message"])}"')
    if "maxLength" in rules:
        attrs.append(f'maxlength="{rules["maxLength"]["value"]}"')
        attrs.append(f'data-msg-maxlength="{_e(rules["maxLength"]["message"])}"')
    if "pattern" in rules:
        attrs.append(f'pattern="{_e(rules["pattern"]["value"])}"')
        attrs.append(f'data-msg-pattern="{_e(rules["pattern"]["message"])}"')
    attr_str = (" " + " ".join(attrs)) if attrs else ""

    fid = f"field-{_e(field.name)}"
    name = _e(field.name)
    placeholder = f' placeholder="{_e(field.placeholder)}"' if field.placeholder else ""
    star = ' <span aria-hidden="true">*</span>' if field.required else ""

    if field.type == "checkbox":
        return f"""<div class="form__field form__field--checkbox">
  <input type="checkbox" id="{fid}" name="{name}" value="true"{attr_str}>
  <label for="{fid}">{_e(field.label)}{star}</label>
</div>"""

    label = f'<label for="{fid}">{_e(field.label)}{star}</label>'
    if field.type == "textarea":
        control = f'<textarea id="{fid}" name="{name}" rows="6"{placeholder}{attr_str}></textarea>'
    elif field.type == "select":
        options = "".join(f'<option value="{_e(o.value)}">{_e(o.label)}</option>' for o in field.options)
        control = f'<select id="{fid}" name="{name}"{attr_str}>{options}</select>'
    elif field.type == "radio":
        control = "".join(
            f'<label class="form__radio"><input type="radio" name="{name}" value="{_e(o.value)}"{attr_str}> {_e(o.label)}</label>'
            for o in field.options
        )
    else:
        control = f'<input type="{field.type}" id="{fid}" name="{name}"{placeholder}{attr_str}>'
    return f'<div class="form__field">\n  {label}\n  {control}\n</div>'


def render_contact_form(data: Mapping[str, Any]) -> str:
    b = ContactFormSection.model_validate(dict(data))

    fields = b.fields or DEFAULT_CONTACT_FIELDS
    fields_html = "\n".join(render_form_field(f) for f in fields)
    messages = json.dumps({"success": b.successMessage, "error": b.errorMessage}, ensure_ascii=False)

    inner = f"""    {_header("contact-form", b.title, b.subtitle)}
    <form class="form" method="post" action="/api/contact" novalidate data-messages="{_e(messages)}">
{fields_html}
      <button type="submit" class="btn btn-primary">{_e(b.submitButtonText)}</button>
    </form>"""
    return _section(b.id, ["contact-form"], inner)
