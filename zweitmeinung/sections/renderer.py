"""
Rendu d'une liste ordonnée de sections hétérogènes.

Pipeline : filtre de validité → résolution du tag → renderer ou placeholder.
Chaque record invalide est écarté et journalisé (WARNING), quelle que soit la
route appelante. Un tag inconnu produit un placeholder visible à sa place ; un
renderer qui lève produit un placeholder d'erreur. L'ordre d'entrée est
conservé et le rendu est déterministe.
"""
import json
import logging
from collections import Counter
from dataclasses import dataclass
from html import escape
from typing import Any, Iterable, List, Literal, Mapping, Optional

from ..reporting import report_exception
from .registry import DEFAULT_REGISTRY, SectionRenderer, resolve

log = logging.getLogger(__name__)

SectionKind = Literal["section", "placeholder", "error"]


@dataclass(frozen=True)
class RenderedSection:
    section_id: int
    component: str
    html: str
    kind: SectionKind = "section"


def is_valid_section(section: Any) -> bool:
    """Mapping avec `__component` non vide et `id` entier strictement positif."""
    if not isinstance(section, Mapping):
        return False
    component = section.get("__component")
    section_id = section.get("id")
    return (
        isinstance(component, str) and bool(component)
        and isinstance(section_id, int) and not isinstance(section_id, bool)
        and section_id > 0
    )


def _debug_json(section: Mapping[str, Any]) -> str:
    return json.dumps(section, indent=2, ensure_ascii=False, default=str)


def render_unknown_placeholder(section: Mapping[str, Any]) -> str:
    component = escape(section["__component"])
    return f"""<div class="section-fallback section-fallback--unknown" role="note">
  <div class="container">
    <h3 class="section-fallback__title">Unbekannte Section</h3>
    <p>Component &quot;{component}&quot; ist nicht implementiert.</p>
    <details>
      <summary>Debug Information</summary>
      <pre>{escape(_debug_json(section))}</pre>
    </details>
  </div>
</div>"""


def render_error_placeholder(section: Mapping[str, Any]) -> str:
    return f"""<div class="section-fallback section-fallback--error" role="note">
  <div class="container">
    <h3 class="section-fallback__title">Error rendering section</h3>
    <p>{escape(section["__component"])} (ID: {section["id"]})</p>
  </div>
</div>"""


def render_sections(sections: Optional[Iterable[Any]],
                    registry: Mapping[str, SectionRenderer] = DEFAULT_REGISTRY) -> List[RenderedSection]:
    """Rend les records valides dans l'ordre ; ne lève jamais pour un record donné."""
    rendered: List[RenderedSection] = []
    for section in sections or []:
        if not is_valid_section(section):
            log.warning("Section invalide ignorée : %r", section)
            continue

        tag, section_id = section["__component"], section["id"]
        renderer = resolve(tag, registry)
        if renderer is None:
            log.warning("Section inconnue : %s (id=%s)", tag, section_id)
            rendered.append(RenderedSection(section_id, tag, render_unknown_placeholder(section), "placeholder"))
            continue

        try:
            html = renderer(section)
        except Exception as e:
            log.error("Erreur de rendu section %s (id=%s) : %s", tag, section_id, e)
            report_exception(e, component=tag, section_id=section_id)
            rendered.append(RenderedSection(section_id, tag, render_error_placeholder(section), "error"))
            continue
        rendered.append(RenderedSection(section_id, tag, html))
    return rendered


def join_sections(rendered: Iterable[RenderedSection]) -> str:
    return "\n".join(r.html for r in rendered)


# ── Helpers ──────────────────────────────────────────────────────────────────

def filter_sections_by_type(sections: Iterable[Any], component: str) -> List[Mapping[str, Any]]:
    return [s for s in sections or [] if is_valid_section(s) and s["__component"] == component]


def first_section_by_type(sections: Iterable[Any], component: str) -> Optional[Mapping[str, Any]]:
    matches = filter_sections_by_type(sections, component)
    return matches[0] if matches else None


def debug_section_types(sections: Iterable[Any]) -> dict:
    """Compte les tags et signale les ids dupliqués (DEBUG / WARNING)."""
    valid = [s for s in sections or [] if is_valid_section(s)]
    counts = Counter(s["__component"] for s in valid)
    id_counts = Counter(s["id"] for s in valid)
    duplicates = sorted(i for i, n in id_counts.items() if n > 1)

    log.debug("Sections : %d, types : %s", len(valid), dict(counts))
    if duplicates:
        log.warning("Ids de section dupliqués : %s", duplicates)
    return {"total": len(valid), "types": dict(counts), "unique": sorted(counts), "duplicate_ids": duplicates}
