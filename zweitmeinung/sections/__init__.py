from .registry import DEFAULT_REGISTRY, resolve, tags
from .renderer import (
    RenderedSection,
    debug_section_types,
    filter_sections_by_type,
    first_section_by_type,
    is_valid_section,
    join_sections,
    render_sections,
)

__all__ = [
    "DEFAULT_REGISTRY", "resolve", "tags",
    "RenderedSection", "render_sections", "join_sections", "is_valid_section",
    "filter_sections_by_type", "first_section_by_type", "debug_section_types",
]
