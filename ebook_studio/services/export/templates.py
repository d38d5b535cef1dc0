# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple

from ...models.template import Template

_CATALOG_DATA = (
    {
        "id": "minimal-professional",
        "name": "Minimal Professional",
        "description": "Clean, modern design with ample white space and elegant typography",
        "preview_image": "/templates/minimal.png",
        "styles": {
            "font_family": "Georgia",
            "font_size": {"title": 36, "heading": 18, "body": 12},
            "line_height": {"title": 1.2, "heading": 1.3, "body": 1.6},
            "margins": {"top": 25, "right": 20, "bottom": 25, "left": 20},
            "colors": {"text": "#2C3E50", "heading": "#1A252F", "accent": "#7F8C8D"},
        },
    },
    {
        "id": "creative-journal",
        "name": "Creative Journal",
        "description": "Artistic layout with expressive typography and vibrant accents",
        "preview_image": "/templates/journal.png",
        "styles": {
            "font_family": "Palatino",
            "font_size": {"title": 42, "heading": 20, "body": 11},
            "line_height": {"title": 1.1, "heading": 1.25, "body": 1.7},
            "margins": {"top": 30, "right": 25, "bottom": 30, "left": 25},
            "colors": {"text": "#34495E", "heading": "#2C3E50", "accent": "#E67E22"},
        },
    },
    {
        "id": "elegant-typography",
        "name": "Elegant Typography",
        "description": "Sophisticated serif fonts with balanced spacing and refined details",
        "preview_image": "/templates/elegant.png",
        "styles": {
            "font_family": "Times",
            "font_size": {"title": 38, "heading": 19, "body": 11.5},
            "line_height": {"title": 1.15, "heading": 1.3, "body": 1.65},
            "margins": {"top": 28, "right": 22, "bottom": 28, "left": 22},
            "colors": {"text": "#2C3A47", "heading": "#1B2631", "accent": "#5D6D7E"},
        },
    },
)

CATALOG: Tuple[Template, ...] = tuple(Template.model_validate(t) for t in _CATALOG_DATA)


class TemplateRegistry:
    """
    Read-only catalog of style presets. The first entry is the default and
    is returned for any identifier the catalog does not know.
    """

    def __init__(self, templates: Iterable[Template] = CATALOG) -> None:
        self._templates: Tuple[Template, ...] = tuple(templates)
        if not self._templates:
            raise ValueError("TemplateRegistry needs at least one template")
        ids = [t.id for t in self._templates]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate template ids: {ids}")
        self._by_id = {t.id: t for t in self._templates}

    @property
    def default(self) -> Template:
        return self._templates[0]

    def get(self, template_id: Optional[str]) -> Optional[Template]:
        return self._by_id.get(template_id or "")

    def resolve(self, template_id: Optional[str]) -> Template:
        return self.get(template_id) or self.default

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)


DEFAULT_REGISTRY = TemplateRegistry()
