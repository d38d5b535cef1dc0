# SPDX-License-Identifier: Apache-2.0
"""
Export services for finished books.

This package provides:
- templates: the immutable style-preset catalog
- markup: chapter text -> HTML/XHTML fragments
- html_renderer: single styled HTML document (title page, TOC, chapters)
- pdf: HTML document -> A4 PDF through an offscreen layout engine
- epub: EPUB 3 packaging (container, OPF, nav, XHTML, CSS)

Public entry point:
- service.ExportService.export(book, chapters, template_id, format)
"""
from __future__ import annotations

__all__ = [
    "templates",
    "markup",
    "html_renderer",
    "pdf",
    "epub",
    "validation",
    "service",
]
