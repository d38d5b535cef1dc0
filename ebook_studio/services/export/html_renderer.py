# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import List, Optional, Sequence

from ...models.book import Book, Chapter
from ...models.template import Template
from .markup import HTML, escape_html, format_content

# Page 1 is the title page, page 2 the table of contents.
FIRST_CHAPTER_PAGE = 3


def toc_page_number(index: int) -> int:
    """Cosmetic page estimate for the chapter at zero-based ``index``."""
    return index + FIRST_CHAPTER_PAGE


def chapter_heading(chapter: Chapter) -> str:
    return f"Chapter {chapter.chapter_number}: {chapter.title}"


def build_stylesheet(template: Template, page_margin_mm: Optional[float] = None) -> str:
    """
    Stylesheet for the single-document rendering. When ``page_margin_mm``
    is given an A4 portrait ``@page`` rule is emitted for paged output.
    """
    s = template.styles
    page_rule = ""
    if page_margin_mm is not None:
        page_rule = f"""
      @page {{
        size: A4 portrait;
        margin: {page_margin_mm:g}mm;
      }}
"""
    return f"""{page_rule}
      * {{
        margin: 0;
        padding: 0;
        box-sizing: border-box;
      }}

      body {{
        font-family: {s.font_family}, Georgia, serif;
        font-size: {s.font_size.body:g}pt;
        line-height: {s.line_height.body:g};
        color: {s.colors.text};
        background: white;
        padding: {s.margins.css()};
      }}

      .cover-image-page,
      .cover-page,
      .toc-page,
      .chapter {{
        page-break-before: always;
        break-before: page;
      }}

      body > section:first-child {{
        page-break-before: auto;
        break-before: auto;
      }}

      .cover-image-page {{
        text-align: center;
      }}

      .cover-image {{
        max-width: 100%;
        max-height: 250mm;
        width: auto;
        height: auto;
        object-fit: contain;
      }}

      .cover-page {{
        text-align: center;
        padding: 35% 40px 0 40px;
      }}

      .cover-title {{
        font-size: {s.font_size.title:g}pt;
        font-weight: bold;
        line-height: {s.line_height.title:g};
        color: {s.colors.heading};
        margin-bottom: 30px;
      }}

      .cover-subtitle {{
        font-size: {s.font_size.heading:g}pt;
        color: {s.colors.accent};
      }}

      .toc-page {{
        padding: 40px 0;
      }}

      .toc-title {{
        font-size: {s.font_size.title:g}pt;
        font-weight: bold;
        color: {s.colors.heading};
        margin-bottom: 40px;
      }}

      .toc-item {{
        display: flex;
        justify-content: space-between;
        align-items: baseline;
        margin-bottom: 16px;
        font-size: 14pt;
        line-height: 1.5;
      }}

      .toc-chapter a {{
        color: inherit;
        text-decoration: none;
      }}

      .toc-dots {{
        flex-grow: 1;
        border-bottom: 1px dotted #ccc;
        height: 0.8em;
        margin: 0 8px;
      }}

      .toc-page-num {{
        font-weight: 500;
        color: {s.colors.heading};
      }}

      .chapter {{
        padding: 40px 0;
      }}

      .chapter-title {{
        font-size: {s.font_size.heading:g}pt;
        font-weight: bold;
        line-height: {s.line_height.heading:g};
        color: {s.colors.heading};
        margin-bottom: 32px;
        border-bottom: 2px solid {s.colors.heading};
        padding-bottom: 16px;
      }}

      h1, h2, h3 {{
        page-break-after: avoid;
        break-after: avoid;
      }}

      .chapter-content p {{
        margin-bottom: 20px;
        text-align: justify;
        orphans: 2;
        widows: 2;
      }}

      .chapter-content h2 {{
        font-size: {s.font_size.heading:g}pt;
        line-height: {s.line_height.heading:g};
        color: {s.colors.heading};
        margin: 32px 0 16px 0;
      }}

      .chapter-content h3 {{
        font-size: {s.font_size.body * 1.3:g}pt;
        font-weight: 600;
        color: {s.colors.heading};
        margin: 24px 0 12px 0;
      }}

      .chapter-content ul,
      .chapter-content ol {{
        margin: 16px 0 16px 32px;
      }}

      .chapter-content li {{
        margin-bottom: 8px;
      }}

      .chapter-content blockquote {{
        margin: 24px 0;
        padding: 16px 24px;
        border-left: 4px solid {s.colors.accent};
        background: #f9f9f9;
        font-style: italic;
      }}

      .chapter-content code {{
        background: #f4f4f4;
        padding: 2px 6px;
        font-family: 'Courier New', monospace;
        font-size: 0.9em;
      }}

      .no-content {{
        color: {s.colors.accent};
        font-style: italic;
      }}
"""


class HTMLRenderer:
    """
    Compose a book into one self-contained, styled HTML document: optional
    full-page cover image, title page, table of contents, then chapters.
    """

    def __init__(self, language: str = "en") -> None:
        self.language = language

    def render(
        self,
        book: Book,
        chapters: Sequence[Chapter],
        template: Template,
        cover_image_src: Optional[str] = None,
        page_margin_mm: Optional[float] = None,
    ) -> str:
        sections: List[str] = []
        if cover_image_src:
            sections.append(self.cover_image_page(cover_image_src, book.title))
        sections.append(self.cover_page(book))
        sections.append(self.table_of_contents(chapters))
        sections.extend(self.chapter_section(ch) for ch in chapters)

        return f"""<!DOCTYPE html>
<html lang="{escape_html(self.language)}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape_html(book.title)}</title>
  <style>{build_stylesheet(template, page_margin_mm)}</style>
</head>
<body>
{chr(10).join(sections)}
</body>
</html>
"""

    def cover_image_page(self, src: str, title: str) -> str:
        return (
            '<section class="cover-image-page">\n'
            f'  <img src="{escape_html(src)}" alt="{escape_html(title)} Cover" class="cover-image">\n'
            "</section>"
        )

    def cover_page(self, book: Book) -> str:
        return (
            '<section class="cover-page">\n'
            f'  <h1 class="cover-title">{escape_html(book.title)}</h1>\n'
            f'  <p class="cover-subtitle">{escape_html(book.subtitle)}</p>\n'
            "</section>"
        )

    def table_of_contents(self, chapters: Sequence[Chapter]) -> str:
        items = []
        for index, chapter in enumerate(chapters):
            items.append(
                '  <div class="toc-item">\n'
                f'    <span class="toc-chapter"><a href="#chapter-{chapter.chapter_number}">'
                f"{escape_html(chapter_heading(chapter))}</a></span>\n"
                '    <span class="toc-dots"></span>\n'
                f'    <span class="toc-page-num">{toc_page_number(index)}</span>\n'
                "  </div>"
            )
        body = "\n".join(items)
        return (
            '<section class="toc-page">\n'
            '  <h2 class="toc-title">Table of Contents</h2>\n'
            f"{body}\n"
            "</section>"
        )

    def chapter_section(self, chapter: Chapter) -> str:
        return (
            f'<section class="chapter" id="chapter-{chapter.chapter_number}">\n'
            f'  <h2 class="chapter-title">{escape_html(chapter_heading(chapter))}</h2>\n'
            '  <div class="chapter-content">\n'
            f"{format_content(chapter.content, HTML)}\n"
            "  </div>\n"
            "</section>"
        )
