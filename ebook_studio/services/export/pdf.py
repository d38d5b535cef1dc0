# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Callable, Optional, Sequence

import requests

from ...errors import EbookStudioError, RenderSurfaceError, RenderingError
from ...models.book import Book, Chapter
from ...models.template import Template
from ...utils.fs import remove_tree, temp_dir
from .html_renderer import HTMLRenderer
from .markup import escape_xml
from .validation import ensure_exportable

log = logging.getLogger("ebook_studio.export.pdf")

# (document html, asset directory) -> PDF bytes
LayoutEngine = Callable[[str, Path], bytes]

DEFAULT_PAGE_MARGIN_MM = 15.0
DEFAULT_IMAGE_TIMEOUT = 5.0


def weasyprint_engine(document_html: str, base_dir: Path) -> bytes:
    """
    Lay the document out with WeasyPrint and write the paginated PDF.
    Fonts are resolved during layout, so the returned bytes embed them.
    """
    try:
        from weasyprint import HTML
        from weasyprint.text.fonts import FontConfiguration
    except (ImportError, OSError) as e:
        raise RenderSurfaceError(f"WeasyPrint layout engine is unavailable: {e}") from e

    font_config = FontConfiguration()
    document = HTML(string=document_html, base_url=str(base_dir)).render(font_config=font_config)
    return document.write_pdf()


def placeholder_svg(title: str, width: int = 1024, height: int = 1536) -> str:
    t = escape_xml((title or "eBook")[:50])
    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">
  <rect width="100%" height="100%" fill="#ECF0F1"/>
  <text x="50%" y="50%" dominant-baseline="middle" text-anchor="middle"
        font-family="Georgia" font-size="{int(min(width, height) * 0.08)}" fill="#2C3E50">{t}</text>
</svg>"""


class RenderSurface:
    """
    Scratch directory the layout engine resolves assets against. Scoped to
    one export and removed on exit whether rendering succeeded or not.
    """

    def __init__(self, prefix: str = "ebook_pdf_") -> None:
        self.prefix = prefix
        self.path: Optional[Path] = None

    def __enter__(self) -> "RenderSurface":
        try:
            self.path = temp_dir(self.prefix)
        except OSError as e:
            raise RenderSurfaceError(f"could not allocate render surface: {e}") from e
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.path is not None:
            remove_tree(self.path)
            self.path = None

    def add_asset(self, name: str, data: bytes) -> str:
        if self.path is None:
            raise RenderSurfaceError("render surface is not open")
        target = self.path / name
        target.write_bytes(data)
        return target.as_uri()


class PDFRenderer:
    """
    Render a book to an A4 portrait PDF through an offscreen layout engine.

    - Preconditions (chapters present, some content) are checked first.
    - The optional cover image is fetched before layout with a per-image
      timeout; failures are logged and a placeholder is used instead.
    """

    def __init__(
        self,
        html_renderer: Optional[HTMLRenderer] = None,
        engine: Optional[LayoutEngine] = None,
        page_margin_mm: float = DEFAULT_PAGE_MARGIN_MM,
        image_timeout: float = DEFAULT_IMAGE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.html_renderer = html_renderer or HTMLRenderer()
        self.engine = engine or weasyprint_engine
        self.page_margin_mm = page_margin_mm
        self.image_timeout = image_timeout
        self.session = session or requests.Session()

    @staticmethod
    def default_filename(book: Book) -> str:
        return f"{book.title}.pdf"

    def load_image(self, src: str, surface: RenderSurface, title: str) -> str:
        """Return an image source the engine can read without network access."""
        if src.startswith("data:"):
            return src
        try:
            if not src.startswith(("http://", "https://")):
                raise ValueError(f"unsupported image location: {src[:80]}")
            resp = self.session.get(src, timeout=self.image_timeout)
            resp.raise_for_status()
            if not resp.content:
                raise ValueError("empty image response")
            content_type = (resp.headers.get("Content-Type") or "").split(";")[0].strip().lower()
            if not content_type.startswith("image/"):
                raise ValueError(f"not an image: {content_type!r}")
            ext =mimetypes.guess_extension(content_type) or ".png"
            return surface.add_asset(f"cover{ext}", resp.content)
        except (requests.RequestException, ValueError) as e:
            log.warning("Cover image failed to load, using placeholder: %s", e)
            return surface.add_asset("cover-placeholder.svg", placeholder_svg(title).encode("utf-8"))

    def render(
        self,
        book: Book,
        chapters: Sequence[Chapter],
        template: Template,
        include_cover: bool = False,
    ) -> bytes:
        ordered = ensure_exportable(chapters)
        log.info("Rendering PDF for %r: %d chapters, cover=%s", book.title, len(ordered), include_cover)

        with RenderSurface() as surface:
            cover_src = None
            if include_cover and book.cover_url:
                cover_src = self.load_image(book.cover_url, surface, book.title)
            document = self.html_renderer.render(
                book,
                ordered,
                template,
                cover_image_src=cover_src,
                page_margin_mm=self.page_margin_mm,
            )
            try:
                pdf = self.engine(document, surface.path)
            except EbookStudioError:
                raise
            except Exception as e:
                log.exception("PDF layout failed")
                raise RenderingError(f"PDF rendering failed: {e}") from e

        if not pdf:
            raise RenderingError("layout engine produced an empty PDF")
        log.info("PDF generated: %d bytes", len(pdf))
        return pdf
