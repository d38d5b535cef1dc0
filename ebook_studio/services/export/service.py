# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from ...config import Settings
from ...errors import ExportError, ExportValidationError, UnsupportedFormatError
from ...models.book import Book, Chapter, ExportFormat, ExportResult
from ...utils.fs import export_filename
from .epub import EPUBPackager
from .html_renderer import HTMLRenderer
from .pdf import PDFRenderer
from .templates import DEFAULT_REGISTRY, TemplateRegistry
from .validation import ensure_exportable

log = logging.getLogger("ebook_studio.export")


def _coerce_format(fmt: Union[ExportFormat, str]) -> ExportFormat:
    try:
        return ExportFormat(str(getattr(fmt, "value", fmt)).strip().lower())
    except ValueError as e:
        raise UnsupportedFormatError(f"unsupported export format: {fmt!r}") from e


class ExportService:
    """
    Entry point for downloads: resolve the template, dispatch to the EPUB
    packager or the HTML -> PDF path, and wrap unexpected failures.
    """

    def __init__(
        self,
        registry: TemplateRegistry = DEFAULT_REGISTRY,
        pdf_renderer: Optional[PDFRenderer] = None,
        epub_packager: Optional[EPUBPackager] = None,
    ) -> None:
        self.registry = registry
        self.pdf_renderer = pdf_renderer or PDFRenderer()
        self.epub_packager = epub_packager or EPUBPackager()

    @classmethod
    def from_settings(cls, settings: Settings, registry: TemplateRegistry = DEFAULT_REGISTRY) -> "ExportService":
        return cls(
            registry=registry,
            pdf_renderer=PDFRenderer(
                html_renderer=HTMLRenderer(language=settings.EPUB_LANGUAGE),
                page_margin_mm=settings.PDF_PAGE_MARGIN_MM,
                image_timeout=settings.PDF_IMAGE_TIMEOUT,
            ),
            epub_packager=EPUBPackager(
                language=settings.EPUB_LANGUAGE,
                creator=settings.EPUB_CREATOR,
            ),
        )

    def export(
        self,
        book: Book,
        chapters: Sequence[Chapter],
        template_id: Optional[str],
        fmt: Union[ExportFormat, str],
        include_cover: bool = False,
    ) -> ExportResult:
        export_format = _coerce_format(fmt)
        template = self.registry.resolve(template_id)
        if template_id and template.id != template_id:
            log.info("Unknown template %r, using %r", template_id, template.id)

        try:
            if export_format is ExportFormat.pdf:
                data = self.pdf_renderer.render(book, chapters, template, include_cover=include_cover)
            else:
                ordered = ensure_exportable(chapters)
                data = self.epub_packager.package(book, ordered, template)
        except (ExportValidationError, ExportError):
            raise
        except Exception as e:
            log.exception("%s export failed for book %s", export_format.value, book.id)
            raise ExportError(f"{export_format.value} export failed: {e}") from e

        return ExportResult(
            content=data,
            format=export_format,
            filename=export_filename(book.title, export_format.value),
        )
