# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import io
import logging
import uuid
import zipfile
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple
from xml.etree import ElementTree as ET

from ...errors import PackagingError
from ...models.book import Book, Chapter, order_chapters
from ...models.template import Template
from .html_renderer import chapter_heading
from .markup import XHTML, escape_xml, format_content

log = logging.getLogger("ebook_studio.export.epub")

MIMETYPE = "application/epub+zip"

NAMESPACES = {
    "container": "urn:oasis:names:tc:opendocument:xmlns:container",
    "opf": "http://www.idpf.org/2007/opf",
    "dc": "http://purl.org/dc/elements/1.1/",
    "xhtml": "http://www.w3.org/1999/xhtml",
    "epub": "http://www.idpf.org/2007/ops",
}

CONTAINER_PATH = "META-INF/container.xml"
OPF_PATH = "OEBPS/content.opf"
NAV_PATH = "OEBPS/toc.xhtml"
STYLES_PATH = "OEBPS/styles.css"
COVER_PATH = "OEBPS/text/cover.xhtml"

XHTML_MEDIA_TYPE = "application/xhtml+xml"

Entry = Tuple[str, bytes]


def chapter_file_name(chapter_number: int) -> str:
    return f"chapter{chapter_number}.xhtml"


def chapter_path(chapter_number: int) -> str:
    return f"OEBPS/text/{chapter_file_name(chapter_number)}"


def book_identifier(book_id: str) -> str:
    try:
        return f"urn:uuid:{uuid.UUID(str(book_id))}"
    except ValueError:
        return f"urn:ebook:{book_id}"


def build_epub_stylesheet(template: Template) -> str:
    s = template.styles
    return f"""body {{
  font-family: {s.font_family}, serif;
  font-size: {s.font_size.body:g}pt;
  line-height: {s.line_height.body:g};
  color: {s.colors.text};
  margin: {s.margins.css()};
  text-align: justify;
}}

.cover {{
  text-align: center;
  padding: 20% 10%;
  page-break-after: always;
}}

.cover h1 {{
  font-size: {s.font_size.title:g}pt;
  line-height: {s.line_height.title:g};
  margin-bottom: 1em;
  color: {s.colors.heading};
}}

.cover .subtitle {{
  font-size: {s.font_size.heading:g}pt;
  font-style: italic;
  color: {s.colors.accent};
}}

.chapter {{
  page-break-before: always;
  break-before: page;
}}

.chapter-number {{
  font-size: {s.font_size.heading:g}pt;
  color: {s.colors.accent};
  text-transform: uppercase;
  letter-spacing: 2px;
  margin-bottom: 0.5em;
}}

.chapter-title {{
  font-size: {s.font_size.heading:g}pt;
  line-height: {s.line_height.heading:g};
  color: {s.colors.heading};
  margin-bottom: 1.5em;
}}

.chapter-content p {{
  margin-bottom: 1em;
  text-indent: 1.5em;
}}

.chapter-content p:first-of-type {{
  text-indent: 0;
}}

.chapter-content h2,
.chapter-content h3 {{
  line-height: {s.line_height.heading:g};
  color: {s.colors.heading};
}}

.chapter-content blockquote {{
  margin: 1em 1.5em;
  font-style: italic;
  border-left: 3px solid {s.colors.accent};
  padding-left: 1em;
}}

.no-content {{
  font-style: italic;
  color: {s.colors.accent};
}}

h1, h2, h3, h4, h5, h6 {{
  page-break-after: avoid;
  break-after: avoid;
}}

p {{
  orphans: 2;
  widows: 2;
}}
"""


def _xhtml_document(title: str, body: str, stylesheet_href: str, language: str, nav: bool = False) -> str:
    epub_ns = f' xmlns:epub="{NAMESPACES["epub"]}"' if nav else ""
    lang = escape_xml(language)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="{NAMESPACES["xhtml"]}"{epub_ns} lang="{lang}" xml:lang="{lang}">
<head>
  <meta charset="UTF-8"/>
  <title>{escape_xml(title)}</title>
  <link rel="stylesheet" type="text/css" href="{stylesheet_href}"/>
</head>
<body>
{body}
</body>
</html>
"""


class EPUBPackager:
    """
    Build an EPUB 3 package in memory.

    Layout:
        mimetype                  (stored, first entry)
        META-INF/container.xml
        OEBPS/content.opf
        OEBPS/toc.xhtml           (navigation document)
        OEBPS/styles.css
        OEBPS/text/cover.xhtml
        OEBPS/text/chapterN.xhtml (N = chapter sequence number)
    """

    def __init__(
        self,
        language: str = "en",
        creator: str = "Created with eBook Studio",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.language = language
        self.creator = creator
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # -------------------------- documents --------------------------

    def container_xml(self) -> bytes:
        root = ET.Element("container", {"version": "1.0", "xmlns": NAMESPACES["container"]})
        rootfiles = ET.SubElement(root, "rootfiles")
        ET.SubElement(
            rootfiles,
            "rootfile",
            {"full-path": OPF_PATH, "media-type": "application/oebps-package+xml"},
        )
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    def cover_xhtml(self, book: Book) -> str:
        body = (
            '  <div class="cover">\n'
            f"    <h1>{escape_xml(book.title)}</h1>\n"
            f'    <p class="subtitle">{escape_xml(book.subtitle)}</p>\n'
            "  </div>"
        )
        return _xhtml_document(book.title, body, "../styles.css", self.language)

    def chapter_xhtml(self, chapter: Chapter) -> str:
        body = (
            '  <div class="chapter">\n'
            f'    <h2 class="chapter-number">Chapter {chapter.chapter_number}</h2>\n'
            f'    <h1 class="chapter-title">{escape_xml(chapter.title)}</h1>\n'
            '    <div class="chapter-content">\n'
            f"{format_content(chapter.content, XHTML)}\n"
            "    </div>\n"
            "  </div>"
        )
        return _xhtml_document(chapter_heading(chapter), body, "../styles.css", self.language)

    def nav_xhtml(self, chapters: Sequence[Chapter]) -> str:
        items = ['      <li><a href="text/cover.xhtml">Cover</a></li>']
        for ch in chapters:
            items.append(
                f'      <li><a href="text/{chapter_file_name(ch.chapter_number)}">'
                f"{escape_xml(chapter_heading(ch))}</a></li>"
            )
        body = (
            '  <nav epub:type="toc" id="toc">\n'
            "    <h1>Table of Contents</h1>\n"
            "    <ol>\n"
            + "\n".join(items)
            + "\n    </ol>\n"
            "  </nav>"
        )
        return _xhtml_document("Table of Contents", body, "styles.css", self.language, nav=True)

    def content_opf(self, book: Book, chapters: Sequence[Chapter], now: datetime) -> bytes:
        root = ET.Element(
            "package",
            {"xmlns": NAMESPACES["opf"], "version": "3.0", "unique-identifier": "bookid"},
        )
        metadata = ET.SubElement(root, "metadata", {"xmlns:dc": NAMESPACES["dc"]})
        ET.SubElement(metadata, "dc:title").text = book.title
        ET.SubElement(metadata, "dc:identifier", {"id": "bookid"}).text = book_identifier(book.id)
        ET.SubElement(metadata, "dc:language").text = self.language
        ET.SubElement(metadata, "dc:creator").text = self.creator
        ET.SubElement(metadata, "dc:date").text = book.created_at.date().isoformat()
        ET.SubElement(metadata, "meta", {"property": "dcterms:modified"}).text = (
            now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        )

        manifest = ET.SubElement(root, "manifest")
        ET.SubElement(
            manifest,
            "item",
            {"id": "toc", "href": "toc.xhtml", "media-type": XHTML_MEDIA_TYPE, "properties": "nav"},
        )
        ET.SubElement(
            manifest,
            "item",
            {"id": "cover", "href": "text/cover.xhtml", "media-type": XHTML_MEDIA_TYPE},
        )
        ET.SubElement(
            manifest,
            "item",
            {"id": "styles", "href": "styles.css", "media-type": "text/css"},
        )
        for ch in chapters:
            ET.SubElement(
                manifest,
                "item",
                {
                    "id": f"chapter{ch.chapter_number}",
                    "href": f"text/{chapter_file_name(ch.chapter_number)}",
                    "media-type": XHTML_MEDIA_TYPE,
                },
            )

        spine = ET.SubElement(root, "spine")
        ET.SubElement(spine, "itemref", {"idref": "cover"})
        for ch in chapters:
            ET.SubElement(spine, "itemref", {"idref": f"chapter{ch.chapter_number}"})

        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    # -------------------------- package ----------------------------

    def build_entries(self, book: Book, chapters: Sequence[Chapter], template: Template) -> List[Entry]:
        """All archive entries except ``mimetype``, in write order."""
        ordered = order_chapters(chapters)
        now = self._clock()
        entries: List[Entry] = [
            (CONTAINER_PATH, self.container_xml()),
            (OPF_PATH, self.content_opf(book, ordered, now)),
            (NAV_PATH, self.nav_xhtml(ordered).encode("utf-8")),
            (STYLES_PATH, build_epub_stylesheet(template).encode("utf-8")),
            (COVER_PATH, self.cover_xhtml(book).encode("utf-8")),
        ]
        entries.extend(
            (chapter_path(ch.chapter_number), self.chapter_xhtml(ch).encode("utf-8")) for ch in ordered
        )
        return entries

    def package(self, book: Book, chapters: Sequence[Chapter], template: Template) -> bytes:
        entries = self.build_entries(book, chapters, template)
        buf = io.BytesIO()
        try:
            with zipfile.ZipFile(buf, "w") as zout:
                # mimetype must be the first entry and stored uncompressed
                info = zipfile.ZipInfo("mimetype")
                info.compress_type = zipfile.ZIP_STORED
                zout.writestr(info, MIMETYPE.encode("ascii"))
                for name, data in entries:
                    zout.writestr(name, data, compress_type=zipfile.ZIP_DEFLATED)
        except (OSError, ValueError, zipfile.LargeZipFile) as e:
            raise PackagingError(f"could not assemble EPUB archive: {e}") from e

        data = buf.getvalue()
        log.info("EPUB packaged: %d chapters, %d bytes", len(entries) - 5, len(data))
        return data
