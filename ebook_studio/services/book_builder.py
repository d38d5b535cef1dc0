# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from ..models.book import Book, BookStatus, Chapter
from ..models.generation import OutlineEntry
from .content_generation import ContentGenerator

log = logging.getLogger("ebook_studio.services.book_builder")


class BookBuilder:
    """
    Final wizard step: write every outlined chapter, one remote call at a
    time, and return the completed book with its chapters.
    """

    def __init__(self, generator: ContentGenerator) -> None:
        self.generator = generator

    def build(self, book: Book, outline: Sequence[OutlineEntry]) -> Tuple[Book, List[Chapter]]:
        if not outline:
            raise ValueError("outline must contain at least one chapter")

        chapters: List[Chapter] = []
        for number, entry in enumerate(outline, start=1):
            log.info("Generating chapter %d/%d: %s", number, len(outline), entry.title)
            content = self.generator.generate_chapter(
                book_title=book.title,
                chapter_title=entry.title,
                chapter_number=number,
                tone=book.tone.value,
                audience=book.audience,
                book_id=book.id,
            )
            chapters.append(
                Chapter(ebook_id=book.id, chapter_number=number, title=entry.title, content=content)
            )

        finished = book.with_totals(chapters).model_copy(update={"status": BookStatus.completed})
        return finished, chapters
