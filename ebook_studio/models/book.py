# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from ..errors import ChapterSequenceError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tone(str, Enum):
    self_help = "self-help"
    fiction = "fiction"
    journal = "journal"
    guide = "guide"
    professional = "professional"


class BookStatus(str, Enum):
    draft = "draft"
    generating = "generating"
    completed = "completed"


class ExportFormat(str, Enum):
    pdf = "pdf"
    epub = "epub"


MEDIA_TYPES = {
    ExportFormat.pdf: "application/pdf",
    ExportFormat.epub: "application/epub+zip",
}


class Chapter(BaseModel):
    """
    One numbered section of a book. ``word_count`` is always derived from
    ``content`` so it can never drift from the body text.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    ebook_id: Optional[str] = None
    chapter_number: int = Field(ge=1)
    title: str
    content: str = ""
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("title")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Chapter title cannot be empty")
        return v.strip()

    @computed_field
    @property
    def word_count(self) -> int:
        return len(self.content.split())

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()

    def with_content(self, content: str) -> "Chapter":
        return self.model_copy(update={"content": content})


class Book(BaseModel):
    """
    The top-level generated work. Export operations only read it.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: Optional[str] = None
    title: str
    topic: str = ""
    audience: str = ""
    tone: Tone = Tone.professional
    status: BookStatus = BookStatus.draft
    word_count: int = Field(default=0, ge=0)
    chapter_count: int = Field(default=0, ge=0)
    cover_url: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Book title cannot be empty")
        return v.strip()

    @field_validator("topic", "audience", mode="before")
    @classmethod
    def _strip_text(cls, v):
        return str(v or "").strip()

    @property
    def subtitle(self) -> str:
        return f"{self.audience} • {self.tone.value}"

    def with_totals(self, chapters: Iterable[Chapter]) -> "Book":
        items = list(chapters)
        return self.model_copy(
            update={
                "word_count": sum(c.word_count for c in items),
                "chapter_count": len(items),
                "updated_at": _utcnow(),
            }
        )


def order_chapters(chapters: Iterable[Chapter]) -> List[Chapter]:
    """
    Return chapters in sequence-number order.

    Numbers must form the contiguous run 1..N; duplicates or gaps raise
    ChapterSequenceError since file names and TOC entries derive from them.
    """
    ordered = sorted(chapters, key=lambda c: c.chapter_number)
    numbers = [c.chapter_number for c in ordered]
    expected = list(range(1, len(ordered) + 1))
    if numbers != expected:
        raise ChapterSequenceError(
            f"chapter numbers {numbers} do not form the run {expected}",
            details={"chapter_numbers": numbers},
        )
    return ordered


class ExportResult(BaseModel):
    content: bytes
    format: ExportFormat
    filename: str

    @computed_field
    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self.format]

    @property
    def size(self) -> int:
        return len(self.content)


class ExportRequest(BaseModel):
    """
    Body of POST /api/exports.
    """
    book: Book
    chapters: List[Chapter] = Field(default_factory=list)
    template_id: Optional[str] = None
    format: ExportFormat
    include_cover: bool = False
