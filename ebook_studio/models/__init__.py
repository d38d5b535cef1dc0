# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

# Re-export commonly used models for convenience
from .book import (
    Book,
    BookStatus,
    Chapter,
    ExportFormat,
    ExportRequest,
    ExportResult,
    Tone,
    order_chapters,
)
from .generation import (
    ApiKeyRecord,
    ChapterRequest,
    CoverRequest,
    CoverStyle,
    OutlineEntry,
    OutlineRequest,
    TitlesRequest,
    UsageLogEntry,
)
from .template import Colors, FontSizes, LineHeights, Margins, Template, TemplateStyles

__all__ = [
    "Book",
    "BookStatus",
    "Chapter",
    "ExportFormat",
    "ExportRequest",
    "ExportResult",
    "Tone",
    "order_chapters",
    "ApiKeyRecord",
    "ChapterRequest",
    "CoverRequest",
    "CoverStyle",
    "OutlineEntry",
    "OutlineRequest",
    "TitlesRequest",
    "UsageLogEntry",
    "Colors",
    "FontSizes",
    "LineHeights",
    "Margins",
    "Template",
    "TemplateStyles",
]
