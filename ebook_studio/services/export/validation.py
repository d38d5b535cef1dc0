# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Iterable, List

from ...errors import EmptyContentError, NoChaptersError
from ...models.book import Chapter, order_chapters

log = logging.getLogger("ebook_studio.export.validation")


def ensure_exportable(chapters: Iterable[Chapter]) -> List[Chapter]:
    """
    Check export preconditions and return chapters in sequence order.

    Raises NoChaptersError for an empty list and EmptyContentError when
    every chapter body is blank. Both are raised before any rendering work.
    """
    items = list(chapters or [])
    if not items:
        log.warning("Export rejected: no chapters")
        raise NoChaptersError("No chapters to export")
    if all(ch.is_blank for ch in items):
        log.warning("Export rejected: all %d chapters are blank", len(items))
        raise EmptyContentError("Chapters have no content")
    return order_chapters(items)
