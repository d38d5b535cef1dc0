# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

__all__ = [
    "book_builder",
    "content_generation",
    "cover_generation",
    "credentials",
    "export",
]
