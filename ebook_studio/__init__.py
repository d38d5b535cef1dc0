# SPDX-License-Identifier: Apache-2.0
"""
ebook_studio

Backend package for eBook Studio: AI-assisted book generation and
PDF/EPUB export. Exposes nothing at import-time beyond the version marker
to keep startup fast.
"""
from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
