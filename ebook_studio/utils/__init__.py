# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations
"""
Utility package for ebook_studio.
Exports:
- fs: download filenames and scratch directories
"""
from . import fs as fs  # re-export
__all__ = ["fs"]
