# SPDX-License-Identifier: Apache-2.0
"""
Filesystem utilities: download filenames and scratch directories.
"""

from __future__ import annotations

import re
import shutil
import tempfile
from pathlib import Path

_DISALLOWED = re.compile(r"[^A-Za-z0-9]")


def sanitize_title(title: str) -> str:
    """Replace every character outside [A-Za-z0-9] with one underscore."""
    return _DISALLOWED.sub("_", title or "")


def export_filename(title: str, extension: str, default: str = "ebook") -> str:
    base = sanitize_title(title) or default
    return f"{base}.{extension.lstrip('.')}"


def temp_dir(prefix: str = "ebook_") -> Path:
    return Path(tempfile.mkdtemp(prefix=prefix)).resolve()


def remove_tree(path: Path) -> None:
    shutil.rmtree(path, ignore_errors=True)
