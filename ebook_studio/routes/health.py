# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import platform
import sys
from typing import Any, Dict

from flask import Blueprint

from .. import __version__
from ..services.credentials import MISTRAL, STABILITY_AI
from . import json_ok, services

bp = Blueprint("health", __name__)


@bp.get("")
def health() -> Any:
    svc = services()
    info: Dict[str, Any] = {
        "service": "ebook-studio-api",
        "version": __version__,
        "python": sys.version.split()[0],
        "platform": platform.platform(terse=True),
        "templates": len(svc.registry),
        "text_generation_configured": svc.key_store.get(MISTRAL) is not None,
        "image_generation_configured": svc.key_store.get(STABILITY_AI) is not None,
    }
    return json_ok({"status": "ok", "info": info})
