# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from typing import Any, Dict

from flask import current_app, make_response, jsonify, request
from pydantic import ValidationError

from ..config import Settings
from ..errors import EbookStudioError
from ..services.content_generation import ContentGenerator
from ..services.cover_generation import CoverGenerator
from ..services.credentials import ApiKeyStore
from ..services.export.service import ExportService
from ..services.export.templates import TemplateRegistry

EXTENSION_KEY = "ebook_studio"


@dataclass
class Services:
    settings: Settings
    registry: TemplateRegistry
    exporter: ExportService
    key_store: ApiKeyStore
    content: ContentGenerator
    covers: CoverGenerator


def services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


def request_id() -> str:
    rid = request.headers.get("X-Request-ID")
    return rid or f"req_{int(time.time()*1000)}_{secrets.token_hex(6)}"


def secure_headers(resp):
    resp.headers.setdefault("X-Request-ID", request_id())
    resp.headers.setdefault("Cache-Control", "no-store")
    resp.headers.setdefault("X-Content-Type-Options", "nosniff")
    resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    resp.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
    return resp


def json_ok(payload: Dict[str, Any], status: int = 200):
    return secure_headers(make_response(jsonify({"ok": True, **payload}), status))


def json_err(code: str, message: str, details: Any | None = None, status: int = 400):
    return secure_headers(
        make_response(
            jsonify({"ok": False, "error": {"code": code, "message": message, "details": details}}),
            status,
        )
    )


def error_response(exc: EbookStudioError):
    return secure_headers(make_response(jsonify({"ok": False, "error": exc.to_payload()}), exc.status))


def validation_error_response(exc: ValidationError):
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()
    ]
    return json_err("invalid_request", "Request body is invalid.", details, status=400)


def get_json() -> dict:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}
