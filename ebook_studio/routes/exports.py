# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, Response
from pydantic import ValidationError

from ..errors import EbookStudioError
from ..models.book import ExportRequest
from . import error_response, get_json, request_id, services, validation_error_response

bp = Blueprint("exports", __name__)
log = logging.getLogger("ebook_studio.routes.exports")


@bp.post("")
def export_book() -> Any:
    """
    POST /api/exports
    Body:
      {
        "book": { ...Book... },
        "chapters": [ { ...Chapter... }, ... ],
        "template_id": "minimal-professional" | null,
        "format": "pdf" | "epub",
        "include_cover": false
      }
    Returns the file as an attachment named <sanitized-title>.<ext>.
    """
    try:
        req = ExportRequest.model_validate(get_json())
    except ValidationError as e:
        return validation_error_response(e)

    svc = services()
    template_id = req.template_id or svc.settings.DEFAULT_TEMPLATE_ID
    try:
        result = svc.exporter.export(
            req.book,
            req.chapters,
            template_id,
            req.format,
            include_cover=req.include_cover,
        )
    except EbookStudioError as e:
        log.warning("export rejected book=%s code=%s: %s", req.book.id, e.code, e)
        return error_response(e)

    resp = Response(result.content, mimetype=result.media_type)
    resp.headers["Content-Disposition"] = f'attachment; filename="{result.filename}"'
    resp.headers["Content-Length"] = str(result.size)
    resp.headers["X-Request-ID"] = request_id()
    resp.headers["Cache-Control"] = "no-store"
    return resp
