# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Any

from flask import Blueprint

from . import json_err, json_ok, services

bp = Blueprint("templates", __name__)


@bp.get("")
def list_templates() -> Any:
    registry = services().registry
    return json_ok(
        {
            "default": registry.default.id,
            "templates": [t.model_dump() for t in registry],
        }
    )


@bp.get("/<template_id>")
def get_template(template_id: str) -> Any:
    template = services().registry.get(template_id)
    if template is None:
        return json_err("not_found", f"template not found: {template_id}", status=404)
    return json_ok({"template": template.model_dump()})
