# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Settings
from .logging import setup_logging
from .routes import EXTENSION_KEY, Services, secure_headers
from .routes import exports, generate, health, templates
from .services.content_generation import ContentGenerator
from .services.cover_generation import CoverGenerator
from .services.credentials import ApiKeyStore
from .services.export.service import ExportService
from .services.export.templates import DEFAULT_REGISTRY


def build_services(cfg: Settings) -> Services:
    key_store = ApiKeyStore.from_settings(cfg)
    return Services(
        settings=cfg,
        registry=DEFAULT_REGISTRY,
        exporter=ExportService.from_settings(cfg, DEFAULT_REGISTRY),
        key_store=key_store,
        content=ContentGenerator(cfg, key_store),
        covers=CoverGenerator(cfg, key_store),
    )


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> Flask:
    """
    Application factory used by WSGI servers and `python -m flask`.

    - Registers the /api/* blueprints
    - Adds proxy, CORS and security-header middleware
    """
    cfg = settings or (services.settings if services else Settings())  # pydantic-settings loads .env
    setup_logging(cfg.LOG_LEVEL)
    app = Flask(__name__, static_folder=None)
    app.extensions[EXTENSION_KEY] = services or build_services(cfg)

    # Honor reverse proxy headers (TLS offloading, load balancers)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)  # type: ignore

    if cfg.CORS_ENABLE:
        CORS(
            app,
            resources={r"/api/*": {"origins": cfg.CORS_ALLOW_ORIGINS}},
            supports_credentials=cfg.CORS_ALLOW_CREDENTIALS,
            methods=cfg.CORS_ALLOW_METHODS,
            allow_headers=cfg.CORS_ALLOW_HEADERS,
            expose_headers=["Content-Disposition", "X-Request-ID"],
        )

    app.register_blueprint(health.bp, url_prefix="/api/health")
    app.register_blueprint(templates.bp, url_prefix="/api/templates")
    app.register_blueprint(exports.bp, url_prefix="/api/exports")
    app.register_blueprint(generate.bp, url_prefix="/api/generate")

    # ----------------------
    # JSON error handlers
    # ----------------------
    @app.errorhandler(400)
    def bad_request(e):
        return secure_headers(jsonify({"ok": False, "error": {"code": "bad_request", "message": "Bad Request"}})), 400

    @app.errorhandler(404)
    def not_found(e):
        return secure_headers(jsonify({"ok": False, "error": {"code": "not_found", "message": "Not Found"}})), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return (
            secure_headers(jsonify({"ok": False, "error": {"code": "method_not_allowed", "message": "Method Not Allowed"}})),
            405,
        )

    @app.errorhandler(500)
    def server_error(e):
        logging.getLogger("ebook_studio.app").exception("Unhandled error")
        return (
            secure_headers(jsonify({"ok": False, "error": {"code": "internal", "message": "Internal Server Error"}})),
            500,
        )

    app.logger.info("App ready. default_template=%s", cfg.DEFAULT_TEMPLATE_ID)
    return app
