# SPDX-License-Identifier: Apache-2.0
# gunicorn -c infra/gunicorn_conf.py
import multiprocessing
import os

from ebook_studio.config import Settings

_settings = Settings()

bind = f"{_settings.FLASK_HOST}:{os.getenv('PORT', _settings.FLASK_PORT)}"
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count()))
threads = 1
# chapter generation and PDF layout both run inside the request
timeout = int(max(_settings.REQUEST_TIMEOUT, _settings.STABILITY_TIMEOUT)) + 60
worker_class = "sync"
wsgi_app = "app:app"
accesslog = "-"
errorlog = "-"
loglevel = _settings.LOG_LEVEL.lower()
